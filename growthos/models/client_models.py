"""Growth OS — Restaurant Client Records."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field as PydanticField
from sqlmodel import SQLModel, Field

CLIENT_ID_PATTERN = r"^[a-zA-Z0-9_-]+$"


class RestaurantType(str, Enum):
    FAST_CASUAL = "fast-casual"
    FINE_DINING = "fine-dining"
    QUICK_SERVICE = "quick-service"
    CAFE = "cafe"
    CATERING = "catering"
    FOOD_TRUCK = "food-truck"


class Client(SQLModel, table=True):
    """A restaurant the agency manages, with its ad-platform account refs."""

    __tablename__ = "clients"

    id: str = Field(primary_key=True, description="URL-safe slug")
    name: str = Field(index=True)
    type: Optional[str] = None
    city: str = ""
    state: str = ""
    country: str = ""
    account_manager: str = ""
    google_ads_customer_id: str = ""
    meta_ads_account_id: str = ""
    search_console_site_url: str = ""
    business_profile_location_id: str = ""
    google_analytics_property_id: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ClientCreate(BaseModel):
    """Request body for POST /api/clients."""

    id: str = PydanticField(pattern=CLIENT_ID_PATTERN, max_length=64)
    name: str = PydanticField(min_length=1, max_length=100)
    type: Optional[RestaurantType] = None
    city: str = ""
    state: str = ""
    country: str = ""
    account_manager: str = ""
    google_ads_customer_id: str = ""
    meta_ads_account_id: str = ""
    search_console_site_url: str = ""
    business_profile_location_id: str = ""
    google_analytics_property_id: str = ""


class ClientUpdate(BaseModel):
    """Request body for PATCH /api/clients/{id}; every field optional."""

    name: Optional[str] = PydanticField(default=None, min_length=1, max_length=100)
    type: Optional[RestaurantType] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    account_manager: Optional[str] = None
    google_ads_customer_id: Optional[str] = None
    meta_ads_account_id: Optional[str] = None
    search_console_site_url: Optional[str] = None
    business_profile_location_id: Optional[str] = None
    google_analytics_property_id: Optional[str] = None
