"""Growth OS — Ad Platform Adapter Interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from growthos.core.date_range import DateRange
from growthos.models.ad_models import AdMetricRecord

PLACEHOLDER_REFS = {"", "demo", "none", "null", "undefined"}


def is_placeholder_ref(account_ref: Optional[str]) -> bool:
    """True when an account reference is absent or a demo placeholder."""
    return account_ref is None or account_ref.strip().lower() in PLACEHOLDER_REFS


def credentials_present(*values: Optional[str]) -> bool:
    """True iff every credential is a non-empty string."""
    return all(isinstance(v, str) and v.strip() for v in values)


class AdPlatformAdapter(ABC):
    """One implementation per ad platform.

    Callers check ``is_configured`` and placeholder account refs first and
    serve demo data instead of calling the network.
    """

    platform: str = ""

    @abstractmethod
    def is_configured(self) -> bool:
        """Check if all required credentials are present."""
        ...

    @abstractmethod
    async def fetch_insights(
        self, account_ref: str, date_range: DateRange
    ) -> List[AdMetricRecord]:
        """Fetch campaign-level performance normalized to ``AdMetricRecord``.

        Raises:
            VendorError: PlatformPermissionError, AuthenticationError or
                ApiError when the vendor call fails.
        """
        ...
