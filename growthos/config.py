"""Growth OS — Central Configuration via Pydantic Settings."""

import os
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Meta API ──
    meta_access_token: str = ""
    meta_app_id: str = ""
    meta_app_secret: str = ""
    meta_ad_account_id: str = ""
    meta_api_version: str = "v22.0"
    meta_base_url: str = "https://graph.facebook.com"

    # ── Google OAuth (shared token endpoint) ──
    google_token_url: str = "https://oauth2.googleapis.com/token"

    # ── Google Ads ──
    google_ads_client_id: str = ""
    google_ads_client_secret: str = ""
    google_ads_refresh_token: str = ""
    google_ads_developer_token: str = ""
    google_ads_manager_customer_id: Optional[str] = None
    google_ads_customer_id: str = ""
    google_ads_api_version: str = "v21"
    google_ads_base_url: str = "https://googleads.googleapis.com"

    # ── Google Search Console (falls back to the Google Ads OAuth app) ──
    google_search_console_client_id: str = ""
    google_search_console_client_secret: str = ""
    google_search_console_refresh_token: str = ""
    google_search_console_site_url: str = ""
    google_search_console_base_url: str = "https://www.googleapis.com/webmasters/v3"

    # ── Google Analytics 4 (falls back to the Google Ads OAuth app) ──
    google_analytics_client_id: str = ""
    google_analytics_client_secret: str = ""
    google_analytics_refresh_token: str = ""
    google_analytics_property_id: str = ""
    google_analytics_data_base_url: str = "https://analyticsdata.googleapis.com/v1beta"
    google_analytics_admin_base_url: str = "https://analyticsadmin.googleapis.com/v1beta"

    # ── Google Business Profile ──
    google_business_profile_client_id: str = ""
    google_business_profile_client_secret: str = ""
    google_business_profile_refresh_token: str = ""
    google_business_profile_location_id: str = ""
    google_business_profile_base_url: str = (
        "https://businessprofileperformance.googleapis.com/v1"
    )

    # ── Database ──
    database_url: str = ""

    # ── Funnel & metrics write-ahead caches ──
    funnel_cache_path: str = ""
    metrics_cache_path: str = ""
    funnel_sync_interval_seconds: int = 60
    default_client_id: str = "default"

    # ── App ──
    log_level: str = "INFO"
    scheduler_enabled: bool = True
    http_timeout_seconds: float = 30.0

    @property
    def effective_database_url(self) -> str:
        """Return PostgreSQL URL if set, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        # Vercel has a read-only filesystem; use /tmp for SQLite
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/growthos.db"
        return "sqlite:///./growthos.db"

    @property
    def effective_funnel_cache_path(self) -> str:
        if self.funnel_cache_path:
            return self.funnel_cache_path
        if os.environ.get("VERCEL"):
            return "/tmp/growthos-funnel-cache.jsonl"
        return "./growthos-funnel-cache.jsonl"

    @property
    def effective_metrics_cache_path(self) -> str:
        if self.metrics_cache_path:
            return self.metrics_cache_path
        if os.environ.get("VERCEL"):
            return "/tmp/growthos-metrics-cache.jsonl"
        return "./growthos-metrics-cache.jsonl"

    @property
    def search_console_credentials(self) -> tuple[str, str, str]:
        """Search Console OAuth triple, borrowing the Google Ads app where unset."""
        return (
            self.google_search_console_client_id or self.google_ads_client_id,
            self.google_search_console_client_secret
            or self.google_ads_client_secret,
            self.google_search_console_refresh_token
            or self.google_ads_refresh_token,
        )

    @property
    def analytics_credentials(self) -> tuple[str, str, str]:
        """GA4 OAuth triple, borrowing the Google Ads app where unset."""
        return (
            self.google_analytics_client_id or self.google_ads_client_id,
            self.google_analytics_client_secret or self.google_ads_client_secret,
            self.google_analytics_refresh_token or self.google_ads_refresh_token,
        )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
