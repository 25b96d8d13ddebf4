"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_ROOT = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DQ_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Delivery Quote Engine API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for audit outputs.")
    zone_seed_file: Path = Field(
        default=PACKAGE_ROOT / "data" / "seed" / "benue_zones.json",
        description="Bundled zone catalog used when the database has no zones.",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    rider_service_url: Optional[str] = Field(
        default=None,
        description="Base URL of the live rider availability service. Static snapshot when unset.",
    )
    rider_service_timeout_seconds: float = Field(default=2.0, gt=0.0)
    default_active_riders: int = Field(default=5, ge=0)
    default_queued_jobs: int = Field(default=3, ge=0)

    settings_cache_ttl_seconds: float = Field(default=60.0, ge=0.0)
    local_utc_offset_hours: float = Field(
        default=1.0,
        description="Offset of the marketplace's local clock (West Africa Time) used for peak-hour checks.",
    )
    city_zone_prefix: str = Field(default="MKD-", description="Code prefix that marks fine-grained city zones.")
    city_zone_radius_km: float = Field(default=5.0, gt=0.0)
    free_shipping_threshold_ngn: float = Field(default=50000.0, ge=0.0)
    fallback_flat_fee_ngn: int = Field(default=2500, ge=0)
    default_pickup_lat: float = Field(default=7.7333, description="Hub latitude used when a pickup has no coordinates.")
    default_pickup_lng: float = Field(default=8.5333, description="Hub longitude used when a pickup has no coordinates.")
    audit_enabled: bool = Field(default=True, description="Record served quotes in the audit log.")

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", "zone_seed_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
