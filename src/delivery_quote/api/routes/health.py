"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Report whether zones and settings come from Supabase or the bundled seed."""
    from ...db.supabase import get_supabase_client
    from ...data.zones_repository import load_zone_catalog

    catalog = load_zone_catalog()
    zones_count = len(catalog.city_zones) + len(catalog.regional_zones)
    if not get_supabase_client():
        return {
            "configured": False,
            "zone_source": catalog.source,
            "zones_count": zones_count,
            "message": "Supabase not configured. Set DQ_SUPABASE_URL and DQ_SUPABASE_KEY environment variables.",
        }
    return {
        "configured": True,
        "zone_source": catalog.source,
        "zones_count": zones_count,
    }
