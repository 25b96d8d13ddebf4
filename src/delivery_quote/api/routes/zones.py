"""Zone catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from ...schemas.zones import ZoneListResponse, ZoneModel
from ...services.quotes import get_quote_dependencies

router = APIRouter(prefix="/zones", tags=["zones"])


@router.get("", response_model=ZoneListResponse, status_code=status.HTTP_200_OK)
def list_zones(
    include_suspended: bool = Query(default=False, description="Include zones currently suspended from delivery"),
) -> ZoneListResponse:
    resolver = get_quote_dependencies().current_resolver()
    zones = [
        ZoneModel.from_domain(zone, is_city_zone=resolver.is_city_zone(zone))
        for zone in resolver.all_zones()
        if include_suspended or not zone.is_suspended
    ]
    return ZoneListResponse(zones=zones, count=len(zones))


@router.get("/{code}", response_model=ZoneModel, status_code=status.HTTP_200_OK)
def get_zone(code: str) -> ZoneModel:
    resolver = get_quote_dependencies().current_resolver()
    zone = resolver.find(code)
    if zone is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Zone {code} not found")
    return ZoneModel.from_domain(zone, is_city_zone=resolver.is_city_zone(zone))
