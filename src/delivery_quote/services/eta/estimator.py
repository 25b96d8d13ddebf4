"""ETA window estimation from zone travel profiles, traffic and rider load."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

from ...config import settings
from ...models.domain import DeliveryTier, EtaEstimate, RiderAvailability, TravelProfile, ZoneEta

# minutes per km
TRAVEL_PROFILE_SPEED_FACTORS: dict[TravelProfile, float] = {
    TravelProfile.URBAN: 2.5,
    TravelProfile.INNER_CITY: 3.0,
    TravelProfile.SUBURBAN: 3.5,
    TravelProfile.RURAL: 5.0,
}
DEFAULT_SPEED_FACTOR = 3.0

# half-open [start, end) local hours
PEAK_WINDOWS: tuple[tuple[int, int], ...] = ((7, 9), (16, 19))

BASE_RIDER_DELAY_MINUTES = 5
MINUTES_PER_EXCESS_JOB = 4

# tier -> (travel time factor, flat rider penalty minutes)
TIER_TRAVEL_ADJUSTMENTS: dict[DeliveryTier, tuple[float, float]] = {
    DeliveryTier.EXPRESS: (0.85, 3),
    DeliveryTier.SAME_DAY: (0.80, 5),
}

MAX_MINUTES_DISPLAY = 120


def speed_factor(travel_profile: str) -> float:
    try:
        return TRAVEL_PROFILE_SPEED_FACTORS[TravelProfile(travel_profile)]
    except ValueError:
        return DEFAULT_SPEED_FACTOR


def local_hour(requested_at: datetime, utc_offset_hours: Optional[float] = None) -> int:
    """Hour of day on the marketplace clock. Naive timestamps are already local."""

    if requested_at.tzinfo is None:
        return requested_at.hour
    offset = settings.local_utc_offset_hours if utc_offset_hours is None else utc_offset_hours
    return requested_at.astimezone(timezone(timedelta(hours=offset))).hour


def is_peak_hour(requested_at: datetime, utc_offset_hours: Optional[float] = None) -> bool:
    hour = local_hour(requested_at, utc_offset_hours)
    return any(start <= hour < end for start, end in PEAK_WINDOWS)


def traffic_multiplier(
    requested_at: datetime, congestion_factor: float, utc_offset_hours: Optional[float] = None
) -> float:
    if is_peak_hour(requested_at, utc_offset_hours):
        return 1.0 + congestion_factor
    return 1.0


def rider_delay_minutes(availability: RiderAvailability) -> int:
    if availability.active_riders >= availability.queued_jobs:
        return BASE_RIDER_DELAY_MINUTES
    return BASE_RIDER_DELAY_MINUTES + (availability.queued_jobs - availability.active_riders) * MINUTES_PER_EXCESS_JOB


def format_eta(eta_min: int, eta_max: int) -> str:
    if eta_max <= MAX_MINUTES_DISPLAY:
        return f"{eta_min}-{eta_max} mins"
    return f"{math.floor(eta_min / 60)}-{math.ceil(eta_max / 60)} hours"


def estimate_eta(
    distance_km: float,
    zone_eta: ZoneEta,
    tier: DeliveryTier,
    requested_at: datetime,
    availability: RiderAvailability,
    *,
    utc_offset_hours: Optional[float] = None,
) -> EtaEstimate:
    """Estimate the delivery window for one shipment.

    ``raw = dispatch + mean pickup handling + rider delay + tier penalty + travel``;
    the window is ``[floor(raw), ceil(raw * (1 + buffer))]``.
    """

    traffic = traffic_multiplier(requested_at, zone_eta.congestion_factor, utc_offset_hours)
    pickup_handling = (zone_eta.pickup_handling_min + zone_eta.pickup_handling_max) / 2

    travel_minutes = speed_factor(zone_eta.travel_profile) * distance_km * traffic
    travel_factor, rider_penalty = TIER_TRAVEL_ADJUSTMENTS.get(tier, (1.0, 0))
    travel_minutes *= travel_factor

    raw_eta = (
        zone_eta.base_dispatch_minutes
        + pickup_handling
        + rider_delay_minutes(availability)
        + rider_penalty
        + travel_minutes
    )
    buffer = raw_eta * zone_eta.operational_buffer_percent

    eta_min = math.floor(raw_eta)
    eta_max = math.ceil(raw_eta + buffer)
    return EtaEstimate(min=eta_min, max=eta_max, friendly=format_eta(eta_min, eta_max))
