"""Global delivery settings loader backed by Supabase."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..db.supabase import get_supabase_client
from ..models.domain import DEFAULT_DELIVERY_TYPE_MULTIPLIERS, GlobalSettings
from .zones_repository import SETTINGS_TABLE, _maybe_json

GLOBAL_SETTINGS_ID = "global"


def parse_global_settings(row: Mapping[str, Any]) -> GlobalSettings:
    """Overlay a stored settings row on the defaults.

    Weight free limit, COD surcharge and the default cross-zone fee are not
    operator-editable and always keep their defaults.
    """

    defaults = GlobalSettings()

    def pick(key: str, default: float) -> float:
        value = row.get(key)
        return default if value is None else float(value)

    multipliers = _maybe_json(row.get("delivery_type_multipliers"))
    if not isinstance(multipliers, Mapping):
        multipliers = DEFAULT_DELIVERY_TYPE_MULTIPLIERS

    return GlobalSettings(
        free_distance_km=pick("free_distance_km", defaults.free_distance_km),
        per_km_rate_ngn=pick("per_km_rate_ngn", defaults.per_km_rate_ngn),
        base_fee_ngn=pick("base_fee_ngn", defaults.base_fee_ngn),
        weight_free_limit_kg=defaults.weight_free_limit_kg,
        weight_surcharge_per_kg=pick("weight_surcharge_per_kg", defaults.weight_surcharge_per_kg),
        platform_commission_percent=pick("platform_commission_percent", defaults.platform_commission_percent),
        insurance_threshold_ngn=pick("min_insurance_threshold", defaults.insurance_threshold_ngn),
        insurance_rate_percent=pick("insurance_rate_percent", defaults.insurance_rate_percent),
        cod_surcharge_percent=defaults.cod_surcharge_percent,
        default_cross_zone_fee=defaults.default_cross_zone_fee,
        delivery_type_multipliers={str(tier): float(value) for tier, value in multipliers.items()},
    )


def load_global_settings() -> GlobalSettings | None:
    """Fetch the ``global`` settings row. Returns None when unconfigured, empty or unreachable."""
    supabase = get_supabase_client()
    if not supabase:
        return None

    try:
        response = supabase.table(SETTINGS_TABLE).select("*").eq("id", GLOBAL_SETTINGS_ID).limit(1).execute()
    except Exception as e:
        logging.warning(f"Failed to load delivery settings, using defaults: {e}")
        return None

    if not response.data:
        return None
    try:
        return parse_global_settings(response.data[0])
    except (TypeError, ValueError) as e:
        logging.warning(f"Stored delivery settings are malformed, using defaults: {e}")
        return None
