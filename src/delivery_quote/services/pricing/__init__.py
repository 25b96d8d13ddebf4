"""Fee composition and pricing settings."""

from .composer import FeeComposer, ShipmentFee, tier_multiplier
from .parameters import PricingParameters, resolve_pricing_parameters
from .settings_cache import SettingsCache

__all__ = [
    "FeeComposer",
    "PricingParameters",
    "SettingsCache",
    "ShipmentFee",
    "resolve_pricing_parameters",
    "tier_multiplier",
]
