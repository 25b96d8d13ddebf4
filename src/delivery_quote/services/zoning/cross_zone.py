"""Cross-zone surcharge lookup."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

HARDCODED_CROSS_ZONE_FEE = 150.0


@dataclass(slots=True)
class CrossZoneFeeTable:
    """Fees keyed ``fees[from_code][to_code]``.

    Lookup falls back from the direct pair to the reversed pair, then to the
    catalog-wide default. A catalog without a default uses the caller's
    configured fallback, and finally the hardcoded fee.
    """

    fees: Mapping[str, Mapping[str, float]] = field(default_factory=dict)
    default_fee: Optional[float] = None

    def fee(self, from_code: str, to_code: str, *, fallback: Optional[float] = None) -> float:
        if from_code == to_code:
            return 0
        direct = self.fees.get(from_code, {}).get(to_code)
        if direct:
            return direct
        reverse = self.fees.get(to_code, {}).get(from_code)
        if reverse:
            return reverse
        if self.default_fee is not None:
            return self.default_fee
        if fallback is not None:
            return fallback
        return HARDCODED_CROSS_ZONE_FEE

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> "CrossZoneFeeTable":
        """Build a table from the stored shape ``{"default": 150, "A": {"B": 200}}``."""

        fees: dict[str, dict[str, float]] = {}
        default_fee: Optional[float] = None
        for key, value in raw.items():
            if key == "default":
                if isinstance(value, (int, float)):
                    default_fee = float(value)
                continue
            if isinstance(value, Mapping):
                fees[key] = {str(dest): float(amount) for dest, amount in value.items()}
        return cls(fees=fees, default_fee=default_fee)
