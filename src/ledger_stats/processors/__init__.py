from __future__ import annotations

from .conversions import (
    ConversionError,
    deposit_from_row,
    supply_from_values,
    to_amount,
    to_clamped_amount,
)

__all__ = [
    "ConversionError",
    "deposit_from_row",
    "supply_from_values",
    "to_amount",
    "to_clamped_amount",
]
