"""Conversion of raw store values into amounts and deposit records."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..assets.ids import AssetId
from ..domain import Deposit, TotalSupply
from ..store.base import FetchError


class ConversionError(FetchError):
    """Raised when a stored value cannot be represented as an amount."""


def to_amount(value: Any, label: str = "value") -> int:
    """Convert a raw store value into a non-negative integer amount.

    Accepts ints, integral Decimals and decimal text. Anything else, including
    NULL, negative or fractional values, raises ConversionError.
    """
    if value is None:
        raise ConversionError(f"{label} is missing")
    if isinstance(value, bool):
        raise ConversionError(f"{label} is not an amount: {value!r}")
    if isinstance(value, int):
        amount = value
    else:
        try:
            parsed = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ConversionError(f"failed to parse {label}: {value!r}") from exc
        if not parsed.is_finite() or parsed != parsed.to_integral_value():
            raise ConversionError(f"{label} is not an integer: {value!r}")
        amount = int(parsed)
    if amount < 0:
        raise ConversionError(f"{label} is negative: {value!r}")
    return amount


def to_clamped_amount(value: Any, label: str = "value") -> int:
    """Like to_amount, but a negative net position becomes zero."""
    if isinstance(value, str) and value.strip().startswith("-"):
        return 0
    if isinstance(value, (int, Decimal)) and not isinstance(value, bool) and value < 0:
        return 0
    return to_amount(value, label)


def supply_from_values(values: tuple[Any, ...] | list[Any], basis: str) -> TotalSupply:
    """Build a TotalSupply from ``(total, staked, unstaked, auction, dex)``."""
    if len(values) != 5:
        raise ConversionError(
            f"expected 5 supply values for {basis}, got {len(values)}"
        )
    total, staked, unstaked, auction, dex = values
    return TotalSupply(
        total=to_amount(total, f"{basis} total"),
        staked=to_amount(staked, f"{basis} staked"),
        unstaked=to_amount(unstaked, f"{basis} unstaked"),
        auction=to_amount(auction, f"{basis} auction"),
        dex=to_amount(dex, f"{basis} dex"),
    )


def deposit_from_row(row: tuple[Any, ...] | list[Any]) -> Deposit:
    """Build a Deposit from ``(asset_bytes, total_text, current_text)``."""
    if len(row) != 3:
        raise ConversionError(f"expected 3 deposit columns, got {len(row)}")
    raw_asset, total, current = row
    if not isinstance(raw_asset, (bytes, bytearray, memoryview)):
        raise ConversionError(f"asset id is not binary: {raw_asset!r}")
    try:
        asset = AssetId.from_bytes(raw_asset)
    except ValueError as exc:
        raise ConversionError(f"failed to parse asset ID: {exc}") from exc
    return Deposit(
        asset=asset,
        total=to_amount(total, "total"),
        current=to_clamped_amount(current, "current"),
    )
