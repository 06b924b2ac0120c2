from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation, localcontext
from typing import TYPE_CHECKING

from .constants import DISPLAY_PRECISION

if TYPE_CHECKING:
    from .assets.ids import AssetId
    from .assets.registry import Registry

_QUANTUM = Decimal(1).scaleb(-DISPLAY_PRECISION)


def scale_to_display(value: int, exponent: int) -> Decimal:
    """Convert an atomic amount to display units.

    Args:
        value: Non-negative amount in the asset's atomic unit.
        exponent: Display exponent of the asset.

    Returns:
        ``value / 10**exponent`` as an exact Decimal.

    Notes:
        - Built from the digit tuple, so no context rounding is applied.
        - ``exponent`` must be non-negative.
    """
    if exponent < 0:
        raise ValueError(f"display exponent must be non-negative, got {exponent}")
    if value < 0:
        raise ValueError(f"amount must be non-negative, got {value}")
    digits = tuple(int(d) for d in str(value))
    return Decimal((0, digits, -exponent))


def round_display(value: Decimal) -> Decimal:
    """Round to DISPLAY_PRECISION fractional digits, half to even."""
    with localcontext() as ctx:
        # quantize fails once the result needs more digits than the context holds
        ctx.prec = max(ctx.prec, value.adjusted() + DISPLAY_PRECISION + 2)
        return value.quantize(_QUANTUM, rounding=ROUND_HALF_EVEN)


def format_display(value: int, exponent: int) -> str:
    """Render an atomic amount as a fixed-precision decimal string."""
    return f"{round_display(scale_to_display(value, exponent)):f}"


def parse_display(text: str) -> Decimal | None:
    """Parse a rendered amount back into a Decimal, or None if it is not a number."""
    try:
        value = Decimal(text)
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not value.is_finite():
        return None
    return value


def format_amount(registry: Registry, asset: AssetId, amount: int) -> str:
    """Format an amount of a registered asset.

    The asset must be present in ``registry``; a missing entry raises KeyError.
    """
    return registry[asset].format(amount)


def format_amount_with_symbol(registry: Registry, asset: AssetId, amount: int) -> str:
    return registry[asset].format_with_symbol(amount)
