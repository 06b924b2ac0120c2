from __future__ import annotations

from .formatter import (
    FormatError,
    FormattedDeposit,
    FormattedIndexResponse,
    FormattedShieldedValue,
    FormattedSupply,
    format_human,
    format_machine,
)
from .publisher import publish_to_stdout

__all__ = [
    "FormatError",
    "FormattedDeposit",
    "FormattedIndexResponse",
    "FormattedShieldedValue",
    "FormattedSupply",
    "format_human",
    "format_machine",
    "publish_to_stdout",
]
