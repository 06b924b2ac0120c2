from __future__ import annotations

from .base import BaseStatsStore, FetchError

__all__ = [
    "BaseStatsStore",
    "FetchError",
]
