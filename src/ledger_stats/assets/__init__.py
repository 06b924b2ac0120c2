from __future__ import annotations

from .ids import AssetId
from .registry import (
    AssetImage,
    AssetMetadata,
    LoadError,
    Registry,
    load_registry,
)

__all__ = [
    "AssetId",
    "AssetImage",
    "AssetMetadata",
    "LoadError",
    "Registry",
    "load_registry",
]
