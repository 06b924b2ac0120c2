"""Static asset metadata registry.

The registry is loaded once at startup from a chain-registry JSON document and
shared read-only for the lifetime of the process.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any

from ..logger import get_logger
from ..units import format_display
from .ids import AssetId

logger = get_logger(__name__)

ASSETS_KEY = "assetById"
BUNDLED_REGISTRY = "registry.json"


class LoadError(Exception):
    """Raised when the registry dataset is malformed."""


@dataclass(frozen=True)
class AssetImage:
    """One icon variant. Empty strings mean the encoding is absent."""

    png: str = ""
    svg: str = ""


@dataclass(frozen=True)
class AssetMetadata:
    """Display attributes for a single asset."""

    asset_id: AssetId
    symbol: str
    display_exponent: int
    images: tuple[AssetImage, ...] = field(default_factory=tuple)

    def format(self, amount: int) -> str:
        return format_display(amount, self.display_exponent)

    def format_with_symbol(self, amount: int) -> str:
        return f"{self.format(amount)} {self.symbol}"

    def image(self) -> str | None:
        """Return the preferred icon.

        The first non-empty PNG wins; otherwise the first non-empty SVG;
        otherwise None.
        """
        for image in self.images:
            if image.png:
                return image.png
        for image in self.images:
            if image.svg:
                return image.svg
        return None


def _require_object(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise LoadError(f"expected object at {where}, got {type(value).__name__}")
    return value


def _optional_str(record: dict[str, Any], key: str, where: str) -> str:
    value = record.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise LoadError(f"expected string for '{key}' at {where}")
    return value


def _parse_exponent(record: dict[str, Any], where: str) -> int:
    """Exponent of the denom unit named by ``display``; 0 when none matches."""
    display = _optional_str(record, "display", where)
    units = record.get("denomUnits", [])
    if not isinstance(units, list):
        raise LoadError(f"expected list for 'denomUnits' at {where}")

    for unit in units:
        unit = _require_object(unit, f"{where}.denomUnits")
        if unit.get("denom") != display:
            continue
        exponent = unit.get("exponent", 0)
        if isinstance(exponent, bool) or not isinstance(exponent, int) or exponent < 0:
            raise LoadError(f"invalid exponent {exponent!r} at {where}")
        return exponent
    return 0


def _parse_images(record: dict[str, Any], where: str) -> tuple[AssetImage, ...]:
    raw_images = record.get("images", [])
    if not isinstance(raw_images, list):
        raise LoadError(f"expected list for 'images' at {where}")
    images = []
    for raw in raw_images:
        raw = _require_object(raw, f"{where}.images")
        images.append(
            AssetImage(
                png=_optional_str(raw, "png", f"{where}.images"),
                svg=_optional_str(raw, "svg", f"{where}.images"),
            )
        )
    return tuple(images)


def parse_metadata(record: Any, where: str = "record") -> AssetMetadata:
    """Parse one asset record from the registry document."""
    record = _require_object(record, where)

    raw_id = record.get("penumbraAssetId")
    if raw_id is None:
        raise LoadError(f"expected 'penumbraAssetId' at {where}")
    inner = _require_object(raw_id, f"{where}.penumbraAssetId").get("inner")
    if not isinstance(inner, str):
        raise LoadError(f"expected 'penumbraAssetId.inner' at {where}")
    try:
        asset_id = AssetId.from_base64(inner)
    except ValueError as exc:
        raise LoadError(f"failed to parse asset id at {where}: {exc}") from exc

    return AssetMetadata(
        asset_id=asset_id,
        symbol=_optional_str(record, "symbol", where),
        display_exponent=_parse_exponent(record, where),
        images=_parse_images(record, where),
    )


def parse_metadata_map(document: Any) -> dict[AssetId, AssetMetadata]:
    """Parse every record under ``assetById``; any failure aborts the whole load."""
    root = _require_object(document, "root")
    if ASSETS_KEY not in root:
        raise LoadError(f"expected key '{ASSETS_KEY}'")
    assets = _require_object(root[ASSETS_KEY], ASSETS_KEY)

    parsed: dict[AssetId, AssetMetadata] = {}
    for key, record in assets.items():
        metadata = parse_metadata(record, where=f"{ASSETS_KEY}[{key!r}]")
        if metadata.asset_id in parsed:
            raise LoadError(f"duplicate metadata for asset {metadata.asset_id}")
        parsed[metadata.asset_id] = metadata
    return parsed


class Registry(Mapping[AssetId, AssetMetadata]):
    """Immutable mapping of asset id to display metadata.

    Lookups of unregistered ids through ``get`` return None; that is the normal
    "unknown asset" case. Indexing with ``[]`` raises KeyError.
    """

    def __init__(self, entries: Mapping[AssetId, AssetMetadata]):
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, asset: AssetId) -> AssetMetadata:
        return self._entries[asset]

    def __iter__(self) -> Iterator[AssetId]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def metadata(self, asset: AssetId) -> AssetMetadata | None:
        """Metadata for ``asset``, or None when the asset is unknown."""
        return self._entries.get(asset)

    def __repr__(self) -> str:
        return f"Registry({len(self)} assets)"

    @classmethod
    def from_json(cls, text: str | bytes) -> Registry:
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise LoadError(f"registry is not valid JSON: {exc}") from exc
        return cls(parse_metadata_map(document))

    @classmethod
    def from_path(cls, path: Path) -> Registry:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise LoadError(f"failed to read registry {path}: {exc}") from exc
        registry = cls.from_json(text)
        logger.info("Loaded %d assets from %s", len(registry), path)
        return registry

    @classmethod
    def load_default(cls) -> Registry:
        """Load the registry bundled with the package."""
        text = (
            resources.files("ledger_stats.assets")
            .joinpath("data", BUNDLED_REGISTRY)
            .read_text(encoding="utf-8")
        )
        registry = cls.from_json(text)
        logger.info("Loaded %d assets from bundled registry", len(registry))
        return registry


def load_registry(path: Path | None = None) -> Registry:
    """Load the registry from ``path``, or the bundled dataset when None."""
    if path is None:
        return Registry.load_default()
    return Registry.from_path(path)
