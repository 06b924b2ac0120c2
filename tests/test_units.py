from __future__ import annotations

import json
from decimal import Decimal

import pytest

from ledger_stats.assets.ids import AssetId
from ledger_stats.assets.registry import Registry
from ledger_stats.units import (
    format_amount,
    format_amount_with_symbol,
    format_display,
    parse_display,
    scale_to_display,
)


def test_format_display_rounds_to_four_places():
    assert format_display(1_234_567, 6) == "1.2346"


def test_format_display_half_even_at_boundary():
    # 1.23445 -> 1.2344 (half-up would give 1.2345)
    assert format_display(1_234_450, 6) == "1.2344"
    # 1.23455 -> 1.2346
    assert format_display(1_234_550, 6) == "1.2346"
    # 1.23465 -> 1.2346
    assert format_display(1_234_650, 6) == "1.2346"


def test_format_display_pads_fixed_precision():
    assert format_display(0, 6) == "0.0000"
    assert format_display(5, 0) == "5.0000"
    assert format_display(10_000_000, 6) == "10.0000"


def test_format_display_no_thousands_separators():
    assert format_display(1_234_567_890_000, 6) == "1234567.8900"


def test_format_display_beyond_64_bits():
    value = 2**80  # 1208925819614629174706176
    assert format_display(value, 6) == "1208925819614629174.7062"
    assert format_display(value, 0) == "1208925819614629174706176.0000"


def test_format_display_tiny_amounts_at_high_exponent():
    assert format_display(1, 18) == "0.0000"
    assert format_display(50_000_000_000_000, 18) == "0.0000"
    assert format_display(150_000_000_000_000, 18) == "0.0002"


def test_scale_to_display_is_exact():
    assert scale_to_display(1_500_000, 6) == Decimal("1.5")
    assert scale_to_display(123, 0) == Decimal(123)


def test_scale_to_display_rejects_negative_inputs():
    with pytest.raises(ValueError):
        scale_to_display(-1, 6)
    with pytest.raises(ValueError):
        scale_to_display(1, -6)


def test_parse_display():
    assert parse_display("100.0001") == Decimal("100.0001")
    assert parse_display("not a number") is None
    assert parse_display("NaN") is None


def _registry(asset: AssetId) -> Registry:
    return Registry.from_json(
        json.dumps(
            {
                "assetById": {
                    "x": {
                        "penumbraAssetId": {"inner": asset.to_base64()},
                        "symbol": "TKN",
                        "display": "tkn",
                        "denomUnits": [{"denom": "tkn", "exponent": 3}, {"denom": "utkn"}],
                    }
                }
            }
        )
    )


def test_format_amount_uses_registry_exponent():
    asset = AssetId(b"\x07" * 32)
    registry = _registry(asset)

    assert format_amount(registry, asset, 12_345) == "12.3450"
    assert format_amount_with_symbol(registry, asset, 12_345) == "12.3450 TKN"


def test_format_amount_requires_registered_asset():
    registry = _registry(AssetId(b"\x07" * 32))

    with pytest.raises(KeyError):
        format_amount(registry, AssetId(b"\x08" * 32), 1)
