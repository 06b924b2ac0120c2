from __future__ import annotations

from decimal import Decimal

import pytest

from ledger_stats.assets.ids import AssetId
from ledger_stats.domain import Deposit, TotalSupply
from ledger_stats.processors.conversions import (
    ConversionError,
    deposit_from_row,
    supply_from_values,
    to_amount,
    to_clamped_amount,
)
from ledger_stats.store.base import FetchError


def test_to_amount_accepts_ints_decimals_and_text():
    assert to_amount(5) == 5
    assert to_amount(Decimal("42")) == 42
    assert to_amount("123456789012345678901234567890") == 123456789012345678901234567890
    assert to_amount(" 7 ") == 7


@pytest.mark.parametrize("value", [None, -1, "-1", "12.5", Decimal("0.1"), "abc", True, "NaN"])
def test_to_amount_rejects_unrepresentable_values(value):
    with pytest.raises(ConversionError):
        to_amount(value)


def test_conversion_error_is_a_fetch_error():
    with pytest.raises(FetchError):
        to_amount(None)


def test_to_clamped_amount_floors_negative_values_at_zero():
    assert to_clamped_amount("-3") == 0
    assert to_clamped_amount(Decimal(-3)) == 0
    assert to_clamped_amount(-3) == 0
    assert to_clamped_amount("7") == 7


def test_supply_from_values_maps_columns():
    supply = supply_from_values(("10", "5", "3", "1", "1"), "native")

    assert supply == TotalSupply(total=10, staked=5, unstaked=3, auction=1, dex=1)


def test_supply_from_values_wrong_width():
    with pytest.raises(ConversionError):
        supply_from_values(("1", "2"), "native")


def test_deposit_from_row_clamps_current():
    asset = AssetId(b"\x03" * 32)

    deposit = deposit_from_row((b"\x03" * 32, "100", "-3"))

    assert deposit == Deposit(asset=asset, total=100, current=0)


def test_deposit_from_row_accepts_memoryview():
    deposit = deposit_from_row((memoryview(b"\x04" * 32), "9", "2"))

    assert deposit.asset == AssetId(b"\x04" * 32)
    assert (deposit.total, deposit.current) == (9, 2)


@pytest.mark.parametrize(
    "row",
    [
        (b"\x01" * 31, "1", "1"),
        ("not-bytes", "1", "1"),
        (b"\x01" * 32, "1.5", "1"),
        (b"\x01" * 32, None, "1"),
        (b"\x01" * 32, "1"),
    ],
)
def test_deposit_from_row_rejects_bad_rows(row):
    with pytest.raises(ConversionError):
        deposit_from_row(row)
