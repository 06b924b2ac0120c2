from __future__ import annotations

import pytest

from ledger_stats.assets.ids import AssetId
from ledger_stats.constants import NATIVE_ASSET_ID_HEX, REFERENCE_ASSET_ID_HEX

USDC_BECH32M = "passet1w6e7fvgxsy6ccy3m8q0eqcuyw6mh3yzqu3uq9h58nu8m8mku359spvulf6"


def test_hex_parse():
    asset = AssetId.from_hex(NATIVE_ASSET_ID_HEX)

    assert asset.inner.hex() == NATIVE_ASSET_ID_HEX
    assert asset.inner[:2] == b"\x29\xea"


def test_hex_accepts_prefix_and_case():
    assert AssetId.from_hex("0x" + NATIVE_ASSET_ID_HEX.upper()) == AssetId.from_hex(
        NATIVE_ASSET_ID_HEX
    )


def test_text_form_is_bech32m():
    usdc = AssetId.from_hex(REFERENCE_ASSET_ID_HEX)

    assert str(usdc) == USDC_BECH32M
    assert usdc.to_bech32m() == USDC_BECH32M


def test_bech32m_round_trip():
    usdc = AssetId.from_bech32m(USDC_BECH32M)

    assert usdc == AssetId.from_hex(REFERENCE_ASSET_ID_HEX)
    native = AssetId.from_hex(NATIVE_ASSET_ID_HEX)
    assert AssetId.from_bech32m(str(native)) == native


def test_parse_accepts_both_forms():
    usdc = AssetId.from_hex(REFERENCE_ASSET_ID_HEX)

    assert AssetId.parse(USDC_BECH32M) == usdc
    assert AssetId.parse(USDC_BECH32M.upper()) == usdc
    assert AssetId.parse(REFERENCE_ASSET_ID_HEX) == usdc


def test_bech32m_rejects_bad_checksum_and_prefix():
    corrupted = USDC_BECH32M[:-1] + ("q" if USDC_BECH32M[-1] != "q" else "p")
    with pytest.raises(ValueError):
        AssetId.from_bech32m(corrupted)
    with pytest.raises(ValueError):
        AssetId.from_bech32m("penumbra1" + USDC_BECH32M[len("passet1"):])


def test_base64_matches_registry_encoding():
    asset = AssetId.from_base64("KeqcLzNx9qSH5+lcJHBB9KNW+YPrBk5dKzvPMiypahA=")

    assert asset == AssetId.from_hex(NATIVE_ASSET_ID_HEX)
    assert asset.to_base64() == "KeqcLzNx9qSH5+lcJHBB9KNW+YPrBk5dKzvPMiypahA="


def test_equality_and_hash_are_byte_exact():
    a = AssetId(b"\x01" * 32)
    b = AssetId.from_bytes(bytearray(b"\x01" * 32))
    c = AssetId(b"\x02" * 32)

    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert len({a, b, c}) == 2


@pytest.mark.parametrize("raw", [b"", b"\x01" * 31, b"\x01" * 33])
def test_wrong_length_rejected(raw):
    with pytest.raises(ValueError):
        AssetId(raw)


def test_invalid_encodings_rejected():
    with pytest.raises(ValueError):
        AssetId.from_hex("zz" * 32)
    with pytest.raises(ValueError):
        AssetId.from_base64("not base64!")
