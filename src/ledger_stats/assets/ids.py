"""Opaque asset identifiers."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

from bip_utils.bech32 import Bech32ChecksumError
from bip_utils.bech32.bech32 import Bech32Const, Bech32Encodings, Bech32Utils
from bip_utils.bech32.bech32_base import (
    Bech32BaseUtils,
    Bech32DecoderBase,
    Bech32EncoderBase,
)

from ..constants import ASSET_ID_HRP, ASSET_ID_LENGTH


class _AssetBech32mEncoder(Bech32EncoderBase):
    @classmethod
    def Encode(cls, hrp: str, data: bytes) -> str:
        return cls._EncodeBech32(
            hrp, Bech32BaseUtils.ConvertToBase32(data), Bech32Const.SEPARATOR
        )

    @staticmethod
    def _ComputeChecksum(hrp: str, data: list[int]) -> list[int]:
        return Bech32Utils.ComputeChecksum(hrp, data, Bech32Encodings.BECH32M)


class _AssetBech32mDecoder(Bech32DecoderBase):
    @classmethod
    def Decode(cls, hrp: str, addr: str) -> bytes:
        hrp_got, data = cls._DecodeBech32(
            addr, Bech32Const.SEPARATOR, Bech32Const.CHECKSUM_STR_LEN
        )
        if hrp_got != hrp:
            raise ValueError(f"expected prefix '{hrp}', got '{hrp_got}'")
        return bytes(Bech32BaseUtils.ConvertFromBase32(data))

    @staticmethod
    def _VerifyChecksum(hrp: str, data: list[int]) -> bool:
        return Bech32Utils.VerifyChecksum(hrp, data, Bech32Encodings.BECH32M)


@dataclass(frozen=True)
class AssetId:
    """A fixed-length binary asset identifier.

    Equality and hashing are byte-exact. The textual form is bech32m with the
    ``passet`` prefix.
    """

    inner: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.inner, bytes):
            raise TypeError(f"asset id must be bytes, got {type(self.inner).__name__}")
        if len(self.inner) != ASSET_ID_LENGTH:
            raise ValueError(
                f"asset id must be {ASSET_ID_LENGTH} bytes, got {len(self.inner)}"
            )

    @classmethod
    def from_bytes(cls, raw: bytes | bytearray | memoryview) -> AssetId:
        return cls(bytes(raw))

    @classmethod
    def from_hex(cls, text: str) -> AssetId:
        value = text.strip().lower()
        if value.startswith("0x") or value.startswith("\\x"):
            value = value[2:]
        try:
            return cls(bytes.fromhex(value))
        except ValueError as exc:
            raise ValueError(f"invalid hex asset id {text!r}: {exc}") from exc

    @classmethod
    def from_base64(cls, text: str) -> AssetId:
        try:
            raw = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"invalid base64 asset id {text!r}: {exc}") from exc
        return cls(raw)

    @classmethod
    def from_bech32m(cls, text: str) -> AssetId:
        try:
            raw = _AssetBech32mDecoder.Decode(ASSET_ID_HRP, text.strip())
        except (Bech32ChecksumError, ValueError) as exc:
            raise ValueError(f"invalid bech32m asset id {text!r}: {exc}") from exc
        return cls(raw)

    @classmethod
    def parse(cls, text: str) -> AssetId:
        """Parse the canonical ``passet1...`` form, falling back to hex."""
        if text.strip().lower().startswith(ASSET_ID_HRP + "1"):
            return cls.from_bech32m(text)
        return cls.from_hex(text)

    def to_base64(self) -> str:
        return base64.b64encode(self.inner).decode("ascii")

    def to_bech32m(self) -> str:
        return _AssetBech32mEncoder.Encode(ASSET_ID_HRP, self.inner)

    def __str__(self) -> str:
        return self.to_bech32m()

    def __repr__(self) -> str:
        return f"AssetId({self.to_bech32m()})"
