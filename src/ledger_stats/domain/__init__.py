"""Aggregate records produced by the store for a single request."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from ..assets.ids import AssetId


@dataclass(frozen=True)
class TotalSupply:
    """Supply breakdown for one pricing basis.

    The store guarantees ``total == unstaked + staked + auction + dex``;
    nothing here re-checks it.
    """

    total: int
    unstaked: int
    staked: int
    auction: int
    dex: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class Depositors:
    """The number of unique depositors."""

    total: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class Deposit:
    """Cumulative and net amounts moved for one asset, in atomic units."""

    asset: AssetId
    total: int
    current: int

    def to_dict(self) -> dict[str, str]:
        return {
            "asset": str(self.asset),
            "total": str(self.total),
            "current": str(self.current),
        }


@dataclass(frozen=True)
class ShieldedValue:
    """One deposit record per observed asset, in no particular order."""

    by_asset: list[Deposit] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        return {"by_asset": [deposit.to_dict() for deposit in self.by_asset]}


@dataclass(frozen=True)
class IndexResponse:
    """Unformatted result of the four aggregate fetches."""

    supply: TotalSupply
    usdc_equivalent_supply: TotalSupply
    depositors: Depositors
    shielded: ShieldedValue
    unshielded: ShieldedValue

    def to_dict(self) -> dict[str, object]:
        return {
            "supply": self.supply.to_dict(),
            "usdc_equivalent_supply": self.usdc_equivalent_supply.to_dict(),
            "depositors": self.depositors.to_dict(),
            "shielded": self.shielded.to_dict(),
            "unshielded": self.unshielded.to_dict(),
        }


__all__ = [
    "Deposit",
    "Depositors",
    "IndexResponse",
    "ShieldedValue",
    "TotalSupply",
]
