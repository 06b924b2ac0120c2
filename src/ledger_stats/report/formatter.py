"""Machine and human renderings of an IndexResponse."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from decimal import Decimal, InvalidOperation

from ..assets.ids import AssetId
from ..assets.registry import Registry
from ..constants import (
    NATIVE_ASSET_ID_HEX,
    PLACEHOLDER_IMAGE,
    REFERENCE_ASSET_ID_HEX,
)
from ..domain import Deposit, Depositors, IndexResponse, ShieldedValue, TotalSupply
from ..units import parse_display


class FormatError(Exception):
    """Raised when the human-facing record cannot be produced."""


@dataclass
class FormattedSupply:
    total: str
    unstaked: str
    staked: str
    auction: str
    dex: str

    @classmethod
    def format(
        cls, registry: Registry, asset: AssetId, value: TotalSupply
    ) -> FormattedSupply:
        """Format every field with the asset's symbol.

        Raises:
            FormatError: If ``asset`` is not in the registry
        """
        meta = registry.metadata(asset)
        if meta is None:
            raise FormatError(f"asset {asset} must be present in the registry")
        try:
            return cls(
                total=meta.format_with_symbol(value.total),
                unstaked=meta.format_with_symbol(value.unstaked),
                staked=meta.format_with_symbol(value.staked),
                auction=meta.format_with_symbol(value.auction),
                dex=meta.format_with_symbol(value.dex),
            )
        except (ValueError, InvalidOperation) as exc:
            raise FormatError(f"failed to format supply of {asset}: {exc}") from exc


@dataclass
class FormattedDeposit:
    asset: str
    total: str
    current: str
    known: bool
    image: str

    @classmethod
    def format(cls, registry: Registry, value: Deposit) -> FormattedDeposit:
        """Scale a deposit when its asset is registered, pass it through otherwise."""
        meta = registry.metadata(value.asset)
        if meta is None:
            return cls(
                asset=str(value.asset),
                total=str(value.total),
                current=str(value.current),
                known=False,
                image=PLACEHOLDER_IMAGE,
            )
        try:
            return cls(
                asset=meta.symbol,
                total=meta.format(value.total),
                current=meta.format(value.current),
                known=True,
                image=meta.image() or PLACEHOLDER_IMAGE,
            )
        except (ValueError, InvalidOperation) as exc:
            raise FormatError(
                f"failed to format deposit of {value.asset}: {exc}"
            ) from exc


def _total_sort_key(deposit: FormattedDeposit) -> tuple[bool, Decimal]:
    # Unparsable totals sort after every parsable one.
    parsed = parse_display(deposit.total)
    if parsed is None:
        return (True, Decimal(0))
    return (False, -parsed)


@dataclass
class FormattedShieldedValue:
    by_asset: list[FormattedDeposit] = field(default_factory=list)
    unknown_asset: list[FormattedDeposit] = field(default_factory=list)

    @classmethod
    def format(
        cls, registry: Registry, value: ShieldedValue
    ) -> FormattedShieldedValue:
        """Split deposits into known and unknown assets.

        Known assets are ordered by descending total; unknown ones keep the
        order the store returned them in.
        """
        formatted = [FormattedDeposit.format(registry, x) for x in value.by_asset]
        by_asset = [x for x in formatted if x.known]
        unknown_asset = [x for x in formatted if not x.known]
        by_asset.sort(key=_total_sort_key)
        return cls(by_asset=by_asset, unknown_asset=unknown_asset)


@dataclass
class FormattedIndexResponse:
    supply: FormattedSupply
    usdc_equivalent_supply: FormattedSupply
    depositors: Depositors
    shielded: FormattedShieldedValue
    unshielded: FormattedShieldedValue

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def format_machine(response: IndexResponse) -> dict[str, object]:
    """Raw figures for API consumers; needs no registry and never fails."""
    return response.to_dict()


def format_human(
    registry: Registry,
    response: IndexResponse,
    native_asset: AssetId | None = None,
    reference_asset: AssetId | None = None,
) -> FormattedIndexResponse:
    """Scale, annotate, classify and sort every figure for display.

    Raises:
        FormatError: If the native or reference asset is missing from the
            registry, or a deposit amount cannot be formatted
    """
    native_asset = native_asset or AssetId.from_hex(NATIVE_ASSET_ID_HEX)
    reference_asset = reference_asset or AssetId.from_hex(REFERENCE_ASSET_ID_HEX)
    return FormattedIndexResponse(
        supply=FormattedSupply.format(registry, native_asset, response.supply),
        usdc_equivalent_supply=FormattedSupply.format(
            registry, reference_asset, response.usdc_equivalent_supply
        ),
        depositors=response.depositors,
        shielded=FormattedShieldedValue.format(registry, response.shielded),
        unshielded=FormattedShieldedValue.format(registry, response.unshielded),
    )
