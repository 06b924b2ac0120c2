from __future__ import annotations

from abc import ABC, abstractmethod

from ..domain import Depositors, ShieldedValue, TotalSupply


class FetchError(Exception):
    """Raised when an aggregate could not be produced by the store."""

    def __init__(self, message: str, aggregate: str | None = None):
        super().__init__(message)
        self.aggregate = aggregate


class BaseStatsStore(ABC):
    """Abstract source of pre-aggregated ledger statistics.

    Implementations must be safe to call concurrently from several tasks.
    """

    @property
    @abstractmethod
    def store_name(self) -> str:
        """Return the name of this store."""
        ...

    @abstractmethod
    async def fetch_total_supply(self) -> tuple[TotalSupply, TotalSupply]:
        """Supply in native units and in reference-currency units."""
        ...

    @abstractmethod
    async def fetch_depositors(self) -> Depositors:
        ...

    @abstractmethod
    async def fetch_shielded(self) -> ShieldedValue:
        """Deposits of every asset other than the native one."""
        ...

    @abstractmethod
    async def fetch_unshielded(self) -> ShieldedValue:
        """Net outflow of the native asset."""
        ...

    async def close(self) -> None:
        """Release any resources held by the store."""
        return None
