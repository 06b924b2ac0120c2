"""Postgres-backed statistics store.

Queries run against the tables maintained by the chain indexer. All amounts are
selected as text so that totals beyond 64 bits survive the round trip.
"""

from __future__ import annotations

from typing import Any

import backoff
import psycopg
from psycopg_pool import AsyncConnectionPool, PoolTimeout

from ..assets.ids import AssetId
from ..constants import (
    DEFAULT_CONNECT_RETRIES,
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_POOL_MAX_SIZE,
    DEFAULT_POOL_MIN_SIZE,
    NATIVE_ASSET_ID_HEX,
    REFERENCE_ASSET_ID_HEX,
)
from ..domain import Depositors, ShieldedValue, TotalSupply
from ..logger import get_logger
from ..processors.conversions import (
    ConversionError,
    deposit_from_row,
    supply_from_values,
    to_amount,
)
from .base import BaseStatsStore

logger = get_logger(__name__)

# The reference price is the mid of the best bid and ask among open positions
# quoting the native asset in the reference asset.
TOTAL_SUPPLY_QUERY = """
SELECT
    ROUND(staked_um::NUMERIC + unstaked_um + auction + dex)::TEXT AS total,
    ROUND(staked_um::NUMERIC)::TEXT,
    ROUND(unstaked_um::NUMERIC)::TEXT,
    ROUND(auction::NUMERIC)::TEXT,
    ROUND(dex::NUMERIC)::TEXT,
    ROUND((staked_um::NUMERIC + unstaked_um + auction + dex) * price)::TEXT AS total,
    ROUND(staked_um::NUMERIC * price)::TEXT,
    ROUND(unstaked_um::NUMERIC * price)::TEXT,
    ROUND(auction::NUMERIC * price)::TEXT,
    ROUND(dex::NUMERIC * price)::TEXT
FROM (
    SELECT SUM(um) AS staked_um
    FROM supply_validators
    LEFT JOIN LATERAL (
        SELECT um
        FROM supply_total_staked
        WHERE validator_id = id
        ORDER BY height DESC
        LIMIT 1
    ) ON TRUE
) staked
LEFT JOIN LATERAL (
    SELECT um AS unstaked_um, auction, dex
    FROM supply_total_unstaked
    ORDER BY height DESC
    LIMIT 1
) ON TRUE
LEFT JOIN LATERAL (
    SELECT AVG(price21) AS price FROM (
        (SELECT price21
         FROM dex_lp
         WHERE state = 'opened'
         AND asset1 = %(reference)s
         AND asset2 = %(native)s
         AND reserves1 > 0
         ORDER BY price21 DESC
         LIMIT 1)
        UNION ALL
        (SELECT price21
         FROM dex_lp
         WHERE state = 'opened'
         AND asset1 = %(reference)s
         AND asset2 = %(native)s
         AND reserves2 > 0
         ORDER BY price21 ASC
         LIMIT 1)
    ) quotes
) ON TRUE
"""

DEPOSITORS_QUERY = "SELECT COUNT(DISTINCT foreign_addr) FROM ibc_transfer"

# Columns: asset, cumulative inbound total, net current amount.
SHIELDED_QUERY = """
SELECT
    asset,
    SUM(CASE WHEN kind = 'inbound' THEN amount ELSE 0 END)::TEXT,
    SUM(amount)::TEXT
FROM ibc_transfer
WHERE asset != %(native)s
GROUP BY asset
"""

# Outbound flows are stored as negative amounts, hence the negation.
UNSHIELDED_QUERY = """
SELECT
    asset,
    (-SUM(CASE WHEN kind = 'outbound' OR kind ILIKE '%%refund%%' THEN amount ELSE 0 END))::TEXT,
    (-SUM(amount))::TEXT
FROM ibc_transfer
WHERE asset = %(native)s
GROUP BY asset
"""


class PostgresStatsStore(BaseStatsStore):
    """Statistics store reading from the indexer's Postgres database.

    The connection pool is shared by all concurrent fetches; psycopg_pool
    handles the synchronization.
    """

    def __init__(
        self,
        pool: AsyncConnectionPool,
        native_asset: AssetId | None = None,
        reference_asset: AssetId | None = None,
    ):
        self._pool = pool
        self.native_asset = native_asset or AssetId.from_hex(NATIVE_ASSET_ID_HEX)
        self.reference_asset = reference_asset or AssetId.from_hex(
            REFERENCE_ASSET_ID_HEX
        )

    @property
    def store_name(self) -> str:
        return "postgres"

    @classmethod
    async def connect(
        cls,
        conninfo: str,
        *,
        min_size: int = DEFAULT_POOL_MIN_SIZE,
        max_size: int = DEFAULT_POOL_MAX_SIZE,
        connect_retries: int = DEFAULT_CONNECT_RETRIES,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
        native_asset: AssetId | None = None,
        reference_asset: AssetId | None = None,
    ) -> PostgresStatsStore:
        """Open a connection pool, retrying transient connection failures.

        A pool that failed to fill is closed by psycopg_pool and cannot be
        reopened, so every attempt builds a fresh one.
        """

        def _on_backoff(details: Any) -> None:
            logger.warning(
                "Database connection attempt %d failed, retrying in %.1fs: %s",
                details["tries"],
                details["wait"],
                details.get("exception"),
            )

        @backoff.on_exception(
            backoff.expo,
            (psycopg.OperationalError, PoolTimeout),
            max_tries=max(connect_retries, 1),
            jitter=backoff.full_jitter,
            on_backoff=_on_backoff,
        )
        async def _open() -> AsyncConnectionPool:
            pool = AsyncConnectionPool(
                conninfo,
                min_size=min_size,
                max_size=max_size,
                open=False,
            )
            try:
                await pool.open(wait=True, timeout=connect_timeout)
            except BaseException:
                await pool.close()
                raise
            return pool

        pool = await _open()

        logger.info("Connected to database (pool %d..%d)", min_size, max_size)
        return cls(pool, native_asset=native_asset, reference_asset=reference_asset)

    async def close(self) -> None:
        await self._pool.close()

    async def _fetch_one(self, query: str, params: dict[str, Any] | None = None) -> Any:
        async with self._pool.connection() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchone()

    async def _fetch_all(
        self, query: str, params: dict[str, Any] | None = None
    ) -> list[Any]:
        async with self._pool.connection() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchall()

    async def fetch_total_supply(self) -> tuple[TotalSupply, TotalSupply]:
        row = await self._fetch_one(
            TOTAL_SUPPLY_QUERY,
            {
                "native": self.native_asset.inner,
                "reference": self.reference_asset.inner,
            },
        )
        if row is None or len(row) != 10:
            raise ConversionError("total supply query returned no usable row")
        values = tuple(row)
        return (
            supply_from_values(values[:5], "native"),
            supply_from_values(values[5:], "reference"),
        )

    async def fetch_depositors(self) -> Depositors:
        row = await self._fetch_one(DEPOSITORS_QUERY)
        if row is None:
            raise ConversionError("depositor query returned no row")
        return Depositors(total=to_amount(row[0], "depositor count"))

    async def fetch_shielded(self) -> ShieldedValue:
        rows = await self._fetch_all(
            SHIELDED_QUERY, {"native": self.native_asset.inner}
        )
        return ShieldedValue(by_asset=[deposit_from_row(tuple(row)) for row in rows])

    async def fetch_unshielded(self) -> ShieldedValue:
        rows = await self._fetch_all(
            UNSHIELDED_QUERY, {"native": self.native_asset.inner}
        )
        return ShieldedValue(by_asset=[deposit_from_row(tuple(row)) for row in rows])
