"""Concurrent fetch-and-join of the four independent aggregates."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable
from typing import TypeVar

from ..domain import IndexResponse
from ..logger import get_logger
from ..store.base import BaseStatsStore, FetchError

logger = get_logger(__name__)

T = TypeVar("T")


async def _fetch(name: str, pending: Awaitable[T]) -> T:
    """Await one aggregate, tagging any failure with the aggregate name."""
    started = time.monotonic()
    try:
        result = await pending
    except FetchError as exc:
        if exc.aggregate is None:
            exc.aggregate = name
        logger.error("Aggregate '%s' failed: %s", name, exc)
        raise
    except Exception as exc:
        logger.error("Aggregate '%s' failed: %s", name, exc)
        raise FetchError(f"failed to fetch {name}: {exc}", aggregate=name) from exc
    logger.debug("Aggregate '%s' fetched in %.3fs", name, time.monotonic() - started)
    return result


async def build_response(
    store: BaseStatsStore,
    timeout_s: float | None = None,
) -> IndexResponse:
    """Fetch all aggregates concurrently and assemble the unformatted response.

    The first failing fetch is surfaced as a FetchError; no partial response is
    returned. Sibling fetches that are already running are not cancelled.

    Args:
        store: Source of the raw aggregates
        timeout_s: Optional overall deadline; None or <= 0 disables it

    Raises:
        FetchError: If any aggregate fails or the deadline expires
    """
    log_store = store.store_name
    logger.debug("Fetching aggregates from %s store", log_store)

    gathered = asyncio.gather(
        _fetch("total_supply", store.fetch_total_supply()),
        _fetch("depositors", store.fetch_depositors()),
        _fetch("shielded", store.fetch_shielded()),
        _fetch("unshielded", store.fetch_unshielded()),
    )

    try:
        if timeout_s is None or timeout_s <= 0:
            results = await gathered
        else:
            async with asyncio.timeout(timeout_s):
                results = await gathered
    except TimeoutError as exc:
        raise FetchError(
            f"aggregates not available within {timeout_s}s (store={log_store})",
            aggregate="timeout",
        ) from exc

    (supply, usdc_equivalent_supply), depositors, shielded, unshielded = results

    logger.info(
        "Fetched aggregates: %d depositors, %d shielded assets, %d unshielded assets",
        depositors.total,
        len(shielded.by_asset),
        len(unshielded.by_asset),
    )

    return IndexResponse(
        supply=supply,
        usdc_equivalent_supply=usdc_equivalent_supply,
        depositors=depositors,
        shielded=shielded,
        unshielded=unshielded,
    )
