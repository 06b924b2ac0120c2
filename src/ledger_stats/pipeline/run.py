"""High-level pipeline orchestration."""

from __future__ import annotations

import logging

from ..domain import IndexResponse
from ..report import publish_to_stdout
from ..settings import StatsSettings
from ..state import AppState, create_state
from .aggregate import build_response


async def run_stats(state: AppState) -> IndexResponse:
    """Fetch the aggregates and publish them in the configured format.

    Args:
        state: Application state containing settings, registry and store

    Returns:
        The unformatted response that was published
    """
    s = state.settings
    log = state.logger

    log.info("Collecting statistics", extra={"output": s.output.value})

    response = await build_response(state.store, timeout_s=s.fetch_timeout_seconds)

    publish_to_stdout(
        response,
        state.registry,
        output_format=s.output,
        native_asset=s.native_asset,
        reference_asset=s.reference_asset,
    )

    log.info("Statistics published")
    return response


async def run_report(settings: StatsSettings, logger: logging.Logger) -> None:
    """Create application state, run once, and release the store."""
    state = await create_state(settings, logger)
    try:
        await run_stats(state)
    finally:
        await state.store.close()
