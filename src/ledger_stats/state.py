"""Application state container."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .assets.registry import Registry, load_registry
from .settings import StatsSettings
from .store.base import BaseStatsStore


@dataclass
class AppState:
    """Container for application-wide state and dependencies.

    The registry is loaded once and only ever read afterwards, so a single
    instance is shared by every request.
    """

    settings: StatsSettings
    logger: logging.Logger
    registry: Registry
    store: BaseStatsStore


async def create_state(settings: StatsSettings, logger: logging.Logger) -> AppState:
    """Load the registry, then connect to the store.

    The registry is loaded first so that a malformed dataset stops startup
    before any connection is opened.
    """
    from .store.postgres import PostgresStatsStore

    registry = load_registry(settings.registry_path)

    store = await PostgresStatsStore.connect(
        settings.database_url_required,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        connect_retries=settings.connect_retries,
        connect_timeout=settings.connect_timeout_seconds,
        native_asset=settings.native_asset,
        reference_asset=settings.reference_asset,
    )
    return AppState(settings=settings, logger=logger, registry=registry, store=store)
