from __future__ import annotations

import json
import logging

from ..assets.ids import AssetId
from ..assets.registry import Registry
from ..domain import IndexResponse
from ..settings import OutputFormat
from .console import format_report_table
from .formatter import format_human, format_machine

logger = logging.getLogger(__name__)


def publish_to_stdout(
    response: IndexResponse,
    registry: Registry,
    output_format: OutputFormat = OutputFormat.TABLE,
    native_asset: AssetId | None = None,
    reference_asset: AssetId | None = None,
) -> None:
    """Write the statistics to stdout in the requested format.

    JSON output is the raw machine record and never touches the registry.
    """
    if output_format == OutputFormat.JSON:
        print(json.dumps(format_machine(response), indent=2))
        return

    formatted = format_human(
        registry,
        response,
        native_asset=native_asset,
        reference_asset=reference_asset,
    )
    logger.debug(
        "Formatted %d known and %d unknown shielded assets",
        len(formatted.shielded.by_asset),
        len(formatted.shielded.unknown_asset),
    )

    if output_format == OutputFormat.FORMATTED_JSON:
        print(json.dumps(formatted.to_dict(), indent=2))
    else:
        format_report_table(formatted)
