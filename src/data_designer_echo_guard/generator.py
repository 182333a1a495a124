from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from data_designer.engine.column_generators.generators.base import ColumnGeneratorFullColumn

from data_designer_echo_guard.config import EchoGuardColumnConfig
from data_designer_echo_guard.core import analyze_tokens
from data_designer_echo_guard.tokens import content_from_records

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)


def summarize_row(value: object, config: EchoGuardColumnConfig, source: object = None) -> dict:
    """Analyze one row's token records and shape the result for the output column."""
    analysis = analyze_tokens(content_from_records(value, source=source), config.echo, name=config.name)
    is_valid = analysis["error_count"] <= config.max_errors
    if config.max_warnings is not None:
        is_valid = is_valid and analysis["warning_count"] <= config.max_warnings
    output: dict = {
        "is_valid": is_valid,
        "echo_errors": analysis["error_count"],
        "echo_warnings": analysis["warning_count"],
        "token_count": analysis["token_count"],
    }
    if config.include_messages:
        output["echo_messages"] = analysis["messages"]
    return output


class EchoGuardColumnGenerator(ColumnGeneratorFullColumn[EchoGuardColumnConfig]):
    """Column generator that reports dense word and tag echoes in tagged text."""

    def generate(self, data: pd.DataFrame) -> pd.DataFrame:
        logger.info(f"\U0001f501 Scanning column {self.config.name!r} for echoes")
        logger.info(f"   target column: {self.config.target_column}")
        logger.info(f"   range: {self.config.echo.range}, scope: {self.config.echo.scope}")
        logger.info(f"   conditions: {len(self.config.echo.conditions)}")

        results = [
            summarize_row(value, self.config, source=row_index)
            for row_index, value in data[self.config.target_column].items()
        ]

        data = data.copy()
        data[self.config.name] = results
        return data
