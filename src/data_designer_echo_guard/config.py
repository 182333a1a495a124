from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator

from data_designer.config.column_configs import SingleColumnConfig

from data_designer_echo_guard.options import EchoOptions
from data_designer_echo_guard.tokens import Content


class EchoGuardColumnConfig(SingleColumnConfig):
    """Flag words and tags that recur too densely in tagged text columns.

    Reads pre-tagged tokens from one column, scores every token against the
    configured echo conditions, and reports how many warnings and errors each
    row produced.

    Attributes:
        target_column: Column holding token records, either a flat list of
            mappings or a list of sentences of mappings.
        echo: Window range, scope and echo conditions.
        max_errors: Maximum error-severity echoes for ``is_valid=True``.
        max_warnings: Maximum warning-severity echoes for ``is_valid=True``. Unlimited when omitted.
        include_messages: Include the individual echo messages in output.
    """

    target_column: str
    echo: EchoOptions
    max_errors: int = Field(default=0, ge=0, description="Maximum error echoes for is_valid=True")
    max_warnings: int | None = Field(default=None, ge=0, description="Maximum warning echoes for is_valid=True")
    include_messages: bool = Field(default=True, description="Include echo messages in output")
    column_type: Literal["echo-guard"] = "echo-guard"

    @field_validator("echo")
    @classmethod
    def _check_scope(cls, echo: EchoOptions) -> EchoOptions:
        if echo.scope not in Content.SCOPES:
            raise ValueError(f"Unknown scope {echo.scope!r}. Expected one of {', '.join(Content.SCOPES)}.")
        return echo

    @staticmethod
    def get_column_emoji() -> str:
        return "\U0001f501"

    @property
    def required_columns(self) -> list[str]:
        return [self.target_column]

    @property
    def side_effect_columns(self) -> list[str]:
        return []
