from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from data_designer_echo_guard.errors import EchoConfigurationError
from data_designer_echo_guard.patterns import Matcher, compile_pattern
from data_designer_echo_guard.tokens import FieldName, Token, field_getter


@dataclass(frozen=True)
class ResolvedFilter:
    """A filter bound to its field accessor and compiled patterns."""

    getter: Callable[[Token], str]
    matchers: tuple[Matcher, ...]

    def accepts(self, token: Token) -> bool:
        if not self.matchers:
            return True
        value = self.getter(token)
        return any(match(value) for match in self.matchers)


class EchoFilter(BaseModel):
    """One alternative a candidate token may satisfy to count as an echo.

    Attributes:
        field: Token attribute the patterns are tested against.
        includes: Literal values or ``/regex/`` patterns; the filter matches when
            any of them matches. An empty list matches every token.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    field: FieldName = Field(default=FieldName.NORMALIZED, description="Token attribute to test")
    includes: list[str] = Field(default_factory=list, description="Literal or /regex/ patterns, OR-combined")

    @field_validator("includes")
    @classmethod
    def _compile_includes(cls, includes: list[str]) -> list[str]:
        for pattern in includes:
            compile_pattern(pattern)
        return includes

    @cached_property
    def resolved(self) -> ResolvedFilter:
        return ResolvedFilter(field_getter(self.field), tuple(compile_pattern(p) for p in self.includes))


class EchoCondition(BaseModel):
    """A rule describing which echoes to look for and when to report them.

    Attributes:
        field: Attribute reported in messages and compared by the default filter.
        filters: Alternative filters for candidate tokens. When empty or omitted,
            candidates must share the current token's value for ``field``.
        score: Coefficients ``[a, b, c]`` of ``a + b*x + c*x^2``; missing ones are zero.
        warning: Score at which a warning is reported.
        error: Score at which an error is reported instead.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    field: FieldName = Field(default=FieldName.NORMALIZED, description="Token attribute to watch")
    filters: list[EchoFilter] | None = Field(default=None, description="Candidate filters, OR-combined")
    score: list[float] = Field(default_factory=list, max_length=3, description="Quadratic coefficients")
    warning: float
    error: float

    @model_validator(mode="after")
    def _check_thresholds(self) -> EchoCondition:
        if self.error < self.warning:
            raise ValueError(f"error threshold ({self.error}) must not be below warning threshold ({self.warning})")
        return self

    @cached_property
    def getter(self) -> Callable[[Token], str]:
        return field_getter(self.field)

    @cached_property
    def configured_filters(self) -> tuple[ResolvedFilter, ...]:
        return tuple(echo_filter.resolved for echo_filter in self.filters or ())


class EchoOptions(BaseModel):
    """Options for one echo analysis.

    Attributes:
        range: Window radius in token positions.
        scope: How tokens are grouped before searching, ``document`` or ``sentence``.
        conditions: Rules evaluated for every token, in declaration order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    range: int = Field(gt=0, description="Window radius in token positions")
    scope: str = Field(default="document", description="Scope name passed to the scope resolver")
    conditions: list[EchoCondition] = Field(min_length=1, description="Echo conditions to evaluate")


def load_options(raw: EchoOptions | Mapping[str, Any]) -> EchoOptions:
    """Validate raw options, reporting any problem as ``EchoConfigurationError``."""
    if isinstance(raw, EchoOptions):
        return raw
    try:
        return EchoOptions.model_validate(raw)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'options'}: {error['msg']}"
            for error in exc.errors()
        )
        raise EchoConfigurationError(f"Invalid echo options: {details}") from exc
