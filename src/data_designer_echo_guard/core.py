# Echo detection for tagged prose.
#
# For every token, looks at the neighbouring tokens within ``range`` positions,
# keeps the ones a condition's filters accept, scores them with a quadratic in
# ``range - distance`` and reports the token once the score crosses the
# condition's warning or error threshold.

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from data_designer_echo_guard.errors import EchoConfigurationError
from data_designer_echo_guard.options import EchoCondition, EchoOptions, ResolvedFilter, load_options
from data_designer_echo_guard.output import AnalysisOutput, MemoryAnalysisOutput, Severity
from data_designer_echo_guard.patterns import literal_matcher
from data_designer_echo_guard.tokens import Content, Token, TokenContainer

logger = logging.getLogger(__name__)


class ScopeResolver(Protocol):
    def get_scoped_tokens(self, scope: str) -> Sequence[TokenContainer]: ...


# ---------------------------------------------------------------------------
# Window
# ---------------------------------------------------------------------------


def window(tokens: Sequence[Token], center_index: int, range_: int) -> list[Token]:
    """Return the tokens within ``range_`` positions of ``center_index``, in container order.

    The token at ``center_index`` itself is never part of its window.
    """
    return [token for token in tokens if 0 < abs(token.index - center_index) <= range_]


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def resolve_filters(condition: EchoCondition, token: Token) -> tuple[ResolvedFilter, ...]:
    """Return the filters a condition applies around ``token``.

    Conditions without filters look for literal repeats of the token's own
    value for ``condition.field``.
    """
    if condition.configured_filters:
        return condition.configured_filters
    return (ResolvedFilter(condition.getter, (literal_matcher(condition.getter(token)),)),)


def include(token: Token, filters: Sequence[ResolvedFilter]) -> bool:
    return any(echo_filter.accepts(token) for echo_filter in filters)


def filter_tokens(base_token: Token, filters: Sequence[ResolvedFilter], tokens: Sequence[Token]) -> list[Token]:
    return [token for token in tokens if token.index != base_token.index and include(token, filters)]


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def calculate_score(coefficients: Sequence[float], x: float) -> float:
    """Evaluate ``a + b*x + c*x^2``, treating missing coefficients as zero."""
    a, b, c = (list(coefficients) + [0, 0, 0])[:3]
    return a + b * x + c * x * x


def score_tokens(coefficients: Sequence[float], range_: int, center_index: int, tokens: Sequence[Token]) -> float:
    return sum(calculate_score(coefficients, range_ - abs(token.index - center_index)) for token in tokens)


def _format_score(score: float) -> str:
    if float(score).is_integer():
        return str(int(score))
    return f"{score:.2f}"


# ---------------------------------------------------------------------------
# Processing
# ---------------------------------------------------------------------------


def process_condition(
    output: AnalysisOutput,
    options: EchoOptions,
    condition: EchoCondition,
    token: Token,
    test_tokens: Sequence[Token],
) -> Severity | None:
    """Report ``token`` for one condition if its echoes score high enough.

    Returns:
        The severity reported, or None when the token stays quiet.
    """
    filters = resolve_filters(condition, token)
    if not include(token, filters):
        return None

    filtered = filter_tokens(token, filters, test_tokens)
    if not filtered:
        return None

    token_score = score_tokens(condition.score, options.range, token.index, filtered)
    if token_score < condition.warning:
        return None

    message = (
        f"{token.text}: {condition.getter(token)} was used {len(filtered)} other times "
        f"in the surrounding {options.range} tokens. (Score {_format_score(token_score)})"
    )
    if token_score >= condition.error:
        output.report_error(message, token.location)
        return "error"
    output.report_warning(message, token.location)
    return "warning"


def process_container(output: AnalysisOutput, options: EchoOptions, container: TokenContainer) -> None:
    for token in container:
        # The window is shared by every condition.
        test_tokens = window(container.tokens, token.index, options.range)
        for condition in options.conditions:
            process_condition(output, options, condition, token, test_tokens)


def _first_location(content: ScopeResolver) -> Any:
    tokens = getattr(content, "tokens", None)
    if tokens:
        return tokens[0].location
    return None


def process(
    options: EchoOptions | Mapping[str, Any],
    content: ScopeResolver,
    output: AnalysisOutput,
    name: str = "echo",
) -> None:
    """Run an echo analysis over every container of the configured scope.

    Diagnostics reach ``output`` in container, token, then condition order.

    Raises:
        EchoConfigurationError: If the options are invalid or name an unknown
            scope. The problem is reported once to ``output`` first, anchored
            at the first token's location, and nothing else is emitted.
    """
    try:
        echo_options = load_options(options)
        containers = content.get_scoped_tokens(echo_options.scope)
    except EchoConfigurationError as exc:
        output.report_error(f"{name}: {exc}", _first_location(content))
        raise

    logger.debug(f"{name}: scanning {len(containers)} {echo_options.scope} container(s) with range {echo_options.range}")
    for container in containers:
        process_container(output, echo_options, container)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze_tokens(content: Content, options: EchoOptions | Mapping[str, Any], name: str = "echo") -> dict:
    """Find echoes in tagged content.

    Args:
        content: Tokens grouped into sentences.
        options: Echo options, validated if given as a mapping.
        name: Prefix for configuration error messages.

    Returns:
        Dict with keys: token_count, warning_count, error_count, messages.
    """
    output = MemoryAnalysisOutput()
    process(options, content, output, name=name)
    return {
        "token_count": len(content.tokens),
        "warning_count": len(output.warnings),
        "error_count": len(output.errors),
        "messages": [m.to_payload() for m in output.messages],
    }
