"""Literal and ``/regex/`` include patterns.

A pattern wrapped in slashes (``/^N/``) is a regular expression tested with
``re.search`` semantics: it may match anywhere in the value, so anchor it
with ``^`` and ``$`` when the whole value must match. Any other pattern,
including a lone ``/``, is compared for exact, case-sensitive equality.
"""

from __future__ import annotations

import operator
import re
from functools import lru_cache, partial
from typing import Callable

from data_designer_echo_guard.errors import EchoConfigurationError

Matcher = Callable[[str], bool]


def is_delimited_regex(pattern: str) -> bool:
    return len(pattern) >= 2 and pattern[0] == "/" and pattern[-1] == "/"


def literal_matcher(pattern: str) -> Matcher:
    return partial(operator.eq, pattern)


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> Matcher:
    """Turn an include pattern into a predicate over field values.

    Raises:
        EchoConfigurationError: If a delimited pattern is not a valid regex.
    """
    if not is_delimited_regex(pattern):
        return literal_matcher(pattern)
    try:
        regex = re.compile(pattern[1:-1])
    except re.error as exc:
        raise EchoConfigurationError(f"Invalid regular expression in pattern {pattern!r}: {exc}.") from exc
    return lambda value: regex.search(value) is not None


def matches(pattern: str, value: str) -> bool:
    return compile_pattern(pattern)(value)
