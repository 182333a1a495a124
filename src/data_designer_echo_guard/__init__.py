# SPDX-License-Identifier: Apache-2.0
"""Echo Guard plugin for NeMo Data Designer.

Adds an ``echo-guard`` column type that flags words, stems or part-of-speech
tags repeated too closely together in pre-tagged text. Each echo is scored by
a quadratic in its distance and reported as a warning or an error.

Usage::

    from data_designer_echo_guard import EchoGuardColumnConfig, EchoOptions

    builder.add_column(EchoGuardColumnConfig(
        name="echo_check",
        target_column="tokens",
        echo=EchoOptions(
            range=100,
            conditions=[{"field": "normalized", "score": [0, 0, 1], "warning": 25, "error": 100}],
        ),
    ))
"""

from data_designer_echo_guard.config import EchoGuardColumnConfig
from data_designer_echo_guard.core import analyze_tokens, process
from data_designer_echo_guard.errors import EchoConfigurationError
from data_designer_echo_guard.options import EchoCondition, EchoFilter, EchoOptions
from data_designer_echo_guard.output import MemoryAnalysisOutput
from data_designer_echo_guard.tokens import Content, Token, content_from_records

__all__ = [
    "EchoGuardColumnConfig",
    "EchoOptions",
    "EchoCondition",
    "EchoFilter",
    "EchoConfigurationError",
    "Content",
    "Token",
    "MemoryAnalysisOutput",
    "analyze_tokens",
    "content_from_records",
    "process",
]
