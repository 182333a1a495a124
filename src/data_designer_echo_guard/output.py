from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

Severity = Literal["warning", "error"]


class AnalysisOutput(Protocol):
    """Receives diagnostics in the order they are produced."""

    def report_warning(self, message: str, location: Any) -> None: ...

    def report_error(self, message: str, location: Any) -> None: ...


@dataclass(frozen=True)
class Message:
    severity: Severity
    message: str
    location: Any

    def to_payload(self) -> dict[str, object]:
        return {
            "type": "Message",
            "severity": self.severity,
            "message": self.message,
            "location": self.location,
        }


@dataclass
class MemoryAnalysisOutput:
    """Collects diagnostics in an append-only list."""

    messages: list[Message] = field(default_factory=list)

    def report_warning(self, message: str, location: Any) -> None:
        self.messages.append(Message("warning", message, location))

    def report_error(self, message: str, location: Any) -> None:
        self.messages.append(Message("error", message, location))

    @property
    def warnings(self) -> list[Message]:
        return [m for m in self.messages if m.severity == "warning"]

    @property
    def errors(self) -> list[Message]:
        return [m for m in self.messages if m.severity == "error"]


class LoggingAnalysisOutput:
    """Writes diagnostics to a logger, optionally passing them on to another sink."""

    def __init__(self, logger: logging.Logger | None = None, forward_to: AnalysisOutput | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.forward_to = forward_to

    def report_warning(self, message: str, location: Any) -> None:
        self.logger.warning(f"{location}: {message}")
        if self.forward_to is not None:
            self.forward_to.report_warning(message, location)

    def report_error(self, message: str, location: Any) -> None:
        self.logger.error(f"{location}: {message}")
        if self.forward_to is not None:
            self.forward_to.report_error(message, location)
