from __future__ import annotations


class EchoConfigurationError(ValueError):
    """Raised when echo options cannot drive an analysis run."""
