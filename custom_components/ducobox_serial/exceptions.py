"""Errors raised at the edges of the Ducobox serial integration."""


class DucoboxError(Exception):
    """Base error for the Ducobox serial integration."""


class ChannelError(DucoboxError):
    """Raised when a serial endpoint cannot be opened."""

    def __init__(self, port: str, reason: str) -> None:
        super().__init__(f"{port}: {reason}")
        self.port = port
        self.reason = reason


class ReportError(DucoboxError):
    """Raised when the reporting endpoint rejects a delivery."""
