"""
Error taxonomy for the eero client.

Every failure surfaced by the core derives from CLIError so the command
layer can render it uniformly.
"""

from typing import Any


class CLIError(Exception):
    """Base error class for CLI errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class APIError(CLIError):
    """The server answered, but the envelope reports a failure."""

    def __init__(self, message: str, status: int = 0, details: dict | None = None):
        super().__init__(message, details)
        self.status = status

    def __str__(self) -> str:
        return f"[Eero API Error] Http Status {self.status}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        if self.status:
            result["status"] = self.status
        return result


class TransportError(CLIError):
    """Network or connection failure before any response was decoded."""


class ValidationError(CLIError):
    """Validation error for local input/data issues (not API errors)."""


class SessionError(CLIError):
    """Base class for session store failures."""


class NoSessionFound(SessionError):
    """The session medium holds no token: the user never authenticated."""


class PersistenceError(SessionError):
    """The session medium exists but could not be read or written."""


class MalformedNetworkReference(CLIError):
    """A network URL does not end in its numeric identifier."""

    def __init__(self, url: str):
        super().__init__(f"Could not find ID in network URL '{url}'", details={"url": url})
        self.url = url
