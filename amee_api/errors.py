"""
AMEE API Error Classes

Every failure raised by the client derives from AMEEError so callers can
catch the whole family at once or pick out a single kind.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class AMEEError(Exception):
    """Base error class for the AMEE API client."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "name": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ConfigurationError(AMEEError):
    """Configuration error (missing project key, password or host)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class PathValidationError(AMEEError):
    """Request path is not allowed for the requested verb."""

    def __init__(self, path: str, verb: str):
        super().__init__(
            "INVALID_PATH",
            f"Invalid AMEE REST API {verb.upper()} path specified: {path}",
            {"path": path, "verb": verb.upper()},
        )
        self.path = path
        self.verb = verb.upper()


class ProtocolError(AMEEError):
    """Malformed request method."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_METHOD", message, details)


class ConnectionError(AMEEError):
    """The transport connection could not be opened."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("CONNECTION_FAILED", message, details)


class TransmissionError(AMEEError):
    """The request could not be written or the response could not be read."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSMISSION_FAILED", message, details)


class AuthenticationError(AMEEError):
    """The auth handshake completed but returned no usable token."""

    def __init__(
        self,
        message: str,
        code: str = "NO_AUTH_TOKEN",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(code, message, details)


class AuthorizationError(AMEEError):
    """The service kept answering 401 after the permitted retry."""

    def __init__(
        self,
        message: str,
        code: str = "UNAUTHORIZED",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(code, message, details)


def is_amee_error(error: Any) -> bool:
    """Check if error is an AMEEError."""
    return isinstance(error, AMEEError)
