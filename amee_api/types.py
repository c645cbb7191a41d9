"""
AMEE API Type Definitions

Client configuration and the session storage interface.
"""

import ssl
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import httpcore


# Session lifetime after the last successful request (30 minutes)
AUTH_TIMEOUT = 1800

DEFAULT_PORT = 80
DEFAULT_SSL_PORT = 443


@runtime_checkable
class SessionStorage(Protocol):
    """Session storage interface for custom implementations."""

    def get_token(self) -> Optional[str]:
        """Get the stored auth token."""
        ...

    def get_expires_at(self) -> float:
        """Get session expiration timestamp (0 when unset)."""
        ...

    def set_token(self, token: str, expires_in: int) -> None:
        """Store a new token valid for expires_in seconds."""
        ...

    def touch(self, expires_in: int) -> None:
        """Push the expiration out to now + expires_in."""
        ...

    def clear(self) -> None:
        """Drop token and expiration."""
        ...

    def is_active(self) -> bool:
        """Check for a token with an expiration still in the future."""
        ...


@dataclass
class AMEEConfig:
    """Client configuration options."""

    # AMEE project key, sent as the auth username
    project_key: Optional[str] = None
    # AMEE project password
    project_password: Optional[str] = None
    # API host name (e.g., stage.amee.com)
    host: Optional[str] = None
    # Plain HTTP port (default: 80)
    port: Optional[int] = DEFAULT_PORT
    # TLS port used for the auth call (default: 443)
    ssl_port: Optional[int] = DEFAULT_SSL_PORT
    # Send the auth call over TLS (default: True)
    use_ssl: bool = True
    # Connect/read/write timeout in seconds (default: 30)
    timeout: float = 30.0
    # Session lifetime in seconds after any successful request (default: 1800)
    auth_timeout: int = AUTH_TIMEOUT
    # Enable debug logging (default: False)
    debug: bool = False
    # Custom storage for the session (default: None, uses MemorySession)
    storage: Optional[SessionStorage] = None
    # Network backend for opening connections (default: httpcore.SyncBackend)
    network_backend: Optional[httpcore.NetworkBackend] = None
    # SSL context for the auth call (default: httpcore.default_ssl_context())
    ssl_context: Optional[ssl.SSLContext] = None
