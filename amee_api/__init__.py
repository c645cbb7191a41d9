"""
AMEE API Python Client

A Python client for the AMEE carbon accounting REST API with session
token management, path validation and retry on authorisation failure.
"""

from .client import AMEEClient, create_amee_client
from .types import AMEEConfig, SessionStorage, AUTH_TIMEOUT
from .errors import (
    AMEEError,
    ConfigurationError,
    PathValidationError,
    ProtocolError,
    ConnectionError,
    TransmissionError,
    AuthenticationError,
    AuthorizationError,
    is_amee_error,
)
from .paths import PathAllowList, DEFAULT_ALLOW_LIST, validate_path, is_valid_path
from .session import MemorySession

__version__ = "0.1.0"
__all__ = [
    # Client
    "AMEEClient",
    "create_amee_client",
    # Types
    "AMEEConfig",
    "SessionStorage",
    "AUTH_TIMEOUT",
    # Errors
    "AMEEError",
    "ConfigurationError",
    "PathValidationError",
    "ProtocolError",
    "ConnectionError",
    "TransmissionError",
    "AuthenticationError",
    "AuthorizationError",
    "is_amee_error",
    # Paths
    "PathAllowList",
    "DEFAULT_ALLOW_LIST",
    "validate_path",
    "is_valid_path",
    # Storage
    "MemorySession",
]
