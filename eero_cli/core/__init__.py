"""
Core layer - Raw types, HTTP client and session storage.

This layer provides:
- Typed dataclasses matching the eero API payloads
- Low-level HTTP client with the session cookie and error handling
- The session token store
"""

from eero_cli.core.client import APIClient
from eero_cli.core.errors import (
    APIError,
    CLIError,
    MalformedNetworkReference,
    NoSessionFound,
    PersistenceError,
    SessionError,
    TransportError,
    ValidationError,
)
from eero_cli.core.session import SessionStore
from eero_cli.core.types import (
    Account,
    Device,
    DeviceScan,
    Envelope,
    LoginAttempt,
    Meta,
    Network,
    SessionState,
    extract_network_id,
)

__all__ = [
    "APIClient",
    "APIError",
    "Account",
    "CLIError",
    "Device",
    "DeviceScan",
    "Envelope",
    "LoginAttempt",
    "MalformedNetworkReference",
    "Meta",
    "Network",
    "NoSessionFound",
    "PersistenceError",
    "SessionError",
    "SessionState",
    "SessionStore",
    "TransportError",
    "ValidationError",
    "extract_network_id",
]
