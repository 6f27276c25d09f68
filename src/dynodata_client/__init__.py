"""
DynOData Client

An async client library for OData v4 APIs (Dynamics 365 / Dataverse style),
with cached Azure AD authentication and multipart $batch support.
"""

__version__ = "0.1.0"

from .auth import BasicAuthProvider, Credential, DynamicsAuthProvider, IAuthProvider
from .batch import BatchResult, PendingOperation, parse_entity_set_from_context_url
from .client import IODataClient, ODataClient
from .config import Settings, get_settings
from .exceptions import (
    AuthenticationError,
    ErrorKind,
    ODataClientError,
    ODataError,
    ODataParseError,
)
from .factories import AuthProviderFactory, ClientFactory
from .logging_setup import configure_logging

__all__ = [
    "AuthProviderFactory",
    "AuthenticationError",
    "BasicAuthProvider",
    "BatchResult",
    "ClientFactory",
    "Credential",
    "DynamicsAuthProvider",
    "ErrorKind",
    "IAuthProvider",
    "IODataClient",
    "ODataClient",
    "ODataClientError",
    "ODataError",
    "ODataParseError",
    "PendingOperation",
    "Settings",
    "configure_logging",
    "get_settings",
    "parse_entity_set_from_context_url",
]
