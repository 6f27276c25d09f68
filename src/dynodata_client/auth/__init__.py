"""
Authentication module

Credential providers for Dynamics 365 (Azure AD) and Basic authentication.
"""

from .interface import IAuthProvider, AuthenticationError, Credential
from .dynamics_auth import DynamicsAuthProvider, EXPIRY_MARGIN
from .basic_auth import BasicAuthProvider
from .httpx_auth import ProviderAuth

__all__ = [
    "IAuthProvider",
    "AuthenticationError",
    "Credential",
    "DynamicsAuthProvider",
    "EXPIRY_MARGIN",
    "BasicAuthProvider",
    "ProviderAuth",
]
