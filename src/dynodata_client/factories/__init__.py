"""
Factory classes for wiring clients from configuration
"""

from .auth_factory import AuthProviderFactory
from .client_factory import ClientFactory

__all__ = [
    "AuthProviderFactory",
    "ClientFactory",
]
