"""
Authentication Provider Interface

Defines contract for credential providers (Dynamics 365 OAuth, Basic, etc.)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from ..exceptions import AuthenticationError


@dataclass(frozen=True)
class Credential:
    """An authorization value and the moment it must no longer be used"""

    token: str
    expires_at: Optional[datetime] = None
    scheme: str = "Bearer"

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """Non-expiring credentials are always valid"""
        if not self.token:
            return False
        if self.expires_at is None:
            return True
        return (now or datetime.now(timezone.utc)) < self.expires_at

    @property
    def authorization_header(self) -> str:
        return f"{self.scheme} {self.token}"


class IAuthProvider(ABC):
    """Interface for credential providers"""

    @abstractmethod
    async def acquire(self) -> Credential:
        """
        Get a credential that is valid right now.

        Returns:
            Credential to attach to the next request

        Raises:
            AuthenticationError: If a credential cannot be obtained
        """
        pass

    @abstractmethod
    async def validate_credentials(self) -> bool:
        """
        Validate that credentials are properly configured and working.

        Returns:
            True if a credential could be acquired
        """
        pass

    @abstractmethod
    def invalidate(self) -> None:
        """Forget any cached credential so the next acquire() refreshes"""
        pass

    @abstractmethod
    def get_provider_info(self) -> Dict[str, Any]:
        """
        Get information about the auth provider.

        Returns:
            Provider metadata (type, settings, etc.)
        """
        pass


__all__ = ["AuthenticationError", "Credential", "IAuthProvider"]
