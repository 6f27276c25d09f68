"""
Authentication Provider Factory

Creates auth provider instances based on configuration.
"""

import structlog

from ..config import Settings
from ..auth import IAuthProvider, DynamicsAuthProvider, BasicAuthProvider

logger = structlog.get_logger(__name__)


class AuthProviderFactory:
    """Factory for creating authentication providers"""

    @staticmethod
    def create(settings: Settings) -> IAuthProvider:
        """
        Create auth provider based on configuration.

        Args:
            settings: Client settings

        Returns:
            Configured auth provider instance

        Raises:
            ValueError: If provider type is not supported or not configured
        """
        provider_type = settings.auth_provider.lower()

        logger.info("Creating auth provider", provider_type=provider_type)

        if provider_type == "dynamics":
            return DynamicsAuthProvider(settings)
        elif provider_type == "basic":
            return BasicAuthProvider(settings)
        else:
            raise ValueError(f"Unsupported auth provider: {provider_type}")

    @staticmethod
    def get_available_providers() -> list[str]:
        """Get list of available auth provider types"""
        return ["dynamics", "basic"]
