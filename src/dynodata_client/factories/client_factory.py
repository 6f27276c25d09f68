"""
OData Client Factory

Wires an ODataClient together with its auth provider.
"""

from typing import Optional
import httpx
import structlog

from ..config import Settings, get_settings
from ..auth import IAuthProvider
from ..client import ODataClient
from .auth_factory import AuthProviderFactory

logger = structlog.get_logger(__name__)


class ClientFactory:
    """Factory for creating OData clients"""

    @staticmethod
    def create(
        settings: Optional[Settings] = None,
        auth_provider: Optional[IAuthProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> ODataClient:
        """
        Create an OData client.

        Args:
            settings: Client settings (loaded from the environment if omitted)
            auth_provider: Auth provider (created from settings if omitted)
            transport: httpx transport override

        Returns:
            Configured OData client; close it with `aclose()` or `async with`
        """
        settings = settings or get_settings()
        if not settings.base_url:
            raise ValueError("ODATA_BASE_URL is not configured")

        auth_provider = auth_provider or AuthProviderFactory.create(settings)

        logger.info(
            "Creating OData client",
            service_root=settings.service_root,
            auth_provider=settings.auth_provider,
        )
        return ODataClient(auth_provider, settings, transport=transport)
