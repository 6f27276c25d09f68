"""
Basic Authentication Provider

Static-credential implementation of IAuthProvider.
"""

import base64
from typing import Dict, Any, Optional
import structlog

from ..config import Settings, get_settings
from .interface import IAuthProvider, Credential

logger = structlog.get_logger(__name__)


class BasicAuthProvider(IAuthProvider):
    """Presents a constant `Basic base64(username:password)` credential"""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        if not self.settings.username:
            raise ValueError("Username is not configured for basic authentication")

        raw = f"{self.settings.username}:{self.settings.password or ''}".encode("utf-8")
        self._credential = Credential(
            token=base64.b64encode(raw).decode("ascii"), expires_at=None, scheme="Basic"
        )

        logger.info("Basic auth provider initialized", username=self.settings.username)

    async def acquire(self) -> Credential:
        return self._credential

    async def validate_credentials(self) -> bool:
        """Basic credentials are only checked by the server, so this is always True"""
        return True

    def invalidate(self) -> None:
        # Nothing is cached beyond the configured username/password
        pass

    def get_provider_info(self) -> Dict[str, Any]:
        return {
            "type": "basic",
            "username": self.settings.username,
        }
