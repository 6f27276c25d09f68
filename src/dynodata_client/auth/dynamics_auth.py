"""
Dynamics 365 Authentication Provider

Azure AD client-credentials implementation of IAuthProvider with a
single-flight token cache.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from azure.core.credentials import TokenCredential
from azure.identity import ClientSecretCredential
import structlog

from ..config import Settings, AUTHORITY_HOST, get_settings
from .interface import IAuthProvider, AuthenticationError, Credential

logger = structlog.get_logger(__name__)

# Tokens are treated as expired this long before the identity provider says so
EXPIRY_MARGIN = timedelta(minutes=5)


class DynamicsAuthProvider(IAuthProvider):
    """Acquires and caches bearer tokens for Dynamics 365 via Azure AD"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        token_credential: Optional[TokenCredential] = None,
    ) -> None:
        self.settings = settings or get_settings()

        missing = [
            name
            for name in ("tenant_id", "client_id", "client_secret", "scope_url")
            if not getattr(self.settings, name)
        ]
        if missing:
            raise ValueError(
                f"Dynamics authentication is not configured properly, missing: {', '.join(missing)}"
            )

        self.scope = self.settings.scope_url
        self.credential = token_credential or ClientSecretCredential(
            tenant_id=self.settings.tenant_id,
            client_id=self.settings.client_id,
            client_secret=self.settings.client_secret,
            authority=AUTHORITY_HOST,
        )

        self._credential: Optional[Credential] = None
        self._refresh_lock = asyncio.Lock()
        self._refresh_task: Optional["asyncio.Task[Credential]"] = None

        logger.info(
            "Dynamics auth provider initialized",
            tenant_id=self.settings.tenant_id,
            client_id=self.settings.client_id,
            scope=self.scope,
        )

    async def acquire(self) -> Credential:
        """
        Get a valid bearer credential, refreshing it when absent or expired.

        Concurrent callers that find the cache stale wait on one lock; only
        the first of them starts a refresh and the others pick up the
        credential it installs. The refresh runs as its own task, so a
        cancelled caller leaves it running and the next caller joins it
        instead of starting another one.

        Returns:
            Cached or freshly acquired bearer credential

        Raises:
            AuthenticationError: If the identity provider call fails
        """
        credential = self._credential
        if credential is not None and credential.is_valid():
            return credential

        async with self._refresh_lock:
            credential = self._credential
            if credential is not None and credential.is_valid():
                logger.debug("Using token refreshed by a concurrent caller")
                return credential

            # a refresh started by a cancelled caller is still running; join it
            if self._refresh_task is None:
                self._refresh_task = asyncio.create_task(self._refresh())
                self._refresh_task.add_done_callback(self._refresh_done)
            refresh = self._refresh_task
            return await asyncio.shield(refresh)

    async def _refresh(self) -> Credential:
        logger.info("Access token is expired or not present, acquiring new token",
                    scope=self.scope)
        try:
            access_token = await asyncio.to_thread(self.credential.get_token, self.scope)
        except Exception as e:
            logger.error(
                "Failed to acquire Dynamics 365 access token",
                error=str(e),
                tenant_id=self.settings.tenant_id,
                client_id=self.settings.client_id,
            )
            raise AuthenticationError(f"Failed to acquire Dynamics 365 access token: {e}") from e

        expires_on = datetime.fromtimestamp(access_token.expires_on, tz=timezone.utc)
        credential = Credential(token=access_token.token, expires_at=expires_on - EXPIRY_MARGIN)
        self._credential = credential

        logger.info("Access token acquired successfully", expires_at=credential.expires_at.isoformat())
        return credential

    def _refresh_done(self, task: "asyncio.Task[Credential]") -> None:
        self._refresh_task = None
        # mark the failure retrieved when every waiter was cancelled
        if not task.cancelled():
            task.exception()

    async def validate_credentials(self) -> bool:
        """
        Validate that the credentials can successfully authenticate

        Returns:
            True if credentials are valid, False otherwise
        """
        try:
            credential = await self.acquire()
            return bool(credential.token)
        except AuthenticationError as e:
            logger.error("Credential validation failed", error=str(e))
            return False

    def invalidate(self) -> None:
        """Clear the cached token (useful after a 401 or in tests)"""
        self._credential = None
        logger.info("Token cache cleared")

    def get_provider_info(self) -> Dict[str, Any]:
        credential = self._credential
        return {
            "type": "dynamics",
            "tenant_id": self.settings.tenant_id,
            "client_id": self.settings.client_id,
            "scope": self.scope,
            "authority": self.settings.authority,
            "token_cached": credential is not None,
            "token_expires_at": credential.expires_at.isoformat()
            if credential is not None and credential.expires_at
            else None,
        }
