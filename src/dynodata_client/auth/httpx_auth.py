"""
httpx integration for auth providers

Attaches the provider's credential to every outgoing request.
"""

from typing import AsyncGenerator, Generator

import httpx

from .interface import IAuthProvider


class ProviderAuth(httpx.Auth):
    """httpx auth flow that delegates to an IAuthProvider"""

    def __init__(self, provider: IAuthProvider) -> None:
        self.provider = provider

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        credential = await self.provider.acquire()
        request.headers["Authorization"] = credential.authorization_header
        yield request

    def sync_auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        raise RuntimeError("ProviderAuth can only be used with httpx.AsyncClient")
