"""
Pytest configuration and fixtures for OData client tests
"""

import threading
import time
from datetime import timedelta
from http import HTTPStatus
from typing import Iterable, Optional, Tuple

import pytest
from azure.core.credentials import AccessToken

from dynodata_client.config import Settings

BASE_URL = "https://org.example.com"
SERVICE_ROOT = "https://org.example.com/api/data/v9.2/"


class FakeTokenCredential:
    """Stands in for azure.identity.ClientSecretCredential"""

    def __init__(
        self,
        lifetime: timedelta = timedelta(hours=1),
        delay: float = 0.0,
        error: Optional[Exception] = None,
    ):
        self.lifetime = lifetime
        self.delay = delay
        self.error = error
        self.calls = 0
        self.in_flight = 0
        self.peak_in_flight = 0
        self.scopes: list = []
        self._lock = threading.Lock()

    def get_token(self, *scopes, **kwargs) -> AccessToken:
        with self._lock:
            self.calls += 1
            call = self.calls
            self.scopes.append(scopes)
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.error is not None:
                raise self.error
        finally:
            with self._lock:
                self.in_flight -= 1
        return AccessToken(f"token-{call}", int(time.time() + self.lifetime.total_seconds()))


def make_batch_response(
    parts: Iterable[Tuple[Optional[str], int, str]],
    boundary: str = "batchresponse_test",
) -> Tuple[bytes, str]:
    """Build a multipart/mixed $batch response from (content_id, status, body) parts"""
    lines = []
    for content_id, status, body in parts:
        lines.append(f"--{boundary}")
        lines.append("Content-Type: application/http")
        lines.append("Content-Transfer-Encoding: binary")
        if content_id is not None:
            lines.append(f"Content-ID: {content_id}")
        lines.append("")
        lines.append(f"HTTP/1.1 {status} {HTTPStatus(status).phrase}")
        if body:
            lines.append("Content-Type: application/json; odata.metadata=minimal")
        lines.append("OData-Version: 4.0")
        lines.append("")
        lines.append(body)
    lines.append(f"--{boundary}--")
    lines.append("")
    return "\r\n".join(lines).encode("utf-8"), f"multipart/mixed; boundary={boundary}"


@pytest.fixture
def mock_settings():
    """Settings for the Dynamics (OAuth) provider"""
    return Settings(
        _env_file=None,
        base_url=BASE_URL,
        tenant_id="test-tenant-id",
        client_id="test-client-id",
        client_secret="test-client-secret",
        scope_url=f"{BASE_URL}/.default",
    )


@pytest.fixture
def basic_settings():
    """Settings for the Basic provider"""
    return Settings(
        _env_file=None,
        base_url=BASE_URL,
        auth_provider="basic",
        username="svc-user",
        password="s3cret",
    )


@pytest.fixture
def token_credential():
    return FakeTokenCredential()


@pytest.fixture
def credential_factory():
    """Build FakeTokenCredentials with custom lifetime, delay or error"""
    return FakeTokenCredential


@pytest.fixture
def batch_response():
    """Helper building multipart $batch responses"""
    return make_batch_response
