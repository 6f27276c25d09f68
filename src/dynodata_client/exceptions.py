"""
OData client errors

Every failure raised by this package derives from ODataError and carries an
ErrorKind, so callers can branch on the kind of failure. Transport failures
(httpx.TransportError and its subclasses) are never wrapped.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure categories surfaced to callers"""

    HTTP_STATUS = "http_status"
    PARSE = "parse"
    AUTHENTICATION = "authentication"


class ODataError(Exception):
    """Base class for OData client errors"""

    kind: ErrorKind


class ODataClientError(ODataError):
    """The server answered with a non-2xx status code"""

    kind = ErrorKind.HTTP_STATUS

    def __init__(self, message: str, status_code: int, raw_body: bytes = b""):
        super().__init__(message)
        self.status_code = status_code
        self.raw_body = raw_body

    @property
    def response_text(self) -> str:
        """Response body decoded as UTF-8"""
        return self.raw_body.decode("utf-8", errors="replace")

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    def __repr__(self) -> str:
        return f"ODataClientError(status_code={self.status_code}, message={str(self)!r})"


class ODataParseError(ODataError):
    """A successful response body did not match the expected shape"""

    kind = ErrorKind.PARSE

    def __init__(self, message: str, content: Optional[str] = None):
        super().__init__(message)
        self.content = content


class AuthenticationError(ODataError):
    """Acquiring a credential from the identity provider failed"""

    kind = ErrorKind.AUTHENTICATION
