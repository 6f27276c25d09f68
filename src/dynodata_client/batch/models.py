"""
Batch data models
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

ContentId = Union[int, str]


@dataclass(frozen=True)
class PendingOperation:
    """One request to be sent as a part of a $batch"""

    method: str
    path: str
    body: Optional[Any] = None
    content_id: Optional[ContentId] = None

    def __post_init__(self) -> None:
        # Content-ID comes back from the server as text
        if self.content_id is not None:
            object.__setattr__(self, "content_id", str(self.content_id))

    @classmethod
    def get(cls, path: str, content_id: Optional[ContentId] = None) -> "PendingOperation":
        return cls("GET", path, None, content_id)

    @classmethod
    def post(cls, path: str, data: Any, content_id: Optional[ContentId] = None) -> "PendingOperation":
        return cls("POST", path, data, content_id)

    @classmethod
    def patch(cls, path: str, data: Any, content_id: Optional[ContentId] = None) -> "PendingOperation":
        return cls("PATCH", path, data, content_id)

    @classmethod
    def delete(cls, path: str, content_id: Optional[ContentId] = None) -> "PendingOperation":
        return cls("DELETE", path, None, content_id)


@dataclass
class BatchResult:
    """Outcome of one response part of a $batch"""

    content_id: Optional[str]
    success: bool
    status_code: int
    entity_set: Optional[str] = None
    records: Optional[List[Dict[str, Any]]] = None
    raw_error_body: Optional[bytes] = None

    @property
    def error_body(self) -> Optional[str]:
        """Error body decoded as UTF-8"""
        if self.raw_error_body is None:
            return None
        return self.raw_error_body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class EncodedBatch:
    """A multipart/mixed request body ready to be POSTed to $batch"""

    body: bytes
    boundary: str

    @property
    def content_type(self) -> str:
        return f"multipart/mixed; boundary={self.boundary}"
