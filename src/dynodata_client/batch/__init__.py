"""
Batch module

Multipart $batch encoding/decoding and the models it works with.
"""

from .models import BatchResult, EncodedBatch, PendingOperation
from .codec import BatchCodec, parse_http_response
from .context_url import parse_entity_set_from_context_url

__all__ = [
    "BatchCodec",
    "BatchResult",
    "EncodedBatch",
    "PendingOperation",
    "parse_entity_set_from_context_url",
    "parse_http_response",
]
