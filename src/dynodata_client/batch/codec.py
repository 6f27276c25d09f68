"""
OData $batch codec

Encodes PendingOperations into one multipart/mixed request body and decodes
the multipart/mixed response into BatchResults correlated by Content-ID.

Details regarding the batch format:
http://docs.oasis-open.org/odata/odata/v4.01/odata-v4.01-part1-protocol.html#sec_BatchRequests
"""

import json
import uuid
from email.message import Message
from email.parser import BytesParser
from http.client import HTTPException, HTTPResponse
from io import BytesIO
from typing import Iterator, List, Optional, Sequence, Tuple
import structlog

from ..exceptions import ODataParseError
from ..serialization import to_json_bytes
from .context_url import parse_entity_set_from_context_url
from .models import BatchResult, EncodedBatch, PendingOperation

logger = structlog.get_logger(__name__)

CRLF = b"\r\n"
HTTP_PART_TYPE = "application/http"
MULTIPART_TYPE = "multipart/mixed"


class _BytesSocket:
    """Socket stand-in so http.client can parse an embedded response"""

    def __init__(self, data: bytes):
        self._file = BytesIO(data)

    def makefile(self, *args, **kwargs):
        return self._file


def parse_http_response(data: bytes) -> Tuple[int, bytes]:
    """Split a raw HTTP/1.1 response message into status code and body"""
    response = HTTPResponse(_BytesSocket(data))  # type: ignore[arg-type]
    try:
        response.begin()
        return response.status, response.read()
    except HTTPException as e:
        raise ODataParseError(f"Malformed HTTP response inside batch part: {e!r}") from e


class BatchCodec:
    """Multipart encoder/decoder for one OData service root"""

    def __init__(self, service_root: str):
        self.service_root = service_root if service_root.endswith("/") else service_root + "/"

    def entity_url(self, path: str) -> str:
        """Absolute URL of a path relative to the service root"""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.service_root}{path}"

    def encode(self, operations: Sequence[PendingOperation]) -> EncodedBatch:
        """
        Build the multipart/mixed body for a $batch request.

        Every operation becomes one application/http part carrying a complete
        HTTP request, tagged with a Content-ID header when the operation has one.

        Args:
            operations: Operations in submission order

        Returns:
            Encoded body together with its freshly generated boundary
        """
        boundary = f"batch_{uuid.uuid4()}"
        delimiter = f"--{boundary}".encode("ascii")
        lines: List[bytes] = []

        for operation in operations:
            lines.append(delimiter)
            lines.append(f"Content-Type: {HTTP_PART_TYPE}".encode("ascii"))
            lines.append(b"Content-Transfer-Encoding: binary")
            if operation.content_id is not None:
                lines.append(f"Content-ID: {operation.content_id}".encode("ascii"))
            lines.append(b"")

            request_line = f"{operation.method.upper()} {self.entity_url(operation.path)} HTTP/1.1"
            lines.append(request_line.encode("utf-8"))

            if operation.body is not None:
                lines.append(b"Content-Type: application/json; charset=utf-8")
                lines.append(b"")
                lines.append(to_json_bytes(operation.body))
            else:
                # an empty body is still terminated by a blank line
                lines.append(b"")
                lines.append(b"")

        lines.append(f"--{boundary}--".encode("ascii"))
        lines.append(b"")

        logger.debug("Encoded batch request", boundary=boundary, operations=len(operations))
        return EncodedBatch(body=CRLF.join(lines), boundary=boundary)

    def decode(self, body: bytes, content_type: str) -> List[BatchResult]:
        """
        Decode a $batch response into per-operation results.

        Successful parts without a body (create/update/delete acknowledgments)
        yield nothing. Successful query parts yield the records of their
        `value` array together with the entity set named by `@odata.context`;
        query parts missing either are skipped. Failed parts yield a result
        with success=False and the raw error body.

        Args:
            body: Raw response body
            content_type: Response Content-Type header (carries the boundary)

        Returns:
            Results in the order the server returned the parts
        """
        message = BytesParser().parsebytes(
            f"Content-Type: {content_type}".encode("latin-1") + CRLF + CRLF + body
        )
        if not message.is_multipart():
            raise ODataParseError(
                f"Batch response is not multipart (Content-Type: {content_type})",
                body.decode("utf-8", errors="replace"),
            )

        results: List[BatchResult] = []
        parts = 0
        for part in self._iter_http_parts(message):
            parts += 1
            result = self._decode_part(part)
            if result is not None:
                results.append(result)

        logger.info("Decoded batch response", parts=parts, results=len(results))
        return results

    def _iter_http_parts(self, message: Message) -> Iterator[Message]:
        for part in message.get_payload():
            part_type = part.get_content_type()
            if part_type == MULTIPART_TYPE:
                # change set response
                yield from self._iter_http_parts(part)
            elif part_type == HTTP_PART_TYPE:
                yield part
            else:
                logger.debug("Skipping batch part", content_type=part_type)

    def _decode_part(self, part: Message) -> Optional[BatchResult]:
        content_id = part.get("Content-ID")
        if content_id is not None:
            content_id = str(content_id).strip()

        status_code, payload = parse_http_response(part.get_payload(decode=True) or b"")
        if not 200 <= status_code < 300:
            logger.warning("Batch operation failed", content_id=content_id, status_code=status_code)
            return BatchResult(
                content_id=content_id,
                success=False,
                status_code=status_code,
                raw_error_body=payload,
            )

        text = payload.decode("utf-8", errors="replace")
        if not text.strip():
            return None

        try:
            document = json.loads(text)
        except ValueError as e:
            raise ODataParseError(
                f"Batch part {content_id or '?'} returned invalid JSON: {e}", text
            ) from e

        if not isinstance(document, dict):
            logger.debug("Skipping batch part without a JSON object", content_id=content_id)
            return None

        entity_set = parse_entity_set_from_context_url(document.get("@odata.context") or "")
        records = document.get("value")
        if not entity_set or not isinstance(records, list):
            logger.debug("Skipping batch part without an entity set collection",
                         content_id=content_id, entity_set=entity_set)
            return None

        return BatchResult(
            content_id=content_id,
            success=True,
            status_code=status_code,
            entity_set=entity_set,
            records=[record for record in records if isinstance(record, dict)],
        )
