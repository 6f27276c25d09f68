"""
OData v4 Client

Request pipeline for a Dynamics-style OData endpoint: builds, sends and
decodes single requests, relationship ($ref) requests and $batch requests.
"""

import json
from functools import lru_cache
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence
import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from ..auth import IAuthProvider, ProviderAuth
from ..batch import BatchCodec, BatchResult, PendingOperation
from ..config import Settings, get_settings
from ..exceptions import ODataClientError, ODataParseError
from ..serialization import to_json_bytes
from .interface import IODataClient

logger = structlog.get_logger(__name__)

ODATA_HEADERS = {
    "Accept": "application/json",
    "OData-MaxVersion": "4.0",
    "OData-Version": "4.0",
}
JSON_CONTENT_TYPE = "application/json; charset=utf-8"
INCLUDE_ANNOTATIONS = 'odata.include-annotations="*"'
RETURN_REPRESENTATION = "return=representation"


@lru_cache(maxsize=128)
def _type_adapter(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


class ODataClient(IODataClient):
    """HTTP client for OData v4 APIs with credentials attached by an auth provider"""

    def __init__(
        self,
        auth_provider: IAuthProvider,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.auth_provider = auth_provider
        self.codec = BatchCodec(self.settings.service_root)
        self._http = httpx.AsyncClient(
            base_url=self.settings.service_root,
            headers=ODATA_HEADERS,
            auth=ProviderAuth(auth_provider),
            timeout=self.settings.request_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying connection pool"""
        await self._http.aclose()

    async def __aenter__(self) -> "ODataClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    def entity_url(self, path: str) -> str:
        """Absolute URL for a path relative to the service root"""
        return self.codec.entity_url(path)

    async def send(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        *,
        prefer: Optional[str] = None,
        response_type: Optional[Any] = None,
    ) -> Any:
        headers: Dict[str, str] = {}
        content: Optional[bytes] = None
        if prefer:
            headers["Prefer"] = prefer
        if body is not None:
            content = to_json_bytes(body)
            headers["Content-Type"] = JSON_CONTENT_TYPE

        logger.info("Sending OData request", method=method, path=path)

        try:
            response = await self._http.request(method, path, content=content, headers=headers)
        except httpx.TransportError as e:
            logger.error("OData request error", method=method, path=path, error=str(e))
            raise

        if not response.is_success:
            logger.error(
                "OData request failed",
                method=method,
                path=path,
                status_code=response.status_code,
                response_text=response.text,
            )
            raise ODataClientError(
                f"Request failed with status code {response.status_code}",
                response.status_code,
                response.content,
            )

        logger.info("OData request succeeded", method=method, path=path,
                    status_code=response.status_code)
        return self._deserialize(response, response_type)

    def _deserialize(self, response: httpx.Response, response_type: Optional[Any]) -> Any:
        # 204 No Content and empty bodies decode to None
        if response.status_code == 204 or not response.content.strip():
            return None

        if response_type is None:
            try:
                return json.loads(response.content)
            except ValueError as e:
                raise ODataParseError(f"Response is not valid JSON: {e}", response.text) from e

        try:
            return _type_adapter(response_type).validate_json(response.content)
        except ValidationError as e:
            raise ODataParseError(
                f"Response does not match {getattr(response_type, '__name__', response_type)}: {e}",
                response.text,
            ) from e

    async def get(self, path: str, response_type: Optional[Any] = None) -> Any:
        return await self.send("GET", path, prefer=INCLUDE_ANNOTATIONS, response_type=response_type)

    async def get_with_pagination(
        self, path: str, page_size: int, response_type: Optional[Any] = None
    ) -> Any:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        return await self.send(
            "GET",
            path,
            prefer=f"{INCLUDE_ANNOTATIONS}, odata.maxpagesize={page_size}",
            response_type=response_type,
        )

    async def iter_pages(self, path: str, page_size: int) -> AsyncIterator[List[Dict[str, Any]]]:
        """
        Yield the `value` array of every page, following @odata.nextLink.

        Args:
            path: Collection path for the first page
            page_size: Maximum records per page
        """
        next_link: Optional[str] = path
        pages = 0
        while next_link:
            page = await self.get_with_pagination(next_link, page_size) or {}
            pages += 1
            yield page.get("value", [])
            next_link = page.get("@odata.nextLink")
        logger.debug("Finished paging collection", path=path, pages=pages)

    async def post(self, path: str, data: Any, response_type: Optional[Any] = None) -> Any:
        return await self.send("POST", path, data, response_type=response_type)

    async def post_and_return_representation(
        self, path: str, data: Any, response_type: Optional[Any] = None
    ) -> Any:
        """Create an entity and return the created representation"""
        return await self.send(
            "POST", path, data, prefer=RETURN_REPRESENTATION, response_type=response_type
        )

    async def patch(self, path: str, data: Any, response_type: Optional[Any] = None) -> Any:
        return await self.send("PATCH", path, data, response_type=response_type)

    async def patch_and_return_representation(
        self, path: str, data: Any, response_type: Optional[Any] = None
    ) -> Any:
        """Update an entity and return the updated representation"""
        return await self.send(
            "PATCH", path, data, prefer=RETURN_REPRESENTATION, response_type=response_type
        )

    async def delete(self, path: str) -> None:
        await self.send("DELETE", path)

    async def associate(
        self, parent_entity_path: str, navigation_property: str, related_entity_path: str
    ) -> None:
        payload = {"@odata.id": self.entity_url(related_entity_path)}
        await self.send("POST", f"{parent_entity_path}/{navigation_property}/$ref", payload)

    async def disassociate(
        self,
        parent_entity_path: str,
        navigation_property: str,
        related_entity_key: Optional[str] = None,
    ) -> None:
        await self.send("DELETE", self.ref_path(parent_entity_path, navigation_property, related_entity_key))

    @staticmethod
    def ref_path(
        parent_entity_path: str, navigation_property: str, related_entity_key: Optional[str] = None
    ) -> str:
        """Path of the $ref resource for a navigation property"""
        if related_entity_key is None:
            return f"{parent_entity_path}/{navigation_property}/$ref"
        return f"{parent_entity_path}/{navigation_property}({related_entity_key})/$ref"

    async def send_batch(self, operations: Sequence[PendingOperation]) -> List[BatchResult]:
        if not operations:
            logger.debug("Empty batch, nothing to send")
            return []

        encoded = self.codec.encode(operations)

        logger.info("Sending OData $batch request", operations=len(operations))

        try:
            response = await self._http.post(
                "$batch", content=encoded.body, headers={"Content-Type": encoded.content_type}
            )
        except httpx.TransportError as e:
            logger.error("OData $batch request error", error=str(e))
            raise

        if not response.is_success:
            logger.error(
                "OData $batch request failed",
                status_code=response.status_code,
                response_text=response.text,
            )
            raise ODataClientError(
                f"Batch request failed with status code {response.status_code}",
                response.status_code,
                response.content,
            )

        logger.info("OData $batch request succeeded", status_code=response.status_code)
        return self.codec.decode(response.content, response.headers.get("Content-Type", ""))

    def get_client_info(self) -> Dict[str, Any]:
        return {
            "type": "odata_client",
            "service_root": self.settings.service_root,
            "timeout": self.settings.request_timeout,
            "auth": self.auth_provider.get_provider_info(),
        }
