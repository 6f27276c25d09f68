"""
OData Client Interface

Defines contract for OData v4 clients
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from ..batch import BatchResult, PendingOperation


class IODataClient(ABC):
    """Interface for OData v4 clients"""

    @abstractmethod
    async def send(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        *,
        prefer: Optional[str] = None,
        response_type: Optional[Any] = None,
    ) -> Any:
        """
        Send one request and decode its response.

        Args:
            method: HTTP method
            path: Path relative to the service root, or an absolute URL
            body: JSON-serializable request body (None fields are omitted)
            prefer: Value of the Prefer header
            response_type: Type the JSON response is validated against

        Returns:
            Decoded response, or None for an empty (e.g. 204) response

        Raises:
            ODataClientError: If the server answers with a non-2xx status
            ODataParseError: If a 2xx body does not match response_type
        """
        pass

    @abstractmethod
    async def get(self, path: str, response_type: Optional[Any] = None) -> Any:
        """
        Retrieve an entity or a collection with all annotations included.

        Args:
            path: Resource path (e.g. "accounts(GUID)")
            response_type: Type the JSON response is validated against

        Returns:
            Decoded response
        """
        pass

    @abstractmethod
    async def get_with_pagination(
        self, path: str, page_size: int, response_type: Optional[Any] = None
    ) -> Any:
        """
        Retrieve one page of a collection with server-side paging.

        Args:
            path: Collection path (e.g. "contacts?$select=fullname")
            page_size: Maximum records per page
            response_type: Type the JSON response is validated against

        Returns:
            Decoded page, including @odata.nextLink when more pages exist
        """
        pass

    @abstractmethod
    async def post(self, path: str, data: Any, response_type: Optional[Any] = None) -> Any:
        """
        Create an entity.

        Args:
            path: Entity set path (e.g. "accounts")
            data: Entity data
            response_type: Type the JSON response is validated against

        Returns:
            Decoded response, usually None unless representation was requested
        """
        pass

    @abstractmethod
    async def patch(self, path: str, data: Any, response_type: Optional[Any] = None) -> Any:
        """
        Update an entity.

        Args:
            path: Entity path (e.g. "accounts(GUID)")
            data: Properties to update
            response_type: Type the JSON response is validated against

        Returns:
            Decoded response, usually None unless representation was requested
        """
        pass

    @abstractmethod
    async def delete(self, path: str) -> None:
        """
        Delete an entity.

        Args:
            path: Entity path (e.g. "accounts(GUID)")
        """
        pass

    @abstractmethod
    async def associate(
        self, parent_entity_path: str, navigation_property: str, related_entity_path: str
    ) -> None:
        """
        Create a relationship between two entities.

        Args:
            parent_entity_path: Parent entity path (e.g. "accounts(GUID)")
            navigation_property: Navigation property on the parent
            related_entity_path: Related entity path or absolute URL
        """
        pass

    @abstractmethod
    async def disassociate(
        self,
        parent_entity_path: str,
        navigation_property: str,
        related_entity_key: Optional[str] = None,
    ) -> None:
        """
        Remove a relationship.

        Args:
            parent_entity_path: Parent entity path
            navigation_property: Navigation property on the parent
            related_entity_key: Key of the related entity for collection-valued
                properties; None for single-valued properties
        """
        pass

    @abstractmethod
    async def send_batch(self, operations: Sequence[PendingOperation]) -> List[BatchResult]:
        """
        Send operations as one $batch request.

        Args:
            operations: Operations in submission order

        Returns:
            One result per failed part and per successful query part,
            in the order the server returned them

        Raises:
            ODataClientError: If the $batch request itself fails
        """
        pass

    @abstractmethod
    def get_client_info(self) -> Dict[str, Any]:
        """
        Get client implementation information.

        Returns:
            Client metadata (type, service root, auth provider, etc.)
        """
        pass
