"""Document listing."""
from typing import List, Optional

from ..api.async_client import AsyncAPIClient
from ..api.request import ResponseHandler
from ..exceptions import PreconditionError, ServerError
from ..logging import get_logger
from ..session.models import Session
from .models import DocumentDescriptor

DOCUMENTS_ENDPOINT = '/documents/'


class DocumentService:
    """Lists the account documents available for download."""

    def __init__(self, client: AsyncAPIClient):
        self._client = client
        self._logger = get_logger('robinpy.documents')

    async def list_documents(self, session: Session) -> List[DocumentDescriptor]:
        """
        Fetch every document descriptor, following pagination.

        Raises:
            PreconditionError: If the session is not valid
            NetworkError: If a request cannot be completed
            ServerError: If the server rejects a request or returns malformed data
        """
        if session is None or not session.is_valid():
            raise PreconditionError("A valid session is required to list documents")

        documents: List[DocumentDescriptor] = []
        url: Optional[str] = DOCUMENTS_ENDPOINT
        seen = set()

        while url:
            if url in seen:
                raise ServerError(f"Pagination loop detected at {url}")
            seen.add(url)

            result = await self._client.send('GET', url, token=session.token)
            payload = ResponseHandler.translate(result)

            if isinstance(payload, list):
                entries, url = payload, None
            elif isinstance(payload, dict):
                entries, url = payload.get('results') or [], payload.get('next')
            else:
                raise ServerError("Unexpected /documents/ response")

            try:
                documents.extend(DocumentDescriptor.from_dict(entry) for entry in entries)
            except (KeyError, TypeError) as e:
                raise ServerError(f"Malformed document entry: {e}") from e

        self._logger.info(f"Found {len(documents)} documents")
        return documents
