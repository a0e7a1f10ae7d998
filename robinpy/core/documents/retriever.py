"""
Throttled sequential document retriever.

Documents are fetched one at a time: the server applies a single rate
limit to the whole account, so parallel requests would only lengthen the
cooldown. When a request is throttled the retriever sleeps for the
advertised time plus a base delay and asks for the same document again.
"""
import os
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

import aiofiles

from ..api.async_client import AsyncAPIClient, StreamResponse
from ..api.request import ResponseHandler
from ..api.retry import ThrottleStrategy
from ..exceptions import (
    FileSystemError,
    PreconditionError,
    ServerError,
    ThrottleLimitError,
)
from ..logging import get_logger
from ..session.models import Session
from .models import DocumentDescriptor

CHUNK_SIZE = 65536


class ThrottledDocumentRetriever:
    """
    Downloads account documents to ``<folder>/<type>/<id>.pdf``.

    Example:
        >>> retriever = ThrottledDocumentRetriever(client)
        >>> paths = await retriever.download_all(session, documents, "statements")
    """

    def __init__(
        self,
        client: AsyncAPIClient,
        throttle: Optional[ThrottleStrategy] = None,
        chunk_size: int = CHUNK_SIZE,
        monotonic: Callable[[], float] = time.monotonic
    ):
        """
        Args:
            client: API transport
            throttle: Throttling policy (built from client.config.throttle if omitted)
            chunk_size: Bytes per streamed chunk
            monotonic: Clock used to enforce a throttling deadline
        """
        self._client = client
        self._throttle = throttle or ThrottleStrategy(client.config.throttle)
        self._chunk_size = chunk_size
        self._monotonic = monotonic
        self._logger = get_logger('robinpy.documents')

    @staticmethod
    def _mkdir(path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileSystemError(f"Cannot create directory {path}: {e}") from e

    async def download_all(
        self,
        session: Session,
        documents: Iterable[DocumentDescriptor],
        target_folder: Union[str, Path]
    ) -> List[Path]:
        """
        Download every document, strictly in order.

        Args:
            session: Valid session providing the bearer token
            documents: Descriptors to fetch
            target_folder: Root folder, created if missing

        Returns:
            Paths of the written files, in input order

        Raises:
            PreconditionError: If the session is not valid
            NetworkError: If a transfer fails; earlier files are kept
            ServerError: If a download is rejected for a reason other than throttling
            ThrottleLimitError: If a configured throttling cap is exhausted
            FileSystemError: If a directory or file cannot be written
        """
        if session is None or not session.is_valid():
            raise PreconditionError("A valid session is required to download documents")

        folder = Path(target_folder)
        self._mkdir(folder)

        written: List[Path] = []
        for document in documents:
            written.append(await self.download(session, document, folder))

        self._logger.info(f"Downloaded {len(written)} documents to {folder}")
        return written

    async def download(
        self,
        session: Session,
        document: DocumentDescriptor,
        folder: Path
    ) -> Path:
        """Download one document, waiting out throttling as needed."""
        self._mkdir(folder / document.type)
        target = document.target_path(folder)

        attempt = 0
        started = self._monotonic()

        while True:
            attempt += 1
            async with self._client.stream(document.download_url, token=session.token) as response:
                if response.ok:
                    await self._write(response, target)
                    self._logger.debug(f"Document {document.id} saved to {target}")
                    return target

                status = response.status
                body = await response.text()

            advertised = self._throttle.parse_wait(body)
            if advertised is None:
                message = ResponseHandler.extract_message(body) or f"HTTP {status}"
                raise ServerError(
                    f"Download of document {document.id} failed: {message}",
                    status=status,
                    body=body
                )

            delay = self._throttle.delay_for(advertised)
            elapsed = self._monotonic() - started + delay
            if not self._throttle.should_retry(attempt, elapsed):
                raise ThrottleLimitError(
                    f"Document {document.id} still throttled after {attempt} attempts",
                    document_id=document.id
                )

            self._logger.warning(
                f"Throttled on document {document.id}, retrying in {delay:g}s (attempt {attempt})"
            )
            await self._throttle.wait_async(delay)

    async def _write(self, response: StreamResponse, target: Path) -> None:
        """Stream the body into a .part file and move it onto target."""
        partial = target.with_name(target.name + '.part')
        try:
            async with aiofiles.open(partial, 'wb') as f:
                async for chunk in response.iter_chunks(self._chunk_size):
                    await f.write(chunk)
            os.replace(partial, target)
        except OSError as e:
            self._discard(partial)
            raise FileSystemError(f"Cannot write {target}: {e}") from e
        except BaseException:
            self._discard(partial)
            raise

    def _discard(self, partial: Path) -> None:
        try:
            partial.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self._logger.debug(f"Could not remove {partial}: {e}")
