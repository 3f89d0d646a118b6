"""HTTP client for the Files API session endpoints (create and complete uploads)."""

from typing import Optional

import httpx
from pydantic import ValidationError

from common.constants import API_TIMEOUT_SECONDS, PART_UPLOAD_TIMEOUT_SECONDS, POLAR_API_URLS
from common.logging_config import get_logger
from transfer.exceptions import FinalizeFailedError, UploadRejectedError
from transfer.schemas import FileCreate, FileRecord, FileUpload, FileUploadCompleted

logger = get_logger(__name__)


class FilesClient:
    """Files API client. Session calls are made once; nothing here retries."""

    def __init__(self, session: httpx.AsyncClient):
        """
        Initialize files client.

        Args:
            session: AsyncClient with base_url and Authorization header set
        """
        self.session = session

    @classmethod
    def for_server(
        cls,
        server: str,
        access_token: str,
        timeout: float = API_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "FilesClient":
        """
        Build a client for the sandbox or production environment.

        Args:
            server: 'sandbox' or 'production'
            access_token: Bearer token for the Files API
            timeout: Request timeout in seconds
            transport: Optional transport override (tests use httpx.MockTransport)

        Raises:
            ValueError: If server is not a known environment
        """
        if server not in POLAR_API_URLS:
            raise ValueError(f"Unknown server '{server}', expected one of: {', '.join(POLAR_API_URLS)}")
        session = httpx.AsyncClient(
            base_url=POLAR_API_URLS[server],
            headers={'Authorization': f'Bearer {access_token}'},
            timeout=timeout,
            transport=transport
        )
        logger.info(f"Initialized FilesClient [base_url={POLAR_API_URLS[server]}]")
        return cls(session)

    @staticmethod
    def _format_error(response: httpx.Response) -> str:
        """Extract a readable error detail from an API error response."""
        try:
            detail = response.json().get('detail', 'Unknown error')
        except (ValueError, AttributeError):
            detail = response.text or 'Unknown error'
        return f"{response.status_code} {detail}"

    async def create(self, payload: FileCreate) -> FileUpload:
        """
        Create a multipart upload session.

        Args:
            payload: File metadata, checksums and announced parts

        Returns:
            Session with one pre-signed target per part

        Raises:
            UploadRejectedError: On transport error, non-2xx status or malformed body
        """
        body = payload.model_dump(mode='json', by_alias=True)
        logger.debug(f"Creating upload session: name={payload.name} parts={len(payload.upload.parts)}")
        try:
            response = await self.session.post('/files', json=body)
        except httpx.HTTPError as e:
            logger.error(f"Upload session request failed: {type(e).__name__}: {e}")
            raise UploadRejectedError(f"Upload session request failed: {e}") from e

        if not response.is_success:
            message = self._format_error(response)
            logger.warning(f"Upload session rejected: {message}")
            raise UploadRejectedError(f"Upload session rejected: {message}", status=response.status_code)

        try:
            return FileUpload.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Malformed upload session response: {e}")
            raise UploadRejectedError(f"Malformed upload session response: {e}") from e

    async def uploaded(self, file_id: str, payload: FileUploadCompleted) -> FileRecord:
        """
        Mark an upload session as complete.

        Args:
            file_id: File id returned at session creation
            payload: Upload id, path and completed parts in order

        Returns:
            The stored file record

        Raises:
            FinalizeFailedError: On transport error, non-2xx status or malformed body
        """
        body = payload.model_dump(mode='json', by_alias=True)
        try:
            response = await self.session.post(f'/files/{file_id}/uploaded', json=body)
        except httpx.HTTPError as e:
            logger.error(f"Completing upload {file_id} failed: {type(e).__name__}: {e}")
            raise FinalizeFailedError(f"Completing upload failed: {e}") from e

        if not response.is_success:
            message = self._format_error(response)
            logger.error(f"Completing upload {file_id} rejected: {message}")
            raise FinalizeFailedError(f"Completing upload rejected: {message}", status=response.status_code)

        try:
            return FileRecord.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise FinalizeFailedError(f"Malformed file record: {e}") from e

    async def close(self) -> None:
        """Close the HTTP session."""
        await self.session.aclose()

    async def __aenter__(self) -> "FilesClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def build_storage_client(
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """
    Build the client used for pre-signed part uploads.

    It carries no API credentials; pre-signed URLs authenticate themselves.
    """
    return httpx.AsyncClient(
        timeout=timeout if timeout is not None else PART_UPLOAD_TIMEOUT_SECONDS,
        transport=transport
    )
