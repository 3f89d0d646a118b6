"""Upload files staged on local disk through the transfer engine."""

import asyncio
import mimetypes
import os
from typing import Callable, Dict, List, Optional, Union

import httpx

from common.constants import CHUNK_SIZE_BYTES, DEFAULT_MIME_TYPE
from common.logging_config import get_logger
from transfer.engine import transfer
from transfer.exceptions import TransferError, TransferIOError
from transfer.files_api import FilesClient
from transfer.schemas import FileRecord
from transfer.types import TransferRequest

logger = get_logger(__name__)

FileProgressCallback = Callable[[str, int, int], None]


def guess_mime_type(file_path: str) -> str:
    """Guess a MIME type from the file name, defaulting to application/octet-stream."""
    mime_type, _ = mimetypes.guess_type(file_path)
    return mime_type or DEFAULT_MIME_TYPE


def request_for_path(file_path: str, organization_id: str, source=None) -> TransferRequest:
    """
    Describe a local file as a transfer request.

    Args:
        file_path: Path to a regular file
        organization_id: Owning organization
        source: Open binary stream for the file (the caller closes it)

    Raises:
        TransferIOError: If the file cannot be stat'ed
    """
    try:
        size = os.stat(file_path).st_size
    except OSError as e:
        raise TransferIOError(f"Cannot stat {file_path}: {e}") from e

    return TransferRequest(
        organization_id=organization_id,
        name=os.path.basename(file_path),
        mime_type=guess_mime_type(file_path),
        size=size,
        source=source,
    )


async def upload_file(
    file_path: str,
    organization_id: str,
    files_api: FilesClient,
    storage_client: httpx.AsyncClient,
    on_progress: Optional[FileProgressCallback] = None,
    chunk_size: int = CHUNK_SIZE_BYTES,
    cancel_event: Optional[asyncio.Event] = None,
) -> FileRecord:
    """
    Upload one file from disk.

    The file is opened for the duration of the transfer and closed
    afterwards; deleting a pre-staged file stays with the caller.

    Args:
        on_progress: Called as (file_path, bytes_uploaded, total_bytes)
    """
    try:
        stream = open(file_path, 'rb')
    except OSError as e:
        raise TransferIOError(f"Cannot open {file_path}: {e}") from e

    with stream:
        request = request_for_path(file_path, organization_id, source=stream)

        def report(uploaded: int) -> None:
            if on_progress is not None:
                on_progress(file_path, uploaded, request.size)

        return await transfer(
            request,
            files_api,
            storage_client,
            on_progress=report,
            chunk_size=chunk_size,
            cancel_event=cancel_event,
        )


async def upload_files(
    file_paths: List[str],
    organization_id: str,
    files_api: FilesClient,
    storage_client: httpx.AsyncClient,
    on_progress: Optional[FileProgressCallback] = None,
    chunk_size: int = CHUNK_SIZE_BYTES,
    cancel_event: Optional[asyncio.Event] = None,
) -> Dict[str, Union[FileRecord, TransferError]]:
    """
    Upload several files, one independent transfer per file, concurrently.

    Parts within a file are still sent one at a time.

    Returns:
        Mapping of file path to its file record, or to the error that ended its transfer
    """
    results = await asyncio.gather(
        *(
            upload_file(
                path,
                organization_id,
                files_api,
                storage_client,
                on_progress=on_progress,
                chunk_size=chunk_size,
                cancel_event=cancel_event,
            )
            for path in file_paths
        ),
        return_exceptions=True,
    )

    outcome: Dict[str, Union[FileRecord, TransferError]] = {}
    for path, result in zip(file_paths, results):
        if isinstance(result, BaseException) and not isinstance(result, TransferError):
            raise result
        if isinstance(result, TransferError):
            logger.warning(f"Upload of {path} failed: {result}")
        outcome[path] = result
    return outcome
