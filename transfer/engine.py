"""Multipart transfer engine: buffer, checksum, plan, negotiate, upload parts, finalize."""

import asyncio
from typing import Awaitable, Callable, List, Optional, TypeVar

import httpx

from common.checksum import compute_checksum
from common.constants import (
    CHUNK_SIZE_BYTES,
    DEFAULT_MIME_TYPE,
    FILE_SERVICE,
    READ_BLOCK_SIZE_BYTES,
    RECEIPT_HEADER,
)
from common.logging_config import get_logger
from transfer.exceptions import (
    ChecksumError,
    PartUploadFailedError,
    TransferCancelledError,
    TransferError,
    TransferIOError,
    UploadRejectedError,
)
from transfer.files_api import FilesClient
from transfer.parts import plan_parts
from transfer.schemas import (
    FileCreate,
    FileCreatePart,
    FileCreateUpload,
    FileRecord,
    FileUploadCompleted,
    FileUploadCompletedPart,
)
from transfer.types import (
    CompletedPart,
    PartDescriptor,
    PartTarget,
    ProgressCallback,
    SessionDescriptor,
    TransferRequest,
    TransferState,
)

logger = get_logger(__name__)

T = TypeVar("T")


class TransferEngine:
    """
    Uploads one file to the Files API as a checksummed multipart upload.

    An engine instance drives a single transfer through
    IDLE -> BUFFERING -> CHECKSUMMING -> PLANNING -> NEGOTIATING ->
    UPLOADING_PARTS -> FINALIZING -> DONE, or into FAILED from any
    non-terminal state. Retrying means building a new engine; everything
    (checksums, plan, session) is recomputed.

    Each phase is also callable on its own.
    """

    def __init__(
        self,
        files_api: FilesClient,
        storage_client: httpx.AsyncClient,
        chunk_size: int = CHUNK_SIZE_BYTES,
        on_progress: Optional[ProgressCallback] = None,
        on_file_uploaded: Optional[Callable[[FileRecord], None]] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ):
        """
        Args:
            files_api: Client for the session create/complete endpoints
            storage_client: Client for pre-signed part PUTs (no API credentials)
            chunk_size: Part size in bytes
            on_progress: Called with cumulative bytes uploaded after each part
            on_file_uploaded: Called once with the file record on success
            cancel_event: When set, aborts the in-flight call and fails the transfer
        """
        self.files_api = files_api
        self.storage_client = storage_client
        self.chunk_size = chunk_size
        self.on_progress = on_progress
        self.on_file_uploaded = on_file_uploaded
        self.cancel_event = cancel_event
        self.state = TransferState.IDLE

    def _transition(self, state: TransferState) -> None:
        if self.state.is_terminal:
            raise TransferError(f"Cannot move from {self.state.value} to {state.value}")
        logger.debug(f"Transfer state {self.state.value} -> {state.value}")
        self.state = state

    def _check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise TransferCancelledError("Transfer cancelled")

    async def _guard(self, call: Awaitable[T]) -> T:
        """Await a remote call, aborting it if the cancellation signal fires first."""
        if self.cancel_event is None:
            return await call

        task = asyncio.ensure_future(call)
        if self.cancel_event.is_set():
            task.cancel()
            raise TransferCancelledError("Transfer cancelled")

        waiter = asyncio.ensure_future(self.cancel_event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        raise TransferCancelledError("Transfer cancelled while waiting on a remote call")

    def _notify_progress(self, uploaded: int) -> None:
        if self.on_progress is None:
            return
        try:
            self.on_progress(uploaded)
        except Exception:
            logger.warning("Progress callback raised; transfer continues", exc_info=True)

    async def prepare(self, request: TransferRequest) -> bytes:
        """
        Drain the request's byte source into memory.

        Raises:
            TransferIOError: If the source raises before EOF or the length differs from request.size
        """
        blocks: List[bytes] = []
        source = request.source
        try:
            if hasattr(source, 'read'):
                while True:
                    self._check_cancelled()
                    block = await asyncio.to_thread(source.read, READ_BLOCK_SIZE_BYTES)
                    if not block:
                        break
                    blocks.append(block)
            else:
                async for block in source:
                    self._check_cancelled()
                    blocks.append(block)
        except TransferCancelledError:
            raise
        except Exception as e:
            logger.error(f"Reading {request.name} failed: {type(e).__name__}: {e}")
            raise TransferIOError(f"Reading {request.name} failed: {e}") from e

        content = b''.join(blocks)
        if len(content) != request.size:
            raise TransferIOError(
                f"Read {len(content)} bytes from {request.name}, expected {request.size}"
            )
        return content

    @staticmethod
    def compute_checksum(data: bytes) -> str:
        """Base64 SHA-256 of data, wrapping digest failures in ChecksumError."""
        try:
            return compute_checksum(data)
        except (TypeError, ValueError) as e:
            raise ChecksumError(f"Could not compute checksum: {e}") from e

    def plan_parts(self, content: bytes) -> List[PartDescriptor]:
        try:
            return plan_parts(content, self.chunk_size)
        except TypeError as e:
            raise ChecksumError(f"Could not compute part checksums: {e}") from e

    async def negotiate_session(
        self,
        request: TransferRequest,
        whole_checksum: str,
        plan: List[PartDescriptor],
    ) -> SessionDescriptor:
        """
        Announce the file and its parts, returning one upload target per part.

        Raises:
            UploadRejectedError: If the API refuses or the targets do not match the plan
        """
        payload = FileCreate(
            organization_id=request.organization_id,
            service=FILE_SERVICE,
            name=request.name,
            size=request.size,
            mime_type=request.mime_type or DEFAULT_MIME_TYPE,
            checksum_sha256_base64=whole_checksum,
            upload=FileCreateUpload(parts=[
                FileCreatePart(
                    number=part.number,
                    chunk_start=part.chunk_start,
                    chunk_end=part.chunk_end,
                    checksum_sha256_base64=part.checksum,
                )
                for part in plan
            ]),
        )
        created = await self._guard(self.files_api.create(payload))

        targets = sorted(created.upload.parts, key=lambda target: target.number)
        if len(targets) != len(plan):
            raise UploadRejectedError(
                f"Session returned {len(targets)} part targets for {len(plan)} parts"
            )
        if [target.number for target in targets] != [part.number for part in plan]:
            raise UploadRejectedError("Session part targets do not match the part plan")
        for target in targets:
            try:
                httpx.URL(target.url)
            except httpx.InvalidURL as e:
                raise UploadRejectedError(f"Session part {target.number} has an invalid URL: {e}") from e

        logger.info(f"Upload session created: file_id={created.id} parts={len(targets)}")
        return SessionDescriptor(
            file_id=created.id,
            upload_id=created.upload.id,
            path=created.upload.path,
            targets=[
                PartTarget(number=target.number, url=target.url, headers=dict(target.headers or {}))
                for target in targets
            ],
        )

    async def upload_parts(
        self,
        content: bytes,
        plan: List[PartDescriptor],
        session: SessionDescriptor,
    ) -> List[CompletedPart]:
        """
        Upload every part, one at a time, in ascending part order.

        Parts must never be sent concurrently: the storage backend verifies
        SHA-256 checksums and rejects parts that arrive out of sequence.

        Raises:
            PartUploadFailedError: On the first part that fails; later parts are not sent
        """
        targets = {target.number: target for target in session.targets}
        completed: List[CompletedPart] = []
        uploaded = 0

        for part in plan:
            self._check_cancelled()
            target = targets.get(part.number)
            if target is None:
                raise PartUploadFailedError(part.number, reason="no upload target")

            completed.append(await self._upload_part(content, part, target))
            uploaded += part.size
            self._notify_progress(uploaded)

        return completed

    async def _upload_part(
        self,
        content: bytes,
        part: PartDescriptor,
        target: PartTarget,
    ) -> CompletedPart:
        data = content[part.chunk_start:part.chunk_end]
        logger.debug(f"Uploading part {part.number} ({len(data)} bytes)")
        try:
            response = await self._guard(
                self.storage_client.put(target.url, content=data, headers=target.headers)
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Part {part.number} upload failed: {type(e).__name__}: {e}")
            raise PartUploadFailedError(part.number, reason=f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            logger.error(f"Part {part.number} rejected by storage: status={response.status_code}")
            raise PartUploadFailedError(part.number, status=response.status_code)

        receipt = response.headers.get(RECEIPT_HEADER)
        if not receipt:
            logger.error(f"Part {part.number} response carried no {RECEIPT_HEADER}")
            raise PartUploadFailedError(part.number, reason="missing receipt")

        return CompletedPart(number=part.number, receipt_token=receipt, checksum=part.checksum)

    async def finalize(
        self,
        session: SessionDescriptor,
        completed: List[CompletedPart],
    ) -> FileRecord:
        """
        Complete the upload session.

        Raises:
            FinalizeFailedError: If the API call fails; not retried
        """
        payload = FileUploadCompleted(
            id=session.upload_id,
            path=session.path,
            parts=[
                FileUploadCompletedPart(
                    number=part.number,
                    checksum_etag=part.receipt_token,
                    checksum_sha256_base64=part.checksum,
                )
                for part in completed
            ],
        )
        return await self._guard(self.files_api.uploaded(session.file_id, payload))

    async def run(self, request: TransferRequest) -> FileRecord:
        """
        Run the whole transfer.

        Returns:
            The file record returned by the Files API

        Raises:
            TransferError: The error of the phase that failed
        """
        if self.state is not TransferState.IDLE:
            raise TransferError(f"Transfer engine already used (state={self.state.value})")

        logger.info(f"Starting transfer: {request.name} ({request.size} bytes)")
        try:
            self._check_cancelled()
            self._transition(TransferState.BUFFERING)
            content = await self.prepare(request)

            self._transition(TransferState.CHECKSUMMING)
            whole_checksum = self.compute_checksum(content)

            self._transition(TransferState.PLANNING)
            plan = self.plan_parts(content)

            self._transition(TransferState.NEGOTIATING)
            session = await self.negotiate_session(request, whole_checksum, plan)

            self._transition(TransferState.UPLOADING_PARTS)
            completed = await self.upload_parts(content, plan, session)

            self._check_cancelled()
            self._transition(TransferState.FINALIZING)
            record = await self.finalize(session, completed)
        except asyncio.CancelledError:
            self.state = TransferState.FAILED
            raise
        except Exception as e:
            logger.error(f"Transfer of {request.name} failed in {self.state.value}: {e}")
            self.state = TransferState.FAILED
            raise

        self._transition(TransferState.DONE)
        logger.info(f"Transfer complete: {request.name} [file_id={record.id}]")

        if self.on_file_uploaded is not None:
            try:
                self.on_file_uploaded(record)
            except Exception:
                logger.warning("File uploaded callback raised", exc_info=True)
        return record


async def transfer(
    request: TransferRequest,
    files_api: FilesClient,
    storage_client: httpx.AsyncClient,
    on_progress: Optional[ProgressCallback] = None,
    chunk_size: int = CHUNK_SIZE_BYTES,
    cancel_event: Optional[asyncio.Event] = None,
) -> FileRecord:
    """Upload one file with a fresh engine and return its file record."""
    engine = TransferEngine(
        files_api,
        storage_client,
        chunk_size=chunk_size,
        on_progress=on_progress,
        cancel_event=cancel_event,
    )
    return await engine.run(request)
