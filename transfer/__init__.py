"""Chunked, checksum-verified multipart file transfer to the Files API."""

from transfer.engine import TransferEngine, transfer
from transfer.exceptions import (
    ChecksumError,
    FinalizeFailedError,
    PartUploadFailedError,
    TransferCancelledError,
    TransferError,
    TransferIOError,
    UploadRejectedError,
)
from transfer.files_api import FilesClient, build_storage_client
from transfer.parts import part_ranges, plan_parts
from transfer.types import (
    CompletedPart,
    PartDescriptor,
    PartTarget,
    SessionDescriptor,
    TransferRequest,
    TransferState,
)

__all__ = [
    "TransferEngine",
    "transfer",
    "FilesClient",
    "build_storage_client",
    "part_ranges",
    "plan_parts",
    "TransferRequest",
    "TransferState",
    "PartDescriptor",
    "PartTarget",
    "SessionDescriptor",
    "CompletedPart",
    "TransferError",
    "TransferIOError",
    "ChecksumError",
    "UploadRejectedError",
    "PartUploadFailedError",
    "FinalizeFailedError",
    "TransferCancelledError",
]
