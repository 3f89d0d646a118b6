"""Exception taxonomy for the multipart transfer engine."""

from typing import Optional


class TransferError(Exception):
    """
    Base exception class for all transfer-related errors.
    """
    pass


class TransferIOError(TransferError):
    """
    Raised when the local byte source fails before EOF or its length
    disagrees with the declared size.
    """
    pass


class ChecksumError(TransferError):
    """
    Raised when a digest could not be computed.
    """
    pass


class UploadRejectedError(TransferError):
    """
    Raised when the Files API refuses the upload session or returns a
    malformed session descriptor.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class PartUploadFailedError(TransferError):
    """
    Raised when the storage backend rejects a part or returns an unusable
    response for it.
    """

    def __init__(
        self,
        part_number: int,
        status: Optional[int] = None,
        reason: Optional[str] = None
    ):
        self.part_number = part_number
        self.status = status
        self.reason = reason
        detail = f"status={status}" if status is not None else reason
        super().__init__(f"Upload of part {part_number} failed: {detail}")


class FinalizeFailedError(TransferError):
    """
    Raised when completing the upload session fails. Terminal, never retried.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class TransferCancelledError(TransferError):
    """
    Raised when the caller's cancellation signal aborts a transfer.
    """
    pass
