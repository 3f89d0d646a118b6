"""Data types shared by the transfer engine (requests, part plans, sessions)."""

from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterable, BinaryIO, Callable, Dict, List, Union

ByteSource = Union[BinaryIO, AsyncIterable[bytes]]
ProgressCallback = Callable[[int], None]


class TransferState(str, Enum):
    """Lifecycle states of a single transfer."""
    IDLE = "idle"
    BUFFERING = "buffering"
    CHECKSUMMING = "checksumming"
    PLANNING = "planning"
    NEGOTIATING = "negotiating"
    UPLOADING_PARTS = "uploading_parts"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TransferState.DONE, TransferState.FAILED)


@dataclass(frozen=True)
class TransferRequest:
    """
    Description of one upload job.
    """
    organization_id: str
    name: str
    mime_type: str
    size: int
    source: ByteSource = field(repr=False, compare=False)


@dataclass(frozen=True)
class PartDescriptor:
    """
    One entry of a part plan: byte range [chunk_start, chunk_end) and its checksum.
    """
    number: int
    chunk_start: int
    chunk_end: int
    checksum: str

    @property
    def size(self) -> int:
        return self.chunk_end - self.chunk_start


@dataclass(frozen=True)
class PartTarget:
    """Pre-signed upload location for a single part."""
    number: int
    url: str
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SessionDescriptor:
    """
    Upload session negotiated with the Files API.
    """
    file_id: str
    upload_id: str
    path: str
    targets: List[PartTarget]


@dataclass(frozen=True)
class CompletedPart:
    """Proof of receipt for one uploaded part."""
    number: int
    receipt_token: str
    checksum: str
