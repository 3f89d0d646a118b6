"""Deterministic partitioning of a content buffer into multipart upload parts."""

from typing import Iterator, List, Tuple

from common.checksum import compute_checksum
from common.constants import CHUNK_SIZE_BYTES
from transfer.types import PartDescriptor


def part_ranges(total_size: int, chunk_size: int = CHUNK_SIZE_BYTES) -> Iterator[Tuple[int, int, int]]:
    """
    Yield (number, chunk_start, chunk_end) for every part of a file.

    There are always ``total_size // chunk_size + 1`` parts, numbered from 1.
    When the size is an exact multiple of the chunk size (including zero) the
    last part is empty, with chunk_start == chunk_end == total_size.

    Args:
        total_size: File size in bytes
        chunk_size: Maximum part size in bytes

    Raises:
        ValueError: If chunk_size is not positive or total_size is negative
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if total_size < 0:
        raise ValueError(f"total_size must not be negative, got {total_size}")

    part_count = total_size // chunk_size + 1
    for number in range(1, part_count + 1):
        chunk_start = (number - 1) * chunk_size
        chunk_end = min(number * chunk_size, total_size)
        yield number, chunk_start, chunk_end


def plan_parts(content: bytes, chunk_size: int = CHUNK_SIZE_BYTES) -> List[PartDescriptor]:
    """
    Split content into ordered parts, each carrying the checksum of its slice.

    Args:
        content: Fully materialized file content
        chunk_size: Maximum part size in bytes

    Returns:
        Part plan in ascending part-number order
    """
    return [
        PartDescriptor(
            number=number,
            chunk_start=chunk_start,
            chunk_end=chunk_end,
            checksum=compute_checksum(content[chunk_start:chunk_end]),
        )
        for number, chunk_start, chunk_end in part_ranges(len(content), chunk_size)
    ]
