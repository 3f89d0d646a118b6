"""Utility functions for CLI operations."""

import sys
from typing import Dict, Optional, TextIO

from cli.constants import GREEN, RESET


class UploadProgress:
    """Renders a single combined progress line for concurrent uploads."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self._uploaded: Dict[str, int] = {}
        self._totals: Dict[str, int] = {}

    def update(self, file_path: str, uploaded: int, total: int) -> None:
        """
        Record progress for one file and redraw the line.

        Args:
            file_path: File being uploaded
            uploaded: Bytes of that file acknowledged so far
            total: Size of that file in bytes
        """
        self._uploaded[file_path] = uploaded
        self._totals[file_path] = total
        self._display()

    def _display(self) -> None:
        uploaded = sum(self._uploaded.values())
        total = sum(self._totals.values())
        progress = (uploaded / total) * 100 if total else 100.0
        self.stream.write(
            f"\rUploading {len(self._totals)} file(s): "
            f"{format_file_size(uploaded)} / {format_file_size(total)} ({GREEN}{progress:.1f}%{RESET})"
        )
        self.stream.flush()

    def finish(self) -> None:
        """Finalize progress display with newline."""
        if self._totals:
            self.stream.write('\n')
            self.stream.flush()


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"
