"""SHA-256 checksum helpers producing the base64 form the storage backend expects."""

import base64
import hashlib


def compute_checksum(data: bytes) -> str:
    """
    Compute SHA-256 checksum for given data.

    The digest is encoded with the standard base64 alphabet and keeps its
    padding, matching S3-compatible ``x-amz-checksum-sha256`` values.

    Args:
        data: Bytes to compute checksum for

    Returns:
        Base64 string representation of SHA-256 hash
    """
    digest = hashlib.sha256(data).digest()
    return base64.b64encode(digest).decode("ascii")

