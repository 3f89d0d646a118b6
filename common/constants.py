"""Project-wide constants (e.g., CHUNK_SIZE, API endpoints, timeouts)."""

CHUNK_SIZE_BYTES: int = 10 * 1024 * 1024  # 10 MiB per multipart part
READ_BLOCK_SIZE_BYTES: int = 1024 * 1024

DEFAULT_MIME_TYPE: str = "application/octet-stream"
FILE_SERVICE: str = "downloadable"

POLAR_API_URLS: dict[str, str] = {
    "sandbox": "https://sandbox-api.polar.sh/v1",
    "production": "https://api.polar.sh/v1",
}
DEFAULT_SERVER: str = "sandbox"

API_TIMEOUT_SECONDS: float = 30.0
PART_UPLOAD_TIMEOUT_SECONDS: float = 120.0

RECEIPT_HEADER: str = "ETag"
