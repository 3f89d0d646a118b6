"""Pydantic schemas for the Files API upload endpoints."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Base model exchanging camelCase keys on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileCreatePart(_CamelModel):
    """Part entry announced when creating an upload session."""
    number: int
    chunk_start: int
    chunk_end: int
    checksum_sha256_base64: str = Field(alias="checksumSha256Base64")


class FileCreateUpload(_CamelModel):
    parts: List[FileCreatePart]


class FileCreate(_CamelModel):
    """Request model for POST /files."""
    organization_id: str
    service: str
    name: str
    size: int
    mime_type: str
    checksum_sha256_base64: str = Field(alias="checksumSha256Base64")
    upload: FileCreateUpload


class FileUploadPart(_CamelModel):
    """Pre-signed target returned for each announced part."""
    number: int
    url: str
    headers: Optional[Dict[str, str]] = None


class FileUploadSession(_CamelModel):
    id: str
    path: str
    parts: List[FileUploadPart]


class FileUpload(_CamelModel):
    """Response model for POST /files."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    upload: FileUploadSession


class FileUploadCompletedPart(_CamelModel):
    number: int
    checksum_etag: str
    checksum_sha256_base64: Optional[str] = Field(default=None, alias="checksumSha256Base64")


class FileUploadCompleted(_CamelModel):
    """Request model for POST /files/{id}/uploaded."""
    id: str
    path: str
    parts: List[FileUploadCompletedPart]


class FileRecord(_CamelModel):
    """Durable file record returned once an upload is completed."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    name: Optional[str] = None
    size: Optional[int] = None
    mime_type: Optional[str] = None
    is_uploaded: Optional[bool] = None
