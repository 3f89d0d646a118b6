"""Drives multipart uploads from the CLI and formats their results."""

import asyncio
import os
from typing import Optional

import httpx

from common.logging_config import get_logger
from cli.config import Config
from cli.utils import UploadProgress, format_file_size
from transfer.exceptions import (
    FinalizeFailedError,
    PartUploadFailedError,
    TransferCancelledError,
    TransferError,
    UploadRejectedError,
)
from transfer.files import upload_files
from transfer.files_api import FilesClient, build_storage_client

logger = get_logger(__name__)


class Uploader:
    """Uploads local files for the configured organization and environment."""

    def __init__(
        self,
        config: Config,
        api_transport: Optional[httpx.AsyncBaseTransport] = None,
        storage_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize uploader.

        Args:
            config: Configuration instance
            api_transport: Optional transport for Files API calls (testing)
            storage_transport: Optional transport for part uploads (testing)
        """
        self.config = config
        self.api_transport = api_transport
        self.storage_transport = storage_transport

    def set_server(self, server: str) -> str:
        try:
            self.config.set_server(server)
        except ValueError as e:
            return f"Error: {e}"
        logger.info(f"Server set to {server}")
        return f"Server set to {server} ({self.config.get_base_url()})"

    def set_token(self, token: str) -> str:
        self.config.set_access_token(token)
        logger.info("Access token updated")
        return "Access token saved to config."

    def set_organization(self, organization_id: str) -> str:
        self.config.set_organization_id(organization_id)
        logger.info(f"Organization set to {organization_id}")
        return f"Organization set to {organization_id}"

    def show_config(self) -> str:
        """Format the current configuration, hiding the access token."""
        token = self.config.get_access_token()
        return '\n'.join([
            f"Server:       {self.config.get_server()} ({self.config.get_base_url()})",
            f"Organization: {self.config.get_organization_id() or '(not set)'}",
            f"Access token: {'set' if token else '(not set)'}",
            f"Part size:    {format_file_size(self.config.get_chunk_size())}",
            f"Timeout:      {self.config.get_timeout()}s",
        ])

    def _format_error(self, error: TransferError) -> str:
        """Map transfer errors to user-friendly messages."""
        if isinstance(error, PartUploadFailedError):
            if error.status is not None:
                return f"storage rejected part {error.part_number} (HTTP {error.status})"
            return f"part {error.part_number} failed: {error.reason}"
        if isinstance(error, UploadRejectedError):
            if error.status in (401, 403):
                return "not authorized. Check the access token with: token <access-token>"
            return f"upload rejected: {error}"
        if isinstance(error, FinalizeFailedError):
            return f"could not complete upload: {error}"
        if isinstance(error, TransferCancelledError):
            return "cancelled"
        return str(error)

    async def _upload(self, file_paths: list[str], progress: UploadProgress) -> dict:
        files_api = FilesClient.for_server(
            self.config.get_server(),
            self.config.get_access_token(),
            timeout=self.config.get_timeout(),
            transport=self.api_transport,
        )
        storage_client = build_storage_client(transport=self.storage_transport)
        async with files_api, storage_client:
            return await upload_files(
                file_paths,
                self.config.get_organization_id(),
                files_api,
                storage_client,
                on_progress=progress.update,
                chunk_size=self.config.get_chunk_size(),
            )

    def upload_files(self, file_paths: list[str]) -> str:
        """
        Upload files, one concurrent transfer per file.

        Args:
            file_paths: Paths of local files

        Returns:
            Formatted result message with upload status for each file
        """
        if not self.config.get_access_token():
            return "Error: No access token. Please run: token <access-token>"
        if not self.config.get_organization_id():
            return "Error: No organization selected. Please run: org <organization-id>"

        results = []
        valid_paths = []
        for file_path in file_paths:
            if not os.path.exists(file_path):
                results.append(f"Error: File not found: {file_path}")
            elif not os.path.isfile(file_path):
                results.append(f"Error: Not a file: {file_path}")
            else:
                valid_paths.append(file_path)

        if not valid_paths:
            return '\n'.join(results) if results else "No files uploaded."

        progress = UploadProgress()
        try:
            outcome = asyncio.run(self._upload(valid_paths, progress))
        except TransferError as e:
            logger.error(f"Upload aborted: {e}", exc_info=True)
            return f"Error: {self._format_error(e)}"
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Upload aborted: {e}", exc_info=True)
            return f"Error: {e}"
        finally:
            progress.finish()

        for file_path in valid_paths:
            result = outcome[file_path]
            if isinstance(result, TransferError):
                results.append(f"Error uploading {file_path}: {self._format_error(result)}")
            else:
                results.append(
                    f"Uploaded: {result.name or os.path.basename(file_path)} "
                    f"(ID: {result.id[:8]}..., "
                    f"Size: {format_file_size(os.path.getsize(file_path))})"
                )

        return '\n'.join(results)
