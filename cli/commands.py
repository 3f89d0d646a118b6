"""Command handler functions for CLI operations."""

from typing import Optional

from common.logging_config import get_logger
from cli.config import Config
from cli.models import (
    ConfigCommand,
    OrgCommand,
    ServerCommand,
    TokenCommand,
    UploadCommand,
)
from cli.uploader import Uploader

logger = get_logger(__name__)


_uploader: Optional[Uploader] = None


def get_uploader() -> Uploader:
    """
    Get or create global Uploader instance.

    Returns:
        Uploader instance
    """
    global _uploader
    if _uploader is None:
        logger.debug("Creating new Uploader instance")
        _uploader = Uploader(Config())
    return _uploader


def init_uploader(config: Config) -> Uploader:
    """Replace the global Uploader with one bound to the given config."""
    global _uploader
    _uploader = Uploader(config)
    return _uploader


def handle_upload(cmd: UploadCommand, uploader: Optional[Uploader] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with file_list
        uploader: Optional Uploader for dependency injection (testing)

    Returns:
        Success or error message with upload results
    """
    logger.info(f"Executing upload command: {len(cmd.file_list)} files")
    if uploader is None:
        uploader = get_uploader()
    result = uploader.upload_files(list(cmd.file_list))
    logger.debug("Upload command completed")
    return result


def handle_server(cmd: ServerCommand, uploader: Optional[Uploader] = None) -> str:
    if uploader is None:
        uploader = get_uploader()
    return uploader.set_server(cmd.server)


def handle_token(cmd: TokenCommand, uploader: Optional[Uploader] = None) -> str:
    if uploader is None:
        uploader = get_uploader()
    return uploader.set_token(cmd.token)


def handle_org(cmd: OrgCommand, uploader: Optional[Uploader] = None) -> str:
    if uploader is None:
        uploader = get_uploader()
    return uploader.set_organization(cmd.organization_id)


def handle_config(cmd: ConfigCommand, uploader: Optional[Uploader] = None) -> str:
    if uploader is None:
        uploader = get_uploader()
    return uploader.show_config()
