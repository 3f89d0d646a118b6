"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class UploadCommand:
    """Upload local files to the configured organization."""

    file_list: tuple[str, ...]
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class ServerCommand:
    """Select the sandbox or production environment."""

    server: str
    command: Literal["server"] = "server"


@dataclass(frozen=True)
class TokenCommand:
    """Store the Files API access token."""

    token: str
    command: Literal["token"] = "token"


@dataclass(frozen=True)
class OrgCommand:
    """Select the organization uploads belong to."""

    organization_id: str
    command: Literal["org"] = "org"


@dataclass(frozen=True)
class ConfigCommand:
    """Show the current configuration."""

    command: Literal["config"] = "config"


CommandRequest = (
    UploadCommand
    | ServerCommand
    | TokenCommand
    | OrgCommand
    | ConfigCommand
)
