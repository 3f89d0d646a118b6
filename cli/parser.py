"""Command parser for CLI input."""

import shlex

from common.constants import POLAR_API_URLS
from cli.models import (
    CommandRequest,
    ConfigCommand,
    OrgCommand,
    ServerCommand,
    TokenCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Upload/Server/Token/Org/Config)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "upload":
        return _parse_upload(tokens[1:])
    elif command_name == "server":
        return _parse_server(tokens[1:])
    elif command_name == "token":
        return _parse_token(tokens[1:])
    elif command_name == "org":
        return _parse_org(tokens[1:])
    elif command_name == "config":
        return _parse_config(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <file>...' command."""
    if not args:
        raise ParseError("upload requires at least one file")

    return UploadCommand(file_list=tuple(args))


def _parse_server(args: list[str]) -> ServerCommand:
    """Parse 'server <sandbox|production>' command."""
    if len(args) != 1:
        raise ParseError("server requires exactly 1 argument: <sandbox|production>")

    server = args[0].lower()
    if server not in POLAR_API_URLS:
        raise ParseError(f"Unknown server: {args[0]} (expected sandbox or production)")

    return ServerCommand(server=server)


def _parse_token(args: list[str]) -> TokenCommand:
    """Parse 'token <access-token>' command."""
    if len(args) != 1:
        raise ParseError("token requires exactly 1 argument: <access-token>")

    return TokenCommand(token=args[0])


def _parse_org(args: list[str]) -> OrgCommand:
    """Parse 'org <organization-id>' command."""
    if len(args) != 1:
        raise ParseError("org requires exactly 1 argument: <organization-id>")

    return OrgCommand(organization_id=args[0])


def _parse_config(args: list[str]) -> ConfigCommand:
    """Parse 'config' command."""
    if args:
        raise ParseError("config takes no arguments")

    return ConfigCommand()
