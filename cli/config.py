"""Configuration management for the polar-migrate CLI."""

import json
import os
import shutil
from pathlib import Path
from typing import Optional

from common.constants import API_TIMEOUT_SECONDS, CHUNK_SIZE_BYTES, DEFAULT_SERVER, POLAR_API_URLS
from common.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.polar-migrate' / 'config.json'


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "server": os.environ.get("POLAR_SERVER", DEFAULT_SERVER),
        "timeout": API_TIMEOUT_SECONDS,
        "chunk_size": CHUNK_SIZE_BYTES,
    }

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.polar-migrate/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            import tempfile
            self.config_path = Path(tempfile.gettempdir()) / '.polar-migrate' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError) as e:
                backup_path = self.config_path.with_suffix('.json.bak')
                logger.warning(f"Unreadable config {self.config_path} ({e}), backing up to {backup_path}")
                try:
                    shutil.copy(self.config_path, backup_path)
                except IOError as copy_error:
                    logger.warning(f"Could not back up config: {copy_error}")
                return self.DEFAULT_CONFIG.copy()
        else:
            config = self.DEFAULT_CONFIG.copy()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except IOError as e:
                logger.warning(f"Could not write default config: {e}")
            return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not save config: {e}")

    def get_access_token(self) -> Optional[str]:
        """
        Get stored Files API access token.

        Returns:
            Token string or None if not set
        """
        return self.data.get('access_token')

    def set_access_token(self, token: str) -> None:
        """Set access token and save to file."""
        self.data['access_token'] = token
        self.save()

    def get_organization_id(self) -> Optional[str]:
        """Get the organization files are uploaded to, or None if not set."""
        return self.data.get('organization_id')

    def set_organization_id(self, organization_id: str) -> None:
        """Set organization id and save to file."""
        self.data['organization_id'] = organization_id
        self.save()

    def get_server(self) -> str:
        """
        Get target environment.

        Returns:
            'sandbox' or 'production'; an unknown value falls back to the default
        """
        server = self.data.get('server', DEFAULT_SERVER)
        if server not in POLAR_API_URLS:
            logger.warning(f"Unknown server '{server}' in config, using {DEFAULT_SERVER}")
            return DEFAULT_SERVER
        return server

    def set_server(self, server: str) -> None:
        """
        Set target environment and save to file.

        Raises:
            ValueError: If server is not a known environment
        """
        if server not in POLAR_API_URLS:
            raise ValueError(f"Unknown server '{server}', expected one of: {', '.join(POLAR_API_URLS)}")
        self.data['server'] = server
        self.save()

    def get_base_url(self) -> str:
        """Get Files API base URL for the configured environment."""
        return POLAR_API_URLS[self.get_server()]

    def get_timeout(self) -> float:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return self.data.get('timeout', API_TIMEOUT_SECONDS)

    def get_chunk_size(self) -> int:
        """Get multipart part size in bytes."""
        return self.data.get('chunk_size', CHUNK_SIZE_BYTES)
