"""Tests for CLI configuration module."""

import json

import pytest

from cli.config import Config
from common.constants import CHUNK_SIZE_BYTES


def test_config_creates_default_file(tmp_path):
    """Test that config file is created with defaults if missing."""
    config_path = tmp_path / '.polar-migrate' / 'config.json'
    config = Config(config_path)

    assert config_path.exists()

    assert config.data['server'] in ('sandbox', 'production')
    assert config.data['timeout'] == 30
    assert config.data['chunk_size'] == CHUNK_SIZE_BYTES
    assert 'access_token' not in config.data
    assert 'organization_id' not in config.data


def test_config_loads_existing_file(tmp_path):
    """Test loading existing config file."""
    config_path = tmp_path / '.polar-migrate' / 'config.json'
    config_path.parent.mkdir(parents=True)

    existing_data = {
        'access_token': 'polar_oat_abc',
        'organization_id': 'org_9',
        'server': 'production',
    }
    with open(config_path, 'w') as f:
        json.dump(existing_data, f)

    config = Config(config_path)

    assert config.get_access_token() == 'polar_oat_abc'
    assert config.get_organization_id() == 'org_9'
    assert config.get_server() == 'production'
    assert config.get_base_url() == 'https://api.polar.sh/v1'

    assert config.get_timeout() == 30
    assert config.get_chunk_size() == CHUNK_SIZE_BYTES


def test_config_save_and_get_access_token(temp_config):
    """Test saving and retrieving the access token."""
    assert temp_config.get_access_token() is None

    temp_config.set_access_token('polar_oat_xyz')

    assert temp_config.get_access_token() == 'polar_oat_xyz'
    with open(temp_config.config_path, 'r') as f:
        data = json.load(f)
    assert data['access_token'] == 'polar_oat_xyz'


def test_config_set_organization(temp_config):
    temp_config.set_organization_id('org_1')

    reloaded = Config(temp_config.config_path)
    assert reloaded.get_organization_id() == 'org_1'


def test_config_set_server(temp_config):
    temp_config.set_server('production')
    assert temp_config.get_base_url() == 'https://api.polar.sh/v1'

    temp_config.set_server('sandbox')
    assert temp_config.get_base_url() == 'https://sandbox-api.polar.sh/v1'


def test_config_rejects_unknown_server(temp_config):
    with pytest.raises(ValueError, match="Unknown server"):
        temp_config.set_server('staging')


def test_config_unknown_server_in_file_falls_back(tmp_path):
    config_path = tmp_path / 'config.json'
    config_path.write_text(json.dumps({'server': 'staging'}))

    config = Config(config_path)

    assert config.get_server() == 'sandbox'
    assert config.get_base_url() == 'https://sandbox-api.polar.sh/v1'


def test_config_handles_corrupted_file(tmp_path):
    """Test recovery from corrupted config file."""
    config_path = tmp_path / '.polar-migrate' / 'config.json'
    config_path.parent.mkdir(parents=True)

    with open(config_path, 'w') as f:
        f.write('{ invalid json content')

    config = Config(config_path)
    assert config.data['timeout'] == 30
    assert config.get_access_token() is None

    backup_path = config_path.with_suffix('.json.bak')
    assert backup_path.exists()


def test_config_directory_created_if_missing(tmp_path):
    """Test that config directory is created if it doesn't exist."""
    config_path = tmp_path / 'nested' / 'deep' / '.polar-migrate' / 'config.json'

    assert not config_path.parent.exists()

    Config(config_path)
    assert config_path.parent.exists()
    assert config_path.exists()
