"""Shared pytest fixtures for all tests."""

import asyncio
import json
from typing import Optional

import httpx
import pytest

from cli.config import Config
from transfer.files_api import FilesClient

API_BASE_URL = 'https://api.test/v1'
STORAGE_BASE_URL = 'https://storage.test'


class FakePolar:
    """
    In-memory stand-in for the Files API and the pre-signed storage sink.

    Every call is appended to ``events`` so tests can assert ordering
    across both endpoints.
    """

    def __init__(self):
        self.events: list[tuple] = []
        self.created_body: Optional[dict] = None
        self.finalized_body: Optional[dict] = None
        self.received_parts: dict[int, bytes] = {}
        self.part_headers: dict[int, httpx.Headers] = {}
        self.fail_part: Optional[int] = None
        self.fail_status = 500
        self.omit_etag_part: Optional[int] = None
        self.extra_targets = 0
        self.target_url: Optional[str] = None
        self.create_status = 201
        self.finalize_status = 200
        self.hang_part: Optional[int] = None
        self.hang_started = asyncio.Event()
        self.in_flight = 0
        self.max_in_flight = 0

    def api_handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if request.method == 'POST' and path.endswith('/files'):
            body = json.loads(request.content)
            self.created_body = body
            self.events.append(('create', body['name']))
            if self.create_status >= 400:
                return httpx.Response(self.create_status, json={'detail': 'Rejected'})
            parts = [
                {
                    'number': part['number'],
                    'url': self.target_url or f"{STORAGE_BASE_URL}/upload/{part['number']}?X-Amz-Signature=abc",
                    'headers': {'x-amz-checksum-sha256': part['checksumSha256Base64']},
                }
                for part in body['upload']['parts']
            ]
            for extra in range(self.extra_targets):
                parts.append({'number': len(parts) + 1, 'url': f"{STORAGE_BASE_URL}/upload/extra{extra}"})
            return httpx.Response(self.create_status, json={
                'id': 'file_123',
                'name': body['name'],
                'upload': {'id': 'upload_456', 'path': f"org/{body['name']}", 'parts': parts},
            })
        if request.method == 'POST' and path.endswith('/uploaded'):
            body = json.loads(request.content)
            self.finalized_body = body
            self.events.append(('finalize', len(body['parts'])))
            if self.finalize_status >= 400:
                return httpx.Response(self.finalize_status, json={'detail': 'Boom'})
            return httpx.Response(self.finalize_status, json={
                'id': 'file_123',
                'name': self.created_body['name'] if self.created_body else 'unknown',
                'size': self.created_body['size'] if self.created_body else 0,
                'mimeType': self.created_body['mimeType'] if self.created_body else None,
                'isUploaded': True,
                'organizationId': 'org_1',
            })
        return httpx.Response(404)

    async def storage_handler(self, request: httpx.Request) -> httpx.Response:
        number = int(request.url.path.rsplit('/', 1)[-1])
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.events.append(('put', number))
            await asyncio.sleep(0)
            if number == self.hang_part:
                self.hang_started.set()
                await asyncio.sleep(30)
            self.received_parts[number] = request.content
            self.part_headers[number] = request.headers
            if number == self.fail_part:
                return httpx.Response(self.fail_status)
            if number == self.omit_etag_part:
                return httpx.Response(200)
            return httpx.Response(200, headers={'ETag': f'"etag-{number}"'})
        finally:
            self.in_flight -= 1

    def put_numbers(self) -> list[int]:
        return [event[1] for event in self.events if event[0] == 'put']

    def finalize_called(self) -> bool:
        return any(event[0] == 'finalize' for event in self.events)


@pytest.fixture
def fake_polar():
    """Fresh fake Files API and storage sink."""
    return FakePolar()


@pytest.fixture
def files_api(fake_polar):
    """FilesClient wired to the fake Files API."""
    session = httpx.AsyncClient(
        base_url=API_BASE_URL,
        headers={'Authorization': 'Bearer polar_oat_test'},
        transport=httpx.MockTransport(fake_polar.api_handler),
    )
    return FilesClient(session)


@pytest.fixture
def storage_client(fake_polar):
    """AsyncClient wired to the fake storage sink."""
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_polar.storage_handler))


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Returns:
        Path to temporary .polar-migrate directory
    """
    config_dir = tmp_path / '.polar-migrate'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """Config instance backed by a temp config file."""
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing file uploads.

    Returns:
        Path to sample PDF-named file
    """
    file_path = tmp_path / 'ebook.pdf'
    file_path.write_bytes(b'%PDF-1.4 sample content for testing')
    return file_path


@pytest.fixture
def multiple_sample_files(tmp_path):
    """
    Create multiple sample files for testing bulk uploads.

    Returns:
        List of Paths to sample files
    """
    files = []
    for i in range(3):
        file_path = tmp_path / f'track{i}.mp3'
        file_path.write_bytes(bytes([i]) * (1000 + i))
        files.append(file_path)
    return files
