"""Tests for uploading files staged on local disk."""

import pytest

from transfer.exceptions import PartUploadFailedError, TransferIOError
from transfer.files import guess_mime_type, request_for_path, upload_file, upload_files


def test_request_for_path(sample_file):
    request = request_for_path(str(sample_file), 'org_1')

    assert request.name == 'ebook.pdf'
    assert request.mime_type == 'application/pdf'
    assert request.size == sample_file.stat().st_size
    assert request.organization_id == 'org_1'


def test_request_for_missing_path(tmp_path):
    with pytest.raises(TransferIOError):
        request_for_path(str(tmp_path / 'missing.bin'), 'org_1')


def test_unknown_extension_defaults_to_octet_stream():
    assert guess_mime_type('release.qqq') == 'application/octet-stream'


@pytest.mark.asyncio
async def test_upload_file_reports_progress(sample_file, fake_polar, files_api, storage_client):
    progress = []

    record = await upload_file(
        str(sample_file), 'org_1', files_api, storage_client,
        on_progress=lambda path, uploaded, total: progress.append((path, uploaded, total)),
        chunk_size=10,
    )

    size = sample_file.stat().st_size
    assert record.name == 'ebook.pdf'
    assert progress[-1] == (str(sample_file), size, size)
    assert b''.join(fake_polar.received_parts[n] for n in sorted(fake_polar.received_parts)) == sample_file.read_bytes()


@pytest.mark.asyncio
async def test_upload_missing_file(tmp_path, files_api, storage_client):
    with pytest.raises(TransferIOError):
        await upload_file(str(tmp_path / 'nope.zip'), 'org_1', files_api, storage_client)


@pytest.mark.asyncio
async def test_upload_files_collects_results(multiple_sample_files, fake_polar, files_api, storage_client):
    paths = [str(p) for p in multiple_sample_files]

    results = await upload_files(paths, 'org_1', files_api, storage_client)

    assert list(results) == paths
    assert all(record.id == 'file_123' for record in results.values())
    created = sorted(e[1] for e in fake_polar.events if e[0] == 'create')
    assert created == ['track0.mp3', 'track1.mp3', 'track2.mp3']


@pytest.mark.asyncio
async def test_upload_files_keeps_failures_per_file(multiple_sample_files, fake_polar, files_api, storage_client):
    fake_polar.omit_etag_part = 1
    paths = [str(p) for p in multiple_sample_files]

    results = await upload_files(paths, 'org_1', files_api, storage_client)

    assert all(isinstance(result, PartUploadFailedError) for result in results.values())
    assert not fake_polar.finalize_called()
