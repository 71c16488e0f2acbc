"""
Pytest fixtures for assetpub tests.
"""

import io
import logging
from datetime import datetime, timedelta, timezone

import pytest


class RecordingStore:
    """In-memory object store that records every call."""

    def __init__(self, fail_keys=None):
        self.objects = {}
        self.content_types = {}
        self.uploads = []
        self.downloads = []
        self.fail_keys = set(fail_keys or ())

    def upload_object(self, key, data, content_type='application/octet-stream'):
        from assetpub.errors import StorageError

        if key in self.fail_keys:
            raise StorageError(f"Cannot upload {key}: simulated failure")
        self.uploads.append(key)
        self.objects[key] = data
        self.content_types[key] = content_type

    def download_object(self, key):
        from assetpub.errors import StorageError

        self.downloads.append(key)
        if key not in self.objects:
            raise StorageError(f"Cannot download {key}: NoSuchKey")
        return self.objects[key]

    def delete_object(self, key):
        self.objects.pop(key, None)


def _encode_image(size=(300, 150), fmt='PNG', mode='RGB', color='red'):
    from PIL import Image

    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_image_bytes():
    """Fixture providing a factory that encodes a solid-colour image."""
    return _encode_image


@pytest.fixture
def store():
    """Fixture providing an in-memory recording store."""
    return RecordingStore()


@pytest.fixture
def codec():
    """Fixture providing the Pillow codec."""
    from assetpub.image_codec import PillowCodec

    return PillowCodec()


@pytest.fixture
def sample_jpeg_bytes():
    """Fixture providing a 300x150 JPEG."""
    return _encode_image((300, 150), fmt='JPEG')


@pytest.fixture
def sample_png_bytes():
    """Fixture providing a 300x150 PNG with transparency."""
    return _encode_image((300, 150), fmt='PNG', mode='RGBA', color=(255, 0, 0, 128))


@pytest.fixture
def fixed_clock():
    """Fixture providing a deterministic clock for metadata dates."""
    moment = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=-4)))
    return lambda: moment


@pytest.fixture
def site(tmp_path):
    """Fixture providing a site root with an empty inbox."""
    inbox = tmp_path / 'content' / 'uploads' / '_inbox'
    inbox.mkdir(parents=True)
    return tmp_path


@pytest.fixture
def pipeline_config(site):
    """Fixture providing a config rooted at the site with two variants."""
    from assetpub.pipeline_config import PipelineConfig
    from assetpub.variant_planner import VariantSpec

    return PipelineConfig.for_site(
        site,
        variants=(VariantSpec('mobile', 200), VariantSpec('desktop_lg', 1200)),
    )


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    return logging.getLogger('test')


@pytest.fixture
def mock_boto3_client(mocker):
    """Fixture providing a mocked boto3 client."""
    mock_client = mocker.MagicMock()
    mocker.patch('assetpub.s3_client.boto3.client', return_value=mock_client)
    return mock_client
