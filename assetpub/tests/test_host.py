"""Tests for host operations."""

import pytest

from assetpub.errors import ValidationError
from assetpub.host import build_storage_client, run_mirror_sync, run_publish_pipeline
from assetpub.local_client import LocalClient, LocalConfig
from assetpub.s3_client import S3Client
from assetpub.s3_config import S3Config


class TestBuildStorageClient:
    """Tests for build_storage_client."""

    def test_local_wins(self, tmp_path):
        """Test that a local config is used even when S3 is configured."""
        client, base_url = build_storage_client(
            S3Config(bucket='bucket'),
            LocalConfig(root_path=str(tmp_path)),
        )

        assert isinstance(client, LocalClient)
        assert base_url is None

    def test_invalid_local_config(self, tmp_path):
        """Test that a local root pointing at a file is rejected."""
        root = tmp_path / 'file.txt'
        root.write_text('x')

        with pytest.raises(ValidationError, match='not a directory'):
            build_storage_client(local_config=LocalConfig(root_path=str(root)))

    def test_s3_without_bucket(self):
        """Test that S3 requires a bucket."""
        with pytest.raises(ValidationError, match='AWS_BUCKET_NAME'):
            build_storage_client(S3Config(bucket=None))

    def test_s3_client(self, mock_boto3_client):
        """Test that a valid S3 config yields an S3 client and public URL."""
        client, base_url = build_storage_client(S3Config(bucket='my-bucket'))

        assert isinstance(client, S3Client)
        assert base_url == 'https://s3.amazonaws.com/my-bucket'

    def test_s3_from_env(self, monkeypatch, mock_boto3_client):
        """Test that environment settings are used when no config is passed."""
        monkeypatch.setenv('AWS_BUCKET_NAME', 'env-bucket')
        monkeypatch.setenv('S3_ENDPOINT', 'http://localhost:9000')

        client, base_url = build_storage_client()

        assert client.config.bucket == 'env-bucket'
        assert base_url == 'http://localhost:9000/env-bucket'


class TestRunPublishPipeline:
    """Tests for run_publish_pipeline."""

    def test_returns_summary(self, site, pipeline_config, store, codec):
        (site / 'content' / 'uploads' / '_inbox' / 'notes.txt').write_text('hello')

        summary = run_publish_pipeline(pipeline_config, store, codec)

        assert summary == 'Successfully processed and uploaded 1 out of 1 files.'
        assert store.uploads == ['static/notes.txt']

    def test_fatal_error_reported(self, site, pipeline_config, store, codec):
        """Test that a run-level failure is returned as an error string."""
        # A file where the staging root should be
        pipeline_config.working_images_root.write_text('in the way')
        (site / 'content' / 'uploads' / '_inbox' / 'notes.txt').write_text('hello')

        summary = run_publish_pipeline(pipeline_config, store, codec)

        assert summary.startswith('Error: ')
        assert 'working directories' in summary

    def test_storage_misconfiguration(self, monkeypatch, pipeline_config):
        """Test that a missing bucket is reported instead of raised."""
        monkeypatch.delenv('AWS_BUCKET_NAME', raising=False)
        monkeypatch.delenv('S3_BUCKET', raising=False)

        summary = run_publish_pipeline(pipeline_config)

        assert summary.startswith('Error: ')


class TestRunMirrorSync:
    """Tests for run_mirror_sync."""

    def test_mirrors_published_image(self, site, pipeline_config, store, codec, make_image_bytes):
        """Test that a published image can be mirrored back."""
        (site / 'content' / 'uploads' / '_inbox' / 'photo.png').write_bytes(make_image_bytes())
        run_publish_pipeline(pipeline_config, store, codec)

        assert run_mirror_sync(pipeline_config, store) is True
        assert (pipeline_config.mirror_dir / 'photo.png').read_bytes() == store.objects['photo.png']
        # Variants have no records of their own
        assert not (pipeline_config.mirror_dir / 'photo_w200.png').exists()

    def test_storage_misconfiguration(self, monkeypatch, pipeline_config):
        monkeypatch.delenv('AWS_BUCKET_NAME', raising=False)
        monkeypatch.delenv('S3_BUCKET', raising=False)

        assert run_mirror_sync(pipeline_config) is False

    def test_unexpected_store_error_does_not_abort(self, pipeline_config, store, mocker):
        """Test that one failing download still mirrors the rest."""
        records = pipeline_config.image_metadata_dir
        records.mkdir(parents=True)
        (records / 'a.yml').write_text('uid      :  a\nformat   :  png\n')
        (records / 'b.yml').write_text('uid      :  b\nformat   :  png\n')
        store.objects['b.png'] = b'b-bytes'
        mocker.patch.object(store, 'download_object', side_effect=[RuntimeError('connection reset'), b'b-bytes'])

        assert run_mirror_sync(pipeline_config, store) is True
        assert (pipeline_config.mirror_dir / 'b.png').read_bytes() == b'b-bytes'

    def test_sync_fault_reported(self, pipeline_config, store, mocker):
        """Test that a sync-level failure returns False instead of raising."""
        mocker.patch('assetpub.host.MirrorSync.run', side_effect=RuntimeError('boom'))

        assert run_mirror_sync(pipeline_config, store) is False
