"""
Asset publishing for a static-site content workflow.

Two operations:
    1. Publish: move inbox files to staging, upload originals and resized
       image variants, write sidecar metadata records, clean up
    2. Mirror: download published images into a local directory, using
       the metadata records as the index

Supports both S3 and local filesystem storage.
"""

__version__ = "0.2.0"

from .errors import PublishError, StorageError, LocalFileError, CodecError, ValidationError
from .s3_config import S3Config
from .s3_client import S3Client
from .local_client import LocalConfig, LocalClient
from .storage import ObjectStore
from .image_codec import ImageCodec, PillowCodec
from .variant_planner import VariantSpec, VariantPlanner, DEFAULT_VARIANTS
from .asset_record import AssetKind, StagedFile, PublishedAsset
from .metadata_writer import MetadataWriter
from .metadata_reader import MetadataReader, MirrorEntry
from .pipeline_config import PipelineConfig
from .publish_stats import PublishStats, MirrorStats
from .publisher import PublishPipeline
from .mirror import MirrorSync
from .host import run_publish_pipeline, run_mirror_sync

__all__ = [
    "PublishError",
    "StorageError",
    "LocalFileError",
    "CodecError",
    "ValidationError",
    "S3Config",
    "S3Client",
    "LocalConfig",
    "LocalClient",
    "ObjectStore",
    "ImageCodec",
    "PillowCodec",
    "VariantSpec",
    "VariantPlanner",
    "DEFAULT_VARIANTS",
    "AssetKind",
    "StagedFile",
    "PublishedAsset",
    "MetadataWriter",
    "MetadataReader",
    "MirrorEntry",
    "PipelineConfig",
    "PublishStats",
    "MirrorStats",
    "PublishPipeline",
    "MirrorSync",
    "run_publish_pipeline",
    "run_mirror_sync",
]
