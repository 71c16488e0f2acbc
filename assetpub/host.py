"""
Host operations: publish the inbox, or mirror published images locally.

Both build their collaborators explicitly and never raise for per-file
failures.
"""

import logging
from typing import Optional, Tuple

from .errors import ValidationError
from .image_codec import ImageCodec, PillowCodec
from .local_client import LocalClient, LocalConfig
from .metadata_reader import MetadataReader
from .mirror import MirrorSync
from .pipeline_config import PipelineConfig
from .publisher import PublishPipeline
from .s3_client import S3Client
from .s3_config import S3Config
from .storage import ObjectStore, StorageClient


def build_storage_client(
    s3_config: Optional[S3Config] = None,
    local_config: Optional[LocalConfig] = None,
    logger: Optional[logging.Logger] = None
) -> Tuple[StorageClient, Optional[str]]:
    """
    Create the storage client for a run.

    A local config wins over S3. Without either, S3 settings come from
    the environment.

    Returns:
        Tuple of (client, public base URL or None)

    Raises:
        ValidationError: If the configuration is incomplete
    """
    if local_config is not None:
        errors = local_config.validate()
        if errors:
            raise ValidationError("; ".join(errors))
        return LocalClient(local_config, logger), None

    config = s3_config or S3Config.from_env()
    errors = config.validate()
    if errors:
        raise ValidationError("; ".join(errors))
    return S3Client(config, logger), config.public_base_url


def run_publish_pipeline(
    config: Optional[PipelineConfig] = None,
    store: Optional[ObjectStore] = None,
    codec: Optional[ImageCodec] = None,
    base_url: Optional[str] = None,
    logger: Optional[logging.Logger] = None
) -> str:
    """
    Publish everything in the inbox.

    Returns:
        The run summary, or "Error: ..." when the run could not complete
    """
    logger = logger or logging.getLogger('assetpub')
    try:
        if store is None:
            store, base_url = build_storage_client(logger=logger)
        pipeline = PublishPipeline(
            store=store,
            codec=codec or PillowCodec(logger=logger),
            config=config or PipelineConfig(),
            base_url=base_url,
            logger=logger,
        )
        return pipeline.run()
    except Exception as e:
        logger.exception(f"Upload process failed: {e}")
        return f"Error: {e}"


def run_mirror_sync(
    config: Optional[PipelineConfig] = None,
    store: Optional[ObjectStore] = None,
    logger: Optional[logging.Logger] = None
) -> bool:
    """
    Download published images into the local mirror.

    Returns:
        True when the store and mirror directory could be set up
    """
    logger = logger or logging.getLogger('assetpub')
    config = config or PipelineConfig()
    try:
        if store is None:
            store, _ = build_storage_client(logger=logger)
    except Exception as e:
        logger.error(f"Error creating storage client: {e}")
        return False

    reader = MetadataReader(config.image_metadata_dir, config.image_prefix, logger=logger)
    try:
        return MirrorSync(store, reader, config.mirror_dir, logger=logger).run()
    except Exception as e:
        logger.exception(f"Mirror sync failed: {e}")
        return False
