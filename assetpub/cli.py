"""
Command Line Interface for publishing and mirroring site assets.
"""

import argparse
import logging
import urllib3
from typing import List, Optional

from .errors import ValidationError
from .host import build_storage_client
from .image_codec import PillowCodec
from .local_client import LocalConfig
from .metadata_reader import MetadataReader
from .mirror import MirrorSync
from .pipeline_config import PipelineConfig
from .publisher import PublishPipeline
from .s3_config import S3Config
from .variant_planner import VariantPlanner


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('assetpub')


def get_s3_config(args: argparse.Namespace) -> S3Config:
    """Get S3 configuration from environment and CLI overrides."""
    config = S3Config.from_env()

    if getattr(args, 's3_endpoint', None):
        config.endpoint = args.s3_endpoint
    if getattr(args, 's3_bucket', None):
        config.bucket = args.s3_bucket
    if getattr(args, 's3_region', None):
        config.region = args.s3_region
    if getattr(args, 's3_access_key', None):
        config.access_key = args.s3_access_key
    if getattr(args, 's3_secret_key', None):
        config.secret_key = args.s3_secret_key
    if getattr(args, 'no_verify_ssl', False):
        config.verify_ssl = False

    return config


def get_local_config(args: argparse.Namespace) -> Optional[LocalConfig]:
    """Get local configuration from CLI arguments, if requested."""
    if not getattr(args, 'local_root', None):
        return None
    return LocalConfig(root_path=args.local_root, prefix=args.local_prefix or '')


def get_pipeline_config(args: argparse.Namespace) -> PipelineConfig:
    """Build the pipeline configuration from CLI arguments."""
    overrides = {}
    variants = getattr(args, 'variant', None)
    if variants:
        overrides['variants'] = tuple(VariantPlanner.parse(v) for v in variants)
    if getattr(args, 'keep_failed', False):
        overrides['keep_failed'] = True
    if getattr(args, 'no_convert_jpeg', False):
        overrides['convert_jpeg_to_png'] = False
    if getattr(args, 'mirror_dir', None):
        overrides['mirror_dir'] = args.mirror_dir
    return PipelineConfig.for_site(args.site_root, **overrides)


def add_storage_arguments(parser: argparse.ArgumentParser) -> None:
    """Add storage configuration arguments to a parser."""
    # Local storage options
    local_group = parser.add_argument_group('Local Storage')
    local_group.add_argument('--local-root', metavar='PATH',
                             help='Use a local directory instead of S3')
    local_group.add_argument('--local-prefix', default='',
                             help='Prefix within local root')

    # S3 storage options
    s3_group = parser.add_argument_group('S3 Storage')
    s3_group.add_argument('--s3-endpoint', help='Override S3_ENDPOINT')
    s3_group.add_argument('--s3-bucket', help='Override AWS_BUCKET_NAME')
    s3_group.add_argument('--s3-region', help='Override AWS_REGION')
    s3_group.add_argument('--s3-access-key', help='Override AWS_ACCESS_KEY_ID')
    s3_group.add_argument('--s3-secret-key', help='Override AWS_SECRET_ACCESS_KEY')
    s3_group.add_argument('--no-verify-ssl', action='store_true',
                          help='Skip TLS certificate verification')


def _open_storage(args: argparse.Namespace, logger: logging.Logger):
    s3_config = get_s3_config(args)
    if not s3_config.verify_ssl:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    return build_storage_client(s3_config, get_local_config(args), logger)


def cmd_publish(args: argparse.Namespace) -> int:
    """Execute publish command."""
    logger = setup_logging(args.verbose)

    try:
        config = get_pipeline_config(args)
        store, base_url = _open_storage(args, logger)
        pipeline = PublishPipeline(
            store=store,
            codec=PillowCodec(logger=logger),
            config=config,
            base_url=base_url,
            logger=logger,
        )
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.info(f"Inbox: {config.inbox_dir}")
    logger.info(f"Variants: {', '.join(f'{v.name}={v.width}' for v in config.variants)}")

    try:
        summary = pipeline.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Upload process failed: {e}")
        return 1

    print(summary)
    return 0 if pipeline.stats.errors == 0 else 1


def cmd_mirror(args: argparse.Namespace) -> int:
    """Execute mirror command."""
    logger = setup_logging(args.verbose)

    try:
        config = get_pipeline_config(args)
        store, _ = _open_storage(args, logger)
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    reader = MetadataReader(config.image_metadata_dir, config.image_prefix, logger=logger)
    mirror = MirrorSync(store, reader, config.mirror_dir, logger=logger)

    try:
        ok = mirror.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    print(mirror.stats.summary())
    return 0 if ok else 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='assetpub',
        description='Publish inbox files to object storage and mirror published images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Workflow:
  1. Drop files into content/uploads/_inbox
  2. Publish: python -m assetpub publish
  3. Mirror:  python -m assetpub mirror

Storage options:
  Use --local-root for a local directory, or AWS_* environment variables for S3.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Publish command
    pub_parser = subparsers.add_parser('publish', help='Publish files from the inbox')
    pub_parser.add_argument('--site-root', default='.', help='Site root directory (default: .)')
    pub_parser.add_argument('--variant', action='append', metavar='NAME=WIDTH',
                            help='Variant width (repeatable, replaces the default table)')
    pub_parser.add_argument('--keep-failed', action='store_true',
                            help='Keep staging directories when a file fails')
    pub_parser.add_argument('--no-convert-jpeg', action='store_true',
                            help='Publish JPEGs as-is instead of converting to PNG')
    pub_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(pub_parser)

    # Mirror command
    mirror_parser = subparsers.add_parser('mirror', help='Download published images locally')
    mirror_parser.add_argument('--site-root', default='.', help='Site root directory (default: .)')
    mirror_parser.add_argument('--mirror-dir', help='Mirror directory (default: assets/s3-images)')
    mirror_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(mirror_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'publish':
        return cmd_publish(parsed_args)
    elif parsed_args.command == 'mirror':
        return cmd_mirror(parsed_args)

    return 1
