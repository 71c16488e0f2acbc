"""
PublishPipeline - Moves inbox files to staging, publishes them and cleans up.
"""

import logging
import shutil
from pathlib import Path
from typing import List, Optional

from .asset_record import AssetKind, PublishedAsset, StagedFile
from .errors import LocalFileError, ValidationError
from .file_classifier import (
    JPEG_EXTENSIONS,
    content_type_for,
    is_image,
    is_valid_file_type,
    sanitize_filename,
)
from .image_codec import ImageCodec
from .metadata_writer import MetadataWriter
from .pipeline_config import PipelineConfig
from .publish_stats import PublishStats
from .storage import ObjectStore
from .variant_planner import VariantPlanner


class PublishPipeline:
    """
    Publishes files dropped in the inbox.

    A run goes through four steps:
        1. Relocate: move valid inbox entries into the staging directories
        2. Process: publish each staged file; a failure only skips that file
        3. Cleanup: remove the staging roots
        4. Summarize: report how many files were published

    Files are processed one at a time in name order, images first.
    Concurrent runs against the same directories are not supported.
    """

    def __init__(
        self,
        store: ObjectStore,
        codec: ImageCodec,
        config: Optional[PipelineConfig] = None,
        metadata_writer: Optional[MetadataWriter] = None,
        base_url: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            store: Object store that receives uploads
            codec: Image codec for conversion and variants
            config: Directory layout, prefixes and variant table
            metadata_writer: Writer for sidecar records (built from config if omitted)
            base_url: Public bucket URL written into metadata header comments
            logger: Optional logger instance
        """
        self.store = store
        self.codec = codec
        self.base_url = base_url.rstrip('/') if base_url else None
        self.config = config or PipelineConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.planner = VariantPlanner(self.config.variants)
        self.metadata = metadata_writer or MetadataWriter(
            self.config.image_metadata_dir,
            self.config.file_metadata_dir,
            base_url=base_url,
            image_prefix=self.config.image_prefix,
            static_prefix=self.config.static_prefix,
            logger=self.logger,
        )
        self.stats = PublishStats()
        self.published: List[PublishedAsset] = []
        self._stop_requested = False

    def stop(self) -> None:
        """Request the pipeline to stop after the current file."""
        self._stop_requested = True

    def run(self) -> str:
        """
        Run relocate, process, cleanup and summarize.

        Returns:
            Summary such as "Successfully processed and uploaded 1 out of 2 files."

        Raises:
            LocalFileError: If staging directories cannot be prepared,
                the inbox cannot be relocated or cleanup fails
        """
        self.logger.info("Starting file upload process...")
        self.stats = PublishStats()
        self.published = []

        self.relocate()

        staged_files = self.collect_staged()
        self.stats.total = len(staged_files)

        for staged in staged_files:
            if self._stop_requested:
                self.logger.info("Stop requested, halting upload process")
                break
            self.process(staged)

        self.cleanup()

        summary = self.stats.summary()
        self.logger.info(
            f"Upload process completed: {self.stats.processed} published, "
            f"{self.stats.errors} errors, {self.stats.uploads} uploads "
            f"({self.stats.elapsed_seconds:.1f}s)"
        )
        return summary

    def relocate(self) -> int:
        """
        Move valid inbox entries into the staging directories.

        Names are sanitized on the way. Entries with an unknown extension
        and the placeholder file stay in the inbox untouched.

        Returns:
            Number of files moved
        """
        inbox = self.config.inbox_dir
        if not inbox.is_dir():
            self.logger.info(f"Inbox directory not found at {inbox}")
            return 0

        try:
            self.config.working_images_dir.mkdir(parents=True, exist_ok=True)
            self.config.working_files_dir.mkdir(parents=True, exist_ok=True)
            entries = sorted(inbox.iterdir())
        except OSError as e:
            raise LocalFileError(f"Cannot prepare working directories: {e}") from e

        moved = 0
        for path in entries:
            if path.name == self.config.placeholder_name:
                continue
            if not path.is_file() or not is_valid_file_type(path):
                continue

            sanitized_name = sanitize_filename(path.name)
            stem, _, _ = sanitized_name.rpartition('.')
            if not stem:
                self.logger.warning(f"Leaving {path} in the inbox: nothing left of its name after sanitizing")
                continue

            if is_image(path):
                target_dir = self.config.working_images_dir
            else:
                target_dir = self.config.working_files_dir
            target_path = target_dir / sanitized_name

            try:
                shutil.move(str(path), str(target_path))
            except OSError as e:
                raise LocalFileError(f"Cannot move {path} to {target_path}: {e}") from e

            self.logger.info(f"Moved {path} to {target_path}")
            moved += 1

        return moved

    def collect_staged(self) -> List[StagedFile]:
        """List valid files in the staging directories, images first."""
        staged = []
        for directory in (self.config.working_images_dir, self.config.working_files_dir):
            if not directory.is_dir():
                self.logger.debug(f"Working directory not found at {directory}")
                continue

            try:
                files = sorted(
                    p for p in directory.iterdir()
                    if p.is_file() and is_valid_file_type(p)
                )
            except OSError as e:
                raise LocalFileError(f"Cannot list {directory}: {e}") from e

            self.logger.info(f"Found {len(files)} valid files in {directory}")
            staged.extend(StagedFile.from_path(p) for p in files)

        return staged

    def process(self, staged: StagedFile) -> bool:
        """
        Publish one staged file, containing any failure.

        On success the staged file is deleted. On failure it is left in
        the working directory and the error is counted.
        """
        try:
            asset = self.publish(staged)
        except Exception as e:
            error_msg = f"Error processing file {staged.path}: {e}"
            self.logger.error(error_msg)
            self.stats.errors += 1
            self.stats.error_details.append(error_msg)
            return False

        self.stats.processed += 1
        self.published.append(asset)
        self.logger.info(f"Successfully processed and uploaded: {staged.path}")

        try:
            asset.source_path.unlink(missing_ok=True)
        except OSError as e:
            self.logger.warning(f"Error removing file {asset.source_path}: {e}")

        return True

    def publish(self, staged: StagedFile) -> PublishedAsset:
        """Publish a staged file according to its kind."""
        if staged.is_image:
            return self.publish_image(staged)
        return self.publish_file(staged)

    def publish_image(self, staged: StagedFile) -> PublishedAsset:
        """
        Upload an image, its metadata and every variant.

        JPEGs are first re-encoded as PNG. Variants are written next to
        the staged file, uploaded, and removed whatever the upload outcome.
        Variants uploaded before a failure are not rolled back.
        """
        uid = staged.uid

        if self.config.convert_jpeg_to_png and staged.extension in JPEG_EXTENSIONS:
            staged = self.convert_to_png(staged)
        extension = staged.extension

        data = self._read(staged.path)
        self.logger.debug(f"Original file size: {len(data)} bytes")

        img = self.codec.decode(data)
        width, height = img.width, img.height
        if width == 0 or height == 0:
            raise ValidationError(f"Image has zero dimension ({width}x{height})")
        self.logger.info(f"Original image dimensions: {width}x{height}")

        threshold = self.config.small_image_threshold
        if width < threshold or height < threshold:
            self.logger.warning(
                f"Image dimensions of {staged.path.name} seem unusually small ({width}x{height})"
            )

        content_type = self.codec.get_content_type(extension)
        original_key = f"{self.config.image_prefix}{uid}.{extension}"
        self._upload(original_key, data, content_type)

        asset = PublishedAsset(
            uid=uid,
            format=extension,
            kind=AssetKind.IMAGE,
            original_key=original_key,
            width=width,
            height=height,
            source_path=staged.path,
            bytes_uploaded=len(data),
        )
        asset.metadata_path = self.metadata.write_image_metadata(uid, width, height, extension)

        for variant, (planned_width, planned_height) in self.planner.plan(width, height):
            filename = self.planner.variant_filename(uid, variant, extension)
            variant_path = staged.path.parent / filename

            self.logger.debug(f"Resizing to {planned_width}x{planned_height} for {variant.name} variant")
            resized = self.codec.resize(img, variant.width)
            variant_data = self.codec.encode(resized, extension)
            self.logger.info(
                f"Resized image dimensions for {variant.name} variant: "
                f"{resized.width}x{resized.height}"
            )

            try:
                self._write(variant_path, variant_data)
                key = f"{self.config.image_prefix}{filename}"
                self._upload(key, variant_data, content_type)
                asset.variant_keys.append(key)
                asset.bytes_uploaded += len(variant_data)
            finally:
                self._remove_quietly(variant_path)

        return asset

    def publish_file(self, staged: StagedFile) -> PublishedAsset:
        """Upload a generic file under the static prefix and write its metadata."""
        uid = staged.uid
        key = f"{self.config.static_prefix}{staged.name}"

        data = self._read(staged.path)
        self._upload(key, data, content_type_for(staged.path))

        asset = PublishedAsset(
            uid=uid,
            format=staged.extension,
            kind=AssetKind.FILE,
            original_key=key,
            source_path=staged.path,
            bytes_uploaded=len(data),
        )
        asset.metadata_path = self.metadata.write_file_metadata(uid, staged.extension)
        return asset

    def convert_to_png(self, staged: StagedFile) -> StagedFile:
        """Re-encode a staged image as PNG and delete the original."""
        self.logger.info(f"Converting image {staged.path} to PNG")
        img = self.codec.decode(self._read(staged.path))
        png_data = self.codec.encode(img, 'png')

        output_path = staged.path.with_suffix('.png')
        self._write(output_path, png_data)
        if output_path != staged.path:
            try:
                staged.path.unlink(missing_ok=True)
            except OSError as e:
                raise LocalFileError(f"Cannot remove {staged.path}: {e}") from e

        return staged.with_path(output_path)

    def cleanup(self) -> None:
        """
        Remove the staging roots recursively.

        This also removes the remnants of files that failed, unless
        keep_failed is set. Staging is always kept after a stop request
        that left files unprocessed.
        """
        if self.config.keep_failed and self.stats.errors:
            self.logger.warning(
                f"{self.stats.errors} files failed; keeping staging directories for retry: "
                f"{', '.join(str(p) for p in self.config.staging_roots)}"
            )
            return
        if self._stop_requested and self.stats.remaining_count:
            self.logger.warning(
                f"Stopped with {self.stats.remaining_count} files unprocessed; keeping staging directories"
            )
            return

        for root in self.config.staging_roots:
            if not root.exists():
                continue
            try:
                shutil.rmtree(root)
            except OSError as e:
                raise LocalFileError(f"Cannot remove directory {root}: {e}") from e
            self.logger.debug(f"Removed {root}")

    def _upload(self, key: str, data: bytes, content_type: str) -> None:
        self.logger.info(f"Uploading {key} ({len(data)} bytes, {content_type})")
        self.store.upload_object(key, data, content_type)
        self.stats.uploads += 1
        self.stats.bytes_uploaded += len(data)
        if self.base_url:
            self.logger.info(f"Public URL: {self.base_url}/{key}")

    @staticmethod
    def _read(path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            raise LocalFileError(f"Cannot read {path}: {e}") from e

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        try:
            path.write_bytes(data)
        except OSError as e:
            raise LocalFileError(f"Cannot write {path}: {e}") from e

    def _remove_quietly(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            self.logger.warning(f"Could not delete {path}: {e}")
