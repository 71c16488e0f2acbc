"""
PipelineConfig - Directory layout, key prefixes and variant table.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Tuple, Union

from .file_classifier import PLACEHOLDER_NAME
from .variant_planner import DEFAULT_VARIANTS, VariantSpec

PathLike = Union[str, Path]


@dataclass
class PipelineConfig:
    """
    Settings shared by the publish pipeline and mirror sync.

    Attributes:
        inbox_dir: Where authors drop new files
        working_images_root: Staging root for images (removed after a run)
        working_files_root: Staging root for generic files (removed after a run)
        staging_subdir: Sub-directory of each staging root holding files
        image_metadata_dir: Image records (<uid>.yml)
        file_metadata_dir: File records (<uid>.yml)
        mirror_dir: Local mirror of published images
        image_prefix: Key prefix for images and variants
        static_prefix: Key prefix for generic files
        variants: Ordered variant table
        placeholder_name: Inbox entry that is never processed
        convert_jpeg_to_png: Re-encode JPEG uploads as PNG before publishing
        keep_failed: Keep staging roots when a file failed, for retry
        small_image_threshold: Warn when a dimension is below this many pixels
    """
    inbox_dir: Path = Path('content/uploads/_inbox')
    working_images_root: Path = Path('content/uploads/_working-images')
    working_files_root: Path = Path('content/uploads/_working-files')
    staging_subdir: str = 'to-process'
    image_metadata_dir: Path = Path('data/images')
    file_metadata_dir: Path = Path('data/files')
    mirror_dir: Path = Path('assets/s3-images')
    image_prefix: str = ''
    static_prefix: str = 'static/'
    variants: Tuple[VariantSpec, ...] = field(default_factory=lambda: DEFAULT_VARIANTS)
    placeholder_name: str = PLACEHOLDER_NAME
    convert_jpeg_to_png: bool = True
    keep_failed: bool = False
    small_image_threshold: int = 100

    PATH_FIELDS = (
        'inbox_dir',
        'working_images_root',
        'working_files_root',
        'image_metadata_dir',
        'file_metadata_dir',
        'mirror_dir',
    )

    def __post_init__(self):
        for name in self.PATH_FIELDS:
            setattr(self, name, Path(getattr(self, name)))
        self.variants = tuple(self.variants)

    @classmethod
    def for_site(cls, root: PathLike, **overrides) -> 'PipelineConfig':
        """Default layout resolved against a site root directory."""
        config = cls(**overrides)
        root = Path(root)
        return replace(config, **{
            name: root / getattr(config, name)
            for name in cls.PATH_FIELDS
            if name not in overrides
        })

    @property
    def working_images_dir(self) -> Path:
        """Directory images are staged in."""
        return self.working_images_root / self.staging_subdir

    @property
    def working_files_dir(self) -> Path:
        """Directory generic files are staged in."""
        return self.working_files_root / self.staging_subdir

    @property
    def staging_roots(self) -> Tuple[Path, Path]:
        return self.working_images_root, self.working_files_root
