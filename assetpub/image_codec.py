"""
ImageCodec - Decoding, resizing and encoding of raster images using Pillow.
"""

import io
import logging
from typing import Optional, Protocol

from PIL import Image, UnidentifiedImageError

from .errors import CodecError, ValidationError
from .variant_planner import compute_variant_dimensions


class ImageCodec(Protocol):
    """Capability used by the publish pipeline to handle image payloads."""

    def decode(self, data: bytes) -> Image.Image:
        ...

    def encode(self, img: Image.Image, extension: str) -> bytes:
        ...

    def resize(self, img: Image.Image, width: int) -> Image.Image:
        ...

    def get_content_type(self, extension: str) -> str:
        ...


class PillowCodec:
    """
    ImageCodec backed by Pillow.

    Variants are resampled with LANCZOS; nearest-neighbour is never used,
    palette images are expanded before resizing.
    """

    FORMATS = {
        'png': 'PNG',
        'jpg': 'JPEG',
        'jpeg': 'JPEG',
        'gif': 'GIF',
        'bmp': 'BMP',
        'tiff': 'TIFF',
        'tif': 'TIFF',
        'webp': 'WEBP',
    }

    PNG_MODES = ('1', 'L', 'LA', 'I', 'I;16', 'P', 'RGB', 'RGBA')

    CONTENT_TYPES = {
        'png': 'image/png',
        'jpg': 'image/jpeg',
        'jpeg': 'image/jpeg',
        'gif': 'image/gif',
        'bmp': 'image/bmp',
        'tiff': 'image/tiff',
        'tif': 'image/tiff',
        'webp': 'image/webp',
    }

    def __init__(
        self,
        quality: int = 85,
        resample: Image.Resampling = Image.Resampling.LANCZOS,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize codec.

        Args:
            quality: Quality for lossy output formats (JPEG, WebP)
            resample: Resampling filter for variants
            logger: Optional logger instance
        """
        if resample == Image.Resampling.NEAREST:
            raise ValueError("Nearest-neighbour resampling is not supported for variants")
        self.quality = quality
        self.resample = resample
        self.logger = logger or logging.getLogger(__name__)

    def decode(self, data: bytes) -> Image.Image:
        """
        Decode image bytes into a fully loaded Pillow image.

        Raises:
            CodecError: If the payload is not a readable image
        """
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise CodecError(f"Cannot decode image: {e}") from e

        width, height = img.size
        if width == 0 or height == 0:
            raise ValidationError(f"Image has zero dimension ({width}x{height})")
        return img

    def resize(self, img: Image.Image, width: int) -> Image.Image:
        """
        Resize to the target width, keeping the aspect ratio.

        Raises:
            ValidationError: If the resulting height rounds to zero
            CodecError: If Pillow fails to resample
        """
        target_width, target_height = compute_variant_dimensions(img.width, img.height, width)
        if target_height == 0:
            raise ValidationError(
                f"Variant {target_width}px wide of a {img.width}x{img.height} image has no height"
            )

        # Pillow falls back to NEAREST for palette and bilevel images
        if img.mode in ('P', '1'):
            img = img.convert('RGBA' if 'transparency' in img.info else 'RGB')

        try:
            return img.resize((target_width, target_height), self.resample)
        except (OSError, ValueError) as e:
            raise CodecError(f"Cannot resize image to {target_width}x{target_height}: {e}") from e

    def encode(self, img: Image.Image, extension: str) -> bytes:
        """
        Encode an image in the format implied by the extension.

        Raises:
            CodecError: If the extension is unknown or encoding fails
        """
        output_format = self.FORMATS.get(extension.lower().lstrip('.'))
        if output_format is None:
            raise CodecError(f"Unsupported image format: {extension}")

        output = io.BytesIO()
        try:
            if output_format == 'JPEG':
                img = self._convert_color_mode(img)
                img.save(output, format='JPEG', quality=self.quality, optimize=True)
            elif output_format == 'PNG':
                if img.mode not in self.PNG_MODES:
                    img = img.convert('RGBA' if 'A' in img.mode else 'RGB')
                img.save(output, format='PNG', optimize=True)
            elif output_format == 'WEBP':
                img.save(output, format='WEBP', quality=self.quality)
            else:
                img.save(output, format=output_format)
        except (OSError, ValueError, KeyError) as e:
            raise CodecError(f"Cannot encode image as {output_format}: {e}") from e

        return output.getvalue()

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Flatten transparency onto white for formats without alpha."""
        if img.mode in ('RGBA', 'LA'):
            background = Image.new('RGB', img.size, (255, 255, 255))
            if img.mode == 'LA':
                img = img.convert('RGBA')
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode == 'P':
            img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode != 'RGB':
            return img.convert('RGB')
        return img

    def get_content_type(self, extension: str) -> str:
        """Get content type for an image extension."""
        return self.CONTENT_TYPES.get(extension.lower().lstrip('.'), 'application/octet-stream')
