"""
VariantPlanner - Named variant widths and aspect-preserving dimensions.
"""

from typing import Iterable, Iterator, List, NamedTuple, Tuple

from .errors import ValidationError


class VariantSpec(NamedTuple):
    """A named resized derivative of a source image."""
    name: str
    width: int


DEFAULT_VARIANTS: Tuple[VariantSpec, ...] = (
    VariantSpec('mobile', 200),
    VariantSpec('tablet', 400),
    VariantSpec('desktop_md', 800),
    VariantSpec('desktop_lg', 1200),
)


def compute_variant_dimensions(
    original_width: int,
    original_height: int,
    target_width: int
) -> Tuple[int, int]:
    """
    Compute the size of a variant that keeps the original aspect ratio.

    Height is target_width * original_height / original_width rounded
    half up. Upscaling is allowed.

    Raises:
        ValidationError: If any dimension is not positive
    """
    if original_width <= 0 or original_height <= 0:
        raise ValidationError(
            f"Invalid source dimensions {original_width}x{original_height}"
        )
    if target_width <= 0:
        raise ValidationError(f"Invalid variant width {target_width}")

    # Integer form of floor(x + 0.5) so large sizes don't lose precision
    numerator = 2 * target_width * original_height + original_width
    height = numerator // (2 * original_width)
    return target_width, height


class VariantPlanner:
    """
    Holds the ordered variant table and derives variant keys and sizes.
    """

    def __init__(self, variants: Iterable[VariantSpec] = DEFAULT_VARIANTS):
        """
        Initialize planner.

        Args:
            variants: Ordered variant specs; iteration order is preserved

        Raises:
            ValidationError: If names repeat or a width is not positive
        """
        self.variants: Tuple[VariantSpec, ...] = tuple(variants)

        names = [v.name for v in self.variants]
        if len(set(names)) != len(names):
            raise ValidationError(f"Duplicate variant names in {names}")
        for variant in self.variants:
            if variant.width <= 0:
                raise ValidationError(
                    f"Variant {variant.name} has invalid width {variant.width}"
                )

    def __iter__(self) -> Iterator[VariantSpec]:
        return iter(self.variants)

    def __len__(self) -> int:
        return len(self.variants)

    @staticmethod
    def variant_filename(stem: str, variant: VariantSpec, extension: str) -> str:
        """Filename (and key suffix) for a variant, e.g. photo_w200.png."""
        return f"{stem}_w{variant.width}.{extension}"

    def plan(self, width: int, height: int) -> List[Tuple[VariantSpec, Tuple[int, int]]]:
        """Return (variant, (width, height)) for every variant in order."""
        return [
            (variant, compute_variant_dimensions(width, height, variant.width))
            for variant in self.variants
        ]

    @staticmethod
    def parse(value: str) -> VariantSpec:
        """
        Parse a NAME=WIDTH string into a VariantSpec.

        Raises:
            ValidationError: If the string is malformed
        """
        name, sep, width = value.partition('=')
        name = name.strip()
        if not sep or not name:
            raise ValidationError(f"Expected NAME=WIDTH, got {value!r}")
        try:
            width_px = int(width)
        except ValueError:
            raise ValidationError(f"Variant width must be an integer: {value!r}") from None
        if width_px <= 0:
            raise ValidationError(f"Variant width must be positive: {value!r}")
        return VariantSpec(name, width_px)
