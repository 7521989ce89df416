"""
Icon synthesis, validation and resampling
"""

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from PIL import Image, ImageDraw, UnidentifiedImageError

from app_bundler.core.errors import ImageDecodeError, InvalidOptionsError
from app_bundler.validators.validators import validate_dimension, validate_hex_color
from app_bundler.utils.i18n import _

logger = logging.getLogger(__name__)

# Minimum icon size accepted for packaging
MIN_ICON_SIZE = 512
# Optimal icon size for best quality across all platforms
RECOMMENDED_ICON_SIZE = 1024

DEFAULT_ICON_COLOR = "#3C5AB8"

# Largest side we synthesize or resample to. Must stay below the side at
# which Pillow's decompression-bomb guard rejects the decoded result.
MAX_ICON_DIMENSION = 8192

# Encoded payloads above this are rejected before decoding
MAX_ICON_BYTES = 32 * 1024 * 1024

# Standard sizes for Windows .ico files
ICO_SIZES = [16, 24, 32, 48, 64, 128, 256]

# Corner radius of synthesized icons, as a fraction of the side
CORNER_RADIUS_RATIO = 0.2

ALPHA_MODES = ('RGBA', 'LA', 'PA', 'RGBa', 'La')


@dataclass
class IconCreateOptions:
    """Options for placeholder icon synthesis"""
    size: int = RECOMMENDED_ICON_SIZE
    color: str = DEFAULT_ICON_COLOR


@dataclass(frozen=True)
class IconResizeOptions:
    """Target dimensions of a resize, also one row of a platform size table"""
    width: int
    height: int

    def to_dict(self) -> Dict:
        return {'width': self.width, 'height': self.height}


@dataclass
class IconValidation:
    """Outcome of inspecting an icon. Warnings are advisory, errors are fatal."""
    width: int
    height: int
    is_square: bool
    meets_minimum: bool
    meets_recommended: bool
    has_transparency: bool
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict:
        """Convert to the external field shape"""
        return {
            'width': self.width,
            'height': self.height,
            'isSquare': self.is_square,
            'meetsMinimum': self.meets_minimum,
            'meetsRecommended': self.meets_recommended,
            'hasTransparency': self.has_transparency,
            'warnings': list(self.warnings),
            'errors': list(self.errors),
        }


def _check_size_limit(value, name):
    validate_dimension(value, name)
    if value > MAX_ICON_DIMENSION:
        raise InvalidOptionsError(
            _("{} must not exceed {} pixels, got {}").format(name, MAX_ICON_DIMENSION, value))
    return value


def load_image(data, max_bytes: Optional[int] = MAX_ICON_BYTES) -> Image.Image:
    """Decode icon bytes, raising ImageDecodeError for anything unusable"""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise ImageDecodeError(
            _("Icon data must be bytes, got {}").format(type(data).__name__))

    data = bytes(data)
    if not data:
        raise ImageDecodeError(_("Icon data is empty"))

    if max_bytes is not None and len(data) > max_bytes:
        raise ImageDecodeError(
            _("Icon data is too large ({} bytes). Maximum is {} bytes.").format(
                len(data), max_bytes))

    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except Image.DecompressionBombError as e:
        raise ImageDecodeError(_("Image has too many pixels: {}").format(e)) from e
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, EOFError) as e:
        raise ImageDecodeError(_("Failed to load image: {}").format(e)) from e

    return img


def encode_png(img: Image.Image) -> bytes:
    """Encode an image as PNG bytes"""
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


def has_alpha_channel(img: Image.Image) -> bool:
    """Whether the image carries alpha data, either as a band or a tRNS entry"""
    return img.mode in ALPHA_MODES or 'transparency' in img.info


def has_transparent_pixels(img: Image.Image) -> bool:
    """Scan the alpha channel for any pixel that is not fully opaque"""
    if not has_alpha_channel(img):
        return False
    alpha = img.convert('RGBA').getchannel('A')
    lowest, _highest = alpha.getextrema()
    return lowest < 255


def create_icon(options: Optional[IconCreateOptions] = None) -> bytes:
    """Create a square placeholder icon filled with the background color"""
    if options is None:
        options = IconCreateOptions()

    size = _check_size_limit(options.size, _("Icon size"))
    rgb = validate_hex_color(options.color)
    logger.debug("icon_create: size=%d color=%s", size, options.color)

    img = Image.new('RGBA', (size, size), rgb + (255,))

    # Rounded corners, transparent outside the rounded rectangle
    radius = int(size * CORNER_RADIUS_RATIO)
    if radius > 0:
        mask = Image.new('L', (size, size), 0)
        ImageDraw.Draw(mask).rounded_rectangle(
            (0, 0, size - 1, size - 1), radius=radius, fill=255)
        img.putalpha(mask)

    return encode_png(img)


def validate_icon(data, max_bytes: Optional[int] = MAX_ICON_BYTES) -> IconValidation:
    """Inspect icon bytes. Only undecodable data raises; quality issues are reported."""
    img = load_image(data, max_bytes)
    width, height = img.size
    logger.debug("icon_validate: %dx%d mode=%s", width, height, img.mode)

    is_square = width == height
    meets_minimum = width >= MIN_ICON_SIZE and height >= MIN_ICON_SIZE
    meets_recommended = width >= RECOMMENDED_ICON_SIZE and height >= RECOMMENDED_ICON_SIZE
    alpha_channel = has_alpha_channel(img)
    has_transparency = has_transparent_pixels(img)

    warnings = []
    errors = []

    if not meets_minimum:
        errors.append(_("Icon is too small ({}x{}). Minimum size is {}x{} pixels.").format(
            width, height, MIN_ICON_SIZE, MIN_ICON_SIZE))
    elif not meets_recommended:
        warnings.append(_("Icon is {}x{}. Recommended size is {}x{} for best quality.").format(
            width, height, RECOMMENDED_ICON_SIZE, RECOMMENDED_ICON_SIZE))

    if not is_square:
        errors.append(_("Icon must be square. Current size: {}x{} (aspect ratio: {:.2f}:1)").format(
            width, height, width / height))

    if not alpha_channel:
        warnings.append(_("Icon does not have an alpha channel. "
                          "Consider using PNG with transparency."))

    return IconValidation(
        width=width,
        height=height,
        is_square=is_square,
        meets_minimum=meets_minimum,
        meets_recommended=meets_recommended,
        has_transparency=has_transparency,
        warnings=warnings,
        errors=errors,
    )


def _resample(img: Image.Image, options: IconResizeOptions) -> bytes:
    resized = img.resize((options.width, options.height), Image.Resampling.LANCZOS)
    return encode_png(resized)


def _check_resize_options(options: IconResizeOptions):
    _check_size_limit(options.width, _("Width"))
    _check_size_limit(options.height, _("Height"))


def _as_rgba(img: Image.Image) -> Image.Image:
    # Palette and greyscale images lose alpha under LANCZOS unless expanded first
    return img if img.mode == 'RGBA' else img.convert('RGBA')


def resize_icon(data, options: IconResizeOptions,
                max_bytes: Optional[int] = MAX_ICON_BYTES) -> bytes:
    """Resample an icon to exactly width x height, keeping its alpha channel"""
    _check_resize_options(options)
    logger.debug("icon_resize: %dx%d", options.width, options.height)

    img = _as_rgba(load_image(data, max_bytes))
    return _resample(img, options)


def generate_icon_set(data, requirements: Iterable[IconResizeOptions],
                      max_workers: Optional[int] = None,
                      max_bytes: Optional[int] = MAX_ICON_BYTES) -> Dict[IconResizeOptions, bytes]:
    """Resize one source icon to every requirement, in parallel.

    The source is decoded once. The returned dict follows the order of
    ``requirements``; repeated sizes appear once.
    """
    requirements = list(dict.fromkeys(requirements))
    for options in requirements:
        _check_resize_options(options)

    img = _as_rgba(load_image(data, max_bytes))
    logger.debug("icon_set: %d sizes from %dx%d", len(requirements), img.width, img.height)

    if not requirements:
        return {}

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [(options, pool.submit(_resample, img, options)) for options in requirements]
        return {options: future.result() for options, future in futures}


def create_ico(data, sizes: Iterable[int] = ICO_SIZES,
               max_bytes: Optional[int] = MAX_ICON_BYTES) -> bytes:
    """Pack a square icon into a multi-resolution Windows .ico file.

    Sizes larger than the source or than 256 are left out, as the ICO
    format cannot hold them.
    """
    sizes = sorted(set(sizes))
    for size in sizes:
        validate_dimension(size, _("ICO size"))

    img = _as_rgba(load_image(data, max_bytes))
    if img.width != img.height:
        raise InvalidOptionsError(
            _("ICO images must be square, got {}x{}").format(img.width, img.height))

    usable = [(s, s) for s in sizes if s <= min(img.width, 256)]
    if not usable:
        raise InvalidOptionsError(
            _("Source icon ({}x{}) is smaller than every requested ICO size").format(
                img.width, img.height))

    logger.debug("icon_ico: sizes=%s", usable)
    buf = io.BytesIO()
    img.save(buf, format='ICO', sizes=usable)
    return buf.getvalue()
