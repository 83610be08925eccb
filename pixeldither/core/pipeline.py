import base64
import binascii
import io
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from PIL import Image, UnidentifiedImageError
import numpy as np

from ..constants import DATA_URL_PREFIX
from ..settings import DitheringSettings
from ..processing.dither import apply_dithering
from ..processing.filters.adjust import Adjustments, preprocess_image
from .utils import get_output_filename, image_format_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageInfo:
    width: int
    height: int
    color_type: str


def load_image(path: Union[str, Path]) -> Image.Image:
    """Open an image file and convert it to RGB."""
    try:
        img = Image.open(path)
        img.load()
    except (OSError, UnidentifiedImageError) as e:
        raise ValueError(f"Failed to open image: {e}") from e

    if img.mode != 'RGB':
        img = img.convert('RGB')
    return img


def save_image(img: Image.Image, path: Union[str, Path]) -> Path:
    """
    Save an image with the format picked from the file extension.

    png, jpg/jpeg, bmp, gif and webp are recognized; anything else is
    written as PNG.
    """
    output_path = Path(path)
    image_format = image_format_for(output_path)
    try:
        if image_format == 'JPEG':
            img.save(output_path, image_format, quality=95)
        else:
            img.save(output_path, image_format)
    except (OSError, ValueError) as e:
        raise ValueError(f"Failed to save image: {e}") from e
    return output_path


def get_image_info(path: Union[str, Path]) -> ImageInfo:
    """Dimensions and color type of an image file without converting it."""
    try:
        with Image.open(path) as img:
            return ImageInfo(width=img.width, height=img.height, color_type=img.mode)
    except (OSError, UnidentifiedImageError) as e:
        raise ValueError(f"Failed to open image: {e}") from e


def image_to_data_url(img: Image.Image) -> str:
    """Encode an image as a PNG data URL."""
    buffer = io.BytesIO()
    img.save(buffer, 'PNG')
    return DATA_URL_PREFIX + base64.b64encode(buffer.getvalue()).decode('ascii')


def data_url_to_image(image_data: str) -> Image.Image:
    """Decode a PNG data URL produced by `image_to_data_url`."""
    if not image_data.startswith(DATA_URL_PREFIX):
        raise ValueError("Invalid image data format")

    try:
        decoded = base64.b64decode(image_data[len(DATA_URL_PREFIX):], validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 image data: {e}") from e

    try:
        img = Image.open(io.BytesIO(decoded))
        img.load()
    except (OSError, UnidentifiedImageError) as e:
        raise ValueError(f"Failed to decode image data: {e}") from e
    return img


def apply_dither(
    img: Image.Image,
    settings: DitheringSettings,
    adjustments: Optional[Adjustments] = None
) -> Image.Image:
    """
    Apply dithering to a PIL Image.

    Args:
        img: Source image. Converted to RGB if needed.
        settings: Dithering settings.
        adjustments: Optional tone adjustments applied before dithering.

    Returns:
        New RGB image with the same size.
    """
    if img.mode != 'RGB':
        img = img.convert('RGB')

    image_array = np.array(img)
    if adjustments is not None:
        image_array = preprocess_image(image_array, adjustments)

    start = time.perf_counter()
    dithered_array = apply_dithering(image_array, settings)
    elapsed = (time.perf_counter() - start) * 1000.0
    logger.debug("%s on %dx%d took %.1f ms", settings.algorithm, img.width, img.height, elapsed)

    return Image.fromarray(dithered_array)


def dither_image(
    input_path: Union[str, Path],
    settings: DitheringSettings,
    output_path: Optional[Union[str, Path]] = None,
    adjustments: Optional[Adjustments] = None
) -> Path:
    """
    Dither an image file and write the result.

    Args:
        input_path: Path to input image file
        settings: Dithering settings
        output_path: Optional path for output file. If None, generated from input filename.
        adjustments: Optional tone adjustments applied before dithering

    Returns:
        Path to output file
    """
    img = load_image(input_path)
    logger.info("Dithering %s (%dx%d) with %s", input_path, img.width, img.height, settings.algorithm)

    result = apply_dither(img, settings, adjustments)

    # Determine final output path
    final_output_path: Path
    if output_path is None:
        final_output_path = get_output_filename(input_path)
    else:
        final_output_path = Path(output_path)

    return save_image(result, final_output_path)
