import numpy as np
import numpy.typing as npt

from ...constants import PATTERN_4x4, CLUSTERED_4x4
from ..bayer import generate_bayer_matrix


def threshold_dither(
    image_array: npt.NDArray[np.integer],
    thresholds: npt.NDArray[np.float64]
) -> npt.NDArray[np.uint8]:
    """
    Binary quantization against a threshold field.

    A channel becomes 255 when channel / 255 > threshold, otherwise 0.

    Args:
        image_array: RGB array (h, w, 3) with values 0-255.
        thresholds: (h, w) field shared by all channels, or (h, w, 3) with
                    one threshold per channel.

    Returns:
        RGB array (uint8) with values in {0, 255}.
    """
    if thresholds.ndim == 2:
        thresholds = thresholds[:, :, np.newaxis]
    values = image_array.astype(float) / 255.0
    return (values > thresholds).astype(np.uint8) * 255


def tile_matrix(matrix: npt.NDArray[np.float64], height: int, width: int, scale: int = 1) -> npt.NDArray[np.float64]:
    """Tile a threshold matrix over (height, width), each cell stretched to scale x scale pixels."""
    mh, mw = matrix.shape
    rows = (np.arange(height) // scale) % mh
    cols = (np.arange(width) // scale) % mw
    return matrix[np.ix_(rows, cols)]


def ordered_dither(
    image_array: npt.NDArray[np.integer],
    matrix: npt.NDArray[np.float64],
    scale: int = 1
) -> npt.NDArray[np.uint8]:
    """
    Apply ordered dithering using a threshold matrix.
    """
    height, width = image_array.shape[:2]
    return threshold_dither(image_array, tile_matrix(matrix, height, width, scale))


def bayer_dither(image_array: npt.NDArray[np.integer], size: int) -> npt.NDArray[np.uint8]:
    """Ordered dithering with a size x size Bayer matrix."""
    return ordered_dither(image_array, generate_bayer_matrix(size))


def pattern_dither(image_array: npt.NDArray[np.integer], pattern_scale: int = 1) -> npt.NDArray[np.uint8]:
    """4x4 pattern dithering where each pattern cell covers pattern_scale pixels."""
    return ordered_dither(image_array, PATTERN_4x4, scale=pattern_scale)


def clustered_dot_dither(image_array: npt.NDArray[np.integer]) -> npt.NDArray[np.uint8]:
    """4x4 clustered dot dithering. The tile is never scaled."""
    return ordered_dither(image_array, CLUSTERED_4x4)


def simple_threshold_dither(image_array: npt.NDArray[np.integer], threshold: float = 0.5) -> npt.NDArray[np.uint8]:
    """Every pixel against the same threshold."""
    height, width = image_array.shape[:2]
    return threshold_dither(image_array, np.full((height, width), threshold, dtype=float))
