import numpy as np
import numpy.typing as npt

from ...constants import MIN_HALFTONE_SCALE
from .ordered import threshold_dither


def _cell_offsets(height: int, width: int, scale: float) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Position of every pixel relative to the center of its halftone cell."""
    y_coords, x_coords = np.indices((height, width), dtype=float)
    cell_x = np.mod(x_coords, scale) - scale / 2.0
    cell_y = np.mod(y_coords, scale) - scale / 2.0
    return cell_x, cell_y


def halftone_circle_dither(image_array: npt.NDArray[np.integer], pattern_scale: int = 4) -> npt.NDArray[np.uint8]:
    """
    Halftone with circular dots.

    The threshold is the distance to the cell center normalized by half the
    cell size, so brighter pixels light up a larger disc around the center.

    Args:
        image_array: RGB array (h, w, 3).
        pattern_scale: Cell edge in pixels. Values below 4 are raised to 4.
    """
    height, width = image_array.shape[:2]
    scale = float(max(pattern_scale, MIN_HALFTONE_SCALE))
    cell_x, cell_y = _cell_offsets(height, width, scale)
    distance = np.sqrt(cell_x * cell_x + cell_y * cell_y) / (scale / 2.0)
    return threshold_dither(image_array, distance)


def halftone_diamond_dither(image_array: npt.NDArray[np.integer], pattern_scale: int = 4) -> npt.NDArray[np.uint8]:
    """Halftone with diamond dots (Manhattan distance over the cell size)."""
    height, width = image_array.shape[:2]
    scale = float(max(pattern_scale, MIN_HALFTONE_SCALE))
    cell_x, cell_y = _cell_offsets(height, width, scale)
    distance = (np.abs(cell_x) + np.abs(cell_y)) / scale
    return threshold_dither(image_array, distance)
