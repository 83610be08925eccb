import numpy as np
import numpy.typing as npt
from numba import jit

from ...constants import RIEMERSMA_DECAY
from ..hilbert import hilbert_index_to_xy, curve_level
from ..quantize import _quantize_color_jit


@jit(nopython=True)
def _riemersma_jit(
    img: npt.NDArray[np.float64],
    out: npt.NDArray[np.uint8],
    level: int,
    levels: int,
    carry_factor: float
) -> None:
    """Walk the Hilbert curve, carrying a single decaying error between visited pixels."""
    height, width, _ = img.shape
    size = 1 << level
    error = np.zeros(3)
    color = np.zeros(3)
    new_color = np.zeros(3, dtype=np.uint8)

    for i in range(size * size):
        x, y = hilbert_index_to_xy(i, level)
        if x >= width or y >= height:
            continue

        for c in range(3):
            color[c] = min(max(img[y, x, c] + error[c], 0.0), 1.0)

        _quantize_color_jit(color, levels, new_color)
        for c in range(3):
            out[y, x, c] = new_color[c]
            error[c] = (color[c] - new_color[c] / 255.0) * carry_factor


def riemersma_dither(
    image_array: npt.NDArray[np.integer],
    colors: int = 2,
    error_diffusion: float = 1.0
) -> npt.NDArray[np.uint8]:
    """
    Apply Riemersma dithering.

    Pixels are visited in Hilbert-curve order over the smallest power-of-two
    square covering the image; curve positions outside the image are skipped.
    Only the last residual is carried forward, scaled by a fixed decay and by
    `error_diffusion`, so error follows curve locality instead of scanlines.

    Args:
        image_array: RGB array (h, w, 3) with values 0-255.
        colors: Quantization levels per channel (>= 2).
        error_diffusion: Strength of the carried error (0.0-1.0).

    Returns:
        Dithered RGB array (uint8).
    """
    height, width = image_array.shape[:2]
    img = image_array.astype(float) / 255.0
    out = np.zeros(image_array.shape, dtype=np.uint8)

    _riemersma_jit(img, out, curve_level(width, height), colors, RIEMERSMA_DECAY * error_diffusion)

    return out
