import numpy as np
import numpy.typing as npt

from .ordered import threshold_dither


def horizontal_gradient(image_array: npt.NDArray[np.integer]) -> npt.NDArray[np.float64]:
    """
    Horizontal gradient magnitude per pixel in [0, 1].

    Sum over channels of |right - left| divided by 3 * 255. The first and
    last columns have no two-sided neighborhood and get 0.
    """
    height, width = image_array.shape[:2]
    gradient = np.zeros((height, width), dtype=float)
    if width < 3:
        return gradient
    img = image_array.astype(np.int32)
    diff = np.abs(img[:, 2:, :] - img[:, :-2, :]).sum(axis=2)
    gradient[:, 1:-1] = diff / 765.0
    return gradient


def gradient_based_dither(image_array: npt.NDArray[np.integer], threshold: float = 0.5) -> npt.NDArray[np.uint8]:
    """
    Threshold dithering that adapts to local contrast.

    Args:
        image_array: RGB array (h, w, 3).
        threshold: Base threshold (0.0-1.0). Lowered by up to half on strong
                   horizontal edges so edge pixels light up more easily.

    Returns:
        Binary RGB array (uint8).
    """
    adjusted_thresholds = threshold * (1.0 - horizontal_gradient(image_array) * 0.5)
    return threshold_dither(image_array, adjusted_thresholds)
