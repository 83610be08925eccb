import numpy as np
import numpy.typing as npt

from ..rng import Lcg, generate_blue_noise
from .ordered import threshold_dither


def blue_noise_dither(
    image_array: npt.NDArray[np.integer],
    threshold: float,
    rng: Lcg
) -> npt.NDArray[np.uint8]:
    """
    Dither against a full-frame blue-noise field scaled by `threshold`.

    The field is generated for this call only, so the result is
    deterministic for a given seed.
    """
    height, width = image_array.shape[:2]
    noise = generate_blue_noise(width, height, rng)
    return threshold_dither(image_array, noise * threshold)


def white_noise_dither(
    image_array: npt.NDArray[np.integer],
    threshold: float,
    rng: Lcg
) -> npt.NDArray[np.uint8]:
    """
    Dither against white noise: one LCG sample per pixel in row-major
    order, shared by all three channels and scaled by `threshold`.
    """
    height, width = image_array.shape[:2]
    noise = rng.uniform(height * width).reshape(height, width)
    return threshold_dither(image_array, noise * threshold)


def random_threshold_dither(
    image_array: npt.NDArray[np.integer],
    threshold: float,
    rng: Lcg
) -> npt.NDArray[np.uint8]:
    """
    Like white noise, but every channel draws its own sample (R, G, B per
    pixel, pixels in row-major order).
    """
    height, width = image_array.shape[:2]
    noise = rng.uniform(height * width * 3).reshape(height, width, 3)
    return threshold_dither(image_array, noise * threshold)
