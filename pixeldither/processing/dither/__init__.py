import numpy as np
import numpy.typing as npt
from ...constants import (
    ERROR_DIFFUSION_KERNELS, BAYER_SIZES,
    BLUE_NOISE_SEED, WHITE_NOISE_SEED, RANDOM_THRESHOLD_SEED,
)
from ...settings import DitheringSettings
from ..rng import Lcg

from .error_diffusion import error_diffusion_dither
from .ordered import bayer_dither, pattern_dither, clustered_dot_dither, simple_threshold_dither
from .noise import blue_noise_dither, white_noise_dither, random_threshold_dither
from .halftone import halftone_circle_dither, halftone_diamond_dither
from .gradient import gradient_based_dither
from .riemersma import riemersma_dither


def _check_image(image_array: npt.NDArray[np.integer]) -> None:
    if image_array.ndim != 3 or image_array.shape[2] != 3:
        raise ValueError(f"Expected an RGB array of shape (height, width, 3), got {image_array.shape}")
    if image_array.shape[0] == 0 or image_array.shape[1] == 0:
        raise ValueError("Cannot dither an empty image")


def apply_dithering(
    image_array: npt.NDArray[np.integer],
    settings: DitheringSettings
) -> npt.NDArray[np.uint8]:
    """
    Dispatch to the dithering function selected by `settings.algorithm`.

    The input array is not modified; a new array of the same shape is returned.
    """
    _check_image(image_array)
    seed = settings.seed

    match settings.algorithm:
        case ('floyd-steinberg' | 'atkinson' | 'jarvis-judice-ninke' | 'stucki' | 'burkes'
              | 'sierra' | 'sierra-two-row' | 'sierra-lite' | 'false-floyd-steinberg' | 'steven-pigeon'):
            return error_diffusion_dither(
                image_array,
                ERROR_DIFFUSION_KERNELS[settings.algorithm],
                settings.colors,
                settings.error_diffusion,
                settings.serpentine
            )
        case 'bayer-2x2' | 'bayer-4x4' | 'bayer-8x8' | 'bayer-16x16':
            return bayer_dither(image_array, BAYER_SIZES[settings.algorithm])
        case 'blue-noise':
            return blue_noise_dither(
                image_array, settings.threshold, Lcg(BLUE_NOISE_SEED if seed is None else seed)
            )
        case 'white-noise':
            return white_noise_dither(
                image_array, settings.threshold, Lcg(WHITE_NOISE_SEED if seed is None else seed)
            )
        case 'simple-threshold':
            return simple_threshold_dither(image_array, settings.threshold)
        case 'random-threshold':
            return random_threshold_dither(
                image_array, settings.threshold, Lcg(RANDOM_THRESHOLD_SEED if seed is None else seed)
            )
        case 'pattern':
            return pattern_dither(image_array, settings.pattern_scale)
        case 'clustered-dot':
            return clustered_dot_dither(image_array)
        case 'halftone-circle':
            return halftone_circle_dither(image_array, settings.pattern_scale)
        case 'halftone-diamond':
            return halftone_diamond_dither(image_array, settings.pattern_scale)
        case 'gradient-based':
            return gradient_based_dither(image_array, settings.threshold)
        case 'riemersma':
            return riemersma_dither(image_array, settings.colors, settings.error_diffusion)
        case _:
            raise ValueError(f"Unknown dithering algorithm: {settings.algorithm}")
