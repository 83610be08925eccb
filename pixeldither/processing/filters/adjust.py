from dataclasses import dataclass
import numpy as np
import numpy.typing as npt


@dataclass(frozen=True)
class Adjustments:
    """Tone adjustments applied before dithering. Defaults leave the image untouched."""

    brightness: float = 0.0   # added after contrast, -1.0 to 1.0
    contrast: float = 1.0     # multiplier, 0.0 to 3.0
    gamma: float = 1.0        # exponent, 0.1 to 3.0
    saturation: float = 1.0   # HSV saturation multiplier, 0.0 to 2.0

    @property
    def is_identity(self) -> bool:
        return (
            self.brightness == 0.0 and self.contrast == 1.0
            and self.gamma == 1.0 and self.saturation == 1.0
        )


def preprocess_image(
    image_array: npt.NDArray[np.integer],
    adjustments: Adjustments
) -> npt.NDArray[np.uint8]:
    """
    Apply brightness, contrast, gamma and saturation to an RGB array.

    Order: contrast and brightness, gamma, then saturation. Saturation scales
    each channel's distance to the pixel's brightest channel, which is the
    HSV saturation change with hue and value kept.

    Args:
        image_array: RGB array (h, w, 3) with values 0-255.
        adjustments: Adjustment values.

    Returns:
        Adjusted RGB array (uint8). The input is returned as-is for identity
        adjustments.
    """
    if adjustments.is_identity:
        return image_array.astype(np.uint8, copy=False)
    if adjustments.gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {adjustments.gamma}")

    img = image_array.astype(float) / 255.0
    img = np.clip(img * adjustments.contrast + adjustments.brightness, 0.0, 1.0)

    if adjustments.gamma != 1.0:
        img = np.power(img, adjustments.gamma)

    if adjustments.saturation != 1.0:
        value = img.max(axis=2, keepdims=True)
        img = value - (value - img) * adjustments.saturation

    img = np.clip(img, 0.0, 1.0)
    return np.round(img * 255.0).astype(np.uint8)
