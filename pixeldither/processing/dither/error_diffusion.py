import numpy as np
import numpy.typing as npt
from numba import jit

from ...constants import Kernel, ERROR_DIFFUSION_KERNELS
from ..quantize import _quantize_color_jit


def validate_kernel(kernel: Kernel) -> None:
    """
    Check that a kernel only reaches pixels that are not yet finalized and
    never diffuses more error than it removes.
    """
    if not kernel:
        raise ValueError("Kernel must have at least one entry")
    total = 0.0
    for dx, dy, weight in kernel:
        if dy < 0 or (dy == 0 and dx <= 0):
            raise ValueError(f"Kernel offset ({dx}, {dy}) points at an already processed pixel")
        if weight <= 0.0:
            raise ValueError(f"Kernel weight must be positive, got {weight}")
        total += weight
    if total > 1.0 + 1e-6:
        raise ValueError(f"Kernel weights sum to {total}, more than 1")


def validate_kernels(kernels: dict[str, Kernel]) -> None:
    """Validate every named kernel, naming the offending one on failure."""
    for name, kernel in kernels.items():
        try:
            validate_kernel(kernel)
        except ValueError as e:
            raise ValueError(f"Invalid {name} kernel: {e}") from e


validate_kernels(ERROR_DIFFUSION_KERNELS)


@jit(nopython=True)
def _error_diffusion_jit(
    img: npt.NDArray[np.float64],
    out: npt.NDArray[np.uint8],
    offsets: npt.NDArray[np.int64],
    weights: npt.NDArray[np.float64],
    levels: int,
    strength: float,
    serpentine: bool
) -> None:
    """
    Core error diffusion loop optimized with Numba.

    Args:
        img: (h, w, 3) source image scaled to [0, 1].
        out: (h, w, 3) output buffer, written once per pixel.
        offsets: (k, 2) kernel offsets as (dx, dy).
        weights: (k,) kernel weights.
        levels: Quantization levels per channel.
        strength: Scale applied to every diffused error.
        serpentine: Reverse the scan direction on odd rows.
    """
    height, width, _ = img.shape
    errors = np.zeros((height, width, 3))
    color = np.zeros(3)
    new_color = np.zeros(3, dtype=np.uint8)

    for y in range(height):
        reverse = serpentine and y % 2 == 1
        direction = -1 if reverse else 1

        for i in range(width):
            x = width - 1 - i if reverse else i

            for c in range(3):
                color[c] = min(max(img[y, x, c] + errors[y, x, c], 0.0), 1.0)

            _quantize_color_jit(color, levels, new_color)
            for c in range(3):
                out[y, x, c] = new_color[c]

            for k in range(offsets.shape[0]):
                nx = x + offsets[k, 0] * direction
                ny = y + offsets[k, 1]
                if nx < 0 or nx >= width or ny >= height:
                    continue
                w = weights[k] * strength
                for c in range(3):
                    errors[ny, nx, c] += (color[c] - new_color[c] / 255.0) * w


def error_diffusion_dither(
    image_array: npt.NDArray[np.integer],
    kernel: Kernel,
    colors: int = 2,
    error_diffusion: float = 1.0,
    serpentine: bool = True
) -> npt.NDArray[np.uint8]:
    """
    Apply error diffusion dithering with an arbitrary kernel.

    Each pixel is quantized to `colors` levels per channel and its residual
    is spread over the kernel's not-yet-visited neighbors. All ten error
    diffusion algorithms go through here and differ only by kernel.

    Args:
        image_array: RGB array (h, w, 3) with values 0-255.
        kernel: (dx, dy, weight) entries relative to the current pixel.
        colors: Quantization levels per channel (>= 2).
        error_diffusion: Strength of the diffused error (0.0-1.0).
        serpentine: Alternate scan direction per row; dx is mirrored on
                    right-to-left rows.

    Returns:
        Dithered RGB array (uint8) with the same shape as the input.
    """
    validate_kernel(kernel)
    img = image_array.astype(float) / 255.0
    out = np.zeros(image_array.shape, dtype=np.uint8)

    offsets = np.array([(dx, dy) for dx, dy, _ in kernel], dtype=np.int64)
    weights = np.array([w for _, _, w in kernel], dtype=np.float64)

    _error_diffusion_jit(img, out, offsets, weights, colors, float(error_diffusion), serpentine)

    return out
