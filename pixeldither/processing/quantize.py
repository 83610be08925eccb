import numpy as np
import numpy.typing as npt
from numba import jit


@jit(nopython=True)
def _quantize_channel_jit(value: float, levels: int) -> int:
    """Nearest of `levels` evenly spaced levels, rescaled to 0-255 and truncated."""
    # Round half away from zero; value is never negative here
    level = np.floor(value * (levels - 1) + 0.5)
    return int(level * 255.0 / (levels - 1))


@jit(nopython=True)
def _quantize_color_jit(color: npt.NDArray[np.float64], levels: int, out: npt.NDArray[np.uint8]) -> None:
    for c in range(3):
        out[c] = _quantize_channel_jit(color[c], levels)


def quantize_channel(value: float, levels: int) -> int:
    """
    Quantize a channel value in [0, 1] to one of `levels` discrete levels.

    Args:
        value: Channel intensity (0.0-1.0).
        levels: Number of levels (>= 2).

    Returns:
        Level value in 0-255. 0 and 255 are always reachable.
    """
    if levels < 2:
        raise ValueError(f"levels must be at least 2, got {levels}")
    return _quantize_channel_jit(float(value), levels)


def quantize_color(color: tuple[float, float, float], levels: int) -> tuple[int, int, int]:
    """Quantize each channel of a float RGB color independently."""
    r, g, b = color
    return (
        quantize_channel(r, levels),
        quantize_channel(g, levels),
        quantize_channel(b, levels),
    )


def quantization_levels(levels: int) -> list[int]:
    """All values `quantize_channel` can return for `levels`."""
    if levels < 2:
        raise ValueError(f"levels must be at least 2, got {levels}")
    return [k * 255 // (levels - 1) for k in range(levels)]
