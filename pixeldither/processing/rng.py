import numpy as np
import numpy.typing as npt
from numba import jit

_LCG_MULTIPLIER = 6364136223846793005
_LCG_INCREMENT = 1
_U64_MASK = (1 << 64) - 1
_U64_MAX = float(_U64_MASK)


@jit(nopython=True)
def _lcg_fill(state: np.uint64, out: npt.NDArray[np.float64]) -> np.uint64:
    """Fill `out` with consecutive unit samples, returning the advanced state."""
    for i in range(out.shape[0]):
        state = state * np.uint64(6364136223846793005) + np.uint64(1)
        out[i] = float(state) / 18446744073709551615.0
    return state


@jit(nopython=True)
def _blue_noise_jit(width: int, height: int, state: np.uint64, noise: npt.NDArray[np.float64]) -> np.uint64:
    """Dart throwing over 256 intensity buckets. Returns the advanced LCG state."""
    total = width * height
    used = np.zeros(total, dtype=np.bool_)
    used_count = 0
    w = np.uint64(width)
    h = np.uint64(height)

    for intensity in range(256):
        target = min(total * intensity // 256, total - 1)
        attempts = 0

        while used_count < target and attempts < total * 2:
            state = state * np.uint64(6364136223846793005) + np.uint64(1)
            x = np.int64((state >> np.uint64(32)) % w)
            state = state * np.uint64(6364136223846793005) + np.uint64(1)
            y = np.int64((state >> np.uint64(32)) % h)
            idx = y * width + x

            if not used[idx]:
                noise[y, x] = intensity / 255.0
                used[idx] = True
                used_count += 1
            attempts += 1

    return state


class Lcg:
    """
    64-bit linear congruential generator.

    state' = state * 6364136223846793005 + 1 (mod 2**64). The state is
    explicit so callers can seed it and replay exact sequences.
    """

    def __init__(self, seed: int):
        self.state = seed & _U64_MASK

    def next(self) -> int:
        """Advance and return the raw 64-bit state."""
        self.state = (self.state * _LCG_MULTIPLIER + _LCG_INCREMENT) & _U64_MASK
        return self.state

    def next_unit(self) -> float:
        """Advance and return the state scaled to [0, 1]."""
        return self.next() / _U64_MAX

    def uniform(self, count: int) -> npt.NDArray[np.float64]:
        """Next `count` unit samples as an array, in generation order."""
        out = np.empty(count, dtype=np.float64)
        self.state = int(_lcg_fill(np.uint64(self.state), out))
        return out


def generate_blue_noise(width: int, height: int, rng: Lcg) -> npt.NDArray[np.float64]:
    """
    Approximate a blue-noise threshold field by incremental dart throwing.

    For each intensity bucket 0..255, random cells are claimed until the number
    of claimed cells reaches total * intensity / 256. A claimed cell keeps the
    intensity of the bucket that claimed it; unclaimed cells stay at 0.
    Each bucket is bounded to 2 * total placement attempts.

    Coordinates come from the upper 32 bits of the state. The low bits of a
    power-of-two modulus LCG cycle with a short period and would only ever
    reach a handful of cells on power-of-two sized images. For a given seed the
    field therefore deliberately differs from one placed with `state % width`.

    Args:
        width: Field width in pixels.
        height: Field height in pixels.
        rng: Generator consumed by the placement (x first, then y).

    Returns:
        (height, width) float array with values in [0, 1].
    """
    noise = np.zeros((height, width), dtype=np.float64)
    if width == 0 or height == 0:
        return noise
    rng.state = int(_blue_noise_jit(width, height, np.uint64(rng.state), noise))
    return noise
