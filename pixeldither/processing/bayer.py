from functools import lru_cache
import numpy as np
import numpy.typing as npt

from ..constants import BAYER_2x2


@lru_cache(maxsize=None)
def generate_bayer_matrix(size: int) -> npt.NDArray[np.float64]:
    """
    Generate a Bayer threshold matrix for ordered dithering.

    Size 2 is the classic base matrix. Larger power-of-two sizes interleave
    the row and column bits from the most significant bit down, so every
    entry within one tile is distinct, and center each level with
    (value + 0.5) / size**2 so all entries lie strictly inside (0, 1).

    Args:
        size: Matrix edge length, a power of two >= 2.

    Returns:
        Read-only (size, size) float array.
    """
    if size < 2 or size & (size - 1):
        raise ValueError(f"Bayer matrix size must be a power of two >= 2, got {size}")

    if size == 2:
        matrix = BAYER_2x2.copy()
    else:
        matrix = np.zeros((size, size), dtype=float)
        for i in range(size):
            for j in range(size):
                value = 0
                mask = size // 2
                while mask > 0:
                    value = value * 4 + (2 if i & mask else 0) + (1 if j & mask else 0)
                    mask >>= 1
                matrix[i, j] = (value + 0.5) / (size * size)

    matrix.setflags(write=False)
    return matrix
