import math
from numba import jit


@jit(nopython=True)
def hilbert_index_to_xy(index: int, level: int) -> tuple[int, int]:
    """
    Map a curve index in [0, 4**level) to (x, y) on a 2**level square.

    Two bits of the index are consumed per iteration, least significant
    first. Each pair selects a quadrant; when ry is 0 the already placed
    lower-order coordinates are reflected (if rx is 1) and transposed.
    """
    x = 0
    y = 0
    s = 1

    for i in range(level):
        rx = 1 & (index >> (2 * i))
        ry = 1 & (index >> (2 * i + 1))

        if ry == 0:
            if rx == 1:
                x = s - 1 - x
                y = s - 1 - y
            x, y = y, x

        x += rx * s
        y += ry * s
        s *= 2

    return x, y


def curve_level(width: int, height: int) -> int:
    """Smallest level whose square covers width x height, at least 1."""
    longest = max(width, height)
    if longest <= 1:
        return 1
    return max(1, math.ceil(math.log2(longest)))
