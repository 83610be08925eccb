from typing import Literal, Tuple
import numpy as np

# Dithering algorithms
DitheringAlgorithm = Literal[
    'floyd-steinberg', 'atkinson', 'jarvis-judice-ninke', 'stucki', 'burkes',
    'sierra', 'sierra-two-row', 'sierra-lite', 'false-floyd-steinberg', 'steven-pigeon',
    'bayer-2x2', 'bayer-4x4', 'bayer-8x8', 'bayer-16x16',
    'blue-noise', 'white-noise', 'simple-threshold', 'random-threshold',
    'pattern', 'clustered-dot', 'halftone-circle', 'halftone-diamond', 'gradient-based',
    'riemersma',
]

# Color modes. Carried in the settings but not consumed by any algorithm.
ColorMode = Literal['monochrome', 'grayscale', 'full-color', 'custom-palette']

RGB = Tuple[int, int, int]
Kernel = Tuple[Tuple[int, int, float], ...]

# Error diffusion kernels: (dx, dy, weight) relative to the current pixel
# in scan direction.
FLOYD_STEINBERG_KERNEL: Kernel = (
    (1, 0, 7 / 16), (-1, 1, 3 / 16), (0, 1, 5 / 16), (1, 1, 1 / 16),
)

# Atkinson only diffuses 6/8 of the error
ATKINSON_KERNEL: Kernel = (
    (1, 0, 1 / 8), (2, 0, 1 / 8),
    (-1, 1, 1 / 8), (0, 1, 1 / 8), (1, 1, 1 / 8),
    (0, 2, 1 / 8),
)

JARVIS_JUDICE_NINKE_KERNEL: Kernel = (
    (1, 0, 7 / 48), (2, 0, 5 / 48),
    (-2, 1, 3 / 48), (-1, 1, 5 / 48), (0, 1, 7 / 48), (1, 1, 5 / 48), (2, 1, 3 / 48),
    (-2, 2, 1 / 48), (-1, 2, 3 / 48), (0, 2, 5 / 48), (1, 2, 3 / 48), (2, 2, 1 / 48),
)

STUCKI_KERNEL: Kernel = (
    (1, 0, 8 / 42), (2, 0, 4 / 42),
    (-2, 1, 2 / 42), (-1, 1, 4 / 42), (0, 1, 8 / 42), (1, 1, 4 / 42), (2, 1, 2 / 42),
    (-2, 2, 1 / 42), (-1, 2, 2 / 42), (0, 2, 4 / 42), (1, 2, 2 / 42), (2, 2, 1 / 42),
)

BURKES_KERNEL: Kernel = (
    (1, 0, 8 / 32), (2, 0, 4 / 32),
    (-2, 1, 2 / 32), (-1, 1, 4 / 32), (0, 1, 8 / 32), (1, 1, 4 / 32), (2, 1, 2 / 32),
)

SIERRA_KERNEL: Kernel = (
    (1, 0, 5 / 32), (2, 0, 3 / 32),
    (-2, 1, 2 / 32), (-1, 1, 4 / 32), (0, 1, 5 / 32), (1, 1, 4 / 32), (2, 1, 2 / 32),
    (-1, 2, 2 / 32), (0, 2, 3 / 32), (1, 2, 2 / 32),
)

SIERRA_TWO_ROW_KERNEL: Kernel = (
    (1, 0, 4 / 16), (2, 0, 3 / 16),
    (-2, 1, 1 / 16), (-1, 1, 2 / 16), (0, 1, 3 / 16), (1, 1, 2 / 16), (2, 1, 1 / 16),
)

SIERRA_LITE_KERNEL: Kernel = (
    (1, 0, 2 / 4), (-1, 1, 1 / 4), (0, 1, 1 / 4),
)

FALSE_FLOYD_STEINBERG_KERNEL: Kernel = (
    (1, 0, 3 / 8), (0, 1, 3 / 8), (1, 1, 2 / 8),
)

STEVEN_PIGEON_KERNEL: Kernel = (
    (1, 0, 2 / 8), (2, 0, 1 / 8),
    (-1, 1, 1 / 8), (0, 1, 2 / 8), (1, 1, 2 / 8),
)

ERROR_DIFFUSION_KERNELS: dict[str, Kernel] = {
    'floyd-steinberg': FLOYD_STEINBERG_KERNEL,
    'atkinson': ATKINSON_KERNEL,
    'jarvis-judice-ninke': JARVIS_JUDICE_NINKE_KERNEL,
    'stucki': STUCKI_KERNEL,
    'burkes': BURKES_KERNEL,
    'sierra': SIERRA_KERNEL,
    'sierra-two-row': SIERRA_TWO_ROW_KERNEL,
    'sierra-lite': SIERRA_LITE_KERNEL,
    'false-floyd-steinberg': FALSE_FLOYD_STEINBERG_KERNEL,
    'steven-pigeon': STEVEN_PIGEON_KERNEL,
}

BAYER_SIZES: dict[str, int] = {
    'bayer-2x2': 2,
    'bayer-4x4': 4,
    'bayer-8x8': 8,
    'bayer-16x16': 16,
}

ALGORITHM_FAMILIES: dict[str, tuple[str, ...]] = {
    'error-diffusion': tuple(ERROR_DIFFUSION_KERNELS),
    'ordered': ('bayer-2x2', 'bayer-4x4', 'bayer-8x8', 'bayer-16x16',
                'pattern', 'clustered-dot', 'halftone-circle', 'halftone-diamond', 'gradient-based'),
    'noise': ('blue-noise', 'white-noise', 'simple-threshold', 'random-threshold'),
    'space-filling-curve': ('riemersma',),
}

# Matrices
# Bayer 2x2 base matrix
BAYER_2x2 = np.array([
    [0, 2],
    [3, 1],
], dtype=float) / 4.0

# Pattern dither 4x4, stretched by pattern_scale
PATTERN_4x4 = np.array([
    [ 0,  8,  2, 10],
    [12,  4, 14,  6],
    [ 3, 11,  1,  9],
    [15,  7, 13,  5],
], dtype=float) / 16.0

# Clustered dot 4x4 (grows from the center)
CLUSTERED_4x4 = np.array([
    [12,  5,  6, 13],
    [ 4,  0,  1,  7],
    [11,  3,  2,  8],
    [15, 10,  9, 14],
], dtype=float) / 16.0

# Halftone cells are never smaller than this
MIN_HALFTONE_SCALE: int = 4

# Riemersma error decay along the curve
RIEMERSMA_DECAY: float = 0.7

# Default LCG seeds
BLUE_NOISE_SEED: int = 12345
WHITE_NOISE_SEED: int = 42
RANDOM_THRESHOLD_SEED: int = 99

# Video
VIDEO_FRAME_RATE: int = 30
FRAME_PATTERN: str = "frame_%06d.png"

# Image formats by file extension
SAVE_FORMATS: dict[str, str] = {
    '.png': 'PNG',
    '.jpg': 'JPEG',
    '.jpeg': 'JPEG',
    '.bmp': 'BMP',
    '.gif': 'GIF',
    '.webp': 'WEBP',
}
IMAGE_EXTENSIONS = frozenset(SAVE_FORMATS)

DATA_URL_PREFIX: str = "data:image/png;base64,"
