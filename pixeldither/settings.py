from dataclasses import dataclass
from typing import Optional, get_args

from .constants import RGB, ColorMode, DitheringAlgorithm

ALGORITHMS: tuple[str, ...] = get_args(DitheringAlgorithm)
COLOR_MODES: tuple[str, ...] = get_args(ColorMode)


@dataclass(frozen=True)
class DitheringSettings:
    """
    Settings for a single dithering call.

    Args:
        algorithm: Dithering algorithm name.
        colors: Quantization levels per channel (>= 2). Only error diffusion
                and Riemersma use it; threshold-based algorithms are binary.
        threshold: Threshold value (0.0-1.0).
        error_diffusion: Strength applied to diffused error (0.0-1.0).
        pattern_scale: Pixels per cell edge for pattern and halftone dithering.
        serpentine: Alternate scan direction on odd rows.
        color_mode: Advisory color mode. Not consumed by the algorithms.
        palette: RGB entries for 'custom-palette'. Not consumed either.
        seed: Overrides the default LCG seed of the noise algorithms.
    """

    algorithm: DitheringAlgorithm = 'floyd-steinberg'
    colors: int = 2
    threshold: float = 0.5
    error_diffusion: float = 1.0
    pattern_scale: int = 2
    serpentine: bool = True
    color_mode: ColorMode = 'monochrome'
    palette: tuple[RGB, ...] = ()
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.algorithm not in ALGORITHMS:
            raise ValueError(f"Unknown dithering algorithm: {self.algorithm}")
        if self.colors < 2:
            raise ValueError(f"colors must be at least 2, got {self.colors}")
        if not (0.0 <= self.threshold <= 1.0):
            raise ValueError(f"threshold must be between 0.0 and 1.0, got {self.threshold}")
        if not (0.0 <= self.error_diffusion <= 1.0):
            raise ValueError(f"error_diffusion must be between 0.0 and 1.0, got {self.error_diffusion}")
        if self.pattern_scale < 1:
            raise ValueError(f"pattern_scale must be at least 1, got {self.pattern_scale}")
        if self.color_mode not in COLOR_MODES:
            raise ValueError(f"Unknown color mode: {self.color_mode}")
        for entry in self.palette:
            if len(entry) != 3 or any(not (0 <= c <= 255) for c in entry):
                raise ValueError(f"Palette entries must be RGB triples in 0-255, got {entry}")
