import logging
import sys
import click
from typing import Callable, Optional
from rich.console import Console
from rich.logging import RichHandler

from .constants import ALGORITHM_FAMILIES, ColorMode, DitheringAlgorithm
from .settings import ALGORITHMS, COLOR_MODES, DitheringSettings
from .processing.filters.adjust import Adjustments
from .core.pipeline import dither_image, get_image_info
from .core.utils import get_output_filename
from .core.video import process_video_file

console = Console(stderr=True)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route log records through a Rich handler on stderr."""
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True
    )


def dithering_options(func: Callable) -> Callable:
    """Options shared by the image and video commands."""
    options = [
        click.option(
            '--algorithm', '-a',
            type=click.Choice(ALGORITHMS, case_sensitive=False),
            default='floyd-steinberg',
            show_default=True,
            help='Dithering algorithm. See "pixeldither algorithms".'
        ),
        click.option(
            '--colors',
            type=click.IntRange(2, 256),
            default=2,
            show_default=True,
            help='Levels per channel (error diffusion and riemersma only).'
        ),
        click.option(
            '--threshold',
            type=click.FloatRange(0.0, 1.0),
            default=0.5,
            show_default=True,
            help='Threshold for threshold and noise based algorithms (0.0-1.0).'
        ),
        click.option(
            '--error-diffusion',
            type=click.FloatRange(0.0, 1.0),
            default=1.0,
            show_default=True,
            help='Error diffusion strength (0.0-1.0).'
        ),
        click.option(
            '--pattern-scale',
            type=click.IntRange(1, None),
            default=2,
            show_default=True,
            help='Pattern/halftone cell size in pixels.'
        ),
        click.option(
            '--serpentine/--no-serpentine',
            default=True,
            show_default=True,
            help='Alternate scan direction on odd rows (error diffusion).'
        ),
        click.option(
            '--color-mode',
            type=click.Choice(COLOR_MODES, case_sensitive=False),
            default='monochrome',
            show_default=True,
            help='Color mode (advisory, does not change the output).'
        ),
        click.option(
            '--seed',
            type=int,
            default=None,
            help='Seed for the noise algorithms. Defaults to a fixed per-algorithm seed.'
        ),
        click.option('--brightness', type=click.FloatRange(-1.0, 1.0), default=0.0, show_default=True,
                     help='Brightness added before dithering.'),
        click.option('--contrast', type=click.FloatRange(0.0, 3.0), default=1.0, show_default=True,
                     help='Contrast multiplier applied before dithering.'),
        click.option('--gamma', type=click.FloatRange(0.1, 3.0), default=1.0, show_default=True,
                     help='Gamma applied before dithering.'),
        click.option('--saturation', type=click.FloatRange(0.0, 2.0), default=1.0, show_default=True,
                     help='Saturation multiplier applied before dithering.'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_settings(
    algorithm: DitheringAlgorithm,
    colors: int,
    threshold: float,
    error_diffusion: float,
    pattern_scale: int,
    serpentine: bool,
    color_mode: ColorMode,
    seed: Optional[int]
) -> DitheringSettings:
    return DitheringSettings(
        algorithm=algorithm.lower(),  # type: ignore[arg-type]
        colors=colors,
        threshold=threshold,
        error_diffusion=error_diffusion,
        pattern_scale=pattern_scale,
        serpentine=serpentine,
        color_mode=color_mode.lower(),  # type: ignore[arg-type]
        seed=seed
    )


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Show debug output.')
@click.option('--quiet', '-q', is_flag=True, help='Only show errors.')
def main(verbose: bool, quiet: bool) -> None:
    """Dither images and videos with classic and modern algorithms."""
    setup_logging(verbose=verbose, quiet=quiet)


@main.command()
@click.argument('image', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--output', '-o',
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help='Output file path. The extension picks the format (png, jpg, bmp, gif, webp). Defaults to automatic naming.'
)
@dithering_options
def image(
    image: str,
    output: Optional[str],
    algorithm: DitheringAlgorithm,
    colors: int,
    threshold: float,
    error_diffusion: float,
    pattern_scale: int,
    serpentine: bool,
    color_mode: ColorMode,
    seed: Optional[int],
    brightness: float,
    contrast: float,
    gamma: float,
    saturation: float
) -> None:
    """Dither a single image.

    IMAGE is the path to the input image file.
    """
    try:
        settings = _build_settings(
            algorithm, colors, threshold, error_diffusion, pattern_scale, serpentine, color_mode, seed
        )
        adjustments = Adjustments(brightness=brightness, contrast=contrast, gamma=gamma, saturation=saturation)
        output_path = dither_image(image, settings, output_path=output, adjustments=adjustments)
        click.secho(f"✓ Dithered image saved to: {output_path}", fg='green')
    except Exception as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)


@main.command()
@click.argument('input_video', type=click.Path(exists=True, dir_okay=False))
@click.argument('output_video', type=click.Path(dir_okay=False, writable=True), required=False)
@dithering_options
def video(
    input_video: str,
    output_video: Optional[str],
    algorithm: DitheringAlgorithm,
    colors: int,
    threshold: float,
    error_diffusion: float,
    pattern_scale: int,
    serpentine: bool,
    color_mode: ColorMode,
    seed: Optional[int],
    brightness: float,
    contrast: float,
    gamma: float,
    saturation: float
) -> None:
    """Dither every frame of a video. Requires ffmpeg on PATH.

    INPUT_VIDEO is the source video. OUTPUT_VIDEO defaults to automatic naming.
    """
    try:
        settings = _build_settings(
            algorithm, colors, threshold, error_diffusion, pattern_scale, serpentine, color_mode, seed
        )
        adjustments = Adjustments(brightness=brightness, contrast=contrast, gamma=gamma, saturation=saturation)
        destination = output_video if output_video else get_output_filename(input_video)

        with click.progressbar(length=100, label='Dithering frames') as bar:
            def report(percent: float) -> None:
                bar.update(int(percent) - bar.pos)

            output_path = process_video_file(
                input_video, destination, settings,
                progress_callback=report, adjustments=adjustments
            )
        click.secho(f"✓ Dithered video saved to: {output_path}", fg='green')
    except Exception as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)


@main.command()
@click.argument('image', type=click.Path(exists=True, dir_okay=False))
def info(image: str) -> None:
    """Show the size and color type of IMAGE."""
    try:
        image_info = get_image_info(image)
    except ValueError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)
    click.echo(f"Width: {image_info.width}")
    click.echo(f"Height: {image_info.height}")
    click.echo(f"Color type: {image_info.color_type}")


@main.command()
def algorithms() -> None:
    """List the available algorithms by family."""
    for family, names in ALGORITHM_FAMILIES.items():
        click.secho(f"{family}:", bold=True)
        for name in names:
            click.echo(f"  {name}")
