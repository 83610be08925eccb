from pathlib import Path
from typing import Union

from ..constants import SAVE_FORMATS


def get_output_filename(input_path: Union[str, Path], suffix: str = "dither") -> Path:
    """
    Generate output filename with -<suffix> appended to the stem, avoiding overwrites.

    Args:
        input_path: Path to input image or video
        suffix: Text appended to the stem

    Returns:
        Path object for output file
    """
    path = Path(input_path)
    stem = path.stem
    extension = path.suffix
    directory = path.parent

    # Start with base name
    output_path = directory / f"{stem}-{suffix}{extension}"

    # If file exists, append number
    counter = 1
    while output_path.exists():
        output_path = directory / f"{stem}-{suffix}-{counter}{extension}"
        counter += 1

    return output_path


def image_format_for(path: Union[str, Path]) -> str:
    """PIL format name for a file extension; unknown extensions save as PNG."""
    return SAVE_FORMATS.get(Path(path).suffix.lower(), 'PNG')
