import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Optional, Protocol, Union

from ..constants import VIDEO_FRAME_RATE, FRAME_PATTERN
from ..settings import DitheringSettings
from ..processing.filters.adjust import Adjustments
from .pipeline import apply_dither, load_image

logger = logging.getLogger(__name__)


class VideoProcessingError(RuntimeError):
    """A video run could not be completed."""


class TranscoderNotFoundError(VideoProcessingError):
    """The external transcoder binary is not installed."""


class VideoCancelledError(VideoProcessingError):
    """The run was cancelled between frames."""


class FrameTranscoder(Protocol):
    def extract_frames(self, input_path: Path, frames_dir: Path) -> None:
        """Write the video's frames into frames_dir as ordered PNG files."""
        ...

    def assemble_video(self, frames_dir: Path, output_path: Path) -> None:
        """Encode the ordered PNG frames in frames_dir into output_path."""
        ...


class FfmpegTranscoder:
    """Frame extraction and reassembly through the ffmpeg command line."""

    def __init__(self, binary: str = "ffmpeg", frame_rate: int = VIDEO_FRAME_RATE):
        self.binary = binary
        self.frame_rate = frame_rate

    def _run(self, args: list[str], action: str) -> None:
        executable = shutil.which(self.binary)
        if executable is None:
            raise TranscoderNotFoundError(
                f"{self.binary} not found. Please install FFmpeg to process videos."
            )

        logger.debug("Running %s %s", executable, " ".join(args))
        try:
            result = subprocess.run(
                [executable, *args],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True
            )
        except OSError as e:
            raise TranscoderNotFoundError(f"Failed to start {self.binary}: {e}") from e

        if result.returncode != 0:
            detail = result.stderr.strip().splitlines()[-1] if result.stderr.strip() else "no output"
            raise VideoProcessingError(
                f"Failed to {action} (exit code {result.returncode}): {detail}"
            )

    def extract_frames(self, input_path: Path, frames_dir: Path) -> None:
        self._run(
            ["-i", str(input_path), "-vf", f"fps={self.frame_rate}", str(frames_dir / FRAME_PATTERN)],
            "extract frames"
        )

    def assemble_video(self, frames_dir: Path, output_path: Path) -> None:
        self._run(
            [
                "-framerate", str(self.frame_rate),
                "-i", str(frames_dir / FRAME_PATTERN),
                "-c:v", "libx264",
                "-pix_fmt", "yuv420p",
                "-y", str(output_path),
            ],
            "reassemble video"
        )


def process_video_file(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    settings: DitheringSettings,
    progress_callback: Optional[Callable[[float], None]] = None,
    transcoder: Optional[FrameTranscoder] = None,
    adjustments: Optional[Adjustments] = None,
    should_cancel: Optional[Callable[[], bool]] = None
) -> Path:
    """
    Dither every frame of a video.

    The video is split into PNG frames in a temporary directory, each frame
    is dithered on its own and written back in place, then the frames are
    encoded into the output video. The temporary directory is removed on
    success and on failure.

    Args:
        input_path: Source video.
        output_path: Destination video, overwritten if present.
        settings: Dithering settings applied to every frame.
        progress_callback: Called with the completed percentage (0-100)
                           after each frame.
        transcoder: Frame extraction/reassembly backend. Defaults to ffmpeg.
        adjustments: Optional tone adjustments applied before dithering.
        should_cancel: Polled before each frame; returning True aborts the
                       run with VideoCancelledError.

    Returns:
        Path to the output video.
    """
    source = Path(input_path)
    if not source.is_file():
        raise VideoProcessingError(f"Video file not found: {source}")
    destination = Path(output_path)
    backend: FrameTranscoder = transcoder if transcoder is not None else FfmpegTranscoder()

    with tempfile.TemporaryDirectory(prefix="pixeldither_video_") as tmp_dir:
        frames_dir = Path(tmp_dir)

        logger.info("Extracting frames from %s", source)
        backend.extract_frames(source, frames_dir)

        frames = sorted(frames_dir.glob("*.png"))
        total_frames = len(frames)
        if total_frames == 0:
            raise VideoProcessingError(f"No frames extracted from {source}")
        logger.info("Dithering %d frames with %s", total_frames, settings.algorithm)

        for i, frame in enumerate(frames):
            if should_cancel is not None and should_cancel():
                raise VideoCancelledError(f"Cancelled after {i} of {total_frames} frames")

            dithered = apply_dither(load_image(frame), settings, adjustments)
            dithered.save(frame, 'PNG')

            if progress_callback is not None:
                progress_callback((i + 1) / total_frames * 100.0)

        logger.info("Encoding %s", destination)
        backend.assemble_video(frames_dir, destination)

    return destination
