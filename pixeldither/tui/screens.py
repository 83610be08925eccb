import sys
import subprocess
from pathlib import Path
from typing import cast, Optional, Tuple
from PIL import Image
from textual.app import ComposeResult
from textual.containers import Container, VerticalScroll
from textual.widgets import Button, Header, Footer, Label, Switch, Select, Input, Static, ListItem, ListView
from textual.binding import Binding
from textual.screen import Screen
from rich.text import Text
from rich.style import Style

from ..constants import IMAGE_EXTENSIONS, ColorMode, DitheringAlgorithm
from ..settings import ALGORITHMS, COLOR_MODES, DitheringSettings
from ..processing.filters.adjust import Adjustments
from ..core.pipeline import apply_dither, load_image, save_image
from ..core.utils import get_output_filename


class FileSelectionScreen(Screen):
    CSS = """
    FileSelectionScreen {
        layout: vertical;
        align: center middle;
    }
    #file-list-container {
        width: 80%;
        height: 80%;
        border: solid $accent;
        background: $surface;
    }
    .header-label {
        text-align: center;
        padding: 1;
        background: $primary;
        color: $text;
        text-style: bold;
    }
    ListView {
        height: 1fr;
    }
    """

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="file-list-container"):
            yield Label("Select an image file (png, jpg, jpeg, bmp, gif, webp)", classes="header-label")
            yield ListView(id="file-list")
        yield Label("Tip: You can also run 'pixeldither-tui <image>'", classes="header-label")
        yield Footer()

    def on_mount(self):
        files = sorted([
            f for f in Path('.').iterdir()
            if f.is_file() and f.suffix.lower() in IMAGE_EXTENSIONS
            and not f.stem.endswith('-preview')
        ])

        list_view = self.query_one("#file-list", ListView)
        for f in files:
            list_view.append(ListItem(Label(f.name)))

        if not files:
            list_view.append(ListItem(Label("No image files found in current directory")))

    def on_list_view_selected(self, event: ListView.Selected):
        label = event.item.query_one(Label)
        filename = str(label.render())
        if filename.startswith("No image files"):
            return

        file_path = Path(filename).resolve()
        self.app.push_screen(DitheringScreen(file_path))


class DitheringScreen(Screen):
    CSS = """
    DitheringScreen {
        layout: horizontal;
    }
    #sidebar {
        width: 40;
        height: 100%;
        dock: left;
        border-right: solid $accent;
        padding: 1 2;
        background: $surface;
    }
    #preview-container {
        width: 1fr;
        height: 100%;
        align: center middle;
        overflow: auto;
    }
    #preview {
        width: auto;
        height: auto;
    }
    Label {
        margin-bottom: 1;
        color: $text-muted;
    }
    .header-label {
        color: $text;
        text-style: bold;
        margin-top: 1;
    }
    Input {
        margin-bottom: 1;
    }
    Switch {
        margin-bottom: 1;
    }
    Select {
        margin-bottom: 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit_app", "Quit"),
        Binding("escape", "back", "Back/Quit"),
        Binding("o", "open_viewer", "Open Viewer"),
        Binding("s", "save_output", "Save"),
    ]

    def __init__(self, image_path: Path):
        super().__init__()
        self.image_path = image_path
        self.original_image = load_image(self.image_path)

        # Preview file path
        self.preview_path = self.image_path.parent / f"{self.image_path.stem}-preview.png"

        # Debounce timer
        self.update_timer = None

    def compose(self) -> ComposeResult:
        yield Header()

        with VerticalScroll(id="sidebar"):
            yield Label("Dithering Controls", classes="header-label")

            yield Label("Algorithm")
            yield Select.from_values(ALGORITHMS, value="floyd-steinberg", id="algorithm")

            yield Label("Colors per Channel (2 - 256)")
            yield Input(value="2", id="colors")

            yield Label("Threshold (0.0 - 1.0)")
            yield Input(value="0.5", id="threshold")

            yield Label("Error Diffusion (0.0 - 1.0)")
            yield Input(value="1.0", id="error_diffusion")

            yield Label("Pattern Scale (pixels)")
            yield Input(value="2", id="pattern_scale")

            yield Label("Serpentine Scan")
            yield Switch(value=True, id="serpentine")

            yield Label("Color Mode")
            yield Select.from_values(COLOR_MODES, value="monochrome", id="color_mode")

            yield Label("Seed (Optional Integer)")
            yield Input(value="", placeholder="Default", id="seed")

            yield Label("--- Adjustments ---", classes="header-label")
            yield Label("Brightness (-1.0 - 1.0)")
            yield Input(value="0.0", id="brightness")

            yield Label("Contrast (0.0 - 3.0)")
            yield Input(value="1.0", id="contrast")

            yield Label("Gamma (0.1 - 3.0)")
            yield Input(value="1.0", id="gamma")

            yield Label("Saturation (0.0 - 2.0)")
            yield Input(value="1.0", id="saturation")

            yield Label("")
            yield Button("Open External Viewer (o)", id="btn-open", variant="primary")
            yield Label("")
            yield Button("Save & Quit (s)", id="btn-save", variant="success")

        with Container(id="preview-container"):
            yield Static(id="preview")

        yield Footer()

    def on_mount(self):
        self.update_preview()

    def on_input_changed(self, event):
        self.update_preview_debounced()

    def on_switch_changed(self, event):
        self.update_preview()

    def on_select_changed(self, event):
        self.update_preview()

    def on_button_pressed(self, event):
        if event.button.id == "btn-open":
            self.action_open_viewer()
        elif event.button.id == "btn-save":
            self.action_save_output()

    def action_quit_app(self):
        self.app.exit()

    def action_back(self):
        # The first screen has nothing to go back to
        if len(self.app.screen_stack) > 1:
            self.app.pop_screen()
        else:
            self.app.exit()

    def update_preview_debounced(self):
        if self.update_timer:
            self.update_timer.stop()
        self.update_timer = self.set_timer(0.5, self.update_preview)

    def _float_input(self, widget_id: str, default: float, low: float, high: float) -> float:
        try:
            value = float(self.query_one(f"#{widget_id}", Input).value)
        except ValueError:
            return default
        return min(max(value, low), high)

    def _int_input(self, widget_id: str, default: int, low: int, high: int) -> int:
        try:
            value = int(self.query_one(f"#{widget_id}", Input).value)
        except ValueError:
            return default
        return min(max(value, low), high)

    def _get_dither_params(self) -> Tuple[DitheringSettings, Adjustments]:
        """Read the current settings and adjustments from the widgets."""
        algorithm_val = self.query_one("#algorithm", Select).value
        algorithm = cast(DitheringAlgorithm, str(algorithm_val) if algorithm_val != Select.BLANK else "floyd-steinberg")

        mode_val = self.query_one("#color_mode", Select).value
        color_mode = cast(ColorMode, str(mode_val) if mode_val != Select.BLANK else "monochrome")

        seed_str = self.query_one("#seed", Input).value
        seed: Optional[int]
        try:
            seed = int(seed_str) if seed_str.strip() else None
        except ValueError:
            seed = None

        settings = DitheringSettings(
            algorithm=algorithm,
            colors=self._int_input("colors", 2, 2, 256),
            threshold=self._float_input("threshold", 0.5, 0.0, 1.0),
            error_diffusion=self._float_input("error_diffusion", 1.0, 0.0, 1.0),
            pattern_scale=self._int_input("pattern_scale", 2, 1, 256),
            serpentine=self.query_one("#serpentine", Switch).value,
            color_mode=color_mode,
            seed=seed
        )
        adjustments = Adjustments(
            brightness=self._float_input("brightness", 0.0, -1.0, 1.0),
            contrast=self._float_input("contrast", 1.0, 0.0, 3.0),
            gamma=self._float_input("gamma", 1.0, 0.1, 3.0),
            saturation=self._float_input("saturation", 1.0, 0.0, 2.0)
        )
        return settings, adjustments

    def _get_preview_target_size(self) -> Tuple[int, int]:
        """Calculate the target pixel dimensions for the preview based on container size."""
        container = self.query_one("#preview-container")
        width = container.size.width or 80
        height = container.size.height or 40

        # Adjust for padding
        width = max(20, width - 4)
        height = max(10, height - 2)

        # One character cell shows two vertically stacked pixels
        target_w_max = width
        target_h_max = height * 2

        img_w, img_h = self.original_image.size
        scale = min(target_w_max / img_w, target_h_max / img_h)

        new_w = int(img_w * scale)
        new_h = int(img_h * scale)

        # Ensure new_h is even
        if new_h % 2 != 0:
            new_h -= 1

        return max(1, new_w), max(1, new_h)

    def update_preview(self):
        try:
            settings, adjustments = self._get_dither_params()

            # Dither at preview resolution for responsiveness
            target_w, target_h = self._get_preview_target_size()
            preview_input = self.original_image.resize((target_w, target_h), Image.Resampling.BILINEAR)
            result_img = apply_dither(preview_input, settings, adjustments)

            result_img.save(self.preview_path)
            self.query_one("#preview", Static).update(image_to_half_blocks(result_img))
        except (ValueError, OSError) as e:
            self.notify(f"Error updating preview: {e}", severity="error")

    def action_open_viewer(self):
        """Open a full resolution result in the external viewer."""
        try:
            self.notify("Generating full resolution preview...")
            settings, adjustments = self._get_dither_params()
            result_img = apply_dither(self.original_image, settings, adjustments)

            full_preview_path = self.image_path.parent / f"{self.image_path.stem}-preview-full.png"
            result_img.save(full_preview_path)

            if sys.platform == "linux":
                subprocess.Popen(["xdg-open", str(full_preview_path)])
            elif sys.platform == "darwin": # macOS
                subprocess.Popen(["open", str(full_preview_path)])
            elif sys.platform == "win32":
                subprocess.Popen(["start", str(full_preview_path)], shell=True)
            self.notify("Opened external viewer")
        except (ValueError, OSError) as e:
            self.notify(f"Failed to open viewer: {e}", severity="error")

    def action_save_output(self):
        """Save to final filename and quit."""
        try:
            self.notify("Generating full resolution output...")
            settings, adjustments = self._get_dither_params()
            result_img = apply_dither(self.original_image, settings, adjustments)

            final_path = save_image(result_img, get_output_filename(self.image_path))

            print(f"Saved to {final_path}")
            self.app.exit()
        except (ValueError, OSError) as e:
            self.notify(f"Error saving: {e}", severity="error")


def image_to_half_blocks(img: Image.Image) -> Text:
    """
    Render an RGB image as colored upper-half-block characters.

    Each character shows two stacked pixels: the top one as foreground and
    the bottom one as background. Odd heights pad the last row with black.
    """
    img = img.convert('RGB')
    width, height = img.size
    pixels = img.load()

    text = Text()
    for y in range(0, height, 2):
        for x in range(width):
            r1, g1, b1 = cast(Tuple[int, int, int], pixels[x, y])
            if y + 1 < height:
                r2, g2, b2 = cast(Tuple[int, int, int], pixels[x, y + 1])
            else:
                r2, g2, b2 = 0, 0, 0

            text.append("▀", style=Style(color=f"rgb({r1},{g1},{b1})", bgcolor=f"rgb({r2},{g2},{b2})"))
        text.append("\n")

    return text
