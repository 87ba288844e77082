"""The game-script host: the API handed to scripts, error screen and hot reloading."""

import logging
import os
from collections import deque
from pathlib import Path
from types import SimpleNamespace
from typing import Callable, Deque, Dict, Optional, Union

from .bitmap import Bitmap, BitmapRegion
from .core import SCREEN_XSIZE, Vector2
from .drawing import ColorMode, Drawing
from .input import InputState
from .memory import Memory
from .palette import rgb888_to_rgb565

logger = logging.getLogger(__name__)

CHARACTERS = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "!.-,?"
    "abcdefghijklmnopqrstuvwxyz"
    "#()'*"
    "1234567890"
    "/:"
)

GLYPH_SIZE = 8
HOTLOAD_BEGIN = "#hotload"
HOTLOAD_END = "#end_hotload"

PathArg = Union[str, "os.PathLike[str]"]
ScriptLoader = Callable[[Path, SimpleNamespace], None]
ChunkRunner = Callable[[str, SimpleNamespace], None]


class ScriptError(Exception):
    """A script could not be loaded or run."""


def extract_hotload_chunk(file_path: PathArg) -> str:
    """The lines between #hotload and #end_hotload markers, or '' if unreadable."""
    try:
        with open(file_path, encoding="utf-8", errors="replace") as file:
            lines = file.read().splitlines()
    except OSError:
        return ""

    chunk = []
    in_hotload = False
    for line in lines:
        if HOTLOAD_BEGIN in line:
            in_hotload = True
        elif HOTLOAD_END in line:
            in_hotload = False
        elif in_hotload:
            chunk.append(line + "\n")
    return "".join(chunk)


def draw_string(
    drawing: Drawing, font: BitmapRegion, text: str, x: int, y: int, width: int
) -> None:
    """Draw text with the 8x8 bitmap font, wrapping at width and on newlines."""
    char_x, char_y = x, y
    for ch in text:
        if ch == " ":
            char_x += GLYPH_SIZE
            continue
        if ch == "\n":
            char_x = x
            char_y += GLYPH_SIZE
            continue
        if char_x >= width:
            char_x = x
            char_y += GLYPH_SIZE

        index = CHARACTERS.find(ch)
        spr_x = index * GLYPH_SIZE if index >= 0 else 0
        drawing.draw_sprite_region(font, char_x, char_y, spr_x, 0, GLYPH_SIZE, GLYPH_SIZE)
        char_x += GLYPH_SIZE


class ScriptingEngine:
    """Runs the game script and shows an error screen when it fails.

    `loader` is given the main script's path and the API namespace and is
    expected to install `init`, `update` and `render` on it. `chunk_runner`
    runs hot-reloaded code against the same namespace.
    """

    def __init__(
        self,
        memory: Memory,
        drawing: Drawing,
        input_state: InputState,
        loader: Optional[ScriptLoader] = None,
        chunk_runner: Optional[ChunkRunner] = None,
        data_dir: PathArg = "Data",
        watch_dir: Optional[PathArg] = None,
    ) -> None:
        self.memory = memory
        self.drawing = drawing
        self.input = input_state
        self.loader = loader
        self.chunk_runner = chunk_runner
        self.data_dir = Path(data_dir)
        self.watch_dir = Path(watch_dir) if watch_dir is not None else None

        self.api: Optional[SimpleNamespace] = None
        self.font = BitmapRegion()
        self.had_errors = False
        self.error_str = ""

        self._hotload_queue: Deque[Path] = deque()
        self._watch_root: Optional[Path] = None
        self._mtimes: Dict[Path, float] = {}

    # -- lifecycle --------------------------------------------------------

    def init(self) -> None:
        """Load the font, build the script API, start the main script and the watcher."""
        self._load_font()
        self._init_api()
        self._start_rom()
        self._start_hotloader()

    def release(self) -> None:
        self.api = None

    def update_scripts(self) -> None:
        self._hotload_active()
        if not self.had_errors:
            self._call("update")

    def render_scripts(self) -> None:
        if self.had_errors:
            self.drawing.clear_screen(rgb888_to_rgb565(147, 0, 0))
            self.drawing.set_color_mode(ColorMode.DIRECT)
            draw_string(self.drawing, self.font, "Script Error:", 8, 8, SCREEN_XSIZE)
            draw_string(self.drawing, self.font, self.error_str, 8, 32, SCREEN_XSIZE - 8)
        else:
            self._call("render")

    def reset(self) -> None:
        """Throw away the script state and start the main script again."""
        self.release()
        self.had_errors = False
        self._init_api()
        self._start_rom()

    def queue_hotload(self, path: PathArg) -> None:
        """Schedule the hotload chunk of a file to run before the next update."""
        self._hotload_queue.append(Path(path))

    # -- internals --------------------------------------------------------

    def _load_font(self) -> None:
        bitmap = Bitmap()
        try:
            bitmap.load(self.data_dir / "Sprites" / "font.png")
        except (OSError, ValueError) as exc:
            logger.error("Failed to load font: %s", exc)
            self.font = BitmapRegion()
            return
        self.font = BitmapRegion(bitmap=bitmap)

    def _handle_error(self, message: str) -> None:
        self.error_str = message
        logger.error("%s", message)
        self.had_errors = True

    def _init_api(self) -> None:
        drawing = self.drawing
        palettes = drawing.palettes
        self.api = SimpleNamespace(
            memory=SimpleNamespace(read=self.memory.peek, write=self.memory.poke),
            clearScreen=drawing.clear_screen,
            setScreenPosition=drawing.set_screen_position,
            drawRectangle=drawing.draw_rectangle,
            drawBackground=drawing.draw_background,
            drawSprite=drawing.draw_sprite,
            drawSpriteRegion=drawing.draw_sprite_region,
            loadPalette=palettes.load_bank,
            setActivePalette=palettes.set_active,
            paletteIndexToRGB565=palettes.active_entry_to_rgb565,
            gamepad=SimpleNamespace(
                isDown=self.input.is_button_down,
                isPressed=self.input.is_button_pressed,
            ),
            vector2=Vector2,
            sprite=BitmapRegion,
            bitmap=Bitmap,
        )

    def _call(self, name: str) -> None:
        if self.api is None:
            return
        function = getattr(self.api, name, None)
        try:
            if not callable(function):
                raise ScriptError(f"attempt to call a nil value (field '{name}')")
            function()
        except Exception as exc:  # any script failure goes to the error screen
            self._handle_error(str(exc))

    def _start_rom(self) -> None:
        self._load_script(self.data_dir / "Scripts" / "Main.lua")
        self._call("init")

    def _load_script(self, path: Path) -> bool:
        try:
            if self.loader is None:
                raise ScriptError(f"no script loader to run {path}")
            self.loader(path, self.api)
        except Exception as exc:
            self._handle_error(str(exc))
        return not self.had_errors

    def _start_hotloader(self) -> None:
        root = self.watch_dir if self.watch_dir is not None else Path.cwd() / "Scripts"
        if not root.is_dir():
            self._watch_root = None
            self._mtimes = {}
            return
        self._watch_root = root
        self._mtimes = dict(self._scan())

    def _scan(self):
        assert self._watch_root is not None
        for directory, _dirs, files in os.walk(self._watch_root):
            for name in files:
                path = Path(directory) / name
                try:
                    yield path, path.stat().st_mtime
                except OSError:
                    continue

    def _poll_watcher(self) -> None:
        if self._watch_root is None:
            return
        current = dict(self._scan())
        for path, mtime in current.items():
            previous = self._mtimes.get(path)
            if previous is not None and previous != mtime:
                self._hotload_queue.append(path)
        self._mtimes = current

    def _hotload_active(self) -> None:
        self._poll_watcher()

        hotload_count = len(self._hotload_queue)
        error_count = 0
        while self._hotload_queue:
            path = self._hotload_queue.popleft()
            code = extract_hotload_chunk(path)
            try:
                if self.chunk_runner is None:
                    raise ScriptError(f"no chunk runner to hotload {path}")
                self.chunk_runner(code, self.api)
            except Exception as exc:
                error_count += 1
                self.error_str = str(exc)
                logger.error("Error running hotload chunk: %s", exc)
            else:
                logger.info("[Hotloaded update/render]")

        if hotload_count > 0:
            self.had_errors = error_count > 0