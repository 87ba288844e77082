# soulcast

A small fantasy-console engine. Games draw into a 320×240 RGB565
framebuffer through palette-indexed bitmaps, drive a four-channel sound
chip (two pulse channels, a 32-step 4-bit PCM channel and a noise slot),
and run as a frame loop that calls a game's `init`, `update` and `render`
functions.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## The player

```
soulcast-player path/to/project
```

The project directory defaults to the current one. The player changes
into it (exiting with status 1 if it does not exist), starts the engine,
opens a window scaled four times and runs frames at 60 per second until
the window is closed. The arrow keys drive the gamepad's direction
buttons. `R` resets the script state; holding `A` or `S` switches the PCM
or first pulse channel of the sound chip on at 440 Hz.

The engine expects this layout inside the project:

- `Data/Scripts/Main.lua` – the path handed to the script loader.
- `Data/Sprites/font.png` – an indexed PNG with the 8×8 font used for the
  error screen.
- `Data/Palettes/` – JASC `.pal` files, loaded by `PaletteBanks.load_bank`
  relative to `Data/`.
- `Data/Music/smw.mid` – read only to measure its length.
- `Scripts/` – watched for modified files whose `#hotload` …
  `#end_hotload` section is re-run before the next update.

## What it does not do

- **No script interpreter.** `ScriptingEngine` does not run Lua. A game is
  supplied as two Python callables given to `SoulcastEngine`:
  `loader(path, api)` must install `init`, `update` and `render` on the
  `api` namespace, and `chunk_runner(code, api)` runs hot-reloaded code.
  The `soulcast-player` command builds its engine without either, so on
  its own it shows the red "Script Error:" screen.
- **No sound output.** `SoundChip.generate_audio` returns samples, but
  nothing sends them to an audio device; the `A` and `S` keys only change
  channel state.
- **No music playback.** The MIDI file is read for its duration only.
- **No editor.** There are no tools for editing scripts, palettes or music.
- **No CPU emulation.** `CPU.clock` only counts cycles.

## Running a game from Python

```python
from soulcast.emulator import Emulator
from soulcast.engine import SoulcastEngine


def loader(path, api):
    state = {"x": 0}

    def init():
        api.setActivePalette(0)

    def update():
        state["x"] = (state["x"] + 1) % 320

    def render():
        api.clearScreen(0x0010)
        api.drawRectangle(state["x"], 100, 16, 16, 0xFFFF)

    api.init, api.update, api.render = init, update, render


engine = SoulcastEngine(loader=loader)
if engine.init("path/to/project"):
    emulator = Emulator(engine)
    try:
        emulator.init()
        emulator.run()
    finally:
        emulator.release()
        engine.release()
```

The `api` namespace offers `clearScreen`, `setScreenPosition`,
`drawRectangle`, `drawBackground`, `drawSprite`, `drawSpriteRegion`,
`loadPalette`, `setActivePalette`, `paletteIndexToRGB565`,
`memory.read` / `memory.write`, `gamepad.isDown` / `gamepad.isPressed`,
and the classes `vector2`, `sprite` (a `BitmapRegion`) and `bitmap`.
An exception raised from a game function switches to the error screen
until `reset()`.

## The pieces

- `soulcast.palette` – `PaletteEntry`, `PaletteBanks` (eight banks of 256
  colours, with rotation), `load_jasc_palette` and `rgb888_to_rgb565`.
- `soulcast.bitmap` – `Bitmap.load` reads indexed-colour PNG files
  (anything else raises `ValueError`); `BitmapRegion` and `Sprite`
  describe what gets drawn.
- `soulcast.drawing` – `Drawing` with `ScreenInfo`: clear, pixels,
  rectangles, clipped lines, wrapping backgrounds, flipped sprite regions,
  a palette swatch view and a mosaic effect.
- `soulcast.audio` – `SoundChip.generate_audio` produces interleaved
  stereo float samples; `load_4bit_pcm_file` reads 4-bit PCM tables;
  `midi_note_to_freq`.
- `soulcast.input` – `InputState.process` updates buttons from a
  scancode-indexed key snapshot.
- `soulcast.stream` – `MemoryStream`, `BufferStream` and `FileStream` with
  `read_value` / `write_value` for the `NumberKind` types, little- or
  big-endian.
- `soulcast.filesystem` – `File`, `FileMode`, directory helpers and path
  helpers such as `join`, `normalize` and `get_path_after`.
- `soulcast.memory` – the console's 8 MiB address space with `peek`,
  `poke` and the framebuffer view.
- `soulcast.cpu` – a 64 KiB `Bus`.
- `soulcast.mathx` – `lerp`, `approach`, `angle_lerp`, `clamp`,
  `map_range` and friends.

A drawing example:

```python
from soulcast.drawing import Drawing, ScreenInfo
from soulcast.palette import PaletteBanks, rgb888_to_rgb565

drawing = Drawing(PaletteBanks())
screen = ScreenInfo.create(320, 240)
drawing.set_active_screen(screen)

drawing.clear_screen(rgb888_to_rgb565(0, 0, 64))
drawing.draw_rectangle(16, 16, 32, 32, rgb888_to_rgb565(255, 255, 255))
drawing.draw_line(0, 0, 319, 239, rgb888_to_rgb565(255, 0, 0))
print(drawing.get_pixel(20, 20))  # 65535
```