import os
from pathlib import Path

import pytest

from soulcast.bitmap import Bitmap, BitmapRegion
from soulcast.core import SCREEN_XSIZE, SCREEN_YSIZE
from soulcast.drawing import ColorMode, Drawing, ScreenInfo
from soulcast.input import InputState
from soulcast.memory import Memory
from soulcast.palette import PaletteBanks, PaletteEntry, rgb888_to_rgb565
from soulcast.scripting import (
    CHARACTERS,
    ScriptingEngine,
    draw_string,
    extract_hotload_chunk,
)


class Rom:
    def __init__(self, fail_update=False):
        self.calls = []
        self.paths = []
        self.fail_update = fail_update

    def __call__(self, path, api):
        self.paths.append(path)
        api.init = lambda: self.calls.append("init")

        def update():
            if self.fail_update:
                raise RuntimeError("boom")
            self.calls.append("update")

        api.update = update
        api.render = lambda: self.calls.append("render")


def make_drawing(tmp_path):
    drawing = Drawing(PaletteBanks(tmp_path))
    drawing.set_active_screen(ScreenInfo.create(SCREEN_XSIZE, SCREEN_YSIZE))
    return drawing


def make_engine(tmp_path, loader=None, chunk_runner=None):
    return ScriptingEngine(
        Memory(),
        make_drawing(tmp_path),
        InputState(),
        loader=loader,
        chunk_runner=chunk_runner,
        data_dir=tmp_path,
        watch_dir=tmp_path / "Scripts",
    )


def font_region():
    width = len(CHARACTERS) * 8
    pixels = bytearray((x // 8) + 1 for _y in range(8) for x in range(width))
    bitmap = Bitmap(width=width, height=8, pixels=pixels, bpp=1, pitch=width)
    return BitmapRegion(bitmap=bitmap)


def font_drawing(tmp_path):
    drawing = make_drawing(tmp_path)
    for i in range(1, 32):
        drawing.palettes.set_color(0, i, PaletteEntry((i * 8) & 0xFF, 0, 0))
    return drawing


def test_extract_hotload_chunk(tmp_path):
    path = tmp_path / "script.lua"
    path.write_text("before\n#hotload\na = 1\nb = 2\n#end_hotload\nafter\n")
    assert extract_hotload_chunk(path) == "a = 1\nb = 2\n"


def test_extract_hotload_chunk_missing_file(tmp_path):
    assert extract_hotload_chunk(tmp_path / "nope.lua") == ""


def test_draw_string_glyphs(tmp_path):
    drawing = font_drawing(tmp_path)
    draw_string(drawing, font_region(), "BC", 0, 0, SCREEN_XSIZE)
    active = drawing.palettes.active
    assert drawing.get_pixel(0, 0) == active[2].packed()
    assert drawing.get_pixel(8, 0) == active[3].packed()


def test_draw_string_space_and_newline(tmp_path):
    drawing = font_drawing(tmp_path)
    draw_string(drawing, font_region(), "B C\nB", 0, 0, SCREEN_XSIZE)
    active = drawing.palettes.active
    assert drawing.get_pixel(8, 0) == 0
    assert drawing.get_pixel(16, 0) == active[3].packed()
    assert drawing.get_pixel(0, 8) == active[2].packed()


def test_draw_string_wraps_and_unknown_char(tmp_path):
    drawing = font_drawing(tmp_path)
    draw_string(drawing, font_region(), "B~", 0, 0, 8)
    active = drawing.palettes.active
    assert drawing.get_pixel(0, 0) == active[2].packed()
    assert drawing.get_pixel(0, 8) == active[1].packed()


def test_init_loads_main_script_and_calls_init(tmp_path):
    rom = Rom()
    engine = make_engine(tmp_path, loader=rom)
    engine.init()
    assert rom.paths == [tmp_path / "Scripts" / "Main.lua"]
    assert rom.calls == ["init"]
    assert engine.had_errors is False


def test_update_and_render_call_script(tmp_path):
    rom = Rom()
    engine = make_engine(tmp_path, loader=rom)
    engine.init()
    engine.update_scripts()
    engine.render_scripts()
    assert rom.calls == ["init", "update", "render"]


def test_script_error_stops_updates(tmp_path):
    rom = Rom(fail_update=True)
    engine = make_engine(tmp_path, loader=rom)
    engine.init()
    engine.update_scripts()
    assert engine.had_errors is True
    assert engine.error_str == "boom"
    rom.fail_update = False
    engine.update_scripts()
    assert "update" not in rom.calls


def test_missing_loader_is_an_error(tmp_path):
    engine = make_engine(tmp_path)
    engine.init()
    assert engine.had_errors is True


def test_error_screen(tmp_path):
    rom = Rom(fail_update=True)
    engine = make_engine(tmp_path, loader=rom)
    engine.init()
    engine.update_scripts()
    engine.render_scripts()
    assert engine.drawing.get_pixel(0, 0) == rgb888_to_rgb565(147, 0, 0)
    assert engine.drawing.color_mode is ColorMode.DIRECT
    assert "render" not in rom.calls


def test_reset_clears_errors_and_restarts(tmp_path):
    rom = Rom(fail_update=True)
    engine = make_engine(tmp_path, loader=rom)
    engine.init()
    engine.update_scripts()
    rom.fail_update = False
    engine.reset()
    assert engine.had_errors is False
    assert rom.calls == ["init", "init"]


def test_api_memory_reaches_memory(tmp_path):
    def loader(path, api):
        api.init = lambda: api.memory.write(100, 0x1AB)

    engine = make_engine(tmp_path, loader=loader)
    engine.init()
    assert engine.memory.peek(100) == 0xAB
    assert engine.api.memory.read(100) == 0xAB


def test_queue_hotload_runs_chunk(tmp_path):
    seen = []
    path = tmp_path / "hot.lua"
    path.write_text("#hotload\nx = 1\n#end_hotload\n")
    engine = make_engine(tmp_path, loader=Rom(), chunk_runner=lambda code, api: seen.append(code))
    engine.init()
    engine.queue_hotload(path)
    engine.update_scripts()
    assert seen == ["x = 1\n"]
    assert engine.had_errors is False


def test_hotload_error_then_recovery(tmp_path):
    state = {"fail": True}

    def runner(code, api):
        if state["fail"]:
            raise ValueError("bad")

    path = tmp_path / "hot.lua"
    path.write_text("#hotload\nx\n#end_hotload\n")
    engine = make_engine(tmp_path, loader=Rom(), chunk_runner=runner)
    engine.init()
    engine.queue_hotload(path)
    engine.update_scripts()
    assert engine.had_errors is True
    assert engine.error_str == "bad"

    state["fail"] = False
    engine.queue_hotload(path)
    engine.update_scripts()
    assert engine.had_errors is False


def test_watcher_queues_modified_files(tmp_path):
    scripts = tmp_path / "Scripts"
    scripts.mkdir()
    path = scripts / "player.lua"
    path.write_text("#hotload\ny = 2\n#end_hotload\n")
    seen = []
    engine = make_engine(tmp_path, loader=Rom(), chunk_runner=lambda code, api: seen.append(code))
    engine.init()

    engine.update_scripts()
    assert seen == []

    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + 10))
    engine.update_scripts()
    assert seen == ["y = 2\n"]