import pygame
import pytest

from soulcast.audio import ChannelType
from soulcast.core import SCREEN_XSIZE, SCREEN_YSIZE, EmulatorState
from soulcast.emulator import SCANCODE_A, SCANCODE_R, SCANCODE_S, Emulator, main
from soulcast.engine import SoulcastEngine


class Rom:
    def __init__(self):
        self.calls = []

    def __call__(self, path, api):
        api.init = lambda: self.calls.append("init")
        api.update = lambda: self.calls.append("update")

        def render():
            self.calls.append("render")
            api.drawRectangle(0, 0, 4, 4, 0xFFFF)

        api.render = render


@pytest.fixture
def setup(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    rom = Rom()
    engine = SoulcastEngine(loader=rom)
    engine.init(tmp_path)
    emu = Emulator(engine)
    emu.vsync = True
    surface = pygame.Surface((SCREEN_XSIZE, SCREEN_YSIZE))
    assert emu.init(surface) is True
    yield emu, rom, surface
    emu.release()


def test_init_state(setup):
    emu, _rom, _surface = setup
    assert emu.running is True
    assert emu.mode is EmulatorState.MAINGAME
    assert emu.engine.running_emulator is emu
    assert emu.engine.drawing.screen is emu.game_screen
    assert emu.music_duration == 0.0


def test_frame_runs_scripts_and_presents(setup):
    emu, rom, surface = setup
    emu.do_one_frame()
    assert rom.calls == ["init", "update", "render"]
    assert emu.engine.memory.peek(0) == 0xFF
    assert tuple(surface.get_at((0, 0)))[:3] == (255, 255, 255)
    assert tuple(surface.get_at((10, 10)))[:3] == (0, 0, 0)


def test_paused_skips_scripts_unless_stepping(setup):
    emu, rom, _surface = setup
    emu.master_paused = True
    emu.do_one_frame()
    assert rom.calls == ["init"]
    emu.frame_step = True
    emu.do_one_frame()
    assert rom.calls == ["init", "update", "render"]
    assert emu.frame_step is False


def test_quit_event_stops(setup):
    emu, _rom, _surface = setup
    assert emu.process_event(pygame.event.Event(pygame.QUIT)) is False
    assert emu.mode is EmulatorState.EXITGAME
    emu.do_one_frame()
    assert emu.running is False


def test_key_a_toggles_pcm(setup):
    emu, _rom, _surface = setup
    chip = emu.engine.sound_chip
    assert emu.process_event(pygame.event.Event(pygame.KEYDOWN, scancode=SCANCODE_A)) is True
    assert chip.channels[ChannelType.PCM].active is True
    assert chip.channels[ChannelType.PCM].frequency == 440
    emu.process_event(pygame.event.Event(pygame.KEYUP, scancode=SCANCODE_A))
    assert chip.channels[ChannelType.PCM].active is False


def test_key_s_toggles_pulse(setup):
    emu, _rom, _surface = setup
    chip = emu.engine.sound_chip
    emu.process_event(pygame.event.Event(pygame.KEYDOWN, scancode=SCANCODE_S))
    assert chip.channels[ChannelType.PULSE0].active is True
    emu.process_event(pygame.event.Event(pygame.KEYUP, scancode=SCANCODE_S))
    assert chip.channels[ChannelType.PULSE0].active is False


def test_key_r_resets_system(setup):
    emu, rom, _surface = setup
    emu.process_event(pygame.event.Event(pygame.KEYDOWN, scancode=SCANCODE_R))
    assert rom.calls == ["init", "init"]


def test_release_detaches(setup):
    emu, _rom, _surface = setup
    emu.release()
    assert emu.engine.running_emulator is None
    assert emu.window is None


def test_main_missing_project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main([str(tmp_path / "missing")]) == 1