"""The emulator window, its frame loop and the player entry point."""

import argparse
import logging
import os
import sys
from array import array
from time import monotonic, perf_counter_ns
from typing import List, Optional

import mido
import pygame
from PIL import Image

from .audio import ChannelType
from .core import REFRESH_RATE, SCREEN_XSIZE, SCREEN_YSIZE, EmulatorState
from .drawing import ScreenInfo
from .engine import SoulcastEngine

logger = logging.getLogger(__name__)

SCANCODE_A = 4
SCANCODE_R = 21
SCANCODE_S = 22

_MUSIC_PATH = os.path.join("Data", "Music", "smw.mid")


class Emulator:
    """Owns the game window and steps the engine once per frame."""

    def __init__(self, engine: Optional[SoulcastEngine] = None) -> None:
        self.engine = engine if engine is not None else SoulcastEngine()

        self.mode = EmulatorState.MAINGAME
        self.initialized = False
        self.running = False

        self.borderless = False
        self.vsync = False
        self.window_contained = False

        self.scaling_mode = 0
        self.window_scale = 4
        self.refresh_rate = REFRESH_RATE
        self.screen_refresh_rate = REFRESH_RATE
        self.target_refresh_rate = REFRESH_RATE

        self.game_speed = 1
        self.frame_step = False
        self.master_paused = False
        self.time = 0.0

        self.target_freq = 0
        self.cur_ticks = 0
        self.prev_ticks = 0

        self.music_duration = 0.0

        self.window: Optional[pygame.Surface] = None
        self._owns_window = False
        self._start_time = monotonic()
        self.game_screen = ScreenInfo.create(
            SCREEN_XSIZE, SCREEN_YSIZE, self.engine.memory.framebuffer_view()
        )

    def init(self, window: Optional[pygame.Surface] = None) -> bool:
        """Open (or adopt) the window and prepare the first frame."""
        if window is None:
            pygame.display.init()
            flags = pygame.RESIZABLE
            if self.window_contained:
                flags |= pygame.HIDDEN
            if self.borderless:
                flags |= pygame.NOFRAME
            os.environ.setdefault("SDL_VIDEO_CENTERED", "1")
            size = (SCREEN_XSIZE * self.window_scale, SCREEN_YSIZE * self.window_scale)
            self.window = pygame.display.set_mode(size, flags)
            pygame.display.set_caption("Soulcast")
            self._owns_window = True
        else:
            self.window = window
            self._owns_window = False

        self.initialized = True
        self.running = True
        self.mode = EmulatorState.MAINGAME

        self.target_freq = 1_000_000_000 // self.refresh_rate
        self.cur_ticks = 0
        self.prev_ticks = 0
        self._start_time = monotonic()

        self.music_duration = self._read_music_duration()

        self.engine.running_emulator = self
        self.engine.drawing.set_active_screen(self.game_screen)
        return True

    @staticmethod
    def _read_music_duration() -> float:
        try:
            return float(mido.MidiFile(_MUSIC_PATH).length)
        except (OSError, ValueError, EOFError) as exc:
            logger.warning("Could not read %s: %s", _MUSIC_PATH, exc)
            return 0.0

    def run(self) -> None:
        while self.running:
            self.do_one_frame()

    def do_one_frame(self) -> None:
        """Poll events, run the scripts and present the screen, paced to the refresh rate."""
        if not self.vsync:
            self.cur_ticks = perf_counter_ns()
            if self.cur_ticks < self.prev_ticks + self.target_freq:
                return
            self.prev_ticks = self.cur_ticks

        self.time = monotonic() - self._start_time

        display_up = pygame.display.get_init()
        if display_up:
            for event in pygame.event.get():
                self.running = self.process_event(event)

        engine = self.engine
        engine.drawing.set_active_screen(self.game_screen)

        for _ in range(self.game_speed):
            if display_up:
                engine.input.process(
                    tuple(pygame.key.get_pressed()), pygame.mouse.get_pos()
                )
            if not self.master_paused or self.frame_step:
                if self.mode is EmulatorState.MAINGAME:
                    engine.scripting.update_scripts()
                    engine.scripting.render_scripts()
                elif self.mode is EmulatorState.EXITGAME:
                    self.running = False

        self._present()
        self.frame_step = False

    def _present(self) -> None:
        if self.window is None:
            return
        screen = self.game_screen
        size = (screen.size.x, screen.size.y)
        raw = bytes(screen.frame_buffer)
        if sys.byteorder == "big":
            pixels = array("H", raw)
            pixels.byteswap()
            raw = pixels.tobytes()

        image = Image.frombytes("RGB", size, raw, "raw", "BGR;16")
        frame = pygame.image.frombuffer(image.tobytes(), size, "RGB")

        self.window.fill((0, 0, 0))
        self.window.blit(pygame.transform.scale(frame, self.window.get_size()), (0, 0))
        if self._owns_window:
            pygame.display.flip()

    def release(self) -> None:
        if self._owns_window:
            pygame.display.quit()
            self._owns_window = False
        self.window = None
        self.engine.running_emulator = None

    def reset_system(self) -> None:
        self.engine.scripting.reset()

    def process_event(self, event: pygame.event.Event) -> bool:
        """Handle one window event; False when the emulator should stop."""
        if event.type in (pygame.QUIT, pygame.APP_TERMINATING):
            self.mode = EmulatorState.EXITGAME
            return False

        chip = self.engine.sound_chip
        key = getattr(event, "scancode", None)
        if event.type == pygame.KEYDOWN:
            if key == SCANCODE_R:
                self.reset_system()
            if key == SCANCODE_A:
                chip.set_channel_active(ChannelType.PCM, True)
                chip.set_channel_frequency(ChannelType.PCM, 440)
            if key == SCANCODE_S:
                chip.set_channel_active(ChannelType.PULSE0, True)
                chip.set_channel_frequency(ChannelType.PULSE0, 440)
        elif event.type == pygame.KEYUP:
            if key == SCANCODE_A:
                chip.set_channel_active(ChannelType.PCM, False)
            if key == SCANCODE_S:
                chip.set_channel_active(ChannelType.PULSE0, False)
        return True


def main(argv: Optional[List[str]] = None) -> int:
    """Run a project in the player window."""
    parser = argparse.ArgumentParser(prog="soulcast", description="Run a Soulcast project.")
    parser.add_argument("project", nargs="?", default=".", help="project directory")
    args = parser.parse_args(argv)

    engine = SoulcastEngine()
    if not engine.init(args.project):
        print(f"soulcast: no such project directory: {args.project}", file=sys.stderr)
        return 1

    emulator = Emulator(engine)
    try:
        emulator.init()
        emulator.run()
    finally:
        emulator.release()
        engine.release()
    return 0