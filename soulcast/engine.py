"""The engine object that owns the console's subsystems."""

import os
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

import pygame

from .audio import SoundChip
from .drawing import ColorMode, Drawing
from .input import InputState
from .memory import Memory
from .palette import PaletteBanks
from .scripting import ChunkRunner, ScriptingEngine, ScriptLoader

if TYPE_CHECKING:
    from .emulator import Emulator


class SoulcastEngine:
    """Memory, palettes, drawing, input, sound and scripting of one console."""

    def __init__(
        self,
        loader: Optional[ScriptLoader] = None,
        chunk_runner: Optional[ChunkRunner] = None,
    ) -> None:
        self.initialized = False
        self.running_emulator: Optional["Emulator"] = None

        self.memory = Memory()
        self.palettes = PaletteBanks()
        self.drawing = Drawing(self.palettes)
        self.input = InputState()
        self.sound_chip = SoundChip()
        self.scripting = ScriptingEngine(
            self.memory,
            self.drawing,
            self.input,
            loader=loader,
            chunk_runner=chunk_runner,
        )

    def init(self, working_directory: Union[str, "os.PathLike[str]"]) -> bool:
        """Enter the project directory and start every subsystem.

        Returns False, doing nothing, when the directory does not exist.
        """
        path = Path(working_directory)
        if not path.exists():
            return False
        os.chdir(path)

        self.initialized = True

        self.input.clear()
        self.sound_chip = SoundChip()
        self.drawing.set_color_mode(ColorMode.INDIRECT)
        self.scripting.init()
        return True

    def release(self) -> None:
        """Shut the subsystems down in reverse order."""
        self.initialized = False
        self.scripting.release()
        self.input.clear()
        pygame.quit()