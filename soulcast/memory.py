"""The console's flat main memory and its region layout."""

from .core import SCREEN_XSIZE, SCREEN_YSIZE

MEMORY_SIZE = 8 * 1024 * 1024

FRAMEBUFFER_START = 0x0000
FRAMEBUFFER_SIZE = SCREEN_XSIZE * SCREEN_YSIZE * 2
FRAMEBUFFER_END = FRAMEBUFFER_START + FRAMEBUFFER_SIZE

AUDIO_START = FRAMEBUFFER_END
AUDIO_SIZE = 512 * 1024
AUDIO_END = AUDIO_START + AUDIO_SIZE

MAX_SPRITES = 128
# Seven 32-bit fields and three flags, padded to a 4-byte boundary.
SPRITE_ENTRY_SIZE = 32
SPRITES_START = AUDIO_END
SPRITES_SIZE = MAX_SPRITES * SPRITE_ENTRY_SIZE
SPRITES_END = SPRITES_START + SPRITES_SIZE


class Memory:
    """Byte-addressable main memory; out-of-range accesses are ignored."""

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        self.data = bytearray(size)

    def __len__(self) -> int:
        return len(self.data)

    def peek(self, addr: int, n: int = 1) -> int:
        """Read the byte at addr, or 0 when addr lies outside memory."""
        if 0 <= addr < len(self.data):
            return self.data[addr]
        return 0

    def poke(self, addr: int, value: int) -> None:
        """Write the low byte of value at addr; writes outside memory are dropped."""
        if 0 <= addr < len(self.data):
            self.data[addr] = value & 0xFF

    def framebuffer_view(self) -> memoryview:
        """The framebuffer region as native-endian 16-bit pixels."""
        return memoryview(self.data)[FRAMEBUFFER_START:FRAMEBUFFER_END].cast("H")