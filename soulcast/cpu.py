"""A 64 KiB bus and the CPU attached to it."""

from typing import Optional

RAM_SIZE = 64 * 1024


class Bus:
    """A flat 16-bit address space backed by RAM."""

    def __init__(self) -> None:
        self.ram = bytearray(RAM_SIZE)

    def write(self, addr: int, data: int) -> None:
        """Store the low byte of data at addr; addresses past 0xFFFF are ignored."""
        if 0x0000 <= addr <= 0xFFFF:
            self.ram[addr] = data & 0xFF

    def read(self, addr: int, read_only: bool = False) -> int:
        """Return the byte at addr, or 0 outside the address space."""
        if 0x0000 <= addr <= 0xFFFF:
            return self.ram[addr]
        return 0x00


class CPU:
    """The processor; it executes no instructions yet."""

    def __init__(self, bus: Optional[Bus] = None) -> None:
        self.bus = bus
        self.cycles = 0

    def clock(self) -> None:
        """Advance the processor by one cycle."""
        self.cycles += 1