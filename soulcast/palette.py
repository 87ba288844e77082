"""Colour palettes: JASC palette files, RGB565 packing and the palette banks."""

import re
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import List, Union

PALETTE_BANK_COUNT = 8
PALETTE_BANK_SIZE = 256

_JASC_HEADER = "JASC-PAL"
_JASC_VERSION = "0100"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def rgb888_to_rgb565(r: int, g: int, b: int) -> int:
    """Pack 8-bit red, green and blue into a 16-bit RGB565 value."""
    return (b >> 3) | ((g >> 2) << 5) | ((r >> 3) << 11)


@dataclass(frozen=True)
class PaletteEntry:
    """One 24-bit colour of a palette."""

    r: int = 0
    g: int = 0
    b: int = 0

    def packed(self) -> int:
        """The colour as RGB565."""
        return ((self.r & 0xF8) << 8) | ((self.g & 0xFC) << 3) | (self.b >> 3)


def _parse_count(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"Invalid JASC palette colour count: {text!r}")
    return int(match.group(1))


def load_jasc_palette(filename: Union[str, PathLike]) -> List[PaletteEntry]:
    """Read the colours of a JASC-PAL file.

    Raises OSError when the file cannot be opened and ValueError when its
    contents are malformed.
    """
    with open(filename, encoding="latin-1") as file:
        lines = (line.rstrip("\n") for line in file)

        if next(lines, "") != _JASC_HEADER:
            raise ValueError("Invalid JASC palette header")
        if next(lines, "") != _JASC_VERSION:
            raise ValueError("Unsupported JASC palette version")

        color_count = _parse_count(next(lines, ""))

        palette: List[PaletteEntry] = []
        for i in range(color_count):
            line = next(lines, None)
            if line is None:
                raise ValueError("Unexpected end of file in palette data")
            tokens = line.split()
            try:
                r, g, b = (int(token) for token in tokens[:3])
            except ValueError:
                raise ValueError(f"Invalid color format on line {i + 4}") from None
            palette.append(PaletteEntry(r & 0xFF, g & 0xFF, b & 0xFF))

    return palette


class PaletteBanks:
    """The console's palette banks and the currently active one."""

    def __init__(self, data_dir: Union[str, PathLike] = "Data") -> None:
        self.data_dir = Path(data_dir)
        self.banks: List[List[PaletteEntry]] = [
            [PaletteEntry() for _ in range(PALETTE_BANK_SIZE)]
            for _ in range(PALETTE_BANK_COUNT)
        ]
        self.active_bank = 0

    @property
    def active(self) -> List[PaletteEntry]:
        """The entries of the active bank."""
        return self.banks[self.active_bank]

    def load_bank(self, bank: int, file_path: Union[str, PathLike]) -> None:
        """Fill a bank from a JASC file under the data directory; missing entries become black."""
        colors = load_jasc_palette(self.data_dir / file_path)
        colors = colors[:PALETTE_BANK_SIZE]
        padding = [PaletteEntry(0, 0, 0)] * (PALETTE_BANK_SIZE - len(colors))
        self.banks[bank][:] = colors + padding

    def set_active(self, bank: int) -> None:
        if not 0 <= bank < PALETTE_BANK_COUNT:
            raise IndexError(f"palette bank {bank} out of range")
        self.active_bank = bank

    def rotate(self, bank: int, start_index: int, end_index: int, right: bool) -> None:
        """Cycle the entries start_index..end_index by one place."""
        pal = self.banks[bank]
        if start_index > end_index:
            if right:
                pal[start_index] = pal[end_index]
            else:
                pal[end_index] = pal[start_index]
            return

        stop = end_index + 1
        if right:
            pal[start_index:stop] = [pal[end_index]] + pal[start_index:end_index]
        else:
            pal[start_index:stop] = pal[start_index + 1:stop] + [pal[start_index]]

    def rotate_rel(self, bank: int, start_index: int, count: int, right: bool) -> None:
        """Cycle `count` entries starting at start_index by one place."""
        self.rotate(bank, start_index, (start_index + count - 1) & 0xFF, right)

    def set_color(self, bank: int, index: int, color: PaletteEntry) -> None:
        self.banks[bank][index] = color

    def entry_to_rgb565(self, bank: int, entry: int) -> int:
        color = self.banks[bank][entry]
        return rgb888_to_rgb565(color.r, color.g, color.b)

    def active_entry_to_rgb565(self, entry: int) -> int:
        return self.entry_to_rgb565(self.active_bank, entry)