"""Indexed-colour bitmaps, regions of them and hardware sprite records."""

from dataclasses import dataclass, field
from os import PathLike
from typing import List, Optional, Union

from PIL import Image

from .palette import PALETTE_BANK_SIZE, PaletteEntry

_CHANNELS_AND_DEPTH = {
    "1": (1, 1),
    "L": (1, 8),
    "P": (1, 8),
    "LA": (2, 8),
    "RGB": (3, 8),
    "RGBA": (4, 8),
    "I;16": (1, 16),
    "I;16B": (1, 16),
    "I": (1, 32),
}


def bytes_per_pixel(mode: str) -> int:
    """Bytes one pixel of the given image mode occupies, or 0 for an unknown mode."""
    info = _CHANNELS_AND_DEPTH.get(mode)
    if info is None:
        return 0
    channels, depth = info
    return (channels * depth + 7) // 8


def _default_palette() -> List[PaletteEntry]:
    return [PaletteEntry() for _ in range(PALETTE_BANK_SIZE)]


@dataclass
class Bitmap:
    """An image of palette indices, one byte per pixel, with its own palette."""

    width: int = 0
    height: int = 0
    palette: List[PaletteEntry] = field(default_factory=_default_palette)
    pixels: bytearray = field(default_factory=bytearray)
    bpp: int = 0
    pitch: int = 0
    disposed: bool = False

    def load(self, file_name: Union[str, PathLike]) -> None:
        """Load an indexed-colour PNG.

        Raises OSError when the file cannot be read and ValueError when the
        image is not indexed colour.
        """
        with Image.open(file_name) as img:
            if img.mode != "P":
                raise ValueError("Bitmap is not indexed color")
            raw = (img.getpalette() or [])[: PALETTE_BANK_SIZE * 3]
            entries = [
                PaletteEntry(r, g, b)
                for r, g, b in zip(raw[0::3], raw[1::3], raw[2::3])
            ]
            pixels = bytearray(img.tobytes())
            width, height = img.size
            bpp = bytes_per_pixel(img.mode)

        self.palette = entries + _default_palette()[len(entries):]
        self.pixels = pixels
        self.width = width
        self.height = height
        self.bpp = bpp
        self.pitch = width * bpp
        self.disposed = False

    def dispose(self) -> None:
        """Free the pixel data; a second call does nothing."""
        if self.disposed:
            return
        self.pixels = bytearray()
        self.disposed = True


@dataclass
class BitmapRegion:
    """A rectangle within a bitmap."""

    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0
    bitmap: Optional[Bitmap] = None


@dataclass
class Sprite:
    """A 2D graphic drawn onto the screen."""

    x: int = 0
    y: int = 0
    tile_index: int = 0
    palette: int = 0
    rotation: int = 0
    scale_x: int = 0
    scale_y: int = 0
    h_flip: bool = False
    v_flip: bool = False
    visible: bool = False