"""The picture processing unit: software drawing into RGB565 screens."""

from array import array
from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import List, MutableSequence, Optional

from .bitmap import Bitmap, BitmapRegion
from .core import DEBUG_XSIZE, SCREEN_XSIZE, SCREEN_YSIZE, Vector2
from .palette import PALETTE_BANK_SIZE, PaletteBanks, PaletteEntry


class ColorMode(Enum):
    """Where sprite colours come from."""

    INDIRECT = 0  # the active palette bank
    DIRECT = 1  # the bitmap's own palette


class SpriteFlip(IntFlag):
    NONE = 1 << 0
    X = 1 << 1
    Y = 1 << 2


def _trunc_div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


@dataclass
class ScreenInfo:
    """A 16-bit framebuffer with its scroll position and clipping rectangle."""

    frame_buffer: MutableSequence[int] = field(default_factory=lambda: array("H"))
    position: Vector2 = field(default_factory=Vector2)
    size: Vector2 = field(default_factory=Vector2)
    pitch: int = 0
    clip_x1: int = 0
    clip_y1: int = 0
    clip_x2: int = 0
    clip_y2: int = 0
    owns_frame_buffer: bool = False

    @classmethod
    def create(
        cls, width: int, height: int, frame_buffer: Optional[MutableSequence[int]] = None
    ) -> "ScreenInfo":
        """A screen of the given size, drawing into frame_buffer or a fresh zeroed one."""
        owns = frame_buffer is None
        if owns:
            frame_buffer = array("H", bytes(2 * width * height))
        return cls(
            frame_buffer=frame_buffer,
            size=Vector2(width, height),
            pitch=width,
            clip_x1=0,
            clip_y1=0,
            clip_x2=width,
            clip_y2=height,
            owns_frame_buffer=owns,
        )


class Drawing:
    """Draws rectangles, lines, backgrounds and sprites onto the active screen."""

    def __init__(self, palettes: Optional[PaletteBanks] = None) -> None:
        self.palettes = palettes if palettes is not None else PaletteBanks()
        self.screen: Optional[ScreenInfo] = None
        self.color_mode = ColorMode.INDIRECT
        self.screen_relative = False

    @property
    def _active(self) -> ScreenInfo:
        if self.screen is None:
            raise RuntimeError("no active screen")
        return self.screen

    def set_active_screen(self, screen: ScreenInfo) -> None:
        self.screen = screen

    def render_palette(self, bank: int, y: int) -> None:
        """Draw the swatches of a palette bank in a debug grid starting at row y."""
        window_padding = 4
        swatch_padding = 0
        swatch_size = 2
        swatch_spacing = 1
        width = DEBUG_XSIZE - window_padding * 2
        rects_per_line = width // (swatch_size + swatch_spacing)

        rect_x = 0
        rect_y = y
        for i in range(PALETTE_BANK_SIZE):
            if i != 0:  # entry 0 is transparent
                self.draw_rectangle(
                    rect_x + window_padding + swatch_padding,
                    rect_y + window_padding + swatch_padding,
                    swatch_size,
                    swatch_size,
                    self.palettes.entry_to_rgb565(bank, i),
                )
            rect_x += swatch_size + swatch_spacing
            if (i + 1) % rects_per_line == 0:
                rect_x = 0
                rect_y += swatch_size + swatch_spacing

    def clear_screen(self, color: int) -> None:
        screen = self._active
        count = screen.size.x * screen.size.y
        screen.frame_buffer[:count] = array("H", [color & 0xFFFF]) * count

    def set_color_mode(self, mode: ColorMode) -> None:
        self.color_mode = mode

    def get_pixel(self, x: int, y: int) -> int:
        """The pixel at (x, y), or 0 outside the clipping rectangle."""
        s = self._active
        if x < s.clip_x1 or y < s.clip_y1 or x >= s.clip_x2 or y >= s.clip_y2:
            return 0
        return s.frame_buffer[x + y * s.pitch]

    def set_pixel(self, x: int, y: int, color: int) -> None:
        """Set (x, y) to the active palette entry `color`."""
        s = self._active
        if x < s.clip_x1 or y < s.clip_y1 or x >= s.clip_x2 or y >= s.clip_y2:
            return
        s.frame_buffer[x + y * s.pitch] = self.palettes.active_entry_to_rgb565(color & 0xFF)

    def get_screen_position(self) -> Vector2:
        return self._active.position

    def set_screen_position(self, x: int, y: int) -> None:
        self._active.position = Vector2(x, y)

    def draw_rectangle(self, x: int, y: int, width: int, height: int, color: int) -> None:
        s = self._active
        color &= 0xFFFF

        if width + x > s.clip_x2:
            width = s.clip_x2 - x
        if x < s.clip_x1:
            width += x - s.clip_x1
            x = s.clip_x1
        if height + y > s.clip_y2:
            height = s.clip_y2 - y
        if y < s.clip_y1:
            height += y - s.clip_y1
            y = s.clip_y1
        if width <= 0 or height <= 0:
            return

        row = array("H", [color]) * width
        for line in range(y, y + height):
            start = x + line * s.pitch
            s.frame_buffer[start:start + width] = row

    def _outcode(self, x: int, y: int, inclusive: bool) -> int:
        s = self._active
        flags = 0
        if (x > s.clip_x2) if inclusive else (x >= s.clip_x2):
            flags = 2
        elif x < s.clip_x1:
            flags = 1
        if inclusive:
            if y < s.clip_y1:
                flags |= 4
            elif y > s.clip_y2:
                flags |= 8
        else:
            if y >= s.clip_y2:
                flags |= 8
            elif y < s.clip_y1:
                flags |= 4
        return flags

    def draw_line(self, x1: int, y1: int, x2: int, y2: int, color: int) -> None:
        s = self._active
        color &= 0xFFFF

        dx1, dy1, dx2, dy2 = x1, y1, x2, y2
        flags1 = self._outcode(dx1, dy1, inclusive=False)
        flags2 = self._outcode(dx2, dy2, inclusive=False)

        while flags1 or flags2:
            if flags1 & flags2:
                return
            cur = flags1 if flags1 else flags2

            x = y = 0
            if cur & 8:
                div = (dy2 - dy1) or 1
                x = dx1 + (((dx2 - dx1) * _trunc_div((s.clip_y2 - dy1) << 8, div)) >> 8)
                y = s.clip_y2
            elif cur & 4:
                div = (dy2 - dy1) or 1
                x = dx1 + (((dx2 - dx1) * _trunc_div((s.clip_y1 - dy1) << 8, div)) >> 8)
                y = s.clip_y1
            elif cur & 2:
                div = (dx2 - dx1) or 1
                x = s.clip_x2
                y = dy1 + (((dy2 - dy1) * _trunc_div((s.clip_x2 - dx1) << 8, div)) >> 8)
            elif cur & 1:
                div = (dx2 - dx1) or 1
                x = s.clip_x1
                y = dy1 + (((dy2 - dy1) * _trunc_div((s.clip_x1 - dx1) << 8, div)) >> 8)

            if cur == flags1:
                dx1, dy1 = x, y
                flags1 = self._outcode(x, y, inclusive=True)
            else:
                dx2, dy2 = x, y
                flags2 = self._outcode(x, y, inclusive=True)

        dx1 = min(max(dx1, s.clip_x1), s.clip_x2)
        dy1 = min(max(dy1, s.clip_y1), s.clip_y2)
        dx2 = min(max(dx2, s.clip_x1), s.clip_x2)
        dy2 = min(max(dy2, s.clip_y1), s.clip_y2)

        size_x = abs(dx2 - dx1)
        size_y = abs(dy2 - dy1)
        max_step = size_y
        h_size = size_x >> 2
        if size_x <= size_y:
            h_size = (-size_y) >> 2

        if dx2 < dx1:
            dx1, dx2 = dx2, dx1
            dy1, dy2 = dy2, dy1

        def plot(px: int, py: int) -> None:
            if s.clip_x1 <= px < s.clip_x2 and s.clip_y1 <= py < s.clip_y2:
                s.frame_buffer[px + py * s.pitch] = color

        if dy1 > dy2:
            while dx1 < dx2 or dy1 >= dy2:
                plot(dx1, dy1)
                if h_size > -size_x:
                    h_size -= max_step
                    dx1 += 1
                if h_size < max_step:
                    dy1 -= 1
                    h_size += size_x
        else:
            while True:
                plot(dx1, dy1)
                if not (dx1 < dx2 or dy1 < dy2):
                    break
                if h_size > -size_x:
                    h_size -= max_step
                    dx1 += 1
                if h_size < max_step:
                    h_size += size_x
                    dy1 += 1

    def draw_background(self, bitmap: Bitmap, x: int, y: int) -> None:
        """Tile a bitmap across the screen, scrolled by (x, y); index 0 is transparent."""
        s = self._active
        bitmap_width = bitmap.width
        bitmap_height = bitmap.height
        draw_width = min(bitmap_width, s.clip_x2)
        draw_height = min(bitmap_height, s.clip_y2)

        if not self.screen_relative:
            x -= s.position.x
            y -= s.position.y

        if draw_width <= 0 or draw_height <= 0:
            return

        spr_x = x % bitmap_width
        spr_y = y % bitmap_height
        palette: List[PaletteEntry] = self.palettes.active
        row_length = s.clip_x2
        fb = s.frame_buffer

        for nscan in range(draw_height):
            ypos = (spr_y + nscan) % bitmap_height
            src_row = ypos * bitmap.pitch
            dst_row = nscan * row_length
            for col in range(row_length):
                index = bitmap.pixels[src_row + (spr_x + col) % bitmap_width]
                if index:
                    fb[dst_row + col] = palette[index].packed()

    def draw_sprite(self, sprite: BitmapRegion, x: int, y: int) -> None:
        if sprite.bitmap is None:
            return
        self.draw_sprite_region(
            sprite, x, y, 0, 0, sprite.bitmap.width, sprite.bitmap.height
        )

    def draw_sprite_region(
        self,
        sprite: BitmapRegion,
        x: int,
        y: int,
        spr_x: int,
        spr_y: int,
        spr_width: int,
        spr_height: int,
        flip: SpriteFlip = SpriteFlip.NONE,
    ) -> None:
        """Draw part of a sprite's bitmap at (x, y), clipped and optionally flipped."""
        texture = sprite.bitmap
        if texture is None:
            return
        s = self._active

        if not self.screen_relative:
            x += s.position.x
            y += s.position.y

        width = spr_width
        height = spr_height
        width_flip = width
        height_flip = height

        if width + x > s.clip_x2:
            width = s.clip_x2 - x
        if x < s.clip_x1:
            val = x - s.clip_x1
            spr_x -= val
            width += val
            width_flip += 2 * val
            x = s.clip_x1
        if height + y > s.clip_y2:
            height = s.clip_y2 - y
        if y < s.clip_y1:
            val = y - s.clip_y1
            spr_y -= val
            height += val
            height_flip += 2 * val
            y = s.clip_y1

        if width <= 0 or height <= 0:
            return

        palette = self.palettes.active if self.color_mode is ColorMode.INDIRECT else texture.palette
        tex_width = texture.width
        flipped_x = bool(flip & SpriteFlip.X)
        flipped_y = bool(flip & SpriteFlip.Y)

        first_col = spr_x + (width_flip - 1 if flipped_x else 0)
        first_row = spr_y + (height_flip - 1 if flipped_y else 0)
        col_step = -1 if flipped_x else 1
        row_step = -tex_width if flipped_y else tex_width
        start = first_col + tex_width * first_row

        fb = s.frame_buffer
        pixels = texture.pixels
        for row in range(height):
            src = start + row * row_step
            dst = x + s.pitch * (y + row)
            for col in range(width):
                index = pixels[src + col * col_step]
                if index:
                    fb[dst + col] = palette[index].packed()

    def apply_mosaic_effect(self, size: int) -> None:
        """Replace each size x size block of the screen with its top-left pixel."""
        if size <= 1:
            return
        fb = self._active.frame_buffer
        for y in range(0, SCREEN_YSIZE, size):
            y_end = min(y + size, SCREEN_YSIZE)
            for x in range(0, SCREEN_XSIZE, size):
                x_end = min(x + size, SCREEN_XSIZE)
                color = fb[y * SCREEN_XSIZE + x]
                block = array("H", [color]) * (x_end - x)
                for py in range(y, y_end):
                    start = py * SCREEN_XSIZE + x
                    fb[start:start + (x_end - x)] = block