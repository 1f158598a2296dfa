#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only handed to the host rendering system when
asked to.  Drawing itself has no side effects beyond the pixel grid, so the same
grid and the same sprite always produce the same result.

Programs for this system cannot write directly into video RAM.  Instead,
sprites are drawn to the screen using an XOR method, one byte per row with the
most-significant bit on the left.

Collisions (where any pixel was set, but was unset by an XOR), are reported as a
single flag covering the whole sprite.

Sprites are clipped, not wrapped.  Rows falling below the bottom of the screen
are skipped, and columns crossing the right edge are dropped rather than
reappearing on the left or on the next row down.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_NAME, VID_WIDTH, VID_HEIGHT

SPRITE_WIDTH = 8


class FramebufferError(Exception):
    pass


class Framebuffer:
    def __init__(self, renderer, vid_width=VID_WIDTH, vid_height=VID_HEIGHT):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Video dimensions must be positive")

        self.renderer = renderer
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.pixels = [False] * self.vid_size
        self.report_perf()

    def clear(self):
        self.pixels[:] = [False] * self.vid_size

    def get_pixel(self, x, y):
        if not (0 <= x < self.vid_width and 0 <= y < self.vid_height):
            raise FramebufferError("Pixel ({}, {}) is off-screen".format(x, y))

        return self.pixels[y * self.vid_width + x]

    def draw_sprite(self, x, y, height, sprite_bytes):
        vid_width = self.vid_width
        pixels = self.pixels
        collision = False

        for row in range(height):
            scr_y = y + row

            if scr_y >= self.vid_height:
                break  # Every row after this one is off-screen too

            spr_data = sprite_bytes[row]
            row_start = scr_y * vid_width

            for col in range(SPRITE_WIDTH):
                scr_x = x + col

                if scr_x >= vid_width:
                    break

                if spr_data & (0x80 >> col):
                    vram_loc = row_start + scr_x

                    if pixels[vram_loc]:
                        # Don't stop drawing.  Set the flag, and never unset it for this sprite.
                        collision = True

                    pixels[vram_loc] = not pixels[vram_loc]

        return collision

    def present(self):
        # Hand the current grid to the host.  Only called after a clear or a draw.
        self.renderer.present(self.pixels, self.vid_width, self.vid_height)

    def refresh_display(self):
        self.renderer.refresh_display()

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def report_perf(self, fps=0, ops=0):
        title = "{} - {} FPS, {} OPS".format(APP_NAME, fps, ops)
        self.renderer.set_title(title)
