#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Draws graphics onto an SDL window surface via PyGame.  The surface is allocated
at the size of the emulated screen, and then the contents are stretched (using
'Nearest Neighbour' translation) to fit the window itself.  This means we don't
have to draw the same pixel multiple times.

Frames handed over with 'present' are converted into an RGB buffer straight
away, but are only blitted to the window when 'refresh_display' is called
(normally at 60Hz).
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import Renderer as RendererBase
from ..constants import APP_NAME

BACKGROUND_COLOUR = b"\x22\x22\x22"
FOREGROUND_COLOUR = b"\xDD\xDD\xDD"


class Renderer(RendererBase):
    def __init__(self, scale=None, **kwargs):
        if scale is None:
            scale = 512  # Default window width if not supplied, or set to default

        super().__init__(scale)
        pygame.display.init()
        self.set_title(APP_NAME)
        self.rgb_buffer = None
        self.scaled_size = (scale, scale // 2)
        self.display_surface = pygame.display.set_mode(self.scaled_size)

    def present(self, grid, width, height):
        total_pixels = width * height

        if self.rgb_buffer is None or len(self.rgb_buffer) != total_pixels * 3:
            self.rgb_buffer = memoryview(bytearray(total_pixels * 3))  # 24-bit

        # Update RGB buffer in-place to minimise allocations and PyGame calls
        rgb_buffer = self.rgb_buffer

        for location, pixel in enumerate(grid):
            rgb_location = location * 3
            rgb_buffer[rgb_location:rgb_location + 3] = FOREGROUND_COLOUR if pixel else BACKGROUND_COLOUR

        self.width = width
        self.height = height
        self.refresh_needed = True

    def refresh_display(self):
        if self.refresh_needed and self.rgb_buffer:
            # Blit the bytearray straight to the surface, rather than making very frequent PixelArray updates
            render_surface = pygame.image.frombuffer(self.rgb_buffer, (self.width, self.height), "RGB")
            scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
            self.display_surface.blit(scaled_win, (0, 0))
            pygame.display.flip()

        super().refresh_display()

    def set_title(self, title):
        pygame.display.set_caption(title)
        super().set_title(title)

    def shutdown(self):
        # PyGame currently segfaults if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
