#!/usr/bin/env python3

"""
Curses Renderer Plugin

Draws graphics in a standard Linux-style TTY Terminal, the Windows Command
Prompt, or PowerShell.  Each pixel of the screen is an inverted space, stretched
horizontally by the scale factor so the picture keeps roughly the right shape.

The top line of the pad holds the title, which carries the performance report.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import curses
from .r_null import Renderer as RendererBase


class Renderer(RendererBase):
    def __init__(self, scale=None, **kwargs):
        if scale is None:
            scale = 2  # Default horizontal stretch if not supplied, or set to default

        super().__init__(scale)
        self.pixel_char = " " * scale
        self.pad = None
        self.screen_size = None
        self.screen = curses.initscr()
        curses.curs_set(0)
        curses.noecho()
        curses.cbreak()

    def _resize_pad(self, width, height):
        # We have to allow one extra character, presumably for the cursor, otherwise we can't write the furthest
        # bottom-right pixel.
        self.pad = curses.newpad(height + 1, width * self.scale + 1)
        self.width = width
        self.height = height

        if self.title is not None:
            self.set_title(self.title)

    def present(self, grid, width, height):
        if self.pad is None or width != self.width or height != self.height:
            self._resize_pad(width, height)

        pixel_char = self.pixel_char
        scale = self.scale

        for location, pixel in enumerate(grid):
            y, x = divmod(location, width)
            self.pad.addstr(y + 1, x * scale, pixel_char, curses.A_REVERSE if pixel else curses.A_NORMAL)

        self.refresh_needed = True

    def refresh_display(self):
        screen_size = self.screen.getmaxyx()  # Rows, columns.  May never change on Windows

        if screen_size != self.screen_size:
            # Terminal was resized, so start again from a blank screen and redraw the whole pad
            self.screen.clear()

            if hasattr(curses, "resizeterm"):  # Not on Windows
                curses.resizeterm(*screen_size)

            self.screen.refresh()
            self.screen_size = screen_size
            self.refresh_needed = True

        if self.refresh_needed and self.pad is not None:
            self.pad.refresh(0, 0, 0, 0, screen_size[0] - 1, screen_size[1] - 1)

        super().refresh_display()

    def set_title(self, title):
        if self.pad:
            title_len = len(title)
            line_len = self.width * self.scale

            if line_len > title_len:
                self.pad.addstr(0, 0, title + " " * (line_len - title_len), curses.A_REVERSE)
                self.refresh_needed = True

        super().set_title(title)

    def get_curses_screen(self):
        # No Superclass for this Curses-specific method
        return self.screen

    def shutdown(self):
        # Put the terminal back the way it was found
        curses.nocbreak()
        curses.echo()

        try:
            curses.curs_set(1)
        except curses.error:
            pass  # Some terminals can't show or hide the cursor

        curses.endwin()
        super().shutdown()
