#!/usr/bin/env python3

"""
Null Renderer Plugin

This serves as a base class for other rendering plugins.

This module can be used on its own as a Renderer plugin if you only want to see
debug output.  Without a renderer, performance data will also not be shown.

The most recently presented frame is kept, so that headless runs and tests can
inspect what would have been drawn.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RendererError(Exception):
    pass


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.width = 0
        self.height = 0
        self.frame = None
        self.title = None
        self.refresh_needed = False

    def present(self, grid, width, height):
        # Take a copy, as the framebuffer keeps drawing into the original
        self.frame = list(grid)
        self.width = width
        self.height = height
        self.refresh_needed = True

    def refresh_display(self):
        self.refresh_needed = False

    def set_title(self, title):
        self.title = title

    def shutdown(self):
        pass
