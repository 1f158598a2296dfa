#!/usr/bin/env python3

"""
PyGame Input Plugin

Reads key events from the SDL window.  Events are only pumped when
'process_messages' is called, which the CPU does at 60Hz.

A key counts as pressed for 'await_keypress' once it has been let go again,
matching the original interpreter.  Only the most recent press is kept, and
'reset_keypress' forgets it, so a wait only ends on a press made afterwards.
ESC or closing the window quits.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .keymap import parse_keymap


class Inputs:
    def __init__(self, keymap, renderer):
        self.keymap_dict = parse_keymap(keymap)
        self.renderer = renderer
        self.held = set()
        self.last_keypress = None

        # Each handler returns True to quit
        self.event_handlers = {
            pygame.QUIT:    lambda event: True,
            pygame.KEYDOWN: self._on_key_down,
            pygame.KEYUP:   self._on_key_up
        }

    def process_messages(self):
        quit_requested = False

        for event in pygame.event.get():
            handler = self.event_handlers.get(event.type)

            # Keep draining the queue after a quit, so nothing is left behind
            if handler is not None and handler(event):
                quit_requested = True

        return quit_requested

    def _on_key_down(self, event):
        hex_key = self.keymap_dict.get(event.key)

        if hex_key is not None:
            self.held.add(hex_key)

        return False

    def _on_key_up(self, event):
        if event.key == pygame.K_ESCAPE:
            return True

        hex_key = self.keymap_dict.get(event.key)

        if hex_key in self.held:
            self.held.discard(hex_key)
            self.last_keypress = hex_key

        return False

    def is_key_down(self, key):
        return key in self.held

    def reset_keypress(self):
        self.last_keypress = None

    def await_keypress(self):
        key, self.last_keypress = self.last_keypress, None
        return key

    def shutdown(self):
        pass  # The renderer closes the window
