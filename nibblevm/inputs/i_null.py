#!/usr/bin/env python3

"""
Null Input Plugin

Can be used if zero input functionality is required, such as when running
headless.  No keys are ever held, and waiting for a keypress never completes,
so a program waiting on one will simply idle.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .keymap import parse_keymap


class Inputs:
    def __init__(self, keymap, renderer):
        # Still validated, so a bad keymap is reported the same way whichever plugin is chosen
        self.keymap_dict = parse_keymap(keymap)
        self.renderer = renderer

    def process_messages(self):
        return False  # Don't exit the program

    def is_key_down(self, key):  # pylint: disable=unused-argument
        return False  # No keys are held

    def reset_keypress(self):
        pass

    def await_keypress(self):
        return None  # No keys pressed

    def shutdown(self):
        pass
