#!/usr/bin/env python3

"""
Curses TTY Terminal Input Plugin

Terminals only deliver characters.  They never say when a key goes down or
comes back up, so a key is treated as held for a short while after each
character arrives.  Holding a key down keeps it held, thanks to keyboard
repeat.

The most recent key is kept for 'await_keypress' until 'reset_keypress'
forgets it.

Reading characters blocks, so it happens on a daemon thread.  Keys are passed
back to the emulator through a queue, and the thread is asked to stop through
another.

ESC or CTRL+C quits.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import queue
from threading import Thread
from time import time
from .keymap import parse_keymap

KEY_HOLD_TIME = 0.2
QUIT_CHARS = (3, 27)  # CTRL+C, ESC


def read_keys(screen, keymap_dict, key_queue, stop_queue):
    # None in the key queue means quit
    while stop_queue.empty():
        char = screen.getch()

        if char < 0:
            continue

        char = ord(chr(char).lower())

        if char in QUIT_CHARS:
            key_queue.put(None)
            return

        hex_key = keymap_dict.get(char)

        if hex_key is None:
            continue

        try:
            key_queue.put_nowait(hex_key)
        except queue.Full:
            pass  # Emulator is behind, drop it


class Inputs:
    def __init__(self, keymap, renderer):
        self.keymap_dict = parse_keymap(keymap, force_lowercase=True)
        self.renderer = renderer
        self.held_until = [0.0] * 0x10
        self.last_keypress = None

        self.stop_queue = queue.Queue(1)
        self.key_queue = queue.Queue(0x10)
        self.reader = Thread(
            target=read_keys,
            args=(renderer.get_curses_screen(), self.keymap_dict, self.key_queue, self.stop_queue),
            daemon=True
        )
        self.reader.start()

    def process_messages(self):
        release_time = time() + KEY_HOLD_TIME

        while True:
            try:
                hex_key = self.key_queue.get_nowait()
            except queue.Empty:
                return False

            if hex_key is None:
                return True

            self.held_until[hex_key] = release_time
            self.last_keypress = hex_key

    def is_key_down(self, key):
        return key < 0x10 and self.held_until[key] > time()

    def reset_keypress(self):
        self.last_keypress = None

    def await_keypress(self):
        key, self.last_keypress = self.last_keypress, None
        return key

    def shutdown(self):
        # The reader may still be stuck in getch, but it's a daemon so it won't keep the process alive
        try:
            self.stop_queue.put_nowait(None)
        except queue.Full:
            pass
