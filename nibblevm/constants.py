#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "NibbleVM"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Emulated system architectures
ARCH_CHIP8 = 0
ARCH_SUPERCHIP = 10

# Memory layout.  Neither architecture changes it.
MEM_SIZE = 0x1000
FONT_LOCATION = 0x50
FONT_GLYPH_SIZE = 5
PROGRAM_LOCATION = 0x200
MAX_ROM_SIZE = MEM_SIZE - PROGRAM_LOCATION

# 12 levels on the original interpreter, but most programs written since expect 16
STACK_SIZE = 16

# Fixed display resolution
VID_WIDTH = 64
VID_HEIGHT = 32

# 60Hz delay and sound timers
TIMER_FREQ = 60.0

# Hex digits 0-F, 4 pixels wide and 5 rows high
SYSTEM_FONT = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))

# Default mappings for keys 0-F, later populated into a dictionary.  Note that the keyscans (on a UK QWERTY keyboard)
# and ASCII characters for these are the same code
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# Startup
SUPPORTED_CPUS = {
    "chip8": ARCH_CHIP8,     # Original COSMAC VIP behaviour
    "schip": ARCH_SUPERCHIP  # Super-CHIP behaviour for logic, shift, jump and load instructions
}

# CPU quirks that can be forced on or off, regardless of architecture
CPU_QUIRKS = ["logic", "shift", "jump", "load"]
