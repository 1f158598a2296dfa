#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

from argparse import ArgumentParser
from nibblevm import main
from nibblevm.constants import DEFAULT_KEYMAP, SUPPORTED_CPUS, CPU_QUIRKS

QUIRK_HELP = {
    "logic": "OR, AND and XOR reset Vf (CHIP-8 default)",
    "shift": "SHR and SHL shift Vx in place, ignoring Vy (Super-CHIP default)",
    "jump": "JP V0, addr jumps relative to Vx (Super-CHIP default)",
    "load": "LD [I], Vx and LD Vx, [I] leave I moved on by x (CHIP-8 default)"
}


def parse_args(argv=None):
    parser = ArgumentParser(description="Run a CHIP-8 or Super-CHIP ROM")
    parser.add_argument("filename", help="ROM file to run (usually .ch8)")
    parser.add_argument(
        "-a", "--arch", choices=list(SUPPORTED_CPUS.keys()), default="chip8",
        help="machine to emulate, which decides the default quirks"
    )
    parser.add_argument(
        "-c", "--clock_speed", type=int,
        help="instructions per second (default 1000, 0 or less runs as fast as possible)"
    )
    parser.add_argument(
        "-r", "--renderer", choices=["pygame", "curses", "null"],
        help="display and keyboard backend (PyGame if installed, otherwise Curses)"
    )
    parser.add_argument(
        "-s", "--scale", type=int,
        help="window width in PyGame (default 512), or horizontal stretch in Curses (default 2)"
    )
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="16 comma-separated keyscan codes (PyGame) or character numbers (Curses) for keys 0 to F"
    )
    parser.add_argument(
        "--strict", action="store_true", default=False,
        help="warn about every unsupported opcode that gets skipped"
    )

    for cpu_quirk in CPU_QUIRKS:
        parser.add_argument(
            "--{}_quirks".format(cpu_quirk), type=int, choices=[0, 1],
            help="force off (0) or on (1): {}".format(QUIRK_HELP[cpu_quirk])
        )

    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="print every instruction as it runs (slow)"
    )
    return parser.parse_args(argv)  # Exits with status 2 on bad arguments


if __name__ == "__main__":
    main(vars(parse_args()))
