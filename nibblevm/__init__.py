#!/usr/bin/env python3

"""
Main Startup Module

Call main(args) with a dictionary of options to load a ROM and run it until the
host asks to quit.  The launcher builds this dictionary from the command line,
but anything else (a GUI, a test) can build one too.

Every option must be present.  'None' selects the default.

If the program crashes the machine (reading outside memory, or overflowing or
underflowing the stack), the full machine state is printed once the host
display has been shut down, and the error is raised again.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, APP_COPYRIGHT, STACK_SIZE, SUPPORTED_CPUS, CPU_QUIRKS
from .cpu import CPU
from .debugger import Debugger
from .framebuffer import Framebuffer
from .hostio import Loader
from .ram import RAM, RAMError
from .stack import Stack, StackError


class StartupError(Exception):
    pass


def _get_quirk_settings(args):
    # Command line gives 0/1, or None to leave the choice to the architecture
    return {
        "{}_quirks".format(cpu_quirk): None if args["{}_quirks".format(cpu_quirk)] is None
        else bool(args["{}_quirks".format(cpu_quirk)])
        for cpu_quirk in CPU_QUIRKS
    }


def _find_plugins(opt_renderer):
    """
    Returns the Inputs and Renderer classes to use.  With no preference, PyGame
    is tried first, then Curses.
    """
    # pylint: disable=unused-import, import-outside-toplevel
    # flake8: noqa: F401
    if opt_renderer == "null":
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        return Inputs, Renderer

    if opt_renderer in (None, "pygame"):
        try:
            import pygame
        except ImportError:
            if opt_renderer == "pygame":
                raise StartupError("PyGame does not appear to be installed.") from None
        else:
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer
            return Inputs, Renderer

    try:
        import curses
    except ImportError:
        if opt_renderer is None:
            raise StartupError("Neither PyGame nor Curses (or Windows-Curses) appear to be installed.") from None

        raise StartupError("Curses (or Windows-Curses) does not appear to be installed.") from None

    from .inputs.i_curses import Inputs
    from .renderers.r_curses import Renderer
    return Inputs, Renderer


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))
    arch = SUPPORTED_CPUS[args["arch"]]
    quirk_settings = _get_quirk_settings(args)
    Inputs, Renderer = _find_plugins(args["renderer"])  # pylint: disable=invalid-name

    # Read the ROM before the display is opened, so a bad filename doesn't leave the terminal in a mess
    rom = Loader().load_rom(args["filename"])

    renderer = Renderer(scale=args["scale"])
    framebuffer = Framebuffer(renderer)

    # Some inputs come through the renderer (Curses reads keys from its screen)
    inputs = Inputs(args["keymap"], renderer)

    debugger = Debugger()
    debugger.set_live(args["debug"])

    cpu = CPU(
        arch, RAM(), Stack(STACK_SIZE), framebuffer, inputs, debugger, clock_speed=args["clock_speed"],
        strict=args["strict"], **quirk_settings
    )
    crash_report = None

    try:
        cpu.load_rom(rom)
        framebuffer.present()  # Blank screen straight away
        cpu.run()
    except (RAMError, StackError) as err:
        crash_report = "Emulation halted: {}\n\n{}".format(err, debugger.debug(cpu, cpu.instruction, verbose=True))
        raise
    finally:
        # __del__ cannot be relied upon when using PyPy
        inputs.shutdown()
        renderer.shutdown()

        # Printed after shutdown, otherwise the display may draw over it
        if crash_report:
            print(crash_report)
