#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from nibble import parse_args
from nibblevm import main
from nibblevm.constants import DEFAULT_KEYMAP
from nibblevm.hostio import LoaderError
from nibblevm.inputs.keymap import InputsError
from nibblevm.ram import RAMError
from nibblevm.stack import StackUnderflowError


class TestStartup(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)

    def _make_args(self, rom, **overrides):
        filename = os.path.join(self.tmp_dir.name, "test.ch8")

        with open(filename, "wb") as f:
            f.write(rom)

        args = vars(parse_args([filename, "--renderer", "null", "--clock_speed", "0"]))
        args.update(overrides)
        return args

    def test_parse_args_defaults(self):
        args = vars(parse_args(["game.ch8"]))
        self.assertEqual("game.ch8", args["filename"])
        self.assertEqual("chip8", args["arch"])
        self.assertEqual(DEFAULT_KEYMAP, args["keymap"])
        self.assertIsNone(args["clock_speed"])
        self.assertIsNone(args["renderer"])
        self.assertFalse(args["strict"])
        self.assertFalse(args["debug"])

        for cpu_quirk in "logic", "shift", "jump", "load":
            self.assertIsNone(args["{}_quirks".format(cpu_quirk)])

    def test_parse_args_options(self):
        args = vars(parse_args(["-a", "schip", "-c", "500", "--shift_quirks", "0", "--strict", "-d", "game.ch8"]))
        self.assertEqual("schip", args["arch"])
        self.assertEqual(500, args["clock_speed"])
        self.assertEqual(0, args["shift_quirks"])
        self.assertTrue(args["strict"])
        self.assertTrue(args["debug"])

    def test_main_crash_report(self):
        output = io.StringIO()

        with redirect_stdout(output):
            self.assertRaises(StackUnderflowError, main, self._make_args(b"\x00\xEE"))

        self.assertIn("Emulation halted", output.getvalue())
        self.assertIn("PC: 0x200 OP: 0x00ee IN: RET", output.getvalue())
        self.assertIn("Stack: (Empty)", output.getvalue())

    def test_main_runs_off_end_of_memory(self):
        # JP 0xFFE lands on the last two bytes of memory, which are zero, and then the next fetch falls off the end
        with redirect_stdout(io.StringIO()):
            self.assertRaises(RAMError, main, self._make_args(b"\x1F\xFE"))

    def test_main_live_debug(self):
        output = io.StringIO()

        with redirect_stdout(output):
            self.assertRaises(StackUnderflowError, main, self._make_args(b"\x61\x23\x00\xEE", debug=True))

        self.assertIn("IN: LD V1, 0x23", output.getvalue())

    def test_main_bad_rom(self):
        args = self._make_args(bytes(0xE01))

        with redirect_stdout(io.StringIO()):
            self.assertRaises(LoaderError, main, args)
            self.assertRaises(FileNotFoundError, main, dict(args, filename="NoFile.ch8"))

    def test_main_bad_keymap(self):
        with redirect_stdout(io.StringIO()):
            self.assertRaises(InputsError, main, self._make_args(b"\x12\x00", keymap="1,2,3"))
