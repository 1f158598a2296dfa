#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from nibblevm.constants import ARCH_CHIP8, DEFAULT_KEYMAP
from nibblevm.cpu import CPU
from nibblevm.debugger import Debugger
from nibblevm.decoder import decode
from nibblevm.framebuffer import Framebuffer
from nibblevm.inputs.i_null import Inputs
from nibblevm.ram import RAM
from nibblevm.renderers.r_null import Renderer
from nibblevm.stack import Stack


class TestDebugger(unittest.TestCase):
    def setUp(self):
        self.lines = []
        self.debugger = Debugger(output=self.lines.append)
        renderer = Renderer()
        self.cpu = CPU(
            ARCH_CHIP8, RAM(), Stack(16), Framebuffer(renderer), Inputs(DEFAULT_KEYMAP, renderer), self.debugger
        )

    def test_debugger_not_live_by_default(self):
        self.assertFalse(self.debugger.is_live())
        self.debugger.set_live(True)
        self.assertTrue(self.debugger.is_live())

    def test_debugger_format(self):
        self.cpu.v[0xF] = 0x01
        self.cpu.v[0x0] = 0xAB
        self.cpu.i = 0x123
        self.cpu.debug_pc = 0x2F0
        self.assertEqual(
            "V: 0x01" + "00" * 14 + "ab I: 0x0123 DT: 0x00 ST: 0x00 PC: 0x2f0 OP: 0xd125 IN: DRW V1, V2, 0x5",
            self.debugger.debug(self.cpu, decode(0xD125))
        )

    def test_debugger_timers(self):
        self.cpu.delay_timer.set(0x3C)
        self.cpu.sound_timer.set(0x05)
        self.assertIn("DT: 0x3c ST: 0x05", self.debugger.debug(self.cpu, decode(0x00E0)))

    def test_debugger_verbose_stack(self):
        self.assertTrue(self.debugger.debug(self.cpu, decode(0x00EE), verbose=True).endswith("\nStack: (Empty)"))
        self.cpu.stack.push(0x202)
        self.cpu.stack.push(0x3A4)
        self.assertTrue(self.debugger.debug(self.cpu, decode(0x00EE), verbose=True).endswith("\nStack: 0x202 0x3a4"))

    def test_debugger_unknown_opcode(self):
        self.assertTrue(self.debugger.debug(self.cpu, decode(0xFFFF)).endswith("OP: 0xffff IN: ??? 0xffff"))

    def test_debugger_output(self):
        self.debugger.output(self.cpu, decode(0x00E0))
        self.assertEqual([self.debugger.debug(self.cpu, decode(0x00E0))], self.lines)
