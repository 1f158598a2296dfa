#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8 and Super-CHIP)

Like a real computer, this is where most of the processing happens.  Each call
to 'tick' fetches one instruction, decodes it, executes it, and then brings the
delay and sound timers up to date, always in that order.

Decoding is done separately (see decoder.py), so this module only deals with
changing the machine's state.

Super-CHIP only differs from CHIP-8 here in four places, known as quirks:

    - Logic quirks : OR/AND/XOR also reset Vf.  CHIP-8 only.
    - Shift quirks : SHR/SHL shift Vx in place, ignoring Vy.  Super-CHIP only.
    - Jump quirks  : JP V0, addr jumps relative to Vx instead.  Super-CHIP only.
    - Load quirks  : LD [I], Vx / LD Vx, [I] leave I increased by x.  CHIP-8
                     only.

Each can also be forced on or off individually, regardless of architecture.

Unknown opcodes do nothing.  In strict mode a warning is raised for each, but
execution still carries on.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import warnings
from random import Random
from time import perf_counter
from .constants import (
    ARCH_CHIP8, ARCH_SUPERCHIP, FONT_LOCATION, FONT_GLYPH_SIZE, PROGRAM_LOCATION, MAX_ROM_SIZE, SYSTEM_FONT
)
from .decoder import decode, disassemble
from .ram import RAMError
from .timer import Timer

CPU_ENDIAN = "big"  # CHIP-8 is big-endian
DEFAULT_CLOCK_SPEED = 1000
DISPLAY_FREQ = 60.0  # 60Hz emulated display refresh
DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ


class CPUError(Exception):
    pass


class UnsupportedOpcodeWarning(UserWarning):
    pass


class CPU:
    def __init__(self, arch, ram, stack, framebuffer, inputs, debugger, rng=None, clock=perf_counter,
                 clock_speed=None, strict=False, logic_quirks=None, shift_quirks=None, jump_quirks=None,
                 load_quirks=None):

        if arch not in (ARCH_CHIP8, ARCH_SUPERCHIP):
            raise CPUError("Unsupported architecture: {}".format(arch))

        if rng is None:
            rng = Random()

        if not callable(getattr(rng, "randint", None)):
            raise CPUError("Random number source is unavailable")

        self.arch = arch
        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.inputs = inputs
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()
        self.rng = rng
        self.clock = clock
        self.strict = strict

        # User can specify 0 (or below) for uncapped
        auto_clock_speed = DEFAULT_CLOCK_SPEED if clock_speed is None else clock_speed
        self.core_interval = None if auto_clock_speed <= 0 else 1.0 / auto_clock_speed

        arch_is_schip = (arch == ARCH_SUPERCHIP)
        self.logic_quirks = (not arch_is_schip) if logic_quirks is None else logic_quirks
        self.shift_quirks = arch_is_schip if shift_quirks is None else shift_quirks
        self.jump_quirks = arch_is_schip if jump_quirks is None else jump_quirks
        self.load_quirks = (not arch_is_schip) if load_quirks is None else load_quirks

        # Operation names from the decoder, mapped to their handlers
        self.instructions = {
            "CLS":       self._00E0,
            "RET":       self._00EE,
            "JP":        self._1nnn,
            "CALL":      self._2nnn,
            "SE_BYTE":   self._3xnn,
            "SNE_BYTE":  self._4xnn,
            "SE_REG":    self._5xy0,
            "LD_BYTE":   self._6xnn,
            "ADD_BYTE":  self._7xnn,
            "LD_REG":    self._8xy0,
            "OR":        self._8xy1,
            "AND":       self._8xy2,
            "XOR":       self._8xy3,
            "ADD_REG":   self._8xy4,
            "SUB":       self._8xy5,
            "SHR":       self._8xy6,
            "SUBN":      self._8xy7,
            "SHL":       self._8xyE,
            "SNE_REG":   self._9xy0,
            "LD_I":      self._Annn,
            "JP_OFFSET": self._Bnnn,
            "RND":       self._Cxnn,
            "DRW":       self._Dxyn,
            "SKP":       self._Ex9E,
            "SKNP":      self._ExA1,
            "LD_VX_DT":  self._Fx07,
            "LD_VX_K":   self._Fx0A,
            "LD_DT_VX":  self._Fx15,
            "LD_ST_VX":  self._Fx18,
            "ADD_I":     self._Fx1E,
            "LD_F":      self._Fx29,
            "LD_B":      self._Fx33,
            "LD_MEM_VX": self._Fx55,
            "LD_VX_MEM": self._Fx65
        }

        # Initialise registers
        self.v = memoryview(bytearray(16))  # Bytearrays are mutable, so this should be fast when a register is updated
        self.i = 0  # Index register (never masked)

        # Initialise timers
        self.delay_timer = Timer(clock=clock)
        self.sound_timer = Timer(clock=clock)

        # Initialise program counter and current instruction
        self.pc = PROGRAM_LOCATION
        self.debug_pc = PROGRAM_LOCATION
        self.opcode = 0
        self.instruction = decode(0)
        self.awaiting_keypress = False

        # Write system font into RAM
        self.ram.write_block(FONT_LOCATION, SYSTEM_FONT)

        # Performance-related vars
        self.next_display_update_time = 0
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0

    def load_rom(self, data):
        if len(data) > MAX_ROM_SIZE:
            raise RAMError("ROM is {} bytes, but only {} bytes are available".format(len(data), MAX_ROM_SIZE))

        self.ram.write_block(PROGRAM_LOCATION, data)
        self.pc = PROGRAM_LOCATION

    def run(self):
        while True:
            this_time = self.clock()  # Do this first for maximum precision

            # Performance counters
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                # Reporting the performance should be done before a refresh, as refreshing will likely show the report
                self.framebuffer.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            # Prevent unnecessary display rendering in excess of host frame rate
            if this_time >= self.next_display_update_time:
                if self.inputs.process_messages():  # Process inputs at 60Hz too, to avoid slowdown
                    return
                self.next_display_update_time = this_time + DISPLAY_INTERVAL
                self.framebuffer.refresh_display()
                self.perf_counter_fps += 1

            self.tick()

            if self.core_interval is not None:
                # Wait for next CPU instruction.  Do this last for maximum precision (takes into account time spent on
                # this instruction)
                next_time = this_time + self.core_interval

                while self.clock() < next_time:  # Unfortunately we have to do this to get the timing right
                    pass

            self.perf_counter_ops += 1

    def tick(self):
        # Keep track of the program counter before altering it in any way for debugging purposes
        self.debug_pc = self.pc  # Do this all the time in case there is a crash
        self.opcode = self.fetch()
        self.instruction = decode(self.opcode)
        self.execute(self.instruction)

        this_time = self.clock()
        self.delay_timer.refresh(this_time)
        self.sound_timer.refresh(this_time)

    def fetch(self):
        # Program counter updates after fetch (and technically before decode), but before execute
        opcode = int.from_bytes(self.ram.read_block(self.pc, 2), CPU_ENDIAN, signed=False)
        self.pc += 2
        return opcode

    def execute(self, instruction):
        handler = self.instructions.get(instruction.operation)

        if handler is None:
            self._opcode_unsupported(instruction)
            return

        if self.live_debug:
            self.debugger.output(self, instruction)

        handler(instruction)

    def _opcode_unsupported(self, instruction):
        if self.strict:
            warnings.warn(
                "Opcode 0x{:04x} at address 0x{:03x} is not emulated for the selected architecture ({})".format(
                    instruction.opcode, self.debug_pc, disassemble(instruction)
                ),
                UnsupportedOpcodeWarning,
                stacklevel=3
            )

    def _skip(self):
        self.pc += 2

    def _00E0(self, ins):  # CLS
        self.framebuffer.clear()
        self.framebuffer.present()

    def _00EE(self, ins):  # RET
        self.pc = self.stack.pop()

    def _1nnn(self, ins):  # JP addr
        self.pc = ins.nnn

    def _2nnn(self, ins):  # CALL addr
        self.stack.push(self.pc)
        self.pc = ins.nnn

    def _3xnn(self, ins):  # SE Vx, byte
        if self.v[ins.nibbles[1]] == ins.nn:
            self._skip()

    def _4xnn(self, ins):  # SNE Vx, byte
        if self.v[ins.nibbles[1]] != ins.nn:
            self._skip()

    def _5xy0(self, ins):  # SE Vx, Vy
        _, vx, vy, _ = ins.nibbles

        if self.v[vx] == self.v[vy]:
            self._skip()

    def _6xnn(self, ins):  # LD Vx, byte
        self.v[ins.nibbles[1]] = ins.nn

    def _7xnn(self, ins):  # ADD Vx, byte
        vx = ins.nibbles[1]
        self.v[vx] = (self.v[vx] + ins.nn) & 0xFF  # Vf is never touched

    def _post_8xy1_8xy2_8xy3(self):
        if self.logic_quirks:
            self.v[0xF] = 0

    def _8xy0(self, ins):  # LD Vx, Vy
        _, vx, vy, _ = ins.nibbles
        self.v[vx] = self.v[vy]

    def _8xy1(self, ins):  # OR Vx, Vy
        _, vx, vy, _ = ins.nibbles
        self.v[vx] |= self.v[vy]
        self._post_8xy1_8xy2_8xy3()

    def _8xy2(self, ins):  # AND Vx, Vy
        _, vx, vy, _ = ins.nibbles
        self.v[vx] &= self.v[vy]
        self._post_8xy1_8xy2_8xy3()

    def _8xy3(self, ins):  # XOR Vx, Vy
        _, vx, vy, _ = ins.nibbles
        self.v[vx] ^= self.v[vy]
        self._post_8xy1_8xy2_8xy3()

    def _8xy4(self, ins):  # ADD Vx, Vy
        _, vx, vy, _ = ins.nibbles
        val = self.v[vx] + self.v[vy]
        self.v[vx] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, vx, val):  # Post-SUB/SUBN
        self.v[vx] = val & 0xFF
        # Vf is set when NOT borrowing, and this should happen AFTER Vx is set, as sometimes Vf is specified in the
        # parameters
        self.v[0xF] = int(val >= 0)

    def _8xy5(self, ins):  # SUB Vx, Vy
        _, vx, vy, _ = ins.nibbles
        self._post_8xy5_8xy7(vx, self.v[vx] - self.v[vy])

    def _8xy6(self, ins):  # SHR Vx {, Vy}
        # On Super-CHIP, Vx is shifted in place.  On CHIP-8, Vy is copied into Vx first.
        _, vx, vy, _ = ins.nibbles
        val = self.v[vx if self.shift_quirks else vy]
        self.v[vx] = val >> 1
        self.v[0xF] = val & 1

    def _8xy7(self, ins):  # SUBN Vx, Vy
        _, vx, vy, _ = ins.nibbles
        self._post_8xy5_8xy7(vx, self.v[vy] - self.v[vx])

    def _8xyE(self, ins):  # SHL Vx {, Vy}
        # On Super-CHIP, Vx is shifted in place.  On CHIP-8, Vy is copied into Vx first.
        _, vx, vy, _ = ins.nibbles
        val = self.v[vx if self.shift_quirks else vy]
        self.v[vx] = (val << 1) & 0xFF
        self.v[0xF] = val >> 7

    def _9xy0(self, ins):  # SNE Vx, Vy
        _, vx, vy, _ = ins.nibbles

        if self.v[vx] != self.v[vy]:
            self._skip()

    def _Annn(self, ins):  # LD I, addr
        self.i = ins.nnn

    def _Bnnn(self, ins):  # JP V0, addr
        # This is a nasty quirk which breaks lots of games if set incorrectly.  Super-CHIP reads the register from the
        # top nibble of the address.
        vr = ins.nibbles[1] if self.jump_quirks else 0
        self.pc = self.v[vr] + ins.nnn

    def _Cxnn(self, ins):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[ins.nibbles[1]] = self.rng.randint(0, 0xFF) & ins.nn

    def _Dxyn(self, ins):  # DRW Vx, Vy, nibble
        _, vx, vy, height = ins.nibbles

        # The sprite's start always wraps, but anything hanging off the bottom or right is trimmed
        vid_width, vid_height = self.framebuffer.get_vid_size()
        sprite = self.ram.read_block(self.i, height)
        collision = self.framebuffer.draw_sprite(self.v[vx] % vid_width, self.v[vy] % vid_height, height, sprite)
        self.v[0xF] = int(collision)
        self.framebuffer.present()

    def _Ex9E(self, ins):  # SKP Vx
        if self.inputs.is_key_down(self.v[ins.nibbles[1]]):
            self._skip()

    def _ExA1(self, ins):  # SKNP Vx
        if not self.inputs.is_key_down(self.v[ins.nibbles[1]]):
            self._skip()

    def _Fx07(self, ins):  # LD Vx, DT
        self.v[ins.nibbles[1]] = self.delay_timer.get()

    def _Fx0A(self, ins):  # LD Vx, K
        # A keypad may block until a key is pressed, or return None straight away.  If nothing has been pressed yet,
        # come back to this instruction on the next tick, so the timers and display carry on in the meantime.
        if self.awaiting_keypress:
            key = self.inputs.await_keypress()
        else:
            self.inputs.reset_keypress()  # Only presses made from now on count
            self.awaiting_keypress = True
            key = None

        if key is None:
            self.pc -= 2
        else:
            self.v[ins.nibbles[1]] = key
            self.awaiting_keypress = False

    def _Fx15(self, ins):  # LD DT, Vx
        self.delay_timer.set(self.v[ins.nibbles[1]])

    def _Fx18(self, ins):  # LD ST, Vx
        self.sound_timer.set(self.v[ins.nibbles[1]])

    def _Fx1E(self, ins):  # ADD I, Vx
        self.i += self.v[ins.nibbles[1]]

    def _Fx29(self, ins):  # LD F, Vx
        self.i = FONT_LOCATION + FONT_GLYPH_SIZE * self.v[ins.nibbles[1]]

    def _Fx33(self, ins):  # LD B, Vx
        val = self.v[ins.nibbles[1]]
        i = self.i
        self.ram.write(i, val // 100)            # Most-significant digit
        self.ram.write(i + 1, (val // 10) % 10)  # Middle digit
        self.ram.write(i + 2, val % 10)          # Least-significant digit

    def _post_Fx55_Fx65(self, vx):
        if self.load_quirks:
            self.i += vx

    def _Fx55(self, ins):  # LD [I], Vx
        vx = ins.nibbles[1]
        # Ensure with +1s that the final register is copied
        self.ram.write_block(self.i, self.v[:vx + 1])
        self._post_Fx55_Fx65(vx)

    def _Fx65(self, ins):  # LD Vx, [I]
        vx = ins.nibbles[1]
        self.v[:vx + 1] = self.ram.read_block(self.i, vx + 1)
        self._post_Fx55_Fx65(vx)
