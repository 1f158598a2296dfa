#!/usr/bin/env python3

"""
Instruction Decoder

Splits a raw 16-bit opcode into its parts and works out which operation it
names, without touching any machine state.  The CPU then looks the operation up
in its own table of handlers to execute it.

    n   = Nibble
    nn  = Byte
    nnn = Address
    x/y = Register (0-15)

Working out the operation is done by masking off the variable parts of the
opcode, and looking up what's left.  Which parts are variable depends on the
first nibble, e.g. only 0x00E0 is CLS, but any 0x8xy4 is ADD.

Opcodes that don't match anything decode with an operation of None.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple

Instruction = namedtuple("Instruction", ["opcode", "nibbles", "nn", "nnn", "operation"])

# Bitmask applied to an opcode based on its first nibble.  Anything not listed is identified by that nibble alone.
OPCODE_MASKS = {
    0x0: 0xFFFF,
    0x5: 0xF00F,
    0x8: 0xF00F,
    0x9: 0xF00F,
    0xE: 0xF0FF,
    0xF: 0xF0FF
}

# Masked opcode to operation name
OPERATIONS = {
    0x00E0: "CLS",
    0x00EE: "RET",
    0x1000: "JP",
    0x2000: "CALL",
    0x3000: "SE_BYTE",
    0x4000: "SNE_BYTE",
    0x5000: "SE_REG",
    0x6000: "LD_BYTE",
    0x7000: "ADD_BYTE",
    0x8000: "LD_REG",
    0x8001: "OR",
    0x8002: "AND",
    0x8003: "XOR",
    0x8004: "ADD_REG",
    0x8005: "SUB",
    0x8006: "SHR",
    0x8007: "SUBN",
    0x800E: "SHL",
    0x9000: "SNE_REG",
    0xA000: "LD_I",
    0xB000: "JP_OFFSET",
    0xC000: "RND",
    0xD000: "DRW",
    0xE09E: "SKP",
    0xE0A1: "SKNP",
    0xF007: "LD_VX_DT",
    0xF00A: "LD_VX_K",
    0xF015: "LD_DT_VX",
    0xF018: "LD_ST_VX",
    0xF01E: "ADD_I",
    0xF029: "LD_F",
    0xF033: "LD_B",
    0xF055: "LD_MEM_VX",
    0xF065: "LD_VX_MEM"
}

# Assembly-style descriptions for debug output.  Formatted with x, y, n, nn and nnn.
MNEMONICS = {
    "CLS":       "CLS",
    "RET":       "RET",
    "JP":        "JP 0x{nnn:03x}",
    "CALL":      "CALL 0x{nnn:03x}",
    "SE_BYTE":   "SE V{x:01x}, 0x{nn:02x}",
    "SNE_BYTE":  "SNE V{x:01x}, 0x{nn:02x}",
    "SE_REG":    "SE V{x:01x}, V{y:01x}",
    "LD_BYTE":   "LD V{x:01x}, 0x{nn:02x}",
    "ADD_BYTE":  "ADD V{x:01x}, 0x{nn:02x}",
    "LD_REG":    "LD V{x:01x}, V{y:01x}",
    "OR":        "OR V{x:01x}, V{y:01x}",
    "AND":       "AND V{x:01x}, V{y:01x}",
    "XOR":       "XOR V{x:01x}, V{y:01x}",
    "ADD_REG":   "ADD V{x:01x}, V{y:01x}",
    "SUB":       "SUB V{x:01x}, V{y:01x}",
    "SHR":       "SHR V{x:01x} {{, V{y:01x}}}",
    "SUBN":      "SUBN V{x:01x}, V{y:01x}",
    "SHL":       "SHL V{x:01x} {{, V{y:01x}}}",
    "SNE_REG":   "SNE V{x:01x}, V{y:01x}",
    "LD_I":      "LD I, 0x{nnn:03x}",
    "JP_OFFSET": "JP V0, 0x{nnn:03x}",
    "RND":       "RND V{x:01x}, 0x{nn:02x}",
    "DRW":       "DRW V{x:01x}, V{y:01x}, 0x{n:01x}",
    "SKP":       "SKP V{x:01x}",
    "SKNP":      "SKNP V{x:01x}",
    "LD_VX_DT":  "LD V{x:01x}, DT",
    "LD_VX_K":   "LD V{x:01x}, K",
    "LD_DT_VX":  "LD DT, V{x:01x}",
    "LD_ST_VX":  "LD ST, V{x:01x}",
    "ADD_I":     "ADD I, V{x:01x}",
    "LD_F":      "LD F, V{x:01x}",
    "LD_B":      "LD B, V{x:01x}",
    "LD_MEM_VX": "LD [I], V{x:01x}",
    "LD_VX_MEM": "LD V{x:01x}, [I]"
}


def decode(opcode):
    nibbles = (
        (opcode & 0xF000) >> 12,
        (opcode & 0xF00) >> 8,
        (opcode & 0xF0) >> 4,
        opcode & 0xF
    )
    masked_opcode = opcode & OPCODE_MASKS.get(nibbles[0], 0xF000)

    return Instruction(
        opcode=opcode,
        nibbles=nibbles,
        nn=opcode & 0xFF,
        nnn=opcode & 0xFFF,
        operation=OPERATIONS.get(masked_opcode)
    )


def disassemble(instruction):
    if instruction.operation is None:
        return "??? 0x{:04x}".format(instruction.opcode)

    _, x, y, n = instruction.nibbles
    return MNEMONICS[instruction.operation].format(x=x, y=y, n=n, nn=instruction.nn, nnn=instruction.nnn)
