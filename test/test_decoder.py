#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from nibblevm.decoder import decode, disassemble, OPERATIONS, MNEMONICS


class TestDecoder(unittest.TestCase):
    def test_decoder_fields(self):
        instruction = decode(0xABCD)
        self.assertEqual(0xABCD, instruction.opcode)
        self.assertEqual((0xA, 0xB, 0xC, 0xD), instruction.nibbles)
        self.assertEqual(0xCD, instruction.nn)
        self.assertEqual(0xBCD, instruction.nnn)
        self.assertEqual("LD_I", instruction.operation)

    def test_decoder_is_immutable(self):
        instruction = decode(0x1234)

        with self.assertRaises(AttributeError):
            instruction.nnn = 0x000

    def test_decoder_operations(self):
        for opcode, operation in (
            (0x00E0, "CLS"), (0x00EE, "RET"), (0x1FFD, "JP"), (0x2FFC, "CALL"), (0x3212, "SE_BYTE"),
            (0x4212, "SNE_BYTE"), (0x5230, "SE_REG"), (0x62FE, "LD_BYTE"), (0x72FE, "ADD_BYTE"), (0x8120, "LD_REG"),
            (0x8121, "OR"), (0x8122, "AND"), (0x8123, "XOR"), (0x8124, "ADD_REG"), (0x8125, "SUB"), (0x8126, "SHR"),
            (0x8127, "SUBN"), (0x812E, "SHL"), (0x9230, "SNE_REG"), (0xAFF1, "LD_I"), (0xB102, "JP_OFFSET"),
            (0xC1FE, "RND"), (0xD224, "DRW"), (0xE19E, "SKP"), (0xE1A1, "SKNP"), (0xF207, "LD_VX_DT"),
            (0xF30A, "LD_VX_K"), (0xF215, "LD_DT_VX"), (0xF318, "LD_ST_VX"), (0xF11E, "ADD_I"), (0xF129, "LD_F"),
            (0xF133, "LD_B"), (0xF155, "LD_MEM_VX"), (0xF165, "LD_VX_MEM")
        ):
            self.assertEqual(operation, decode(opcode).operation, "0x{:04x}".format(opcode))

    def test_decoder_unknown(self):
        for opcode in 0x0000, 0x0001, 0x00FF, 0x0123, 0x5001, 0x8008, 0x800F, 0x9001, 0xE09F, 0xE0A2, 0xF100, 0xFFFF:
            self.assertIsNone(decode(opcode).operation, "0x{:04x}".format(opcode))

    def test_decoder_every_operation_has_mnemonic(self):
        self.assertEqual(set(OPERATIONS.values()), set(MNEMONICS.keys()))

    def test_disassemble(self):
        self.assertEqual("CLS", disassemble(decode(0x00E0)))
        self.assertEqual("JP 0x2a4", disassemble(decode(0x12A4)))
        self.assertEqual("LD V3, 0x0f", disassemble(decode(0x630F)))
        self.assertEqual("DRW V1, V2, 0x5", disassemble(decode(0xD125)))
        self.assertEqual("SHR V1 {, V2}", disassemble(decode(0x8126)))
        self.assertEqual("LD [I], Ve", disassemble(decode(0xFE55)))
        self.assertEqual("??? 0xffff", disassemble(decode(0xFFFF)))

    def test_decoder_covers_whole_range(self):
        # Every opcode must decode without raising
        for opcode in range(0x10000):
            instruction = decode(opcode)
            self.assertEqual(opcode, (instruction.nibbles[0] << 12) | instruction.nnn)
