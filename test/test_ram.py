#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from nibblevm.ram import RAM, RAMError


class TestRAM(unittest.TestCase):
    def setUp(self):
        self.ram = RAM(5)

    def test_ram_init(self):
        self.assertEqual("0000000000", self.ram.mem.hex())
        self.assertEqual(0x1000, RAM().mem_size)

    def test_ram_write(self):
        self.ram.write(1, 255)
        self.assertEqual("00ff000000", self.ram.mem.hex())

    def test_ram_write_block(self):
        self.ram.write_block(1, bytearray(b"\xFD\xFE"))
        self.ram.write_block(4, bytearray(b"\xFF"))
        self.assertEqual("00fdfe00ff", self.ram.mem.hex())

    def test_ram_read(self):
        self.ram.write_block(0, b"\x01\x02\x03\x04\x05")
        self.assertEqual(0x03, self.ram.read(2))
        self.assertEqual(b"\x04\x05", bytes(self.ram.read_block(3, 2)))

    def test_ram_byte_overflow(self):
        self.assertRaises(RAMError, self.ram.write, 5, 255)
        self.assertRaises(RAMError, self.ram.read, 5)
        self.assertRaises(RAMError, self.ram.read, -1)

    def test_ram_block_overflow(self):
        self.assertRaises(RAMError, self.ram.write_block, 4, bytearray(b"\xFE\xFF"))
        self.assertRaises(RAMError, self.ram.read_block, 4, 2)
        self.assertRaises(RAMError, self.ram.read_block, 5, 1)

    def test_ram_block_overflow_leaves_memory_untouched(self):
        try:
            self.ram.write_block(3, b"\x01\x02\x03")
        except RAMError:
            pass

        self.assertEqual("0000000000", self.ram.mem.hex())
