#!/usr/bin/env python3

"""
Stack Emulator

There is no specified location for the call stack in system RAM, and no stack
pointer (SP) register is exposed to the running program, so a list is wrapped
here instead.  Keeping it out of RAM also means a runaway program can never
overwrite its own return addresses.

The capacity is fixed.  Calling too deeply or returning too often are both
fatal, and each is reported with its own exception so a crash report can tell
them apart.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class StackError(Exception):
    pass


class StackOverflowError(StackError):
    pass


class StackUnderflowError(StackError):
    pass


class Stack:
    def __init__(self, size):
        self.items = []
        self.size = size

    def push(self, item):
        # Fetching the stack size with 'len' should be immediate, so no slow loop
        if len(self.items) >= self.size:
            raise StackOverflowError("Stack overflow ({} levels)".format(self.size))

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackUnderflowError("Stack underflow") from None

    @property
    def level(self):
        return len(self.items)

    def get_items(self):
        # For debugging
        return self.items
