#!/usr/bin/env python3

"""
Countdown Timer

Both the delay timer and the sound timer count down towards zero at 60Hz,
regardless of how quickly the CPU is running.  They are linked to actual time,
so if the CPU lags, the timers will jump by however many periods were missed.

When refreshing, only whole periods are taken off, and the reference time is
moved forward by exactly that many periods, so part-periods carry over to the
next refresh.

The clock is injectable, so tests can move time along by hand.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from .constants import TIMER_FREQ

# Absorbs float error when the elapsed time is an exact multiple of the period
PERIOD_TOLERANCE = 1e-6


class Timer:
    def __init__(self, frequency=TIMER_FREQ, clock=perf_counter):
        self.frequency = frequency
        self.period = 1.0 / frequency
        self.clock = clock
        self.value = 0
        self.last_tick = clock()

    def set(self, value):
        self.value = value & 0xFF
        self.last_tick = self.clock()

    def get(self):
        return self.value

    def refresh(self, now=None):
        if now is None:
            now = self.clock()

        periods = int((now - self.last_tick) * self.frequency + PERIOD_TOLERANCE)

        if periods <= 0:
            return

        self.value = max(0, self.value - periods)
        self.last_tick += periods * self.period
