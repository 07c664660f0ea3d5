import time
from typing import Callable


class Timer:
    """
    Wall time of a block of ticks, in seconds.

    The clock is injectable so runs can be timed against a fake clock.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self.clock = clock
        self.start = 0.0
        self.elapsed = 0.0

    def __enter__(self):
        self.start = self.clock()
        self.elapsed = 0.0
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = self.clock() - self.start
