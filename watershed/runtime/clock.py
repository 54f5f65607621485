# watershed/runtime/clock.py

"""
================================================================================
SIMULATION CLOCK
================================================================================
This module provides a self-contained, data-only class for tracking
simulation time. Time advances in whole ticks, one per simulation step,
whatever the real frame rate is.

Data Contract:
---------------
- Public Methods:
    - advance(): Moves the clock forward by one tick.
    - phase(period): Position within a repeating cycle, in [0, 1).
    - reset(): Returns the clock to tick 0.
    - get_time_string(): Returns a formatted string of the current time.
- Public Properties:
    - tick (read-only int).
- Side Effects: None.
- Invariants: tick never decreases except through reset(). Pausing is done
  by not calling advance().
================================================================================
"""

class SimulationClock:
    """Counts simulation ticks for the time-dependent forcing."""

    def __init__(self, start_tick: int = 0):
        if start_tick < 0:
            raise ValueError(f"start_tick must be >= 0, got {start_tick}")
        self._tick = start_tick

    @property
    def tick(self) -> int:
        return self._tick

    def advance(self) -> int:
        """Advances the clock by one tick and returns the new tick."""
        self._tick += 1
        return self._tick

    def phase(self, period: int) -> float:
        """
        Fraction of the way through a cycle of `period` ticks.

        Args:
            period (int): Cycle length in ticks, must be positive.
        """
        if period <= 0:
            raise ValueError(f"period must be > 0, got {period}")
        return (self._tick % period) / period

    def reset(self):
        self._tick = 0

    def get_time_string(self) -> str:
        """Returns a formatted string of the current tick."""
        return f"Tick {self._tick:,}"
