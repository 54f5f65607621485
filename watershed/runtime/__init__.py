# watershed/runtime/__init__.py

# This file makes the 'runtime' directory a Python package.
# We can also use it to define the public API of the package.

from .world import Simulation, SimulationState
from .clock import SimulationClock

__all__ = ["Simulation", "SimulationState", "SimulationClock"]
