"""
Local envy minimisation for one-to-one resource allocation.

This module exposes convenience imports so downstream scripts can do:
```
from colony import Simulation, Dispatcher
```
when solving colonies.
"""

from .dispatcher import Dispatcher, DispatchResult
from .model import Resource, Settler
from .reader import parse_colony, read_colony
from .simulation import Simulation
from .writer import write_assignments

__all__ = [
    "Dispatcher",
    "DispatchResult",
    "Resource",
    "Settler",
    "Simulation",
    "parse_colony",
    "read_colony",
    "write_assignments",
]
