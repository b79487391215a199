"""Serialise a colony's final assignment as ``settler:resource`` lines."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .simulation import Simulation

LOGGER = logging.getLogger(__name__)


def format_assignments(simulation: Simulation) -> str:
    """One ``name:resource`` line per settler; unassigned settlers get an empty resource."""
    lines = [f"{name}:{resource or ''}" for name, resource in simulation.snapshot_assignments().items()]
    return "".join(f"{line}\n" for line in lines)


def write_assignments(simulation: Simulation, path: str | Path, source: Optional[str | Path] = None) -> Path:
    """Write the assignment to ``path``, refusing to clobber the colony ``source`` file."""
    out_path = Path(path)
    if source is not None and out_path.resolve() == Path(source).resolve():
        raise ValueError(f"Refusing to overwrite colony file {source}, choose another file name")
    with out_path.open("w", encoding="utf-8") as f:
        f.write(format_assignments(simulation))
    LOGGER.info("Saved assignments -> %s", out_path)
    return out_path
