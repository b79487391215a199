"""
Colony file loader.

A colony file is a sequence of ``.``-terminated statements grouped in
sections that must appear in this order::

    colon(A).              one per settler
    ressource(R1).         one per resource, as many as settlers
    deteste(A,B).          optional adversary pairs
    preferences(A,R1,R2).  one full ranking per settler

Every diagnostic raised here is a :class:`ColonyFileFormatError` carrying the
line on which the offending statement starts.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import ColonyError, ColonyFileFormatError, InvalidArgumentError, InvalidStatementError
from .model import Resource, Settler
from .simulation import Simulation

LOGGER = logging.getLogger(__name__)

STATEMENT_RE = re.compile(r"([a-z]+)\((.+)\)")
NAME_RE = re.compile(r"[\w ]+")


class Section(Enum):
    SETTLERS = "colon"
    RESOURCES = "ressource"
    ADVERSARIES = "deteste"
    PREFERENCES = "preferences"

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional["Section"]:
        for section in cls:
            if section.value == keyword:
                return section
        return None


# Sections allowed to follow each section; ADVERSARIES may be skipped.
NEXT_SECTIONS = {
    None: (Section.SETTLERS,),
    Section.SETTLERS: (Section.RESOURCES,),
    Section.RESOURCES: (Section.ADVERSARIES, Section.PREFERENCES),
    Section.ADVERSARIES: (Section.PREFERENCES,),
    Section.PREFERENCES: (),
}


def can_follow(current: Optional[Section], section: Section) -> bool:
    return section in NEXT_SECTIONS[current]


def iter_statements(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(line, statement)`` pairs, skipping blank statements."""
    line = 1
    for chunk in text.split("."):
        leading = chunk[: len(chunk) - len(chunk.lstrip())]
        start = line + leading.count("\n")
        line += chunk.count("\n")
        statement = chunk.strip()
        if statement:
            yield start, statement


def split_arguments(body: str) -> Optional[List[str]]:
    """Split a comma-separated argument list; ``None`` if any argument is malformed."""
    parts = body.split(",")
    if not all(NAME_RE.fullmatch(part) and part.strip() for part in parts):
        return None
    return [part.strip() for part in parts]


class ColonyParser:
    """Single-use parser turning colony text into a stable :class:`Simulation`."""

    def __init__(self) -> None:
        self._settlers: Dict[str, Settler] = {}
        self._resources: Dict[str, Resource] = {}
        self._simulation: Optional[Simulation] = None
        self._section: Optional[Section] = None

    def parse(self, text: str) -> Simulation:
        for line, statement in iter_statements(text):
            match = STATEMENT_RE.fullmatch(statement)
            section = Section.from_keyword(match.group(1)) if match else None
            if section is None:
                raise InvalidStatementError(statement, line)
            if section is not self._section:
                self._enter(section, statement, line)
            arguments = split_arguments(match.group(2))
            self._handle(section, arguments, statement, line)

        if self._section is None:
            raise ColonyFileFormatError("Settlers should be defined first")
        if self._simulation is None:
            self._build_simulation(None)
        if not self._simulation.check_stable():
            raise ColonyFileFormatError("Simulation is not stable")
        LOGGER.info(
            "Loaded colony with %d settlers and %d resources",
            len(self._settlers),
            len(self._resources),
        )
        return self._simulation

    # ------------------------------------------------------------------ #
    def _enter(self, section: Section, statement: str, line: int) -> None:
        if not can_follow(self._section, section):
            if self._section is None:
                raise ColonyFileFormatError("Settlers should be defined first", line)
            raise ColonyFileFormatError(f"{statement} : this statement should not be there!", line)
        if self._section is Section.RESOURCES:
            self._build_simulation(line)
        self._section = section

    def _build_simulation(self, line: Optional[int]) -> None:
        if len(self._resources) != len(self._settlers):
            raise ColonyFileFormatError(
                "Number of resources must equal number of settlers, but there are "
                f"{len(self._settlers)} distinct names for {len(self._resources)} distinct resources",
                line,
            )
        self._simulation = Simulation(self._settlers, self._resources)

    def _handle(self, section: Section, arguments: Optional[List[str]], statement: str, line: int) -> None:
        if section in (Section.SETTLERS, Section.RESOURCES):
            if arguments is None or len(arguments) != 1:
                raise InvalidArgumentError(section.value, statement, line)
            self._declare(section, arguments[0], line)
            return

        if arguments is None or len(arguments) < 2:
            raise InvalidArgumentError(section.value, statement, line)
        try:
            if section is Section.ADVERSARIES:
                if len(arguments) != 2:
                    raise InvalidArgumentError(section.value, statement, line)
                self._simulation.set_adversary(arguments[0], arguments[1])
            else:
                expected = len(self._resources) + 1
                if len(arguments) > expected:
                    raise ColonyFileFormatError(
                        f"Extra {len(arguments) - expected} argument(s) for {statement}", line
                    )
                if len(arguments) < expected:
                    raise ColonyFileFormatError(
                        f"Missing {expected - len(arguments)} argument(s) for {statement}", line
                    )
                self._simulation.set_preferences(arguments[0], arguments[1:])
        except ColonyFileFormatError:
            raise
        except ColonyError as exc:
            raise ColonyFileFormatError(str(exc), line) from exc

    def _declare(self, section: Section, name: str, line: int) -> None:
        if section is Section.SETTLERS:
            if name in self._settlers:
                raise ColonyFileFormatError(f"Duplicate settler '{name}'", line)
            self._settlers[name] = Settler(name)
        else:
            if name in self._resources:
                raise ColonyFileFormatError(f"Duplicate resource '{name}'", line)
            self._resources[name] = Resource(name)


def parse_colony(text: str) -> Simulation:
    """Parse colony text into a stable simulation."""
    return ColonyParser().parse(text)


def read_colony(path: str | Path) -> Simulation:
    """Load a colony file from disk."""
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    LOGGER.debug("Reading colony file %s", path)
    return parse_colony(text)
