"""Exceptions raised by the colony allocation engine."""

from __future__ import annotations

from typing import Optional


class ColonyError(Exception):
    """Base class for recoverable errors reported back to the caller."""


class UnknownEntityError(ColonyError, LookupError):
    """A settler or resource name is not part of the simulation."""


class InvalidOperationError(ColonyError, ValueError):
    """The operation is meaningless for its arguments (e.g. a self-adversary)."""


class SizeMismatchError(ColonyError, ValueError):
    """A preference list does not cover the resource set."""


class NotAssignedError(ColonyError, ValueError):
    """A settler involved in a swap holds no resource."""


class UnstableSimulationError(ColonyError, RuntimeError):
    """A dispatch was requested while some preferences are incomplete."""


class InvariantViolationError(RuntimeError):
    """Internal allocation invariant broken; never meant to be handled as user error."""


class ColonyFileFormatError(ColonyError, ValueError):
    """Malformed colony file, optionally tagged with the offending line."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        self.detail = message
        super().__init__(message if line is None else f"At line {line} : {message}")


class InvalidStatementError(ColonyFileFormatError):
    """Statement keyword is not part of the colony grammar."""

    def __init__(self, statement: str, line: Optional[int] = None):
        super().__init__(f"Unknown statement {statement}", line)


class InvalidArgumentError(ColonyFileFormatError):
    """Known statement with arguments of the wrong shape."""

    def __init__(self, keyword: str, statement: str, line: Optional[int] = None):
        super().__init__(f"Invalid argument '{statement}' is incorrect for {keyword}()", line)
