"""Line-based command session driving a simulation and its dispatcher."""

from __future__ import annotations

import logging
import shlex
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from .dispatcher import STRATEGIES, Dispatcher
from .errors import ColonyError
from .simulation import Simulation
from .writer import write_assignments

LOGGER = logging.getLogger(__name__)


class Command(Enum):
    ADVERSARY = "adversary"
    PREFERENCES = "preferences"
    DISPATCH = "dispatch"
    SWITCH = "switch"
    JEALOUS = "jealous"
    SHOW = "show"
    CLEAR = "clear"
    SAVE = "save"
    HELP = "help"
    QUIT = "quit"


HELP_TEXT = """Commands:
  adversary A B            make settlers A and B adversaries
  preferences A R1 R2 ...  set the full ranking of settler A
  dispatch STRATEGY [k]    run linear | max-lef | switch (k defaults to the colony size)
  switch A B               exchange the resources of A and B
  jealous                  list jealous settlers
  show                     print every settler
  clear                    drop every assignment
  save FILE                write the assignment as name:resource lines
  help                     show this message
  quit                     leave the session"""

ARITY = {
    Command.ADVERSARY: 2,
    Command.SWITCH: 2,
    Command.JEALOUS: 0,
    Command.SHOW: 0,
    Command.CLEAR: 0,
    Command.SAVE: 1,
    Command.HELP: 0,
    Command.QUIT: 0,
}


class SessionClosed(Exception):
    """Raised by the ``quit`` command."""


@dataclass
class Session:
    """State shared by the commands of one interactive run."""

    simulation: Simulation
    dispatcher: Dispatcher
    source: Optional[Path] = None
    defaults: Dict[str, int] = field(default_factory=dict)


def execute(session: Session, line: str) -> str:
    """Run one command line and return the text to display."""
    try:
        tokens = shlex.split(line)
    except ValueError as exc:
        return f"Invalid input: {exc}"
    if not tokens:
        return ""
    try:
        command = Command(tokens[0].lower())
    except ValueError:
        return f"Incorrect input : {tokens[0]} (type 'help')"
    args = tokens[1:]
    expected = ARITY.get(command)
    if expected is not None and len(args) != expected:
        return f"'{command.value}' expects {expected} argument(s), got {len(args)}"

    simulation = session.simulation
    try:
        if command is Command.ADVERSARY:
            simulation.set_adversary(args[0], args[1])
            return f"{args[0]} and {args[1]} are now adversaries"
        if command is Command.PREFERENCES:
            if not args:
                return "'preferences' expects a settler name followed by its ranking"
            simulation.set_preferences(args[0], args[1:])
            return f"Preferences of {args[0]} updated"
        if command is Command.DISPATCH:
            return _dispatch(session, args)
        if command is Command.SWITCH:
            simulation.switch_assignments(args[0], args[1])
            return simulation.describe()
        if command is Command.JEALOUS:
            jealous = simulation.jealous_settlers()
            lines = [f"{name} is jealous" for name in jealous]
            lines.append(f"There are {len(jealous)} jealous settlers")
            return "\n".join(lines)
        if command is Command.SHOW:
            return simulation.describe()
        if command is Command.CLEAR:
            simulation.clear()
            return "Assignments cleared"
        if command is Command.SAVE:
            path = write_assignments(simulation, args[0], source=session.source)
            return f"Saved to {path}"
        if command is Command.HELP:
            return HELP_TEXT
        raise SessionClosed()
    except (ColonyError, ValueError, OSError) as exc:
        LOGGER.debug("Command %r rejected: %s", line, exc)
        return str(exc)


def _dispatch(session: Session, args: List[str]) -> str:
    if not args or len(args) > 2:
        return f"'dispatch' expects a strategy among {', '.join(STRATEGIES)} and an optional parameter"
    strategy = args[0].lower()
    if strategy not in STRATEGIES:
        return f"Unknown strategy '{args[0]}'. Expected one of {', '.join(STRATEGIES)}."
    if len(args) == 2:
        try:
            parameter: Optional[int] = int(args[1])
        except ValueError:
            return f"Sorry, but '{args[1]}' is not a number"
    else:
        parameter = session.defaults.get(strategy)
    result = session.dispatcher.run(strategy, parameter)
    simulation = session.simulation
    return f"{simulation.describe()}\n\nThere are {result.jealous} jealous settlers ({result.strategy} dispatch)"


def run_session(session: Session, stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> None:
    """Read commands until ``quit`` or end of input."""
    print("Welcome to the colony dispatcher. Type 'help' for commands, 'quit' to leave.", file=stdout)
    print(session.simulation.describe(), file=stdout)
    for line in stdin:
        try:
            output = execute(session, line)
        except SessionClosed:
            break
        if output:
            print(output, file=stdout)
    print("Exiting... Bye!", file=stdout)
