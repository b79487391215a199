"""Entry point for loading, solving, and exploring colony allocation problems."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from .cli import Session, run_session
from .dispatcher import STRATEGIES, Dispatcher
from .errors import ColonyError
from .reader import read_colony
from .simulate import ExperimentConfig, run_experiments
from .simulation import Simulation
from .utils import load_config
from .writer import write_assignments

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG = "configs/default.yaml"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Minimise local envy when dispatching resources to settlers")
    parser.add_argument("colony_file", nargs="?", help="Colony file to load (omit to build a colony by hand).")
    parser.add_argument("--size", type=int, help="Number of settlers of a hand-built colony (1 to 26).")
    parser.add_argument("--strategy", choices=STRATEGIES, help="Solve non-interactively with this strategy.")
    parser.add_argument("--param", type=int, help="Instances (max-lef) or trials (switch); defaults to config.")
    parser.add_argument("--output", type=str, help="Where to write name:resource lines after solving.")
    parser.add_argument("--experiment", action="store_true", help="Compare strategies on random colonies.")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG, help="Path to YAML config.")
    parser.add_argument("--seed", type=int, help="Seed for the random source.")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level.")
    return parser.parse_args(argv)


def dispatch_defaults(config: Dict, colony_size: int) -> Dict[str, int]:
    """Strategy parameters from the ``dispatch`` config section, defaulting to the colony size."""
    section = config.get("dispatch", {}) or {}
    return {
        "max-lef": int(section.get("max_lef_instances") or colony_size),
        "switch": int(section.get("switch_trials") or colony_size),
    }


def _load_optional_config(path: str) -> Dict:
    if Path(path).exists():
        return load_config(path)
    if path != DEFAULT_CONFIG:
        raise FileNotFoundError(f"Config file {path} not found")
    return {}


def _run_experiment(config: Dict, seed: Optional[int]) -> int:
    experiment = ExperimentConfig(**(config.get("experiment", {}) or {}))
    if seed is not None:
        experiment.seed = seed
    payload = run_experiments(experiment)
    for strategy, stats in payload["summary"].items():
        print(f"{strategy:>8}: {stats['jealous_mean']:.2f} ± {stats['jealous_std']:.2f} jealous settlers")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    config = _load_optional_config(args.config)

    if args.experiment:
        return _run_experiment(config, args.seed)

    rng = np.random.default_rng(args.seed)
    source: Optional[Path] = None
    try:
        if args.colony_file:
            source = Path(args.colony_file)
            simulation = read_colony(source)
        else:
            size = args.size
            if size is None or not 1 <= size <= 26:
                print("Your colony should be between 1 and 26 settlers (use --size N)", file=sys.stderr)
                return 2
            simulation = Simulation.from_size(size)
    except OSError as exc:
        print(f"Path {args.colony_file} invalid: {exc}", file=sys.stderr)
        return 2
    except ColonyError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    dispatcher = Dispatcher(simulation, rng)
    defaults = dispatch_defaults(config, len(simulation))

    if args.strategy:
        parameter = args.param if args.param is not None else defaults.get(args.strategy)
        try:
            result = dispatcher.run(args.strategy, parameter)
        except (ColonyError, ValueError) as exc:
            print(str(exc), file=sys.stderr)
            return 1
        print(simulation.describe())
        print(f"\nThere are {result.jealous} jealous settlers")
        if args.output:
            try:
                write_assignments(simulation, args.output, source=source)
            except (ValueError, OSError) as exc:
                print(str(exc), file=sys.stderr)
                return 1
        return 0

    run_session(Session(simulation, dispatcher, source=source, defaults=defaults))
    return 0


if __name__ == "__main__":
    sys.exit(main())
