"""Experiment helpers comparing dispatch strategies on random colonies."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List

import numpy as np

from .dispatcher import STRATEGIES, Dispatcher, DispatchResult
from .simulation import Simulation
from .utils import ensure_dirs, envy_free_share, plot_strategy_comparison, plot_trajectories, running_minimum, summarize

LOGGER = logging.getLogger(__name__)


@dataclass
class ExperimentConfig:
    """Parameters that govern an experiment run."""

    num_settlers: int = 15
    density: int = 3
    num_colonies: int = 10
    max_lef_instances: int = 15
    switch_trials: int = 15
    seed: int | None = None
    log_dir: str = "results/logs"
    plot_dir: str = "results/plots"
    render_plots: bool = True


def run_colony(simulation: Simulation, dispatcher: Dispatcher, config: ExperimentConfig) -> Dict[str, DispatchResult]:
    """Run every strategy on the same colony and return their results."""
    parameters = {
        "linear": None,
        "max-lef": config.max_lef_instances,
        "switch": config.switch_trials,
    }
    results = {}
    for strategy in STRATEGIES:
        results[strategy] = dispatcher.run(strategy, parameters[strategy])
    simulation.clear()
    return results


def run_experiments(config: ExperimentConfig, rng: np.random.Generator | None = None) -> Dict[str, Any]:
    """Generate random colonies, compare strategies, persist logs, and make plots."""
    rng = rng or np.random.default_rng(config.seed)
    ensure_dirs(config.log_dir, config.plot_dir)

    per_strategy: Dict[str, List[int]] = {strategy: [] for strategy in STRATEGIES}
    max_lef_histories: List[List[int]] = []
    ratios: List[float] = []

    for colony_idx in range(config.num_colonies):
        simulation = Simulation.random(config.num_settlers, config.density, rng)
        dispatcher = Dispatcher(simulation, rng)
        results = run_colony(simulation, dispatcher, config)
        for strategy, result in results.items():
            per_strategy[strategy].append(result.jealous)
        max_lef_histories.append(results["max-lef"].history)
        ratios.extend(results["max-lef"].ratios)
        LOGGER.info(
            "Colony %d -> linear=%d max-lef=%d switch=%d",
            colony_idx,
            results["linear"].jealous,
            results["max-lef"].jealous,
            results["switch"].jealous,
        )

    summary = {
        strategy: {
            **summarize(values, "jealous"),
            **summarize(envy_free_share(values, config.num_settlers), "envy_free_share"),
        }
        for strategy, values in per_strategy.items()
    }
    summary["max-lef"].update(summarize(ratios, "first_round_ratio"))

    payload = {
        "config": asdict(config),
        "summary": summary,
        "jealous": per_strategy,
        "max_lef_histories": max_lef_histories,
    }
    _persist_results(payload, config)
    if config.render_plots and config.num_colonies > 0:
        _render_plots(summary, max_lef_histories, config)
    return payload


# --------------------------------------------------------------------------- #
# Helper utilities                                                            #
# --------------------------------------------------------------------------- #
def _persist_results(payload: Dict[str, Any], config: ExperimentConfig) -> Path:
    timestamp = int(time.time())
    out_path = Path(config.log_dir) / f"run_{timestamp}.json"
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    LOGGER.info("Saved run summary -> %s", out_path)
    return out_path


def _render_plots(summary: Dict[str, Dict[str, float]], histories: List[List[int]], config: ExperimentConfig) -> None:
    plot_strategy_comparison(summary, out_path=Path(config.plot_dir) / "strategy_comparison.png")
    stacked = np.array([running_minimum(history) for history in histories], dtype=float)
    plot_trajectories(
        {"best so far": stacked.mean(axis=0).tolist()},
        title="MAX-LEF best jealousy across instances (mean across colonies)",
        out_path=Path(config.plot_dir) / "max_lef_instances.png",
    )
    LOGGER.info("Plots saved to %s", config.plot_dir)
