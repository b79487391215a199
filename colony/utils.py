"""Utility helpers for configuration loading, metrics, and visualization."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List

import matplotlib.pyplot as plt
import numpy as np
import yaml


# --------------------------------------------------------------------------- #
# IO helpers                                                                  #
# --------------------------------------------------------------------------- #
def load_config(path: str | Path) -> Dict[str, Any]:
    """Load YAML config file."""
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def ensure_dirs(*dirs: str | Path) -> None:
    """Ensure a list of directories exist."""
    for directory in dirs:
        Path(directory).mkdir(parents=True, exist_ok=True)


# --------------------------------------------------------------------------- #
# Metrics                                                                     #
# --------------------------------------------------------------------------- #
def summarize(values: Iterable[float], prefix: str) -> Dict[str, float]:
    """Mean, standard deviation, min and max of a sample under ``prefix_*`` keys."""
    arr = np.array(list(values), dtype=float)
    if arr.size == 0:
        return {f"{prefix}_mean": 0.0, f"{prefix}_std": 0.0, f"{prefix}_min": 0.0, f"{prefix}_max": 0.0}
    return {
        f"{prefix}_mean": float(arr.mean()),
        f"{prefix}_std": float(arr.std()),
        f"{prefix}_min": float(arr.min()),
        f"{prefix}_max": float(arr.max()),
    }


def envy_free_share(jealous: Iterable[int], colony_size: int) -> List[float]:
    """Fraction of locally envy-free settlers for each jealousy count."""
    arr = np.array(list(jealous), dtype=float)
    if colony_size <= 0:
        return np.ones_like(arr).tolist()
    return (1.0 - arr / colony_size).tolist()


def running_minimum(values: Iterable[int]) -> List[int]:
    """Best value seen so far at each position."""
    arr = np.array(list(values), dtype=int)
    if arr.size == 0:
        return []
    return np.minimum.accumulate(arr).tolist()


# --------------------------------------------------------------------------- #
# Plotting                                                                    #
# --------------------------------------------------------------------------- #
def plot_trajectories(series: Dict[str, List[float]], title: str, out_path: str | Path | None = None) -> None:
    """Plot one or more trajectories."""
    for label, values in series.items():
        plt.plot(values, label=label)
    plt.title(title)
    plt.xlabel("Step")
    plt.ylabel("Jealous settlers")
    plt.legend()
    plt.tight_layout()
    if out_path:
        plt.savefig(out_path, dpi=150)
        plt.close()
    else:
        plt.show()


def plot_strategy_comparison(summary: Dict[str, Dict[str, float]], out_path: str | Path) -> None:
    """Bar chart of mean jealousy (with std error bars) per strategy."""
    strategies = list(summary.keys())
    values = [summary[s]["jealous_mean"] for s in strategies]
    errors = [summary[s]["jealous_std"] for s in strategies]

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.bar(range(len(strategies)), values, yerr=errors, capsize=5, alpha=0.7)
    ax.set_xticks(range(len(strategies)))
    ax.set_xticklabels(strategies)
    ax.set_ylabel("Jealous settlers")
    ax.set_title("Jealousy per dispatch strategy (mean across colonies)")
    ax.grid(axis="y", alpha=0.3)
    plt.tight_layout()
    plt.savefig(out_path, dpi=150)
    plt.close(fig)
