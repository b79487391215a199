"""Shared pytest fixtures: seeded random source and small colony builders."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from colony.model import Resource, Settler
from colony.simulation import Simulation


def build_colony(preferences, adversaries=()):
    """Colony from ``{settler: [resources...]}``; resources come from the first ranking."""
    resource_names = list(next(iter(preferences.values()))) if preferences else []
    settlers = {name: Settler(name) for name in preferences}
    resources = {name: Resource(name) for name in resource_names}
    simulation = Simulation(settlers, resources)
    for name, ranking in preferences.items():
        simulation.set_preferences(name, ranking)
    for first, second in adversaries:
        simulation.set_adversary(first, second)
    return simulation


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def colony():
    return build_colony
