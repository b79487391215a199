"""Allocation strategies that populate a :class:`Simulation`'s assignments."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

import numpy as np

from .errors import InvariantViolationError, UnstableSimulationError
from .model import Resource, Settler
from .simulation import Simulation, Snapshot

LOGGER = logging.getLogger(__name__)

STRATEGIES = ("linear", "max-lef", "switch")


@dataclass
class DispatchResult:
    """Outcome of one strategy run."""

    strategy: str
    jealous: int
    history: List[int] = field(default_factory=list)  # per instance (max-lef) or per trial (switch)
    ratios: List[float] = field(default_factory=list)  # first-round |I|/n per max-lef instance


class Dispatcher:
    """
    Centralised allocator bound to one simulation.

    The dispatcher knows every settler's ranking and adversaries and is the
    only party handing out resources. All randomness is drawn from ``rng``.
    """

    def __init__(self, simulation: Simulation, rng: np.random.Generator | None = None):
        self.simulation = simulation
        self.rng = rng or np.random.default_rng()

    # ------------------------------------------------------------------ #
    def run(self, strategy: str, parameter: Optional[int] = None) -> DispatchResult:
        """Run a strategy by name; ``parameter`` defaults to the colony size."""
        strategy = strategy.lower()
        if parameter is None:
            parameter = len(self.simulation)
        if strategy == "linear":
            return self.linear_dispatch()
        if strategy == "max-lef":
            return self.max_lef_dispatch(parameter)
        if strategy == "switch":
            return self.switch_dispatch(parameter)
        raise ValueError(f"Unknown strategy '{strategy}'. Expected one of {STRATEGIES}.")

    def linear_dispatch(self) -> DispatchResult:
        """
        Give each settler, in colony order, its favourite resource still free.

        Always yields a bijection on a stable colony, with no envy guarantee.
        """
        self._require_stable()
        self.simulation.clear()
        for settler in self.simulation.settlers:
            self._give_best(settler)
        jealous = self.simulation.count_jealous()
        LOGGER.info("Linear dispatch -> %d jealous settler(s)", jealous)
        return DispatchResult("linear", jealous)

    def max_lef_dispatch(self, instances: int) -> DispatchResult:
        """
        Approximate MAX-LEF by peeling independent sets of the adversary graph.

        Each instance shuffles the settlers, repeatedly extracts a maximal
        independent set from the unserved pool and serves its members their
        best free resource. A single extraction of ``I`` out of ``n`` settlers
        is an ``|I|/n``-approximation; repeating over several random orders
        keeps the assignment with the fewest jealous settlers.
        """
        if instances < 1:
            raise ValueError(f"MAX-LEF needs at least one instance, got {instances}")
        self._require_stable()
        settlers = self.simulation.settlers
        result = DispatchResult("max-lef", jealous=0)
        best: Optional[Snapshot] = None
        best_jealous = -1

        for instance in range(instances):
            self.simulation.clear()
            pool = [settlers[i] for i in self.rng.permutation(len(settlers))]
            first_round = True
            while pool:
                independent = self._independent_set(pool)
                if first_round:
                    result.ratios.append(len(independent) / len(pool))
                    first_round = False
                pool = [settler for settler in pool if settler.name not in independent]

            jealous = self.simulation.count_jealous()
            result.history.append(jealous)
            LOGGER.debug("MAX-LEF instance %d -> %d jealous", instance, jealous)
            if best is None or jealous < best_jealous:
                best_jealous = jealous
                best = self.simulation.snapshot_assignments()

        self.simulation.apply_assignments(best or {})
        result.jealous = self.simulation.count_jealous()
        LOGGER.info("MAX-LEF dispatch (%d instances) -> %d jealous settler(s)", instances, result.jealous)
        return result

    def switch_dispatch(self, k: int) -> DispatchResult:
        """
        Hill-climb from a linear dispatch by swapping settlers with adversaries.

        A swap is kept only when it strictly lowers the jealousy count.
        """
        if k < 0:
            raise ValueError(f"Number of switches must be non-negative, got {k}")
        self.linear_dispatch()
        settlers = self.simulation.settlers
        jealous = self.simulation.count_jealous()
        result = DispatchResult("switch", jealous)

        for trial in range(k):
            p = settlers[int(self.rng.integers(len(settlers)))] if settlers else None
            if p is not None and p.adversaries:
                candidates = sorted(p.adversaries)
                q = candidates[int(self.rng.integers(len(candidates)))]
                self.simulation.switch_assignments(p.name, q)
                after = self.simulation.count_jealous()
                if after >= jealous:
                    self.simulation.switch_assignments(p.name, q)  # roll back
                else:
                    LOGGER.debug("Switch %d: %s <-> %s -> %d jealous", trial, p.name, q, after)
                    jealous = after
            result.history.append(jealous)

        result.jealous = jealous
        LOGGER.info("Switch dispatch (%d trials) -> %d jealous settler(s)", k, jealous)
        return result

    # ------------------------------------------------------------------ #
    # Internal helpers                                                   #
    # ------------------------------------------------------------------ #
    def _require_stable(self) -> None:
        if not self.simulation.check_stable():
            raise UnstableSimulationError("Simulation is not stable: every settler must rank every resource")

    def _independent_set(self, pool: Sequence[Settler]) -> Set[str]:
        """Extract a maximal independent set from ``pool`` and serve its members."""
        queue = deque(pool)
        independent: Set[str] = set()
        while queue:
            settler = queue.popleft()
            independent.add(settler.name)
            queue = deque(other for other in queue if other.name not in settler.adversaries)
            self._give_best(settler)
        LOGGER.debug("Independent set of %d out of %d: %s", len(independent), len(pool), sorted(independent))
        return independent

    def _give_best(self, settler: Settler) -> Resource:
        resource = best_available(settler)
        if resource is None:
            raise InvariantViolationError(f"No free resource left for settler '{settler.name}'")
        self.simulation.assign(settler.name, resource.name)
        return resource


def best_available(settler: Settler) -> Optional[Resource]:
    """Return the settler's highest-ranked resource that nobody holds."""
    for resource in settler.preferences:
        if not resource.held:
            return resource
    return None
