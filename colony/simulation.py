"""Colony aggregate: owns settlers and resources and exposes the mutation API."""

from __future__ import annotations

import logging
import string
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from .errors import InvalidOperationError, NotAssignedError, SizeMismatchError, UnknownEntityError
from .model import Resource, Settler

LOGGER = logging.getLogger(__name__)
Snapshot = Dict[str, Optional[str]]


def placeholder_names(n: int) -> tuple[List[str], List[str]]:
    """Return ``n`` settler names (A1..Z1, A2..) and ``n`` resource names (R1..Rn)."""
    letters = string.ascii_uppercase
    settlers = [f"{letters[i % 26]}{i // 26 + 1}" for i in range(n)]
    resources = [f"R{i + 1}" for i in range(n)]
    return settlers, resources


class Simulation:
    """
    A colony where every settler must receive exactly one distinct resource.

    Settlers and resources are keyed by name; iteration follows insertion
    order, which gives dispatch strategies a fixed settler order.
    """

    def __init__(self, settlers: Mapping[str, Settler], resources: Mapping[str, Resource]):
        self._settlers: Dict[str, Settler] = dict(settlers)
        self._resources: Dict[str, Resource] = dict(resources)
        if len(self._settlers) != len(self._resources):
            LOGGER.warning(
                "Colony built with %d settlers for %d resources",
                len(self._settlers),
                len(self._resources),
            )

    @classmethod
    def from_size(cls, n: int) -> "Simulation":
        """Build ``n`` placeholder settlers and resources, without preferences or adversaries."""
        if n < 0:
            raise ValueError(f"Colony size must be non-negative, got {n}")
        settler_names, resource_names = placeholder_names(n)
        settlers = {name: Settler(name) for name in settler_names}
        resources = {name: Resource(name) for name in resource_names}
        LOGGER.debug("Settlers : %s", settler_names)
        return cls(settlers, resources)

    @classmethod
    def random(cls, n: int, density: int, rng: np.random.Generator | None = None) -> "Simulation":
        """
        Build a colony with random adversaries and random preference permutations.

        Each settler draws ``k`` uniformly in ``[0, density)`` and becomes the
        adversary of the first ``k`` settlers of a freshly shuffled list
        (itself excluded).
        """
        if not 0 <= density < max(n, 1):
            raise ValueError(f"Adversary density must lie in [0, {n}), got {density}")
        rng = rng or np.random.default_rng()
        simulation = cls.from_size(n)
        names = list(simulation._settlers)
        resources = list(simulation._resources.values())
        for name in names:
            count = int(rng.integers(0, density)) if density > 0 else 0
            shuffled = [names[i] for i in rng.permutation(n)]
            for other in shuffled[:count]:
                if other != name:
                    simulation.set_adversary(name, other)
            ranking = [resources[i] for i in rng.permutation(n)]
            simulation._settlers[name].set_preferences(ranking)
        return simulation

    # --------------------------------------------------------------------- #
    # Accessors                                                             #
    # --------------------------------------------------------------------- #
    @property
    def settlers(self) -> List[Settler]:
        return list(self._settlers.values())

    @property
    def resources(self) -> List[Resource]:
        return list(self._resources.values())

    def settler(self, name: str) -> Settler:
        try:
            return self._settlers[name]
        except KeyError:
            raise UnknownEntityError(f"Settler '{name}' does not exist") from None

    def resource(self, name: str) -> Resource:
        try:
            return self._resources[name]
        except KeyError:
            raise UnknownEntityError(f"Resource '{name}' does not exist") from None

    def __len__(self) -> int:
        return len(self._settlers)

    # --------------------------------------------------------------------- #
    # Mutation API                                                          #
    # --------------------------------------------------------------------- #
    def assign(self, settler_name: str, resource_name: str) -> bool:
        """
        Bind a resource to a settler.

        Returns False, leaving everything untouched, when the resource is
        already held. A resource previously held by the settler is released.
        """
        settler = self.settler(settler_name)
        resource = self.resource(resource_name)
        if resource.held:
            LOGGER.warning(
                "%s not assigned to '%s' as '%s' is already held",
                resource_name,
                settler_name,
                resource_name,
            )
            return False
        previous = settler.assignment
        if previous is not None:
            previous.assign_state(False)
        settler.set_assignment(resource)
        resource.assign_state(True)
        return True

    def set_adversary(self, first: str, second: str) -> None:
        """Make two settlers adversaries of each other."""
        a = self.settler(first)
        b = self.settler(second)
        a.add_adversary(b)
        b.add_adversary(a)

    def set_preferences(self, settler_name: str, resource_names: Sequence[str]) -> None:
        """Set a settler's ranking; duplicates are only caught by :meth:`check_stable`."""
        settler = self.settler(settler_name)
        if len(resource_names) != len(self._resources):
            missing = len(self._resources) - len(resource_names)
            if missing > 0:
                raise SizeMismatchError(f"Missing {missing} resource(s) for '{settler_name}'")
            raise SizeMismatchError(f"Extra {-missing} resource(s) for '{settler_name}'")
        ranking = [self.resource(name) for name in resource_names]
        settler.set_preferences(ranking)

    def switch_assignments(self, first: str, second: str) -> None:
        """Exchange the resources held by two settlers."""
        a = self.settler(first)
        b = self.settler(second)
        for settler in (a, b):
            if settler.assignment is None:
                raise NotAssignedError(f"Settler '{settler.name}' does not have any resource")
        held_by_a = a.assignment
        a.set_assignment(b.assignment)
        b.set_assignment(held_by_a)

    def clear(self) -> None:
        """Drop every assignment and release every resource."""
        for settler in self._settlers.values():
            settler.set_assignment(None)
        for resource in self._resources.values():
            resource.assign_state(False)

    def snapshot_assignments(self) -> Snapshot:
        """Return the current ``settler name -> resource name`` bindings."""
        return {
            name: (settler.assignment.name if settler.assignment is not None else None)
            for name, settler in self._settlers.items()
        }

    def apply_assignments(self, snapshot: Mapping[str, Optional[str]]) -> None:
        """Replace every binding with ``snapshot``; settlers absent from it end up unassigned."""
        for settler_name, resource_name in snapshot.items():
            self.settler(settler_name)
            if resource_name is not None:
                self.resource(resource_name)
        claimed = [name for name in snapshot.values() if name is not None]
        if len(claimed) != len(set(claimed)):
            raise InvalidOperationError("A resource cannot be bound to more than one settler")
        self.clear()
        for settler_name, resource_name in snapshot.items():
            if resource_name is not None:
                self.assign(settler_name, resource_name)

    # --------------------------------------------------------------------- #
    # Queries                                                               #
    # --------------------------------------------------------------------- #
    def jealous_settlers(self) -> List[str]:
        return [name for name, settler in self._settlers.items() if settler.is_jealous(self._settlers)]

    def count_jealous(self) -> int:
        """Number of settlers envying at least one adversary."""
        return len(self.jealous_settlers())

    def check_stable(self) -> bool:
        """True iff every settler ranks exactly the ``n`` resources of the colony."""
        n = len(self._resources)
        if len(self._settlers) != n:
            LOGGER.warning("Colony has %d settlers for %d resources", len(self._settlers), n)
            return False
        # Evaluate every settler so each incomplete ranking gets reported.
        results = [settler.preferences_complete(n) for settler in self._settlers.values()]
        return all(results)

    def describe(self) -> str:
        return "\n".join(settler.describe() for settler in self._settlers.values())
