"""Entities of the allocation problem: resources and the settlers competing for them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Set

from .errors import InvalidOperationError

LOGGER = logging.getLogger(__name__)


@dataclass(eq=False)
class Resource:
    """Indivisible unit of value; compared by identity, keyed by name."""

    name: str
    held: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Resource name cannot be empty")

    def assign_state(self, held: bool) -> None:
        """Mark the resource as held or free."""
        self.held = held

    def __str__(self) -> str:
        return self.name


@dataclass(eq=False)
class Settler:
    """
    Agent requiring exactly one resource.

    ``adversaries`` holds settler *names*; they are resolved through the owning
    simulation's settler map, so the adversary graph never stores mutual object
    references. The rank of the current assignment is cached and refreshed on
    every :meth:`set_assignment` call.
    """

    name: str
    preferences: List[Resource] = field(default_factory=list)
    adversaries: Set[str] = field(default_factory=set)
    _assignment: Optional[Resource] = field(init=False, default=None, repr=False)
    _assignment_rank: Optional[int] = field(init=False, default=None, repr=False)

    # ------------------------------------------------------------------ #
    def add_adversary(self, other: "Settler") -> None:
        """Record ``other`` as an adversary (one direction only)."""
        if other is self or other.name == self.name:
            raise InvalidOperationError(f"Settler '{self.name}' cannot be its own adversary")
        self.adversaries.add(other.name)

    def set_preferences(self, preferences: Sequence[Resource]) -> None:
        """Store an ordered ranking; validity is checked by :meth:`preferences_complete`."""
        self.preferences = list(preferences)
        self._refresh_rank()

    def set_assignment(self, resource: Optional[Resource]) -> None:
        """Bind ``resource`` (or nothing) and refresh the cached rank."""
        self._assignment = resource
        self._refresh_rank()

    @property
    def assignment(self) -> Optional[Resource]:
        """Resource currently bound to this settler, if any."""
        return self._assignment

    @property
    def assignment_rank(self) -> Optional[int]:
        """Index of the assignment in ``preferences``; ``None`` when unranked."""
        return self._assignment_rank

    def is_jealous(self, settlers: Mapping[str, "Settler"]) -> bool:
        """
        Return True when an adversary holds a resource ranked above our own.

        Only this settler's own ranking is consulted: the adversary's
        assignment is looked up in the strict prefix of ``preferences`` that
        precedes the current assignment.
        """
        if self._assignment is None or self._assignment_rank is None:
            return False
        better = self.preferences[: self._assignment_rank]
        for adversary_name in self.adversaries:
            adversary = settlers.get(adversary_name)
            if adversary is None or adversary.assignment is None:
                continue
            if any(resource is adversary.assignment for resource in better):
                return True
        return False

    def preferences_complete(self, n: int) -> bool:
        """True iff the preferences hold exactly ``n`` distinct resources."""
        if not self.preferences:
            if n == 0:
                return True
            LOGGER.warning("Settler %s : no preferences set", self.name)
            return False
        distinct = {id(resource) for resource in self.preferences}
        if len(distinct) != len(self.preferences):
            LOGGER.warning("Settler %s : invalid order of preferences (duplicates)", self.name)
            return False
        return len(distinct) == n

    def describe(self) -> str:
        preferences = ", ".join(resource.name for resource in self.preferences)
        adversaries = ", ".join(sorted(self.adversaries))
        return f"{self.name} | P : [{preferences}] | R : {self._assignment} | J : [{adversaries}]"

    def __str__(self) -> str:
        return self.describe()

    # ------------------------------------------------------------------ #
    def _refresh_rank(self) -> None:
        self._assignment_rank = None
        if self._assignment is None:
            return
        for index, resource in enumerate(self.preferences):
            if resource is self._assignment:
                self._assignment_rank = index
                return
