"""Dependency-aware evaluation planning.

``build_plan`` turns the set of descriptors a user wants saved into the
ordered list of descriptors that must be computed: requested ones plus
everything they transitively read. Order respects prerequisites; among
descriptors ready at the same time, catalog order wins, so equal inputs
always give identical plans.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from symfeat.catalog.definition import DescriptorCatalog, DescriptorDefinition
from symfeat.contracts import ConfigurationError, assert_plan_ordered

__all__ = ['PlanEntry', 'EvaluationPlan', 'build_plan']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanEntry:
    """One descriptor in evaluation order.

    Attributes
    ----------
    descriptor : DescriptorDefinition
    save : bool
        True if the descriptor was requested (emitted), False if it is
        computed only because another entry reads it.
    position : int
        Index of this entry in the plan.
    prerequisite_positions : tuple of int
        Plan positions of the prerequisites, in declaration order.
    offsets : tuple of int
        Window offset per prerequisite.
    history_depth : int
        Number of leading windows for which this entry is UNAVAILABLE.
    """
    descriptor: DescriptorDefinition
    save: bool
    position: int
    prerequisite_positions: tuple
    offsets: tuple
    history_depth: int

    @property
    def name(self) -> str:
        return self.descriptor.name


@dataclass(frozen=True)
class EvaluationPlan:
    """Immutable ordered plan, shared by every recording of a run."""
    entries: tuple

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __getitem__(self, position: int) -> PlanEntry:
        return self.entries[position]

    @property
    def saved(self) -> tuple:
        return tuple(entry for entry in self.entries if entry.save)

    @property
    def names(self) -> list:
        return [entry.name for entry in self.entries]

    @property
    def max_history_depth(self) -> int:
        return max((entry.history_depth for entry in self.entries), default=0)


def _closure(catalog: DescriptorCatalog, requested: Sequence[bool]) -> list:
    """Requested descriptors plus everything they transitively read."""
    must_compute = list(requested)
    changed = True
    while changed:
        changed = False
        for index, definition in enumerate(catalog):
            if not must_compute[index]:
                continue
            for prerequisite in definition.prerequisites:
                prerequisite_index = catalog.index_of(prerequisite)
                if not must_compute[prerequisite_index]:
                    must_compute[prerequisite_index] = True
                    changed = True
    return must_compute


def _cycle_member(catalog: DescriptorCatalog, unplaced: list) -> str:
    """Name of a descriptor that lies on a prerequisite cycle.

    Every unplaced descriptor waits on at least one unplaced prerequisite,
    so following those links from any of them must revisit a name.
    """
    pending = set(unplaced)
    seen = set()
    name = unplaced[0]
    while name not in seen:
        seen.add(name)
        definition = catalog[catalog.index_of(name)]
        name = next(p for p in definition.prerequisites if p in pending)
    return name


def build_plan(catalog: DescriptorCatalog, requested: Sequence[bool]) -> EvaluationPlan:
    """Build the evaluation plan for a requested descriptor set.

    Parameters
    ----------
    catalog : DescriptorCatalog
    requested : sequence of bool
        Save flag per catalog entry, in catalog order.

    Returns
    -------
    EvaluationPlan

    Raises
    ------
    ConfigurationError
        If ``requested`` does not match the catalog length, requests
        nothing, or the requested closure contains a prerequisite cycle.

    Examples
    --------
    >>> catalog = build_default_catalog()
    >>> plan = build_plan(catalog, catalog.requested_vector(["Combined Strength of Two Strongest Rhythmic Pulses"]))
    >>> [e.name for e in plan]
    ['Strength of Strongest Rhythmic Pulse', 'Strength of Second Strongest Rhythmic Pulse',
     'Combined Strength of Two Strongest Rhythmic Pulses']
    """
    requested = [bool(flag) for flag in requested]
    if len(requested) != len(catalog):
        raise ConfigurationError(
            f"Requested vector has {len(requested)} entries, catalog has {len(catalog)}"
        )
    if not any(requested):
        raise ConfigurationError("At least one descriptor must be requested")

    must_compute = _closure(catalog, requested)
    remaining = sum(must_compute)
    placed = {}
    order = []

    while remaining:
        placed_this_scan = 0
        for index, definition in enumerate(catalog):
            if not must_compute[index] or definition.name in placed:
                continue
            if all(p in placed for p in definition.prerequisites):
                placed[definition.name] = len(order)
                order.append(index)
                placed_this_scan += 1
                remaining -= 1
        if not placed_this_scan:
            stuck = [d.name for i, d in enumerate(catalog)
                     if must_compute[i] and d.name not in placed]
            raise ConfigurationError(
                f"Cyclic prerequisites involving '{_cycle_member(catalog, stuck)}' "
                f"({len(stuck)} descriptors cannot be ordered: {stuck})"
            )

    entries = []
    for position, index in enumerate(order):
        definition = catalog[index]
        entries.append(PlanEntry(
            descriptor=definition,
            save=requested[index],
            position=position,
            prerequisite_positions=tuple(placed[p] for p in definition.prerequisites),
            offsets=definition.offsets,
            history_depth=definition.history_depth,
        ))

    plan = EvaluationPlan(entries=tuple(entries))
    assert_plan_ordered(plan)
    logger.info("Evaluation plan: %d descriptors (%d saved, %d as prerequisites)",
                len(plan), len(plan.saved), len(plan) - len(plan.saved))
    return plan
