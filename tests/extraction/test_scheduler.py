"""Tests for evaluation planning."""

import pytest

pytestmark = pytest.mark.unit

from symfeat.contracts import ConfigurationError
from symfeat.extraction.scheduler import build_plan
from tests.helpers.fake_recording import make_catalog


def _requested(catalog, *names):
    return catalog.requested_vector(list(names))


class TestBuildPlan:
    """Closure, ordering and validation of plans."""

    def test_requested_without_prerequisites(self):
        catalog = make_catalog(("A", []), ("B", []), ("C", []))
        plan = build_plan(catalog, _requested(catalog, "C", "A"))

        assert plan.names == ["A", "C"]
        assert all(entry.save for entry in plan)

    def test_prerequisites_are_pulled_in_and_not_saved(self):
        catalog = make_catalog(("A", []), ("B", ["A"]), ("C", ["B"]))
        plan = build_plan(catalog, _requested(catalog, "C"))

        assert plan.names == ["A", "B", "C"]
        assert [entry.save for entry in plan] == [False, False, True]

    def test_prerequisite_declared_later_in_catalog_comes_first(self):
        catalog = make_catalog(("X", ["Y"]), ("Y", []), ("Z", []))
        plan = build_plan(catalog, [True, True, True])

        assert plan.names.index("Y") < plan.names.index("X")
        assert plan.names == ["Y", "Z", "X"]

    def test_prerequisite_positions_resolved(self):
        catalog = make_catalog(("X", ["Y", "Z"]), ("Y", []), ("Z", []))
        plan = build_plan(catalog, _requested(catalog, "X"))
        x = plan[plan.names.index("X")]

        assert x.prerequisite_positions == (plan.names.index("Y"), plan.names.index("Z"))
        for entry in plan:
            assert all(p < entry.position for p in entry.prerequisite_positions)

    def test_plans_are_deterministic(self):
        catalog = make_catalog(("A", ["C"]), ("B", []), ("C", []), ("D", ["A", "B"]))
        first = build_plan(catalog, _requested(catalog, "D"))
        second = build_plan(catalog, _requested(catalog, "D"))

        assert first.names == second.names

    def test_history_depth_from_offsets(self):
        catalog = make_catalog(("A", []), ("B", ["A", "A"], None, (0, -2)))
        plan = build_plan(catalog, _requested(catalog, "B"))

        assert plan[0].history_depth == 0
        assert plan[1].history_depth == 2
        assert plan[1].offsets == (0, -2)
        assert plan.max_history_depth == 2

    def test_cycle_rejected(self):
        catalog = make_catalog(("A", ["B"]), ("B", ["A"]), ("C", []))
        with pytest.raises(ConfigurationError, match="Cyclic prerequisites involving 'A'"):
            build_plan(catalog, _requested(catalog, "A"))

    def test_cycle_error_names_a_cycle_member(self):
        # D only depends on the B <-> C cycle
        catalog = make_catalog(("D", ["B"]), ("B", ["C"]), ("C", ["B"]))
        with pytest.raises(ConfigurationError, match="Cyclic prerequisites involving 'B'"):
            build_plan(catalog, _requested(catalog, "D"))

    def test_cycle_outside_closure_is_ignored(self):
        catalog = make_catalog(("A", ["B"]), ("B", ["A"]), ("C", []))
        plan = build_plan(catalog, _requested(catalog, "C"))

        assert plan.names == ["C"]

    def test_nothing_requested_rejected(self):
        catalog = make_catalog(("A", []))
        with pytest.raises(ConfigurationError, match="At least one"):
            build_plan(catalog, [False])

    def test_length_mismatch_rejected(self):
        catalog = make_catalog(("A", []), ("B", []))
        with pytest.raises(ConfigurationError, match="has 1 entries, catalog has 2"):
            build_plan(catalog, [True])


def test_default_catalog_plans(default_catalog):
    plan = build_plan(default_catalog, default_catalog.requested_vector())

    assert len(plan.saved) == len(default_catalog.default_selection())
    names = plan.names
    assert names.index("Strength of Strongest Rhythmic Pulse") < names.index(
        "Combined Strength of Two Strongest Rhythmic Pulses")
