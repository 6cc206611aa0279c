"""Tests for extraction contracts and the failure policy.

These tests verify that contracts are enforced at stage boundaries.
"""

import dataclasses

import numpy as np
import pytest

pytestmark = pytest.mark.unit

from symfeat.catalog.definition import DescriptorDefinition
from symfeat.contracts import (
    ComputationError,
    ConfigurationError,
    ContractViolation,
    FailurePolicy,
    InputParseError,
    PIPELINE_INVARIANTS,
    ResourceExhaustionError,
    STAGE_REQUIREMENTS,
    SymfeatError,
    assert_plan_ordered,
    assert_representation,
    assert_windows,
    require,
)
from symfeat.extraction.representation import RepresentationBuilder
from symfeat.extraction.scheduler import EvaluationPlan, PlanEntry
from symfeat.extraction.windower import Window
from tests.helpers.fake_recording import constant, make_recording


def _entry(name, position, prerequisite_positions=(), save=True):
    definition = DescriptorDefinition(name, name, name, 1, constant(0.0))
    return PlanEntry(
        descriptor=definition,
        save=save,
        position=position,
        prerequisite_positions=tuple(prerequisite_positions),
        offsets=(0,) * len(prerequisite_positions),
        history_depth=0,
    )


class TestRequire:
    """Test the single enforcement primitive."""

    def test_require_passes_when_true(self):
        require(True, "never raised")

    def test_require_raises_contract_violation(self):
        with pytest.raises(ContractViolation, match="broken"):
            require(False, "broken")


class TestPlanContract:
    """Test plan stage contract."""

    def test_plan_contract_passes_for_ordered_plan(self):
        plan = EvaluationPlan((_entry("A", 0), _entry("B", 1, [0])))
        assert_plan_ordered(plan)

    def test_plan_contract_fails_when_prerequisite_follows(self):
        plan = EvaluationPlan((_entry("A", 0, [1]), _entry("B", 1)))
        with pytest.raises(ContractViolation, match="'A' at 0 reads position 1"):
            assert_plan_ordered(plan)

    def test_plan_contract_fails_for_empty_plan(self):
        with pytest.raises(ContractViolation, match="empty"):
            assert_plan_ordered(EvaluationPlan(()))

    def test_plan_contract_fails_when_nothing_saved(self):
        plan = EvaluationPlan((_entry("A", 0, save=False),))
        with pytest.raises(ContractViolation, match="no entry is saved"):
            assert_plan_ordered(plan)

    def test_plan_contract_fails_on_position_gap(self):
        plan = EvaluationPlan((_entry("A", 0), _entry("B", 2)))
        with pytest.raises(ContractViolation, match="expected 1"):
            assert_plan_ordered(plan)


class TestWindowContract:
    """Test windowing contract."""

    def test_window_contract_passes(self):
        windows = [Window(0, 0, 100, 0.0, 10.0), Window(1, 90, 150, 9.0, 15.0)]
        assert_windows(windows, 15.0)

    def test_window_contract_fails_past_recording_end(self):
        windows = [Window(0, 0, 100, 0.0, 12.0)]
        with pytest.raises(ContractViolation, match="after the recording"):
            assert_windows(windows, 10.0)

    def test_window_contract_fails_on_non_increasing_starts(self):
        windows = [Window(0, 0, 100, 0.0, 5.0), Window(1, 0, 100, 0.0, 5.0)]
        with pytest.raises(ContractViolation, match="does not start after"):
            assert_windows(windows, 5.0)

    def test_window_contract_fails_on_bad_index(self):
        with pytest.raises(ContractViolation, match="has index 3"):
            assert_windows([Window(3, 0, 10, 0.0, 1.0)], 1.0)


class TestRepresentationContract:
    """Test representation contract."""

    @pytest.fixture
    def rep(self, internal_config):
        recording = make_recording([(0, 480, 60), (480, 960, 64)])
        return RepresentationBuilder(internal_config).build(recording)

    def test_built_representation_passes(self, rep):
        assert_representation(rep)

    def test_unnormalized_histogram_fails(self, rep):
        broken = dataclasses.replace(rep, basic_pitch_histogram=np.ones(128))
        with pytest.raises(ContractViolation, match="basic_pitch_histogram"):
            assert_representation(broken)

    def test_tick_map_length_mismatch_fails(self, rep):
        broken = dataclasses.replace(rep, volumes=np.ones((3, 16)))
        with pytest.raises(ContractViolation, match="'volumes' has 3 ticks"):
            assert_representation(broken)


class TestFailurePolicy:
    """Test error hierarchy and failure scopes."""

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)
        assert issubclass(ConfigurationError, SymfeatError)

    @pytest.mark.parametrize("error, policy", [
        (ConfigurationError("x"), FailurePolicy.FAIL_FAST),
        (ResourceExhaustionError("x"), FailurePolicy.FAIL_FAST),
        (ContractViolation("x"), FailurePolicy.FAIL_FAST),
        (InputParseError("a.mid", "x"), FailurePolicy.SKIP_RECORDING),
        (ComputationError("Range", 2, "x"), FailurePolicy.MARK_UNAVAILABLE),
    ])
    def test_policy_for_error(self, error, policy):
        assert FailurePolicy.for_error(error) is policy

    def test_input_parse_error_keeps_path(self):
        e = InputParseError("corpus/a.mid", "truncated")
        assert e.path == "corpus/a.mid"
        assert "truncated" in str(e)

    def test_computation_error_names_descriptor_and_window(self):
        e = ComputationError("Range", 3, "boom")
        assert e.descriptor == "Range"
        assert e.window == 3
        assert "'Range' failed on window 3" in str(e)


def test_every_stage_documents_its_invariants():
    """Each stage that runs per recording lists what it guarantees."""
    for stage, requirement in STAGE_REQUIREMENTS.items():
        assert requirement in ("REQUIRED", "OPTIONAL")
        assert PIPELINE_INVARIANTS[stage], stage
