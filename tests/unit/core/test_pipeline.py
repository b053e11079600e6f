"""Unit tests for Pipeline."""

import pytest

from turnengine.core import Phase, Pipeline, StepOutcome, phase
from turnengine.core.default_pipeline import create_default_pipeline
from turnengine.phases import AdvanceClock, Economy, Morale

DEFAULT_ORDER = [
    "advance_clock",
    "lifecycle",
    "social",
    "affection",
    "ransom",
    "morale",
    "intrigue",
    "economy",
]


class _Recorder:
    """Stand-in simulation: records which phases ran."""

    def __init__(self, clock):
        self.clock = clock
        self.ran = []


@pytest.fixture
def recording_phases(clean_registry):
    @phase
    class First:
        def execute(self, sim):
            sim.ran.append(self.name)

    @phase
    class Exploding:
        def execute(self, sim):
            sim.ran.append(self.name)
            raise RuntimeError("kaboom")

    @phase
    class Partial:
        def execute(self, sim):
            sim.ran.append(self.name)
            return [StepOutcome("a", True), StepOutcome("b", False)]

    @phase
    class Last:
        def execute(self, sim):
            sim.ran.append(self.name)

    return First, Exploding, Partial, Last


def test_default_pipeline_order():
    assert create_default_pipeline().phase_names == DEFAULT_ORDER


def test_from_phase_list_preserves_order():
    pipeline = Pipeline.from_phase_list(["economy", "advance_clock", "morale"])
    assert pipeline.phase_names == ["economy", "advance_clock", "morale"]
    assert isinstance(pipeline.phases[0], Economy)


def test_from_phase_list_unknown():
    with pytest.raises(KeyError, match="not found in registry"):
        Pipeline.from_phase_list(["advance_clock", "no_such_phase"])


def test_from_yaml(tmp_path):
    path = tmp_path / "pipeline.yml"
    path.write_text("phases:\n  - advance_clock\n  - economy\n")
    assert Pipeline.from_yaml(path).phase_names == ["advance_clock", "economy"]


def test_from_yaml_requires_phases_key(tmp_path):
    path = tmp_path / "pipeline.yml"
    path.write_text("events:\n  - advance_clock\n")
    with pytest.raises(ValueError, match="'phases' key"):
        Pipeline.from_yaml(path)


class TestExecute:
    def test_failure_does_not_stop_later_phases(self, recording_phases, simple_clock):
        sim = _Recorder(simple_clock)
        pipeline = Pipeline.from_phase_list(["first", "exploding", "partial", "last"])

        report = pipeline.execute(sim, turn_number=7)

        assert sim.ran == ["first", "exploding", "partial", "last"]
        assert report.turn_number == 7
        assert report.phase_names == ["first", "exploding", "partial", "last"]
        assert not report.succeeded

        exploding = report.phase("exploding")
        assert not exploding.succeeded
        assert exploding.error.label == "exploding"
        assert isinstance(exploding.error.cause, RuntimeError)

    def test_step_failures_reported_not_raised(self, recording_phases, simple_clock):
        report = Pipeline.from_phase_list(["partial"]).execute(_Recorder(simple_clock))
        partial = report.phase("partial")
        assert partial.succeeded
        assert [s.label for s in partial.failed_steps] == ["b"]
        assert not report.succeeded

    def test_failure_logged_with_phase_name(
        self, recording_phases, simple_clock, caplog
    ):
        with caplog.at_level("ERROR", logger="turnengine.phases.exploding"):
            Pipeline.from_phase_list(["exploding"]).execute(
                _Recorder(simple_clock), turn_number=2
            )
        assert "Turn 2: phase 'exploding' failed" in caplog.text

    def test_report_stamped_after_clock_advance(self, simple_clock):
        class Sim:
            clock = simple_clock

        report = Pipeline.from_phase_list(["advance_clock"]).execute(Sim())
        assert (report.year, report.month) == (3599, 2)


class TestEditing:
    def test_insert_after(self):
        pipeline = Pipeline.from_phase_list(["advance_clock", "economy"])
        pipeline.insert_after("advance_clock", Morale)
        assert pipeline.phase_names == ["advance_clock", "morale", "economy"]

    def test_insert_after_by_name(self):
        pipeline = Pipeline.from_phase_list(["advance_clock", "economy"])
        pipeline.insert_after("advance_clock", "intrigue")
        assert pipeline.phase_names == ["advance_clock", "intrigue", "economy"]

    def test_insert_after_not_found(self):
        pipeline = Pipeline.from_phase_list(["advance_clock"])
        with pytest.raises(ValueError, match="not found in pipeline"):
            pipeline.insert_after("nonexistent", Morale)

    def test_remove(self):
        pipeline = create_default_pipeline()
        pipeline.remove("ransom")
        assert "ransom" not in pipeline.phase_names
        assert len(pipeline) == len(DEFAULT_ORDER) - 1

    def test_remove_not_found(self):
        with pytest.raises(ValueError, match="not found in pipeline"):
            Pipeline.from_phase_list(["economy"]).remove("ransom")

    def test_replace_keeps_position(self, clean_registry):
        class QuietEconomy(Phase):
            def execute(self, sim):
                return None

        pipeline = Pipeline(phases=[AdvanceClock(), Economy(), Morale()])
        pipeline.replace("economy", QuietEconomy())
        assert pipeline.phase_names == ["advance_clock", "quiet_economy", "morale"]

    def test_repr(self):
        assert repr(Pipeline.from_phase_list(["economy"])) == "Pipeline(n_phases=1)"
