import threading

import pytest

from symfeat.contracts import ContractViolation, ResourceExhaustionError
from symfeat.extraction import ExtractionLog
from symfeat.pipeline.processor import RecordingProcessor

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


class RaisingEngine:
    """Engine stand-in whose extract raises ``error``."""

    def __init__(self, plan, error):
        self.plan = plan
        self.error = error

    def extract(self, recording, log):
        raise self.error


def _processor(path_queue, engine, config, sink, **kwargs):
    return RecordingProcessor(path_queue, engine, config, sink, ExtractionLog(), **kwargs)


def test_process_file_emits_overall_values(path_queue, pipeline_config, make_engine,
                                           memory_sink, midi_files):
    proc = _processor(path_queue, make_engine(pipeline_config), pipeline_config, memory_sink)

    ok = proc.process_file(midi_files[0])

    df = memory_sink.to_dataframe()
    assert ok is True
    assert proc.contributing == 1
    assert set(df.scope) == {"overall"}
    assert df.set_index("descriptor").value["Mean Pitch"] == pytest.approx(62.0)
    assert df.set_index("descriptor").value["Initial Tempo"] == pytest.approx(120.0)


def test_windowed_emission_skips_whole_recording_descriptors(path_queue, make_config, make_engine,
                                                             memory_sink, midi_files):
    config = make_config(WINDOW_SIZE=1, SAVE_WINDOWED=True,
                         FEATURES=["Mean Pitch", "Initial Tempo"])
    proc = _processor(path_queue, make_engine(config), config, memory_sink)

    assert proc.process_file(midi_files[0]) is True

    df = memory_sink.to_dataframe()
    windows = df[df.scope == "window"]
    overall = df[df.scope == "overall"].set_index("descriptor").value
    assert windows.descriptor.tolist() == ["Mean Pitch", "Mean Pitch"]
    assert windows.value.tolist() == [60.0, 64.0]
    assert overall["Mean Pitch Overall Average"] == pytest.approx(62.0)
    assert overall["Mean Pitch Overall Standard Deviation"] == pytest.approx(2.0)
    assert "Initial Tempo Overall Average" in overall.index


def test_no_overall_output(path_queue, make_config, make_engine, memory_sink, midi_files):
    config = make_config(WINDOW_SIZE=1, SAVE_WINDOWED=True, SAVE_OVERALL=False,
                         FEATURES=["Mean Pitch"])
    proc = _processor(path_queue, make_engine(config), config, memory_sink)

    proc.process_file(midi_files[0])

    assert set(memory_sink.to_dataframe().scope) == {"window"}


def test_process_missing_file(path_queue, pipeline_config, make_engine, memory_sink):
    proc = _processor(path_queue, make_engine(pipeline_config), pipeline_config, memory_sink)

    ok = proc.process_file("/does/not/exist.mid")

    assert ok is False
    assert proc.failed == 1
    assert len(proc.log) == 1
    assert "file not found" in proc.log.entries[0].message
    assert memory_sink.to_dataframe().empty


def test_resource_exhaustion_sets_abort(path_queue, pipeline_config, make_engine,
                                        memory_sink, midi_files):
    engine = RaisingEngine(make_engine(pipeline_config).plan,
                           ResourceExhaustionError("out of memory"))
    abort = threading.Event()
    proc = _processor(path_queue, engine, pipeline_config, memory_sink, abort_event=abort)

    assert proc.process_file(midi_files[0]) is False
    assert abort.is_set()
    assert proc.stopped()
    assert isinstance(proc.fatal_error, ResourceExhaustionError)


def test_contract_violation_stops_processor(path_queue, pipeline_config, make_engine,
                                            memory_sink, midi_files):
    engine = RaisingEngine(make_engine(pipeline_config).plan, ContractViolation("bug"))
    abort = threading.Event()
    proc = _processor(path_queue, engine, pipeline_config, memory_sink, abort_event=abort)

    assert proc.process_file(midi_files[0]) is False
    assert proc.stopped()
    assert not abort.is_set()


def test_unexpected_error_is_logged_and_skipped(path_queue, pipeline_config, make_engine,
                                                memory_sink, midi_files):
    engine = RaisingEngine(make_engine(pipeline_config).plan, KeyError("strange"))
    proc = _processor(path_queue, engine, pipeline_config, memory_sink)

    assert proc.process_file(midi_files[0]) is False
    assert not proc.stopped()
    assert "KeyError" in proc.log.entries[0].message


def test_run_loop_drains_queue(path_queue, pipeline_config, make_engine, memory_sink, midi_files):
    proc = _processor(path_queue, make_engine(pipeline_config), pipeline_config, memory_sink)
    for path in midi_files:
        path_queue.put(path)

    proc.start()
    path_queue.join()
    proc.stop()
    proc.join(timeout=5)

    assert not proc.is_alive()
    assert proc.attempted == 2
    assert set(memory_sink.to_dataframe().recording) == {str(p) for p in midi_files}
