import queue

import pytest

from symfeat.catalog import resolve_selection
from symfeat.extraction import ExtractionEngine, build_plan
from symfeat.pipeline import TableSink
from tests.helpers.fake_recording import write_midi_file


@pytest.fixture
def pipeline_config(make_config, temp_dir):
    """InternalConfig writing under a temporary output directory."""
    return make_config(OUTPUT_DIR=str(temp_dir / "out"),
                       FEATURES=["Mean Pitch", "Initial Tempo"])


@pytest.fixture
def make_engine(default_catalog):
    """Build an engine for a config, using the config's descriptor selection."""
    def _make(config):
        requested = resolve_selection(default_catalog, config.features.selected,
                                      config.extraction.input_kind)
        return ExtractionEngine(build_plan(default_catalog, requested), config)
    return _make


@pytest.fixture
def memory_sink():
    """TableSink without database or Parquet output."""
    return TableSink()


@pytest.fixture
def midi_files(temp_dir):
    """Two short MIDI files: a C-E dyad line and a D scale fragment."""
    midi_dir = temp_dir / "midi"
    midi_dir.mkdir()
    first = write_midi_file(midi_dir / "first.mid", [(0, 960, 60), (960, 1920, 64)])
    second = write_midi_file(midi_dir / "second.mid", [(0, 480, 62), (480, 960, 64)])
    return [first, second]


# made for processor tests
@pytest.fixture
def path_queue():
    return queue.Queue()

