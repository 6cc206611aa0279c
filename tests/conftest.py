"""Root-level pytest fixtures for the symfeat test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture. Tests use these fixtures instead of creating raw dict configs.
"""

import logging
import pytest
from pathlib import Path
import tempfile
import shutil

from symfeat.catalog import build_default_catalog
from symfeat.schemas import ParamConfig, UserConfig, resolve_config


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).

    Examples
    --------
    >>> def test_engine_init(internal_config):
    ...     engine = ExtractionEngine(plan, internal_config)
    ...     assert engine.mode == "whole"
    """
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_windows(make_config):
    ...     config = make_config(WINDOW_SIZE=10, SAVE_WINDOWED=True)
    ...     assert config.windowing.mode == "windowed"
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        return resolve_config(param_config, None, None)

    return _make


@pytest.fixture(scope="session")
def default_catalog():
    """The built-in descriptor catalog."""
    return build_default_catalog()


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def restore_root_logging():
    """Undo handler changes made by BatchOrchestrator._setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
