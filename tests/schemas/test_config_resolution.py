"""Test config resolution and validation with Pydantic."""

import pytest

pytestmark = pytest.mark.unit

from symfeat.contracts import ConfigurationError
from symfeat.schemas import CLIConfig, InternalConfig, ParamConfig, UserConfig
from symfeat.schemas.resolve import deep_merge, resolve_config


class TestConfigResolution:
    """Test resolve_config() precedence and merging."""

    def test_resolve_config_all_defaults(self):
        """Resolving with no user/CLI overrides uses all ParamConfig defaults."""
        config = resolve_config(ParamConfig(), None, None)

        assert isinstance(config, InternalConfig)
        assert config.windowing.mode == "whole"
        assert config.output.save_overall is True
        assert config.output.save_windowed is False
        assert config.features.selected is None
        assert config.representation.min_bpm == 40
        assert config.representation.max_bpm == 200
        assert config.representation.reference_bpm == 120.0

    def test_user_config_overrides_param_config(self):
        user = UserConfig(WINDOW_OVERLAP=0.25)
        config = resolve_config(ParamConfig(), user, None)

        assert config.windowing.window_overlap == 0.25

    def test_save_windowed_implies_windowed_mode(self):
        user = UserConfig(SAVE_WINDOWED=True, WINDOW_SIZE=5)
        config = resolve_config(ParamConfig(), user, None)

        assert config.windowing.mode == "windowed"
        assert config.windowing.window_size == 5.0
        assert config.output.save_windowed is True

    def test_precedence_param_user_cli(self):
        """Full precedence: CLI > User > Param."""
        user = UserConfig(WINDOW_SIZE=5, SAVE_WINDOWED=True, NUM_WORKERS=2)
        cli = CLIConfig(window_size=8.0)
        config = resolve_config(ParamConfig(), user, cli)

        assert config.windowing.window_size == 8.0
        assert config.extraction.num_workers == 2

    def test_cli_overrides_do_not_mutate_user(self):
        user = UserConfig.model_validate({"OUTPUT_DIR": "/tmp/a"})
        cli = CLIConfig.model_validate({"output_dir": "/tmp/b"})

        internal = resolve_config(ParamConfig(), user, cli)

        assert internal.output.output_dir == "/tmp/b"
        assert user.output_dir == "/tmp/a"

    def test_internal_config_is_frozen(self):
        config = resolve_config(ParamConfig(), None, None)
        with pytest.raises(Exception):
            config.windowing = None

    def test_dict_layers_are_accepted(self):
        config = resolve_config({}, {"FEATURES": "Mean Pitch"}, {"num_workers": 3})

        assert config.features.selected == ["Mean Pitch"]
        assert config.extraction.num_workers == 3


class TestConfigValidation:
    """Cross-field validation surfaces as ConfigurationError."""

    def test_overlap_of_one_rejected(self):
        with pytest.raises(ConfigurationError):
            resolve_config(ParamConfig(), UserConfig(WINDOW_OVERLAP=1.0), None)

    def test_negative_window_size_rejected(self):
        with pytest.raises(ConfigurationError):
            resolve_config(ParamConfig(), UserConfig(WINDOW_SIZE=-1), None)

    def test_zero_window_in_windowed_mode_rejected(self):
        with pytest.raises(ConfigurationError, match="window_size must be > 0"):
            resolve_config(ParamConfig(), UserConfig(SAVE_WINDOWED=True, WINDOW_SIZE=0), None)

    def test_zero_window_allowed_for_whole_recording(self):
        config = resolve_config(ParamConfig(), UserConfig(WINDOW_SIZE=0), None)
        assert config.windowing.mode == "whole"

    def test_no_save_scope_rejected(self):
        with pytest.raises(ConfigurationError, match="at least one"):
            resolve_config(ParamConfig(), UserConfig(SAVE_OVERALL=False), None)

    def test_save_windowed_requires_windowed_mode(self):
        user = UserConfig(SAVE_WINDOWED=True, windowing={"mode": "whole"})
        with pytest.raises(ConfigurationError, match="save_windowed"):
            resolve_config(ParamConfig(), user, None)

    def test_bpm_band_must_be_ordered(self):
        user = UserConfig(representation={"min_bpm": 120, "max_bpm": 100})
        with pytest.raises(ConfigurationError, match="min_bpm"):
            resolve_config(ParamConfig(), user, None)

    @pytest.mark.parametrize("override", [
        {"min_bpm": 1},
        {"min_bpm": 0},
        {"reference_bpm": 0},
        {"percussion_channel": 16},
    ])
    def test_representation_bounds_hold_for_overrides(self, override):
        with pytest.raises(ConfigurationError):
            resolve_config(ParamConfig(), {"representation": override}, None)

    def test_max_queue_size_is_not_a_setting(self):
        config = resolve_config(ParamConfig(), None, None)
        assert not hasattr(config.extraction, "max_queue_size")

    def test_empty_feature_list_rejected(self):
        with pytest.raises(ConfigurationError):
            resolve_config(ParamConfig(), UserConfig(FEATURES=[]), None)


class TestUserConfigNormalization:
    """UserConfig accepts forgiving input."""

    def test_uppercase_keys_are_handled(self):
        raw = {
            "INPUT_FILES": "corpus/",
            "WINDOW_SIZE": 4,
            "LOG_LEVEL": "debug",
        }
        user = UserConfig.model_validate(raw)

        assert user.input_files == ["corpus/"]
        assert isinstance(user.window_size, float) and user.window_size == 4.0
        assert user.log_level == "DEBUG"

    def test_unknown_keys_are_ignored(self):
        user = UserConfig.model_validate({"SAVE_OVERALL": True, "UNKNOWN_LEGACY": 12345})

        assert user.save_overall is True
        assert not hasattr(user, "UNKNOWN_LEGACY")


def test_deep_merge_nested():
    base = {"a": 1, "b": {"c": 2, "d": 3}}
    override = {"b": {"d": 4, "e": 5}, "f": 6}
    assert deep_merge(base, override) == {"a": 1, "b": {"c": 2, "d": 4, "e": 5}, "f": 6}
    assert base == {"a": 1, "b": {"c": 2, "d": 3}}
