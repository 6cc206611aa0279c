"""ParamConfig: Expert defaults for symfeat extraction runs.

ALL run parameters must have defaults here. No runtime code defines
fallback values; this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator, model_validator
from symfeat.schemas.base import SymfeatBaseModel


# =============================================================================
# Nested Configuration Models
# =============================================================================

class InputsConfig(SymfeatBaseModel):
    """Recordings to process (files and/or directories)."""
    paths: list[str] = Field(default_factory=list)


class WindowingConfig(SymfeatBaseModel):
    """Time windowing of each recording."""
    mode: Literal["whole", "windowed"] = "whole"
    window_size: float = Field(10.0, ge=0, description="Window duration in seconds")
    window_overlap: float = Field(0.0, ge=0, lt=1.0, description="Fraction of a window shared with the next")

    @field_validator("window_size", "window_overlap", mode="before")
    @classmethod
    def coerce_to_float(cls, v):
        """Allow int or float."""
        return float(v)

    @model_validator(mode="after")
    def windowed_needs_duration(self):
        """A zero-length window is only meaningful for whole-file extraction."""
        if self.mode == "windowed" and self.window_size <= 0:
            raise ValueError("window_size must be > 0 when mode is 'windowed'")
        return self


class OutputConfig(SymfeatBaseModel):
    """What to save and where."""
    save_windowed: bool = False
    save_overall: bool = True
    output_dir: Optional[str] = None
    db_filename: str = "symfeat_features.db"
    parquet_filename: str = "symfeat_features.parquet"
    compression: Literal["snappy", "gzip", "lz4", "none"] = "snappy"

    @model_validator(mode="after")
    def at_least_one_scope(self):
        if not (self.save_windowed or self.save_overall):
            raise ValueError("at least one of save_windowed / save_overall must be true")
        return self


class FeaturesConfig(SymfeatBaseModel):
    """Descriptor selection. None selects the catalog's default set."""
    selected: Optional[list[str]] = None

    @field_validator("selected")
    @classmethod
    def non_empty_selection(cls, v):
        if v is not None and not v:
            raise ValueError("at least one descriptor must be selected")
        return v


class RepresentationConfig(SymfeatBaseModel):
    """Constants of the intermediate representation."""
    min_bpm: int = Field(40, ge=2, description="Slowest pulse in the beat histogram")
    max_bpm: int = Field(200, ge=3, description="Fastest pulse in the beat histogram")
    reference_bpm: float = Field(120.0, gt=0, description="Tempo used for tempo-standardized histograms")
    motion_lookahead_beats: float = Field(0.25, ge=0, description="Lookahead when sounding-pitch counts differ")
    percussion_channel: int = Field(9, ge=0, le=15, description="Zero-based percussion channel")

    @model_validator(mode="after")
    def bpm_band_ordered(self):
        if self.min_bpm >= self.max_bpm:
            raise ValueError("min_bpm must be smaller than max_bpm")
        return self


class ExtractionConfig(SymfeatBaseModel):
    """Batch driver settings."""
    input_kind: Literal["any", "midi", "musicxml"] = "any"
    num_workers: int = Field(1, ge=1, le=64)


class LoggingConfig(SymfeatBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_filename: str = "symfeat_extraction.log"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(SymfeatBaseModel):
    """Complete expert configuration with all defaults.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    inputs: InputsConfig = Field(default_factory=InputsConfig)
    windowing: WindowingConfig = Field(default_factory=WindowingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    features: FeaturesConfig = Field(default_factory=FeaturesConfig)
    representation: RepresentationConfig = Field(default_factory=RepresentationConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
