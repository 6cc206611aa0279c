"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully
validated, normalized and frozen. Fallback defaults and validation logic
do not belong in runtime code; everything is explicit here.
"""

from typing import Literal, Optional
from pydantic import Field, ConfigDict, model_validator
from symfeat.schemas.base import SymfeatBaseModel


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalInputsConfig(SymfeatBaseModel):
    """Runtime inputs."""
    paths: list[str]


class InternalWindowingConfig(SymfeatBaseModel):
    """Runtime windowing configuration."""
    mode: Literal["whole", "windowed"]
    window_size: float = Field(ge=0)
    window_overlap: float = Field(ge=0, lt=1.0)

    @model_validator(mode="after")
    def windowed_needs_duration(self):
        if self.mode == "windowed" and self.window_size <= 0:
            raise ValueError("window_size must be > 0 when mode is 'windowed'")
        return self


class InternalOutputConfig(SymfeatBaseModel):
    """Runtime output configuration."""
    save_windowed: bool
    save_overall: bool
    output_dir: Optional[str]
    db_filename: str
    parquet_filename: str
    compression: Literal["snappy", "gzip", "lz4", "none"]

    @model_validator(mode="after")
    def at_least_one_scope(self):
        if not (self.save_windowed or self.save_overall):
            raise ValueError("at least one of save_windowed / save_overall must be true")
        return self


class InternalFeaturesConfig(SymfeatBaseModel):
    """Runtime descriptor selection (None means catalog defaults)."""
    selected: Optional[list[str]]

    @model_validator(mode="after")
    def non_empty_selection(self):
        if self.selected is not None and not self.selected:
            raise ValueError("at least one descriptor must be selected")
        return self


class InternalRepresentationConfig(SymfeatBaseModel):
    """Runtime representation constants."""
    min_bpm: int = Field(ge=2)
    max_bpm: int = Field(ge=3)
    reference_bpm: float = Field(gt=0)
    motion_lookahead_beats: float = Field(ge=0)
    percussion_channel: int = Field(ge=0, le=15)

    @model_validator(mode="after")
    def bpm_band_ordered(self):
        if self.min_bpm >= self.max_bpm:
            raise ValueError("min_bpm must be smaller than max_bpm")
        return self


class InternalExtractionConfig(SymfeatBaseModel):
    """Runtime batch driver configuration."""
    input_kind: Literal["any", "midi", "musicxml"]
    num_workers: int = Field(ge=1, le=64)


class InternalLoggingConfig(SymfeatBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    log_filename: str


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(SymfeatBaseModel):
    """Authoritative runtime configuration.

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.window_size = config.windowing.window_size  # NOT .get()

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation in runtime code
    """

    inputs: InternalInputsConfig
    windowing: InternalWindowingConfig
    output: InternalOutputConfig
    features: InternalFeaturesConfig
    representation: InternalRepresentationConfig
    extraction: InternalExtractionConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )

    @model_validator(mode="after")
    def windowed_output_needs_windows(self):
        """Per-window output only makes sense when the recording is windowed."""
        if self.output.save_windowed and self.windowing.mode != "windowed":
            raise ValueError("save_windowed requires windowing.mode == 'windowed'")
        return self
