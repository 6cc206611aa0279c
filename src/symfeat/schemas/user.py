"""UserConfig: Forgiving, minimal user-facing configuration.

Accepts flat upper-case aliases (WINDOW_SIZE -> windowing.window_size,
FEATURES -> features.selected, ...) as well as nested overrides for
advanced users. Users only specify what they want to change from the
expert defaults.
"""

from typing import Literal, Optional, Union
from pydantic import Field, field_validator, model_validator
from symfeat.schemas.base import SymfeatBaseModel


class UserWindowingConfig(SymfeatBaseModel):
    """User-facing windowing config."""
    mode: Optional[str] = None
    window_size: Optional[float] = None
    window_overlap: Optional[float] = None

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, v):
        """Normalize mode names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v


class UserOutputConfig(SymfeatBaseModel):
    """User-facing output config."""
    save_windowed: Optional[bool] = None
    save_overall: Optional[bool] = None
    output_dir: Optional[str] = None
    db_filename: Optional[str] = None
    parquet_filename: Optional[str] = None
    compression: Optional[str] = None


class UserRepresentationConfig(SymfeatBaseModel):
    """User-facing representation constants."""
    min_bpm: Optional[int] = None
    max_bpm: Optional[int] = None
    reference_bpm: Optional[float] = None
    motion_lookahead_beats: Optional[float] = None
    percussion_channel: Optional[int] = None


class UserExtractionConfig(SymfeatBaseModel):
    """User-facing batch driver config."""
    input_kind: Optional[str] = None
    num_workers: Optional[int] = None


class UserConfig(SymfeatBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Converted to internal
    overrides during resolution.

    Usage
    -----
        user_cfg = UserConfig(
            INPUT_FILES=["corpus/bach"],
            OUTPUT_DIR="/data/features",
            WINDOW_SIZE=10,
            WINDOW_OVERLAP=0.1,
            SAVE_WINDOWED=True,
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Inputs / outputs
    input_files: Optional[list[str]] = Field(None, alias="INPUT_FILES")
    output_dir: Optional[str] = Field(None, alias="OUTPUT_DIR")
    input_kind: Optional[Literal["any", "midi", "musicxml"]] = Field(None, alias="INPUT_KIND")

    # Windowing (flat aliases)
    window_size: Optional[float] = Field(None, alias="WINDOW_SIZE")
    window_overlap: Optional[float] = Field(None, alias="WINDOW_OVERLAP")

    # Output scopes (flat aliases)
    save_windowed: Optional[bool] = Field(None, alias="SAVE_WINDOWED")
    save_overall: Optional[bool] = Field(None, alias="SAVE_OVERALL")

    # Descriptor selection
    features: Optional[list[str]] = Field(None, alias="FEATURES")

    num_workers: Optional[int] = Field(None, alias="NUM_WORKERS")
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(None, alias="LOG_LEVEL")

    # Nested overrides (advanced users)
    windowing: Optional[UserWindowingConfig] = None
    output: Optional[UserOutputConfig] = None
    representation: Optional[UserRepresentationConfig] = None
    extraction: Optional[UserExtractionConfig] = None

    model_config = SymfeatBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("input_files", "features", mode="before")
    @classmethod
    def accept_single_string(cls, v: Union[str, list, None]):
        """Accept a single path or name where a list is expected."""
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("window_size", "window_overlap", mode="before")
    @classmethod
    def coerce_numeric_fields(cls, v):
        """Accept int or float for numeric fields."""
        if v is not None:
            return float(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper().strip()
        return v

    @model_validator(mode="after")
    def infer_windowed_mode(self):
        """Asking for per-window output implies windowed extraction."""
        if self.save_windowed:
            if self.windowing is None:
                self.windowing = UserWindowingConfig(mode="windowed")
            elif self.windowing.mode is None:
                self.windowing.mode = "windowed"
        return self

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.input_files is not None:
            overrides["inputs"] = {"paths": [str(p) for p in self.input_files]}

        # Windowing section
        windowing = {}
        if self.window_size is not None:
            windowing["window_size"] = self.window_size
        if self.window_overlap is not None:
            windowing["window_overlap"] = self.window_overlap
        if self.windowing is not None:
            windowing.update(self.windowing.model_dump(exclude_none=True))
        if windowing:
            overrides["windowing"] = windowing

        # Output section
        output = {}
        if self.output_dir is not None:
            output["output_dir"] = str(self.output_dir)
        if self.save_windowed is not None:
            output["save_windowed"] = self.save_windowed
        if self.save_overall is not None:
            output["save_overall"] = self.save_overall
        if self.output is not None:
            output.update(self.output.model_dump(exclude_none=True))
        if output:
            overrides["output"] = output

        if self.features is not None:
            overrides["features"] = {"selected": list(self.features)}

        if self.representation is not None:
            representation = self.representation.model_dump(exclude_none=True)
            if representation:
                overrides["representation"] = representation

        # Extraction section
        extraction = {}
        if self.input_kind is not None:
            extraction["input_kind"] = self.input_kind
        if self.num_workers is not None:
            extraction["num_workers"] = self.num_workers
        if self.extraction is not None:
            extraction.update(self.extraction.model_dump(exclude_none=True))
        if extraction:
            overrides["extraction"] = extraction

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
