"""CLIConfig: Command-line operational overrides.

Minimal configuration for parameters that commonly change between runs:
inputs, output directory, window settings, descriptor selection, verbosity.
"""

from typing import Literal, Optional
from pydantic import model_validator
from symfeat.schemas.base import SymfeatBaseModel


class CLIConfig(SymfeatBaseModel):
    """Command-line configuration overrides.

    Highest priority in config resolution.

    Notes
    -----
    Setting ``window_size`` or ``windowed`` switches the windowing mode to
    "windowed" (schema responsibility, not runtime).

    Usage
    -----
        cli_cfg = CLIConfig(
            inputs=["corpus/"],
            output_dir="/scratch/features",
            window_size=5.0,
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    inputs: Optional[list[str]] = None
    output_dir: Optional[str] = None
    window_size: Optional[float] = None
    window_overlap: Optional[float] = None
    windowed: Optional[bool] = None
    save_overall: Optional[bool] = None
    features: Optional[list[str]] = None
    num_workers: Optional[int] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    @model_validator(mode="after")
    def infer_windowed_from_size(self):
        """A window size on the command line means the user wants windows."""
        if self.windowed is None and self.window_size is not None:
            self.windowed = True
        return self

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.inputs:
            overrides["inputs"] = {"paths": list(self.inputs)}

        windowing = {}
        if self.windowed:
            windowing["mode"] = "windowed"
        if self.window_size is not None:
            windowing["window_size"] = self.window_size
        if self.window_overlap is not None:
            windowing["window_overlap"] = self.window_overlap
        if windowing:
            overrides["windowing"] = windowing

        output = {}
        if self.output_dir is not None:
            output["output_dir"] = str(self.output_dir)
        if self.windowed is not None:
            output["save_windowed"] = self.windowed
        if self.save_overall is not None:
            output["save_overall"] = self.save_overall
        if output:
            overrides["output"] = output

        if self.features:
            overrides["features"] = {"selected": list(self.features)}

        if self.num_workers is not None:
            overrides["extraction"] = {"num_workers": self.num_workers}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
