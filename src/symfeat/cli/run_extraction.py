"""Descriptor extraction runner.

This module contains the actual runner, separated from argument parsing
details. ``scripts/run_extraction.py`` and the ``symfeat-extract`` entry
point are thin wrappers around ``main``.
"""

import argparse
import importlib.util
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from symfeat.contracts import ConfigurationError
from symfeat.pipeline.orchestrator import BatchOrchestrator, BatchSummary
from symfeat.schemas import CLIConfig, ParamConfig, UserConfig, resolve_config

__all__ = ['load_user_config_dict', 'run_extraction', 'main']

logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing a CONFIG dict.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def run_extraction(
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False,
) -> BatchSummary:
    """Resolve configuration and run a batch extraction.

    1. Loads and resolves configuration (Param < User < CLI)
    2. Builds the evaluation plan (configuration errors surface here)
    3. Runs the batch orchestrator until every recording is processed

    Parameters
    ----------
    user_config_path : str, optional
        Python file with a CONFIG dict.
    cli_args : dict, optional
        CLIConfig fields; None values are ignored.
    verbose : bool, optional
        DEBUG logging and print the resolved configuration.

    Raises
    ------
    ConfigurationError
        If configuration validation or planning fails.

    Examples
    --------
    ::

        summary = run_extraction("scripts/user_config.py",
                                 cli_args={"window_size": 5.0})
    """
    param_cfg = ParamConfig()
    user_cfg = UserConfig()
    if user_config_path:
        user_cfg = UserConfig.model_validate(load_user_config_dict(user_config_path))

    cli_args = dict(cli_args or {})
    if verbose and not cli_args.get("log_level"):
        cli_args["log_level"] = "DEBUG"
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    config = resolve_config(param_cfg, user_cfg, cli_cfg)
    if not config.inputs.paths:
        raise ConfigurationError("No input files given (INPUT_FILES or --input)")

    print(f"\n{'='*60}")
    print("symfeat descriptor extraction")
    print('='*60)
    print(f"Config:  {user_config_path or '(defaults)'}")
    print(f"Inputs:  {', '.join(config.inputs.paths)}")
    print(f"Mode:    {config.windowing.mode}")
    if config.windowing.mode == "windowed":
        print(f"Windows: {config.windowing.window_size}s, overlap {config.windowing.window_overlap}")
    print(f"Output:  {config.output.output_dir or './output'}")
    print('='*60)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(), indent=2))
        print('='*60)

    orchestrator = BatchOrchestrator(config)
    return orchestrator.run()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Extract descriptors from MIDI and MusicXML files")
    parser.add_argument("config", nargs="?", help="Path to user config file")
    parser.add_argument("--input", action="append", dest="inputs", help="Input file or directory (repeatable)")
    parser.add_argument("--output-dir", help="Output directory")
    parser.add_argument("--window-size", type=float, help="Window length in seconds (enables windowing)")
    parser.add_argument("--window-overlap", type=float, help="Window overlap fraction in [0, 1)")
    parser.add_argument("--windowed", action="store_true", default=None, help="Save per-window values")
    parser.add_argument("--no-overall", action="store_false", dest="save_overall", default=None,
                        help="Do not save whole-recording values")
    parser.add_argument("--features", nargs="+", help="Descriptor names to save")
    parser.add_argument("--workers", type=int, dest="num_workers", help="Number of worker threads")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    cli_args = {
        "inputs": args.inputs,
        "output_dir": args.output_dir,
        "window_size": args.window_size,
        "window_overlap": args.window_overlap,
        "windowed": args.windowed,
        "save_overall": args.save_overall,
        "features": args.features,
        "num_workers": args.num_workers,
    }

    try:
        summary = run_extraction(args.config, cli_args, verbose=args.verbose)
    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    print(f"Recordings: {summary.attempted} attempted, {summary.contributing} contributing, "
          f"{summary.failed} failed")
    if summary.aborted:
        return 1
    return 0 if summary.contributing or not summary.attempted else 1


if __name__ == "__main__":
    sys.exit(main())
