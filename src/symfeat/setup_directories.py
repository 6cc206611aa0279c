"""Directory setup for extraction output.

Layout under the base directory:
- features/: SQLite database and Parquet export
- logs/: run log files
"""

from pathlib import Path


def setup_output_directories(base_output_dir=None):
    """Create the output directory structure.

    Parameters
    ----------
    base_output_dir : str or Path, optional
        Base output directory. Defaults to ``./output``.

    Returns
    -------
    dict
        Paths keyed by 'base', 'features', 'logs'.
    """
    if base_output_dir is None:
        base_output_dir = Path.cwd() / "output"
    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {
        "base": base_output_dir,
        "features": base_output_dir / "features",
        "logs": base_output_dir / "logs",
    }
    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)
    return directories
