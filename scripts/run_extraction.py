#!/usr/bin/env python3
"""symfeat descriptor extraction runner.

Usage:
    python scripts/run_extraction.py scripts/user_config.py
    python scripts/run_extraction.py scripts/user_config.py --window-size 5 --window-overlap 0.5
    python scripts/run_extraction.py --input corpus/ --features "Mean Pitch" "Note Density"

Note: User config in scripts/user_config.py, expert defaults in symfeat.schemas.param
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from symfeat.cli.run_extraction import main


if __name__ == "__main__":
    sys.exit(main())
