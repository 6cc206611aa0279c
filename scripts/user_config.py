"""symfeat User Configuration.

This is the user-facing configuration file. Modify settings here to
customize extraction. Advanced settings are in symfeat.schemas.param.

Usage:
    python scripts/run_extraction.py scripts/user_config.py
    python scripts/run_extraction.py scripts/user_config.py --window-size 5
"""

CONFIG = {
    # ========================================================================
    # INPUTS & OUTPUT
    # ========================================================================
    "INPUT_FILES": ["corpus/"],   # Files and/or directories (searched recursively)
    "INPUT_KIND": "any",          # "any", "midi" or "musicxml"
    "OUTPUT_DIR": "./output",     # features/ and logs/ are created here

    # ========================================================================
    # WINDOWING
    # ========================================================================
    "SAVE_WINDOWED": False,       # True: per-window values (enables windowing)
    "SAVE_OVERALL": True,         # Whole-recording values (or window summaries)
    "WINDOW_SIZE": 10.0,          # Seconds
    "WINDOW_OVERLAP": 0.0,        # Fraction in [0, 1)

    # ========================================================================
    # DESCRIPTORS
    # ========================================================================
    # None saves the default set. Otherwise list descriptor names, e.g.
    # ["Mean Pitch", "Pitch Class Histogram", "Note Density"]
    "FEATURES": None,

    # ========================================================================
    # RUNTIME
    # ========================================================================
    "NUM_WORKERS": 2,
    "LOG_LEVEL": "INFO",
}
