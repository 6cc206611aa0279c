"""Formal extraction invariants.

This file documents what each stage MUST produce. Use it as a reviewer
anchor and system reference.
"""

PIPELINE_INVARIANTS = {
    "catalog": [
        "Descriptor names are unique",
        "Every prerequisite names another catalog entry",
        "Offsets are <= 0 and there is one per prerequisite",
    ],

    "plan": [
        "Every entry comes strictly after all its prerequisites",
        "Ties keep catalog order",
        "save is true exactly for requested descriptors",
        "history_depth = max(|offset|), 0 without prerequisites",
    ],

    "windows": [
        "Consecutive starts differ by duration * (1 - overlap) seconds",
        "Start times strictly increase",
        "No window ends after the recording",
        "Whole-recording mode yields exactly one window [0, total]",
    ],

    "representation": [
        "Histograms sum to 1, or are all zero",
        "Motion fractions sum to 1, or are all zero",
        "Tick-indexed maps have tick_length + 1 rows",
        "All arrays are read-only",
    ],

    "extraction": [
        "One cell per (window, plan entry)",
        "A cell is a read-only array of the declared length, or UNAVAILABLE",
        "Windows below an entry's history_depth are UNAVAILABLE",
        "Each failed cell adds exactly one log entry",
    ],

    "aggregation": [
        "Single window: overall value equals the window value, same name",
        "Several windows: mean and population std over available windows",
        "Only saved entries are summarized",
    ],
}

# Which stages run for every recording
STAGE_REQUIREMENTS = {
    "plan": "REQUIRED",            # Once per run
    "windows": "REQUIRED",
    "representation": "REQUIRED",  # Once per window
    "extraction": "REQUIRED",
    "aggregation": "OPTIONAL",     # Only when overall values are saved
}
