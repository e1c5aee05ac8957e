"""Application-wide constants for the adjustment engine."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

LUT_SIZE = 256
"""Number of entries in every per-channel response table."""

CURVE_HIT_THRESHOLD = 0.05
"""Maximum per-axis distance (normalised) for a click to select an existing point."""

DEFAULT_CURVE_POINTS: tuple[tuple[float, float], ...] = (
    (0.0, 0.0),
    (0.25, 0.25),
    (0.5, 0.5),
    (0.75, 0.75),
    (1.0, 1.0),
)
"""Linear five point curve assigned to every channel on import and reset."""

# Declared ranges of the scalar adjustments.  The order matches the pipeline so
# the same table can drive UI sliders, clamping and serialisation.
ADJUSTMENT_RANGES: Mapping[str, tuple[float, float]] = {
    "exposure": (-4.0, 4.0),
    "temperature": (-100.0, 100.0),
    "tint": (-100.0, 100.0),
    "clarity": (-100.0, 100.0),
    "highlights": (-100.0, 100.0),
    "shadows": (-100.0, 100.0),
    "whites": (-100.0, 100.0),
    "blacks": (-100.0, 100.0),
    "contrast": (-100.0, 100.0),
    "saturation": (-100.0, 100.0),
    "vibrance": (-100.0, 100.0),
    "vignette": (0.0, 100.0),
    "grain": (0.0, 100.0),
}

SCALAR_KEYS = tuple(ADJUSTMENT_RANGES)

PRESETS_ENV_VAR = "TONELAB_PRESETS"
LOG_LEVEL_ENV_VAR = "TONELAB_LOG_LEVEL"
PRESET_FILE_NAME = "presets.json"
WORK_DIR_NAME = ".tonelab"


def default_preset_path() -> Path:
    """Return the JSON file that stores user presets.

    ``TONELAB_PRESETS`` wins when set so tests and portable installs can point
    the store somewhere else.
    """

    override = os.environ.get(PRESETS_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / WORK_DIR_NAME / PRESET_FILE_NAME
