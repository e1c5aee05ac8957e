import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make the sources importable without installing the package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def random_buffer():
    from tonelab.core.pixel_buffer import PixelBuffer

    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(16, 24, 4), dtype=np.uint8)
    return PixelBuffer(pixels)
