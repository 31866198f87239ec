from __future__ import annotations

import random
import sys
from pathlib import Path

import pytest

# Ensure "backend" is on sys.path for imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = PROJECT_ROOT / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
