"""
Tests for dnc_lab.

The `src/` directory is put on sys.path here so the suite runs straight from
a checkout, before `pip install -e .`.
"""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"

if SRC_PATH.exists():
    sys.path.insert(0, str(SRC_PATH))
