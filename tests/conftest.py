"""Pytest configuration.

Sources live in the `src.*` namespace at the repository root. This conftest makes `import src...`
work when running `pytest` from a checkout without installing the project.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))
