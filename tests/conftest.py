# tests/conftest.py

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src/ is on sys.path for test imports like `import pathing`, `import world`.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


@pytest.fixture(autouse=True)
def _isolated_pathing_config(monkeypatch: pytest.MonkeyPatch):
    """Keep env overrides and the cached default config from leaking between tests."""
    from pathing import config

    monkeypatch.delenv("PATHING_CONFIG", raising=False)
    monkeypatch.delenv("PATHING_DEBUG_THREADS", raising=False)
    config._reset_config_for_tests()
    yield
    config._reset_config_for_tests()
