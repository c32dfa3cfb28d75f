import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep a developer's real ~/hourglass.yaml and HOURGLASS_* variables out of tests."""

    from hourglass.config import get_settings

    for name in list(os.environ):
        if name.upper().startswith("HOURGLASS_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("HOME", str(tmp_path))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
