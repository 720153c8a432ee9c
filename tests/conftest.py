# structcmp/tests/conftest.py
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
TESTS = ROOT / "tests"

for p in (ROOT, TESTS):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from structcmp.comparators import registry  # noqa: E402
from structcmp.comparators.registry import Comparisons  # noqa: E402


# Gives every test its own process-default registry so module-level register() calls don't leak.
@pytest.fixture(autouse=True)
def fresh_default_registry(monkeypatch):
    default = Comparisons()
    monkeypatch.setattr(registry, "_DEFAULT", default)
    return default
