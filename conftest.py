# Ensure the package under src/ is importable during tests without installing the package.
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))


@pytest.fixture
def workspace(tmp_path):
    """Empty workspace rooted in a per-test temporary directory."""
    from desweal.workspace import Workspace

    return Workspace(root=tmp_path)
