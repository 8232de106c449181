from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(autouse=True)
def run_from_project_root(monkeypatch):
    # Example programs are opened relative to the project root.
    monkeypatch.chdir(ROOT)
