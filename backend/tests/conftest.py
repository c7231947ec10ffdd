import pathlib
import sys

import pytest


REPO_ROOT = pathlib.Path(__file__).resolve().parents[2]
sys.path.append(str(REPO_ROOT))


@pytest.fixture()
def api_client(monkeypatch):
    monkeypatch.delenv("PROGRESS_LOOKBACK_MONTHS", raising=False)
    monkeypatch.delenv("PROGRESS_DEFAULT_CURRENCY", raising=False)

    from backend.app.main import app
    from fastapi.testclient import TestClient

    return TestClient(app)
