import sys
from pathlib import Path

import pytest

# tests/ から見て 1 つ上 = プロジェクトルート（core / backend を import するため）
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def api_client():
    """FastAPI アプリに対する TestClient"""
    from fastapi.testclient import TestClient

    from backend.fastapi_app.main import app

    with TestClient(app) as client:
        yield client
