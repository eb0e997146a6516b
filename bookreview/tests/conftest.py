import sys
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from bookreview.services.config_svc import AppConfig, ENV_KEYS


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # Never let a developer's BOOKREVIEW_* settings leak into tests
    for k in ENV_KEYS:
        monkeypatch.delenv(k, raising=False)
    yield


@pytest.fixture()
def cfg(tmp_path):
    return AppConfig(connection_string=str(tmp_path / "bookreviews_test.db"), username="tester")


@pytest.fixture()
def conn(cfg):
    from bookreview.db import get_conn
    from bookreview.services.schema_svc import reset_schema
    with get_conn(cfg) as c:
        reset_schema(c)
        yield c
