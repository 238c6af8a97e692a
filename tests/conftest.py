import json

import pytest

from knotcrypt.config import ENV_PASSWORD


@pytest.fixture(autouse=True)
def _no_env_password(monkeypatch):
    monkeypatch.delenv(ENV_PASSWORD, raising=False)


@pytest.fixture
def write_config(tmp_path):
    def _write(data, name="config.json", directory=None):
        path = (directory or tmp_path) / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
