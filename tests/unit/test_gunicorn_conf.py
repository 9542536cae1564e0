import importlib.util
import os
import pathlib
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[2]


@pytest.fixture()
def gunicorn_conf():
    spec = importlib.util.spec_from_file_location("gunicorn_conf", ROOT / "gunicorn.conf.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def worker():
    return SimpleNamespace(log=MagicMock())


def test_post_fork_loads_secrets(monkeypatch, tmp_path, gunicorn_conf, worker):
    (tmp_path / "workflow_api_token").write_text("api-secret\n")
    monkeypatch.setattr(gunicorn_conf, "SECRETS_DIR", str(tmp_path))
    monkeypatch.setenv("WORKFLOW_API_TOKEN", "")
    monkeypatch.setenv("WORKFLOW_BACKEND_TOKEN", "")

    gunicorn_conf.post_fork(None, worker)

    assert os.environ["WORKFLOW_API_TOKEN"] == "api-secret"
    assert os.environ["WORKFLOW_BACKEND_TOKEN"] == ""


def test_post_fork_keeps_existing_env(monkeypatch, tmp_path, gunicorn_conf, worker):
    (tmp_path / "workflow_backend_token").write_text("from-file")
    monkeypatch.setattr(gunicorn_conf, "SECRETS_DIR", str(tmp_path))
    monkeypatch.setenv("WORKFLOW_BACKEND_TOKEN", "from-env")

    gunicorn_conf.post_fork(None, worker)

    assert os.environ["WORKFLOW_BACKEND_TOKEN"] == "from-env"


def test_post_fork_without_secrets_dir(monkeypatch, tmp_path, gunicorn_conf, worker):
    monkeypatch.setattr(gunicorn_conf, "SECRETS_DIR", str(tmp_path / "absent"))
    gunicorn_conf.post_fork(None, worker)
    worker.log.info.assert_called_once()
