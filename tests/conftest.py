import contextlib
import json
import os
import shutil
import tempfile
from pathlib import Path
import typing as t
from traceback import print_tb

import httpx
import pytest
from typer.testing import CliRunner as BaseCliRunner

from loguru import logger

from canreg.client import RegistrationClient
from canreg.config import Settings, CONFIG_FN, ENV_CONFIG_KEY

BASE_URL = "http://registry.test:8080"


class CliRunner(BaseCliRunner):

    with_traceback = True

    def invoke(self, cli, commands, **kwargs):
        result = super(CliRunner, self).invoke(cli, commands, **kwargs)
        if not result.exit_code == 0 and self.with_traceback and result.exc_info:
            print_tb(result.exc_info[2])
            print(result.exception)
        return result


@contextlib.contextmanager
def cd_to_directory(path: Path, env: t.Optional[dict] = None):
    """Changes working directory and returns to previous on exit."""
    prev_cwd = Path.cwd()
    os.chdir(path)
    if env:
        for k, v in env.items():
            os.environ[k] = v
    try:
        yield
    finally:
        os.chdir(prev_cwd)
        if env:
            for k in env:
                os.environ.pop(k, None)


@pytest.fixture(scope="function")
def temporary_directory():
    """Provides a temporary directory that is removed after the test."""
    directory = tempfile.mkdtemp()
    yield Path(directory)
    shutil.rmtree(directory)


@pytest.fixture()
def cfg_file(temporary_directory):
    s = Settings(file_path=temporary_directory / CONFIG_FN)
    s.save()
    return s


@pytest.fixture()
def runner(temporary_directory, cfg_file):
    with cd_to_directory(
        temporary_directory, env={ENV_CONFIG_KEY: str(temporary_directory)}
    ):
        yield CliRunner()


class RecordingApi:
    """Stands in for the registration API, recording every request it gets."""

    def __init__(self, status_code: int = 200, body: t.Any = None, text: str | None = None):
        self.status_code = status_code
        self.body = body
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture()
def base_url():
    return BASE_URL


@pytest.fixture()
def make_api():
    """Builds an in-memory API answering every request with the given response"""
    return RecordingApi


@pytest.fixture()
def api(make_api):
    return make_api(200, {"id": 42})


@pytest.fixture()
def client_for(base_url):
    def _client_for(handler) -> RegistrationClient:
        return RegistrationClient(base_url, transport=httpx.MockTransport(handler))

    return _client_for


@pytest.fixture()
def client(client_for, api):
    return client_for(api)


@pytest.fixture()
def mock_api(monkeypatch, make_api):
    """Route every client built from settings to an in-memory API"""
    api = make_api(201, {"id": 42})

    def _client(self):
        return httpx.AsyncClient(
            base_url=self.base_url, transport=httpx.MockTransport(api)
        )

    monkeypatch.setattr(RegistrationClient, "_client", _client)
    return api


@pytest.fixture()
def error_logs():
    """Collects the loguru records emitted at ERROR level or above"""
    records = []
    handler_id = logger.add(lambda msg: records.append(msg.record), level="ERROR")
    yield records
    logger.remove(handler_id)
