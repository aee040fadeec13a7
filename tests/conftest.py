import os
import sys

import pytest
import requests

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from transferto.client import TransfertoClient
from transferto.config import reset_settings

SUCCESS_RESPONSE = "error_code=0\r\nerror_txt=success"


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Records every GET and answers with a canned body."""

    def __init__(self, body: str = SUCCESS_RESPONSE, status_code: int = 200, exc: Exception | None = None):
        self.body = body
        self.status_code = status_code
        self.exc = exc
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return FakeResponse(self.body, self.status_code)

    @property
    def last_params(self) -> dict:
        return self.calls[-1]["params"]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    for name in list(os.environ):
        if name.startswith("TRANSFERTO_"):
            monkeypatch.delenv(name)
    # keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session) -> TransfertoClient:
    return TransfertoClient("fake-login", "fake-token", session=session)
