"""Shared fixtures: fake HTTP responses, chart directories, repositories.yaml."""

import os
import sys

import pytest
import requests
import yaml

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


class FakeResponse:
    def __init__(self, status_code=200, content=b"", read_error=None):
        self.status_code = status_code
        self._content = content
        self._read_error = read_error
        self.closed = False

    @property
    def content(self):
        if self._read_error is not None:
            raise self._read_error
        return self._content

    def close(self):
        self.closed = True


class FakeHTTP:
    """Records requests.post / requests.get calls and replays one response."""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(201, b"")
        self.error = error
        self.calls = []

    def _handle(self, method, url, **kwargs):
        files = kwargs.get("files")
        if files:
            # Read while the file is still open
            name, fh, mime = files["chart"]
            kwargs["uploaded"] = (name, fh.read(), mime)
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def post(self, url, **kwargs):
        return self._handle("POST", url, **kwargs)

    def get(self, url, **kwargs):
        return self._handle("GET", url, **kwargs)


@pytest.fixture
def fake_http(monkeypatch):
    """Replace requests.post / requests.get with a recorder."""
    http = FakeHTTP()
    monkeypatch.setattr(requests, "post", http.post)
    monkeypatch.setattr(requests, "get", http.get)
    return http


@pytest.fixture
def chart_dir(tmp_path):
    """Create a minimal chart directory."""
    d = tmp_path / "mychart"
    (d / "templates").mkdir(parents=True)
    (d / "Chart.yaml").write_text(
        "apiVersion: v2\n"
        "name: mychart\n"
        "version: 0.1.0\n"
        "description: Test chart\n"
    )
    (d / "values.yaml").write_text("replicaCount: 1\n")
    (d / "templates" / "deployment.yaml").write_text("kind: Deployment\n")
    return d


@pytest.fixture
def repo_config(tmp_path):
    """Write a repositories.yaml and return an environ pointing at it."""
    path = tmp_path / "repositories.yaml"
    with open(path, "w") as f:
        yaml.safe_dump({
            "apiVersion": "v1",
            "repositories": [
                {
                    "name": "chartmuseum",
                    "url": "https://cm.example.com/myrepo",
                    "username": "stored-user",
                    "password": "stored-pass",
                },
                {"name": "open", "url": "http://open.example.com"},
            ],
        }, f)
    return {"HELM_REPOSITORY_CONFIG": str(path)}
