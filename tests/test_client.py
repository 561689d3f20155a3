"""
tests/test_client.py — ChartMuseum URL building.
"""

import pytest

from helm_push.client import ChartMuseumClient, strip_context_path
from helm_push.config import ResolvedConnection

from conftest import FakeResponse


class TestStripContextPath:
    @pytest.mark.parametrize("path,ctx,expected", [
        ("/cm/myrepo", "/cm", "/myrepo"),
        ("/cm/myrepo", "cm/", "/myrepo"),
        ("/cm", "/cm", ""),
        ("/cmx/myrepo", "/cm", "/cmx/myrepo"),
        ("/myrepo", "/cm", "/myrepo"),
        ("/myrepo", "", "/myrepo"),
    ])
    def test_strip(self, path, ctx, expected):
        assert strip_context_path(path, ctx) == expected


class TestURLs:
    def test_upload_strips_context_from_repo_url(self, fake_http, tmp_path):
        pkg = tmp_path / "mychart-0.1.0.tgz"
        pkg.write_bytes(b"\x1f\x8b")
        client = ChartMuseumClient(ResolvedConnection(
            base_url="https://host/cm/myrepo", context_path="/cm",
        ))
        client.upload_chart_package(pkg)
        _, url, kwargs = fake_http.calls[0]
        assert url == "https://host/cm/api/myrepo/charts"
        assert "timeout" not in kwargs

    def test_download_strips_context_from_repo_url(self, fake_http):
        fake_http.response = FakeResponse(200, b"x")
        client = ChartMuseumClient(ResolvedConnection(
            base_url="https://host/cm/a", context_path="/cm",
        ))
        assert client.download_file("index.yaml") == b"x"
        _, url, _ = fake_http.calls[0]
        assert url == "https://host/cm/a/index.yaml"
