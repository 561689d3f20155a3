"""
helm_push.client — ChartMuseum HTTP client.

Endpoints (relative to the repository URL's scheme and host):
    POST <context-path>/api/<repo-path>/charts   multipart field "chart"
    GET  <context-path>/<repo-path>/<file>

<repo-path> is the repository URL's path with a leading context path
removed, so https://host/cm/myrepo with context path /cm uploads to
/cm/api/myrepo/charts.
"""

from __future__ import annotations

import logging
import os
import posixpath
from urllib.parse import urlsplit, urlunsplit

import requests

from helm_push.config import ResolvedConnection
from helm_push.errors import DownloadTransportError, UploadTransportError

logger = logging.getLogger(__name__)


def _join_path(*parts: str) -> str:
    """Join URL path segments, dropping empties and collapsing slashes."""
    cleaned = [p.strip("/") for p in parts if p and p.strip("/")]
    return "/" + posixpath.join(*cleaned) if cleaned else "/"


def strip_context_path(path: str, context_path: str) -> str:
    """Remove context_path from the front of path, on a segment boundary."""
    ctx = context_path.strip("/")
    if not ctx:
        return path
    trimmed = path.lstrip("/")
    if trimmed == ctx:
        return ""
    if trimmed.startswith(ctx + "/"):
        return trimmed[len(ctx):]
    return path


class ChartMuseumClient:
    """Single-request client; no retries, no timeout."""

    def __init__(self, connection: ResolvedConnection):
        self.connection = connection

    def _url(self, *path: str) -> str:
        u = urlsplit(self.connection.base_url)
        return urlunsplit((u.scheme, u.netloc, _join_path(*path), "", ""))

    def _repo_path(self) -> str:
        return strip_context_path(
            urlsplit(self.connection.base_url).path,
            self.connection.context_path,
        )

    def _auth_kwargs(self) -> dict:
        conn = self.connection
        if conn.access_token:
            return {"headers": {"Authorization": f"Bearer {conn.access_token}"}}
        if conn.username or conn.password:
            return {"auth": (conn.username, conn.password)}
        return {}

    def upload_chart_package(self, package_path: str | os.PathLike) -> requests.Response:
        """POST a packaged chart. The response is returned unread."""
        url = self._url(self.connection.context_path, "api", self._repo_path(), "charts")
        logger.debug("Uploading %s to %s", package_path, url)

        try:
            with open(package_path, "rb") as f:
                files = {"chart": (os.path.basename(package_path), f, "application/gzip")}
                return requests.post(url, files=files, **self._auth_kwargs())
        except requests.RequestException as e:
            raise UploadTransportError(f"upload to {url} failed: {e}") from e

    def download_file(self, file_path: str) -> bytes:
        """GET a file from the repository and return its raw bytes."""
        url = self._url(self.connection.context_path, self._repo_path(), file_path)
        logger.debug("Downloading %s", url)

        try:
            r = requests.get(url, **self._auth_kwargs())
            content = r.content
        except requests.RequestException as e:
            raise DownloadTransportError(f"download of {url} failed: {e}") from e

        if r.status_code != 200:
            raise DownloadTransportError(
                f"download of {url} failed: {r.status_code} "
                f"{content.decode('utf-8', errors='replace')}"
            )
        return content
