"""
helm_push.download — cm:// downloader.

Helm invokes the plugin as a downloader with four arguments, the last
being the file URL:

  cm://host/a/b/charts/foo-1.0.0.tgz  →  GET https://host/a/b/charts/foo-1.0.0.tgz
                                          (repo /a/b, file charts/foo-1.0.0.tgz)
  cm://host/a/b/index.yaml            →  GET https://host/a/b/index.yaml
                                          (repo /a/b, file index.yaml)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import BinaryIO, Mapping
from urllib.parse import urlsplit, urlunsplit

import click

from helm_push.client import ChartMuseumClient
from helm_push.config import PushOptions, apply_env, resolve_connection
from helm_push.errors import InvalidURI

logger = logging.getLogger(__name__)

SCHEME_PREFIX = "cm://"
CHARTS_SEGMENT = "charts"


@dataclass(frozen=True)
class DownloadTarget:
    """File path to request and the repository base URL it lives under."""
    file_path: str
    base_url: str


def parse_download_target(file_url: str, use_http: bool = False) -> DownloadTarget:
    """Split a cm:// URL into repository base URL and file path.

    If the parent segment is literally "charts", the file is addressed as
    charts/<file> and both segments are removed from the base URL.
    """
    try:
        parsed = urlsplit(file_url)
        host = parsed.netloc
    except ValueError as e:
        raise InvalidURI(f"invalid file url: {file_url}: {e}") from e

    parts = parsed.path.lstrip("/").split("/")
    if len(parts) < 2:
        raise InvalidURI(f"invalid file url: {file_url}")

    file_path = parts[-1]
    remove = 1
    if parts[-2] == CHARTS_SEGMENT:
        remove += 1
        file_path = f"{CHARTS_SEGMENT}/{file_path}"

    remaining = parts[:len(parts) - remove]
    base_path = "/" + "/".join(remaining) if remaining else ""
    scheme = "http" if use_http else "https"
    base_url = urlunsplit((scheme, host, base_path, "", ""))

    return DownloadTarget(file_path=file_path, base_url=base_url)


def download(
    file_url: str,
    options: PushOptions,
    environ: Mapping[str, str] | None = None,
    out: BinaryIO | None = None,
) -> None:
    """Fetch a cm:// file and write its bytes verbatim to ``out`` (stdout)."""
    if environ is None:
        environ = os.environ
    merged = apply_env(options, environ)

    target = parse_download_target(file_url, use_http=merged.use_http)
    logger.debug("Resolved %s to %s + %s", file_url, target.base_url, target.file_path)

    client = ChartMuseumClient(
        resolve_connection(options, environ, base_url=target.base_url)
    )
    contents = client.download_file(target.file_path)

    if out is None:
        out = click.get_binary_stream("stdout")
    out.write(contents)
    out.flush()
