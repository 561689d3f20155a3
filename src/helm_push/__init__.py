"""
helm_push — Helm plugin to push chart packages to ChartMuseum.

Also serves as the downloader for cm:// repository URLs.

Flows live in their own modules:
    helm_push.push.push            — package + upload
    helm_push.download.download    — cm:// file to stdout
"""

from helm_push.config import PushOptions, ResolvedConnection, resolve_connection
from helm_push.errors import (
    HelmPushError,
    InvalidArguments,
    RepositoryNotFound,
    ChartNotFound,
    ChartLoadError,
    InvalidURI,
    UploadTransportError,
    DownloadTransportError,
    ResponseReadError,
    ServerError,
)

__version__ = "0.1.0"

__all__ = [
    # config
    "PushOptions",
    "ResolvedConnection",
    "resolve_connection",
    # errors
    "HelmPushError",
    "InvalidArguments",
    "RepositoryNotFound",
    "ChartNotFound",
    "ChartLoadError",
    "InvalidURI",
    "UploadTransportError",
    "DownloadTransportError",
    "ResponseReadError",
    "ServerError",
]
