"""
helm_push.errors — Error types.

Every failure is terminal for the invocation; the CLI prints the message
and exits with status 1.
"""

from __future__ import annotations


class HelmPushError(Exception):
    pass


class InvalidArguments(HelmPushError):
    pass


class RepositoryNotFound(HelmPushError):
    pass


class ChartNotFound(HelmPushError):
    pass


class ChartLoadError(HelmPushError):
    pass


class InvalidURI(HelmPushError):
    pass


class UploadTransportError(HelmPushError):
    pass


class DownloadTransportError(HelmPushError):
    pass


class ResponseReadError(HelmPushError):
    pass


class ServerError(HelmPushError):
    """Non-201 upload response."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
