"""
helm_push.config — Connection parameter resolution.

Resolution priority per field:
    flag (non-empty) > HELM_REPO_* env var > empty

HELM_REPO_USE_HTTP is the exception: when set, it always overwrites the
flag value, and an unparseable value yields False.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Mapping


ENV_USERNAME = "HELM_REPO_USERNAME"
ENV_PASSWORD = "HELM_REPO_PASSWORD"
ENV_ACCESS_TOKEN = "HELM_REPO_ACCESS_TOKEN"
ENV_CONTEXT_PATH = "HELM_REPO_CONTEXT_PATH"
ENV_USE_HTTP = "HELM_REPO_USE_HTTP"

_TRUE_STRINGS = ("1", "t", "T", "TRUE", "true", "True")
_FALSE_STRINGS = ("0", "f", "F", "FALSE", "false", "False")


@dataclass(frozen=True)
class PushOptions:
    """Parameters of one invocation, as parsed from the command line."""
    chart_name: str = ""
    chart_version: str = ""
    repo_name: str = ""
    username: str = ""
    password: str = ""
    access_token: str = ""
    context_path: str = ""
    use_http: bool = False


@dataclass(frozen=True)
class ResolvedConnection:
    """Connection settings handed to the HTTP client."""
    base_url: str = ""
    username: str = ""
    password: str = ""
    access_token: str = ""
    context_path: str = ""


def parse_bool(value: str) -> tuple[bool, bool]:
    """Parse a boolean string.

    Returns:
        (value, ok) — ok is False when the string is not a known form
    """
    if value in _TRUE_STRINGS:
        return True, True
    if value in _FALSE_STRINGS:
        return False, True
    return False, False


def apply_env(options: PushOptions, environ: Mapping[str, str]) -> PushOptions:
    """Fill empty fields of ``options`` from the environment."""
    changes: dict[str, object] = {}

    for field_name, env_name in (
        ("username", ENV_USERNAME),
        ("password", ENV_PASSWORD),
        ("access_token", ENV_ACCESS_TOKEN),
        ("context_path", ENV_CONTEXT_PATH),
    ):
        if env_name in environ and not getattr(options, field_name):
            changes[field_name] = environ[env_name]

    # Env always wins here, even over an explicit flag.
    if ENV_USE_HTTP in environ:
        changes["use_http"], _ = parse_bool(environ[ENV_USE_HTTP])

    return dataclasses.replace(options, **changes)


def resolve_connection(
    options: PushOptions,
    environ: Mapping[str, str],
    base_url: str = "",
) -> ResolvedConnection:
    """Merge options with the environment into a ResolvedConnection."""
    merged = apply_env(options, environ)
    return ResolvedConnection(
        base_url=base_url,
        username=merged.username,
        password=merged.password,
        access_token=merged.access_token,
        context_path=merged.context_path,
    )
