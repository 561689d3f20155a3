"""
helm_push.repo — Helm repository lookup.

Reads the repositories file Helm maintains with `helm repo add`:

    apiVersion: v1
    repositories:
      - name: chartmuseum
        url: https://chartmuseum.example.com
        username: admin
        password: secret

File location priority:
    HELM_REPOSITORY_CONFIG > $HELM_HOME/repository/repositories.yaml
    > $HELM_CONFIG_HOME/repositories.yaml
    > $XDG_CONFIG_HOME/helm/repositories.yaml
    > ~/.config/helm/repositories.yaml
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import yaml

from helm_push.errors import RepositoryNotFound

logger = logging.getLogger(__name__)


@dataclass
class RepositoryRecord:
    """A single repository entry."""
    name: str
    url: str
    username: str = ""
    password: str = ""


def repositories_file(environ: Mapping[str, str] | None = None) -> Path:
    """Return the path of Helm's repositories.yaml."""
    if environ is None:
        environ = os.environ

    explicit = environ.get("HELM_REPOSITORY_CONFIG", "")
    if explicit:
        return Path(explicit)

    # Helm 2 layout
    helm_home = environ.get("HELM_HOME", "")
    if helm_home:
        return Path(helm_home) / "repository" / "repositories.yaml"

    config_home = environ.get("HELM_CONFIG_HOME", "")
    if config_home:
        return Path(config_home) / "repositories.yaml"

    xdg = environ.get("XDG_CONFIG_HOME", "")
    if xdg:
        return Path(xdg) / "helm" / "repositories.yaml"
    return Path.home() / ".config" / "helm" / "repositories.yaml"


def load_repositories(path: str | Path) -> dict[str, RepositoryRecord]:
    """Read repositories.yaml into a name -> record mapping."""
    p = Path(path)
    if not p.exists():
        logger.debug("Repositories file %s does not exist", p)
        return {}

    try:
        with open(p, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise RepositoryNotFound(f"cannot parse repositories file {p}: {e}") from e

    repos: dict[str, RepositoryRecord] = {}
    for entry in data.get("repositories") or []:
        if not isinstance(entry, dict) or "name" not in entry:
            continue
        repos[entry["name"]] = RepositoryRecord(
            name=entry["name"],
            url=entry.get("url", ""),
            username=entry.get("username", "") or "",
            password=entry.get("password", "") or "",
        )
    return repos


def get_repo_by_name(
    name: str,
    environ: Mapping[str, str] | None = None,
) -> RepositoryRecord:
    """Look up a repository by name.

    A name that is itself an http(s) URL is used as-is, without credentials.
    """
    if name.startswith("http://") or name.startswith("https://"):
        return RepositoryRecord(name=name, url=name)

    path = repositories_file(environ)
    logger.debug("Looking up repository %r in %s", name, path)
    repos = load_repositories(path)
    if name not in repos:
        raise RepositoryNotFound(f"no repo named {name!r} found")
    return repos[name]
