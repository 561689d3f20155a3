"""
helm_push.chart — Chart loading and packaging.

A chart is either a directory:
    mychart/
    ├── Chart.yaml
    ├── values.yaml
    └── templates/...

or a packaged archive (mychart-0.1.0.tgz) holding the same tree under a
single top-level directory.

Packaging writes <name>-<version>.tgz with every file under <name>/.
Chart.yaml is copied byte-for-byte; a version override rewrites only the
top-level version line of the in-memory copy, never the source.
"""

from __future__ import annotations

import fnmatch
import json
import logging
import re
import tarfile
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any

import yaml

from helm_push.errors import ChartLoadError, ChartNotFound

logger = logging.getLogger(__name__)

CHART_FILE = "Chart.yaml"
IGNORE_FILE = ".helmignore"

_VCS_DIRS = {".git", ".hg", ".svn", ".bzr"}
_VERSION_LINE = re.compile(rb"^version:[^\r\n]*", re.MULTILINE)


@dataclass
class Chart:
    """A loaded chart: metadata plus every other file, keyed by relative path.

    ``raw_metadata`` holds the Chart.yaml bytes written into the package.
    """
    metadata: dict[str, Any]
    raw_metadata: bytes = b""
    files: dict[str, bytes] = field(default_factory=dict)
    source: Path | None = None

    @property
    def name(self) -> str:
        return str(self.metadata["name"])

    @property
    def version(self) -> str:
        return str(self.metadata["version"])

    def set_version(self, version: str) -> None:
        self.metadata["version"] = version
        self.raw_metadata = _replace_version(self.raw_metadata, version)


def _replace_version(raw: bytes, version: str) -> bytes:
    # Quote only when the plain scalar would not load back as this string
    try:
        plain = yaml.safe_load(version) == version
    except yaml.YAMLError:
        plain = False
    scalar = version if plain else json.dumps(version)
    line = f"version: {scalar}".encode()
    replaced, count = _VERSION_LINE.subn(lambda m: line, raw, count=1)
    return replaced if count else b""


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# LOADING
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
def load_chart(name: str | Path) -> Chart:
    """Load a chart from a directory or a .tgz archive.

    Raises:
        ChartNotFound: path does not exist
        ChartLoadError: path exists but is not a readable chart
    """
    path = Path(name)
    if not path.exists():
        raise ChartNotFound(f"chart not found: {name}")

    if path.is_dir():
        chart = _load_dir(path)
    else:
        chart = _load_archive(path)
    logger.debug("Loaded chart %s-%s from %s", chart.name, chart.version, path)
    return chart


def _load_dir(chart_dir: Path) -> Chart:
    chart_file = chart_dir / CHART_FILE
    if not chart_file.is_file():
        raise ChartLoadError(f"{CHART_FILE} not found in {chart_dir}")

    try:
        raw = chart_file.read_bytes()
        metadata = _parse_metadata(raw, str(chart_file))
        patterns = _read_ignore_patterns(chart_dir / IGNORE_FILE)

        files: dict[str, bytes] = {}
        for fp in sorted(chart_dir.rglob("*")):
            if not fp.is_file():
                continue
            rel = fp.relative_to(chart_dir).as_posix()
            if rel == CHART_FILE or _is_ignored(rel, patterns):
                continue
            files[rel] = fp.read_bytes()
    except (OSError, UnicodeDecodeError) as e:
        raise ChartLoadError(f"cannot read chart {chart_dir}: {e}") from e

    return Chart(metadata=metadata, raw_metadata=raw, files=files, source=chart_dir)


def _load_archive(archive: Path) -> Chart:
    metadata: dict[str, Any] | None = None
    raw = b""
    files: dict[str, bytes] = {}

    try:
        with tarfile.open(archive, "r:gz") as tar:
            for member in tar.getmembers():
                if not member.isfile():
                    continue
                parts = member.name.split("/", 1)
                if len(parts) != 2:
                    continue
                rel = parts[1]
                f = tar.extractfile(member)
                if f is None:
                    continue
                data = f.read()
                if rel == CHART_FILE:
                    raw = data
                    metadata = _parse_metadata(data, f"{archive}:{member.name}")
                else:
                    files[rel] = data
    except (tarfile.TarError, OSError, EOFError) as e:
        raise ChartLoadError(f"cannot read chart archive {archive}: {e}") from e

    if metadata is None:
        raise ChartLoadError(f"{CHART_FILE} not found in {archive}")

    return Chart(metadata=metadata, raw_metadata=raw, files=files, source=archive)


def _parse_metadata(raw: bytes, origin: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ChartLoadError(f"invalid {origin}: {e}") from e

    if not isinstance(data, dict):
        raise ChartLoadError(f"invalid {origin}: expected a mapping")
    for key in ("name", "version"):
        if not data.get(key):
            raise ChartLoadError(f"invalid {origin}: missing {key!r}")
    return data


def _read_ignore_patterns(ignore_file: Path) -> list[str]:
    if not ignore_file.is_file():
        return []
    patterns = []
    for line in ignore_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            patterns.append(line)
    return patterns


def _is_ignored(rel: str, patterns: list[str]) -> bool:
    parts = rel.split("/")
    if any(p in _VCS_DIRS for p in parts[:-1]):
        return True

    for pattern in patterns:
        if pattern.endswith("/"):
            # Directory pattern: any parent directory matches
            dir_pattern = pattern.rstrip("/")
            if any(fnmatch.fnmatch(p, dir_pattern) for p in parts[:-1]):
                return True
            continue
        if fnmatch.fnmatch(rel, pattern) or fnmatch.fnmatch(parts[-1], pattern):
            return True
    return False


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# PACKAGING
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
def package_chart(chart: Chart, dest_dir: str | Path) -> Path:
    """Write the chart as <name>-<version>.tgz into dest_dir.

    Returns:
        Path of the created archive
    """
    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    tar_path = dest_dir / f"{chart.name}-{chart.version}.tgz"

    with tarfile.open(tar_path, "w:gz") as tar:
        chart_bytes = chart.raw_metadata
        if not chart_bytes:
            # No top-level version line to patch, fall back to a full dump
            chart_bytes = yaml.safe_dump(
                chart.metadata, default_flow_style=False, sort_keys=False,
            ).encode()
        _add_bytes(tar, f"{chart.name}/{CHART_FILE}", chart_bytes)

        for rel, data in sorted(chart.files.items()):
            _add_bytes(tar, f"{chart.name}/{rel}", data)

    logger.debug("Packaged chart into %s", tar_path)
    return tar_path


def _add_bytes(tar: tarfile.TarFile, arcname: str, data: bytes) -> None:
    info = tarfile.TarInfo(name=arcname)
    info.size = len(data)
    info.mode = 0o644
    tar.addfile(info, BytesIO(data))
