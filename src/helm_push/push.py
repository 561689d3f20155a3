"""
helm_push.push — Package a chart and upload it to a repository.

  helm push mychart-0.1.0.tgz chartmuseum
  helm push . chartmuseum --version 7c4d121
"""

from __future__ import annotations

import logging
import os
import tempfile
from typing import Callable, Mapping

import click

from helm_push.chart import load_chart, package_chart
from helm_push.client import ChartMuseumClient
from helm_push.config import PushOptions, ResolvedConnection, apply_env
from helm_push.errors import InvalidArguments
from helm_push.repo import get_repo_by_name
from helm_push.response import handle_push_response

logger = logging.getLogger(__name__)


def push(
    options: PushOptions,
    environ: Mapping[str, str] | None = None,
    echo: Callable[[str], None] = click.echo,
) -> None:
    """Push options.chart_name to the repository options.repo_name.

    The packaging directory is removed on every exit path.
    """
    if environ is None:
        environ = os.environ
    if not options.chart_name or not options.repo_name:
        raise InvalidArguments(
            "This command needs 2 arguments: name of chart, name of chart repository"
        )

    options = apply_env(options, environ)

    repo = get_repo_by_name(options.repo_name, environ)
    chart = load_chart(options.chart_name)

    if options.chart_version:
        chart.set_version(options.chart_version)

    # Flags override stored repository credentials
    connection = ResolvedConnection(
        base_url=repo.url,
        username=options.username or repo.username,
        password=options.password or repo.password,
        access_token=options.access_token,
        context_path=options.context_path,
    )
    client = ChartMuseumClient(connection)

    with tempfile.TemporaryDirectory(prefix="helm-push-") as tmp:
        logger.debug("Created packaging directory %s", tmp)
        package_path = package_chart(chart, tmp)

        echo(f"Pushing {package_path.name} to {options.repo_name}...")
        response = client.upload_chart_package(package_path)
        handle_push_response(response)

    echo("Done.")
