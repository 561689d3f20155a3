"""
helm_push.cli — CLI entry point.

  helm push mychart-0.1.0.tgz chartmuseum       # push .tgz from "helm package"
  helm push . chartmuseum                       # package and push chart directory
  helm push . --version="7c4d121" chartmuseum   # override version in Chart.yaml

As a Helm downloader for the cm:// protocol it is invoked with four
arguments (cert file, key file, CA file, URL) and writes the file to stdout.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import sys

import click

from helm_push.config import PushOptions, parse_bool
from helm_push.errors import HelmPushError, InvalidArguments

logger = logging.getLogger(__name__)


def _setup_logging(debug: bool) -> None:
    if not debug:
        debug, _ = parse_bool(os.environ.get("HELM_DEBUG", ""))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _is_download(args: tuple[str, ...]) -> bool:
    return len(args) == 4 and args[3].startswith("cm://")


@click.command("push", context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("args", nargs=-1)
@click.option("--version", "-v", "chart_version", default="",
              help="Override chart version pre-push")
@click.option("--username", "-u", default="",
              help="Override HTTP basic auth username [$HELM_REPO_USERNAME]")
@click.option("--password", "-p", default="",
              help="Override HTTP basic auth password [$HELM_REPO_PASSWORD]")
@click.option("--access-token", default="",
              help="Send token in authorization header [$HELM_REPO_ACCESS_TOKEN]")
@click.option("--context-path", default="",
              help="ChartMuseum context path [$HELM_REPO_CONTEXT_PATH]")
@click.option("--use-http", is_flag=True,
              help="Use plain HTTP for cm:// downloads [$HELM_REPO_USE_HTTP]")
@click.option("--debug", is_flag=True, help="Enable debug logging [$HELM_DEBUG]")
def main(args, chart_version, username, password, access_token,
         context_path, use_http, debug):
    """Helm plugin to push chart package to ChartMuseum."""
    from helm_push.download import download
    from helm_push.push import push

    _setup_logging(debug)

    options = PushOptions(
        chart_version=chart_version,
        username=username,
        password=password,
        access_token=access_token,
        context_path=context_path,
        use_http=use_http,
    )

    try:
        if _is_download(args):
            logger.debug("Running as cm:// downloader")
            download(args[3], options)
            return

        if len(args) != 2:
            raise InvalidArguments(
                "This command needs 2 arguments: name of chart, name of chart repository"
            )
        push(dataclasses.replace(options, chart_name=args[0], repo_name=args[1]))

    except HelmPushError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
