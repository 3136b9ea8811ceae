"""CLI entrypoint for migration-analyzer."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import NoReturn

import click
from rich.logging import RichHandler

from . import __version__
from .errors import MigrationAnalyzerError, UsageError
from .models import Credential


def _fail(exc: MigrationAnalyzerError) -> NoReturn:
    click.echo(exc.message, err=True)
    if exc.detail:
        click.echo(exc.detail, err=True)
    sys.exit(1)


def _check_organization(organization: str | None, project: str | None = None) -> str:
    """Exit with a usage error before any network call when no org is given."""
    if not organization:
        if project:
            _fail(
                UsageError(
                    message="error: provide organization for given project [usage --organization <org>]"
                )
            )
        _fail(UsageError(message="error: no organization [usage --organization <org>]"))
    return organization


def _resolve_token(token: str | None, service: str) -> str:
    """Fall back to an interactive prompt when neither flag nor env var is set."""
    if token:
        return token
    return click.prompt(f"Enter PAT for {service}", hide_input=True)


def _run(coro) -> None:
    try:
        asyncio.run(coro)
    except MigrationAnalyzerError as exc:
        _fail(exc)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.version_option(version=__version__)
def main(verbose: bool) -> None:
    """Size a GitHub or Azure DevOps organization ahead of a migration.

    \b
    Examples:
      migration-analyzer ADO-org --organization myorg
      migration-analyzer ADO-org -o myorg -p myproject
      migration-analyzer GH-org -o myorg --server https://ghes.example.com/api/graphql
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


@main.command("ADO-org")
@click.option("-o", "--organization", default=None, help="Organization Name")
@click.option(
    "-t",
    "--token",
    envvar="ADO_PAT",
    show_envvar=True,
    default=None,
    help="Personal Access Token",
)
@click.option("-p", "--project", default=None, help="Project Name")
def ado_org(organization: str | None, token: str | None, project: str | None) -> None:
    """Fetch AzureDevOps Organization Metrics."""
    organization = _check_organization(organization, project)
    token = _resolve_token(token, "AzureDevOps")

    from .orchestrator import run_azure_devops

    credential = Credential(organization=organization, token=token, project=project)
    _run(run_azure_devops(credential))


@main.command("GH-org")
@click.option("-o", "--organization", default=None, help="Organization Name")
@click.option(
    "-t",
    "--token",
    envvar="GH_PAT",
    show_envvar=True,
    default=None,
    help="Personal Access Token",
)
@click.option("-s", "--server", default=None, help="GHES GraphQL Endpoint")
@click.option(
    "-a",
    "--allow-untrusted-ssl-certificates",
    is_flag=True,
    default=False,
    help="Allow connections to a GitHub API endpoint that presents a SSL "
    "certificate that isn't issued by a trusted CA",
)
def gh_org(
    organization: str | None,
    token: str | None,
    server: str | None,
    allow_untrusted_ssl_certificates: bool,
) -> None:
    """Fetch GitHub Organization Metrics."""
    organization = _check_organization(organization)
    token = _resolve_token(token, "GitHub")

    from .orchestrator import run_github

    credential = Credential(
        organization=organization,
        token=token,
        server=server,
        allow_untrusted_ssl=allow_untrusted_ssl_certificates,
    )
    _run(run_github(credential))


if __name__ == "__main__":  # pragma: no cover
    main()
