"""Click CLI group: serve, install and coerce commands."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click

from tenant_patcher.config import get_settings
from tenant_patcher.errors import TenantPatcherError


@click.group()
def cli() -> None:
    """Tenant patcher CLI."""


@cli.command()
@click.option("--host", type=str, default=None, help="Bind host (default: BIND_HOST).")
@click.option("--port", type=int, default=None, help="Bind port (default: BIND_PORT).")
def serve(host: str | None, port: int | None) -> None:
    """Run the HTTP API under uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "tenant_patcher.main:app",
        host=host or settings.bind_host,
        port=port or settings.bind_port,
        log_level=settings.log_level.lower(),
    )


@cli.command()
@click.argument("app")
@click.argument("tenant")
@click.option("--json", "json_output", is_flag=True, help="Print structured JSON result.")
def install(app: str, tenant: str, json_output: bool) -> None:
    """Open a pull request installing APP on TENANT."""
    from tenant_patcher.clients import GitHubClient, RegistryClient
    from tenant_patcher.logging import configure_logging, install_context
    from tenant_patcher.pipeline import patch_tenant

    settings = get_settings()
    configure_logging(settings)
    registry = RegistryClient(settings.registry_url, timeout=settings.http_timeout_seconds)
    github = GitHubClient(
        settings.github_token,
        settings.github_repo_owner,
        settings.github_repo_name,
        base_url=settings.github_api_base_url,
        timeout=settings.http_timeout_seconds,
    )
    try:
        with install_context(app, tenant):
            result = asyncio.run(
                patch_tenant(
                    app,
                    tenant,
                    registry=registry,
                    github=github,
                    examples_base_path=settings.examples_base_path,
                    base_branch=settings.github_base_branch,
                )
            )
    except TenantPatcherError as exc:
        click.echo(f"install failed: {exc}", err=True)
        sys.exit(1)
    if json_output:
        click.echo(json.dumps({"number": result.number, "url": result.url}))
        return
    click.echo(result.message)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def coerce(path: Path) -> None:
    """Print the structured app config parsed from the module at PATH."""
    from tenant_patcher.appconfig import coerce as coerce_config

    try:
        config = coerce_config(path.read_text(encoding="utf-8"))
    except TenantPatcherError as exc:
        click.echo(f"invalid app config: {exc}", err=True)
        sys.exit(1)
    click.echo(json.dumps(config.model_dump(by_alias=True), indent=2))
