"""CLI entrypoint for page-ingest."""

from __future__ import annotations

import json
import os
from typing import Optional

import requests
import typer

from page_ingest.api.dependencies import get_app_settings, get_runner
from page_ingest.core.errors import IngestError
from page_ingest.core.logging import configure_logging
from page_ingest.db.store import create_table_sql
from page_ingest.ingest.types import RunResult

app = typer.Typer(name="pgi", help="Fetch a page and store its text in the documents table")

DEFAULT_HOST = "http://127.0.0.1:8000"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip('/')
    env_host = os.environ.get("PGI_HOST")
    if env_host:
        return env_host.rstrip('/')
    return DEFAULT_HOST


def _finish(result: RunResult) -> None:
    if not result.ok:
        typer.echo(f"Ingest failed ({result.kind.value if result.kind else 'error'}): {result.message}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(result.to_dict(), indent=2))


def _local_runner():
    try:
        return get_runner()
    except IngestError as exc:
        typer.echo(f"Ingest failed ({exc.kind.value}): {exc.message}", err=True)
        raise typer.Exit(code=1)


@app.callback()
def main(
    log_json: bool = typer.Option(True, "--log-json/--log-text", help="Emit logs as JSON lines"),
) -> None:
    configure_logging(use_json=log_json)


@app.command()
def run() -> None:
    """Validate the table, fetch the target page and store its text."""
    _finish(_local_runner().run())


@app.command()
def validate() -> None:
    """Check that the documents table exists and has the required columns."""
    _finish(_local_runner().validate())


@app.command()
def ddl() -> None:
    """Print the SQL that creates the documents table."""
    settings = get_app_settings()
    typer.echo(create_table_sql(settings.table_name, settings.embedding_dim))


@app.command()
def schedule() -> None:
    """Print the declared run cadence for an external scheduler."""
    settings = get_app_settings()
    typer.echo(json.dumps({"schedule": settings.schedule, "target_url": settings.target_url}, indent=2))


@app.command()
def trigger(
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Ask a running server to perform one ingest."""
    url = f"{_resolve_host(host)}/run"
    try:
        resp = requests.post(url, timeout=120)
    except requests.RequestException as exc:
        typer.echo(f"Request failed: {exc}", err=True)
        raise typer.Exit(code=1)
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    app()
