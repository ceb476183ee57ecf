"""Typer entry-point.

Exit codes: 2 when a required option is missing (click usage error),
1 for any other failure, 0 on success.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Coroutine, Optional, TypeVar

import typer
from loguru import logger
from rich.console import Console

from spec_sync.adapters.openapi_loader import load_openapi_document, render_document
from spec_sync.adapters.postman_api import PostmanClient
from spec_sync.adapters.state_store import JsonStateStore
from spec_sync.cli import doctor
from spec_sync.cli.ui_components import build_generation_panel, build_sync_table, print_banner
from spec_sync.core.config import AppSettings
from spec_sync.core.domain.naming import DEFAULT_DOMAIN, asset_name, state_key
from spec_sync.core.errors import ConfigurationError
from spec_sync.core.services.collection_generator import (
    GenerationHooks,
    GenerationRequest,
    GenerationResult,
    generate_collection,
)
from spec_sync.core.services.openapi_transform import transform_for_postman
from spec_sync.core.services.session import IngestionSession
from spec_sync.core.services.sync_driver import SyncHooks, SyncRequest, SyncResult, sync_spec
from spec_sync.core.services.task_poller import TaskPoller

app = typer.Typer(
    no_args_is_help=True,
    help="Sync a local OpenAPI document with Postman Spec Hub.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

T = TypeVar("T")


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    configure_logging(verbose)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run `coro`; any failure is printed and turned into exit code 1."""

    try:
        return asyncio.run(coro)
    except ConfigurationError as exc:
        _err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    except Exception as exc:
        _err_console.print_exception()
        raise typer.Exit(code=1) from exc


def _info(message: str) -> None:
    _console.print(message, markup=False)


def _warning(message: str) -> None:
    _console.print(f"Warning: {message}", style="yellow", markup=False)


def _build_poller(settings: AppSettings, client: PostmanClient) -> TaskPoller:
    return TaskPoller(
        client.get_task,
        interval=settings.poll_interval_seconds,
        timeout=settings.poll_timeout_seconds,
    )


async def _sync(
    *,
    settings: AppSettings,
    domain: str,
    service: str,
    stage: str,
    openapi: Path,
    file_path: str,
    spec_id: str | None,
    collection_uid: str | None,
    collection_name: str | None,
    state_file: Path,
    poll: bool,
) -> SyncResult:
    _, workspace_id = settings.require_credentials()

    name = asset_name(service, prefix=settings.name_prefix, suffix=settings.name_suffix)
    document = load_openapi_document(openapi, max_bytes=settings.max_openapi_bytes)
    content = render_document(transform_for_postman(document))

    session = IngestionSession(JsonStateStore(state_file), state_key(domain, service, stage))
    request = SyncRequest(
        workspace_id=workspace_id,
        spec_name=name,
        collection_name=collection_name or name,
        content=content,
        file_path=file_path,
        spec_id=spec_id,
        collection_uid=collection_uid,
        poll=poll,
    )

    async with PostmanClient(settings) as client:
        return await sync_spec(
            request=request,
            gateway=client,
            session=session,
            poller=_build_poller(settings, client),
            hooks=SyncHooks(info=_info),
        )


@app.command()
def sync(
    service: str = typer.Option(..., help="Service name (used for asset names and the state key)."),
    stage: str = typer.Option(..., help="Deployment stage (part of the state key)."),
    openapi: Path = typer.Option(..., "--openapi", help="Path to the OpenAPI JSON document."),
    domain: str = typer.Option(DEFAULT_DOMAIN, help="Domain (first part of the state key)."),
    file_path: str = typer.Option("index.json", "--file-path", help="Root file path inside the spec."),
    spec_id: Optional[str] = typer.Option(None, "--spec-id", help="Known spec id (skips lookup)."),
    collection_uid: Optional[str] = typer.Option(
        None, "--collection-uid", help="Known collection uid (skips lookup)."
    ),
    collection_name: Optional[str] = typer.Option(
        None, "--collection-name", help="Collection name to look up (defaults to the spec name)."
    ),
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="State file path."),
    poll: bool = typer.Option(False, "--poll", help="Poll the sync task to completion."),
) -> None:
    """Create/update the spec, then sync its collection when one exists."""

    settings = AppSettings()
    print_banner(_console, "sync")
    result = _run(
        _sync(
            settings=settings,
            domain=domain,
            service=service,
            stage=stage,
            openapi=openapi,
            file_path=file_path,
            spec_id=spec_id,
            collection_uid=collection_uid,
            collection_name=collection_name,
            state_file=state_file or settings.default_state_file,
            poll=poll,
        )
    )
    _console.print(build_sync_table(result))


async def _generate(
    *,
    settings: AppSettings,
    domain: str,
    service: str,
    stage: str,
    spec_id: str | None,
    collection_name: str | None,
    state_file: Path,
) -> GenerationResult:
    _, workspace_id = settings.require_credentials()

    name = asset_name(service, prefix=settings.name_prefix, suffix=settings.name_suffix)
    session = IngestionSession(JsonStateStore(state_file), state_key(domain, service, stage))
    request = GenerationRequest(
        workspace_id=workspace_id,
        spec_name=name,
        collection_name=collection_name or name,
        spec_id=spec_id,
    )

    async with PostmanClient(settings) as client:
        return await generate_collection(
            request=request,
            gateway=client,
            session=session,
            poller=_build_poller(settings, client),
            hooks=GenerationHooks(
                info=_info,
                warning=_warning,
            ),
        )


@app.command(name="generate-collection")
def generate_collection_command(
    service: str = typer.Option(..., help="Service name (used for asset names and the state key)."),
    stage: str = typer.Option(..., help="Deployment stage (part of the state key)."),
    domain: str = typer.Option(DEFAULT_DOMAIN, help="Domain (first part of the state key)."),
    spec_id: Optional[str] = typer.Option(None, "--spec-id", help="Spec id (overrides the state file)."),
    collection_name: Optional[str] = typer.Option(
        None, "--collection-name", help="Name of the generated collection."
    ),
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="State file path."),
) -> None:
    """Generate a collection linked to the spec (once per service/stage)."""

    settings = AppSettings()
    print_banner(_console, "generate-collection")
    result = _run(
        _generate(
            settings=settings,
            domain=domain,
            service=service,
            stage=stage,
            spec_id=spec_id,
            collection_name=collection_name,
            state_file=state_file or settings.default_state_file,
        )
    )
    _console.print(build_generation_panel(result))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
