"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from spec_sync.adapters.postman_api import PostmanClient
from spec_sync.adapters.state_store import JsonStateStore
from spec_sync.core.config import AppSettings, write_user_env_vars
from spec_sync.core.errors import RemoteCallError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with PostmanClient(settings) as client:
            me = await client.get_me()
    except RemoteCallError as exc:
        return False, f"HTTP {exc.status_code} {exc.reason}".strip()
    except Exception as exc:
        return False, str(exc)
    user = me.get("user") if isinstance(me.get("user"), dict) else {}
    return True, f"Authenticated as {user.get('username') or user.get('id') or 'unknown user'}"


def _check_state_file(path: Path) -> tuple[bool, str]:
    if not path.exists():
        return True, f"{path} (will be created on first run)"
    state = JsonStateStore(path).load()
    return True, f"{path} ({len(state.entries)} entries)"


@app.command()
def run(
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="State file to inspect."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="postman-spec-sync doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    missing = settings.missing_credentials()
    table.add_row("POSTMAN_API_KEY", "FAIL" if "POSTMAN_API_KEY" in missing else "OK", "")
    table.add_row(
        "POSTMAN_WORKSPACE_ID",
        "FAIL" if "POSTMAN_WORKSPACE_ID" in missing else "OK",
        settings.workspace_id or "",
    )
    table.add_row("API base_url", "OK", settings.api_base_url)

    ok_api = False
    if settings.api_key:
        ok_api, detail_api = asyncio.run(_check_api(settings))
        table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)
    else:
        table.add_row("API connectivity", "SKIPPED", "No API key set")

    ok_state, detail_state = _check_state_file(state_file or settings.default_state_file)
    table.add_row("State file", "OK" if ok_state else "FAIL", detail_state)

    _console.print(table)

    if missing:
        _console.print("\n[yellow]Note:[/yellow] run `spec-sync doctor setup` to store the missing credentials.")
        raise typer.Exit(code=1)
    if not ok_api:
        raise typer.Exit(code=1)


@app.command()
def setup() -> None:
    """Interactive credentials setup (stored in the user config .env)."""

    api_key = typer.prompt("Postman API key", hide_input=True, confirmation_prompt=False).strip()
    workspace_id = typer.prompt("Postman workspace id").strip()

    if not api_key or not workspace_id:
        raise typer.BadParameter("API key and workspace id are required")

    env_path = write_user_env_vars(
        {
            "POSTMAN_API_KEY": api_key,
            "POSTMAN_WORKSPACE_ID": workspace_id,
        }
    )

    _console.print(f"[green]Saved Postman config to:[/green] {env_path}")
