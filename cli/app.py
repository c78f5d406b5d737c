from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import typer
import uvicorn

from cli.client import ApiClient
from cli.config import CLIConfig, load_config, parse_bind_address
from cli.render import render_target
from logging_config import configure_logging

logger = logging.getLogger(__name__)


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Run and talk to the IP relay service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Relay base URL (defaults to RELAY_BASE_URL env or http://localhost:1420).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("serve")
def serve_command(
    bind: str = typer.Argument(..., help="Address to bind to. Eg. 0.0.0.0:1420"),
) -> None:
    """Run the relay HTTP service."""
    try:
        address = parse_bind_address(bind)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="BIND") from exc

    configure_logging()
    logger.info("Starting relay", extra={"bind": str(address)})
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=address.host,
        port=address.port,
        log_config=None,
    )


@app.command("announce")
def announce_command(ctx: typer.Context) -> None:
    """Announce this machine's address to the relay."""
    state = _get_state(ctx)
    state.client.announce()
    typer.secho(f"Announced to {state.config.base_url}.", fg=typer.colors.GREEN)


@app.command("resolve")
def resolve_command(ctx: typer.Context) -> None:
    """Show where the relay currently forwards clients."""
    state = _get_state(ctx)
    target = state.client.resolve()
    render_target(target)
    if target is None:
        raise typer.Exit(code=1)


@app.command("insert")
def insert_command(
    ctx: typer.Context,
    temperature: float = typer.Option(..., "--temperature", "-t", help="Temperature reading."),
    carbon: int = typer.Option(..., "--carbon", "-c", help="Carbon dioxide concentration."),
    room: int = typer.Option(..., "--room", "-r", help="Room identifier."),
) -> None:
    """Send a measurement to the relay."""
    state = _get_state(ctx)
    body = state.client.insert(temperature=temperature, carbon=carbon, room_id=room)
    typer.echo(body)
