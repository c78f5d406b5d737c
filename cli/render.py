from __future__ import annotations

from typing import Optional

import typer


def render_target(target: Optional[str]) -> None:
    if target is None:
        typer.secho("Backend is probably offline.", fg=typer.colors.YELLOW)
        return
    typer.secho("Backend is online.", fg=typer.colors.GREEN)
    typer.echo(f"target: {target}")
