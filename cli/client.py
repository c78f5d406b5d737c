from __future__ import annotations

from typing import Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the relay service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(
            base_url=config.base_url,
            timeout=config.timeout,
            follow_redirects=False,
        )

    def close(self) -> None:
        self._client.close()

    def announce(self) -> None:
        try:
            response = self._client.post("/ip_update")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)

    def resolve(self) -> Optional[str]:
        """Return the redirect target, or ``None`` when the backend is offline."""
        try:
            response = self._client.get("/forward")
            if response.status_code == 404:
                return None
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        location = response.headers.get("location")
        if not response.is_redirect or not location:
            raise typer.BadParameter("Unexpected response when resolving the backend address.")
        return location

    def insert(self, temperature: float, carbon: int, room_id: int) -> str:
        try:
            response = self._client.post(
                "/insert",
                params={
                    "temperatur": temperature,
                    "kohlenstoff": carbon,
                    "raum_id": room_id,
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.text

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = str(data.get("detail"))
        except Exception:  # noqa: BLE001 - plain-text bodies are expected
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
