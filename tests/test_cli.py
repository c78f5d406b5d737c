from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from typer.testing import CliRunner

from cli.app import app
from cli.config import BindAddress, load_config, parse_bind_address


class StubClient:
    def __init__(self, config, target: Optional[str] = "http://10.0.0.5:3000") -> None:
        self.config = config
        self.target = target
        self.announced = 0
        self.inserted: List[tuple[float, int, int]] = []
        self.closed = False

    def announce(self) -> None:
        self.announced += 1

    def resolve(self) -> Optional[str]:
        return self.target

    def insert(self, temperature: float, carbon: int, room_id: int) -> str:
        self.inserted.append((temperature, carbon, room_id))
        return "Success"

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _install_stub(monkeypatch, stub: StubClient) -> None:
    def factory(config):
        stub.config = config
        return stub

    monkeypatch.setattr("cli.app.ApiClient", factory)


def test_announce(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["--base-url", "http://relay.example:1420/", "announce"])

    assert result.exit_code == 0
    assert stub.announced == 1
    assert stub.config.base_url == "http://relay.example:1420"
    assert "Announced to http://relay.example:1420" in result.stdout
    assert stub.closed is True


def test_resolve_online(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["resolve"])

    assert result.exit_code == 0
    assert "target: http://10.0.0.5:3000" in result.stdout


def test_resolve_offline_exits_nonzero(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None, target=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["resolve"])

    assert result.exit_code == 1
    assert "offline" in result.stdout
    assert stub.closed is True


def test_insert(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["insert", "-t", "21.5", "-c", "420", "-r", "3"])

    assert result.exit_code == 0
    assert stub.inserted == [(21.5, 420, 3)]
    assert "Success" in result.stdout


def test_serve_runs_uvicorn_with_bind_address(monkeypatch, runner: CliRunner) -> None:
    calls: List[Dict[str, Any]] = []

    def fake_run(target, **kwargs) -> None:
        calls.append({"target": target, **kwargs})

    monkeypatch.setattr("cli.app.uvicorn.run", fake_run)

    result = runner.invoke(app, ["serve", "0.0.0.0:1420"])

    assert result.exit_code == 0
    assert len(calls) == 1
    assert calls[0]["target"] == "app.main:create_app"
    assert calls[0]["factory"] is True
    assert (calls[0]["host"], calls[0]["port"]) == ("0.0.0.0", 1420)


def test_serve_requires_bind_address(monkeypatch, runner: CliRunner) -> None:
    monkeypatch.setattr("cli.app.uvicorn.run", lambda *args, **kwargs: None)

    assert runner.invoke(app, ["serve"]).exit_code != 0
    assert runner.invoke(app, ["serve", "1420"]).exit_code != 0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0.0.0.0:1420", BindAddress(host="0.0.0.0", port=1420)),
        ("localhost:8080", BindAddress(host="localhost", port=8080)),
        ("[::]:1420", BindAddress(host="::", port=1420)),
    ],
)
def test_parse_bind_address(raw: str, expected: BindAddress) -> None:
    assert parse_bind_address(raw) == expected


@pytest.mark.parametrize("raw", ["", "1420", ":1420", "0.0.0.0:http", "0.0.0.0:70000"])
def test_parse_bind_address_rejects_malformed(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_bind_address(raw)


def test_bind_address_str_brackets_ipv6() -> None:
    assert str(BindAddress(host="::", port=1420)) == "[::]:1420"
    assert str(BindAddress(host="0.0.0.0", port=1420)) == "0.0.0.0:1420"


def test_load_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("RELAY_BASE_URL", "http://pi.local:1420/")
    monkeypatch.setenv("RELAY_TIMEOUT", "2.5")

    config = load_config()

    assert config.base_url == "http://pi.local:1420"
    assert config.timeout == 2.5
