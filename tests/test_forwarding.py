"""Unit tests for the forwarding service."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from ipaddress import ip_address

from datastore.lease_store import LeaseStore, LeaseVerdict
from services.forwarding import ForwardingService, redirect_target


def test_redirect_target_format() -> None:
    assert redirect_target(ip_address("10.0.0.5")) == "http://10.0.0.5:3000"
    assert redirect_target(ip_address("fe80::1")) == "http://[fe80::1]:3000"
    assert redirect_target(ip_address("fe80::1%eth0")) == "http://[fe80::1%25eth0]:3000"


def test_resolve_target_follows_lease_state() -> None:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    times = [now]
    service = ForwardingService(LeaseStore(clock=lambda: times[-1]))

    assert service.resolve_target() is None
    assert service.resolution().verdict is LeaseVerdict.unknown

    service.announce(ip_address("10.0.0.5"))
    assert service.resolve_target() == "http://10.0.0.5:3000"

    times.append(now + timedelta(seconds=51))
    assert service.resolve_target() is None
    assert service.resolution().verdict is LeaseVerdict.stale


def test_custom_port() -> None:
    service = ForwardingService(LeaseStore(), port=8080)

    service.announce(ip_address("192.168.1.2"))

    assert service.resolve_target() == "http://192.168.1.2:8080"
