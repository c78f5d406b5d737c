"""Announce and resolve logic on top of the lease store."""

from __future__ import annotations

from ipaddress import IPv6Address
from typing import Optional

from datastore.lease_store import LeaseResolution, LeaseStore
from models.records import IPAddress

FORWARD_PORT = 3000


def redirect_target(address: IPAddress, port: int = FORWARD_PORT) -> str:
    if isinstance(address, IPv6Address):
        # Zone ids must be written as %25 inside a URL (RFC 6874).
        host = "[" + str(address).replace("%", "%25") + "]"
    else:
        host = str(address)
    return f"http://{host}:{port}"


class ForwardingService:
    """Tracks where the backend host lives and where clients should go."""

    def __init__(self, leases: LeaseStore, port: int = FORWARD_PORT) -> None:
        self.leases = leases
        self.port = port

    def announce(self, address: IPAddress) -> None:
        self.leases.announce(address)

    def resolution(self) -> LeaseResolution:
        return self.leases.resolve()

    def resolve_target(self) -> Optional[str]:
        """Return the redirect URL for a fresh lease, otherwise ``None``."""
        resolution = self.leases.resolve()
        if not resolution.is_fresh or resolution.address is None:
            return None
        return redirect_target(resolution.address, self.port)
