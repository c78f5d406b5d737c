"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from ipaddress import IPv4Address, IPv6Address
from typing import Union

IPAddress = Union[IPv4Address, IPv6Address]


@dataclass(frozen=True, slots=True)
class Lease:
    """Last announced backend address and the instant it stops being trusted."""

    address: IPAddress
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class Measurement:
    """A single room reading received on the insert endpoint."""

    temperature: float
    carbon: int
    room_id: int
