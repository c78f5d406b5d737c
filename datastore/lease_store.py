"""In-memory lease on the backend host's last announced address."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from threading import Lock
from typing import Callable, Optional

from models.records import IPAddress, Lease

LEASE_DURATION = timedelta(seconds=50)

logger = logging.getLogger(__name__)


class LeaseVerdict(str, Enum):
    """Classification of the stored lease at resolve time."""

    fresh = "fresh"
    stale = "stale"
    unknown = "unknown"


@dataclass(frozen=True)
class LeaseResolution:
    verdict: LeaseVerdict
    address: Optional[IPAddress] = None
    expires_at: Optional[datetime] = None

    @property
    def is_fresh(self) -> bool:
        return self.verdict is LeaseVerdict.fresh


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LeaseStore:
    """Holds a single lease, replaced wholesale on every announce.

    The lease is one immutable value, so readers see either the previous
    or the new address/expiry pair, never a mix of both.
    """

    def __init__(
        self,
        duration: timedelta = LEASE_DURATION,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.duration = duration
        self._clock = clock
        self._lease: Optional[Lease] = None
        self._lock = Lock()

    def announce(self, address: IPAddress) -> Lease:
        with self._lock:
            previous = self._lease
            lease = Lease(address=address, expires_at=self._clock() + self.duration)
            self._lease = lease

        logger.debug("Lease renewed", extra={"expires_at": lease.expires_at.isoformat()})
        if previous is None or previous.address != address:
            logger.info("Backend address updated", extra={"address": str(address)})
        return lease

    def resolve(self) -> LeaseResolution:
        with self._lock:
            lease = self._lease
            now = self._clock()

        if lease is None:
            logger.debug("No backend address announced yet", extra={"verdict": LeaseVerdict.unknown})
            return LeaseResolution(verdict=LeaseVerdict.unknown)

        if now >= lease.expires_at:
            logger.warning(
                "Backend lease expired, host is probably offline",
                extra={
                    "verdict": LeaseVerdict.stale,
                    "address": str(lease.address),
                    "expires_at": lease.expires_at.isoformat(),
                },
            )
            return LeaseResolution(
                verdict=LeaseVerdict.stale,
                address=lease.address,
                expires_at=lease.expires_at,
            )

        return LeaseResolution(
            verdict=LeaseVerdict.fresh,
            address=lease.address,
            expires_at=lease.expires_at,
        )
