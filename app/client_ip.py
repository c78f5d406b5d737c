"""Extraction of the caller's network address from an inbound request."""

from __future__ import annotations

from ipaddress import ip_address
from typing import Iterator, Optional

from fastapi import HTTPException, Request, status

from models.records import IPAddress


def _parse(value: Optional[str]) -> Optional[IPAddress]:
    if not value:
        return None
    candidate = value.strip().strip('"')
    if candidate.startswith("["):
        # Bracketed IPv6, optionally followed by a port.
        candidate = candidate[1:].split("]", 1)[0]
    elif candidate.count(":") == 1:
        candidate = candidate.split(":", 1)[0]
    try:
        return ip_address(candidate)
    except ValueError:
        return None


def _forwarded_for(header: str) -> Iterator[str]:
    for element in header.split(","):
        for pair in element.split(";"):
            key, _, value = pair.partition("=")
            if key.strip().lower() == "for":
                yield value


def _candidates(request: Request) -> Iterator[Optional[str]]:
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        yield forwarded_for.split(",")[0]
    yield request.headers.get("x-real-ip")
    forwarded = request.headers.get("forwarded")
    if forwarded:
        yield next(_forwarded_for(forwarded), None)
    if request.client is not None:
        yield request.client.host


def client_address(request: Request) -> IPAddress:
    """Return the first valid address from proxy headers or the socket peer.

    Proxy headers are trusted as-is; any caller can claim any address.
    """
    for candidate in _candidates(request):
        address = _parse(candidate)
        if address is not None:
            return address
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Could not determine client address.",
    )
