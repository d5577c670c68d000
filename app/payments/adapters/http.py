"""
Shared httpx plumbing for payment adapters.

Adapters take an optional, caller-owned httpx.AsyncClient. When none is
given, a short-lived client is opened for the single call and closed
afterwards.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@asynccontextmanager
async def use_client(
    client: httpx.AsyncClient | None,
    timeout: float,
) -> AsyncIterator[httpx.AsyncClient]:
    """
    Yield the injected client, or a temporary one with the given timeout.

    Args:
        client: Caller-owned client (left open)
        timeout: Timeout in seconds for a temporary client
    """
    if client is not None:
        yield client
        return

    async with httpx.AsyncClient(timeout=timeout) as temporary:
        yield temporary
