"""
aiohttp transport for the client uploader's POSTs to the bridge.

Analyses can take minutes, so every session uses
settings.client_http_timeout_sec as its total timeout. A long-lived caller
(the CLI run) opens one session with initialize() and tears it down with
close(); anything else gets a throwaway session per request from
request_session().
"""

import logging
from contextlib import asynccontextmanager

import aiohttp

from voxverify.config import settings

logger = logging.getLogger(__name__)

session: aiohttp.ClientSession | None = None


def _new_session() -> aiohttp.ClientSession:
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=settings.client_http_timeout_sec)
    )


async def initialize() -> None:
    global session
    session = _new_session()
    logger.debug(f"[UPLOADER] Bridge session opened (timeout {settings.client_http_timeout_sec}s)")


async def close() -> None:
    global session
    if session is None:
        return
    if not session.closed:
        await session.close()
        logger.debug("[UPLOADER] Bridge session closed")
    session = None


@asynccontextmanager
async def request_session():
    """The open bridge session if there is one, else a session closed on exit."""
    if session is not None and not session.closed:
        yield session
        return
    tmp = _new_session()
    try:
        yield tmp
    finally:
        await tmp.close()
