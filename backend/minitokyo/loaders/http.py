import asyncio
import gzip
import json
import logging
import os
import re
import time
from collections.abc import Hashable, Mapping
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, TypeVar

import httpx

from minitokyo.core.config import LoaderConfig

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)

GZIP_MAGIC = b"\x1f\x8b"

_CONSUMER_KEY_RE = re.compile(r"(acl:consumerKey=)([^&]*)")


class UpstreamFetchError(RuntimeError):
    """A single locator could not be fetched or decoded."""

    def __init__(self, url: str, status: Optional[int] = None, detail: str = ""):
        self.url = mask_consumer_key(url)
        self.status = status
        msg = f"Failed to load {self.url}"
        if status is not None:
            msg += f" (HTTP {status})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


def mask_consumer_key(url: str) -> str:
    def _mask(m: re.Match) -> str:
        token = m.group(2)
        if len(token) <= 6:
            return f"{m.group(1)}****"
        return f"{m.group(1)}****{token[-4:]}"

    return _CONSUMER_KEY_RE.sub(_mask, url)


def configure_logging_if_needed() -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


async def log_request(request: httpx.Request) -> None:
    logger.debug("HTTP %s %s", request.method, mask_consumer_key(str(request.url)))


def make_client(cfg: LoaderConfig, **kwargs) -> httpx.AsyncClient:
    timeout = httpx.Timeout(
        connect=cfg.connect_timeout,
        read=cfg.read_timeout,
        write=cfg.write_timeout,
        pool=cfg.pool_timeout,
    )
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"Accept": "application/json"},
        event_hooks={"request": [log_request]},
        follow_redirects=True,
        **kwargs,
    )


@asynccontextmanager
async def client_scope(cfg: LoaderConfig, client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    """Use the caller's client if given, else open (and close) a fresh one."""
    if client is not None:
        yield client
        return
    async with make_client(cfg) as owned:
        yield owned


def decode_json(content: bytes) -> Any:
    # .json.gz files are often served as application/octet-stream without Content-Encoding
    if content[:2] == GZIP_MAGIC:
        content = gzip.decompress(content)
    return json.loads(content)


async def load_json(client: httpx.AsyncClient, url: str) -> Any:
    t0 = time.perf_counter()
    try:
        r = await client.get(url)
    except httpx.HTTPError as e:
        elapsed = time.perf_counter() - t0
        logger.error(
            "%s GET %s after %.2fs error=%r",
            e.__class__.__name__,
            mask_consumer_key(url),
            elapsed,
            e,
        )
        raise UpstreamFetchError(url, detail=e.__class__.__name__) from e

    elapsed = time.perf_counter() - t0
    try:
        r.raise_for_status()
    except httpx.HTTPStatusError as e:
        snippet = (r.text or "")[:300]
        logger.error(
            "HTTP %d GET %s after %.2fs body_snippet=%r",
            r.status_code,
            mask_consumer_key(url),
            elapsed,
            snippet,
        )
        raise UpstreamFetchError(url, status=r.status_code) from e

    try:
        data = decode_json(r.content)
    except (OSError, EOFError, ValueError) as e:
        logger.error("Undecodable payload from %s: %r", mask_consumer_key(url), e)
        raise UpstreamFetchError(url, status=r.status_code, detail="invalid JSON payload") from e

    logger.debug("GET %s completed in %.2fs status=%d", mask_consumer_key(url), elapsed, r.status_code)
    return data


async def fetch_all(client: httpx.AsyncClient, locators: Mapping[K, str]) -> dict[K, Any]:
    """
    Fetch every locator concurrently and bind each payload back to its key.

    All-or-nothing: the first failure propagates and no partial result is returned.
    Keys keep the order in which the mapping was built.
    """
    keys = list(locators)
    tasks = [asyncio.ensure_future(load_json(client, locators[k])) for k in keys]
    try:
        payloads = await asyncio.gather(*tasks)
    except BaseException:
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return dict(zip(keys, payloads))
