"""HTTP reachability checks with retry logic and connection pooling."""

from __future__ import annotations

import asyncio
from typing import Final

import httpx

from mdtree.config import (
    MDTREE_FETCH_BACKOFF_S,
    MDTREE_FETCH_MAX_RETRIES,
    MDTREE_FETCH_TIMEOUT_S,
    MDTREE_USER_AGENT,
)
from mdtree.exceptions import FetchError

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

# Servers that refuse HEAD are retried with GET.
HEAD_REJECTED_STATUS_CODES: Final[frozenset[int]] = frozenset({403, 405, 501})

_MAX_REDIRECTS: Final[int] = 5


def create_client() -> httpx.AsyncClient:
    """Build the shared client used for one link-check run."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(MDTREE_FETCH_TIMEOUT_S),
        headers={"User-Agent": MDTREE_USER_AGENT},
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    )


async def probe_url(url: str, *, client: httpx.AsyncClient | None = None) -> int:
    """Return the final HTTP status code for ``url``.

    Sends HEAD first and falls back to GET when the server rejects HEAD.
    Transient statuses and transport errors are retried with exponential
    backoff; the last retryable status is returned once retries run out.

    Args:
        url: The http(s) URL to probe.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.

    Returns:
        The status code of the last response.

    Raises:
        FetchError: If no response could be obtained (timeout, DNS failure,
            refused connection, too many redirects).
    """

    async def do_probe(http_client: httpx.AsyncClient) -> int:
        last_exc: Exception | None = None
        last_status: int | None = None

        for attempt in range(MDTREE_FETCH_MAX_RETRIES + 1):
            try:
                response = await http_client.head(url)
                if response.status_code in HEAD_REJECTED_STATUS_CODES:
                    response = await http_client.get(url)

                last_status = response.status_code
                if response.status_code not in RETRY_STATUS_CODES:
                    return response.status_code
            except httpx.InvalidURL as exc:
                raise FetchError(f"Invalid URL {url}: {exc}") from exc
            except httpx.HTTPError as exc:
                last_exc = exc

            if attempt < MDTREE_FETCH_MAX_RETRIES:
                backoff = MDTREE_FETCH_BACKOFF_S * (2**attempt)
                await asyncio.sleep(backoff)

        if last_status is not None:
            return last_status
        raise FetchError(f"Failed to reach {url}: {last_exc}")

    if client is not None:
        return await do_probe(client)

    async with create_client() as new_client:
        return await do_probe(new_client)
