"""Classify link URLs and verify that their targets resolve."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from urllib.parse import unquote

import httpx

from mdtree.exceptions import FetchError
from mdtree.http_utils import probe_url
from mdtree.schemas import LinkResult

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)
_MAILTO_PREFIX = "mailto:"

REASON_EMAIL = "email"
REASON_UNREACHABLE = "unreachable"
REASON_FILE_NOT_FOUND = "file not found"


def is_email(url: str) -> bool:
    """True for a bare ``local-part@domain.tld`` address."""
    return bool(_EMAIL_RE.match(url))


def resolve_local_target(url: str, source_document: Path) -> Path:
    """Resolve a local link relative to the directory of ``source_document``.

    Any ``#anchor`` or ``?query`` suffix is dropped and percent-escapes are
    decoded before resolution.
    """
    target = re.split(r"[#?]", url, maxsplit=1)[0]
    target_path = Path(unquote(target))
    if not target_path.is_absolute():
        target_path = source_document.parent / target_path
    return target_path.resolve()


async def classify_link(
    url: str,
    source_document: Path,
    *,
    client: httpx.AsyncClient | None = None,
) -> LinkResult | None:
    """Classify ``url`` found in ``source_document`` and check its target.

    Pure ``#fragment`` links return None and are not reported at all.
    Email addresses are skipped, http(s) URLs are probed over the network,
    and everything else is treated as a path on the local filesystem.
    """
    url = url.strip()
    if not url or url.startswith("#"):
        return None

    if url.lower().startswith(_MAILTO_PREFIX) or is_email(url):
        return LinkResult(
            url=url,
            source=source_document,
            category="email",
            status="skipped",
            reason=REASON_EMAIL,
        )

    if _HTTP_RE.match(url):
        return await _check_remote(url, source_document, client=client)

    target = resolve_local_target(url, source_document)
    if target.exists():
        return LinkResult(
            url=url, source=source_document, category="local", status="ok", resolved_path=target
        )
    return LinkResult(
        url=url,
        source=source_document,
        category="local",
        status="broken",
        reason=REASON_FILE_NOT_FOUND,
        resolved_path=target,
    )


async def _check_remote(
    url: str, source_document: Path, *, client: httpx.AsyncClient | None
) -> LinkResult:
    try:
        status_code = await probe_url(url, client=client)
    except FetchError as exc:
        logger.debug("Link %s is unreachable: %s", url, exc)
        return LinkResult(
            url=url,
            source=source_document,
            category="http",
            status="broken",
            reason=REASON_UNREACHABLE,
        )

    if status_code < 400:
        return LinkResult(url=url, source=source_document, category="http", status="ok")
    return LinkResult(
        url=url,
        source=source_document,
        category="http",
        status="broken",
        reason=f"HTTP {status_code}",
    )
