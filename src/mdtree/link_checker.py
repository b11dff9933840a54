"""Check every link of a Markdown document, optionally following local documents."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable

import httpx

from mdtree.config import MDTREE_MAX_CONCURRENCY
from mdtree.exceptions import InputNotFoundError
from mdtree.file_utils import read_text_async
from mdtree.http_utils import create_client
from mdtree.links import classify_link
from mdtree.parser import list_links, parse_markdown
from mdtree.schemas import DocumentLinkReport, LinkCheckReport, LinkResult

logger = logging.getLogger(__name__)


def unique_urls(urls: Iterable[str]) -> list[str]:
    """Drop repeated URLs, keeping first-seen order."""
    return list(dict.fromkeys(urls))


class LinkChecker:
    """State for one link-check invocation.

    The visited set holds canonical paths of documents already scanned so
    documents that reference each other are each scanned once.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        recursive: bool = False,
        max_concurrency: int = MDTREE_MAX_CONCURRENCY,
    ) -> None:
        self._client = client
        self._recursive = recursive
        self._semaphore = asyncio.Semaphore(max(1, max_concurrency))
        self._visited: set[Path] = set()
        self.visited: list[Path] = []

    def claim(self, document: Path) -> bool:
        """Mark ``document`` visited; False if it already was.

        Runs without awaiting, so concurrent scans cannot both claim a path.
        """
        canonical = document.resolve()
        if canonical in self._visited:
            return False
        self._visited.add(canonical)
        self.visited.append(canonical)
        return True

    async def scan(self, document: Path) -> list[DocumentLinkReport]:
        """Check ``document`` (already claimed) and, if recursive, what it links to."""
        try:
            text = await read_text_async(document)
        except OSError as exc:
            logger.warning("Error reading file %s, skipping: %s", document, exc)
            return []

        urls = unique_urls(list_links(parse_markdown(text)))
        logger.info("Checking %d links in %s", len(urls), document)
        verdicts = await asyncio.gather(*(self._classify(url, document) for url in urls))
        report = DocumentLinkReport(
            source=document, results=[verdict for verdict in verdicts if verdict is not None]
        )

        reports = [report]
        if not self._recursive:
            return reports

        targets = [
            result.resolved_path
            for result in report.results
            if result.is_markdown_target and self.claim(result.resolved_path)
        ]
        for nested in await asyncio.gather(*(self.scan(target) for target in targets)):
            reports.extend(nested)
        return reports

    async def _classify(self, url: str, document: Path) -> LinkResult | None:
        async with self._semaphore:
            return await classify_link(url, document, client=self._client)


async def check_links(
    path: Path | str,
    *,
    recursive: bool = False,
    max_concurrency: int | None = None,
    client: httpx.AsyncClient | None = None,
) -> LinkCheckReport:
    """Check every unique link in ``path``.

    Args:
        path: Markdown document to scan.
        recursive: Also scan every existing local ``.md`` document linked,
            transitively, each at most once.
        max_concurrency: Maximum link checks in flight at once.
        client: Optional httpx.AsyncClient; one is created for the run if
            not provided.

    Returns:
        Per-document verdicts in discovery order.

    Raises:
        InputNotFoundError: If ``path`` does not exist.
    """
    source = Path(path)
    if not source.is_file():
        raise InputNotFoundError(source)

    limit = max_concurrency or MDTREE_MAX_CONCURRENCY

    async def run(http_client: httpx.AsyncClient) -> LinkCheckReport:
        checker = LinkChecker(client=http_client, recursive=recursive, max_concurrency=limit)
        checker.claim(source)
        documents = await checker.scan(source.resolve())
        return LinkCheckReport(documents=documents, visited=checker.visited)

    if client is not None:
        return await run(client)

    async with create_client() as new_client:
        return await run(new_client)
