"""Local configuration for mdtree."""

from __future__ import annotations

import os

DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 1
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_USER_AGENT = "mdtree/0.1 (markdown link checker)"

INDEX_FILENAME = "index.md"

MDTREE_FETCH_TIMEOUT_S = float(os.getenv("MDTREE_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
MDTREE_FETCH_MAX_RETRIES = int(os.getenv("MDTREE_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
MDTREE_FETCH_BACKOFF_S = float(os.getenv("MDTREE_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
# Upper bound on link checks in flight at once.
MDTREE_MAX_CONCURRENCY = int(os.getenv("MDTREE_MAX_CONCURRENCY", str(DEFAULT_MAX_CONCURRENCY)))
MDTREE_USER_AGENT = os.getenv("MDTREE_USER_AGENT", DEFAULT_USER_AGENT)
