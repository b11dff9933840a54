"""Test setup for mdtree."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (make real network calls)",
    )


SAMPLE_DOCUMENT = """\
# Test Document

This is the preamble.

## Introduction

This is the introduction section.

### Background

Some background.

## Installation

Instructions for installation.

### Prerequisites

```bash
npm install
## not a heading
```

## Usage

### Basic Usage

Call it.
"""


@pytest.fixture
def sample_document(tmp_path: Path) -> Path:
    """A small document with three level 2 sections."""
    path = tmp_path / "sample.md"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path
