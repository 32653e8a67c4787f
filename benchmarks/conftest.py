"""Benchmark fixtures and configuration."""

from __future__ import annotations

import pytest


@pytest.fixture
def large_document() -> str:
    """Generate a large document (~200 paragraphs, ~3000 words)."""
    paragraphs = []
    for i in range(200):
        paragraphs.append(
            f"Paragraph {i} opens here. It has a second sentence with a few more words. "
            f"The third sentence ends paragraph {i}!"
        )
    return "\n\n".join(paragraphs)
