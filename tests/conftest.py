from __future__ import annotations

import pytest

from reflectdoc.links import SourceLinker

REPOSITORY_URL = "https://github.com/auguwu/collections"


@pytest.fixture
def linker() -> SourceLinker:
    """Provide a linker pinned to a fixed revision."""
    return SourceLinker(repository_url=REPOSITORY_URL, revision="abc123")
