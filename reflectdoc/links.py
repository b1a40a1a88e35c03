"""Source link formatting for flattened records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import SourceLocation, SourceRecord


@dataclass(frozen=True)
class SourceLinker:
    """Builds blob URLs pinned to one revision for the duration of a run."""

    repository_url: str
    revision: str

    def __post_init__(self) -> None:
        if not self.revision or not self.revision.strip():
            raise ValueError("A source revision is required to build links")
        if not self.repository_url or not self.repository_url.strip():
            raise ValueError("A repository URL is required to build links")

    def link(self, path: str, line: Optional[int] = None) -> str:
        """Return ``{repository}/blob/{revision}/{path}`` with an optional ``#L{line}`` anchor."""

        base = self.repository_url.strip().rstrip("/")
        normalized = path.replace("\\", "/")
        while normalized.startswith("./"):
            normalized = normalized[2:]
        normalized = normalized.lstrip("/")
        url = f"{base}/blob/{self.revision.strip()}/{normalized}"
        if line is not None:
            url += f"#L{line}"
        return url

    def source(self, location: SourceLocation) -> SourceRecord:
        return SourceRecord(
            path=location.file,
            line=location.line,
            character=location.column,
            link=self.link(location.file, location.line),
        )


__all__ = ["SourceLinker"]
