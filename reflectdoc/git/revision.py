"""Resolve the commit that generated source links should point at."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable

from ..logging import get_logger

DEFAULT_FALLBACK_REVISION = "master"


class RevisionResolver:
    """Looks up ``HEAD`` for a repository, degrading to a fixed fallback."""

    def __init__(
        self,
        runner: Callable[..., str] | None = None,
        *,
        fallback: str = DEFAULT_FALLBACK_REVISION,
    ) -> None:
        if not fallback or not fallback.strip():
            raise ValueError("Fallback revision must not be empty")
        self._runner = runner or self._default_runner
        self.fallback = fallback.strip()
        self.logger = get_logger("git")

    def resolve(self, repo_path: str | Path) -> str:
        """Return the current commit hash, or the fallback when git cannot answer."""
        repo = Path(repo_path)
        try:
            output = self._run(["git", "rev-parse", "HEAD"], cwd=repo, capture_output=True)
        except Exception as exc:
            self.logger.warning(
                "Could not resolve revision for %s (%s); using %s", repo, exc, self.fallback
            )
            return self.fallback

        lines = output.strip().splitlines() if output else []
        revision = lines[0].strip() if lines else ""
        if not revision:
            self.logger.warning("git rev-parse returned no revision; using %s", self.fallback)
            return self.fallback
        self.logger.debug("Resolved revision %s for %s", revision, repo)
        return revision

    def _run(
        self,
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        return self._runner(args, cwd=cwd, capture_output=capture_output)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


def resolve_revision(
    repo_path: str | Path,
    *,
    fallback: str = DEFAULT_FALLBACK_REVISION,
    runner: Callable[..., str] | None = None,
) -> str:
    """Convenience wrapper around :class:`RevisionResolver`."""
    return RevisionResolver(runner, fallback=fallback).resolve(repo_path)


__all__ = ["DEFAULT_FALLBACK_REVISION", "RevisionResolver", "resolve_revision"]
