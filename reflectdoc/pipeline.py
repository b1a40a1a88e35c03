"""Run orchestration: load the tree, pin a revision, flatten, write."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import ReflectDocConfig, load_config
from .errors import ConfigError
from .flattener import ReflectionFlattener
from .git.revision import RevisionResolver
from .links import SourceLinker
from .logging import get_logger
from .models import DocRecord
from .output import build_payload, read_package_version, write_records
from .reflection import load_reflection_tree
from .type_renderer import TypeRenderer


@dataclass
class FlattenOutcome:
    """Result of a flatten run."""

    records: List[DocRecord]
    payload: Dict[str, Any]
    revision: str
    output_path: Optional[Path]


class Pipeline:
    """Coordinates a single flatten run for a project checkout."""

    def __init__(
        self,
        resolver: RevisionResolver | None = None,
        renderer: TypeRenderer | None = None,
    ) -> None:
        self._resolver = resolver
        self.renderer = renderer or TypeRenderer()
        self.logger = get_logger("pipeline")

    def run(
        self,
        path: str | Path,
        *,
        input_path: Path | None = None,
        output_path: Path | None = None,
        write: bool = True,
        revision: str | None = None,
        repository_url: str | None = None,
        expand_modules: bool | None = None,
    ) -> FlattenOutcome:
        """Flatten the reflection document for ``path``; explicit arguments override config."""
        root = Path(path).expanduser().resolve()
        config = load_config(root)
        source_file = input_path or config.input
        target = output_path or config.output

        url = (repository_url or config.source.repository_url or "").strip()
        if not url:
            raise ConfigError(
                "No repository URL configured; set source.repository_url or pass --repository-url"
            )
        pinned = self._pin_revision(revision, config)

        self.logger.info("Reading reflections from %s", source_file)
        tree = load_reflection_tree(source_file)
        self.logger.info(
            "Loaded documentation for %s with %d children to read from",
            tree.name or "<unnamed>",
            len(tree.children),
        )

        linker = SourceLinker(repository_url=url, revision=pinned)
        expand = config.flatten.expand_modules if expand_modules is None else expand_modules
        flattener = ReflectionFlattener(linker, self.renderer, expand_modules=expand)
        records = flattener.flatten(tree)
        self.logger.info("Received %d records", len(records))

        payload = build_payload(
            records,
            project=tree.name,
            revision=pinned,
            version=read_package_version(root),
        )
        written: Optional[Path] = None
        if write:
            written = write_records(target, payload)
            self.logger.info("Wrote records to %s", written)
        return FlattenOutcome(records=records, payload=payload, revision=pinned, output_path=written)

    def _pin_revision(self, revision: str | None, config: ReflectDocConfig) -> str:
        for value, origin in ((revision, "--revision"), (config.source.revision, "source.revision")):
            if value is None:
                continue
            if not value.strip():
                raise ConfigError(f"{origin} must not be empty")
            return value.strip()
        return self._resolve_revision(config)

    def _resolve_revision(self, config: ReflectDocConfig) -> str:
        resolver = self._resolver or RevisionResolver(fallback=config.source.fallback_revision)
        return resolver.resolve(config.root)


__all__ = ["FlattenOutcome", "Pipeline"]
