"""Git helpers used to pin source links to a revision."""

from .revision import DEFAULT_FALLBACK_REVISION, RevisionResolver, resolve_revision

__all__ = ["DEFAULT_FALLBACK_REVISION", "RevisionResolver", "resolve_revision"]
