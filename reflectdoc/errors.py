"""Exception hierarchy for reflectdoc."""

from __future__ import annotations


class ReflectDocError(RuntimeError):
    """Base class for errors raised by reflectdoc."""


class ConfigError(ReflectDocError):
    """Raised when the configuration file cannot be parsed."""


class ReflectionError(ReflectDocError):
    """Raised when a reflection document is missing or structurally invalid."""


__all__ = ["ConfigError", "ReflectDocError", "ReflectionError"]
