"""Flatten TypeDoc reflection trees into renderer-agnostic documentation records."""

from .errors import ConfigError, ReflectDocError, ReflectionError
from .flattener import ReflectionFlattener, flatten
from .links import SourceLinker
from .models import DocRecord, ParentRef, ReflectionKind
from .reflection import load_reflection_tree, parse_reflection, parse_root
from .type_renderer import UNRESOLVED_TYPE, TypeRenderer, render

__all__ = [
    "ConfigError",
    "DocRecord",
    "ParentRef",
    "ReflectDocError",
    "ReflectionError",
    "ReflectionFlattener",
    "ReflectionKind",
    "SourceLinker",
    "TypeRenderer",
    "UNRESOLVED_TYPE",
    "flatten",
    "load_reflection_tree",
    "parse_reflection",
    "parse_root",
    "render",
]
