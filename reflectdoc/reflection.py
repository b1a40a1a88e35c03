"""Read TypeDoc JSON output into typed reflection nodes."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import ReflectionError
from .logging import get_logger
from .models import (
    AccessorNode,
    ClassNode,
    ConstructorNode,
    ContainerNode,
    Flags,
    FunctionNode,
    InterfaceNode,
    MethodNode,
    ModuleNode,
    Parameter,
    ProjectNode,
    ReflectionKind,
    ReflectionNode,
    Signature,
    SourceLocation,
    TypeAliasNode,
    TypeParameter,
    UnknownNode,
    VariableNode,
)

_LOGGER = get_logger("reflection")

# TypeDoc >= 0.23 dropped ``kindString`` and only emits the numeric kind.
_KIND_CODES: Dict[int, ReflectionKind] = {
    0x1: ReflectionKind.PROJECT,
    0x2: ReflectionKind.MODULE,
    0x20: ReflectionKind.VARIABLE,
    0x40: ReflectionKind.FUNCTION,
    0x80: ReflectionKind.CLASS,
    0x100: ReflectionKind.INTERFACE,
    0x200: ReflectionKind.CONSTRUCTOR,
    0x800: ReflectionKind.METHOD,
    0x40000: ReflectionKind.ACCESSOR,
    0x200000: ReflectionKind.TYPE_ALIAS,
}

_KIND_LABELS: Dict[str, ReflectionKind] = {kind.value.lower(): kind for kind in ReflectionKind}

# Labels for numeric kinds outside the supported set, used for parent refs and logs.
_OTHER_KIND_LABELS: Dict[int, str] = {
    0x4: "Namespace",
    0x8: "Enum",
    0x10: "Enum Member",
    0x400: "Property",
    0x1000: "Call signature",
    0x2000: "Index signature",
    0x4000: "Constructor signature",
    0x8000: "Parameter",
    0x10000: "Type literal",
    0x20000: "Type parameter",
    0x80000: "Get signature",
    0x100000: "Set signature",
    0x400000: "Reference",
}


def load_reflection_tree(path: Path) -> ContainerNode:
    """Load a TypeDoc JSON document from disk and parse its root."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ReflectionError(f"Reflection document not found: {path}") from exc
    except OSError as exc:
        raise ReflectionError(f"Could not read {path}: {exc}") from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ReflectionError(f"{path.name} is not valid JSON: {exc}") from exc
    return parse_root(data)


def parse_root(data: Any) -> ContainerNode:
    """Parse the top level reflection; it must be a project or module."""
    if not isinstance(data, Mapping):
        raise ReflectionError("Reflection root must be a JSON object")
    node = parse_reflection(data)
    if not isinstance(node, (ProjectNode, ModuleNode)):
        # Roots produced by older TypeDoc versions sometimes omit the kind.
        node = ProjectNode(
            name=_as_str(data.get("name")),
            comment=_comment(data.get("comment")),
            children=_children(data, "$"),
        )
    return node


def parse_reflection(data: Any, *, path: str = "$") -> ReflectionNode:
    """Convert one raw reflection mapping into its node variant."""
    if not isinstance(data, Mapping):
        raise ReflectionError(f"Reflection at {path} must be a JSON object")

    kind, label = _resolve_kind(data)
    name = _as_str(data.get("name"))
    if kind is None:
        _LOGGER.debug("Reflection %s (%r) has unsupported kind %r", path, name, label)
        return UnknownNode(label=label, name=name)

    common = dict(
        name=name,
        comment=_comment(data.get("comment")),
        sources=_sources(data.get("sources")),
    )
    if kind is ReflectionKind.PROJECT:
        return ProjectNode(children=_children(data, path), **common)
    if kind is ReflectionKind.MODULE:
        return ModuleNode(children=_children(data, path), **common)
    if kind is ReflectionKind.CLASS:
        return ClassNode(
            type_parameters=_type_parameters(data),
            extended_types=_type_list(data.get("extendedTypes")),
            children=_children(data, path),
            **common,
        )
    if kind is ReflectionKind.INTERFACE:
        return InterfaceNode(children=_children(data, path), **common)
    if kind is ReflectionKind.TYPE_ALIAS:
        return TypeAliasNode(
            type_parameters=_type_parameters(data),
            type=_type(data.get("type")),
            **common,
        )
    if kind is ReflectionKind.VARIABLE:
        return VariableNode(type=_type(data.get("type")), flags=_flags(data.get("flags")), **common)
    if kind is ReflectionKind.FUNCTION:
        return FunctionNode(signatures=_signatures(data.get("signatures")), **common)
    if kind is ReflectionKind.METHOD:
        return MethodNode(signatures=_signatures(data.get("signatures")), **common)
    if kind is ReflectionKind.CONSTRUCTOR:
        return ConstructorNode(
            signatures=_signatures(data.get("signatures")),
            type=_type(data.get("type")),
            **common,
        )
    if kind is ReflectionKind.ACCESSOR:
        return AccessorNode(
            get_signatures=_signatures(_first_present(data, "getSignatures", "getSignature")),
            set_signatures=_signatures(_first_present(data, "setSignatures", "setSignature")),
            **common,
        )
    raise AssertionError(f"Unhandled reflection kind {kind}")  # pragma: no cover


# ----------------------------------------------------------------------
# Field readers


def _resolve_kind(data: Mapping[str, Any]) -> Tuple[Optional[ReflectionKind], str]:
    label = data.get("kindString")
    if isinstance(label, str) and label.strip():
        return _KIND_LABELS.get(label.strip().lower()), label.strip()

    code = data.get("kind")
    if isinstance(code, int) and not isinstance(code, bool):
        kind = _KIND_CODES.get(code)
        if kind is not None:
            return kind, kind.value
        return None, _OTHER_KIND_LABELS.get(code, f"Kind {code}")
    if isinstance(code, str) and code.strip():
        return _KIND_LABELS.get(code.strip().lower()), code.strip()
    return None, "Unknown"


def _children(data: Mapping[str, Any], path: str) -> Tuple[ReflectionNode, ...]:
    raw = data.get("children")
    if raw is None:
        return ()
    if not isinstance(raw, list):
        _LOGGER.warning("Ignoring non-list children of reflection at %s", path)
        return ()
    return tuple(_child(child, f"{path}.children[{index}]") for index, child in enumerate(raw))


def _child(raw: Any, path: str) -> ReflectionNode:
    if not isinstance(raw, Mapping):
        _LOGGER.debug("Reflection at %s is a %s, not an object", path, type(raw).__name__)
        return UnknownNode(label="Unknown")
    return parse_reflection(raw, path=path)


def _comment(raw: Any) -> Optional[str]:
    """Return the summary text of a comment, from either TypeDoc comment format."""
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw.strip()
    if not isinstance(raw, Mapping):
        return None
    short_text = raw.get("shortText")
    if isinstance(short_text, str):
        return short_text.strip()
    summary = raw.get("summary")
    if isinstance(summary, list):
        parts = [part.get("text", "") for part in summary if isinstance(part, Mapping)]
        return "".join(str(part) for part in parts).strip()
    return None


def _sources(raw: Any) -> Optional[Tuple[SourceLocation, ...]]:
    if not isinstance(raw, list):
        return None
    locations: List[SourceLocation] = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            continue
        file_name = entry.get("fileName", entry.get("file"))
        if not isinstance(file_name, str):
            continue
        locations.append(
            SourceLocation(
                file=file_name,
                line=_as_int(entry.get("line")),
                column=_as_int(entry.get("character", entry.get("column"))),
            )
        )
    return tuple(locations)


def _type_parameters(data: Mapping[str, Any]) -> Optional[Tuple[TypeParameter, ...]]:
    raw = _first_present(data, "typeParameter", "typeParameters")
    if not isinstance(raw, list):
        return None
    return tuple(
        TypeParameter(name=str(entry.get("name", "")), comment=_comment(entry.get("comment")))
        for entry in raw
        if isinstance(entry, Mapping)
    )


def _signatures(raw: Any) -> Optional[Tuple[Signature, ...]]:
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        raw = [raw]
    if not isinstance(raw, list):
        return None
    return tuple(_signature(entry) for entry in raw if isinstance(entry, Mapping))


def _signature(raw: Mapping[str, Any]) -> Signature:
    parameters = raw.get("parameters")
    parsed: Optional[Tuple[Parameter, ...]] = None
    if isinstance(parameters, list):
        parsed = tuple(_parameter(entry) for entry in parameters if isinstance(entry, Mapping))
    return Signature(
        name=_as_str(raw.get("name")),
        comment=_comment(raw.get("comment")),
        parameters=parsed,
        type=_type(raw.get("type")),
    )


def _parameter(raw: Mapping[str, Any]) -> Parameter:
    return Parameter(
        name=_as_str(raw.get("name")),
        comment=_comment(raw.get("comment")),
        type=_type(raw.get("type")),
        flags=_flags(raw.get("flags")),
    )


def _flags(raw: Any) -> Optional[Flags]:
    if not isinstance(raw, Mapping):
        return None
    return Flags(
        is_const=_as_flag(raw.get("isConst")),
        is_optional=_as_flag(raw.get("isOptional")),
    )


def _type(raw: Any) -> Optional[Mapping[str, Any]]:
    return raw if isinstance(raw, Mapping) else None


def _type_list(raw: Any) -> Optional[Tuple[Mapping[str, Any], ...]]:
    if not isinstance(raw, Sequence) or isinstance(raw, str):
        return None
    return tuple(entry for entry in raw if isinstance(entry, Mapping))


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_flag(value: Any) -> Optional[bool]:
    return None if value is None else bool(value)


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    return value if isinstance(value, int) else None


__all__ = ["load_reflection_tree", "parse_reflection", "parse_root"]
