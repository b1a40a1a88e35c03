"""Render TypeDoc type descriptors as TypeScript-like strings."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from .logging import get_logger
from .models import TypeDescriptor

UNRESOLVED_TYPE = "<unresolved>"

# Descriptor tags that need parentheses when nested in the given position.
_IN_UNION = frozenset({"conditional"})
_IN_INTERSECTION = frozenset({"union", "conditional"})
_COMPOUND = frozenset({"union", "intersection", "conditional"})
# Postfix positions (`T[]`, `T?`, `T[K]`) also bind tighter than prefix operators.
_IN_POSTFIX = _COMPOUND | {"typeOperator", "predicate", "inferred"}


class UnresolvedTypeError(ValueError):
    """Raised internally when a descriptor cannot be rendered."""


class TypeRenderer:
    """Converts type descriptors into canonical strings.

    ``render`` never raises: descriptors that are malformed or use an
    unrecognised ``type`` tag degrade to :data:`UNRESOLVED_TYPE`.
    """

    def __init__(self, *, unresolved: str = UNRESOLVED_TYPE) -> None:
        self.unresolved = unresolved
        self.logger = get_logger("types")
        self._handlers: Dict[str, Callable[[TypeDescriptor], str]] = {
            "intrinsic": self._named,
            "unknown": self._named,
            "typeParameter": self._named,
            "reference": self._reference,
            "union": self._union,
            "intersection": self._intersection,
            "array": self._array,
            "tuple": self._tuple,
            "namedTupleMember": self._named_tuple_member,
            "optional": self._optional,
            "rest": self._rest,
            "literal": self._literal,
            "stringLiteral": self._literal,
            "typeOperator": self._type_operator,
            "indexedAccess": self._indexed_access,
            "query": self._query,
            "conditional": self._conditional,
            "predicate": self._predicate,
            "inferred": self._inferred,
            "templateLiteral": self._template_literal,
            "mapped": self._mapped,
            "reflection": self._reflection,
        }

    def render(self, descriptor: Optional[TypeDescriptor]) -> str:
        try:
            return self._render(descriptor)
        except (ValueError, KeyError, TypeError, AttributeError, RecursionError) as exc:
            self.logger.debug(
                "Could not render %s type descriptor: %s", _tag(descriptor) or "untagged", exc
            )
            return self.unresolved

    # ------------------------------------------------------------------
    # Dispatch

    def _render(self, descriptor: Any) -> str:
        if not isinstance(descriptor, Mapping):
            raise UnresolvedTypeError(f"expected a mapping, got {type(descriptor).__name__}")
        tag = descriptor.get("type")
        handler = self._handlers.get(tag) if isinstance(tag, str) else None
        if handler is None:
            raise UnresolvedTypeError(f"unsupported type tag {tag!r}")
        return handler(descriptor)

    def _nested(self, descriptor: Any, wrap: Iterable[str] = _COMPOUND) -> str:
        rendered = self._render(descriptor)
        if _tag(descriptor) in wrap or _is_function_type(descriptor):
            return f"({rendered})"
        return rendered

    def _join(self, descriptors: Sequence[Any], separator: str, wrap: Iterable[str]) -> str:
        if not descriptors:
            raise UnresolvedTypeError("empty type list")
        return separator.join(self._nested(item, wrap) for item in descriptors)

    # ------------------------------------------------------------------
    # Handlers

    def _named(self, descriptor: TypeDescriptor) -> str:
        name = descriptor.get("name")
        if not name:
            raise UnresolvedTypeError("named type without a name")
        return str(name)

    def _reference(self, descriptor: TypeDescriptor) -> str:
        name = self._named(descriptor)
        arguments = descriptor.get("typeArguments")
        if arguments:
            return f"{name}<{self._arguments(arguments)}>"
        return name

    def _arguments(self, arguments: Sequence[Any]) -> str:
        return ", ".join(self._render(argument) for argument in arguments)

    def _union(self, descriptor: TypeDescriptor) -> str:
        return self._join(descriptor["types"], " | ", _IN_UNION)

    def _intersection(self, descriptor: TypeDescriptor) -> str:
        return self._join(descriptor["types"], " & ", _IN_INTERSECTION)

    def _array(self, descriptor: TypeDescriptor) -> str:
        return f"{self._nested(descriptor['elementType'], _IN_POSTFIX)}[]"

    def _tuple(self, descriptor: TypeDescriptor) -> str:
        elements = descriptor.get("elements") or []
        return f"[{', '.join(self._render(element) for element in elements)}]"

    def _named_tuple_member(self, descriptor: TypeDescriptor) -> str:
        marker = "?" if descriptor.get("isOptional") else ""
        return f"{descriptor['name']}{marker}: {self._render(descriptor['element'])}"

    def _optional(self, descriptor: TypeDescriptor) -> str:
        return f"{self._nested(descriptor['elementType'], _IN_POSTFIX)}?"

    def _rest(self, descriptor: TypeDescriptor) -> str:
        return f"...{self._nested(descriptor['elementType'], _IN_POSTFIX)}"

    def _literal(self, descriptor: TypeDescriptor) -> str:
        if "value" not in descriptor:
            raise UnresolvedTypeError("literal without a value")
        value = descriptor["value"]
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return json.dumps(value)
        if isinstance(value, Mapping):
            # bigint literals: {"negative": bool, "value": "123"}
            sign = "-" if value.get("negative") else ""
            return f"{sign}{value['value']}n"
        if isinstance(value, (int, float)):
            return _format_number(value)
        raise UnresolvedTypeError(f"unsupported literal {value!r}")

    def _type_operator(self, descriptor: TypeDescriptor) -> str:
        operator = descriptor["operator"]
        return f"{operator} {self._nested(descriptor['target'])}"

    def _indexed_access(self, descriptor: TypeDescriptor) -> str:
        object_type = self._nested(descriptor["objectType"], _IN_POSTFIX)
        return f"{object_type}[{self._render(descriptor['indexType'])}]"

    def _query(self, descriptor: TypeDescriptor) -> str:
        return f"typeof {self._render(descriptor['queryType'])}"

    def _conditional(self, descriptor: TypeDescriptor) -> str:
        check = self._nested(descriptor["checkType"])
        extends = self._nested(descriptor["extendsType"], _IN_UNION)
        true_type = self._render(descriptor["trueType"])
        false_type = self._render(descriptor["falseType"])
        return f"{check} extends {extends} ? {true_type} : {false_type}"

    def _predicate(self, descriptor: TypeDescriptor) -> str:
        prefix = "asserts " if descriptor.get("asserts") else ""
        target = descriptor.get("targetType")
        if target is None:
            return f"{prefix}{descriptor['name']}"
        return f"{prefix}{descriptor['name']} is {self._render(target)}"

    def _inferred(self, descriptor: TypeDescriptor) -> str:
        constraint = descriptor.get("constraint")
        if constraint is not None:
            return f"infer {descriptor['name']} extends {self._render(constraint)}"
        return f"infer {descriptor['name']}"

    def _template_literal(self, descriptor: TypeDescriptor) -> str:
        parts: List[str] = [str(descriptor.get("head", ""))]
        for entry in descriptor.get("tail") or []:
            if not isinstance(entry, Sequence) or isinstance(entry, str) or len(entry) != 2:
                raise UnresolvedTypeError(f"malformed template literal span {entry!r}")
            span_type, text = entry
            parts.append("${" + self._render(span_type) + "}")
            parts.append(str(text))
        return "`" + "".join(parts) + "`"

    def _mapped(self, descriptor: TypeDescriptor) -> str:
        readonly = _modifier(descriptor.get("readonlyModifier"), "readonly ")
        optional = _modifier(descriptor.get("optionalModifier"), "?")
        key = f"{descriptor['parameter']} in {self._render(descriptor['parameterType'])}"
        name_type = descriptor.get("nameType")
        if name_type is not None:
            key += f" as {self._render(name_type)}"
        return f"{{ {readonly}[{key}]{optional}: {self._render(descriptor['templateType'])} }}"

    def _reflection(self, descriptor: TypeDescriptor) -> str:
        declaration = descriptor.get("declaration") or {}
        signatures = declaration.get("signatures")
        if signatures:
            return " | ".join(self._function_type(signature) for signature in signatures)

        members: List[str] = []
        for index_signature in _as_list(declaration.get("indexSignature")):
            parameters = index_signature.get("parameters") or []
            keys = ", ".join(self._parameter(parameter) for parameter in parameters)
            members.append(f"[{keys}]: {self._render(index_signature['type'])}")
        for child in declaration.get("children") or []:
            members.append(self._property(child))
        if not members:
            return "{}"
        return "{ " + "; ".join(members) + " }"

    # ------------------------------------------------------------------
    # Reflection helpers

    def _function_type(self, signature: Mapping[str, Any]) -> str:
        parameters = ", ".join(
            self._parameter(parameter) for parameter in signature.get("parameters") or []
        )
        return_type = signature.get("type")
        rendered = self._render(return_type) if return_type is not None else "void"
        return f"({parameters}) => {rendered}"

    def _parameter(self, parameter: Mapping[str, Any]) -> str:
        flags = parameter.get("flags") or {}
        name = parameter.get("name", "")
        prefix = "..." if flags.get("isRest") else ""
        marker = "?" if flags.get("isOptional") else ""
        parameter_type = parameter.get("type")
        if parameter_type is None:
            return f"{prefix}{name}{marker}"
        return f"{prefix}{name}{marker}: {self._render(parameter_type)}"

    def _property(self, child: Mapping[str, Any]) -> str:
        flags = child.get("flags") or {}
        readonly = "readonly " if flags.get("isReadonly") else ""
        marker = "?" if flags.get("isOptional") else ""
        child_type = child.get("type")
        if child_type is None and child.get("signatures"):
            rendered = self._function_type(child["signatures"][0])
        else:
            rendered = self._render(child_type)
        return f"{readonly}{child['name']}{marker}: {rendered}"


def _tag(descriptor: Any) -> Optional[str]:
    if isinstance(descriptor, Mapping):
        tag = descriptor.get("type")
        return tag if isinstance(tag, str) else None
    return None


def _is_function_type(descriptor: Any) -> bool:
    if _tag(descriptor) != "reflection":
        return False
    declaration = descriptor.get("declaration") or {}
    return bool(declaration.get("signatures"))


def _modifier(value: Any, text: str) -> str:
    if value == "-":
        return f"-{text}"
    if value == "+" or value is True:
        return text
    return ""


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_list(value: Any) -> List[Mapping[str, Any]]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [value]
    return list(value)


_DEFAULT_RENDERER = TypeRenderer()


def render(descriptor: Optional[TypeDescriptor]) -> str:
    """Render a type descriptor with the shared default renderer."""
    return _DEFAULT_RENDERER.render(descriptor)


__all__ = ["TypeRenderer", "UNRESOLVED_TYPE", "UnresolvedTypeError", "render"]
