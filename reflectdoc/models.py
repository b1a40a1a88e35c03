"""Reflection node variants and the flattened documentation records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Union

# Raw TypeDoc type descriptor, e.g. {"type": "intrinsic", "name": "string"}.
TypeDescriptor = Mapping[str, Any]

DEFAULT_EXPORT_NAME = "default"


class ReflectionKind(str, Enum):
    """Node kinds understood by the flattener, valued by their TypeDoc labels."""

    PROJECT = "Project"
    MODULE = "Module"
    CLASS = "Class"
    INTERFACE = "Interface"
    TYPE_ALIAS = "Type alias"
    VARIABLE = "Variable"
    FUNCTION = "Function"
    METHOD = "Method"
    CONSTRUCTOR = "Constructor"
    ACCESSOR = "Accessor"


# ----------------------------------------------------------------------
# Input: reflection tree


@dataclass(frozen=True)
class SourceLocation:
    """Where a declaration lives in the analysed codebase."""

    file: str
    line: Optional[int] = None
    column: Optional[int] = None


@dataclass(frozen=True)
class Flags:
    """Declaration flags; None when the key is missing from the input."""

    is_const: Optional[bool] = None
    is_optional: Optional[bool] = None


@dataclass(frozen=True)
class TypeParameter:
    name: str
    comment: Optional[str] = None


@dataclass(frozen=True)
class Parameter:
    name: Optional[str] = None
    comment: Optional[str] = None
    type: Optional[TypeDescriptor] = None
    flags: Optional[Flags] = None


@dataclass(frozen=True)
class Signature:
    """One callable shape: call, construct, get or set."""

    name: Optional[str] = None
    comment: Optional[str] = None
    parameters: Optional[Tuple[Parameter, ...]] = None
    type: Optional[TypeDescriptor] = None


@dataclass(frozen=True)
class _Reflection:
    kind: ClassVar[ReflectionKind]

    name: Optional[str] = None
    comment: Optional[str] = None
    sources: Optional[Tuple[SourceLocation, ...]] = None

    @property
    def kind_label(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class ProjectNode(_Reflection):
    """Root of a single entry point project."""

    kind: ClassVar[ReflectionKind] = ReflectionKind.PROJECT

    children: Tuple["ReflectionNode", ...] = ()


@dataclass(frozen=True)
class ModuleNode(_Reflection):
    kind: ClassVar[ReflectionKind] = ReflectionKind.MODULE

    children: Tuple["ReflectionNode", ...] = ()


@dataclass(frozen=True)
class ClassNode(_Reflection):
    kind: ClassVar[ReflectionKind] = ReflectionKind.CLASS

    type_parameters: Optional[Tuple[TypeParameter, ...]] = None
    extended_types: Optional[Tuple[TypeDescriptor, ...]] = None
    children: Tuple["ReflectionNode", ...] = ()


@dataclass(frozen=True)
class InterfaceNode(_Reflection):
    kind: ClassVar[ReflectionKind] = ReflectionKind.INTERFACE

    children: Tuple["ReflectionNode", ...] = ()


@dataclass(frozen=True)
class TypeAliasNode(_Reflection):
    kind: ClassVar[ReflectionKind] = ReflectionKind.TYPE_ALIAS

    type_parameters: Optional[Tuple[TypeParameter, ...]] = None
    type: Optional[TypeDescriptor] = None


@dataclass(frozen=True)
class VariableNode(_Reflection):
    kind: ClassVar[ReflectionKind] = ReflectionKind.VARIABLE

    type: Optional[TypeDescriptor] = None
    flags: Optional[Flags] = None


@dataclass(frozen=True)
class FunctionNode(_Reflection):
    kind: ClassVar[ReflectionKind] = ReflectionKind.FUNCTION

    signatures: Optional[Tuple[Signature, ...]] = None


@dataclass(frozen=True)
class MethodNode(_Reflection):
    kind: ClassVar[ReflectionKind] = ReflectionKind.METHOD

    signatures: Optional[Tuple[Signature, ...]] = None


@dataclass(frozen=True)
class ConstructorNode(_Reflection):
    kind: ClassVar[ReflectionKind] = ReflectionKind.CONSTRUCTOR

    signatures: Optional[Tuple[Signature, ...]] = None
    type: Optional[TypeDescriptor] = None


@dataclass(frozen=True)
class AccessorNode(_Reflection):
    kind: ClassVar[ReflectionKind] = ReflectionKind.ACCESSOR

    get_signatures: Optional[Tuple[Signature, ...]] = None
    set_signatures: Optional[Tuple[Signature, ...]] = None


@dataclass(frozen=True)
class UnknownNode:
    """A reflection whose kind is outside the supported set (enums, properties, ...)."""

    label: str
    name: Optional[str] = None

    @property
    def kind_label(self) -> str:
        return self.label


ReflectionNode = Union[
    ProjectNode,
    ModuleNode,
    ClassNode,
    InterfaceNode,
    TypeAliasNode,
    VariableNode,
    FunctionNode,
    MethodNode,
    ConstructorNode,
    AccessorNode,
    UnknownNode,
]

ContainerNode = Union[ProjectNode, ModuleNode]


# ----------------------------------------------------------------------
# Output: flattened records


@dataclass(frozen=True)
class ParentRef:
    """Kind and name of the enclosing node; never the node itself."""

    kind: str
    name: Optional[str]

    @classmethod
    def of(cls, node: ReflectionNode) -> "ParentRef":
        return cls(kind=node.kind_label, name=node.name)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "name": self.name}


@dataclass(frozen=True)
class GenericRecord:
    name: str
    comment: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "comment": self.comment}


@dataclass(frozen=True)
class SourceRecord:
    path: str
    line: Optional[int]
    character: Optional[int]
    link: str

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            (
                ("path", self.path),
                ("line", self.line),
                ("character", self.character),
                ("link", self.link),
            )
        )


@dataclass(frozen=True)
class ParameterRecord:
    name: Optional[str] = None
    comment: Optional[str] = None
    optional: Optional[bool] = None
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            (
                ("name", self.name),
                ("comment", self.comment),
                ("optional", self.optional),
                ("type", self.type),
            )
        )


@dataclass(frozen=True)
class SignatureRecord:
    kind: str
    name: Optional[str] = None
    comment: Optional[str] = None
    parameters: Optional[Tuple[ParameterRecord, ...]] = None
    type: Optional[str] = None
    getter: Optional[bool] = None
    setter: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        parameters = None
        if self.parameters is not None:
            parameters = [parameter.to_dict() for parameter in self.parameters]
        return _compact(
            (
                ("kind", self.kind),
                ("name", self.name),
                ("comment", self.comment),
                ("getter", self.getter),
                ("setter", self.setter),
                ("parameters", parameters),
                ("type", self.type),
            )
        )


@dataclass(frozen=True)
class DocRecord:
    """Flattened, renderer-agnostic metadata for one declaration.

    ``name`` and ``comment`` are part of the seeded base and are always
    serialised, even when null. Every other field is omitted when absent.
    """

    parent: Optional[ParentRef] = None
    kind: Optional[str] = None
    name: Optional[str] = None
    comment: Optional[str] = None
    generics: Optional[Tuple[GenericRecord, ...]] = None
    extends: Optional[Tuple[str, ...]] = None
    constant: Optional[bool] = None
    type: Optional[str] = None
    sources: Optional[Tuple[SourceRecord, ...]] = None
    signatures: Optional[Tuple[SignatureRecord, ...]] = None
    children: Optional[Tuple["DocRecord", ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.parent is not None:
            data["parent"] = self.parent.to_dict()
        if self.kind is not None:
            data["kind"] = self.kind
        data["name"] = self.name
        data["comment"] = self.comment
        if self.generics is not None:
            data["generics"] = [generic.to_dict() for generic in self.generics]
        if self.extends is not None:
            data["extends"] = list(self.extends)
        if self.constant is not None:
            data["constant"] = self.constant
        if self.type is not None:
            data["type"] = self.type
        if self.sources is not None:
            data["sources"] = [source.to_dict() for source in self.sources]
        if self.signatures is not None:
            data["signatures"] = [signature.to_dict() for signature in self.signatures]
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        return data


def _compact(items: Tuple[Tuple[str, Any], ...]) -> Dict[str, Any]:
    return {key: value for key, value in items if value is not None}


__all__ = [
    "AccessorNode",
    "ClassNode",
    "ConstructorNode",
    "ContainerNode",
    "DEFAULT_EXPORT_NAME",
    "DocRecord",
    "Flags",
    "FunctionNode",
    "GenericRecord",
    "InterfaceNode",
    "MethodNode",
    "ModuleNode",
    "Parameter",
    "ParameterRecord",
    "ParentRef",
    "ProjectNode",
    "ReflectionKind",
    "ReflectionNode",
    "SignatureRecord",
    "Signature",
    "SourceLocation",
    "SourceRecord",
    "TypeAliasNode",
    "TypeDescriptor",
    "TypeParameter",
    "UnknownNode",
    "VariableNode",
]
