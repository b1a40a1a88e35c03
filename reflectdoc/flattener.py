"""Flatten a reflection tree into documentation records."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from .links import SourceLinker
from .logging import get_logger
from .models import (
    DEFAULT_EXPORT_NAME,
    AccessorNode,
    ClassNode,
    ConstructorNode,
    ContainerNode,
    DocRecord,
    FunctionNode,
    GenericRecord,
    InterfaceNode,
    MethodNode,
    ModuleNode,
    ParameterRecord,
    ParentRef,
    ProjectNode,
    ReflectionNode,
    Signature,
    SignatureRecord,
    SourceLocation,
    SourceRecord,
    TypeAliasNode,
    TypeParameter,
    VariableNode,
)
from .type_renderer import TypeRenderer

# Member kinds that only make sense inside a class or interface.
_MEMBER_ONLY = (ConstructorNode, MethodNode, AccessorNode)

Fields = Dict[str, Any]


class ReflectionFlattener:
    """Walks a reflection tree and emits one record per accepted top-level node.

    Class and interface members are embedded under their owner's ``children``
    and never appear in the top-level sequence. Records only reference their
    parent by kind and name.
    """

    def __init__(
        self,
        linker: SourceLinker,
        renderer: TypeRenderer | None = None,
        *,
        expand_modules: bool = False,
    ) -> None:
        self.linker = linker
        self.renderer = renderer or TypeRenderer()
        self.expand_modules = expand_modules
        self.logger = get_logger("flattener")
        self._extractors: Dict[Type[Any], Callable[[Any, Optional[ReflectionNode]], Fields]] = {
            ClassNode: self._extract_class,
            InterfaceNode: self._extract_interface,
            VariableNode: self._extract_variable,
            TypeAliasNode: self._extract_type_alias,
            FunctionNode: self._extract_function,
            ConstructorNode: self._extract_constructor,
            MethodNode: self._extract_method,
            AccessorNode: self._extract_accessor,
        }

    def accepts(self, node: ReflectionNode) -> bool:
        return type(node) in self._extractors

    def flatten(self, root: ContainerNode) -> List[DocRecord]:
        records: List[DocRecord] = []
        for child in root.children:
            if self.expand_modules and isinstance(child, ModuleNode):
                records.extend(self._flatten_children(child))
                continue
            if not self.accepts(child):
                self.logger.debug("Skipping %s reflection %r", child.kind_label, child.name)
                continue
            records.append(self.extract(child, root))
        self.logger.debug("Flattened %d records from %r", len(records), root.name)
        return records

    def extract(self, node: ReflectionNode, parent: Optional[ReflectionNode] = None) -> DocRecord:
        """Build the record for ``node``; unsupported or guarded nodes keep only the seeded base."""
        seed: Fields = {"parent": ParentRef.of(parent) if parent is not None else None}
        extractor = self._extractors.get(type(node))
        if extractor is None:
            return DocRecord(**seed)
        if isinstance(node, _MEMBER_ONLY) and _is_module_level(parent):
            self.logger.debug(
                "Ignoring %s %r declared at module level", node.kind_label, node.name
            )
            return DocRecord(**seed)
        seed.update(extractor(node, parent))
        return DocRecord(**seed)

    def _flatten_children(self, container: ModuleNode) -> List[DocRecord]:
        return [
            self.extract(child, container)
            for child in container.children
            if self.accepts(child)
        ]

    # ------------------------------------------------------------------
    # Extractors

    def _extract_class(self, node: ClassNode, parent: Optional[ReflectionNode]) -> Fields:
        fields: Fields = {
            "kind": "Class",
            "name": _display_name(node.name, parent),
            "comment": node.comment,
            "generics": self._generics(node.type_parameters),
            "extends": self._extends(node),
            "sources": self._sources(node.sources),
        }
        fields["children"] = self._members(node)
        return fields

    def _extract_interface(self, node: InterfaceNode, parent: Optional[ReflectionNode]) -> Fields:
        return {
            "kind": "Interface",
            "name": _display_name(node.name, parent),
            "comment": node.comment,
            "sources": self._sources(node.sources),
            "children": self._members(node),
        }

    def _extract_variable(self, node: VariableNode, parent: Optional[ReflectionNode]) -> Fields:
        return {
            "kind": "Variable",
            "name": node.name,
            "comment": node.comment,
            "constant": node.flags.is_const if node.flags is not None else None,
            "type": self._type(node.type),
            "sources": self._sources(node.sources),
        }

    def _extract_type_alias(self, node: TypeAliasNode, parent: Optional[ReflectionNode]) -> Fields:
        return {
            "kind": "Type Alias",
            "name": node.name,
            "comment": node.comment,
            "generics": self._generics(node.type_parameters),
            "type": self._type(node.type),
            "sources": self._sources(node.sources),
        }

    def _extract_function(self, node: FunctionNode, parent: Optional[ReflectionNode]) -> Fields:
        return {
            "kind": "Function",
            "name": node.name,
            "comment": node.comment,
            "sources": self._sources(node.sources),
            "signatures": self._signatures(node.signatures, "Function Signature"),
        }

    def _extract_constructor(
        self, node: ConstructorNode, parent: Optional[ReflectionNode]
    ) -> Fields:
        return {
            "kind": "Constructor",
            "name": node.name,
            "signatures": self._signatures(
                node.signatures, "Constructor Signature", with_optional=True
            ),
            "type": self._type(node.type),
        }

    def _extract_method(self, node: MethodNode, parent: Optional[ReflectionNode]) -> Fields:
        return {
            "kind": "Method",
            "name": node.name,
            "comment": node.comment,
            "sources": self._sources(node.sources),
            "signatures": self._signatures(node.signatures, "Method Signature", with_optional=True),
        }

    def _extract_accessor(self, node: AccessorNode, parent: Optional[ReflectionNode]) -> Fields:
        signatures: Optional[Tuple[SignatureRecord, ...]] = None
        if node.get_signatures is not None or node.set_signatures is not None:
            getters = [
                self._signature(signature, "Getter Signature", getter=True)
                for signature in node.get_signatures or ()
            ]
            setters = [
                self._signature(signature, "Setter Signature", setter=True)
                for signature in node.set_signatures or ()
            ]
            signatures = tuple(getters + setters)
        return {
            "kind": "Accessor",
            "name": node.name,
            "comment": node.comment,
            "sources": self._sources(node.sources),
            "signatures": signatures,
        }

    # ------------------------------------------------------------------
    # Helpers

    def _members(self, node: ReflectionNode) -> Optional[Tuple[DocRecord, ...]]:
        children = getattr(node, "children", ())
        if not children:
            return None
        return tuple(self.extract(child, node) for child in children)

    def _generics(
        self, parameters: Optional[Tuple[TypeParameter, ...]]
    ) -> Optional[Tuple[GenericRecord, ...]]:
        if parameters is None:
            return None
        return tuple(
            GenericRecord(name=parameter.name, comment=parameter.comment or "")
            for parameter in parameters
        )

    def _extends(self, node: ClassNode) -> Optional[Tuple[str, ...]]:
        if node.extended_types is None:
            return None
        rendered = tuple(
            self.renderer.render(extended)
            for extended in node.extended_types
            if extended.get("typeArguments")
        )
        return rendered or None

    def _sources(
        self, sources: Optional[Tuple[SourceLocation, ...]]
    ) -> Optional[Tuple[SourceRecord, ...]]:
        if sources is None:
            return None
        return tuple(self.linker.source(location) for location in sources)

    def _type(self, descriptor: Any) -> Optional[str]:
        if descriptor is None:
            return None
        return self.renderer.render(descriptor)

    def _signatures(
        self,
        signatures: Optional[Tuple[Signature, ...]],
        label: str,
        *,
        with_optional: bool = False,
    ) -> Optional[Tuple[SignatureRecord, ...]]:
        if signatures is None:
            return None
        return tuple(
            self._signature(signature, label, with_optional=with_optional)
            for signature in signatures
        )

    def _signature(
        self,
        signature: Signature,
        label: str,
        *,
        with_optional: bool = False,
        getter: bool = False,
        setter: bool = False,
    ) -> SignatureRecord:
        parameters: Optional[Tuple[ParameterRecord, ...]] = None
        if signature.parameters is not None:
            parameters = tuple(
                ParameterRecord(
                    name=parameter.name,
                    comment=parameter.comment,
                    optional=(
                        bool(parameter.flags.is_optional)
                        if with_optional and parameter.flags is not None
                        else None
                    ),
                    type=self._type(parameter.type),
                )
                for parameter in signature.parameters
            )
        accessor = getter or setter
        return SignatureRecord(
            kind=label,
            name=signature.name,
            comment=signature.comment,
            parameters=parameters,
            type=self._type(signature.type),
            getter=getter if accessor else None,
            setter=setter if accessor else None,
        )


def _is_module_level(node: Optional[ReflectionNode]) -> bool:
    return isinstance(node, (ModuleNode, ProjectNode))


def _display_name(name: Optional[str], parent: Optional[ReflectionNode]) -> Optional[str]:
    """Replace the default-export marker with the enclosing declaration's name."""
    if name != DEFAULT_EXPORT_NAME:
        return name
    if parent is not None and parent.name:
        return parent.name
    return DEFAULT_EXPORT_NAME


def flatten(
    root: ContainerNode,
    *,
    linker: SourceLinker,
    renderer: TypeRenderer | None = None,
    expand_modules: bool = False,
) -> List[DocRecord]:
    """Flatten ``root``'s direct children into an ordered list of records."""
    return ReflectionFlattener(linker, renderer, expand_modules=expand_modules).flatten(root)


__all__ = ["ReflectionFlattener", "flatten"]
