"""Tests for reading TypeDoc JSON into reflection nodes."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from reflectdoc.errors import ReflectionError
from reflectdoc.models import (
    AccessorNode,
    ClassNode,
    Flags,
    ModuleNode,
    ProjectNode,
    TypeAliasNode,
    UnknownNode,
    VariableNode,
)
from reflectdoc.reflection import load_reflection_tree, parse_reflection, parse_root
from tests._fixtures.reflections import intrinsic, project, reflection, source


def test_kind_strings_map_to_variants() -> None:
    assert isinstance(parse_reflection(reflection("Class", "A")), ClassNode)
    assert isinstance(parse_reflection(reflection("Type alias", "B")), TypeAliasNode)
    assert isinstance(parse_reflection(reflection("Type Alias", "C")), TypeAliasNode)


def test_numeric_kinds_map_to_variants() -> None:
    assert isinstance(parse_reflection({"kind": 128, "name": "A"}), ClassNode)
    assert isinstance(parse_reflection({"kind": 32, "name": "B"}), VariableNode)
    assert isinstance(parse_reflection({"kind": 0x200000, "name": "C"}), TypeAliasNode)
    assert isinstance(parse_reflection({"kind": 2, "name": "m"}), ModuleNode)


def test_unknown_kinds_keep_their_label() -> None:
    enum = parse_reflection(reflection("Enumeration", "Colors"))
    prop = parse_reflection({"kind": 1024, "name": "size"})
    bare = parse_reflection({"name": "mystery"})

    assert enum == UnknownNode(label="Enumeration", name="Colors")
    assert prop == UnknownNode(label="Property", name="size")
    assert bare == UnknownNode(label="Unknown", name="mystery")


def test_comment_formats_are_trimmed() -> None:
    legacy = parse_reflection(reflection("Class", "A", comment={"shortText": "  Old style \n"}))
    modern = parse_reflection(
        reflection(
            "Class",
            "B",
            comment={"summary": [{"kind": "text", "text": " Uses "}, {"kind": "code", "text": "`Map`"}]},
        )
    )

    assert legacy.comment == "Old style"
    assert modern.comment == "Uses `Map`"


def test_children_preserve_order() -> None:
    node = parse_reflection(
        reflection(
            "Class",
            "A",
            children=[reflection("Method", "b"), reflection("Method", "a"), reflection("Method", "b")],
        )
    )

    assert [child.name for child in node.children] == ["b", "a", "b"]


def test_sources_and_flags() -> None:
    node = parse_reflection(
        reflection(
            "Variable",
            "SIZE",
            flags={"isConst": True},
            type=intrinsic("number"),
            sources=[source("src/a.ts", 3, 9), {"file": "src/b.ts", "line": 1, "column": 0}],
        )
    )

    assert node.flags == Flags(is_const=True)
    assert [(s.file, s.line, s.column) for s in node.sources] == [("src/a.ts", 3, 9), ("src/b.ts", 1, 0)]
    assert node.type == intrinsic("number")


def test_accessor_accepts_single_signature_objects() -> None:
    node = parse_reflection(
        reflection("Accessor", "size", getSignature={"name": "size", "type": intrinsic("number")})
    )

    assert isinstance(node, AccessorNode)
    assert [signature.name for signature in node.get_signatures] == ["size"]
    assert node.set_signatures is None


def test_type_parameters_from_either_key() -> None:
    legacy = parse_reflection(reflection("Class", "A", typeParameter=[{"name": "T"}]))
    modern = parse_reflection(reflection("Class", "B", typeParameters=[{"name": "U"}]))

    assert [p.name for p in legacy.type_parameters] == ["T"]
    assert [p.name for p in modern.type_parameters] == ["U"]


def test_parse_root_variants() -> None:
    assert isinstance(parse_root(project()), ProjectNode)
    assert isinstance(parse_root({"kindString": "Module", "name": "src"}), ModuleNode)
    untagged = parse_root({"name": "lib", "children": [reflection("Class", "A")]})
    assert isinstance(untagged, ProjectNode)
    assert untagged.name == "lib"
    assert len(untagged.children) == 1


@pytest.mark.parametrize("data", [[], "docs", None])
def test_parse_root_rejects_non_mappings(data) -> None:
    with pytest.raises(ReflectionError):
        parse_root(data)


def test_malformed_children_degrade_below_the_root() -> None:
    unlisted = parse_root({"kindString": "Project", "children": {"not": "a list"}})
    mixed = parse_root(project(reflection("Class", "A"), "oops"))  # type: ignore[arg-type]

    assert unlisted.children == ()
    assert mixed.children == (ClassNode(name="A"), UnknownNode(label="Unknown"))


def test_flags_are_read_only_when_present() -> None:
    node = parse_reflection(reflection("Variable", "X", flags={"isExported": True}))

    assert node.flags == Flags()
    assert node.flags.is_const is None


def test_load_reflection_tree(tmp_path: Path) -> None:
    path = tmp_path / "docs.json"
    path.write_text(json.dumps(project(reflection("Class", "Cache"))), encoding="utf-8")

    tree = load_reflection_tree(path)

    assert tree.name == "collections"
    assert [child.name for child in tree.children] == ["Cache"]


def test_load_reflection_tree_errors(tmp_path: Path) -> None:
    with pytest.raises(ReflectionError, match="not found"):
        load_reflection_tree(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(ReflectionError, match="not valid JSON"):
        load_reflection_tree(broken)
