"""Tests for type descriptor rendering."""

from __future__ import annotations

import pytest

from reflectdoc.type_renderer import UNRESOLVED_TYPE, TypeRenderer, render
from tests._fixtures.reflections import intrinsic, reference


def _union(*types):
    return {"type": "union", "types": list(types)}


def _literal(value):
    return {"type": "literal", "value": value}


def _function(parameters, return_type):
    return {
        "type": "reflection",
        "declaration": {"signatures": [{"parameters": parameters, "type": return_type}]},
    }


@pytest.mark.parametrize(
    ("descriptor", "expected"),
    [
        (intrinsic("string"), "string"),
        (reference("Array", intrinsic("string")), "Array<string>"),
        (reference("Record", intrinsic("string"), intrinsic("number")), "Record<string, number>"),
        (_union(reference("Foo"), reference("Bar")), "Foo | Bar"),
        ({"type": "intersection", "types": [reference("A"), reference("B")]}, "A & B"),
        ({"type": "array", "elementType": intrinsic("number")}, "number[]"),
        ({"type": "tuple", "elements": [intrinsic("string"), intrinsic("number")]}, "[string, number]"),
        ({"type": "typeParameter", "name": "T"}, "T"),
    ],
)
def test_render_core_shapes(descriptor, expected) -> None:
    assert render(descriptor) == expected


def test_type_rendering_is_not_a_placeholder() -> None:
    # Rendering every descriptor as the same placeholder string is a known defect
    # in earlier generators; real descriptors must produce real text.
    rendered = {
        render(intrinsic("string")),
        render(reference("Map", intrinsic("string"), intrinsic("number"))),
        render(_union(_literal("a"), _literal(1))),
    }
    assert rendered == {"string", "Map<string, number>", '"a" | 1'}
    assert "unknown" not in rendered


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("on", '"on"'),
        ('say "hi"', '"say \\"hi\\""'),
        (42, "42"),
        (-1.5, "-1.5"),
        (True, "true"),
        (False, "false"),
        (None, "null"),
        ({"negative": True, "value": "10"}, "-10n"),
    ],
)
def test_render_literals(value, expected) -> None:
    assert render(_literal(value)) == expected


def test_array_of_union_is_parenthesised() -> None:
    descriptor = {"type": "array", "elementType": _union(intrinsic("string"), intrinsic("number"))}

    assert render(descriptor) == "(string | number)[]"


def test_union_inside_intersection_is_parenthesised() -> None:
    descriptor = {
        "type": "intersection",
        "types": [_union(reference("A"), reference("B")), reference("C")],
    }

    assert render(descriptor) == "(A | B) & C"


def test_function_type_in_union_is_parenthesised() -> None:
    callback = _function([{"name": "value", "type": intrinsic("string")}], intrinsic("void"))

    assert render(callback) == "(value: string) => void"
    assert render(_union(callback, intrinsic("null"))) == "((value: string) => void) | null"


def test_named_and_optional_tuple_members() -> None:
    descriptor = {
        "type": "tuple",
        "elements": [
            {"type": "namedTupleMember", "name": "key", "isOptional": False, "element": intrinsic("string")},
            {"type": "namedTupleMember", "name": "value", "isOptional": True, "element": intrinsic("number")},
            {"type": "rest", "elementType": {"type": "array", "elementType": intrinsic("boolean")}},
        ],
    }

    assert render(descriptor) == "[key: string, value?: number, ...boolean[]]"


def test_operators_and_queries() -> None:
    keyof = {"type": "typeOperator", "operator": "keyof", "target": reference("Options")}
    indexed = {"type": "indexedAccess", "objectType": reference("Options"), "indexType": _literal("size")}
    query = {"type": "query", "queryType": reference("defaults")}

    assert render(keyof) == "keyof Options"
    assert render(indexed) == 'Options["size"]'
    assert render(query) == "typeof defaults"


def test_conditional_with_infer() -> None:
    descriptor = {
        "type": "conditional",
        "checkType": reference("T"),
        "extendsType": reference("Promise", {"type": "inferred", "name": "U"}),
        "trueType": reference("U"),
        "falseType": intrinsic("never"),
    }

    assert render(descriptor) == "T extends Promise<infer U> ? U : never"


def test_object_literal_reflection() -> None:
    descriptor = {
        "type": "reflection",
        "declaration": {
            "children": [
                {"name": "id", "type": intrinsic("number")},
                {"name": "label", "flags": {"isOptional": True}, "type": intrinsic("string")},
            ]
        },
    }

    assert render(descriptor) == "{ id: number; label?: string }"
    assert render({"type": "reflection", "declaration": {}}) == "{}"


def test_template_literal_and_mapped_types() -> None:
    template = {
        "type": "templateLiteral",
        "head": "on",
        "tail": [[reference("Capitalize", reference("K")), "Event"]],
    }
    mapped = {
        "type": "mapped",
        "parameter": "K",
        "parameterType": {"type": "typeOperator", "operator": "keyof", "target": reference("T")},
        "templateType": reference("T"),
        "readonlyModifier": "+",
        "optionalModifier": "-",
    }

    assert render(template) == "`on${Capitalize<K>}Event`"
    assert render(mapped) == "{ readonly [K in keyof T]-?: T }"


@pytest.mark.parametrize(
    "tail",
    [
        [[intrinsic("string"), "b", "c"]],
        [[intrinsic("string")]],
        ["ab"],
        [None],
    ],
)
def test_malformed_template_literal_degrades(tail) -> None:
    assert render({"type": "templateLiteral", "head": "a", "tail": tail}) == UNRESOLVED_TYPE


def test_deeply_nested_descriptor_degrades() -> None:
    descriptor = intrinsic("string")
    for _ in range(5000):
        descriptor = {"type": "array", "elementType": descriptor}

    assert render(descriptor) == UNRESOLVED_TYPE


@pytest.mark.parametrize(
    ("descriptor", "expected"),
    [
        (
            {"type": "array", "elementType": {"type": "typeOperator", "operator": "keyof", "target": reference("T")}},
            "(keyof T)[]",
        ),
        (
            {
                "type": "indexedAccess",
                "objectType": {"type": "typeOperator", "operator": "readonly", "target": reference("Row")},
                "indexType": intrinsic("number"),
            },
            "(readonly Row)[number]",
        ),
        (
            {"type": "optional", "elementType": {"type": "typeOperator", "operator": "unique", "target": reference("S")}},
            "(unique S)?",
        ),
        (
            {"type": "array", "elementType": {"type": "inferred", "name": "U"}},
            "(infer U)[]",
        ),
    ],
)
def test_prefix_operators_are_parenthesised_in_postfix_positions(descriptor, expected) -> None:
    assert render(descriptor) == expected


def test_type_operator_target_keeps_array_suffix() -> None:
    descriptor = {
        "type": "typeOperator",
        "operator": "readonly",
        "target": {"type": "array", "elementType": intrinsic("string")},
    }

    assert render(descriptor) == "readonly string[]"


def test_predicate() -> None:
    descriptor = {"type": "predicate", "name": "value", "asserts": False, "targetType": reference("Cache")}

    assert render(descriptor) == "value is Cache"


@pytest.mark.parametrize(
    "descriptor",
    [
        None,
        "string",
        {},
        {"type": "brandNew"},
        {"type": "union", "types": []},
        {"type": "array"},
        {"type": "intrinsic"},
    ],
)
def test_unrenderable_descriptors_degrade(descriptor) -> None:
    assert render(descriptor) == UNRESOLVED_TYPE


def test_custom_unresolved_marker() -> None:
    renderer = TypeRenderer(unresolved="?")

    assert renderer.render({"type": "brandNew"}) == "?"
