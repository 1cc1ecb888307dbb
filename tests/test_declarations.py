import pytest

import yaml

from defamed.declarations import (host_literal, load_declarations,
                                  parse_declarations)
from defamed.types import (CRATE, PRIVATE, PUBLIC, DeclarationError,
                           DefaultKind, ItemKind)

DECLARATIONS_YAML = """
declarations:
  - name: some_fn
    visibility: pub
    scope: crate::math
    parameters:
      - name: lhs
        type: i32
      - name: rhs
        type: i32
      - name: add
        type: bool
        default: true
      - name: divide_result_by
        type: Option<i32>
        default: None
  - name: Wrapper
    kind: tuple_fields
    visibility: pub(crate)
    scope: crate
    parameters:
      - type: i32
        visibility: pub
      - type: i64
        default: null
        visibility: pub
"""


def test_host_literal() -> None:
    assert host_literal("Some(2)") == "Some(2)"
    assert host_literal(True) == "true"
    assert host_literal(False) == "false"
    assert host_literal(3) == "3"
    assert host_literal(2.5) == "2.5"
    with pytest.raises(DeclarationError):
        host_literal([1, 2])


def test_parse_declarations() -> None:
    some_fn, wrapper = parse_declarations(yaml.safe_load(DECLARATIONS_YAML))

    assert some_fn.kind is ItemKind.FUNCTION
    assert some_fn.visibility == PUBLIC
    assert some_fn.scope == "crate::math"
    assert [parameter.default_kind for parameter in some_fn.parameters] == [
        DefaultKind.NONE,
        DefaultKind.NONE,
        DefaultKind.VALUE,
        DefaultKind.VALUE,
    ]
    assert some_fn.parameters[2].default_expr == "true"
    assert some_fn.parameters[3].default_expr == "None"

    assert wrapper.kind is ItemKind.TUPLE_FIELDS
    assert wrapper.visibility == CRATE
    assert [parameter.name for parameter in wrapper.parameters] == ["0", "1"]
    assert wrapper.parameters[1].default_kind is DefaultKind.TYPE_DEFAULT
    assert wrapper.parameters[1].visibility == PUBLIC


def test_defaults_for_optional_entries() -> None:
    declaration, = parse_declarations({
        "declarations": [{
            "name": "f",
            "parameters": [{"name": "a", "type": "i32"}],
        }],
    })
    assert declaration.kind is ItemKind.FUNCTION
    assert declaration.visibility == PRIVATE
    assert declaration.scope is None
    assert declaration.parameters[0].visibility is None


@pytest.mark.parametrize("document", [
    {},
    {"declarations": [{"name": "f"}]},
    {"declarations": [{"name": "f", "kind": "method", "parameters": []}]},
    {"declarations": [{"name": "f",
                       "parameters": [{"name": "a", "typ": "i32"}]}]},
    {"declarations": [{"name": "f",
                       "parameters": [{"name": "a", "default": [1]}]}]},
])
def test_invalid_documents(document) -> None:
    with pytest.raises(DeclarationError, match="Validation failed"):
        parse_declarations(document)


def test_function_parameters_need_names() -> None:
    with pytest.raises(DeclarationError, match="has no name"):
        parse_declarations({
            "declarations": [{"name": "f", "parameters": [{"type": "i32"}]}],
        })


def test_invalid_visibility() -> None:
    with pytest.raises(DeclarationError, match="Invalid visibility"):
        parse_declarations({
            "declarations": [{"name": "f",
                              "visibility": "public",
                              "parameters": [{"name": "a"}]}],
        })


def test_load_declarations(tmp_path) -> None:
    declarations_path = tmp_path / "declarations.yaml"
    declarations_path.write_text(DECLARATIONS_YAML)
    declarations = load_declarations(declarations_path)
    assert [declaration.name for declaration in declarations] \
        == ["some_fn", "Wrapper"]


def test_load_missing_declarations(tmp_path) -> None:
    with pytest.raises(ValueError, match="File not found"):
        load_declarations(tmp_path / "missing.yaml")


def test_load_non_mapping(tmp_path) -> None:
    declarations_path = tmp_path / "declarations.yaml"
    declarations_path.write_text("- just\n- a\n- list\n")
    with pytest.raises(DeclarationError, match="Expected a mapping"):
        load_declarations(declarations_path)
