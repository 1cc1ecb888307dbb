r"""
 By Dylon Edwards

 Copyright 2023 GSI Technology, Inc.

 Permission is hereby granted, free of charge, to any person obtaining a copy of
 this software and associated documentation files (the “Software”), to deal in
 the Software without restriction, including without limitation the rights to
 use, copy, modify, merge, publish, distribute, sublicense, and/or sell copies of
 the Software, and to permit persons to whom the Software is furnished to do so,
 subject to the following conditions:

 The above copyright notice and this permission notice shall be included in all
 copies or substantial portions of the Software.

 THE SOFTWARE IS PROVIDED “AS IS”, WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
 IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY, FITNESS
 FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR
 COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER
 IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
 CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from cerberus import Validator

from defamed.paths import parse_visibility
from defamed.types import (Declaration, DeclarationError, DeclaredParameter,
                           DefaultKind, ItemKind)

LOGGER = logging.getLogger()

LITERAL_TYPES = ["string", "integer", "float", "boolean"]

PARAMETER_SCHEMA = {
    "name": {
        "type": ["string", "integer"],
    },
    "type": {
        "type": "string",
        "empty": False,
    },
    "default": {
        "type": LITERAL_TYPES,
        "nullable": True,
    },
    "visibility": {
        "type": "string",
    },
}

DECLARATIONS_SCHEMA = {
    "declarations": {
        "type": "list",
        "required": True,
        "schema": {
            "type": "dict",
            "schema": {
                "name": {
                    "type": "string",
                    "required": True,
                    "empty": False,
                },
                "kind": {
                    "type": "string",
                    "allowed": ItemKind.values(),
                    "default": ItemKind.FUNCTION.value,
                },
                "visibility": {
                    "type": "string",
                    "default": "private",
                },
                "scope": {
                    "type": "string",
                    "nullable": True,
                },
                "parameters": {
                    "type": "list",
                    "required": True,
                    "schema": {
                        "type": "dict",
                        "schema": PARAMETER_SCHEMA,
                    },
                },
            },
        },
    },
}


def host_literal(value: Any) -> str:
    """Renders a YAML or Python scalar as a host expression. Strings are
    taken verbatim as host expressions."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    raise DeclarationError(
        f"Unsupported default value ({value.__class__.__name__}): {value!r}; "
        f"pass the host expression as a string")


def parse_parameter(kind: ItemKind,
                    position: int,
                    document: Dict[str, Any]) -> DeclaredParameter:
    name = document.get("name")
    if name is None:
        if kind is not ItemKind.TUPLE_FIELDS:
            raise DeclarationError(f"Parameter {position} has no name")
        name = str(position)

    if "default" not in document:
        default_kind = DefaultKind.NONE
        default_expr = None
    elif document["default"] is None:
        default_kind = DefaultKind.TYPE_DEFAULT
        default_expr = None
    else:
        default_kind = DefaultKind.VALUE
        default_expr = host_literal(document["default"])

    visibility = None
    if "visibility" in document:
        visibility = parse_visibility(document["visibility"])

    return DeclaredParameter(name=str(name),
                             type_name=document.get("type"),
                             default_kind=default_kind,
                             default_expr=default_expr,
                             visibility=visibility)


def parse_declarations(document: Dict[str, Any],
                       source: str = "<string>") -> List[Declaration]:
    validator = Validator(DECLARATIONS_SCHEMA)
    if not validator.validate(document):
        raise DeclarationError(
            f"Validation failed for {source}: {validator.errors}")
    document = validator.document

    declarations = []
    for entry in document["declarations"]:
        kind = ItemKind.find_by_value(
            entry.get("kind", ItemKind.FUNCTION.value))
        parameters = [parse_parameter(kind, position, parameter)
                      for position, parameter
                      in enumerate(entry["parameters"])]
        declarations.append(Declaration(
            kind=kind,
            name=entry["name"],
            parameters=parameters,
            visibility=parse_visibility(entry.get("visibility")),
            scope=entry.get("scope")))

    LOGGER.info("Found %d declarations in %s", len(declarations), source)
    return declarations


def load_declarations(declarations_path: Union[str, Path]) -> List[Declaration]:
    if not isinstance(declarations_path, Path):
        declarations_path = Path(declarations_path)

    if not declarations_path.exists():
        raise ValueError(f"File not found: {declarations_path}")

    with open(declarations_path, "rt") as f:
        document = yaml.safe_load(f)

    if not isinstance(document, dict):
        raise DeclarationError(
            f"Expected a mapping with a \"declarations\" list in "
            f"{declarations_path}")

    return parse_declarations(document, str(declarations_path))
