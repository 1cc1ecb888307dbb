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
from typing import List, Set

from defamed.paths import parse_visibility
from defamed.types import (Declaration, DeclarationError,
                           DefaultKind, EmptyError, ItemKind, OrderError,
                           Parameter, Signature)
from defamed.utils.name_utils import is_identifier, strip_raw_prefix

LOGGER = logging.getLogger()


def validate_parameter_name(declaration: Declaration,
                            position: int,
                            name: str) -> None:
    if declaration.kind is ItemKind.TUPLE_FIELDS:
        if name != str(position):
            raise DeclarationError(
                f"Field {position} of tuple aggregate [{declaration.name}] "
                f"must be keyed by its position, not {name!r}")
    elif not is_identifier(name):
        raise DeclarationError(
            f"Invalid parameter name {name!r} for [{declaration.name}]")


def build_signature(declaration: Declaration) -> Signature:
    """Normalises a raw declaration into a Signature.

    Raises:
        EmptyError: if the declaration has no parameters.
        OrderError: if a required parameter follows a defaulted one.
        DeclarationError: if a parameter name is invalid or duplicated, or a
            default is malformed."""

    if not is_identifier(declaration.name):
        raise DeclarationError(f"Invalid item name: {declaration.name!r}")

    if len(declaration.parameters) == 0:
        raise EmptyError(
            f"[{declaration.name}] declares no parameters; there is nothing "
            f"to permute")

    parameters: List[Parameter] = []
    seen_names: Set[str] = set()
    first_defaulted = None

    for position, declared in enumerate(declaration.parameters):
        name = declared.name
        if declaration.kind is ItemKind.TUPLE_FIELDS and name is None:
            name = str(position)
        validate_parameter_name(declaration, position, name)

        if strip_raw_prefix(name) in seen_names:
            raise DeclarationError(
                f"Conflicting parameter names: {name} already declared for "
                f"[{declaration.name}]")
        seen_names.add(strip_raw_prefix(name))

        default_kind = declared.default_kind
        default_expr = declared.default_expr

        if default_kind is DefaultKind.VALUE:
            if default_expr is None or len(default_expr.strip()) == 0:
                raise DeclarationError(
                    f"Parameter [{name}] of [{declaration.name}] has an empty "
                    f"default expression")
            default_expr = default_expr.strip()
        elif default_expr is not None:
            raise DeclarationError(
                f"Parameter [{name}] of [{declaration.name}] has a default "
                f"expression but is declared as {default_kind}")

        if default_kind is DefaultKind.NONE:
            if first_defaulted is not None:
                raise OrderError(
                    f"Required parameter [{name}] of [{declaration.name}] "
                    f"follows defaulted parameter [{first_defaulted}]; "
                    f"defaulted parameters must be trailing")
        elif first_defaulted is None:
            first_defaulted = name

        visibility = parse_visibility(declared.visibility)

        parameters.append(Parameter(name=name,
                                    position=position,
                                    type_name=declared.type_name,
                                    default_kind=default_kind,
                                    default_expr=default_expr,
                                    visibility=visibility))

    signature = Signature(kind=declaration.kind,
                          name=declaration.name,
                          parameters=tuple(parameters),
                          visibility=parse_visibility(declaration.visibility),
                          scope=declaration.scope)

    LOGGER.debug("Built signature for %s: %d required, %d defaulted",
                 signature.name,
                 signature.num_required,
                 signature.num_defaulted)

    return signature
