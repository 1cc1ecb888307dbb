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
from typing import Any, Dict, NamedTuple, Optional

from defamed.call_sites import parse_arguments
from defamed.dispatch import (REGISTRY, DispatchTable, Strategy, TableRegistry,
                              compile_table)
from defamed.emitters import CanonicalCallEmitter
from defamed.paths import resolve_qualified_path
from defamed.signatures import build_signature
from defamed.types import Declaration, Signature
from defamed.utils.config_utils import DEFAULT_CONFIG
from defamed.validators import validate_field_visibility

LOGGER = logging.getLogger()


class Compilation(NamedTuple):
    declaration: Declaration
    signature: Signature
    table: DispatchTable


def compile_declaration(declaration: Declaration,
                        config: Optional[Dict[str, Any]] = None,
                        registry: Optional[TableRegistry] = REGISTRY,
                        strategy: Optional[Strategy] = None) -> Compilation:
    """Runs a declaration through the generation pipeline once and
    registers the resulting table. Any failure aborts the declaration before
    anything is registered."""

    if config is None:
        config = DEFAULT_CONFIG

    if strategy is None:
        strategy = config["strategy"]

    LOGGER.info("Compiling %s %s", declaration.kind, declaration.name)

    signature = build_signature(declaration)
    validate_field_visibility(signature)
    path = resolve_qualified_path(signature.name,
                                  signature.visibility,
                                  signature.scope,
                                  root_marker=config["root_marker"])
    table = compile_table(signature,
                          path=path,
                          strategy=strategy,
                          type_default_expr=config["type_default_expr"],
                          max_parameters=config["max_parameters"])

    if registry is not None:
        registry.register(table)

    return Compilation(declaration=declaration,
                       signature=signature,
                       table=table)


def expand_table(table: DispatchTable, arguments_text: str) -> str:
    arguments = parse_arguments(arguments_text)
    emitter = CanonicalCallEmitter(table)
    return emitter.emit(arguments)


def expand_call(name: str,
                arguments_text: str,
                scope: Optional[str] = None,
                registry: TableRegistry = REGISTRY) -> str:
    """Expands the call site `name!(arguments_text)` into the canonical,
    fully positional invocation of the registered item."""

    table = registry.lookup(name, scope)
    expansion = expand_table(table, arguments_text)
    LOGGER.debug("Expanded %s!(%s) to %s", name, arguments_text, expansion)
    return expansion
