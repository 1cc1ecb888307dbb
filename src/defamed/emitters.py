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
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from defamed.dispatch import DispatchTable, PermutationTable, Strategy
from defamed.template_accessors import RustTemplateAccessor
from defamed.types import (Argument, CallForm, DispatchError, ItemKind,
                           QualifiedPath, Signature)

LOGGER = logging.getLogger()

Path_or_Str = Union[QualifiedPath, str]


def emit_call(signature: Signature,
              path: Path_or_Str,
              values: Sequence[str]) -> str:
    """Emits one fully positional invocation of the underlying item. `values`
    must already be in declaration order."""

    if len(values) != signature.num_parameters:
        raise DispatchError(
            f"Expected {signature.num_parameters} values for "
            f"[{signature.name}], got {len(values)}")

    if signature.kind is ItemKind.NAMED_FIELDS:
        initializers = ", ".join(
            f"{parameter.name}: {value}"
            for parameter, value in zip(signature.parameters, values))
        return f"{path} {{ {initializers} }}"

    arguments = ", ".join(values)
    return f"{path}({arguments})"


@dataclass
class CanonicalCallEmitter:
    table: DispatchTable

    @property
    def signature(self: "CanonicalCallEmitter") -> Signature:
        return self.table.signature

    def emit(self: "CanonicalCallEmitter",
             arguments: Sequence[Argument]) -> str:
        call_form, binder = self.table.match(arguments)
        values = binder(arguments)
        LOGGER.debug("Matched %s with %s", self.signature.name, call_form)
        return emit_call(self.signature, self.table.path, values)


def rule_order(call_form: CallForm):
    """Rules capturing fewer positional expressions come first, so that a
    `key = value` argument is never swallowed by an `expr` matcher (it would
    parse as an assignment)."""
    return call_form.prefix_len, -len(call_form.named)


@dataclass
class MacroGenerator:
    """Renders the exhaustive table of a declaration as a `macro_rules!`
    definition with one rule per call form."""

    template_accessor: RustTemplateAccessor = \
        field(default_factory=RustTemplateAccessor)
    trailing_comma: bool = True

    def generate(self: "MacroGenerator", table: DispatchTable) -> str:

        if not isinstance(table, PermutationTable):
            raise DispatchError(
                f"Token-matching macros need the {Strategy.EXHAUSTIVE} "
                f"table, not {table.strategy}")

        signature = table.signature
        path = table.path
        rules: List[str] = []
        for call_form in sorted(table, key=rule_order):
            binder = table.binders[call_form]
            expansion = emit_call(signature, path, binder.metavars())
            rule = self.template_accessor.emit_rule(
                matchers=binder.pattern_arguments(),
                expansion=expansion,
                trailing_comma=self.trailing_comma)
            rules.append(rule)

        LOGGER.debug("Generated %d rules for %s", len(rules), signature.name)

        return self.template_accessor.emit_macro_rules(
            signature=signature,
            path=str(path),
            rules=rules,
            trailing_comma=self.trailing_comma)

    def generate_module(self: "MacroGenerator",
                        name: str,
                        definitions: Sequence[str],
                        sources: Optional[Sequence[str]] = None) -> str:
        if sources is None:
            sources = []
        module = self.template_accessor.emit_module(
            name=name,
            definitions=definitions,
            sources=[str(source) for source in sources])
        return f"{module.rstrip()}\n"
