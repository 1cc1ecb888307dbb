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
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import (Dict, FrozenSet, Iterator, List, Optional, Sequence,
                    Tuple, Union)
from warnings import warn

from defamed.enumerators import (enumerate_call_forms,
                                 enumerate_canonical_call_forms)
from defamed.types import (Argument, CallForm, CallSiteError, DefaultKind,
                           DefamedEnum, DispatchError, Parameter,
                           QualifiedPath, Signature, UnmatchedCallError)

LOGGER = logging.getLogger()

DEFAULT_TYPE_DEFAULT_EXPR = "::core::default::Default::default()"

# Past this many parameters the exhaustive table becomes expensive to compile.
DEFAULT_MAX_PARAMETERS = 9

Shape = Tuple[int, Tuple[str, ...]]


class Strategy(DefamedEnum):
    """How call sites are matched against the compiled call forms."""

    # One pattern per literal ordering of the named arguments.
    EXHAUSTIVE: str = "exhaustive"

    # Named arguments are looked up by their set of keys.
    CANONICAL: str = "canonical"


def unmatched(signature: Signature,
              arguments: Sequence[Argument],
              reason: str) -> UnmatchedCallError:
    rendered = ", ".join(str(argument) for argument in arguments)
    LOGGER.debug("No call form of %s matches (%s): %s",
                 signature.name, rendered, reason)
    return UnmatchedCallError(
        f"no rules expected this call: {signature.name}!({rendered})")


def call_shape(signature: Signature,
               arguments: Sequence[Argument]) -> Shape:
    """Returns the number of leading positional arguments and the keys of
    the named arguments that follow them, in call-site order."""

    prefix_len = 0
    keys: List[str] = []
    for argument in arguments:
        if argument.is_named:
            keys.append(argument.key)
        elif len(keys) > 0:
            raise unmatched(signature, arguments,
                            "positional argument follows a named one")
        else:
            prefix_len += 1
    return prefix_len, tuple(keys)


@dataclass(frozen=True)
class Binder:
    """Reorders the arguments of a matched call form into declaration order,
    filling omitted positions with their defaults."""

    signature: Signature
    call_form: CallForm
    type_default_expr: str = DEFAULT_TYPE_DEFAULT_EXPR

    def default_value(self: "Binder", parameter: Parameter) -> str:
        if parameter.default_kind is DefaultKind.VALUE:
            return parameter.default_expr
        if parameter.default_kind is DefaultKind.TYPE_DEFAULT:
            return self.type_default_expr
        raise DispatchError(
            f"Required parameter [{parameter.name}] of "
            f"[{self.signature.name}] cannot be omitted")

    def __call__(self: "Binder", arguments: Sequence[Argument]) -> List[str]:
        call_form = self.call_form
        parameters = self.signature.parameters

        if len(arguments) != call_form.arity:
            raise unmatched(self.signature, arguments,
                            f"expected {call_form.arity} arguments")

        named_values: Dict[str, str] = {}
        for argument in arguments[call_form.prefix_len:]:
            named_values[argument.key] = argument.value

        expected_keys = {parameters[position].name
                         for position in call_form.named}
        if set(named_values.keys()) != expected_keys \
           or len(named_values) != len(call_form.named):
            raise unmatched(self.signature, arguments,
                            f"expected named arguments {sorted(expected_keys)}")

        values = []
        for parameter in parameters:
            position = parameter.position
            if position < call_form.prefix_len:
                values.append(arguments[position].value)
            elif position in call_form.omitted:
                values.append(self.default_value(parameter))
            else:
                values.append(named_values[parameter.name])
        return values

    def metavars(self: "Binder") -> List[str]:
        """Binds the call form symbolically, every supplied value being the
        macro variable of its parameter."""
        arguments = self.pattern_arguments()
        return self(arguments)

    def pattern_arguments(self: "Binder") -> List[Argument]:
        parameters = self.signature.parameters
        call_form = self.call_form
        arguments = [Argument(None, f"${parameters[position].metavar}")
                     for position in range(call_form.prefix_len)]
        for position in call_form.named:
            parameter = parameters[position]
            arguments.append(Argument(parameter.name, f"${parameter.metavar}"))
        return arguments


class DispatchTable(ABC):
    """Compiled call forms of one signature, each bound to a Binder."""

    signature: Signature
    strategy: Strategy

    def __init__(self: "DispatchTable",
                 signature: Signature,
                 path: Optional[QualifiedPath] = None,
                 type_default_expr: str = DEFAULT_TYPE_DEFAULT_EXPR) -> None:
        if path is None:
            path = QualifiedPath(root_marker=None,
                                 module_segments=(),
                                 item_name=signature.name)
        self.signature = signature
        self.path = path
        self.type_default_expr = type_default_expr
        self.binders: Dict[CallForm, Binder] = {}

    @property
    def name(self: "DispatchTable") -> str:
        return self.signature.name

    @property
    def scope(self: "DispatchTable") -> Optional[str]:
        return self.signature.scope

    def __len__(self: "DispatchTable") -> int:
        return len(self.binders)

    def __iter__(self: "DispatchTable") -> Iterator[CallForm]:
        return iter(self.binders)

    def add(self: "DispatchTable", call_form: CallForm) -> None:
        self.index(call_form, self.pattern_of(call_form))
        self.binders[call_form] = Binder(self.signature, call_form,
                                         self.type_default_expr)

    def keys_of(self: "DispatchTable", call_form: CallForm) -> Tuple[str, ...]:
        parameters = self.signature.parameters
        return tuple(parameters[position].name
                     for position in call_form.named)

    @abstractmethod
    def pattern_of(self: "DispatchTable", call_form: CallForm):
        raise NotImplementedError

    @abstractmethod
    def index(self: "DispatchTable", call_form: CallForm, pattern) -> None:
        raise NotImplementedError

    @abstractmethod
    def lookup(self: "DispatchTable",
               arguments: Sequence[Argument]) -> Optional[CallForm]:
        raise NotImplementedError

    def match(self: "DispatchTable",
              arguments: Sequence[Argument]) -> Tuple[CallForm, Binder]:
        if len(arguments) > self.signature.num_parameters:
            raise unmatched(self.signature, arguments,
                            f"more than {self.signature.num_parameters} "
                            f"arguments")
        call_form = self.lookup(arguments)
        if call_form is None:
            raise unmatched(self.signature, arguments,
                            "no call form has this shape")
        return call_form, self.binders[call_form]

    def bind(self: "DispatchTable",
             arguments: Sequence[Argument]) -> List[str]:
        _, binder = self.match(arguments)
        return binder(arguments)


class PermutationTable(DispatchTable):
    """Exhaustive table keyed on the literal order of the arguments, the
    shape a token-matching macro system needs."""

    strategy = Strategy.EXHAUSTIVE

    def __init__(self: "PermutationTable", *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.patterns: Dict[Shape, CallForm] = {}

    def pattern_of(self: "PermutationTable", call_form: CallForm) -> Shape:
        return call_form.prefix_len, self.keys_of(call_form)

    def index(self: "PermutationTable",
              call_form: CallForm,
              pattern: Shape) -> None:
        if pattern in self.patterns:
            raise DispatchError(
                f"Duplicate pattern {pattern} in table of "
                f"[{self.signature.name}]: {self.patterns[pattern]} and "
                f"{call_form}")
        self.patterns[pattern] = call_form

    def lookup(self: "PermutationTable",
               arguments: Sequence[Argument]) -> Optional[CallForm]:
        return self.patterns.get(call_shape(self.signature, arguments))


class CanonicalTable(DispatchTable):
    """Table indexed as prefix_len -> set of named keys -> call form."""

    strategy = Strategy.CANONICAL

    def __init__(self: "CanonicalTable", *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.forms_by_prefix: Dict[int, Dict[FrozenSet[str], CallForm]] = {}

    def pattern_of(self: "CanonicalTable",
                   call_form: CallForm) -> Tuple[int, FrozenSet[str]]:
        return call_form.prefix_len, frozenset(self.keys_of(call_form))

    def index(self: "CanonicalTable",
              call_form: CallForm,
              pattern: Tuple[int, FrozenSet[str]]) -> None:
        prefix_len, keys = pattern
        forms_by_keys = self.forms_by_prefix.setdefault(prefix_len, {})
        if keys in forms_by_keys:
            raise DispatchError(
                f"Duplicate pattern {pattern} in table of "
                f"[{self.signature.name}]: {forms_by_keys[keys]} and "
                f"{call_form}")
        forms_by_keys[keys] = call_form

    def lookup(self: "CanonicalTable",
               arguments: Sequence[Argument]) -> Optional[CallForm]:
        prefix_len, keys = call_shape(self.signature, arguments)
        if len(set(keys)) != len(keys):
            # A repeated key would collapse into a smaller set.
            return None
        forms_by_keys = self.forms_by_prefix.get(prefix_len)
        if forms_by_keys is None:
            return None
        return forms_by_keys.get(frozenset(keys))


def compile_table(signature: Signature,
                  path: Optional[QualifiedPath] = None,
                  strategy: Union[Strategy, str] = Strategy.EXHAUSTIVE,
                  type_default_expr: str = DEFAULT_TYPE_DEFAULT_EXPR,
                  max_parameters: int = DEFAULT_MAX_PARAMETERS) \
        -> DispatchTable:

    if isinstance(strategy, str):
        strategy = Strategy.find_by_value(strategy)

    if strategy is Strategy.EXHAUSTIVE:
        if signature.num_parameters > max_parameters:
            warn(f"[{signature.name}] has {signature.num_parameters} "
                 f"parameters; the exhaustive table grows factorially past "
                 f"{max_parameters}. Consider the canonical strategy.")
        table = PermutationTable(signature, path, type_default_expr)
        call_forms = enumerate_call_forms(signature)
    else:
        table = CanonicalTable(signature, path, type_default_expr)
        call_forms = enumerate_canonical_call_forms(signature)

    for call_form in call_forms:
        table.add(call_form)

    LOGGER.info("Compiled %d %s call forms for %s",
                len(table), strategy, signature.name)

    return table


@dataclass
class TableRegistry:
    """Compiled tables keyed by the (scope, name) of their declarations."""

    tables: Dict[Tuple[Optional[str], str], DispatchTable] = \
        field(default_factory=dict)

    def register(self: "TableRegistry", table: DispatchTable) -> DispatchTable:
        key = (table.scope, table.name)
        if key in self.tables:
            LOGGER.warning("Replacing the table registered for %s in scope %s",
                           table.name, table.scope)
        self.tables[key] = table
        return table

    def lookup(self: "TableRegistry",
               name: str,
               scope: Optional[str] = None) -> DispatchTable:
        if scope is not None:
            key = (scope, name)
            if key not in self.tables:
                raise CallSiteError(
                    f"cannot find macro `{name}` in scope {scope}")
            return self.tables[key]

        candidates = [table for (_, table_name), table in self.tables.items()
                      if table_name == name]
        if len(candidates) == 0:
            raise CallSiteError(f"cannot find macro `{name}` in this scope")
        if len(candidates) > 1:
            scopes = ", ".join(str(table.scope) for table in candidates)
            raise CallSiteError(
                f"`{name}` is ambiguous; it is declared in scopes: {scopes}")
        return candidates[0]

    def __contains__(self: "TableRegistry", name: str) -> bool:
        return any(table_name == name for _, table_name in self.tables)

    def __iter__(self: "TableRegistry") -> Iterator[DispatchTable]:
        return iter(self.tables.values())

    def __len__(self: "TableRegistry") -> int:
        return len(self.tables)

    def clear(self: "TableRegistry") -> None:
        self.tables.clear()


REGISTRY = TableRegistry()
