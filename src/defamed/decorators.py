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

import inspect
import logging
from typing import Any, Callable, List, NamedTuple, Optional, Union

from defamed.compiler import Compilation, compile_declaration
from defamed.declarations import host_literal
from defamed.dispatch import REGISTRY, Strategy, TableRegistry
from defamed.paths import parse_visibility
from defamed.types import (Declaration, DeclarationError, DeclaredParameter,
                           DefaultKind, ItemKind, Visibility)

LOGGER = logging.getLogger()

Visibility_or_Str = Optional[Union[Visibility, str]]


class Default(NamedTuple):
    """Marks a parameter as defaulted. Without an expression the type's own
    default construction is used."""

    expr: Optional[str] = None

    @property
    def kind(self: "Default") -> DefaultKind:
        if self.expr is None:
            return DefaultKind.TYPE_DEFAULT
        return DefaultKind.VALUE


def default(expr: Optional[Any] = None) -> Default:
    if expr is None:
        return Default()
    return Default(host_literal(expr))


class Field(NamedTuple):
    type_name: Optional[str] = None
    default: Optional[Default] = None
    visibility: Visibility_or_Str = "pub"


def field(type_name: Optional[str] = None,
          default: Optional[Default] = None,
          visibility: Visibility_or_Str = "pub") -> Field:
    return Field(type_name=type_name,
                 default=default,
                 visibility=visibility)


class NamedFields:
    """Base for classes describing a struct with named fields."""
    __defamed_kind__ = ItemKind.NAMED_FIELDS


class TupleFields:
    """Base for classes describing a tuple struct. Attribute names only fix
    the order of the fields; the fields are keyed by position."""
    __defamed_kind__ = ItemKind.TUPLE_FIELDS


def type_name_of(annotation: Any) -> Optional[str]:
    if annotation is inspect.Parameter.empty:
        return None
    if isinstance(annotation, str):
        return annotation
    if hasattr(annotation, "__name__"):
        return annotation.__name__
    return str(annotation)


def declared_default(owner: str, name: str, value: Any) -> Optional[Default]:
    if value is inspect.Parameter.empty:
        return None
    if isinstance(value, Default):
        return value
    raise DeclarationError(
        f"Plain default values are not supported for [{name}] of "
        f"[{owner}]. Use default() or default(EXPR) instead.")


def parameters_of_function(fn: Callable) -> List[DeclaredParameter]:
    declared_parameters = []
    for index, parameter in enumerate(inspect.signature(fn).parameters.values()):
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL,
                              inspect.Parameter.VAR_KEYWORD):
            raise DeclarationError(
                f"Variadic parameter [{parameter.name}] of [{fn.__name__}] "
                f"is not supported")
        if index == 0 and parameter.name == "self":
            raise DeclarationError(
                f"[{fn.__name__}] takes a receiver; methods are not "
                f"supported")
        marker = declared_default(fn.__name__, parameter.name,
                                  parameter.default)
        declared_parameters.append(DeclaredParameter(
            name=parameter.name,
            type_name=type_name_of(parameter.annotation),
            default_kind=DefaultKind.NONE if marker is None else marker.kind,
            default_expr=None if marker is None else marker.expr))
    return declared_parameters


def parameters_of_class(cls: type, kind: ItemKind) -> List[DeclaredParameter]:
    declared_parameters = []
    fields = [(attribute, value) for attribute, value in vars(cls).items()
              if isinstance(value, Field)]
    for position, (attribute, value) in enumerate(fields):
        if kind is ItemKind.TUPLE_FIELDS:
            name = str(position)
        else:
            name = attribute
        marker = None
        if value.default is not None:
            marker = declared_default(cls.__name__, name, value.default)
        declared_parameters.append(DeclaredParameter(
            name=name,
            type_name=value.type_name,
            default_kind=DefaultKind.NONE if marker is None else marker.kind,
            default_expr=None if marker is None else marker.expr,
            visibility=parse_visibility(value.visibility)))
    return declared_parameters


def declaration_of(item: Any,
                   scope: Optional[str] = None,
                   visibility: Visibility_or_Str = None,
                   name: Optional[str] = None) -> Declaration:
    if isinstance(item, type):
        kind = getattr(item, "__defamed_kind__", None)
        if kind is None:
            raise DeclarationError(
                f"Class [{item.__name__}] must derive from NamedFields or "
                f"TupleFields")
        parameters = parameters_of_class(item, kind)
    elif inspect.isfunction(item):
        kind = ItemKind.FUNCTION
        parameters = parameters_of_function(item)
    else:
        raise DeclarationError(f"Unsupported item: {item!r}")

    if name is None:
        name = item.__name__

    return Declaration(kind=kind,
                       name=name,
                       parameters=parameters,
                       visibility=parse_visibility(visibility),
                       scope=scope)


def defamed(item_or_scope: Optional[Union[Callable, str]] = None,
            scope: Optional[str] = None,
            visibility: Visibility_or_Str = None,
            name: Optional[str] = None,
            strategy: Optional[Strategy] = None,
            registry: Optional[TableRegistry] = REGISTRY) -> Callable:
    """Declares a function, named-field struct or tuple struct whose calls may
    mix positional and named arguments:

        @defamed("crate::math", visibility="pub")
        def some_fn(lhs: "i32", rhs: "i32",
                    add: "bool" = default(True),
                    divide_result_by: "Option<i32>" = default("None")):
            ...

    The declaration is compiled immediately; the compilation is attached to
    the decorated item as `__defamed__`."""

    if isinstance(item_or_scope, str):
        if scope is not None:
            raise DeclarationError(
                f"Scope given twice: {item_or_scope!r} and {scope!r}")
        scope = item_or_scope

    def decorator(item: Any) -> Any:
        declaration = declaration_of(item,
                                     scope=scope,
                                     visibility=visibility,
                                     name=name)
        compilation: Compilation = compile_declaration(declaration,
                                                       registry=registry,
                                                       strategy=strategy)
        item.__defamed__ = compilation
        return item

    if item_or_scope is not None and not isinstance(item_or_scope, str):
        return decorator(item_or_scope)

    return decorator
