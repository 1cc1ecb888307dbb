import logging

import pytest

from defamed.dispatch import TableRegistry
from defamed.types import (PRIVATE, Declaration, DeclaredParameter,
                           DefaultKind, ItemKind)


@pytest.fixture
def registry() -> TableRegistry:
    return TableRegistry()


@pytest.fixture(autouse=True)
def restore_root_logger():
    logger = logging.getLogger()
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


def make_declaration(num_required: int,
                     num_defaulted: int,
                     kind: ItemKind = ItemKind.FUNCTION,
                     name: str = "item",
                     visibility=PRIVATE,
                     scope=None) -> Declaration:
    parameters = []
    for position in range(num_required + num_defaulted):
        if kind is ItemKind.TUPLE_FIELDS:
            parameter_name = str(position)
        else:
            parameter_name = f"p{position}"
        if position < num_required:
            parameters.append(DeclaredParameter(parameter_name, "i32"))
        else:
            parameters.append(DeclaredParameter(
                parameter_name, "i32",
                default_kind=DefaultKind.VALUE,
                default_expr=f"{position * 10}"))
    return Declaration(kind=kind,
                       name=name,
                       parameters=parameters,
                       visibility=visibility,
                       scope=scope)


@pytest.fixture
def declaration_factory():
    return make_declaration


@pytest.fixture
def some_fn_declaration() -> Declaration:
    return Declaration(
        kind=ItemKind.FUNCTION,
        name="some_fn",
        parameters=[
            DeclaredParameter("lhs", "i32"),
            DeclaredParameter("rhs", "i32"),
            DeclaredParameter("add", "bool",
                              default_kind=DefaultKind.VALUE,
                              default_expr="true"),
            DeclaredParameter("divide_result_by", "Option<i32>",
                              default_kind=DefaultKind.VALUE,
                              default_expr="None"),
        ])
