import pytest

from defamed.dispatch import Strategy, compile_table
from defamed.emitters import CanonicalCallEmitter, MacroGenerator, emit_call
from defamed.call_sites import parse_arguments
from defamed.paths import resolve_qualified_path
from defamed.signatures import build_signature
from defamed.types import (PUBLIC, Declaration, DeclaredParameter,
                           DefaultKind, DispatchError, ItemKind)


def f_signature(visibility="private", scope=None):
    return build_signature(Declaration(
        kind=ItemKind.FUNCTION,
        name="f",
        parameters=[
            DeclaredParameter("a", "i32"),
            DeclaredParameter("b", "bool",
                              default_kind=DefaultKind.VALUE,
                              default_expr="true"),
        ],
        visibility=visibility,
        scope=scope))


def point_signature():
    return build_signature(Declaration(
        kind=ItemKind.NAMED_FIELDS,
        name="Point",
        parameters=[
            DeclaredParameter("x", "i32"),
            DeclaredParameter("y", "i32",
                              default_kind=DefaultKind.TYPE_DEFAULT),
        ]))


def test_emit_call_for_functions() -> None:
    assert emit_call(f_signature(), "f", ["1", "false"]) == "f(1, false)"


def test_emit_call_for_named_fields() -> None:
    assert emit_call(point_signature(), "Point", ["1", "2"]) \
        == "Point { x: 1, y: 2 }"


def test_emit_call_requires_every_value() -> None:
    with pytest.raises(DispatchError):
        emit_call(f_signature(), "f", ["1"])


def test_canonical_call_emitter_fills_type_defaults() -> None:
    table = compile_table(point_signature())
    emitter = CanonicalCallEmitter(table)
    assert emitter.emit(parse_arguments("y = 3, x = 4")) \
        == "Point { x: 4, y: 3 }"
    assert emitter.emit(parse_arguments("4")) \
        == "Point { x: 4, y: ::core::default::Default::default() }"


def test_macro_has_one_rule_per_call_form() -> None:
    table = compile_table(f_signature())
    macro = MacroGenerator().generate(table)

    assert len(table) == 6
    assert macro.count("=> {") == 6
    assert "macro_rules! f {" in macro
    assert "#[macro_export]" not in macro
    assert "    (a = $a_val:expr $(,)?) => {\n        f($a_val, true)\n    };" \
        in macro
    assert "    (b = $b_val:expr, a = $a_val:expr $(,)?) => {\n" \
        "        f($a_val, $b_val)\n    };" in macro
    assert "    ($a_val:expr, $b_val:expr $(,)?) => {\n" \
        "        f($a_val, $b_val)\n    };" in macro
    assert macro.rstrip().endswith("}")


def test_named_rules_precede_positional_captures() -> None:
    macro = MacroGenerator().generate(compile_table(f_signature()))
    rules = [
        "(a = $a_val:expr, b = $b_val:expr $(,)?)",
        "(a = $a_val:expr $(,)?)",
        "($a_val:expr, b = $b_val:expr $(,)?)",
        "($a_val:expr $(,)?)",
        "($a_val:expr, $b_val:expr $(,)?)",
    ]
    indices = [macro.index(rule) for rule in rules]
    assert indices == sorted(indices)


def test_macro_without_trailing_comma() -> None:
    generator = MacroGenerator(trailing_comma=False)
    macro = generator.generate(compile_table(f_signature()))
    assert "$(,)?" not in macro
    assert "(a = $a_val:expr) => {" in macro


def test_exported_macro_uses_the_qualified_path() -> None:
    signature = f_signature(visibility=PUBLIC, scope="crate::m")
    path = resolve_qualified_path(signature.name,
                                  signature.visibility,
                                  signature.scope)
    macro = MacroGenerator().generate(compile_table(signature, path=path))
    assert "#[macro_export]\nmacro_rules! f {" in macro
    assert "$crate::m::f($a_val, true)" in macro


def test_tuple_metavars_are_valid_identifiers() -> None:
    signature = build_signature(Declaration(
        kind=ItemKind.TUPLE_FIELDS,
        name="Pair",
        parameters=[
            DeclaredParameter("0", "i32"),
            DeclaredParameter("1", "i32",
                              default_kind=DefaultKind.TYPE_DEFAULT),
        ]))
    macro = MacroGenerator().generate(compile_table(signature))
    assert "(0 = $_0_val:expr $(,)?) => {" in macro
    assert "Pair($_0_val, ::core::default::Default::default())" in macro


def test_macro_generation_needs_the_exhaustive_table() -> None:
    table = compile_table(f_signature(), strategy=Strategy.CANONICAL)
    with pytest.raises(DispatchError):
        MacroGenerator().generate(table)


def test_generate_module() -> None:
    generator = MacroGenerator()
    definition = generator.generate(compile_table(f_signature()))
    module = generator.generate_module("out", [definition],
                                       sources=["decls.yaml"])
    assert module.startswith("// @generated by defamed from decls.yaml")
    assert "// Module: out" in module
    assert definition in module
    assert module.endswith("}\n")


def test_generate_module_without_sources() -> None:
    module = MacroGenerator().generate_module("out", [])
    assert "from inline declarations" in module


def test_generated_module_is_deterministic() -> None:
    generator = MacroGenerator()
    definition = generator.generate(compile_table(f_signature()))
    first = generator.generate_module("out", [definition], ["decls.yaml"])
    second = generator.generate_module("out", [definition], ["decls.yaml"])
    assert first == second
    assert first.startswith("// @generated by defamed from decls.yaml.\n"
                            "// Do not edit by hand.\n")
