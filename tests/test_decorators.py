import pytest

from defamed.compiler import expand_call
from defamed.decorators import (Default, NamedFields, TupleFields, default,
                                defamed, field)
from defamed.dispatch import CanonicalTable, Strategy
from defamed.emitters import emit_call
from defamed.types import (DeclarationError, DefaultKind,
                           FieldVisibilityError, MissingScopeError,
                           OrderError)

TYPE_DEFAULT = "::core::default::Default::default()"


def test_default_markers() -> None:
    assert default() == Default(None)
    assert default().kind is DefaultKind.TYPE_DEFAULT
    assert default(True) == Default("true")
    assert default(3) == Default("3")
    assert default("Some(2)").kind is DefaultKind.VALUE


def test_function_declaration(registry) -> None:

    @defamed("crate::math", visibility="pub", registry=registry)
    def some_fn(lhs: "i32", rhs: "i32",
                add: "bool" = default(True),
                divide_result_by: "Option<i32>" = default("None")):
        pass

    signature = some_fn.__defamed__.signature
    assert signature.num_required == 2
    assert signature.num_defaulted == 2
    assert [parameter.type_name for parameter in signature.parameters] \
        == ["i32", "i32", "bool", "Option<i32>"]

    def expand(text: str) -> str:
        return expand_call("some_fn", text, registry=registry)

    assert expand("5, 5") == "$crate::math::some_fn(5, 5, true, None)"
    assert expand("rhs = 5, lhs = 15, add = false") \
        == "$crate::math::some_fn(15, 5, false, None)"
    assert expand("5, 5, divide_result_by = Some(2)") \
        == "$crate::math::some_fn(5, 5, true, Some(2))"


def test_named_fields_declaration(registry) -> None:

    @defamed("crate", visibility="pub", registry=registry)
    class Struct(NamedFields):
        inner = field("PathBuf")
        idx = field("usize", default=default(0))
        len = field("usize", default=default())

    compilation = Struct.__defamed__
    direct = emit_call(compilation.signature,
                       compilation.table.path,
                       ["path", "1", TYPE_DEFAULT])

    expansion = expand_call("Struct", "inner = path, idx = 1",
                            registry=registry)
    assert expansion == direct
    assert expansion == \
        f"$crate::Struct {{ inner: path, idx: 1, len: {TYPE_DEFAULT} }}"
    assert expand_call("Struct", "path", registry=registry) \
        == f"$crate::Struct {{ inner: path, idx: 0, len: {TYPE_DEFAULT} }}"


def test_tuple_fields_declaration(registry) -> None:

    @defamed(registry=registry)
    class Wrapper(TupleFields):
        first = field("i32")
        second = field("i64", default=default())
        third = field("String", default=default("String::from(\"x\")"))

    def expand(text: str) -> str:
        return expand_call("Wrapper", text, registry=registry)

    assert [parameter.name
            for parameter in Wrapper.__defamed__.signature.parameters] \
        == ["0", "1", "2"]
    assert expand("7") \
        == f"Wrapper(7, {TYPE_DEFAULT}, String::from(\"x\"))"
    assert expand("7") \
        == expand(f"7, {TYPE_DEFAULT}, String::from(\"x\")")
    assert expand("0 = 7, 2 = y") == f"Wrapper(7, {TYPE_DEFAULT}, y)"


def test_decorator_without_arguments(registry) -> None:

    def lonely(x: "u8"):
        pass

    assert defamed(lonely, registry=registry) is lonely
    assert expand_call("lonely", "x = 1", registry=registry) == "lonely(1)"


def test_name_and_strategy_overrides(registry) -> None:

    @defamed(name="renamed", strategy=Strategy.CANONICAL, registry=registry)
    def original(a: "i32", b: "i32" = default(2)):
        pass

    assert isinstance(original.__defamed__.table, CanonicalTable)
    assert "renamed" in registry
    assert expand_call("renamed", "b = 3, a = 1", registry=registry) \
        == "renamed(1, 3)"


def test_field_less_visible_than_aggregate(registry) -> None:
    with pytest.raises(FieldVisibilityError) as exc_info:

        @defamed("crate", visibility="pub", registry=registry)
        class Leaky(NamedFields):
            shown = field("i32")
            hidden = field("i32", visibility="private")

    assert exc_info.value.field_name == "hidden"
    assert len(registry) == 0


def test_restricted_fields(registry) -> None:

    @defamed("crate::shapes", visibility="pub(in crate::shapes)",
             registry=registry)
    class Square(NamedFields):
        side = field("f32", visibility="pub(crate)")

    assert expand_call("Square", "side = 1.0", registry=registry) \
        == "$crate::shapes::Square { side: 1.0 }"


def test_public_item_needs_a_scope(registry) -> None:
    with pytest.raises(MissingScopeError):

        @defamed(visibility="pub", registry=registry)
        def unscoped(a: "i32"):
            pass


def test_scope_given_twice() -> None:
    with pytest.raises(DeclarationError, match="Scope given twice"):
        defamed("crate::a", scope="crate::b")


def test_methods_are_rejected(registry) -> None:
    with pytest.raises(DeclarationError, match="receiver"):

        @defamed(registry=registry)
        def method(self, a: "i32"):
            pass


def test_variadic_parameters_are_rejected(registry) -> None:
    with pytest.raises(DeclarationError, match="Variadic"):

        @defamed(registry=registry)
        def variadic(a: "i32", *rest):
            pass

    with pytest.raises(DeclarationError, match="Variadic"):

        @defamed(registry=registry)
        def keywords(a: "i32", **rest):
            pass


def test_plain_defaults_are_rejected(registry) -> None:
    with pytest.raises(DeclarationError, match=r"default\(EXPR\)"):

        @defamed(registry=registry)
        def plain(a: "i32" = 5):
            pass


def test_required_after_defaulted(registry) -> None:
    with pytest.raises(OrderError):

        @defamed(registry=registry)
        def misordered(a: "i32" = default(1), *, b: "i32"):
            pass


def test_class_needs_a_fields_base(registry) -> None:
    with pytest.raises(DeclarationError, match="NamedFields or TupleFields"):

        @defamed(registry=registry)
        class Plain:
            x = field("i32")


def test_empty_aggregate(registry) -> None:
    with pytest.raises(DeclarationError):

        @defamed(registry=registry)
        class Empty(NamedFields):
            pass
