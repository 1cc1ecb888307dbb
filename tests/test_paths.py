import pytest

from defamed.paths import (parse_scope_token, parse_visibility,
                           resolve_qualified_path)
from defamed.types import (CRATE, PRIVATE, PUBLIC, DeclarationError,
                           MissingScopeError, QualifiedPath, Visibility,
                           VisibilityTier)


@pytest.mark.parametrize("text, expected", [
    ("", PRIVATE),
    ("private", PRIVATE),
    ("pub", PUBLIC),
    ("pub(crate)", CRATE),
    ("pub( super )", Visibility(VisibilityTier.RESTRICTED, ("super",))),
    ("pub(self)", Visibility(VisibilityTier.RESTRICTED, ("self",))),
    ("pub(in crate::shapes::round)",
     Visibility(VisibilityTier.RESTRICTED, ("crate", "shapes", "round"))),
    ("pub(in super::super)",
     Visibility(VisibilityTier.RESTRICTED, ("super", "super"))),
])
def test_parse_visibility(text: str, expected: Visibility) -> None:
    assert parse_visibility(text) == expected


@pytest.mark.parametrize("text", [
    "public", "pub(foo)", "pub(in shapes)", "pub(in crate::fn)",
    "pub(in crate::super)",
])
def test_parse_visibility_rejects_invalid_syntax(text: str) -> None:
    with pytest.raises(DeclarationError):
        parse_visibility(text)


def test_visibility_round_trips_through_str() -> None:
    for text in ["pub", "pub(crate)", "pub(in crate::shapes)"]:
        assert str(parse_visibility(text)) == text


def test_parse_scope_token() -> None:
    assert parse_scope_token("crate") == ()
    assert parse_scope_token("crate::math::ops") == ("math", "ops")
    assert parse_scope_token("math::ops") == ("math", "ops")
    assert parse_scope_token("::math") == ("math",)
    with pytest.raises(DeclarationError):
        parse_scope_token("super::math")
    with pytest.raises(DeclarationError):
        parse_scope_token("math::")


def test_private_items_are_not_qualified() -> None:
    path = resolve_qualified_path("some_fn", PRIVATE, None)
    assert path == QualifiedPath(None, (), "some_fn")
    assert str(path) == "some_fn"
    assert not path.is_qualified


def test_private_items_ignore_scope() -> None:
    path = resolve_qualified_path("some_fn", PRIVATE, "crate::math")
    assert str(path) == "some_fn"


@pytest.mark.parametrize("visibility", [PUBLIC, CRATE])
def test_exposed_items_are_anchored_at_the_root_marker(
        visibility: Visibility) -> None:
    path = resolve_qualified_path("some_fn", visibility, "crate::math")
    assert str(path) == "$crate::math::some_fn"
    assert path.module_segments == ("math",)

    path = resolve_qualified_path("some_fn", visibility, "crate")
    assert str(path) == "$crate::some_fn"


def test_custom_root_marker() -> None:
    path = resolve_qualified_path("some_fn", PUBLIC, "math",
                                  root_marker="::my_crate")
    assert str(path) == "::my_crate::math::some_fn"


@pytest.mark.parametrize("scope", [None, "", "   "])
@pytest.mark.parametrize("visibility", [PUBLIC, CRATE])
def test_missing_scope_raises(scope, visibility: Visibility) -> None:
    with pytest.raises(MissingScopeError, match="some_fn"):
        resolve_qualified_path("some_fn", visibility, scope)
