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

from typing import Optional, Tuple

from defamed.paths import parse_scope_token
from defamed.types import (DeclarationError, FieldVisibilityError, Signature,
                           Visibility, VisibilityTier)

ModulePath = Tuple[str, ...]


def super_depth(visibility: Visibility) -> int:
    depth = 0
    for segment in visibility.path:
        if segment != "super":
            break
        depth += 1
    return depth


def module_path_of(scope: Optional[str], depth: int) -> ModulePath:
    """Absolute path of the declaring module, relative to the crate root.
    Without a scope token the module is unknown; it is stood in for by
    `depth` placeholder segments, enough for every `super` to resolve."""

    if scope is None:
        return tuple(f"<module {index}>" for index in range(depth))
    return parse_scope_token(scope)


def restriction_of(visibility: Visibility,
                   module_path: ModulePath) -> Optional[ModulePath]:
    """Returns the absolute path of the module a visibility restricts
    access to, or None when it is unrestricted. `pub(crate)` is the crate
    root, `()`. Private and `pub(self)` are both the declaring module."""

    if visibility.tier is VisibilityTier.PUBLIC:
        return None

    if visibility.tier is VisibilityTier.PRIVATE:
        return module_path

    head = visibility.path[0]
    if head == "crate":
        return tuple(visibility.path[1:])

    if head == "self":
        return module_path + tuple(visibility.path[1:])

    depth = super_depth(visibility)
    if depth > len(module_path):
        raise DeclarationError(
            f"Visibility {visibility} reaches past the crate root from "
            f"module {'::'.join(('crate',) + module_path)}")
    return module_path[:len(module_path) - depth] \
        + tuple(visibility.path[depth:])


def is_at_least_as_visible(visibility: Visibility,
                           reference: Visibility,
                           scope: Optional[str] = None) -> bool:
    """Whether `visibility` exposes an item to every scope `reference` does,
    both being declared in the module named by `scope`. Restrictions
    compare by absolute module path: the wider restriction is the ancestor,
    so `pub(crate)` covers `pub(super)` and `pub(self)` is the same as
    private."""

    depth = max(super_depth(visibility), super_depth(reference)) + 1
    module_path = module_path_of(scope, depth)

    region = restriction_of(visibility, module_path)
    if region is None:
        return True

    reference_region = restriction_of(reference, module_path)
    if reference_region is None:
        return False

    return reference_region[:len(region)] == region


def validate_field_visibility(signature: Signature) -> None:
    """Every field of an aggregate must be constructible wherever the
    aggregate is visible, since the emitted constructor names all fields.
    Functions are not checked."""

    if not signature.kind.is_aggregate:
        return

    for parameter in signature.parameters:
        if not is_at_least_as_visible(parameter.visibility,
                                      signature.visibility,
                                      signature.scope):
            raise FieldVisibilityError(
                f"Field [{parameter.name}] of [{signature.name}] has "
                f"visibility {parameter.visibility} but the aggregate is "
                f"{signature.visibility}; every field must be at least as "
                f"visible as the aggregate",
                field_name=parameter.name)
