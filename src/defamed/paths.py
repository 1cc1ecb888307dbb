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
import re
from typing import Optional, Sequence, Tuple, Union

from defamed.types import (PRIVATE, PUBLIC, DeclarationError,
                           MissingScopeError, QualifiedPath, Visibility,
                           VisibilityTier)
from defamed.utils.name_utils import PATH_KEYWORDS, is_identifier, split_path

LOGGER = logging.getLogger()

DEFAULT_ROOT_MARKER = "$crate"

RE_RESTRICTED: re.Pattern = re.compile(
    r"pub\s*\(\s*(?:(crate|self|super)|in\s+([^)]+?))\s*\)")


def parse_visibility(visibility: Union[str, Visibility, None]) -> Visibility:
    """Parses host visibility syntax:

        ""  / "private"       -> PRIVATE
        "pub"                 -> PUBLIC
        "pub(crate)"          -> RESTRICTED ("crate",)
        "pub(super)"          -> RESTRICTED ("super",)
        "pub(self)"           -> RESTRICTED ("self",)
        "pub(in crate::a::b)" -> RESTRICTED ("crate", "a", "b")
    """

    if visibility is None:
        return PRIVATE

    if isinstance(visibility, Visibility):
        return visibility

    text = visibility.strip()
    if text in ("", "private"):
        return PRIVATE

    if text == "pub":
        return PUBLIC

    match = RE_RESTRICTED.fullmatch(text)
    if match is None:
        raise DeclarationError(f"Invalid visibility: {visibility!r}")

    if match.group(1) is not None:
        return Visibility(VisibilityTier.RESTRICTED, (match.group(1),))

    segments = split_path(match.group(2))
    validate_segments(segments, visibility)
    if segments[0] not in ("crate", "self", "super"):
        raise DeclarationError(
            f"Restricted visibility must be rooted at crate, self or super: "
            f"{visibility!r}")
    return Visibility(VisibilityTier.RESTRICTED, tuple(segments))


def validate_segments(segments: Sequence[str], source: str) -> None:
    if len(segments) == 0:
        raise DeclarationError(f"Empty path: {source!r}")
    for index, segment in enumerate(segments):
        if segment in PATH_KEYWORDS:
            # `super` may repeat at the head of a path, the others may only
            # lead it.
            if segment == "super" and all(prev == "super"
                                          for prev in segments[:index]):
                continue
            if index == 0:
                continue
            raise DeclarationError(
                f"Path keyword {segment!r} may only lead a path: {source!r}")
        if not is_identifier(segment):
            raise DeclarationError(
                f"Invalid path segment {segment!r} in {source!r}")


def parse_scope_token(scope_token: str) -> Tuple[str, ...]:
    """Returns the module segments of a scope token relative to the crate
    root. Both `crate::geometry::shapes` and `geometry::shapes` resolve to
    ("geometry", "shapes"); `crate` alone resolves to the root."""

    segments = split_path(scope_token)
    validate_segments(segments, scope_token)
    if segments[0] == "crate":
        segments = segments[1:]
    elif segments[0] in PATH_KEYWORDS:
        raise DeclarationError(
            f"Scope tokens must be absolute (relative to the crate root): "
            f"{scope_token!r}")
    return tuple(segments)


def resolve_qualified_path(item_name: str,
                           visibility: Visibility,
                           scope_token: Optional[str],
                           root_marker: str = DEFAULT_ROOT_MARKER) \
        -> QualifiedPath:

    if visibility.is_private:
        if scope_token is not None:
            LOGGER.debug("Ignoring scope %s for private item %s",
                         scope_token, item_name)
        return QualifiedPath(root_marker=None,
                             module_segments=(),
                             item_name=item_name)

    if scope_token is None or len(scope_token.strip()) == 0:
        raise MissingScopeError(
            f"Item [{item_name}] has visibility {visibility} and requires an "
            f"explicit scope token (e.g. \"crate::path::to::module\")")

    module_segments = parse_scope_token(scope_token)
    return QualifiedPath(root_marker=root_marker,
                         module_segments=module_segments,
                         item_name=item_name)
