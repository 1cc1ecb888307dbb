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

import re
from typing import FrozenSet, Sequence

RE_IDENTIFIER: re.Pattern = re.compile(r"(?:r#)?[A-Za-z_][A-Za-z_0-9]*")
RE_TUPLE_INDEX: re.Pattern = re.compile(r"0|[1-9][0-9]*")

# Keywords that may not name a parameter or a path segment. `crate`, `self`
# and `super` are handled by the path parser.
RESERVED_WORDS: FrozenSet[str] = frozenset([
    "as", "async", "await", "break", "const", "continue", "dyn", "else",
    "enum", "extern", "false", "fn", "for", "if", "impl", "in", "let",
    "loop", "match", "mod", "move", "mut", "pub", "ref", "return", "static",
    "struct", "trait", "true", "type", "unsafe", "use", "where", "while",
])

PATH_KEYWORDS: FrozenSet[str] = frozenset(["crate", "self", "super", "Self"])


def is_identifier(name: str) -> bool:
    if not RE_IDENTIFIER.fullmatch(name):
        return False
    if name == "_":
        return False
    return name not in RESERVED_WORDS and name not in PATH_KEYWORDS


def is_tuple_index(name: str) -> bool:
    return RE_TUPLE_INDEX.fullmatch(name) is not None


def split_path(path: str) -> Sequence[str]:
    """Splits a `::`-separated path into its trimmed segments. A leading `::`
    yields no empty segment."""
    path = path.strip()
    if path.startswith("::"):
        path = path[len("::"):]
    if len(path) == 0:
        return []
    return [segment.strip() for segment in path.split("::")]


def strip_raw_prefix(name: str) -> str:
    """`r#type` and `type` name the same identifier."""
    if name.startswith("r#"):
        return name[len("r#"):]
    return name
