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
from typing import List, Optional, Tuple

from defamed.types import Argument, UnmatchedCallError
from defamed.utils.name_utils import is_identifier, is_tuple_index

OPENING_BRACKETS = {"(": ")", "[": "]", "{": "}"}
CLOSING_BRACKETS = {")", "]", "}"}

# Characters that turn a preceding "=" into another operator.
COMPARISON_SUFFIXES = {"=", ">"}

# Characters after which a `|` begins a closure rather than a bitwise or.
CLOSURE_PRECEDERS = {"(", "[", "{", ",", "="}

RE_MOVE: re.Pattern = re.compile(r"(?:^|[^A-Za-z0-9_])move$")

RE_KEY: re.Pattern = re.compile(r"\s*((?:r#)?[A-Za-z_][A-Za-z_0-9]*|[0-9]+)\s*")


def skip_literal(text: str, start: int) -> int:
    """Returns the index just past the string or char literal opening at
    `start`. Lifetimes (`'a`) are not literals and are skipped over as a
    single character."""

    quote = text[start]
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        if quote == "'" and index - start > 2 \
           and not text[start + 1] == "\\":
            # `'a` was a lifetime rather than a char literal
            return start + 1
        index += 1
    if quote == "'":
        return start + 1
    raise UnmatchedCallError(f"unterminated string literal: {text[start:]}")


def starts_closure(text: str, index: int) -> bool:
    """Whether the `|` at `index` opens a closure's parameter list, which
    happens only where an expression may begin."""
    preceding = text[:index].rstrip()
    if len(preceding) == 0 or preceding[-1] in CLOSURE_PRECEDERS:
        return True
    return RE_MOVE.search(preceding) is not None


def split_arguments(text: str) -> List[str]:
    """Splits call-site text at top-level commas. Commas nested in brackets,
    literals, closure parameter lists (`|a, b|`) or turbofish generics
    (`::<A, B>`) do not split. A single trailing comma is accepted."""

    pieces: List[str] = []
    stack: List[str] = []
    start = 0
    index = 0

    while index < len(text):
        char = text[index]
        in_generics = len(stack) > 0 and stack[-1] == ">"
        if char in ("\"", "'"):
            index = skip_literal(text, index)
            continue
        if text.startswith("::<", index):
            stack.append(">")
            index += len("::<")
            continue
        if char == "|":
            if len(stack) > 0 and stack[-1] == "|":
                stack.pop()
            elif not in_generics and starts_closure(text, index):
                if text.startswith("||", index):
                    # no parameters
                    index += len("||")
                    continue
                stack.append("|")
        elif in_generics and char == "<":
            stack.append(">")
        elif in_generics and char == ">":
            if text[index - 1] != "-":
                stack.pop()
        elif char in OPENING_BRACKETS:
            stack.append(OPENING_BRACKETS[char])
        elif char in CLOSING_BRACKETS:
            if len(stack) == 0 or stack.pop() != char:
                raise UnmatchedCallError(f"unbalanced delimiter {char!r} in: "
                                         f"{text}")
        elif char == "," and len(stack) == 0:
            pieces.append(text[start:index])
            start = index + 1
        index += 1

    if len(stack) > 0:
        raise UnmatchedCallError(f"unclosed delimiter in: {text}")

    tail = text[start:]
    if len(tail.strip()) > 0:
        pieces.append(tail)

    return pieces


def split_key(piece: str) -> Tuple[Optional[str], str]:
    """Splits `key = value` into its key and value. Anything else is a
    positional value."""

    match = RE_KEY.match(piece)
    if match is None:
        return None, piece.strip()

    index = match.end()
    if index >= len(piece) or piece[index] != "=":
        return None, piece.strip()

    following = piece[index + 1:index + 2]
    if following in COMPARISON_SUFFIXES:
        return None, piece.strip()

    key = match.group(1)
    if not (is_identifier(key) or is_tuple_index(key)):
        return None, piece.strip()

    return key, piece[index + 1:].strip()


def parse_arguments(text: Optional[str]) -> List[Argument]:
    """Parses the argument list of a call site, e.g.

        5, 5, divide_result_by = Some(2)

    into [Argument(None, "5"), Argument(None, "5"),
    Argument("divide_result_by", "Some(2)")]."""

    if text is None or len(text.strip()) == 0:
        return []

    arguments = []
    for piece in split_arguments(text):
        key, value = split_key(piece)
        if len(value) == 0:
            raise UnmatchedCallError(f"empty argument in: {text}")
        arguments.append(Argument(key, value))
    return arguments
