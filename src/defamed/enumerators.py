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

from itertools import chain, combinations, permutations
from math import comb, factorial
from typing import Iterator, Sequence, Tuple

from defamed.types import CallForm, Signature


def powerset(positions: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    """Every subset of `positions`, smallest first, each in ascending order."""
    return chain.from_iterable(combinations(positions, size)
                               for size in range(len(positions) + 1))


def prefix_choices(signature: Signature) \
        -> Iterator[Tuple[int, Tuple[int, ...], Tuple[int, ...]]]:
    """Yields (prefix_len, mandatory, optional_candidates) for every legal
    positional prefix length. Required positions past the prefix must be
    named; defaulted positions past the prefix may be named or omitted."""

    num_parameters = signature.num_parameters
    num_required = signature.num_required

    for prefix_len in range(num_parameters + 1):
        mandatory = tuple(range(prefix_len, num_required))
        optional_candidates = tuple(range(max(prefix_len, num_required),
                                          num_parameters))
        yield prefix_len, mandatory, optional_candidates


def enumerate_call_forms(signature: Signature) -> Iterator[CallForm]:
    """Every call form whose named arguments appear in a fixed literal order.
    Matching on token order means each permutation of the named set is its
    own form, so the count grows factorially with the named set."""

    num_parameters = signature.num_parameters

    for prefix_len, mandatory, optional_candidates in prefix_choices(signature):
        for chosen in powerset(optional_candidates):
            named_set = mandatory + chosen
            omitted = frozenset(range(prefix_len, num_parameters)) \
                - frozenset(named_set)
            for named in permutations(named_set):
                yield CallForm(prefix_len=prefix_len,
                               named=named,
                               omitted=omitted)


def enumerate_canonical_call_forms(signature: Signature) -> Iterator[CallForm]:
    """One call form per (prefix length, named set), with the named
    positions in declaration order. Call sites are canonicalised by key
    before lookup, so argument order does not need its own form."""

    num_parameters = signature.num_parameters

    for prefix_len, mandatory, optional_candidates in prefix_choices(signature):
        for chosen in powerset(optional_candidates):
            named = mandatory + chosen
            omitted = frozenset(range(prefix_len, num_parameters)) \
                - frozenset(named)
            yield CallForm(prefix_len=prefix_len,
                           named=named,
                           omitted=omitted)


def count_call_forms(num_required: int,
                     num_defaulted: int,
                     canonical: bool = False) -> int:
    """Closed-form size of the table enumerate_call_forms (or, with
    `canonical`, enumerate_canonical_call_forms) produces."""

    num_parameters = num_required + num_defaulted
    total = 0
    for prefix_len in range(num_parameters + 1):
        num_mandatory = max(0, num_required - prefix_len)
        num_optional = num_parameters - max(prefix_len, num_required)
        for num_chosen in range(num_optional + 1):
            num_subsets = comb(num_optional, num_chosen)
            if canonical:
                total += num_subsets
            else:
                total += num_subsets * factorial(num_mandatory + num_chosen)
    return total
