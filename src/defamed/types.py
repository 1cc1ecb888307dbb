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

from collections import OrderedDict
from enum import Enum
from typing import (Any, Dict, FrozenSet, NamedTuple, Optional, Sequence,
                    Tuple, Type)

from defamed.utils.name_utils import strip_raw_prefix


class DefamedError(RuntimeError):
    """Top-level error class for everything raised while generating call
    forms or expanding call sites."""


class DeclarationError(DefamedError):
    """Specifies the declaration handed to the generator is malformed, such as
    an invalid identifier, a duplicated parameter name or a default that is
    not expressed with the `default` marker."""


class OrderError(DeclarationError):
    """A required parameter follows a defaulted one."""


class EmptyError(DeclarationError):
    """The declared item has no parameters or fields to permute."""


class FieldVisibilityError(DeclarationError):
    """A field of an aggregate is less visible than the aggregate itself, so
    the generated constructor call could not be expanded wherever the
    aggregate is reachable."""

    def __init__(self: "FieldVisibilityError",
                 message: str,
                 field_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.field_name = field_name


class MissingScopeError(DeclarationError):
    """A non-private item was declared without a scope token."""


class CallSiteError(DefamedError):
    """Top-level error class for failures while expanding a call site."""


class UnmatchedCallError(CallSiteError):
    """No compiled call form matches the arguments at the call site."""


class DispatchError(DefamedError):
    """The compiled dispatch table is inconsistent (e.g. two call forms
    compile to the same pattern). This indicates a bug in the enumerator."""


class DefamedEnum(Enum):

    @classmethod
    def values(cls: Type["DefamedEnum"]) -> Sequence[str]:
        return [enumerated.value for enumerated in cls]

    @classmethod
    def value_map(cls: Type["DefamedEnum"]) -> Dict[str, "DefamedEnum"]:
        """Returns a mapping of values to enumerated members."""
        return OrderedDict((enumerated.value, enumerated)
                           for enumerated in cls)

    @classmethod
    def find_by_value(cls: Type["DefamedEnum"], value: Any) -> "DefamedEnum":
        """Returns the member associated with the given value, or raises an
        error if none exists."""
        for enumerated in list(cls):
            if enumerated.value == value:
                return enumerated
        raise ValueError(f"No {cls.__name__} exists for value: {value}")

    def __str__(self: "DefamedEnum") -> str:
        return self.value


class ItemKind(DefamedEnum):
    """The sort of host item whose calling convention is being extended."""

    FUNCTION: str = "function"
    NAMED_FIELDS: str = "named_fields"
    TUPLE_FIELDS: str = "tuple_fields"

    @property
    def is_aggregate(self: "ItemKind") -> bool:
        return self is not ItemKind.FUNCTION


class DefaultKind(DefamedEnum):
    """How an omitted parameter is filled in."""

    NONE: str = "none"                  # required, never omitted
    TYPE_DEFAULT: str = "type_default"  # the type's default construction
    VALUE: str = "value"                # an explicit default expression


class VisibilityTier(DefamedEnum):
    PRIVATE: str = "private"
    RESTRICTED: str = "restricted"
    PUBLIC: str = "public"


class Visibility(NamedTuple):
    """Declared accessibility of an item or field. `path` holds the module
    segments of a restricted visibility, e.g. ("crate", "geometry") for
    `pub(in crate::geometry)`, and is empty otherwise."""

    tier: VisibilityTier
    path: Tuple[str, ...] = ()

    @property
    def is_private(self: "Visibility") -> bool:
        return self.tier is VisibilityTier.PRIVATE

    def __str__(self: "Visibility") -> str:
        if self.tier is VisibilityTier.PRIVATE:
            return "private"
        if self.tier is VisibilityTier.PUBLIC:
            return "pub"
        restriction = "::".join(self.path)
        if self.path in (("crate",), ("super",), ("self",)):
            return f"pub({restriction})"
        return f"pub(in {restriction})"


PRIVATE = Visibility(VisibilityTier.PRIVATE)
PUBLIC = Visibility(VisibilityTier.PUBLIC)
CRATE = Visibility(VisibilityTier.RESTRICTED, ("crate",))


class DeclaredParameter(NamedTuple):
    """A parameter (or field) as handed over by the declaration surface,
    before normalisation into a Signature."""

    name: str
    type_name: Optional[str] = None
    default_kind: DefaultKind = DefaultKind.NONE
    default_expr: Optional[str] = None
    visibility: Optional[Visibility] = None


class Declaration(NamedTuple):
    """Raw descriptor of one annotated item."""

    kind: ItemKind
    name: str
    parameters: Sequence[DeclaredParameter]
    visibility: Visibility = PRIVATE
    scope: Optional[str] = None


class Parameter(NamedTuple):
    name: str
    position: int
    type_name: Optional[str] = None
    default_kind: DefaultKind = DefaultKind.NONE
    default_expr: Optional[str] = None
    visibility: Visibility = PRIVATE

    @property
    def has_default(self: "Parameter") -> bool:
        return self.default_kind is not DefaultKind.NONE

    @property
    def metavar(self: "Parameter") -> str:
        """Name of the macro variable that captures this parameter's value."""
        if self.name.isdigit():
            return f"_{self.name}_val"
        return f"{strip_raw_prefix(self.name)}_val"


class Signature(NamedTuple):
    """Normalised, ordered parameters of a declaration. Built once per
    declaration and never mutated."""

    kind: ItemKind
    name: str
    parameters: Tuple[Parameter, ...]
    visibility: Visibility = PRIVATE
    scope: Optional[str] = None

    @property
    def num_parameters(self: "Signature") -> int:
        return len(self.parameters)

    @property
    def num_required(self: "Signature") -> int:
        return sum(1 for parameter in self.parameters
                   if not parameter.has_default)

    @property
    def num_defaulted(self: "Signature") -> int:
        return len(self.parameters) - self.num_required

    def position_of(self: "Signature", name: str) -> Optional[int]:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter.position
        return None


class CallForm(NamedTuple):
    """One legal call shape: `prefix_len` positional arguments followed by
    the parameters at the positions in `named`, in that literal order. The
    remaining positions are in `omitted` and take their defaults."""

    prefix_len: int
    named: Tuple[int, ...]
    omitted: FrozenSet[int]

    @property
    def arity(self: "CallForm") -> int:
        return self.prefix_len + len(self.named)


class Argument(NamedTuple):
    """One argument at a call site. Positional arguments have no key."""

    key: Optional[str]
    value: str

    @property
    def is_named(self: "Argument") -> bool:
        return self.key is not None

    def __str__(self: "Argument") -> str:
        if self.key is None:
            return self.value
        return f"{self.key} = {self.value}"


class QualifiedPath(NamedTuple):
    """Reference used by generated calls to reach the underlying item."""

    root_marker: Optional[str]
    module_segments: Tuple[str, ...]
    item_name: str

    @property
    def is_qualified(self: "QualifiedPath") -> bool:
        return self.root_marker is not None

    def __str__(self: "QualifiedPath") -> str:
        if self.root_marker is None:
            return self.item_name
        segments = [self.root_marker, *self.module_segments, self.item_name]
        return "::".join(segments)
