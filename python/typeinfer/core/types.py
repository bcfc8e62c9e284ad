# Copyright Rand Arete @ Ananke 2025
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================
"""Type representation for the inference engine.

Types form a closed set of tagged variants:
- Type variables (resolved through the substitution, never mutated)
- Primitive and literal types
- Function, generic, record, tuple and union types
- Member-access placeholders used while solving

Every node carries a globally unique ``id`` stamped by the type builders and
a ``frozen`` flag. Substitutions are keyed by ``id``, so any node (not only a
variable) can be replaced wholesale; this is what literal widening relies on.
The ``frozen`` flag is excluded from equality: it only controls whether a
node may be widened.

References:
    - Damas, L. and Milner, R. (1982). "Principal type-schemes for functional programs"
    - Pierce, B.C. (2002). "Types and Programming Languages", Chapter 22
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from typeinfer.core.literals import Literal

PropertyName = Union[str, int]

PRIMITIVE_NAMES = frozenset({"number", "string", "boolean", "null", "undefined"})


def merge_vars(*groups: Iterable[TVar]) -> Tuple[TVar, ...]:
    """Concatenate groups of type variables, keeping first occurrences only."""
    seen = set()
    result = []
    for group in groups:
        for tv in group:
            if tv.id not in seen:
                seen.add(tv.id)
                result.append(tv)
    return tuple(result)


# =============================================================================
# Type variants
# =============================================================================


class Type(ABC):
    """Abstract base class for all types.

    Each variant must implement the three traversals below. Keeping them
    abstract means a new variant cannot be added without deciding how
    substitution, free-variable collection and freezing treat it.
    """

    id: int
    frozen: bool

    @abstractmethod
    def free_type_vars(self) -> Tuple[TVar, ...]:
        """Return the free type variables, ordered by first appearance."""

    @abstractmethod
    def substitute(self, mapping: Mapping[int, Type]) -> Type:
        """Replace every node whose id is a key in ``mapping``.

        Nodes that are not replaced are rebuilt with their children
        substituted, preserving ``id`` and ``frozen``.
        """

    @abstractmethod
    def freeze(self) -> Type:
        """Return a copy of this type with the whole subtree frozen."""


@dataclass(frozen=True, slots=True)
class TVar(Type):
    """A unification variable.

    Equality and hashing use the id only: two variables with the same
    display name are still different variables.

    Attributes:
        id: Unique node identifier
        name: Display name used by the printer
    """

    id: int
    name: str = field(default="", compare=False)
    frozen: bool = field(default=False, compare=False)

    def free_type_vars(self) -> Tuple[TVar, ...]:
        return (self,)

    def substitute(self, mapping: Mapping[int, Type]) -> Type:
        return mapping.get(self.id, self)

    def freeze(self) -> Type:
        return replace(self, frozen=True)

    def __repr__(self) -> str:
        return f"TVar({self.name or self.id})"


@dataclass(frozen=True, slots=True)
class TPrim(Type):
    """A nominal primitive: number, string, boolean, null or undefined."""

    id: int
    name: str
    frozen: bool = field(default=False, compare=False)

    def free_type_vars(self) -> Tuple[TVar, ...]:
        return ()

    def substitute(self, mapping: Mapping[int, Type]) -> Type:
        return mapping.get(self.id, self)

    def freeze(self) -> Type:
        return replace(self, frozen=True)

    def __repr__(self) -> str:
        return f"TPrim({self.name})"


@dataclass(frozen=True, slots=True)
class TLit(Type):
    """A literal type such as the type ``5`` or the type ``"hi"``."""

    id: int
    value: Literal
    frozen: bool = field(default=False, compare=False)

    @property
    def prim_name(self) -> str:
        return self.value.prim_name

    def free_type_vars(self) -> Tuple[TVar, ...]:
        return ()

    def substitute(self, mapping: Mapping[int, Type]) -> Type:
        return mapping.get(self.id, self)

    def freeze(self) -> Type:
        return replace(self, frozen=True)

    def __repr__(self) -> str:
        return f"TLit({self.value!r})"


@dataclass(frozen=True, slots=True)
class TFun(Type):
    """A function type.

    Attributes:
        args: Ordered parameter types
        ret: Return type
        variadic: True when the last parameter is a rest array
    """

    id: int
    args: Tuple[Type, ...]
    ret: Type
    variadic: bool = False
    frozen: bool = field(default=False, compare=False)

    def free_type_vars(self) -> Tuple[TVar, ...]:
        return merge_vars(
            *(arg.free_type_vars() for arg in self.args), self.ret.free_type_vars()
        )

    def substitute(self, mapping: Mapping[int, Type]) -> Type:
        if self.id in mapping:
            return mapping[self.id]
        return replace(
            self,
            args=tuple(arg.substitute(mapping) for arg in self.args),
            ret=self.ret.substitute(mapping),
        )

    def freeze(self) -> Type:
        return replace(
            self,
            args=tuple(arg.freeze() for arg in self.args),
            ret=self.ret.freeze(),
            frozen=True,
        )


@dataclass(frozen=True, slots=True)
class TGen(Type):
    """A generic nominal type such as ``Array<T>`` or ``Promise<T>``.

    Member access resolves it against the environment's scheme for ``name``.
    """

    id: int
    name: str
    params: Tuple[Type, ...] = ()
    frozen: bool = field(default=False, compare=False)

    def free_type_vars(self) -> Tuple[TVar, ...]:
        return merge_vars(*(param.free_type_vars() for param in self.params))

    def substitute(self, mapping: Mapping[int, Type]) -> Type:
        if self.id in mapping:
            return mapping[self.id]
        return replace(
            self, params=tuple(param.substitute(mapping) for param in self.params)
        )

    def freeze(self) -> Type:
        return replace(
            self, params=tuple(param.freeze() for param in self.params), frozen=True
        )


@dataclass(frozen=True, slots=True)
class TProp:
    """A named property of a record type."""

    name: str
    type: Type

    def substitute(self, mapping: Mapping[int, Type]) -> TProp:
        return TProp(self.name, self.type.substitute(mapping))

    def freeze(self) -> TProp:
        return TProp(self.name, self.type.freeze())


@dataclass(frozen=True, slots=True)
class TRec(Type):
    """A structural record type. Property order is irrelevant."""

    id: int
    properties: Tuple[TProp, ...]
    frozen: bool = field(default=False, compare=False)

    def get(self, name: str) -> Optional[Type]:
        for prop in self.properties:
            if prop.name == name:
                return prop.type
        return None

    def keys(self) -> Tuple[str, ...]:
        return tuple(prop.name for prop in self.properties)

    def free_type_vars(self) -> Tuple[TVar, ...]:
        return merge_vars(*(prop.type.free_type_vars() for prop in self.properties))

    def substitute(self, mapping: Mapping[int, Type]) -> Type:
        if self.id in mapping:
            return mapping[self.id]
        return replace(
            self, properties=tuple(prop.substitute(mapping) for prop in self.properties)
        )

    def freeze(self) -> Type:
        return replace(
            self,
            properties=tuple(prop.freeze() for prop in self.properties),
            frozen=True,
        )


@dataclass(frozen=True, slots=True)
class TTuple(Type):
    """A fixed-length heterogeneous sequence."""

    id: int
    types: Tuple[Type, ...]
    frozen: bool = field(default=False, compare=False)

    def free_type_vars(self) -> Tuple[TVar, ...]:
        return merge_vars(*(ty.free_type_vars() for ty in self.types))

    def substitute(self, mapping: Mapping[int, Type]) -> Type:
        if self.id in mapping:
            return mapping[self.id]
        return replace(self, types=tuple(ty.substitute(mapping) for ty in self.types))

    def freeze(self) -> Type:
        return replace(
            self, types=tuple(ty.freeze() for ty in self.types), frozen=True
        )


@dataclass(frozen=True, slots=True)
class TUnion(Type):
    """A union of alternatives. Duplicates are allowed until normalized."""

    id: int
    types: Tuple[Type, ...]
    frozen: bool = field(default=False, compare=False)

    def free_type_vars(self) -> Tuple[TVar, ...]:
        return merge_vars(*(ty.free_type_vars() for ty in self.types))

    def substitute(self, mapping: Mapping[int, Type]) -> Type:
        if self.id in mapping:
            return mapping[self.id]
        return replace(self, types=tuple(ty.substitute(mapping) for ty in self.types))

    def freeze(self) -> Type:
        return replace(
            self, types=tuple(ty.freeze() for ty in self.types), frozen=True
        )


@dataclass(frozen=True, slots=True)
class TMem(Type):
    """The deferred type of ``property`` on ``object``.

    Only exists while solving, for member access on variables whose
    shape is not known yet.
    """

    id: int
    object: Type
    property: PropertyName
    frozen: bool = field(default=False, compare=False)

    def free_type_vars(self) -> Tuple[TVar, ...]:
        return self.object.free_type_vars()

    def substitute(self, mapping: Mapping[int, Type]) -> Type:
        if self.id in mapping:
            return mapping[self.id]
        return replace(self, object=self.object.substitute(mapping))

    def freeze(self) -> Type:
        return replace(self, object=self.object.freeze(), frozen=True)


# =============================================================================
# Schemes and constraints
# =============================================================================


@dataclass(frozen=True, slots=True)
class Scheme:
    """A polymorphic type: the body quantified over ``qualifiers``.

    Attributes:
        qualifiers: The locally bound type variables
        type: The quantified type
    """

    qualifiers: Tuple[TVar, ...]
    type: Type

    def free_type_vars(self) -> Tuple[TVar, ...]:
        bound = {q.id for q in self.qualifiers}
        return tuple(tv for tv in self.type.free_type_vars() if tv.id not in bound)

    def substitute(self, mapping: Mapping[int, Type]) -> Scheme:
        # Qualifiers are bound locally and must not be rewritten.
        bound = {q.id for q in self.qualifiers}
        restricted = {key: value for key, value in mapping.items() if key not in bound}
        return Scheme(self.qualifiers, self.type.substitute(restricted))

    def freeze(self) -> Scheme:
        return Scheme(self.qualifiers, self.type.freeze())


def scheme(qualifiers: Iterable[TVar], ty: Type) -> Scheme:
    """Build a scheme from any iterable of qualifiers."""
    return Scheme(tuple(qualifiers), ty)


@dataclass(frozen=True, slots=True)
class Constraint:
    """A requirement between two types.

    With ``subtype`` False the two types must unify exactly. With
    ``subtype`` True the first type must be usable where the second one
    is expected.
    """

    types: Tuple[Type, Type]
    subtype: bool = False

    @property
    def left(self) -> Type:
        return self.types[0]

    @property
    def right(self) -> Type:
        return self.types[1]

    def free_type_vars(self) -> Tuple[TVar, ...]:
        return merge_vars(self.left.free_type_vars(), self.right.free_type_vars())

    def substitute(self, mapping: Mapping[int, Type]) -> Constraint:
        return Constraint(
            (self.left.substitute(mapping), self.right.substitute(mapping)),
            self.subtype,
        )


def is_generic(ty: Type, name: str) -> bool:
    """Check whether ``ty`` is the generic type ``name`` with one parameter."""
    return isinstance(ty, TGen) and ty.name == name and len(ty.params) == 1


@dataclass(slots=True)
class InferResult:
    """The type of an expression and the constraints gathered to reach it."""

    type: Type
    constraints: List[Constraint] = field(default_factory=list)
