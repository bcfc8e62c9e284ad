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
"""Substitutions and the generic ``apply`` / ``ftv`` traversals.

A substitution maps node ids to types. It is the only way sharing between
types is expressed: type variables are never mutated, resolving one is a
lookup by id. Substitutions are kept path-compressed by always composing
fully, so a single lookup is enough.

References:
    - Robinson, J.A. (1965). "A Machine-Oriented Logic Based on the Resolution Principle"
    - Pierce, B.C. (2002). "Types and Programming Languages", Chapter 22
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from typeinfer.core.environment import Env
from typeinfer.core.types import Constraint, Scheme, TVar, Type, merge_vars


@dataclass
class Substitution:
    """A mapping from node ids to the types that replace them.

    Attributes:
        mapping: Dictionary from node id to its bound type
    """

    mapping: Dict[int, Type] = field(default_factory=dict)

    def apply(self, value: Any) -> Any:
        """Apply this substitution to a type-bearing value.

        Accepts a Type, Scheme, Constraint, Env, or a list/tuple of those.

        Args:
            value: The value to rewrite

        Returns:
            A new value of the same shape with the substitution applied
        """
        return apply(self, value)

    def compose(self, older: Substitution) -> Substitution:
        """Compose two substitutions (self ∘ older).

        Every binding of ``older`` gets ``self`` re-applied to stay current,
        then ``self``'s bindings are merged in and win on overlapping keys.

        Args:
            older: The previously accumulated substitution

        Returns:
            A new substitution equivalent to applying ``older`` then ``self``
        """
        if not self.mapping:
            return older
        new_mapping = {
            key: ty.substitute(self.mapping) for key, ty in older.mapping.items()
        }
        new_mapping.update(self.mapping)
        return Substitution(new_mapping)

    def extend(self, key: int, ty: Type) -> Substitution:
        """Return a new substitution with one additional binding."""
        new_mapping = dict(self.mapping)
        new_mapping[key] = ty
        return Substitution(new_mapping)

    def get(self, key: int) -> Optional[Type]:
        return self.mapping.get(key)

    def items(self) -> Iterator[Tuple[int, Type]]:
        return iter(self.mapping.items())

    def __contains__(self, key: object) -> bool:
        return key in self.mapping

    def __len__(self) -> int:
        return len(self.mapping)

    def __bool__(self) -> bool:
        return bool(self.mapping)

    def __repr__(self) -> str:
        if not self.mapping:
            return "Substitution({})"
        items = ", ".join(f"{k} ↦ {v!r}" for k, v in sorted(self.mapping.items()))
        return f"Substitution({{{items}}})"


# Empty substitution singleton
EMPTY_SUBSTITUTION = Substitution()


def singleton(key: int, ty: Type) -> Substitution:
    """Create a substitution with exactly one binding."""
    return Substitution({key: ty})


def apply(subst: Substitution, value: Any) -> Any:
    """Apply ``subst`` to a Type, Scheme, Constraint, Env or sequence of them.

    Raises:
        TypeError: If ``value`` is not one of the supported shapes
    """
    if isinstance(value, (Type, Scheme, Constraint)):
        if not subst.mapping:
            return value
        return value.substitute(subst.mapping)
    if isinstance(value, Env):
        return value.substitute(subst.mapping)
    if isinstance(value, list):
        return [apply(subst, item) for item in value]
    if isinstance(value, tuple):
        return tuple(apply(subst, item) for item in value)
    raise TypeError(f"cannot apply a substitution to {type(value).__name__}")


def ftv(value: Any) -> Tuple[TVar, ...]:
    """Free type variables of a Type, Scheme, Constraint, Env or sequence.

    The result is ordered by first appearance and contains no duplicates.

    Raises:
        TypeError: If ``value`` is not one of the supported shapes
    """
    if isinstance(value, (Type, Scheme, Constraint, Env)):
        return value.free_type_vars()
    if isinstance(value, (list, tuple)):
        return merge_vars(*(ftv(item) for item in value))
    raise TypeError(f"cannot collect free type variables of {type(value).__name__}")


def occurs_check(var: TVar, ty: Type) -> bool:
    """Check if a type variable occurs in a type.

    Used to prevent infinite types like ``a = (a) => b``.

    Args:
        var: The type variable to look for
        ty: The type to search in

    Returns:
        True if ``var`` is free in ``ty``
    """
    return any(tv.id == var.id for tv in ty.free_type_vars())


def apply_all(subst: Substitution, constraints: List[Constraint]) -> List[Constraint]:
    """Apply a substitution to a list of constraints."""
    if not subst.mapping:
        return list(constraints)
    return [c.substitute(subst.mapping) for c in constraints]
