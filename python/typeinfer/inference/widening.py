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
"""Structural subtyping and literal widening.

Widening is how the engine infers ``5 | 10`` for a parameter that receives
both ``5`` and ``10``: when two unfrozen types fail to unify, both are
replaced (by node id) with their union instead of raising.

Union normalization:
    1. Flatten nested unions
    2. Deduplicate primitives by name and literals by value
    3. Drop literals whose primitive is also present (5 | number -> number)
    4. Replace true | false with boolean
    5. Order as primitives, literals, then everything else
    6. A single remaining member is returned on its own

References:
    - Pierce, B.C. (2002). "Types and Programming Languages", Chapter 15
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple

from typeinfer.core.builders import copy_type, tprim, tunion
from typeinfer.core.context import Context
from typeinfer.core.literals import LBool, literal_sort_key, literals_equal
from typeinfer.core.substitution import Substitution
from typeinfer.core.types import (
    TFun,
    TGen,
    TLit,
    TPrim,
    TRec,
    TTuple,
    TUnion,
    TVar,
    Type,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Subtyping
# =============================================================================


def is_subtype(sub: Type, sup: Type) -> bool:
    """Check whether a value of type ``sub`` can be used where ``sup`` is expected.

    Args:
        sub: The candidate subtype
        sup: The expected supertype

    Returns:
        True if ``sub`` <: ``sup``
    """
    if isinstance(sub, TUnion):
        return all(is_subtype(member, sup) for member in sub.types)
    if isinstance(sup, TUnion):
        return any(is_subtype(sub, member) for member in sup.types)

    if isinstance(sub, TVar) or isinstance(sup, TVar):
        return isinstance(sub, TVar) and isinstance(sup, TVar) and sub.id == sup.id

    if isinstance(sub, TLit):
        if isinstance(sup, TLit):
            return literals_equal(sub.value, sup.value)
        if isinstance(sup, TPrim):
            return sub.prim_name == sup.name
        return False

    if isinstance(sub, TPrim):
        return isinstance(sup, TPrim) and sub.name == sup.name

    if isinstance(sub, TTuple):
        if isinstance(sup, TTuple):
            return len(sub.types) == len(sup.types) and all(
                is_subtype(s, t) for s, t in zip(sub.types, sup.types)
            )
        if isinstance(sup, TGen) and sup.name == "Array" and len(sup.params) == 1:
            return all(is_subtype(elem, sup.params[0]) for elem in sub.types)
        return False

    if isinstance(sub, TGen):
        # Generics are covariant in all parameters
        return (
            isinstance(sup, TGen)
            and sub.name == sup.name
            and len(sub.params) == len(sup.params)
            and all(is_subtype(s, t) for s, t in zip(sub.params, sup.params))
        )

    if isinstance(sub, TRec):
        if not isinstance(sup, TRec):
            return False
        # Width subtyping: sub may have more properties than sup
        for prop in sup.properties:
            sub_type = sub.get(prop.name)
            if sub_type is None or not is_subtype(sub_type, prop.type):
                return False
        return True

    if isinstance(sub, TFun):
        if not isinstance(sup, TFun):
            return False
        # A function needing more arguments than the caller supplies is
        # not a subtype.
        if len(sub.args) > len(sup.args):
            return False
        return all(
            is_subtype(sup_arg, sub_arg) for sub_arg, sup_arg in zip(sub.args, sup.args)
        ) and is_subtype(sub.ret, sup.ret)

    return False


# =============================================================================
# Union normalization
# =============================================================================


def flatten_union(ty: Type) -> List[Type]:
    """Return the members of ``ty`` with nested unions spliced in."""
    if isinstance(ty, TUnion):
        return [member for inner in ty.types for member in flatten_union(inner)]
    return [ty]


def compute_union(types: Iterable[Type], ctx: Context) -> Type:
    """Normalize ``types`` into a single type.

    Members of the result are copies with fresh ids, so the result never
    shares an id with the types it was built from. Binding those original
    ids to the result is therefore safe to re-apply.

    Args:
        types: Types to combine; unions among them are flattened
        ctx: Context used to stamp fresh ids

    Returns:
        A union, or the single remaining member
    """
    flat = [member for ty in types for member in flatten_union(ty)]

    prims: List[TPrim] = []
    lits: List[TLit] = []
    others: List[Type] = []
    for ty in flat:
        if isinstance(ty, TPrim):
            if all(p.name != ty.name for p in prims):
                prims.append(ty)
        elif isinstance(ty, TLit):
            if all(not literals_equal(lit.value, ty.value) for lit in lits):
                lits.append(ty)
        elif all(other.id != ty.id for other in others):
            others.append(ty)

    prim_names = {p.name for p in prims}
    lits = [lit for lit in lits if lit.prim_name not in prim_names]

    bools = [lit for lit in lits if isinstance(lit.value, LBool)]
    if len(bools) == 2:
        lits = [lit for lit in lits if not isinstance(lit.value, LBool)]
        prims.append(tprim("boolean", ctx))

    members: List[Type] = [copy_type(ty, ctx) for ty in (*prims, *lits, *others)]
    if len(members) == 1:
        return members[0]
    return tunion(members, ctx)


def simplify_union(ty: Type, ctx: Context) -> Type:
    """Normalize a union; any other type is returned unchanged."""
    if not isinstance(ty, TUnion):
        return ty
    return compute_union(ty.types, ctx)


def canonical_order(types: Sequence[Type]) -> Tuple[Type, ...]:
    """Order union members as primitives by name, literals by value, then the rest."""

    def key(indexed: Tuple[int, Type]) -> tuple:
        index, ty = indexed
        if isinstance(ty, TPrim):
            return (0, ty.name, 0)
        if isinstance(ty, TLit):
            return (1, literal_sort_key(ty.value), 0)
        return (2, "", index)

    return tuple(ty for _, ty in sorted(enumerate(types), key=key))


def widen(t1: Type, t2: Type, ctx: Context) -> Substitution:
    """Bind both ``t1`` and ``t2`` (by id) to their normalized union.

    Raises:
        ValueError: If either side is frozen
    """
    if t1.frozen or t2.frozen:
        raise ValueError("frozen types cannot be widened")
    union = compute_union([t1, t2], ctx)
    logger.debug(f"Widening {t1!r} and {t2!r} to {union!r}")
    return Substitution({t1.id: union, t2.id: union})
