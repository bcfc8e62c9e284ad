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
"""Constraint solver.

Solves a list of constraints into a single substitution by unifying them
one at a time. After each step the new bindings are composed into the
accumulated substitution and applied to the constraints still pending.

Unification extends Robinson's algorithm with:
- partial application and extra-argument tolerance for functions
- variadic functions (trailing arguments are folded into a tuple)
- structural records, tuples and unions
- deferred member access placeholders
- literal widening: unfrozen types that do not unify are joined

References:
    - Robinson, J.A. (1965). "A Machine-Oriented Logic Based on the Resolution Principle"
    - Pierce, B.C. (2002). "Types and Programming Languages", Chapter 22
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Sequence

from typeinfer.core.builders import tfun, ttuple
from typeinfer.core.context import Context
from typeinfer.core.literals import literals_equal
from typeinfer.core.substitution import (
    EMPTY_SUBSTITUTION,
    Substitution,
    apply_all,
    occurs_check,
)
from typeinfer.core.types import (
    Constraint,
    TFun,
    TGen,
    TLit,
    TMem,
    TPrim,
    TRec,
    TTuple,
    TUnion,
    TVar,
    Type,
)
from typeinfer.errors import (
    ExtraProperties,
    InfiniteType,
    MissingProperties,
    SolverLimitExceeded,
    SubtypingFailure,
    UnificationFail,
    UnificationMismatch,
)
from typeinfer.inference.member import MemberResolver
from typeinfer.inference.widening import canonical_order, is_subtype, widen
from typeinfer.printer import print_types

logger = logging.getLogger(__name__)


def zip_types(
    ts1: Sequence[Type], ts2: Sequence[Type], subtype: bool, flip: bool = False
) -> List[Constraint]:
    """Pair two type lists into constraints.

    With ``flip`` set, a pair of two function types is swapped: a callback
    declared by the callee plays the role of the caller for the lambda
    that is passed in.
    """
    constraints = []
    for t1, t2 in zip(ts1, ts2):
        if flip and isinstance(t1, TFun) and isinstance(t2, TFun):
            constraints.append(Constraint((t2, t1), subtype))
        else:
            constraints.append(Constraint((t1, t2), subtype))
    return constraints


class Solver:
    """Solves constraints within one context.

    A solver is cheap to create; the engine makes one per top-level call
    and hands it to the constraint generator, which reuses it for the
    values of ``let`` bindings. Its step counter therefore covers every
    solve of the call, nested ones included, and the configured limit
    bounds the whole call.
    """

    def __init__(self, ctx: Context):
        self.ctx = ctx
        self.members = MemberResolver(ctx)
        self.steps = 0
        self.max_steps = ctx.config.max_solver_steps
        self.trace = ctx.config.trace_solver

    def solve(self, constraints: Iterable[Constraint]) -> Substitution:
        """Solve constraints in order.

        Args:
            constraints: Constraints to solve, typically in generation order

        Returns:
            The accumulated substitution

        Raises:
            TypeInferenceError: On the first constraint that cannot be solved
        """
        subst = EMPTY_SUBSTITUTION
        pending = list(constraints)
        while pending:
            constraint, pending = pending[0], pending[1:]
            step = self.unify(constraint)
            subst = step.compose(subst)
            pending = apply_all(step, pending)
        return subst

    def unify(self, c: Constraint) -> Substitution:
        """Unify the two sides of one constraint."""
        self.steps += 1
        if self.max_steps is not None and self.steps > self.max_steps:
            raise SolverLimitExceeded(self.max_steps)

        t1, t2 = c.types
        if self.trace:
            left, right = print_types(t1, t2)
            relation = "<:" if c.subtype else "=="
            logger.debug(f"unify #{self.steps}: {left} {relation} {right}")

        if isinstance(t1, TVar):
            return self.bind(t1, t2)
        if isinstance(t2, TVar):
            return self.bind(t2, t1)

        if isinstance(t1, TMem) and isinstance(t2, TMem) and t1.property == t2.property:
            return self.unify(Constraint((t1.object, t2.object), c.subtype))

        # Placeholders whose object is known by now are resolved and retried
        resolved1 = self.members.resolve(t1) if isinstance(t1, TMem) else t1
        resolved2 = self.members.resolve(t2) if isinstance(t2, TMem) else t2
        if resolved1 is not t1 or resolved2 is not t2:
            return self.unify(Constraint((resolved1, resolved2), c.subtype))

        if isinstance(t1, TFun) and isinstance(t2, TFun):
            return self.unify_funcs(t1, t2, c.subtype)

        if isinstance(t1, TPrim) and isinstance(t2, TPrim) and t1.name == t2.name:
            return EMPTY_SUBSTITUTION
        if (
            isinstance(t1, TLit)
            and isinstance(t2, TLit)
            and literals_equal(t1.value, t2.value)
        ):
            return EMPTY_SUBSTITUTION

        if isinstance(t1, TGen) and isinstance(t2, TGen) and t1.name == t2.name:
            if len(t1.params) != len(t2.params):
                raise UnificationMismatch(t1.params, t2.params)
            return self.unify_many(zip_types(t1.params, t2.params, c.subtype))

        if isinstance(t1, TUnion) and isinstance(t2, TUnion):
            return self.unify_unions(t1, t2, c.subtype)
        if isinstance(t1, TTuple) and isinstance(t2, TTuple):
            if len(t1.types) != len(t2.types):
                raise UnificationFail(t1, t2)
            return self.unify_many(zip_types(t1.types, t2.types, c.subtype))
        if isinstance(t1, TRec) and isinstance(t2, TRec):
            return self.unify_records(t1, t2, c.subtype)

        if (
            isinstance(t1, TTuple)
            and isinstance(t2, TGen)
            and t2.name == "Array"
            and len(t2.params) == 1
        ):
            elem_type = t2.params[0]
            return self.unify_many(
                [Constraint((elem, elem_type), c.subtype) for elem in t1.types]
            )

        if c.subtype and is_subtype(t1, t2):
            return EMPTY_SUBSTITUTION

        if not t1.frozen and not t2.frozen:
            return widen(t1, t2, self.ctx)

        if c.subtype:
            raise SubtypingFailure(t1, t2)
        raise UnificationFail(t1, t2)

    def unify_many(self, constraints: Sequence[Constraint]) -> Substitution:
        """Solve nested constraints with the same step budget."""
        return self.solve(constraints)

    def bind(self, tv: TVar, ty: Type) -> Substitution:
        """Bind ``tv`` to ``ty`` after resolving placeholders and the occurs check.

        Raises:
            InfiniteType: If ``tv`` occurs in ``ty``
        """
        if isinstance(ty, TMem):
            ty = self.members.resolve(ty)
        if isinstance(ty, TVar) and ty.id == tv.id:
            return EMPTY_SUBSTITUTION
        if occurs_check(tv, ty):
            raise InfiniteType(tv, ty)
        return Substitution({tv.id: ty})

    def unify_funcs(self, t1: TFun, t2: TFun, subtype: bool) -> Substitution:
        """Unify a call-site function type ``t1`` with a declared type ``t2``."""
        # Varargs: trailing arguments are checked as a tuple against the
        # rest array once every regular param has an argument.
        if t2.variadic and len(t1.args) >= len(t2.args) - 1:
            split = len(t2.args) - 1
            regular_args = t1.args[:split]
            rest_args = ttuple(t1.args[split:], self.ctx)
            t1_varargs = replace(t1, args=(*regular_args, rest_args))
            t2_fixed = replace(t2, variadic=False)
            return self.unify_funcs(t1_varargs, t2_fixed, subtype)

        # Partial application, the leftover function keeps any rest param
        if len(t1.args) < len(t2.args):
            n = len(t1.args)
            leftover = tfun(t2.args[n:], t2.ret, self.ctx, variadic=t2.variadic)
            t2_partial = replace(t2, args=t2.args[:n], ret=leftover, variadic=False)
            return self.unify_many(
                [
                    *zip_types(t1.args, t2_partial.args, subtype, flip=True),
                    Constraint((t1.ret, t2_partial.ret), subtype),
                ]
            )

        # Extra arguments are ignored when subtyping
        if subtype and len(t1.args) > len(t2.args):
            t1 = replace(t1, args=t1.args[: len(t2.args)])

        if len(t1.args) != len(t2.args):
            raise UnificationMismatch(t1.args, t2.args)

        return self.unify_many(
            [
                *zip_types(t1.args, t2.args, subtype, flip=True),
                Constraint((t1.ret, t2.ret), subtype),
            ]
        )

    def unify_unions(self, t1: TUnion, t2: TUnion, subtype: bool) -> Substitution:
        if len(t1.types) != len(t2.types):
            # A narrower union can still be passed where a wider one is expected
            if subtype and is_subtype(t1, t2):
                return EMPTY_SUBSTITUTION
            raise UnificationMismatch(t1.types, t2.types)
        if self.ctx.config.union_matching == "canonical":
            types1 = canonical_order(t1.types)
            types2 = canonical_order(t2.types)
        else:
            types1, types2 = t1.types, t2.types
        return self.unify_many(zip_types(types1, types2, subtype))

    def unify_records(self, t1: TRec, t2: TRec, subtype: bool) -> Substitution:
        keys1 = t1.keys()
        keys2 = t2.keys()

        extra = [key for key in keys1 if key not in keys2]
        if extra:
            if t2.frozen:
                raise ExtraProperties(t1, extra)
            raise MissingProperties(t2, extra)

        missing = [key for key in keys2 if key not in keys1]
        if missing:
            if t1.frozen:
                raise ExtraProperties(t2, missing)
            raise MissingProperties(t1, missing)

        return self.unify_many(
            [Constraint((t1.get(key), t2.get(key)), subtype) for key in keys1]
        )


def solve(constraints: Iterable[Constraint], ctx: Context) -> Substitution:
    """Solve ``constraints`` in ``ctx``."""
    return Solver(ctx).solve(constraints)
