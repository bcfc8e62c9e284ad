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
"""Annotation and constraint generation.

Walks an expression once, assigning a type to every node and collecting
the constraints between them. Nothing is solved here except the value of a
``let``, which has to be solved before it can be generalized, and the
operand of ``await``, which has to be solved before it can be unwrapped.

Application is always emitted as a subtype constraint
``(arg types) => result  <:  callee type``; that single rule is what the
solver uses for extra arguments, fewer-parameter callbacks and partial
application.

Contextual errors (``await`` outside an async lambda, misplaced rest
params, bad destructuring) are raised here, before any solving.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from typeinfer.builtins import operator_type
from typeinfer.core.builders import tbool, tfun, tgen, tlit, tprop, trec, ttuple
from typeinfer.core.context import Context, fresh, lookup_env
from typeinfer.core.environment import Env
from typeinfer.core.literals import LStr
from typeinfer.core.substitution import Substitution, apply_all
from typeinfer.core.types import (
    Constraint,
    InferResult,
    Scheme,
    TPrim,
    TRec,
    TTuple,
    Type,
    is_generic,
)
from typeinfer.errors import AwaitOutsideAsync, InvalidRestParam, PatternMismatch
from typeinfer.inference.generalize import generalize
from typeinfer.inference.member import MemberResolver, PropertyKey, unwrap_member
from typeinfer.inference.solver import Solver
from typeinfer.syntax import (
    EApp,
    EAwait,
    EFix,
    EIdent,
    EIf,
    ELam,
    ELet,
    ELit,
    EMem,
    EOp,
    ERec,
    ERest,
    ETaggedTemplate,
    ETuple,
    Expr,
    Pattern,
    PLit,
    PPrim,
    PRec,
    PTuple,
    PVar,
    PWild,
)

logger = logging.getLogger(__name__)


class ConstraintGenerator:
    """Infers a type and constraint list for each expression node.

    Args:
        solver: Solver for the ``let`` values and awaited expressions that
            must be solved during generation. Without one, each of those
            solves gets a fresh solver.
    """

    def __init__(self, solver: Optional[Solver] = None):
        self.solver = solver

    def solve(self, constraints: Sequence[Constraint], ctx: Context) -> Substitution:
        solver = self.solver if self.solver is not None else Solver(ctx)
        return solver.solve(constraints)

    def infer(self, expr: Expr, ctx: Context) -> InferResult:
        """Annotate ``expr`` and collect its constraints.

        When ``ctx.annotations`` is a dict, the type of every visited node
        is recorded in it.

        Args:
            expr: Expression to annotate
            ctx: Context holding the environment and contextual flags

        Returns:
            The expression's (unsolved) type and the constraints gathered
        """
        result = self._infer(expr, ctx)
        if ctx.annotations is not None:
            ctx.annotations[expr] = result.type
        return result

    def _infer(self, expr: Expr, ctx: Context) -> InferResult:
        if isinstance(expr, ELit):
            return InferResult(tlit(expr.value, ctx))
        if isinstance(expr, EIdent):
            return InferResult(lookup_env(expr.name, ctx))
        if isinstance(expr, ELam):
            return self.infer_lam(expr, ctx)
        if isinstance(expr, EApp):
            return self.infer_app(expr, ctx)
        if isinstance(expr, ELet):
            return self.infer_let(expr, ctx)
        if isinstance(expr, EFix):
            return self.infer_fix(expr, ctx)
        if isinstance(expr, EIf):
            return self.infer_if(expr, ctx)
        if isinstance(expr, EOp):
            return self.infer_op(expr, ctx)
        if isinstance(expr, ERec):
            return self.infer_rec(expr, ctx)
        if isinstance(expr, ETuple):
            return self.infer_tuple(expr, ctx)
        if isinstance(expr, EMem):
            return self.infer_mem(expr, ctx)
        if isinstance(expr, EAwait):
            return self.infer_await(expr, ctx)
        if isinstance(expr, ETaggedTemplate):
            return self.infer_tagged_template(expr, ctx)
        if isinstance(expr, ERest):
            # Only meaningful in a lambda's parameter list
            raise InvalidRestParam()
        raise TypeError(f"unknown expression node: {expr!r}")

    # =========================================================================
    # Functions
    # =========================================================================

    def infer_lam(self, expr: ELam, ctx: Context) -> InferResult:
        env = ctx.env
        arg_types: List[Type] = []
        variadic = False
        last = len(expr.args) - 1
        for index, arg in enumerate(expr.args):
            if isinstance(arg, ERest):
                if index != last:
                    raise InvalidRestParam()
                arg_type: Type = tgen("Array", [fresh(ctx)], ctx)
                variadic = True
            else:
                arg_type = fresh(ctx)
            env = env.bind(arg.name, Scheme((), arg_type))
            arg_types.append(arg_type)

        # The async flag is reset at every lambda boundary
        body_ctx = ctx.with_env(env).with_async(expr.is_async)
        body = self.infer(expr.body, body_ctx)

        ret = body.type
        if expr.is_async and not is_generic(ret, "Promise"):
            ret = tgen("Promise", [ret], ctx)
        return InferResult(tfun(arg_types, ret, ctx, variadic), body.constraints)

    def infer_app(self, expr: EApp, ctx: Context) -> InferResult:
        fn = self.infer(expr.fn, ctx)
        constraints = list(fn.constraints)
        arg_types = []
        for arg in expr.args:
            result = self.infer(arg, ctx)
            arg_types.append(result.type)
            constraints.extend(result.constraints)

        ret = fresh(ctx)
        constraints.append(Constraint((tfun(arg_types, ret, ctx), fn.type), subtype=True))
        return InferResult(ret, constraints)

    def infer_fix(self, expr: EFix, ctx: Context) -> InferResult:
        result = self.infer(expr.expr, ctx)
        tv = fresh(ctx)
        constraint = Constraint((tfun([tv], tv, ctx), result.type))
        return InferResult(tv, [*result.constraints, constraint])

    def infer_op(self, expr: EOp, ctx: Context) -> InferResult:
        left = self.infer(expr.left, ctx)
        right = self.infer(expr.right, ctx)
        ret = fresh(ctx)
        call = tfun([left.type, right.type], ret, ctx)
        return InferResult(
            ret,
            [
                *left.constraints,
                *right.constraints,
                Constraint((call, operator_type(expr.op, ctx)), subtype=True),
            ],
        )

    # =========================================================================
    # Bindings and control flow
    # =========================================================================

    def infer_let(self, expr: ELet, ctx: Context) -> InferResult:
        value = self.infer(expr.value, ctx)
        subs = self.solve(value.constraints, ctx)

        env = ctx.env.apply(subs)
        value_type = subs.apply(value.type)
        body_env, pattern_constraints = self.bind_pattern(
            expr.pattern, value_type, env, env, ctx
        )

        body = self.infer(expr.body, ctx.with_env(body_env))
        return InferResult(
            subs.apply(body.type),
            [
                *value.constraints,
                *pattern_constraints,
                *apply_all(subs, body.constraints),
            ],
        )

    def bind_pattern(
        self, pattern: Pattern, ty: Type, env: Env, outer_env: Env, ctx: Context
    ) -> Tuple[Env, List[Constraint]]:
        """Bind the names in ``pattern`` to the matching parts of ``ty``.

        Variables are generalized against ``outer_env``, the environment the
        let itself appears in.

        Raises:
            PatternMismatch: If the pattern does not fit the shape of ``ty``
        """
        if isinstance(pattern, PVar):
            return env.bind(pattern.name, generalize(outer_env, ty)), []
        if isinstance(pattern, PWild):
            return env, []
        if isinstance(pattern, PLit):
            expected = tlit(pattern.value, ctx).freeze()
            return env, [Constraint((ty, expected), subtype=True)]
        if isinstance(pattern, PPrim):
            expected = TPrim(ctx.new_id(), pattern.name).freeze()
            return env, [Constraint((ty, expected), subtype=True)]
        if isinstance(pattern, PRec):
            if not isinstance(ty, TRec):
                raise PatternMismatch("record pattern used on a value that isn't a record")
            constraints: List[Constraint] = []
            for prop in pattern.properties:
                prop_type = ty.get(prop.name)
                if prop_type is None:
                    raise PatternMismatch(
                        f"Record literal doesn't contain property '{prop.name}'"
                    )
                env, cs = self.bind_pattern(prop.pattern, prop_type, env, outer_env, ctx)
                constraints.extend(cs)
            return env, constraints
        if isinstance(pattern, PTuple):
            if not isinstance(ty, TTuple):
                raise PatternMismatch("tuple pattern used on a value that isn't a tuple")
            if len(ty.types) != len(pattern.patterns):
                raise PatternMismatch(
                    f"tuple pattern has {len(pattern.patterns)} elements "
                    f"but the value has {len(ty.types)}"
                )
            constraints = []
            for sub_pattern, elem_type in zip(pattern.patterns, ty.types):
                env, cs = self.bind_pattern(sub_pattern, elem_type, env, outer_env, ctx)
                constraints.extend(cs)
            return env, constraints
        raise TypeError(f"unknown pattern: {pattern!r}")

    def infer_if(self, expr: EIf, ctx: Context) -> InferResult:
        cond = self.infer(expr.cond, ctx)
        then = self.infer(expr.then, ctx)
        else_ = self.infer(expr.else_, ctx)
        # The branches may widen into each other
        return InferResult(
            then.type,
            [
                *cond.constraints,
                *then.constraints,
                *else_.constraints,
                Constraint((cond.type, tbool(ctx))),
                Constraint((then.type, else_.type)),
            ],
        )

    # =========================================================================
    # Aggregates and member access
    # =========================================================================

    def infer_rec(self, expr: ERec, ctx: Context) -> InferResult:
        props = []
        constraints: List[Constraint] = []
        for prop in expr.properties:
            result = self.infer(prop.value, ctx)
            props.append(tprop(prop.name, result.type))
            constraints.extend(result.constraints)
        return InferResult(trec(props, ctx), constraints)

    def infer_tuple(self, expr: ETuple, ctx: Context) -> InferResult:
        types = []
        constraints: List[Constraint] = []
        for elem in expr.elements:
            result = self.infer(elem, ctx)
            types.append(result.type)
            constraints.extend(result.constraints)
        return InferResult(ttuple(types, ctx), constraints)

    def infer_mem(self, expr: EMem, ctx: Context) -> InferResult:
        obj = self.infer(expr.object, ctx)
        key = PropertyKey.from_expr(expr.property)
        member = MemberResolver(ctx).property_type(obj.type, key)
        return InferResult(
            unwrap_member(member.type), [*obj.constraints, *member.constraints]
        )

    # =========================================================================
    # Async and tagged templates
    # =========================================================================

    def infer_await(self, expr: EAwait, ctx: Context) -> InferResult:
        if not ctx.is_async:
            raise AwaitOutsideAsync()
        result = self.infer(expr.expr, ctx)
        # The awaited type is only known to be a promise once solved
        awaited = self.solve(result.constraints, ctx).apply(result.type)
        if is_generic(awaited, "Promise"):
            return InferResult(awaited.params[0], result.constraints)
        # Awaiting a non-promise is allowed and has no effect on the type
        return result

    def infer_tagged_template(self, expr: ETaggedTemplate, ctx: Context) -> InferResult:
        constraints: List[Constraint] = []
        expr_types = []
        for sub_expr in expr.expressions:
            result = self.infer(sub_expr, ctx)
            expr_types.append(result.type)
            constraints.extend(result.constraints)

        if isinstance(expr.tag, EIdent) and expr.tag.name in ctx.tag_handlers:
            handler = ctx.tag_handlers[expr.tag.name]
            logger.debug(f"Using registered handler for tagged template {expr.tag.name}")
            ty = handler(expr.strings, expr_types, ctx)
            return InferResult(ty, constraints)

        tag = self.infer(expr.tag, ctx)
        strings = ttuple([tlit(LStr(s), ctx) for s in expr.strings], ctx)
        ret = fresh(ctx)
        call = tfun([strings, *expr_types], ret, ctx)
        return InferResult(
            ret,
            [*tag.constraints, *constraints, Constraint((call, tag.type), subtype=True)],
        )
