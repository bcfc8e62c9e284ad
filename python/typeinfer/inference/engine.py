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
"""Inference driver and the Engine facade.

``infer_expr`` runs the whole pipeline for one expression:

    annotate -> solve -> apply -> close over (generalize, normalize, freeze)

``Engine`` keeps one context for a whole program so that ids stay unique
across declarations and every declaration sees the ones before it.

Example:
    >>> engine = Engine()
    >>> _ = engine.infer_decl("id", lam(["x"], ident("x")))
    >>> print_type(engine.infer_expr(app(ident("id"), [num(5)])))
    '5'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from typeinfer.builtins import register_builtins
from typeinfer.config import DEFAULT_CONFIG, InferenceConfig
from typeinfer.core import builders
from typeinfer.core.context import Context, State, TagHandler
from typeinfer.core.environment import Env
from typeinfer.core.literals import Literal
from typeinfer.core.substitution import Substitution
from typeinfer.core.types import (
    Constraint,
    PropertyName,
    Scheme,
    TFun,
    TGen,
    TLit,
    TMem,
    TPrim,
    TProp,
    TRec,
    TTuple,
    TUnion,
    TVar,
    Type,
)
from typeinfer.errors import TypeInferenceError
from typeinfer.inference.annotate import ConstraintGenerator
from typeinfer.inference.generalize import close_over
from typeinfer.inference.solver import Solver
from typeinfer.printer import print_type, print_types
from typeinfer.syntax import Expr, Program

logger = logging.getLogger(__name__)


@dataclass
class InferenceResult:
    """Everything produced while inferring one expression.

    Attributes:
        scheme: The closed scheme of the expression
        constraints: Constraints in the order they were generated
        substitution: The solved substitution
        node_types: Solved type of every expression node, keyed by node
    """

    scheme: Scheme
    constraints: List[Constraint] = field(default_factory=list)
    substitution: Substitution = field(default_factory=Substitution)
    node_types: Dict[Any, Type] = field(default_factory=dict)


def format_constraints(constraints: Sequence[Constraint]) -> str:
    """Render constraints one per line with shared variable names."""
    lines = []
    for c in constraints:
        left, right = print_types(c.left, c.right)
        relation = "<:" if c.subtype else "=="
        lines.append(f"{left} {relation} {right}")
    return "\n".join(lines)


def infer_expr(env: Env, expr: Expr, ctx: Context) -> Scheme:
    """Infer the principal scheme of ``expr`` in ``env``.

    Raises:
        TypeInferenceError: If the expression is ill-typed
    """
    return _infer(env, expr, ctx.with_env(env)).scheme


def _infer(env: Env, expr: Expr, ctx: Context) -> InferenceResult:
    solver = Solver(ctx)
    result = ConstraintGenerator(solver).infer(expr, ctx)
    try:
        subst = solver.solve(result.constraints)
    except TypeInferenceError as e:
        logger.debug(
            f"Inference failed: {e}\nConstraints:\n{format_constraints(result.constraints)}"
        )
        raise
    scheme = close_over(env.apply(subst), subst.apply(result.type), ctx)
    return InferenceResult(scheme, result.constraints, subst)


class Engine:
    """Stateful inference over a sequence of top-level declarations.

    Attributes:
        config: The engine configuration
        ctx: The context shared by every inference on this engine
    """

    def __init__(self, config: Optional[InferenceConfig] = None):
        self.config = config if config is not None else DEFAULT_CONFIG
        self._tag_handlers: Dict[str, TagHandler] = {}
        self.ctx = Context(
            state=State(), config=self.config, tag_handlers=self._tag_handlers
        )
        if self.config.register_builtins:
            register_builtins(self)

    @property
    def env(self) -> Env:
        return self.ctx.env

    # =========================================================================
    # Inference
    # =========================================================================

    def infer_expr(self, expr: Expr) -> Scheme:
        """Infer an expression without binding it."""
        return infer_expr(self.ctx.env, expr, self.ctx)

    def infer_decl(self, name: str, expr: Expr) -> Scheme:
        """Infer an expression and bind its scheme to ``name``."""
        scheme = self.infer_expr(expr)
        self.ctx = self.ctx.with_env(self.ctx.env.bind(name, scheme))
        logger.debug(f"Declared {name}: {print_type(scheme)}")
        return scheme

    def infer_program(self, program: Program) -> Optional[Scheme]:
        """Infer every declaration in order, then the program's expression.

        Declarations stay bound on the engine afterwards.

        Returns:
            The scheme of the program's expression, or None if it has none
        """
        for decl in program.decls:
            self.infer_decl(decl.name, decl.expr)
        if program.expr is None:
            return None
        return self.infer_expr(program.expr)

    def explain(self, expr: Expr) -> InferenceResult:
        """Infer an expression and keep the intermediate results.

        Useful for debugging and for tooling that needs the type of every
        sub-expression, such as hover information in an editor.
        """
        annotations: Dict[Any, Type] = {}
        ctx = self.ctx.with_annotations(annotations)
        result = _infer(self.ctx.env, expr, ctx)
        result.node_types = {
            node: result.substitution.apply(ty) for node, ty in annotations.items()
        }
        return result

    def lookup(self, name: str) -> Optional[Scheme]:
        return self.ctx.env.lookup(name)

    # =========================================================================
    # Environment
    # =========================================================================

    def def_scheme(self, name: str, scheme: Scheme) -> None:
        """Bind a prebuilt scheme. The scheme is frozen before binding."""
        self.ctx = self.ctx.with_env(self.ctx.env.bind(name, scheme.freeze()))

    def def_type(self, name: str, ty: Type) -> None:
        """Bind a monomorphic type. The type is frozen before binding."""
        self.def_scheme(name, Scheme((), ty))

    def register_tag(self, name: str, handler: TagHandler) -> None:
        """Register a handler that types tagged templates using ``name`` as tag.

        The handler receives the template's string parts, the types of the
        interpolated expressions and the context, and returns the type of
        the whole template. It replaces the default treatment of the tag as
        a function.
        """
        self._tag_handlers[name] = handler

    # =========================================================================
    # Type builders bound to this engine's id counter
    # =========================================================================

    def tvar(self, name: str) -> TVar:
        return builders.tvar(name, self.ctx)

    def tgen(self, name: str, params: Iterable[Type] = ()) -> TGen:
        return builders.tgen(name, params, self.ctx)

    def tfun(self, args: Iterable[Type], ret: Type, variadic: bool = False) -> TFun:
        return builders.tfun(args, ret, self.ctx, variadic)

    def tunion(self, types: Iterable[Type]) -> TUnion:
        return builders.tunion(types, self.ctx)

    def ttuple(self, types: Iterable[Type]) -> TTuple:
        return builders.ttuple(types, self.ctx)

    def trec(self, properties: Iterable[TProp]) -> TRec:
        return builders.trec(properties, self.ctx)

    def tprop(self, name: str, ty: Type) -> TProp:
        return builders.tprop(name, ty)

    def tmem(self, obj: Type, prop: PropertyName) -> TMem:
        return builders.tmem(obj, prop, self.ctx)

    def tprim(self, name: str) -> TPrim:
        return builders.tprim(name, self.ctx)

    def tnum(self) -> TPrim:
        return builders.tnum(self.ctx)

    def tstr(self) -> TPrim:
        return builders.tstr(self.ctx)

    def tbool(self) -> TPrim:
        return builders.tbool(self.ctx)

    def tlit(self, value: Union[Literal, int, float, str, bool, None]) -> TLit:
        return builders.tlit(value, self.ctx)
