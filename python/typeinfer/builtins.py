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
"""Builtin alias schemes and operator types.

Alias schemes describe the members available on primitives and generics:

    Array<T>  {length: number, map: ((T, number, Array<T>) => U) => Array<U>}
    string    {length: number, split: (string) => Array<string>}
    number    {toFixed: (number) => string, toString: () => string}

In ``Array`` only ``T`` is a qualifier; ``U`` is left free and replaced by
a fresh variable at every member access.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict

from typeinfer.core.builders import tbool, tfun, tgen, tnum, tprop, trec, tstr, tvar
from typeinfer.core.context import Context
from typeinfer.core.types import Scheme, TFun

if TYPE_CHECKING:
    from typeinfer.inference.engine import Engine

logger = logging.getLogger(__name__)

# Binary operators and whether they produce a boolean
OPERATORS: Dict[str, bool] = {
    "Add": False,
    "Sub": False,
    "Mul": False,
    "Div": False,
    "Eql": True,
}


def create_array_scheme(ctx: Context) -> Scheme:
    t = tvar("T", ctx)
    u = tvar("U", ctx)
    callback = tfun([t, tnum(ctx), tgen("Array", [t], ctx)], u, ctx)
    body = trec(
        [
            tprop("length", tnum(ctx)),
            tprop("map", tfun([callback], tgen("Array", [u], ctx), ctx)),
        ],
        ctx,
    )
    return Scheme((t,), body)


def create_string_scheme(ctx: Context) -> Scheme:
    body = trec(
        [
            tprop("length", tnum(ctx)),
            tprop("split", tfun([tstr(ctx)], tgen("Array", [tstr(ctx)], ctx), ctx)),
        ],
        ctx,
    )
    return Scheme((), body)


def create_number_scheme(ctx: Context) -> Scheme:
    body = trec(
        [
            tprop("toFixed", tfun([tnum(ctx)], tstr(ctx), ctx)),
            tprop("toString", tfun([], tstr(ctx), ctx)),
        ],
        ctx,
    )
    return Scheme((), body)


def operator_type(op: str, ctx: Context) -> TFun:
    """Build the type of a binary operator.

    The parameters are frozen so that operands are checked against
    ``number`` instead of widening it. The result is left unfrozen so it can
    still widen with literals, as in ``if (n == 0) 0 else n * 2``.

    Raises:
        ValueError: If ``op`` is not a known operator
    """
    if op not in OPERATORS:
        raise ValueError(f"unknown operator: {op}")
    ret = tbool(ctx) if OPERATORS[op] else tnum(ctx)
    return tfun([tnum(ctx).freeze(), tnum(ctx).freeze()], ret, ctx)


def register_builtins(engine: "Engine") -> None:
    """Register the builtin alias schemes on an engine."""
    engine.def_scheme("Array", create_array_scheme(engine.ctx))
    engine.def_scheme("string", create_string_scheme(engine.ctx))
    engine.def_scheme("number", create_number_scheme(engine.ctx))
    logger.debug("Registered builtin alias schemes: Array, string, number")
