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
"""Type builders.

Every builder stamps a fresh id from the context, which is the only way
nodes should be created outside of substitution.

Example:
    >>> ctx = create_ctx()
    >>> a = tvar("a", ctx)
    >>> identity = tfun([a], a, ctx)
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Union

from typeinfer.config import DEFAULT_CONFIG, InferenceConfig
from typeinfer.core.context import Context, State
from typeinfer.core.environment import EMPTY_ENV, Env
from typeinfer.core.literals import LBool, LNull, LNum, LStr, LUndefined, Literal
from typeinfer.core.types import (
    PropertyName,
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


def create_ctx(
    env: Optional[Env] = None,
    config: Optional[InferenceConfig] = None,
) -> Context:
    """Create a root context with its own id counter."""
    return Context(
        env=env if env is not None else EMPTY_ENV,
        state=State(),
        config=config if config is not None else DEFAULT_CONFIG,
    )


def tvar(name: str, ctx: Context) -> TVar:
    return TVar(ctx.new_id(), name)


def tprim(name: str, ctx: Context) -> TPrim:
    return TPrim(ctx.new_id(), name)


def tnum(ctx: Context) -> TPrim:
    return tprim("number", ctx)


def tstr(ctx: Context) -> TPrim:
    return tprim("string", ctx)


def tbool(ctx: Context) -> TPrim:
    return tprim("boolean", ctx)


def tlit(value: Union[Literal, int, float, str, bool, None], ctx: Context) -> TLit:
    """Build a literal type from a Literal or a plain Python value.

    ``None`` maps to ``null``; use ``LUndefined()`` for ``undefined``.
    """
    return TLit(ctx.new_id(), _to_literal(value))


def tfun(
    args: Iterable[Type], ret: Type, ctx: Context, variadic: bool = False
) -> TFun:
    return TFun(ctx.new_id(), tuple(args), ret, variadic)


def tgen(name: str, params: Iterable[Type], ctx: Context) -> TGen:
    return TGen(ctx.new_id(), name, tuple(params))


def tprop(name: str, ty: Type) -> TProp:
    return TProp(name, ty)


def trec(properties: Iterable[TProp], ctx: Context) -> TRec:
    return TRec(ctx.new_id(), tuple(properties))


def ttuple(types: Iterable[Type], ctx: Context) -> TTuple:
    return TTuple(ctx.new_id(), tuple(types))


def tunion(types: Iterable[Type], ctx: Context) -> TUnion:
    return TUnion(ctx.new_id(), tuple(types))


def tmem(obj: Type, prop: PropertyName, ctx: Context) -> TMem:
    return TMem(ctx.new_id(), obj, prop)


def _to_literal(value: Union[Literal, int, float, str, bool, None]) -> Literal:
    if isinstance(value, (LNum, LBool, LStr, LNull, LUndefined)):
        return value
    if value is None:
        return LNull()
    # bool is a subclass of int and must be checked first
    if isinstance(value, bool):
        return LBool(value)
    if isinstance(value, (int, float)):
        return LNum(value)
    if isinstance(value, str):
        return LStr(value)
    raise TypeError(f"cannot build a literal from {type(value).__name__}")


def copy_type(ty: Type, ctx: Context) -> Type:
    """Copy ``ty`` under a fresh id. Type variables are returned unchanged."""
    if isinstance(ty, TVar):
        return ty
    return replace(ty, id=ctx.new_id())
