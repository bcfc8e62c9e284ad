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
"""Rendering of types and schemes in conventional notation.

    (a, b) => c          function
    (a, ...Array<b>) => c  variadic function
    {foo: T, bar: U}     record
    [T, U]               tuple
    T | U                union
    Array<T>             generic
    obj['prop']          member access placeholder
    <a, b>T              generalized scheme
"""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Union

from typeinfer.core.literals import LBool, LNull, LNum, LStr, LUndefined, Literal
from typeinfer.core.types import (
    Scheme,
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
    merge_vars,
)


def letter_name(index: int) -> str:
    """Canonical variable name for an index: a, b, ..., z, a1, b1, ..."""
    letter = chr(ord("a") + index % 26)
    suffix = index // 26
    return f"{letter}{suffix}" if suffix else letter


def print_literal(lit: Literal) -> str:
    if isinstance(lit, LNum):
        value = lit.value
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)
    if isinstance(lit, LStr):
        return json.dumps(lit.value, ensure_ascii=False)
    if isinstance(lit, LBool):
        return "true" if lit.value else "false"
    if isinstance(lit, LNull):
        return "null"
    if isinstance(lit, LUndefined):
        return "undefined"
    raise TypeError(f"unknown literal: {lit!r}")


def print_type(value: Union[Type, Scheme], names: Optional[Dict[int, str]] = None) -> str:
    """Render a type or scheme.

    Args:
        value: The type or scheme to render
        names: Optional display names keyed by type variable id; variables
            not listed use their own name

    Returns:
        The rendered string
    """
    if isinstance(value, Scheme):
        body = print_type(value.type, names)
        if not value.qualifiers:
            return body
        quals = ", ".join(_var_name(q, names) for q in value.qualifiers)
        return f"<{quals}>{body}"

    ty = value
    if isinstance(ty, TVar):
        return _var_name(ty, names)
    if isinstance(ty, TPrim):
        return ty.name
    if isinstance(ty, TLit):
        return print_literal(ty.value)
    if isinstance(ty, TFun):
        args = [print_type(arg, names) for arg in ty.args]
        if ty.variadic and args:
            args[-1] = f"...{args[-1]}"
        return f"({', '.join(args)}) => {print_type(ty.ret, names)}"
    if isinstance(ty, TGen):
        if not ty.params:
            return ty.name
        params = ", ".join(print_type(param, names) for param in ty.params)
        return f"{ty.name}<{params}>"
    if isinstance(ty, TRec):
        props = ", ".join(
            f"{prop.name}: {print_type(prop.type, names)}" for prop in ty.properties
        )
        return f"{{{props}}}"
    if isinstance(ty, TTuple):
        return f"[{', '.join(print_type(elem, names) for elem in ty.types)}]"
    if isinstance(ty, TUnion):
        return " | ".join(print_type(member, names) for member in ty.types)
    if isinstance(ty, TMem):
        obj = print_type(ty.object, names)
        if isinstance(ty.property, str):
            return f"{obj}['{ty.property}']"
        return f"{obj}[{ty.property}]"
    raise TypeError(f"unknown type variant: {ty!r}")


def print_types(*types: Type) -> List[str]:
    """Render several types with shared, normalized variable names.

    Free variables are named a, b, c, ... in order of first appearance
    across all of the given types, so related types in one message stay
    consistent regardless of internal ids.
    """
    free = merge_vars(*(ty.free_type_vars() for ty in types))
    names = {tv.id: letter_name(index) for index, tv in enumerate(free)}
    return [print_type(ty, names) for ty in types]


def _var_name(tv: TVar, names: Optional[Dict[int, str]]) -> str:
    if names is not None and tv.id in names:
        return names[tv.id]
    return tv.name or f"t{tv.id}"
