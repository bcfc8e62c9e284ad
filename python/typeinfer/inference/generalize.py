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
"""Generalization of inferred types into schemes.

Let-polymorphism: a type is generalized over the variables that are free
in it but not in the environment, so ``let id = (x) => x`` can be used at
``5`` and at ``true`` in the same body.
"""

from __future__ import annotations

from typing import Dict, List

from typeinfer.core.context import Context
from typeinfer.core.environment import Env
from typeinfer.core.types import Scheme, TVar, Type
from typeinfer.inference.member import MemberResolver
from typeinfer.printer import letter_name


def generalize(env: Env, ty: Type) -> Scheme:
    """Quantify ``ty`` over the variables not free in ``env``.

    Args:
        env: The environment the type is generalized against
        ty: The type to generalize

    Returns:
        A scheme whose qualifiers appear in order of first appearance
    """
    env_vars = {tv.id for tv in env.free_type_vars()}
    qualifiers = tuple(tv for tv in ty.free_type_vars() if tv.id not in env_vars)
    return Scheme(qualifiers, ty)


def normalize(sc: Scheme) -> Scheme:
    """Rename qualifiers to a, b, c, ... in order of first appearance.

    Ids are kept, so the scheme is the same scheme with nicer names.
    Variables that are not qualifiers keep their names.
    """
    qualifier_ids = {q.id for q in sc.qualifiers}
    ordered: List[TVar] = [tv for tv in sc.type.free_type_vars() if tv.id in qualifier_ids]
    # Qualifiers that do not occur in the body go last
    seen = {tv.id for tv in ordered}
    ordered.extend(q for q in sc.qualifiers if q.id not in seen)

    renamed: Dict[int, Type] = {}
    qualifiers = []
    for index, tv in enumerate(ordered):
        new_var = TVar(tv.id, letter_name(index), tv.frozen)
        renamed[tv.id] = new_var
        qualifiers.append(new_var)
    return Scheme(tuple(qualifiers), sc.type.substitute(renamed))


def close_over(env: Env, ty: Type, ctx: Context) -> Scheme:
    """Turn a solved type into a frozen, normalized scheme."""
    resolved = MemberResolver(ctx).resolve_all(ty)
    return normalize(generalize(env, resolved)).freeze()
