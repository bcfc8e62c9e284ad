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
"""Core data model: literals, types, substitutions, environments, context."""

from .builders import (
    create_ctx,
    tbool,
    tfun,
    tgen,
    tlit,
    tmem,
    tnum,
    tprim,
    tprop,
    trec,
    tstr,
    ttuple,
    tunion,
    tvar,
)
from .context import Context, State, fresh, instantiate, lookup_env
from .environment import EMPTY_ENV, Env, create_env
from .literals import LBool, LNull, LNum, LStr, LUndefined, Literal
from .substitution import (
    EMPTY_SUBSTITUTION,
    Substitution,
    apply,
    ftv,
    occurs_check,
)
from .types import (
    Constraint,
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
    scheme,
)

__all__ = [
    # Literals
    "LNum",
    "LBool",
    "LStr",
    "LNull",
    "LUndefined",
    "Literal",
    # Types
    "Type",
    "TVar",
    "TPrim",
    "TLit",
    "TFun",
    "TGen",
    "TProp",
    "TRec",
    "TTuple",
    "TUnion",
    "TMem",
    "Scheme",
    "scheme",
    "Constraint",
    # Substitution
    "Substitution",
    "EMPTY_SUBSTITUTION",
    "apply",
    "ftv",
    "occurs_check",
    # Environment and context
    "Env",
    "EMPTY_ENV",
    "create_env",
    "Context",
    "State",
    "fresh",
    "instantiate",
    "lookup_env",
    # Builders
    "create_ctx",
    "tvar",
    "tprim",
    "tnum",
    "tstr",
    "tbool",
    "tlit",
    "tfun",
    "tgen",
    "tprop",
    "trec",
    "ttuple",
    "tunion",
    "tmem",
]
