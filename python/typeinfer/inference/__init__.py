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
"""Inference pipeline: annotation, solving, widening and generalization.

- annotate: walk an expression and collect constraints
- solver: solve constraints into a substitution
- widening: structural subtyping and union normalization
- member: member access on records, tuples, primitives and generics
- generalize: close a solved type over into a scheme
- engine: the driver and the stateful Engine facade
"""

from .annotate import ConstraintGenerator
from .engine import Engine, InferenceResult, format_constraints, infer_expr
from .generalize import close_over, generalize, normalize
from .member import MemberResolver, PropertyKey, replace_qualifiers, unwrap_member
from .solver import Solver, solve, zip_types
from .widening import (
    canonical_order,
    compute_union,
    flatten_union,
    is_subtype,
    simplify_union,
    widen,
)

__all__ = [
    "ConstraintGenerator",
    "Engine",
    "InferenceResult",
    "format_constraints",
    "infer_expr",
    "close_over",
    "generalize",
    "normalize",
    "MemberResolver",
    "PropertyKey",
    "replace_qualifiers",
    "unwrap_member",
    "Solver",
    "solve",
    "zip_types",
    "canonical_order",
    "compute_union",
    "flatten_union",
    "is_subtype",
    "simplify_union",
    "widen",
]
