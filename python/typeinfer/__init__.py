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
"""typeinfer: Hindley-Milner type inference with practical extensions.

Infers principal types for a small expression language with structural
records, tuples and unions, literal types that widen on conflict, partial
application, variadic parameters, async/await and member access through
generic alias schemes.

Key Components:
    - core: Types, substitutions, environments and the inference context
    - inference: Constraint generation, solving, widening, generalization
    - syntax: Expression and pattern AST with builder functions
    - builtins: Array, string and number alias schemes; operator types
    - printer: Rendering of types and schemes
    - errors: The inference error taxonomy

Usage:
    >>> from typeinfer import Engine, print_type
    >>> from typeinfer.syntax import app, ident, lam, num
    >>> engine = Engine()
    >>> print_type(engine.infer_expr(lam(["x"], ident("x"))))
    '<a>(a) => a'

References:
    - Damas, L. and Milner, R. (1982). "Principal type-schemes for functional programs"
    - Diehl, S. "Write You a Haskell", Chapter 7: Hindley-Milner Inference
"""

from .config import DEFAULT_CONFIG, InferenceConfig
from .core import (
    Constraint,
    Context,
    Env,
    Scheme,
    Substitution,
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
    create_ctx,
)
from .errors import (
    AwaitOutsideAsync,
    ErrorKind,
    ExtraProperties,
    IndexOutOfBounds,
    InfiniteType,
    InvalidPropertyKey,
    InvalidRestParam,
    MemberAccessError,
    MissingProperties,
    PatternMismatch,
    PropertyMissing,
    SolverLimitExceeded,
    SubtypingFailure,
    TypeInferenceError,
    TypeParamArityMismatch,
    UnboundVariable,
    UnificationFail,
    UnificationMismatch,
    UnknownTypeAlias,
    UnsupportedMemberAccess,
)
from .inference import Engine, InferenceResult, infer_expr
from .printer import print_type, print_types

__all__ = [
    # Configuration
    "InferenceConfig",
    "DEFAULT_CONFIG",
    # Data model
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
    "Constraint",
    "Substitution",
    "Env",
    "Context",
    "create_ctx",
    # Inference
    "Engine",
    "InferenceResult",
    "infer_expr",
    # Printing
    "print_type",
    "print_types",
    # Errors
    "ErrorKind",
    "TypeInferenceError",
    "UnboundVariable",
    "UnificationFail",
    "UnificationMismatch",
    "SubtypingFailure",
    "InfiniteType",
    "ExtraProperties",
    "MissingProperties",
    "MemberAccessError",
    "PropertyMissing",
    "TypeParamArityMismatch",
    "IndexOutOfBounds",
    "InvalidPropertyKey",
    "UnknownTypeAlias",
    "UnsupportedMemberAccess",
    "AwaitOutsideAsync",
    "InvalidRestParam",
    "PatternMismatch",
    "SolverLimitExceeded",
]

__version__ = "0.1.0"
