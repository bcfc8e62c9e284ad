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
"""Error taxonomy for type inference.

Every failure is a distinct class with structured fields; the message is
rendered from those fields. Any error aborts the enclosing inference call,
there is no recovery and no multi-error collection.

Categories:
    Unification:   UnificationFail, UnificationMismatch, SubtypingFailure,
                   InfiniteType, ExtraProperties, MissingProperties
    Environment:   UnboundVariable
    Member access: PropertyMissing, TypeParamArityMismatch, IndexOutOfBounds,
                   InvalidPropertyKey, UnknownTypeAlias, UnsupportedMemberAccess
    Contextual:    AwaitOutsideAsync, InvalidRestParam, PatternMismatch
    Resources:     SolverLimitExceeded
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Sequence, Tuple, Union

from typeinfer.core.types import TRec, TVar, Type
from typeinfer.printer import print_types


class ErrorKind(Enum):
    """Closed enumeration of inference failure kinds."""

    UNBOUND_VARIABLE = auto()
    UNIFICATION_FAIL = auto()
    UNIFICATION_MISMATCH = auto()
    SUBTYPING_FAILURE = auto()
    INFINITE_TYPE = auto()
    EXTRA_PROPERTIES = auto()
    MISSING_PROPERTIES = auto()
    PROPERTY_MISSING = auto()
    TYPE_PARAM_ARITY_MISMATCH = auto()
    INDEX_OUT_OF_BOUNDS = auto()
    INVALID_PROPERTY_KEY = auto()
    UNKNOWN_TYPE_ALIAS = auto()
    UNSUPPORTED_MEMBER_ACCESS = auto()
    AWAIT_OUTSIDE_ASYNC = auto()
    INVALID_REST_PARAM = auto()
    PATTERN_MISMATCH = auto()
    SOLVER_LIMIT_EXCEEDED = auto()


class TypeInferenceError(Exception):
    """Base class for all inference errors."""

    kind: ErrorKind

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# Unification errors
# =============================================================================


class UnificationFail(TypeInferenceError):
    """Two concrete types cannot be made equal."""

    kind = ErrorKind.UNIFICATION_FAIL

    def __init__(self, left: Type, right: Type):
        self.left = left
        self.right = right
        left_str, right_str = print_types(left, right)
        super().__init__(f"Couldn't unify {left_str} with {right_str}")


class UnificationMismatch(TypeInferenceError):
    """Two type lists that must line up positionally have different lengths."""

    kind = ErrorKind.UNIFICATION_MISMATCH

    def __init__(self, left: Sequence[Type], right: Sequence[Type]):
        self.left = tuple(left)
        self.right = tuple(right)
        rendered = print_types(*self.left, *self.right)
        left_str = ", ".join(rendered[: len(self.left)])
        right_str = ", ".join(rendered[len(self.left):])
        super().__init__(
            f"Arity mismatch: ({left_str}) has {len(self.left)} types "
            f"but ({right_str}) has {len(self.right)}"
        )


class SubtypingFailure(TypeInferenceError):
    """A frozen type was required to be a subtype of another and is not."""

    kind = ErrorKind.SUBTYPING_FAILURE

    def __init__(self, sub: Type, sup: Type):
        self.sub = sub
        self.sup = sup
        sub_str, sup_str = print_types(sub, sup)
        super().__init__(f"{sub_str} is not a subtype of {sup_str}")


class InfiniteType(TypeInferenceError):
    """The occurs check failed: a variable would have to contain itself."""

    kind = ErrorKind.INFINITE_TYPE

    def __init__(self, var: TVar, ty: Type):
        self.var = var
        self.type = ty
        var_str, type_str = print_types(var, ty)
        super().__init__(f"{var_str} appears in {type_str}")


class ExtraProperties(TypeInferenceError):
    """A record has keys that the frozen side it is matched against lacks."""

    kind = ErrorKind.EXTRA_PROPERTIES

    def __init__(self, record: TRec, keys: Sequence[str]):
        self.record = record
        self.keys: Tuple[str, ...] = tuple(keys)
        (record_str,) = print_types(record)
        super().__init__(f"{record_str} has following extra keys: {', '.join(self.keys)}")


class MissingProperties(TypeInferenceError):
    """A record lacks keys that the other side requires."""

    kind = ErrorKind.MISSING_PROPERTIES

    def __init__(self, record: TRec, keys: Sequence[str]):
        self.record = record
        self.keys: Tuple[str, ...] = tuple(keys)
        (record_str,) = print_types(record)
        super().__init__(
            f"{record_str} is missing the following keys: {', '.join(self.keys)}"
        )


# =============================================================================
# Environment errors
# =============================================================================


class UnboundVariable(TypeInferenceError):
    """An identifier is absent from the environment."""

    kind = ErrorKind.UNBOUND_VARIABLE

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} is unbound")


# =============================================================================
# Member access errors
# =============================================================================


class MemberAccessError(TypeInferenceError):
    """Base class for failures while resolving ``obj.prop`` or ``obj[i]``."""


class PropertyMissing(MemberAccessError):
    """The property does not exist on the object.

    Attributes:
        property: The property that was looked up
        owner: What it was looked up on: ``record``, ``array`` or a
            primitive name such as ``string``
    """

    kind = ErrorKind.PROPERTY_MISSING

    def __init__(self, property: Union[str, int], owner: str):
        self.property = property
        self.owner = owner
        if owner == "record":
            message = f"Record literal doesn't contain property '{property}'"
        elif owner == "array":
            message = f"Couldn't find {property} on array"
        else:
            message = f"{property} property doesn't exist on {owner}"
        super().__init__(message)


class TypeParamArityMismatch(MemberAccessError):
    """A generic alias was given the wrong number of type arguments."""

    kind = ErrorKind.TYPE_PARAM_ARITY_MISMATCH

    def __init__(self, name: str, expected: int, actual: int):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(f"{name} was given the wrong number of type params")


class IndexOutOfBounds(MemberAccessError):
    """A numeric index is outside a tuple's bounds."""

    kind = ErrorKind.INDEX_OUT_OF_BOUNDS

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__("index is greater than the size of the tuple")


class InvalidPropertyKey(MemberAccessError):
    """The property expression has the wrong shape for the object."""

    kind = ErrorKind.INVALID_PROPERTY_KEY


class UnknownTypeAlias(MemberAccessError):
    """A generic type has no alias scheme in the environment."""

    kind = ErrorKind.UNKNOWN_TYPE_ALIAS

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No type named {name} in environment")


class UnsupportedMemberAccess(MemberAccessError):
    """Member access on functions, unions and member placeholders."""

    kind = ErrorKind.UNSUPPORTED_MEMBER_ACCESS

    def __init__(self, ty: Type):
        self.type = ty
        super().__init__(f"member access on {type(ty).__name__} is not supported")


# =============================================================================
# Contextual errors
# =============================================================================


class AwaitOutsideAsync(TypeInferenceError):
    """``await`` used outside the body of an async lambda."""

    kind = ErrorKind.AWAIT_OUTSIDE_ASYNC

    def __init__(self) -> None:
        super().__init__("Can't use `await` inside non-async lambda")


class InvalidRestParam(TypeInferenceError):
    """A rest parameter that is not the last parameter."""

    kind = ErrorKind.INVALID_REST_PARAM

    def __init__(self) -> None:
        super().__init__("Rest param must come last.")


class PatternMismatch(TypeInferenceError):
    """A destructuring pattern does not fit the value's type."""

    kind = ErrorKind.PATTERN_MISMATCH


# =============================================================================
# Resource errors
# =============================================================================


class SolverLimitExceeded(TypeInferenceError):
    """The solver performed more unify steps than configured."""

    kind = ErrorKind.SOLVER_LIMIT_EXCEEDED

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"constraint solver exceeded {limit} steps")
