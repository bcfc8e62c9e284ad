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
"""Literal values shared by the expression AST and literal types.

A literal appears twice in the system: as the value of an ``ELit`` expression
and as the payload of a ``TLit`` type. Every literal belongs to exactly one
primitive type, exposed through ``prim_name``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class LNum:
    """A numeric literal. Integers and floats both map to ``number``."""

    value: Union[int, float]

    @property
    def prim_name(self) -> str:
        return "number"


@dataclass(frozen=True, slots=True)
class LBool:
    """A boolean literal."""

    value: bool

    @property
    def prim_name(self) -> str:
        return "boolean"


@dataclass(frozen=True, slots=True)
class LStr:
    """A string literal."""

    value: str

    @property
    def prim_name(self) -> str:
        return "string"


@dataclass(frozen=True, slots=True)
class LNull:
    """The ``null`` literal."""

    @property
    def prim_name(self) -> str:
        return "null"


@dataclass(frozen=True, slots=True)
class LUndefined:
    """The ``undefined`` literal."""

    @property
    def prim_name(self) -> str:
        return "undefined"


Literal = Union[LNum, LBool, LStr, LNull, LUndefined]


def literals_equal(lit1: Literal, lit2: Literal) -> bool:
    """Compare two literals by kind first, then by value.

    Comparing kinds first keeps ``1`` and ``true`` apart even though
    Python considers ``1 == True``.
    """
    if type(lit1) is not type(lit2):
        return False
    if isinstance(lit1, (LNull, LUndefined)):
        return True
    return lit1.value == lit2.value


def literal_sort_key(lit: Literal) -> tuple:
    """Deterministic ordering key used when canonicalizing unions."""
    order = {LNum: 0, LStr: 1, LBool: 2, LNull: 3, LUndefined: 4}[type(lit)]
    if isinstance(lit, (LNull, LUndefined)):
        return (order, "")
    return (order, repr(lit.value))
