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
"""Expression and pattern AST consumed by the inference engine.

Parsing is out of scope: a front end (or a test) builds trees with the
builder functions at the bottom of this module.

Expression nodes compare by identity (``eq=False``) so that two
structurally equal sub-expressions at different positions get separate
entries in an annotation table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

from typeinfer.core.literals import LBool, LNull, LNum, LStr, LUndefined, Literal

# =============================================================================
# Patterns
# =============================================================================


@dataclass(frozen=True)
class PVar:
    """Binds the whole value to ``name``."""

    name: str


@dataclass(frozen=True)
class PWild:
    """Matches anything and binds nothing."""


@dataclass(frozen=True)
class PLit:
    """Matches exactly one literal value."""

    value: Literal


@dataclass(frozen=True)
class PPrim:
    """Matches any value of the named primitive type."""

    name: str


@dataclass(frozen=True)
class PProp:
    name: str
    pattern: "Pattern"


@dataclass(frozen=True)
class PRec:
    """Destructures a record. Listed properties must be present."""

    properties: Tuple[PProp, ...]


@dataclass(frozen=True)
class PTuple:
    """Destructures a tuple of exactly ``len(patterns)`` elements."""

    patterns: Tuple["Pattern", ...]


Pattern = Union[PVar, PWild, PLit, PPrim, PRec, PTuple]


# =============================================================================
# Expressions
# =============================================================================


@dataclass(frozen=True, eq=False)
class ELit:
    value: Literal


@dataclass(frozen=True, eq=False)
class EIdent:
    name: str


@dataclass(frozen=True, eq=False)
class ERest:
    """A rest parameter ``...name``; only valid as the last lambda param."""

    name: str


@dataclass(frozen=True, eq=False)
class ELam:
    args: Tuple[Union[EIdent, ERest], ...]
    body: "Expr"
    is_async: bool = False


@dataclass(frozen=True, eq=False)
class EApp:
    fn: "Expr"
    args: Tuple["Expr", ...]


@dataclass(frozen=True, eq=False)
class ELet:
    pattern: Pattern
    value: "Expr"
    body: "Expr"


@dataclass(frozen=True, eq=False)
class EFix:
    """Fixed point, used to type recursive definitions."""

    expr: "Expr"


@dataclass(frozen=True, eq=False)
class EIf:
    cond: "Expr"
    then: "Expr"
    else_: "Expr"


@dataclass(frozen=True, eq=False)
class EOp:
    """Binary operator. ``op`` is one of Add, Sub, Mul, Div, Eql."""

    op: str
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True, eq=False)
class EProp:
    name: str
    value: "Expr"


@dataclass(frozen=True, eq=False)
class ERec:
    properties: Tuple[EProp, ...]


@dataclass(frozen=True, eq=False)
class ETuple:
    elements: Tuple["Expr", ...]


@dataclass(frozen=True, eq=False)
class EMem:
    """Member access ``object.prop`` or ``object[prop]``.

    ``prop`` is an ``EIdent`` for dotted access, or an ``ELit`` for indexed
    access with a number or string key.
    """

    object: "Expr"
    property: "Expr"


@dataclass(frozen=True, eq=False)
class EAwait:
    expr: "Expr"


@dataclass(frozen=True, eq=False)
class ETaggedTemplate:
    """``tag`strings[0]${expressions[0]}strings[1]...```."""

    tag: "Expr"
    strings: Tuple[str, ...]
    expressions: Tuple["Expr", ...]


Expr = Union[
    ELit,
    EIdent,
    ERest,
    ELam,
    EApp,
    ELet,
    EFix,
    EIf,
    EOp,
    ERec,
    ETuple,
    EMem,
    EAwait,
    ETaggedTemplate,
]


@dataclass(frozen=True, eq=False)
class Decl:
    """A top-level ``name = expr`` declaration."""

    name: str
    expr: Expr


@dataclass(frozen=True, eq=False)
class Program:
    """A sequence of declarations followed by an optional result expression."""

    decls: Tuple[Decl, ...]
    expr: Optional[Expr] = None


# =============================================================================
# Builders
# =============================================================================


def num(value: Union[int, float]) -> ELit:
    return ELit(LNum(value))


def str_(value: str) -> ELit:
    return ELit(LStr(value))


def bool_(value: bool) -> ELit:
    return ELit(LBool(value))


def null() -> ELit:
    return ELit(LNull())


def undefined() -> ELit:
    return ELit(LUndefined())


def ident(name: str) -> EIdent:
    return EIdent(name)


def rest(name: str) -> ERest:
    return ERest(name)


def lam(
    args: Sequence[Union[str, EIdent, ERest]], body: Expr, is_async: bool = False
) -> ELam:
    """Build a lambda. Plain strings are treated as identifier params."""
    params = tuple(EIdent(arg) if isinstance(arg, str) else arg for arg in args)
    return ELam(params, body, is_async)


def app(fn: Expr, args: Iterable[Expr]) -> EApp:
    return EApp(fn, tuple(args))


def let(pattern: Union[str, Pattern], value: Expr, body: Expr) -> ELet:
    """Build a let. A plain string pattern binds a variable."""
    if isinstance(pattern, str):
        pattern = PVar(pattern)
    return ELet(pattern, value, body)


def fix(expr: Expr) -> EFix:
    return EFix(expr)


def if_(cond: Expr, then: Expr, else_: Expr) -> EIf:
    return EIf(cond, then, else_)


def op(name: str, left: Expr, right: Expr) -> EOp:
    return EOp(name, left, right)


def add(left: Expr, right: Expr) -> EOp:
    return EOp("Add", left, right)


def sub(left: Expr, right: Expr) -> EOp:
    return EOp("Sub", left, right)


def mul(left: Expr, right: Expr) -> EOp:
    return EOp("Mul", left, right)


def div(left: Expr, right: Expr) -> EOp:
    return EOp("Div", left, right)


def eql(left: Expr, right: Expr) -> EOp:
    return EOp("Eql", left, right)


def prop(name: str, value: Expr) -> EProp:
    return EProp(name, value)


def rec(properties: Iterable[EProp]) -> ERec:
    return ERec(tuple(properties))


def tuple_(elements: Iterable[Expr]) -> ETuple:
    return ETuple(tuple(elements))


def mem(obj: Expr, property: Union[str, int, Expr]) -> EMem:
    """Build a member access.

    A string becomes dotted access (``obj.name``), an int becomes an index
    (``obj[1]``). Pass an expression to build anything else, such as
    ``obj["name"]`` with ``str_("name")``.
    """
    if isinstance(property, bool):
        raise TypeError("member property must be a name, an index or an expression")
    if isinstance(property, str):
        property = EIdent(property)
    elif isinstance(property, int):
        property = num(property)
    return EMem(obj, property)


def await_(expr: Expr) -> EAwait:
    return EAwait(expr)


def tagged_template(
    tag: Expr, strings: Iterable[str], expressions: Iterable[Expr]
) -> ETaggedTemplate:
    return ETaggedTemplate(tag, tuple(strings), tuple(expressions))


def decl(name: str, expr: Expr) -> Decl:
    return Decl(name, expr)


def program(decls: Iterable[Decl], expr: Optional[Expr] = None) -> Program:
    return Program(tuple(decls), expr)


# Pattern builders


def pvar(name: str) -> PVar:
    return PVar(name)


def pwild() -> PWild:
    return PWild()


def plit(value: Union[Literal, int, float, str, bool]) -> PLit:
    if isinstance(value, (LNum, LBool, LStr, LNull, LUndefined)):
        return PLit(value)
    if isinstance(value, bool):
        return PLit(LBool(value))
    if isinstance(value, (int, float)):
        return PLit(LNum(value))
    return PLit(LStr(value))


def pprim(name: str) -> PPrim:
    return PPrim(name)


def pprop(name: str, pattern: Pattern) -> PProp:
    return PProp(name, pattern)


def prec(properties: Iterable[PProp]) -> PRec:
    return PRec(tuple(properties))


def ptuple(patterns: Iterable[Pattern]) -> PTuple:
    return PTuple(tuple(patterns))
