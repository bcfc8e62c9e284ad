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
"""Unit tests for basic expression inference.

Tests literals, identifiers, conditionals, literal widening and the errors
raised for ill-typed expressions.
"""

import pytest

from typeinfer import (
    InfiniteType,
    InvalidRestParam,
    SubtypingFailure,
    UnboundVariable,
    UnificationFail,
)
from typeinfer.printer import print_type
from typeinfer.syntax import (
    add,
    app,
    bool_,
    eql,
    ident,
    if_,
    lam,
    let,
    null,
    num,
    rest,
    str_,
    undefined,
)


class TestLiterals:
    """Tests for literal expressions."""

    @pytest.mark.parametrize(
        "expr,expected",
        [
            (num(5), "5"),
            (num(2.5), "2.5"),
            (str_("hello"), '"hello"'),
            (bool_(True), "true"),
            (bool_(False), "false"),
            (null(), "null"),
            (undefined(), "undefined"),
        ],
    )
    def test_literal(self, infer, expr, expected):
        assert infer(expr) == expected


class TestIdentifiers:
    """Tests for identifier lookup."""

    def test_unbound(self, infer):
        with pytest.raises(UnboundVariable, match="foo is unbound"):
            infer(ident("foo"))

    def test_declared(self, engine):
        engine.def_type("x", engine.tnum())
        assert print_type(engine.infer_expr(ident("x"))) == "number"

    def test_scope_ends_with_lambda(self, infer):
        with pytest.raises(UnboundVariable):
            infer(app(lam(["x"], ident("x")), [ident("x")]))

    def test_rest_outside_params(self, infer):
        with pytest.raises(InvalidRestParam):
            infer(rest("xs"))


class TestConditionals:
    """Tests for if expressions and literal widening."""

    def test_branches_widen(self, infer):
        expr = lam(["x"], if_(ident("x"), num(5), num(10)))
        assert infer(expr) == "(boolean) => 5 | 10"

    def test_branches_widen_to_primitive(self, infer):
        expr = lam(["n"], if_(eql(ident("n"), num(0)), num(0), add(ident("n"), num(1))))
        assert infer(expr) == "(number) => number"

    def test_declared_condition_must_be_boolean(self, engine):
        engine.def_type("s", engine.tstr())
        with pytest.raises(UnificationFail, match="Couldn't unify string with boolean"):
            engine.infer_expr(if_(ident("s"), num(2), num(3)))


class TestErrors:
    """Tests for ill-typed expressions."""

    def test_argument_not_a_subtype(self, engine):
        engine.infer_decl("add", lam(["a", "b"], add(ident("a"), ident("b"))))
        with pytest.raises(SubtypingFailure, match="true is not a subtype of number"):
            engine.infer_expr(app(ident("add"), [num(5), bool_(True)]))

    def test_omega(self, infer):
        x = ident("x")
        with pytest.raises(InfiniteType, match=r"a appears in \(a\) => b"):
            infer(lam(["x"], app(x, [x])))

    def test_partial_application_is_not_a_number(self, engine):
        engine.infer_decl("add", lam(["a", "b"], add(ident("a"), ident("b"))))
        expr = add(app(ident("add"), [num(5)]), num(1))
        with pytest.raises(
            SubtypingFailure,
            match=r"\(number\) => number is not a subtype of number",
        ):
            engine.infer_expr(expr)

    def test_let_value_errors_surface(self, infer):
        with pytest.raises(UnboundVariable, match="missing is unbound"):
            infer(let("x", ident("missing"), num(1)))
