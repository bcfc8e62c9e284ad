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
"""Unit tests for function inference.

Tests recursion, higher-order combinators, partial application, extra
arguments, callbacks and rest parameters.
"""

import pytest

from typeinfer import InvalidRestParam, Scheme
from typeinfer.printer import print_type
from typeinfer.syntax import (
    add,
    app,
    bool_,
    eql,
    fix,
    ident,
    if_,
    lam,
    let,
    mul,
    num,
    rest,
    str_,
    sub,
    tuple_,
)


def _fib():
    n = ident("n")
    body = if_(
        eql(n, num(0)),
        num(0),
        if_(
            eql(n, num(1)),
            num(1),
            add(
                app(ident("fib"), [sub(n, num(1))]),
                app(ident("fib"), [sub(n, num(2))]),
            ),
        ),
    )
    return fix(lam(["fib"], lam(["n"], body)))


class TestCombinators:
    """Tests for classic higher-order functions."""

    def test_fib(self, infer):
        assert infer(_fib()) == "(number) => number"

    def test_const(self, infer):
        assert infer(lam(["x", "y"], ident("x"))) == "<a, b>(a, b) => a"

    def test_compose(self, infer):
        f, g, x = ident("f"), ident("g"), ident("x")
        compose = lam(["f"], lam(["g"], lam(["x"], app(g, [app(f, [x])]))))
        assert infer(compose) == "<a, b, c>((a) => b) => ((b) => c) => (a) => c"

    def test_on(self, infer):
        g, f, x, y = ident("g"), ident("f"), ident("x"), ident("y")
        on = lam(
            ["g", "f"],
            lam(["x", "y"], app(g, [app(f, [x]), app(f, [y])])),
        )
        assert infer(on) == "<a, b, c>((a, a) => b, (c) => a) => (c, c) => b"

    def test_ap(self, infer):
        f, x = ident("f"), ident("x")
        ap = lam(["f", "x"], app(f, [app(f, [x])]))
        assert infer(ap) == "<a>((a) => a, a) => a"

    def test_until(self, infer):
        p, f, x = ident("p"), ident("f"), ident("x")
        until = fix(
            lam(
                ["until"],
                lam(
                    ["p", "f", "x"],
                    if_(app(p, [x]), x, app(ident("until"), [p, f, app(f, [x])])),
                ),
            )
        )
        assert infer(until) == "<a>((a) => boolean, (a) => a, a) => a"

    def test_no_params(self, infer):
        assert infer(lam([], num(5))) == "() => 5"

    def test_declarations_stay_polymorphic(self, engine):
        """Using a declared function at one type doesn't fix it for later uses."""
        x, y = ident("x"), ident("y")
        engine.infer_decl("const", lam(["x", "y"], x))
        engine.infer_decl(
            "y", lam(["y"], app(ident("const"), [y, app(ident("const"), [y, num(5)])]))
        )
        engine.infer_decl("id", lam(["x"], x))
        engine.infer_decl(
            "foo",
            lam(
                ["x"],
                let(
                    "y",
                    app(ident("id"), [x]),
                    add(ident("y"), num(1)),
                ),
            ),
        )
        assert print_type(engine.lookup("foo")) == "(number) => number"


class TestSKI:
    """Tests for the S, K and I combinators and let-polymorphism."""

    def _s(self):
        f, g, x = ident("f"), ident("g"), ident("x")
        return lam(["f"], lam(["g"], lam(["x"], app(app(f, [x]), [app(g, [x])]))))

    def _k(self):
        return lam(["x"], lam(["y"], ident("x")))

    def test_i(self, infer):
        assert infer(lam(["x"], ident("x"))) == "<a>(a) => a"

    def test_k(self, infer):
        assert infer(self._k()) == "<a, b>(a) => (b) => a"

    def test_s(self, infer):
        assert infer(self._s()) == "<a, b, c>((a) => (b) => c) => ((a) => b) => (a) => c"

    def test_skk(self, engine):
        engine.infer_decl("S", self._s())
        engine.infer_decl("K", self._k())
        skk = app(app(ident("S"), [ident("K")]), [ident("K")])
        assert print_type(engine.infer_expr(skk)) == "<a>(a) => a"

    def test_mu(self, infer):
        f = ident("f")
        assert infer(lam(["f"], app(f, [fix(f)]))) == "<a>((a) => a) => a"

    def test_nsucc(self, infer):
        assert infer(lam(["n"], add(ident("n"), num(1)))) == "(number) => number"

    def test_let_polymorphism(self, infer):
        identity = ident("I")
        expr = let(
            "I",
            lam(["x"], ident("x")),
            app(app(identity, [identity]), [app(identity, [num(3)])]),
        )
        assert infer(expr) == "3"

    def test_self_application_through_let(self, infer):
        expr = let("x", lam(["x"], ident("x")), app(ident("x"), [ident("x")]))
        assert infer(expr) == "<a>(a) => a"

    def test_inner_let(self, infer):
        expr = lam(
            ["x"],
            let("y", lam(["z"], ident("z")), ident("y")),
        )
        assert infer(expr) == "<a, b>(a) => (b) => b"

    def test_let_bound_operator(self, infer):
        add_fn = lam(["a", "b"], add(ident("a"), ident("b")))
        assert infer(let("add", add_fn, ident("add"))) == "(number, number) => number"


class TestGenerics:
    """Tests for functions over declared generic types."""

    def test_promisify(self, engine):
        a = engine.tvar("a")
        engine.def_scheme(
            "promisify", Scheme((a,), engine.tfun([a], engine.tgen("Promise", [a])))
        )
        assert print_type(engine.infer_expr(app(ident("promisify"), [num(5)]))) == "Promise<5>"
        assert (
            print_type(engine.infer_expr(app(ident("promisify"), [bool_(True)])))
            == "Promise<true>"
        )

    def test_extract(self, engine):
        t = engine.tvar("T")
        engine.def_scheme(
            "extract",
            Scheme((t,), engine.tfun([engine.tgen("Foo", [t])], t)),
        )
        x, y = ident("x"), ident("y")
        expr = lam(
            ["x", "y"],
            add(app(ident("extract"), [x]), app(ident("extract"), [y])),
        )
        assert print_type(engine.infer_expr(expr)) == "(Foo<number>, Foo<number>) => number"


class TestLiteralWidening:
    """Tests for how uses of a parameter widen its type."""

    def test_uses_widen_to_union(self, infer):
        f = ident("f")
        expr = lam(["f"], tuple_([app(f, [num(5)]), app(f, [num(10)])]))
        assert infer(expr) == "<a>((10 | 5) => a) => [a, a]"

    def test_number_use_collapses_union(self, infer):
        f = ident("f")
        uses = [app(f, [num(5)]), app(f, [num(10)]), app(f, [add(num(1), num(2))])]
        assert infer(lam(["f"], tuple_(uses))) == "<a>((number) => a) => [a, a, a]"

    def test_let_bound_function_in_pair(self, engine):
        a = engine.tvar("a")
        b = engine.tvar("b")
        engine.def_scheme(
            "pair",
            Scheme((a, b), engine.tfun([a], engine.tfun([b], engine.tgen("*", [a, b])))),
        )
        f = ident("f")
        expr = lam(
            ["g"],
            let(
                "f",
                lam(["x"], ident("g")),
                app(app(ident("pair"), [app(f, [num(3)])]), [app(f, [bool_(True)])]),
            ),
        )
        assert print_type(engine.infer_expr(expr)) == "<a>(a) => *<a, a>"


class TestPartialApplication:
    """Tests for calls with fewer or more arguments than params."""

    def _add(self):
        return lam(["a", "b"], add(ident("a"), ident("b")))

    def test_partial(self, engine):
        engine.infer_decl("add", self._add())
        engine.infer_decl("add5", app(ident("add"), [num(5)]))
        assert print_type(engine.lookup("add5")) == "(number) => number"

    def test_partial_then_rest(self, engine):
        engine.infer_decl("add", self._add())
        expr = app(app(ident("add"), [num(5)]), [num(10)])
        assert print_type(engine.infer_expr(expr)) == "number"

    def test_partial_lambda(self, infer):
        assert infer(app(self._add(), [num(5)])) == "(number) => number"

    def test_extra_arguments_are_ignored(self, engine):
        engine.infer_decl("add", self._add())
        expr = app(ident("add"), [num(5), num(10), num(99)])
        assert print_type(engine.infer_expr(expr)) == "number"


class TestCallbacks:
    """Tests for callbacks passed to declared functions."""

    def _declare_map(self, engine):
        a = engine.tvar("a")
        b = engine.tvar("b")
        engine.def_scheme(
            "map",
            Scheme(
                (a, b),
                engine.tfun(
                    [engine.tgen("Array", [a]), engine.tfun([a, engine.tnum()], b)],
                    engine.tgen("Array", [b]),
                ),
            ),
        )
        engine.def_type("array", engine.tgen("Array", [engine.tnum()]))

    def test_callback_with_fewer_params(self, engine):
        self._declare_map(engine)
        callback = lam(["x"], eql(ident("x"), num(0)))
        expr = app(ident("map"), [ident("array"), callback])
        assert print_type(engine.infer_expr(expr)) == "Array<boolean>"

    def test_callback_returning_function(self, engine):
        self._declare_map(engine)
        engine.infer_decl("add", lam(["a", "b"], add(ident("a"), ident("b"))))
        callback = lam(["x"], app(ident("add"), [ident("x")]))
        expr = app(ident("map"), [ident("array"), callback])
        assert print_type(engine.infer_expr(expr)) == "Array<(number) => number>"


class TestRestParams:
    """Tests for rest params and variadic functions."""

    def test_rest_only(self, infer):
        assert infer(lam([rest("rest")], num(5))) == "<a>(...Array<a>) => 5"

    def test_two_rest_params(self, infer):
        with pytest.raises(InvalidRestParam, match="Rest param must come last."):
            infer(lam([rest("a"), rest("b")], num(5)))

    def test_rest_before_param(self, infer):
        with pytest.raises(InvalidRestParam):
            infer(lam([rest("rest"), "x"], num(5)))

    def test_rest_collects_arguments(self, engine):
        engine.infer_decl("foo", lam([rest("rest")], ident("rest")))
        call = app(ident("foo"), [num(5), num(10)])
        assert print_type(engine.infer_expr(call)) == "Array<10 | 5>"

    def test_rest_collects_mixed_arguments(self, engine):
        engine.infer_decl("foo", lam([rest("rest")], ident("rest")))
        call = app(ident("foo"), [num(5), bool_(True)])
        assert print_type(engine.infer_expr(call)) == "Array<true | 5>"

    def test_rest_without_arguments(self, engine):
        engine.infer_decl("foo", lam([rest("rest")], ident("rest")))
        assert print_type(engine.infer_expr(app(ident("foo"), []))) == "<a>Array<a>"

    def test_rest_after_param(self, engine):
        engine.infer_decl("foo", lam(["x", rest("rest")], ident("rest")))
        call = app(ident("foo"), [str_("hello"), num(5), num(10)])
        assert print_type(engine.infer_expr(call)) == "Array<10 | 5>"
        call = app(ident("foo"), [str_("hello")])
        assert print_type(engine.infer_expr(call)) == "<a>Array<a>"

    def test_fixed_param_with_rest(self, engine):
        engine.infer_decl("foo", lam(["x", rest("rest")], ident("x")))
        call = app(ident("foo"), [str_("hello"), num(5), num(10)])
        assert print_type(engine.infer_expr(call)) == '"hello"'

    def test_partial_application_keeps_rest(self, engine):
        engine.infer_decl("foo", lam(["x", "y", rest("rest")], ident("rest")))
        call = app(ident("foo"), [str_("hello")])
        assert print_type(engine.infer_expr(call)) == "<a, b>(a, ...Array<b>) => Array<b>"

    def test_partial_application_before_rest(self, engine):
        """A short call leaves the regular params ahead of the rest param."""
        engine.infer_decl("foo", lam(["x", "y", rest("rest")], ident("y")))
        partial = app(ident("foo"), [str_("hello")])
        assert print_type(engine.infer_expr(partial)) == "<a, b>(a, ...Array<b>) => a"
        assert print_type(engine.infer_expr(app(partial, [num(5)]))) == "5"

    def test_variadic_function_as_argument(self, engine):
        engine.infer_decl("const", lam(["x", "y"], ident("x")))
        engine.infer_decl("foo", lam(["x", rest("rest")], ident("x")))
        call = app(ident("const"), [ident("foo")])
        assert print_type(engine.infer_expr(call)) == "<a, b, c>(a) => (b, ...Array<c>) => b"

    def test_declared_variadic(self, engine):
        engine.def_type(
            "foo",
            engine.tfun(
                [engine.tgen("Array", [engine.tnum()])], engine.tnum(), variadic=True
            ),
        )
        expr = lam(["x"], app(ident("foo"), [ident("x")]))
        assert print_type(engine.infer_expr(expr)) == "(number) => number"

    def test_declared_variadic_returned(self, engine):
        engine.infer_decl("const", lam(["x", "y"], ident("x")))
        engine.def_type(
            "foo",
            engine.tfun(
                [engine.tgen("Array", [engine.tnum()])], engine.tnum(), variadic=True
            ),
        )
        call = app(ident("const"), [ident("foo"), str_("hello")])
        assert print_type(engine.infer_expr(call)) == "(...Array<number>) => number"


class TestOperators:
    """Tests for binary operators."""

    def test_arithmetic(self, infer):
        expr = lam(["a", "b"], mul(add(ident("a"), num(1)), ident("b")))
        assert infer(expr) == "(number, number) => number"

    def test_equality(self, infer):
        assert infer(eql(num(1), num(2))) == "boolean"
