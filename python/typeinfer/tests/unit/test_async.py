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
"""Unit tests for async lambdas and await."""

import pytest

from typeinfer import AwaitOutsideAsync, Scheme
from typeinfer.printer import print_type
from typeinfer.syntax import add, app, await_, ident, lam, num


class TestAsyncLambdas:
    """Tests for async lambda return types."""

    def test_wraps_return_in_promise(self, infer):
        assert infer(lam([], num(5), is_async=True)) == "() => Promise<5>"

    def test_promise_is_not_wrapped_twice(self, engine):
        engine.def_type("retVal", engine.tgen("Promise", [engine.tnum()]))
        expr = lam([], ident("retVal"), is_async=True)
        assert print_type(engine.infer_expr(expr)) == "() => Promise<number>"

    def test_calls_a_parameter(self, infer):
        x = ident("x")
        expr = lam(["x"], app(x, []), is_async=True)
        assert infer(expr) == "<a>(() => a) => Promise<a>"


class TestAwait:
    """Tests for await expressions."""

    def test_await_promise(self, engine):
        engine.def_type("retVal", engine.tgen("Promise", [engine.tnum()]))
        expr = lam([], await_(ident("retVal")), is_async=True)
        assert print_type(engine.infer_expr(expr)) == "() => Promise<number>"

    def test_await_promise_in_operator(self, engine):
        engine.def_type("retVal", engine.tgen("Promise", [engine.tnum()]))
        expr = lam([], add(await_(ident("retVal")), num(5)), is_async=True)
        assert print_type(engine.infer_expr(expr)) == "() => Promise<number>"

    def test_await_call_returning_promise(self, engine):
        a = engine.tvar("a")
        engine.def_scheme(
            "fetch", Scheme((a,), engine.tfun([a], engine.tgen("Promise", [a])))
        )
        expr = lam([], await_(app(ident("fetch"), [num(5)])), is_async=True)
        assert print_type(engine.infer_expr(expr)) == "() => Promise<5>"

    def test_await_non_promise(self, infer):
        expr = lam([], add(await_(num(5)), num(10)), is_async=True)
        assert infer(expr) == "() => Promise<number>"

    def test_await_unknown_type_passes_through(self, infer):
        expr = lam(["p"], await_(ident("p")), is_async=True)
        assert infer(expr) == "<a>(a) => Promise<a>"

    def test_await_outside_async(self, infer):
        with pytest.raises(
            AwaitOutsideAsync, match="Can't use `await` inside non-async lambda"
        ):
            infer(lam([], await_(num(5))))

    def test_await_at_top_level(self, infer):
        with pytest.raises(AwaitOutsideAsync):
            infer(await_(num(5)))

    def test_async_flag_resets_in_nested_lambda(self, infer):
        """A plain lambda inside an async one can't await."""
        inner = lam([], await_(num(5)))
        with pytest.raises(AwaitOutsideAsync):
            infer(lam([], inner, is_async=True))

    def test_async_lambda_inside_plain_lambda(self, infer):
        inner = lam([], add(await_(num(5)), num(10)), is_async=True)
        assert infer(lam([], inner)) == "() => () => Promise<number>"
