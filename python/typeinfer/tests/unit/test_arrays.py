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
"""Unit tests for builtin alias schemes.

Tests Array, string and number members and the operator types.
"""

import pytest

from typeinfer import PropertyMissing
from typeinfer.builtins import (
    OPERATORS,
    create_array_scheme,
    create_number_scheme,
    create_string_scheme,
    operator_type,
)
from typeinfer.printer import print_type
from typeinfer.syntax import app, ident, lam, mem, num, str_


def _map(obj, callback):
    return app(mem(obj, "map"), [callback])


class TestAliasSchemes:
    """Tests for the builtin alias scheme definitions."""

    def test_array_scheme(self, ctx):
        assert (
            print_type(create_array_scheme(ctx))
            == "<T>{length: number, map: ((T, number, Array<T>) => U) => Array<U>}"
        )

    def test_string_scheme(self, ctx):
        assert (
            print_type(create_string_scheme(ctx))
            == "{length: number, split: (string) => Array<string>}"
        )

    def test_number_scheme(self, ctx):
        assert (
            print_type(create_number_scheme(ctx))
            == "{toFixed: (number) => string, toString: () => string}"
        )

    def test_registered_on_engine(self, engine):
        for name in ("Array", "string", "number"):
            assert engine.lookup(name) is not None

    def test_not_registered_on_bare_engine(self, bare_engine):
        assert bare_engine.lookup("Array") is None


class TestArrayMembers:
    """Tests for members of Array<string>."""

    @pytest.fixture
    def str_array(self, engine):
        engine.def_type("strArray", engine.tgen("Array", [engine.tstr()]))
        return ident("strArray")

    def test_array(self, engine, str_array):
        assert print_type(engine.infer_expr(str_array)) == "Array<string>"

    def test_map_member(self, engine, str_array):
        scheme = engine.infer_expr(mem(str_array, "map"))
        assert print_type(scheme) == "<a>((string, number, Array<string>) => a) => Array<a>"

    def test_map_to_literal(self, engine, str_array):
        scheme = engine.infer_expr(_map(str_array, lam(["elem"], num(5))))
        assert print_type(scheme) == "Array<5>"

    def test_map_to_index(self, engine, str_array):
        callback = lam(["elem", "index", "array"], ident("index"))
        assert print_type(engine.infer_expr(_map(str_array, callback))) == "Array<number>"

    def test_map_to_array(self, engine, str_array):
        callback = lam(["elem", "index", "array"], ident("array"))
        scheme = engine.infer_expr(_map(str_array, callback))
        assert print_type(scheme) == "Array<Array<string>>"

    def test_map_to_length(self, engine, str_array):
        callback = lam(["elem", "index", "array"], mem(ident("array"), "length"))
        assert print_type(engine.infer_expr(_map(str_array, callback))) == "Array<number>"


class TestPrimitiveMembers:
    """Tests for members of string and number values."""

    def test_string_length(self, infer):
        assert infer(mem(str_("hello"), "length")) == "number"

    def test_string_split(self, infer):
        expr = app(mem(str_("hello, world"), "split"), [str_(","), num(100)])
        assert infer(expr) == "Array<string>"

    def test_declared_string(self, engine):
        engine.def_type("msg", engine.tstr())
        assert print_type(engine.infer_expr(mem(ident("msg"), "length"))) == "number"
        split = app(mem(ident("msg"), "split"), [str_(",")])
        assert print_type(engine.infer_expr(split)) == "Array<string>"

    def test_number_to_fixed(self, infer):
        assert infer(mem(num(5), "toFixed")) == "(number) => string"

    def test_without_builtins(self, bare_engine):
        with pytest.raises(PropertyMissing, match="length property doesn't exist on string"):
            bare_engine.infer_expr(mem(str_("hi"), "length"))


class TestOperatorTypes:
    """Tests for operator_type."""

    @pytest.mark.parametrize("op", ["Add", "Sub", "Mul", "Div"])
    def test_arithmetic(self, ctx, op):
        fn = operator_type(op, ctx)
        assert print_type(fn) == "(number, number) => number"
        assert all(arg.frozen for arg in fn.args)
        assert not fn.ret.frozen

    def test_equality(self, ctx):
        assert print_type(operator_type("Eql", ctx)) == "(number, number) => boolean"

    def test_unknown(self, ctx):
        with pytest.raises(ValueError):
            operator_type("Mod", ctx)

    def test_fresh_per_use(self, ctx):
        assert operator_type("Add", ctx).id != operator_type("Add", ctx).id

    def test_operator_table(self):
        assert set(OPERATORS) == {"Add", "Sub", "Mul", "Div", "Eql"}
