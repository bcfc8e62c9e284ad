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
"""Member access resolution.

Computes the type of ``obj.prop`` and ``obj[index]`` from the type of
``obj``. Primitives and generics are looked up through alias schemes in the
environment (``string``, ``number``, ``Array``), so ``"hi".length`` and
``xs.map`` resolve against ordinary record types.

When the object's type is still a variable the access is deferred as a
``TMem`` placeholder; the solver resolves it once the variable is bound.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Union

from typeinfer.core.builders import copy_type, tlit, tmem, tunion
from typeinfer.core.context import Context, fresh
from typeinfer.core.literals import LNum, LStr, LUndefined
from typeinfer.core.types import (
    Constraint,
    InferResult,
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
)
from typeinfer.errors import (
    IndexOutOfBounds,
    InvalidPropertyKey,
    MemberAccessError,
    PropertyMissing,
    TypeParamArityMismatch,
    UnknownTypeAlias,
    UnsupportedMemberAccess,
)
from typeinfer.inference.widening import simplify_union
from typeinfer.syntax import EIdent, ELit

logger = logging.getLogger(__name__)

IDENTIFIER = "identifier"
NUMBER = "number"
STRING = "string"
INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class PropertyKey:
    """The property part of a member access.

    Attributes:
        value: Property name or numeric index
        kind: identifier, number, string or invalid
    """

    value: Union[str, int, float, None]
    kind: str

    @classmethod
    def from_expr(cls, expr) -> PropertyKey:
        if isinstance(expr, EIdent):
            return cls(expr.name, IDENTIFIER)
        if isinstance(expr, ELit) and isinstance(expr.value, LNum):
            value = expr.value.value
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            return cls(value, NUMBER)
        if isinstance(expr, ELit) and isinstance(expr.value, LStr):
            return cls(expr.value.value, STRING)
        return cls(None, INVALID)

    @classmethod
    def from_property(cls, prop: Union[str, int]) -> PropertyKey:
        """Rebuild a key from the property stored on a ``TMem``."""
        if isinstance(prop, int):
            return cls(prop, NUMBER)
        return cls(prop, IDENTIFIER)


def replace_qualifiers(sc: Scheme, args: Sequence[Type], ctx: Context) -> Type:
    """Instantiate an alias scheme with explicit type arguments.

    Qualifiers are replaced positionally by fresh-id copies of ``args``.
    Any other free variable of the body (such as ``U`` in ``Array.map``)
    is replaced by a fresh type variable.
    """
    mapping = {q.id: copy_type(arg, ctx) for q, arg in zip(sc.qualifiers, args)}
    for tv in sc.free_type_vars():
        mapping[tv.id] = fresh(ctx)
    return sc.type.substitute(mapping)


def unwrap_member(ty: Type) -> Type:
    """Reduce a ``TMem`` over a record or tuple to the member's type."""
    if isinstance(ty, TMem):
        obj = ty.object
        if isinstance(obj, TRec) and isinstance(ty.property, str):
            prop_type = obj.get(ty.property)
            if prop_type is not None:
                return unwrap_member(prop_type)
        elif isinstance(obj, TTuple) and isinstance(ty.property, int):
            if 0 <= ty.property < len(obj.types):
                return unwrap_member(obj.types[ty.property])
    return ty


class MemberResolver:
    """Resolves member access against a context's alias schemes."""

    def __init__(self, ctx: Context):
        self.ctx = ctx

    def property_type(self, obj: Type, key: PropertyKey) -> InferResult:
        """Compute the type of ``key`` on a value of type ``obj``.

        Args:
            obj: Type of the object being accessed
            key: The property or index

        Returns:
            The member's type. Constraints are only produced when the
            access has to be deferred on a type variable.

        Raises:
            MemberAccessError: If the member cannot exist on ``obj``
        """
        if isinstance(obj, TVar):
            return self._on_var(obj, key)
        if isinstance(obj, TRec):
            return InferResult(self._on_record(obj, key))
        if isinstance(obj, TTuple):
            return self._on_tuple(obj, key)
        if isinstance(obj, (TPrim, TLit)):
            return self._on_primitive(obj, key)
        if isinstance(obj, TGen):
            return self._on_generic(obj, key)
        if isinstance(obj, (TFun, TUnion, TMem)):
            raise UnsupportedMemberAccess(obj)
        raise TypeError(f"unknown type variant: {obj!r}")

    def resolve(self, ty: TMem) -> Type:
        """Resolve a placeholder whose object is no longer a type variable.

        Placeholders over variables are returned unchanged.
        """
        if isinstance(ty.object, (TVar, TMem)):
            return ty
        result = self.property_type(ty.object, PropertyKey.from_property(ty.property))
        return unwrap_member(result.type)

    def resolve_all(self, ty: Type) -> Type:
        """Resolve every resolvable placeholder nested inside ``ty``."""
        if isinstance(ty, TMem):
            obj = self.resolve_all(ty.object)
            if obj is not ty.object:
                ty = TMem(ty.id, obj, ty.property, ty.frozen)
            resolved = self.resolve(ty)
            return resolved if resolved is ty else self.resolve_all(resolved)
        if isinstance(ty, TFun):
            return TFun(
                ty.id,
                tuple(self.resolve_all(arg) for arg in ty.args),
                self.resolve_all(ty.ret),
                ty.variadic,
                ty.frozen,
            )
        if isinstance(ty, TGen):
            return TGen(
                ty.id, ty.name, tuple(self.resolve_all(p) for p in ty.params), ty.frozen
            )
        if isinstance(ty, TRec):
            return TRec(
                ty.id,
                tuple(TProp(p.name, self.resolve_all(p.type)) for p in ty.properties),
                ty.frozen,
            )
        if isinstance(ty, TTuple):
            return TTuple(ty.id, tuple(self.resolve_all(t) for t in ty.types), ty.frozen)
        if isinstance(ty, TUnion):
            return TUnion(ty.id, tuple(self.resolve_all(t) for t in ty.types), ty.frozen)
        return ty

    # =========================================================================
    # Per-variant lookups
    # =========================================================================

    def _on_var(self, obj: TVar, key: PropertyKey) -> InferResult:
        # The placeholder over a fresh variable is unified with the one over
        # ``obj``; solving binds the two objects together.
        placeholder = tmem(fresh(self.ctx), key.value, self.ctx)
        deferred = tmem(obj, key.value, self.ctx)
        return InferResult(deferred, [Constraint((placeholder, deferred))])

    def _on_record(self, obj: TRec, key: PropertyKey) -> Type:
        if key.kind != IDENTIFIER:
            raise InvalidPropertyKey(
                "property must be an identifier when accessing a member on a record"
            )
        prop_type = obj.get(key.value)
        if prop_type is None:
            raise PropertyMissing(key.value, "record")
        return prop_type

    def _on_tuple(self, obj: TTuple, key: PropertyKey) -> InferResult:
        if key.kind == IDENTIFIER:
            try:
                alias = self.ctx.env.lookup("Array")
                if alias is None:
                    raise UnknownTypeAlias("Array")
                elem_type = simplify_union(tunion(obj.types, self.ctx), self.ctx)
                array_type = replace_qualifiers(alias, [elem_type], self.ctx)
                return self.property_type(array_type, key)
            except MemberAccessError as e:
                logger.debug(f"Array lookup of {key.value} failed: {e}")
                raise PropertyMissing(key.value, "array") from e
        if key.kind == NUMBER:
            index = key.value
            if not isinstance(index, int) or index < 0 or index >= len(obj.types):
                raise IndexOutOfBounds(index, len(obj.types))
            return InferResult(obj.types[index])
        raise InvalidPropertyKey(
            "property must be a number when accessing an index on a tuple"
        )

    def _on_primitive(self, obj: Union[TPrim, TLit], key: PropertyKey) -> InferResult:
        prim_name = obj.name if isinstance(obj, TPrim) else obj.prim_name
        try:
            alias = self.ctx.env.lookup(prim_name)
            if alias is None:
                raise UnknownTypeAlias(prim_name)
            return self.property_type(replace_qualifiers(alias, [], self.ctx), key)
        except MemberAccessError as e:
            raise PropertyMissing(key.value, prim_name) from e

    def _on_generic(self, obj: TGen, key: PropertyKey) -> InferResult:
        alias = self.ctx.env.lookup(obj.name)
        if alias is None:
            raise UnknownTypeAlias(obj.name)
        if len(alias.qualifiers) != len(obj.params):
            raise TypeParamArityMismatch(obj.name, len(alias.qualifiers), len(obj.params))

        # Indexing an array may run past its end.
        if obj.name == "Array" and key.kind == NUMBER:
            undefined = tlit(LUndefined(), self.ctx)
            return InferResult(
                simplify_union(tunion([obj.params[0], undefined], self.ctx), self.ctx)
            )

        aliased = replace_qualifiers(alias, obj.params, self.ctx)
        return self.property_type(aliased, key)
