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
"""Inference context: id counter, environment and contextual flags.

A ``State`` is shared by every context derived from the same root, so node
ids stay unique across a whole program. A ``Context`` itself is immutable;
entering a scope or an async lambda derives a new one.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from typeinfer.config import DEFAULT_CONFIG, InferenceConfig
from typeinfer.core.environment import EMPTY_ENV, Env
from typeinfer.core.types import Scheme, TVar, Type
from typeinfer.errors import UnboundVariable

# A tag handler receives the template's string parts, the types of the
# interpolated expressions and the context, and returns the result type.
TagHandler = Callable[[Sequence[str], Sequence[Type], "Context"], Type]


@dataclass
class State:
    """Mutable counter that stamps node ids."""

    count: int = 0

    def next_id(self) -> int:
        current = self.count
        self.count += 1
        return current


@dataclass(frozen=True)
class Context:
    """Everything inference needs besides the expression itself.

    Attributes:
        env: Bindings visible at this point
        state: Shared id counter
        is_async: True inside the body of an async lambda
        config: Engine configuration
        tag_handlers: Tagged template handlers keyed by tag name
        annotations: When a dict, receives the inferred type of every node
    """

    env: Env = EMPTY_ENV
    state: State = field(default_factory=State)
    is_async: bool = False
    config: InferenceConfig = DEFAULT_CONFIG
    tag_handlers: Mapping[str, TagHandler] = field(default_factory=dict)
    annotations: Optional[Dict[Any, Type]] = None

    def new_id(self) -> int:
        return self.state.next_id()

    def with_env(self, env: Env) -> Context:
        return replace(self, env=env)

    def with_async(self, is_async: bool) -> Context:
        return replace(self, is_async=is_async)

    def with_annotations(self, annotations: Optional[Dict[Any, Type]]) -> Context:
        return replace(self, annotations=annotations)


def fresh(ctx: Context) -> TVar:
    """Create a fresh type variable named after its id."""
    var_id = ctx.new_id()
    return TVar(var_id, f"t{var_id}")


def instantiate(sc: Scheme, ctx: Context) -> Type:
    """Replace every qualifier of ``sc`` with a fresh type variable."""
    if not sc.qualifiers:
        return sc.type
    mapping = {q.id: fresh(ctx) for q in sc.qualifiers}
    return sc.type.substitute(mapping)


def lookup_env(name: str, ctx: Context) -> Type:
    """Look up ``name`` and instantiate its scheme.

    Raises:
        UnboundVariable: If ``name`` is not bound
    """
    sc = ctx.env.lookup(name)
    if sc is None:
        raise UnboundVariable(name)
    return instantiate(sc, ctx)
