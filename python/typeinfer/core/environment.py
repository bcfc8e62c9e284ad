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
"""Type environment mapping identifiers to schemes.

The environment (Γ) is persistent: binding a name returns a new environment
and never mutates the one it was derived from. Nested scopes are therefore
just derived environments, and an outer scope can keep using its own value
after an inner scope has been created.

Uses the `immutables` library so that each binding shares structure with the
parent map instead of copying it.

References:
    - TAPL: Chapter 9 - Simple Types
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, Mapping, Optional, Tuple

from immutables import Map

from typeinfer.core.types import Scheme, TVar, Type, merge_vars


@dataclass(frozen=True)
class Env:
    """Immutable environment mapping names to schemes.

    Attributes:
        _bindings: The persistent name -> scheme map
    """

    _bindings: Map = field(default_factory=Map)

    def bind(self, name: str, sc: Scheme) -> Env:
        """Create a new environment with an additional binding.

        Args:
            name: The identifier to bind
            sc: The scheme to bind it to

        Returns:
            A new Env with the binding added, shadowing any previous one
        """
        return Env(self._bindings.set(name, sc))

    def bind_many(self, bindings: Mapping[str, Scheme]) -> Env:
        """Create a new environment with several bindings at once."""
        mutation = self._bindings.mutate()
        for name, sc in bindings.items():
            mutation[name] = sc
        return Env(mutation.finish())

    def lookup(self, name: str) -> Optional[Scheme]:
        """Return the scheme bound to ``name``, or None."""
        return self._bindings.get(name)

    def names(self) -> FrozenSet[str]:
        return frozenset(self._bindings.keys())

    def items(self) -> Iterator[Tuple[str, Scheme]]:
        return iter(self._bindings.items())

    def free_type_vars(self) -> Tuple[TVar, ...]:
        """Union of the free type variables of every bound scheme."""
        return merge_vars(*(sc.free_type_vars() for sc in self._bindings.values()))

    def substitute(self, mapping: Mapping[int, Type]) -> Env:
        """Apply a substitution to every bound scheme."""
        if not mapping:
            return self
        mutation = self._bindings.mutate()
        for name, sc in self._bindings.items():
            mutation[name] = sc.substitute(mapping)
        return Env(mutation.finish())

    def apply(self, subst) -> Env:
        """Apply a Substitution to every bound scheme."""
        return self.substitute(subst.mapping)

    def to_dict(self) -> Dict[str, Scheme]:
        return dict(self._bindings.items())

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings.keys())

    def __repr__(self) -> str:
        return f"Env({sorted(self._bindings.keys())})"


# Empty environment singleton
EMPTY_ENV = Env()


def create_env(bindings: Optional[Mapping[str, Scheme]] = None) -> Env:
    """Create an environment with optional initial bindings."""
    if not bindings:
        return EMPTY_ENV
    return EMPTY_ENV.bind_many(bindings)
