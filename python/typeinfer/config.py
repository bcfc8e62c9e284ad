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
"""Configuration for the inference engine.

Union matching strategies:
    canonical:  Members of both unions are put in a canonical order
                (primitives by name, literals by kind and value, everything
                else in written order) before being unified pairwise.
    positional: Members are unified pairwise in the order they were written.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

UNION_MATCHING_STRATEGIES = frozenset({"canonical", "positional"})


@dataclass(frozen=True)
class InferenceConfig:
    """Configuration for an inference engine.

    Attributes:
        register_builtins: Register the Array, string and number alias
            schemes when an engine is created.
        union_matching: How two unions of equal size are unified.
        max_solver_steps: Upper bound on unify steps for one top-level call.
            None means unbounded.
        trace_solver: Log every unify step at DEBUG level.
    """

    register_builtins: bool = True
    union_matching: str = "canonical"
    max_solver_steps: Optional[int] = None
    trace_solver: bool = False

    def __post_init__(self) -> None:
        if self.union_matching not in UNION_MATCHING_STRATEGIES:
            raise ValueError(
                f"union_matching must be one of {sorted(UNION_MATCHING_STRATEGIES)}, "
                f"got {self.union_matching!r}"
            )
        if self.max_solver_steps is not None and self.max_solver_steps <= 0:
            raise ValueError(
                f"max_solver_steps must be positive, got {self.max_solver_steps}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "register_builtins": self.register_builtins,
            "union_matching": self.union_matching,
            "max_solver_steps": self.max_solver_steps,
            "trace_solver": self.trace_solver,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "InferenceConfig":
        """Create from dictionary."""
        return cls(
            register_builtins=d.get("register_builtins", True),
            union_matching=d.get("union_matching", "canonical"),
            max_solver_steps=d.get("max_solver_steps"),
            trace_solver=d.get("trace_solver", False),
        )


# Default configuration singleton
DEFAULT_CONFIG = InferenceConfig()
