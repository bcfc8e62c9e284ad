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
"""Pytest configuration for typeinfer tests.

Every test gets its own engine and context so ids, bindings and tag
handlers never leak between tests.
"""

import pytest

from typeinfer import Engine, InferenceConfig
from typeinfer.core import create_ctx
from typeinfer.printer import print_type


@pytest.fixture
def engine() -> Engine:
    """An engine with the builtin alias schemes registered."""
    return Engine()


@pytest.fixture
def bare_engine() -> Engine:
    """An engine without any builtins."""
    return Engine(InferenceConfig(register_builtins=False))


@pytest.fixture
def ctx():
    """A fresh root context with an empty environment."""
    return create_ctx()


@pytest.fixture
def infer(engine):
    """Infer an expression on the shared engine and return the printed scheme."""

    def _infer(expr) -> str:
        return print_type(engine.infer_expr(expr))

    return _infer
