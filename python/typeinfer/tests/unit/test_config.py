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
"""Unit tests for InferenceConfig."""

import dataclasses

import pytest

from typeinfer import DEFAULT_CONFIG, InferenceConfig


class TestInferenceConfig:
    """Tests for InferenceConfig."""

    def test_defaults(self):
        config = InferenceConfig()
        assert config.register_builtins
        assert config.union_matching == "canonical"
        assert config.max_solver_steps is None
        assert not config.trace_solver
        assert config == DEFAULT_CONFIG

    def test_positional_union_matching(self):
        assert InferenceConfig(union_matching="positional").union_matching == "positional"

    def test_invalid_union_matching(self):
        with pytest.raises(ValueError, match="union_matching"):
            InferenceConfig(union_matching="sorted")

    def test_invalid_max_solver_steps(self):
        with pytest.raises(ValueError, match="max_solver_steps"):
            InferenceConfig(max_solver_steps=0)

    def test_is_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.trace_solver = True

    def test_dict_round_trip(self):
        config = InferenceConfig(
            register_builtins=False,
            union_matching="positional",
            max_solver_steps=100,
            trace_solver=True,
        )
        assert InferenceConfig.from_dict(config.to_dict()) == config

    def test_from_partial_dict(self):
        """Missing keys should fall back to the defaults."""
        config = InferenceConfig.from_dict({"max_solver_steps": 10})
        assert config.max_solver_steps == 10
        assert config.register_builtins
        assert config.union_matching == "canonical"
