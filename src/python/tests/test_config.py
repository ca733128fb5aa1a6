"""
===============================================================================
MOTION SPACES - Configuration Test Suite
===============================================================================
Tests for building spaces from configuration dictionaries and YAML files:
every space type, defaults, weights in list and mapping form, the example
configuration shipped with the project, save/load round trips and the
errors raised for malformed documents.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import logging

import pytest
from numpy.testing import assert_allclose

from motion_spaces.config import (
    build_space,
    load_space,
    load_space_config,
    save_space_config,
    space_to_config,
)
from motion_spaces.core.constants import DEFAULT_SEGMENT_LENGTH
from motion_spaces.core.errors import EmptyCompositionError, InvalidConfigurationError
from motion_spaces.spaces.compound import CompoundStateSpace
from motion_spaces.spaces.real_vector import RealVectorStateSpace
from motion_spaces.spaces.so2 import SO2StateSpace
from motion_spaces.spaces.so3 import SO3StateSpace

EXAMPLE_CONFIG = os.path.join(
    os.path.dirname(__file__), '..', '..', '..', 'config', 'example_spaces.yaml'
)


# =============================================================================
# Test: build_space
# =============================================================================

class TestBuildSpace:

    def test_real_vector(self):
        space = build_space({"type": "real_vector", "dimension": 3, "name": "xyz",
                             "segment_length": 0.2})
        assert isinstance(space, RealVectorStateSpace)
        assert space.dimension == 3
        assert space.name == "xyz"
        assert space.segment_length == 0.2
        assert space.bounds is None

    def test_real_vector_dimension_from_bounds(self):
        space = build_space({"type": "real_vector", "bounds": [[0, 1], [0, 2]]})
        assert space.dimension == 2
        assert space.bounds == ((0.0, 1.0), (0.0, 2.0))

    @pytest.mark.parametrize("type_name,cls", [
        ("so2", SO2StateSpace),
        ("SO3", SO3StateSpace),
    ])
    def test_rotation_spaces(self, type_name, cls):
        space = build_space({"type": type_name})
        assert isinstance(space, cls)
        assert space.segment_length == DEFAULT_SEGMENT_LENGTH

    def test_nested_under_space_key(self):
        space = build_space({"space": {"type": "so2", "name": "heading"}})
        assert space.name == "heading"

    def test_compound_with_weight_mapping(self):
        space = build_space({
            "type": "compound",
            "weights": {1: 0.5},
            "components": [{"type": "real_vector", "dimension": 2}, {"type": "so2"}],
        })
        assert isinstance(space, CompoundStateSpace)
        assert space.weights == (1.0, 0.5)
        assert space.dimension == 3

    def test_compound_segment_length_pushed_down(self):
        space = build_space({
            "type": "compound",
            "segment_length": 0.5,
            "components": [{"type": "so2", "segment_length": 0.1}, {"type": "so3"}],
        })
        assert [c.segment_length for c in space.components] == [0.5, 0.5]

    def test_nested_compound(self):
        space = build_space({
            "type": "compound",
            "components": [
                {"type": "compound", "components": [{"type": "so2"}, {"type": "so2"}]},
                {"type": "so3"},
            ],
        })
        assert space.contains(SO3StateSpace())
        assert space.contains(CompoundStateSpace([SO2StateSpace(), SO2StateSpace()]))


# =============================================================================
# Test: Errors
# =============================================================================

class TestErrors:

    @pytest.mark.parametrize("config", [
        {"type": "torus"},
        {},
        {"space": "so2"},
        {"type": "real_vector", "dimension": "three"},
        {"type": "real_vector", "dimension": 0},
        {"type": "so2", "segment_length": 0.0},
        {"type": "compound", "components": {"type": "so2"}},
        {"type": "compound", "components": [{"type": "so2"}], "weights": [-1.0]},
    ])
    def test_invalid_configuration(self, config):
        with pytest.raises(InvalidConfigurationError):
            build_space(config)

    def test_not_a_mapping(self):
        with pytest.raises(InvalidConfigurationError):
            build_space(["so2"])

    def test_empty_compound(self):
        with pytest.raises(EmptyCompositionError):
            build_space({"type": "compound", "components": []})

    def test_yaml_list_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- so2\n- so3\n", encoding="utf-8")
        with pytest.raises(InvalidConfigurationError):
            load_space_config(path)

    def test_unknown_space_cannot_be_serialized(self):
        class PlainCompound(CompoundStateSpace):
            pass

        # subclasses of a known type serialize as that type
        assert space_to_config(PlainCompound([SO2StateSpace()]))["type"] == "compound"
        with pytest.raises(InvalidConfigurationError):
            space_to_config(object())


# =============================================================================
# Test: Files
# =============================================================================

class TestFiles:

    def test_example_configuration(self):
        space = load_space(EXAMPLE_CONFIG)
        assert space.name == "mobile_manipulator"
        assert space.dimension == 5
        assert space.weights == (1.0, 0.25, 0.5)
        assert [c.name for c in space.components] == ["base_position", "base_heading", "arm_joints"]
        assert all(c.segment_length == 0.05 for c in space.components)

    def test_example_distance(self):
        space = load_space(EXAMPLE_CONFIG)
        a = space.create_state()
        b = space.create_state()
        b[0].values[:] = [3.0, 4.0]
        b[1].value = 1.0
        b[2].values[:] = [0.0, 1.0]
        assert_allclose(space.distance(a, b), 5.0 + 0.25 * 1.0 + 0.5 * 1.0)

    def test_round_trip(self, tmp_path):
        original = CompoundStateSpace(
            [RealVectorStateSpace(2, bounds=[(-1, 1), (0, 3)], name="xy"),
             SO2StateSpace(name="theta"),
             SO3StateSpace(name="attitude")],
            weights=[1.0, 0.3, 0.7],
            name="robot",
            segment_length=0.02,
        )
        path = tmp_path / "robot.yaml"
        save_space_config(original, path)
        restored = load_space(path)
        assert restored.is_structurally_equal(original)
        assert restored.name == "robot"
        assert [c.name for c in restored.components] == ["xy", "theta", "attitude"]
        assert restored.segment_length == 0.02

    def test_round_trip_keeps_child_resolutions(self, tmp_path):
        original = CompoundStateSpace([SO2StateSpace(segment_length=0.1),
                                       SO3StateSpace(segment_length=0.3)])
        assert "segment_length" not in space_to_config(original)
        path = tmp_path / "mixed.yaml"
        save_space_config(original, path)
        restored = load_space(path)
        assert [c.segment_length for c in restored.components] == [0.1, 0.3]

    def test_loading_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="motion_spaces.config"):
            load_space(EXAMPLE_CONFIG)
        messages = [r.getMessage() for r in caplog.records]
        assert any("example_spaces.yaml" in m for m in messages)
        assert any("mobile_manipulator" in m for m in messages)
