"""
===============================================================================
MOTION SPACES - Discrete Motion Validation Test Suite
===============================================================================
Tests for DiscreteMotionValidator: resolution taken from the space's segment
count, endpoint-first checking, bisection visiting order, last-valid search
and the motion counters.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from numpy.testing import assert_allclose

from motion_spaces.spaces.compound import CompoundStateSpace
from motion_spaces.spaces.motion import DiscreteMotionValidator
from motion_spaces.spaces.real_vector import RealVectorStateSpace
from motion_spaces.spaces.so2 import SO2StateSpace


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def line():
    """1-D line discretized every 0.1."""
    return RealVectorStateSpace(1, segment_length=0.1)


class RecordingChecker:
    """Validity predicate that accepts x < limit and records what it saw."""

    def __init__(self, limit=np.inf):
        self.limit = limit
        self.seen = []

    def __call__(self, state):
        self.seen.append(state[0])
        return state[0] < self.limit


# =============================================================================
# Test: check_motion
# =============================================================================

class TestCheckMotion:

    def test_free_motion(self, line):
        checker = RecordingChecker()
        validator = DiscreteMotionValidator(line, checker)
        assert validator.check_motion(line.create_state([0.0]), line.create_state([1.0]))
        assert validator.valid_motions == 1
        assert validator.invalid_motions == 0
        # endpoint plus the nine interior points
        assert len(checker.seen) == 10
        assert_allclose(sorted(checker.seen), np.linspace(0.1, 1.0, 10), atol=1e-12)

    def test_endpoint_checked_first(self, line):
        checker = RecordingChecker(limit=0.95)
        validator = DiscreteMotionValidator(line, checker)
        assert not validator.check_motion(line.create_state([0.0]), line.create_state([1.0]))
        assert checker.seen == [1.0]
        assert validator.invalid_motions == 1

    def test_bisection_order(self, line):
        checker = RecordingChecker()
        validator = DiscreteMotionValidator(line, checker)
        validator.check_motion(line.create_state([0.0]), line.create_state([1.0]))
        assert_allclose(checker.seen[:4], [1.0, 0.5, 0.2, 0.7], atol=1e-12)

    def test_obstacle_in_middle(self, line):
        checker = RecordingChecker(limit=0.45)
        validator = DiscreteMotionValidator(line, lambda s: checker(s) or s[0] > 0.55)
        assert not validator.check_motion(line.create_state([0.0]), line.create_state([1.0]))
        assert validator.invalid_motions == 1

    def test_short_motion_checks_endpoint_only(self, line):
        checker = RecordingChecker()
        validator = DiscreteMotionValidator(line, checker)
        assert validator.check_motion(line.create_state([0.0]), line.create_state([0.05]))
        assert checker.seen == [0.05]

    def test_compound_resolution(self):
        """Resolution comes from the most demanding child."""
        space = CompoundStateSpace([RealVectorStateSpace(1, segment_length=1.0),
                                    SO2StateSpace(segment_length=0.1)])
        calls = []
        validator = DiscreteMotionValidator(space, lambda s: calls.append(s) is None)
        a = space.create_state()
        b = space.create_state()
        b[0].values[:] = 2.0
        b[1].value = 1.0
        assert validator.check_motion(a, b)
        assert len(calls) == 10


# =============================================================================
# Test: last_valid
# =============================================================================

class TestLastValid:

    def test_stops_before_obstacle(self, line):
        validator = DiscreteMotionValidator(line, RecordingChecker(limit=0.55))
        ok, last, t = validator.last_valid(line.create_state([0.0]), line.create_state([1.0]))
        assert not ok
        assert_allclose(last[0], 0.5, atol=1e-12)
        assert_allclose(t, 0.5, atol=1e-12)
        assert validator.invalid_motions == 1

    def test_immediate_failure_returns_start(self, line):
        validator = DiscreteMotionValidator(line, RecordingChecker(limit=0.05))
        start = line.create_state([0.0])
        ok, last, t = validator.last_valid(start, line.create_state([1.0]))
        assert not ok
        assert t == 0.0
        assert last[0] == 0.0
        assert last is not start

    def test_free_motion_reaches_goal(self, line):
        validator = DiscreteMotionValidator(line, RecordingChecker())
        goal = line.create_state([1.0])
        ok, last, t = validator.last_valid(line.create_state([0.0]), goal)
        assert ok
        assert t == 1.0
        assert line.equal_states(last, goal)
        assert validator.valid_motions == 1

    def test_coincident_states(self, line):
        validator = DiscreteMotionValidator(line, RecordingChecker())
        a = line.create_state([0.3])
        ok, last, t = validator.last_valid(a, line.copy_state(a))
        assert ok
        assert t == 1.0
        assert last[0] == 0.3
