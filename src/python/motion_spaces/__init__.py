"""
===============================================================================
MOTION SPACES
===============================================================================
Geometric state spaces for sampling-based motion planning: the metric,
interpolation and path-discretization layer a planner talks to, independent
of its search strategy and of the robot's configuration representation.

Subpackages:
    core    -- constants, error taxonomy, quaternion arithmetic
    spaces  -- StateSpace contract, leaf spaces (R^n, SO(2), SO(3)),
               compound product space, discrete motion validation
    config  -- build spaces from YAML / dict descriptions
===============================================================================
"""

from motion_spaces.core.errors import (
    CrossSpaceStateError,
    DimensionMismatchError,
    EmptyCompositionError,
    InvalidConfigurationError,
    StateSpaceError,
)
from motion_spaces.core.quaternion import Quaternion
from motion_spaces.spaces.base import State, StateSpace
from motion_spaces.spaces.compound import CompoundState, CompoundStateSpace
from motion_spaces.spaces.motion import DiscreteMotionValidator
from motion_spaces.spaces.real_vector import RealVectorState, RealVectorStateSpace
from motion_spaces.spaces.so2 import SO2State, SO2StateSpace
from motion_spaces.spaces.so3 import SO3State, SO3StateSpace
from motion_spaces.config import build_space, load_space, load_space_config, save_space_config, space_to_config

__all__ = [
    "CompoundState",
    "CompoundStateSpace",
    "CrossSpaceStateError",
    "DimensionMismatchError",
    "DiscreteMotionValidator",
    "EmptyCompositionError",
    "InvalidConfigurationError",
    "Quaternion",
    "RealVectorState",
    "RealVectorStateSpace",
    "SO2State",
    "SO2StateSpace",
    "SO3State",
    "SO3StateSpace",
    "State",
    "StateSpace",
    "StateSpaceError",
    "build_space",
    "load_space",
    "load_space_config",
    "save_space_config",
    "space_to_config",
]
