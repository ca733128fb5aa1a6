"""
===============================================================================
MOTION SPACES - Numerical Constants and Defaults
===============================================================================
Central repository for the angle constants, floating-point tolerances and
configuration defaults shared by every state space in the package.

Angles are in radians throughout. Distances carry whatever unit the leaf
space's coordinates carry; the package itself is unit-agnostic.
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
TWO_PI = 2.0 * np.pi

# =============================================================================
# FLOATING-POINT TOLERANCES
# =============================================================================
STATE_EQUALITY_TOLERANCE = 1e-9        # component-wise state comparison
QUATERNION_NORM_TOLERANCE = 1e-10      # below this a quaternion is degenerate
QUATERNION_COMPARISON_TOLERANCE = 1e-9
SLERP_NLERP_THRESHOLD = 0.9995         # |q1 . q2| above this -> NLERP

# Segment counting divides distance by segment length; values within this
# relative margin of an integer are rounded before taking the ceiling so that
# e.g. 0.3 / 0.1 counts as 3 segments and not 4.
SEGMENT_COUNT_ROUNDING = 1e-9

# =============================================================================
# CONFIGURATION DEFAULTS
# =============================================================================
DEFAULT_SEGMENT_LENGTH = 0.05          # planner collision-check resolution
DEFAULT_COMPONENT_WEIGHT = 1.0

# Space type tags used by the YAML configuration loader
SPACE_TYPE_REAL_VECTOR = "real_vector"
SPACE_TYPE_SO2 = "so2"
SPACE_TYPE_SO3 = "so3"
SPACE_TYPE_COMPOUND = "compound"
