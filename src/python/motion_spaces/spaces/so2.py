"""
===============================================================================
MOTION SPACES - SO(2) State Space
===============================================================================
Planar headings, stored as angles in [-pi, pi).

    distance     -- length of the shorter arc between two headings, in [0, pi]
    interpolate  -- travel along that arc, wrapping through +/- pi when it
                    is the shorter way round
===============================================================================
"""

from __future__ import annotations

from typing import Optional

from motion_spaces.core.constants import DEFAULT_SEGMENT_LENGTH, PI, STATE_EQUALITY_TOLERANCE, TWO_PI
from motion_spaces.spaces.base import State, StateSpace, clamp_fraction


def wrap_angle(angle: float) -> float:
    """Map ``angle`` into [-pi, pi). Values already in range are returned unchanged."""
    angle = float(angle)
    if -PI <= angle < PI:
        return angle
    wrapped = (angle + PI) % TWO_PI - PI
    # the modulo can round up to exactly +pi
    if wrapped >= PI:
        wrapped -= TWO_PI
    return wrapped


class SO2State(State):
    """Heading angle ``value`` in radians."""

    def __init__(self, space: 'SO2StateSpace', value: float = 0.0) -> None:
        super().__init__(space)
        self.value = float(value)

    def __repr__(self) -> str:
        return f"SO2State({self.value:+.6f})"


class SO2StateSpace(StateSpace):
    """
    Rotation group of the plane with the shortest-arc metric.

    Parameters
    ----------
    name : str, optional
    segment_length : float, optional
        Collision-check resolution in radians.
    """

    state_type = SO2State

    def __init__(self, name: Optional[str] = None,
                 segment_length: float = DEFAULT_SEGMENT_LENGTH) -> None:
        super().__init__(name=name, segment_length=segment_length)

    def create_state(self, value: float = 0.0) -> SO2State:
        return SO2State(self, wrap_angle(value))

    def copy_state(self, state: SO2State) -> SO2State:
        self.check_state(state)
        return SO2State(self, state.value)

    def equal_states(self, a: SO2State, b: SO2State,
                     tolerance: float = STATE_EQUALITY_TOLERANCE) -> bool:
        return self.distance(a, b) <= tolerance

    def enforce_bounds(self, state: SO2State) -> None:
        """Wrap the stored angle back into [-pi, pi)."""
        self.check_state(state)
        state.value = wrap_angle(state.value)

    @property
    def dimension(self) -> int:
        return 1

    def maximum_extent(self) -> float:
        return PI

    def distance(self, a: SO2State, b: SO2State) -> float:
        self.check_state(a)
        self.check_state(b)
        return abs(wrap_angle(b.value - a.value))

    def interpolate_into(self, from_: SO2State, to: SO2State, t: float,
                         result: SO2State) -> None:
        self.check_state(from_)
        self.check_state(to)
        self.check_state(result)
        t = clamp_fraction(t)
        if t == 0.0:
            result.value = from_.value
            return
        if t == 1.0:
            result.value = to.value
            return
        diff = wrap_angle(to.value - from_.value)
        result.value = wrap_angle(from_.value + t * diff)

    def structure_key(self):
        return ("so2",)
