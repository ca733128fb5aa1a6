"""
===============================================================================
MOTION SPACES - SO(3) State Space
===============================================================================
Orientations in three dimensions, stored as unit quaternions.

    distance     -- rotation angle of the relative rotation, in [0, pi]
    interpolate  -- SLERP along the short arc (constant angular rate)

Both are bi-invariant, so the result does not depend on which frame the
attitudes are expressed in.
===============================================================================
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from motion_spaces.core.constants import DEFAULT_SEGMENT_LENGTH, PI, STATE_EQUALITY_TOLERANCE
from motion_spaces.core.quaternion import Quaternion
from motion_spaces.spaces.base import State, StateSpace, clamp_fraction


class SO3State(State):
    """
    Orientation held as a unit :class:`Quaternion`.

    Attributes
    ----------
    value : Quaternion
    """

    def __init__(self, space: 'SO3StateSpace',
                 value: Optional[Quaternion] = None) -> None:
        super().__init__(space)
        self.value = value.copy() if value is not None else Quaternion.identity()

    def __repr__(self) -> str:
        return f"SO3State({self.value!r})"


class SO3StateSpace(StateSpace):
    """
    Rotation group of 3-D space with the geodesic (relative-angle) metric.

    Parameters
    ----------
    name : str, optional
    segment_length : float, optional
        Collision-check resolution in radians of rotation.
    """

    state_type = SO3State

    def __init__(self, name: Optional[str] = None,
                 segment_length: float = DEFAULT_SEGMENT_LENGTH) -> None:
        super().__init__(name=name, segment_length=segment_length)

    def create_state(self, value: Union[Quaternion, Sequence[float], None] = None) -> SO3State:
        """
        Return a new orientation, the identity unless ``value`` is given as a
        :class:`Quaternion` or a [w, x, y, z] sequence.
        """
        if value is not None and not isinstance(value, Quaternion):
            value = Quaternion.from_array(value)
        return SO3State(self, value)

    def copy_state(self, state: SO3State) -> SO3State:
        self.check_state(state)
        return SO3State(self, state.value)

    def equal_states(self, a: SO3State, b: SO3State,
                     tolerance: float = STATE_EQUALITY_TOLERANCE) -> bool:
        self.check_state(a)
        self.check_state(b)
        return a.value.is_close(b.value, tolerance)

    @property
    def dimension(self) -> int:
        return 3

    def maximum_extent(self) -> float:
        return PI

    def distance(self, a: SO3State, b: SO3State) -> float:
        self.check_state(a)
        self.check_state(b)
        return a.value.angle_to(b.value)

    def interpolate_into(self, from_: SO3State, to: SO3State, t: float,
                         result: SO3State) -> None:
        self.check_state(from_)
        self.check_state(to)
        self.check_state(result)
        t = clamp_fraction(t)
        if t == 0.0:
            result.value = from_.value.copy()
        elif t == 1.0:
            result.value = to.value.copy()
        else:
            result.value = Quaternion.slerp(from_.value, to.value, t)

    def structure_key(self):
        return ("so3",)
