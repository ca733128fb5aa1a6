"""
===============================================================================
MOTION SPACES - State and StateSpace Contract
===============================================================================
Every space a planner works in, leaf or compound, derives from
:class:`StateSpace` and exposes the same operation set:

    distance(a, b)                   metric between two states
    interpolate(a, b, t)             state at fraction t along the a -> b path
    interpolate_into(a, b, t, out)   same, overwriting a caller-owned state
    count_segments_between(a, b)     collision-check resolution of a -> b
    contains(space) / covers(space)  structural relationships between spaces

States never construct themselves: a space hands them out through
:meth:`StateSpace.create_state` and each state keeps a back-reference to the
space that defines its meaning.

Thread safety
-------------
The metric operations are pure functions of their arguments and may be
called from several planner threads at once. The setters (name, segment
length) are configuration-time calls and must complete before the space is
shared.
===============================================================================
"""

from __future__ import annotations

import logging
import math
import sys
from abc import ABC, abstractmethod
from typing import Any, Hashable, List, Optional

from motion_spaces.core.constants import (
    DEFAULT_SEGMENT_LENGTH,
    SEGMENT_COUNT_ROUNDING,
    STATE_EQUALITY_TOLERANCE,
)
from motion_spaces.core.errors import (
    CrossSpaceStateError,
    InvalidConfigurationError,
    StateSpaceError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================

def validate_segment_length(length: float) -> float:
    """
    Return ``length`` as a float, rejecting zero, negative and non-finite
    values.

    Raises
    ------
    InvalidConfigurationError
        If the length cannot drive path discretization.
    """
    try:
        length = float(length)
    except (TypeError, ValueError) as exc:
        raise InvalidConfigurationError(
            f"Segment length must be a number, got {length!r}"
        ) from exc
    if not math.isfinite(length) or length <= 0.0:
        raise InvalidConfigurationError(
            f"Segment length must be a positive finite number, got {length}"
        )
    return length


def segments_for_distance(distance: float, segment_length: float) -> int:
    """
    Number of segments of at most ``segment_length`` needed to span
    ``distance``, i.e. ``ceil(distance / segment_length)``.

    Ratios within :data:`SEGMENT_COUNT_ROUNDING` of an integer snap to it so
    that floating-point noise (0.3 / 0.1 = 2.9999999999999996) does not add
    or drop a segment.

    Counts saturate at ``sys.maxsize``: a ratio that overflows to infinity
    (a distance beyond float range, or a subnormal segment length) reports
    ``sys.maxsize`` instead of raising.
    """
    ratio = distance / segment_length
    if ratio >= sys.maxsize:
        return sys.maxsize
    nearest = round(ratio)
    if abs(ratio - nearest) <= SEGMENT_COUNT_ROUNDING * max(1.0, ratio):
        ratio = nearest
    return int(math.ceil(ratio))


def clamp_fraction(t: float) -> float:
    """Clamp an interpolation fraction into [0, 1]."""
    t = float(t)
    if t <= 0.0:
        return 0.0
    if t >= 1.0:
        return 1.0
    return t


# =============================================================================
# STATE
# =============================================================================

class State:
    """
    A point in exactly one state space.

    Attributes
    ----------
    space : StateSpace
        The space that created this state. The space outlives its states;
        the reference is an association, not ownership.

    Notes
    -----
    States are values. ``copy.copy`` and ``copy.deepcopy`` both produce an
    independent state through :meth:`StateSpace.copy_state`, sharing the
    space. ``==`` compares through :meth:`StateSpace.equal_states`; states
    are mutable and therefore unhashable.
    """

    def __init__(self, space: 'StateSpace') -> None:
        self.space = space

    def __copy__(self) -> 'State':
        return self.space.copy_state(self)

    def __deepcopy__(self, memo: dict) -> 'State':
        return self.space.copy_state(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        if not self.space.owns(other):
            return False
        try:
            return self.space.equal_states(self, other)
        except StateSpaceError:
            return False

    __hash__ = None


# =============================================================================
# STATE SPACE
# =============================================================================

class StateSpace(ABC):
    """
    Abstract metric space over a concrete :class:`State` subclass.

    Parameters
    ----------
    name : str, optional
        Human-readable label. Defaults to the class name.
    segment_length : float, optional
        Longest path segment a collision checker may step over without
        checking, in the space's distance units.

    Raises
    ------
    InvalidConfigurationError
        If ``segment_length`` is not a positive finite number.
    """

    state_type: type = State

    def __init__(self, name: Optional[str] = None,
                 segment_length: float = DEFAULT_SEGMENT_LENGTH) -> None:
        self._name = name if name is not None else type(self).__name__
        self._segment_length = validate_segment_length(segment_length)

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = str(value)

    def get_name(self) -> str:
        return self.name

    def set_name(self, name: str) -> None:
        self.name = name

    @property
    def segment_length(self) -> float:
        return self.get_segment_length()

    @segment_length.setter
    def segment_length(self, value: float) -> None:
        self.set_segment_length(value)

    def get_segment_length(self) -> float:
        return self._segment_length

    def set_segment_length(self, length: float) -> None:
        """
        Set the discretization step used by :meth:`count_segments_between`.

        Raises
        ------
        InvalidConfigurationError
            If ``length`` is zero, negative or not finite. The previous
            value is kept.
        """
        self._segment_length = validate_segment_length(length)
        logger.debug("Segment length of %s set to %g", self._name, self._segment_length)

    # =========================================================================
    # STATE MANAGEMENT
    # =========================================================================

    @abstractmethod
    def create_state(self) -> State:
        """Return a fresh state owned by this space."""
        raise NotImplementedError

    @abstractmethod
    def copy_state(self, state: State) -> State:
        """Return an independent copy of ``state``."""
        raise NotImplementedError

    @abstractmethod
    def equal_states(self, a: State, b: State,
                     tolerance: float = STATE_EQUALITY_TOLERANCE) -> bool:
        """True if ``a`` and ``b`` describe the same point within ``tolerance``."""
        raise NotImplementedError

    def owns(self, state: Any) -> bool:
        """
        True if ``state`` was created by this space or by a space with an
        identical structure.
        """
        if not isinstance(state, self.state_type):
            return False
        owner = getattr(state, "space", None)
        if owner is self:
            return True
        return isinstance(owner, StateSpace) and self.is_structurally_equal(owner)

    def check_state(self, state: Any) -> None:
        """
        Reject states that do not belong to this space.

        Raises
        ------
        CrossSpaceStateError
            If ``state`` is of the wrong type or was produced by a
            structurally different space.
        DimensionMismatchError
            If the state's shape does not fit the space.
        """
        if not self.owns(state):
            owner = getattr(state, "space", None)
            owner_name = owner.name if isinstance(owner, StateSpace) else type(state).__name__
            raise CrossSpaceStateError(
                f"State from '{owner_name}' cannot be used with space '{self._name}'"
            )
        self._validate_state(state)

    def _validate_state(self, state: State) -> None:
        """Shape checks beyond ownership; leaf spaces override as needed."""

    # =========================================================================
    # METRIC AND INTERPOLATION
    # =========================================================================

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Number of coordinates of the underlying manifold."""
        raise NotImplementedError

    @abstractmethod
    def maximum_extent(self) -> float:
        """Largest distance any two states of this space can be apart."""
        raise NotImplementedError

    @abstractmethod
    def distance(self, a: State, b: State) -> float:
        """
        Non-negative, symmetric distance obeying the triangle inequality,
        with ``distance(a, a) == 0``.
        """
        raise NotImplementedError

    @abstractmethod
    def interpolate_into(self, from_: State, to: State, t: float,
                         result: State) -> None:
        """
        Write the state at fraction ``t`` of the way from ``from_`` to ``to``
        into ``result``, overwriting every field of it.

        ``t`` is clamped to [0, 1]. ``result`` may alias either input.
        """
        raise NotImplementedError

    def interpolate(self, from_: State, to: State, t: float) -> State:
        """Return a new state at fraction ``t`` along the ``from_`` -> ``to`` path."""
        result = self.create_state()
        self.interpolate_into(from_, to, t, result)
        return result

    def count_segments_between(self, a: State, b: State) -> int:
        """
        Number of resolution steps needed to traverse from ``a`` to ``b``:
        ``ceil(distance(a, b) / segment_length)``. Zero for coincident states.
        """
        return segments_for_distance(self.distance(a, b), self.get_segment_length())

    def discretize(self, a: State, b: State) -> List[State]:
        """
        Discretize the path ``a`` -> ``b`` into evenly spaced states.

        Returns
        -------
        list of State
            ``n + 1`` states at ``t = i / n`` where
            ``n = count_segments_between(a, b)``; both endpoints included.
            Coincident inputs yield a single copy of ``a``.
        """
        n = self.count_segments_between(a, b)
        if n == 0:
            return [self.copy_state(a)]
        return [self.interpolate(a, b, i / n) for i in range(n + 1)]

    # =========================================================================
    # STRUCTURAL RELATIONSHIPS
    # =========================================================================

    @abstractmethod
    def structure_key(self) -> Hashable:
        """
        Hashable description of the space's topology and metric. Two spaces
        with equal keys accept each other's states. Names never contribute.
        """
        raise NotImplementedError

    def is_structurally_equal(self, other: Any) -> bool:
        if other is self:
            return True
        if not isinstance(other, StateSpace):
            return False
        return self.structure_key() == other.structure_key()

    def contains(self, space: Any) -> bool:
        """True if ``space`` is structurally this space (or, for compounds, a part of it)."""
        return self.is_structurally_equal(space)

    def covers(self, space: Any) -> bool:
        """
        True if restricting this space to ``space``'s coordinates reproduces
        ``space``'s metric and topology. A leaf space only covers itself.
        """
        return self.is_structurally_equal(space)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(name={self._name!r}, "
                f"segment_length={self.get_segment_length():g})")
