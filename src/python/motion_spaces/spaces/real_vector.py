"""
===============================================================================
MOTION SPACES - Real Vector State Space
===============================================================================
R^n with the Euclidean metric and straight-line interpolation. Optional
per-axis bounds describe the workspace box; they participate in the space's
structure but the metric itself ignores them.
===============================================================================
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from motion_spaces.core.constants import DEFAULT_SEGMENT_LENGTH, STATE_EQUALITY_TOLERANCE
from motion_spaces.core.errors import DimensionMismatchError, InvalidConfigurationError
from motion_spaces.spaces.base import State, StateSpace, clamp_fraction


class RealVectorState(State):
    """
    Point in R^n.

    Attributes
    ----------
    values : np.ndarray
        Coordinates, shape (n,), dtype float64.
    """

    def __init__(self, space: 'RealVectorStateSpace',
                 values: Optional[np.ndarray] = None) -> None:
        super().__init__(space)
        if values is None:
            self.values = np.zeros(space.dimension, dtype=np.float64)
        else:
            self.values = np.array(values, dtype=np.float64)

    def __getitem__(self, index: int) -> float:
        return float(self.values[index])

    def __setitem__(self, index: int, value: float) -> None:
        self.values[index] = value

    def __len__(self) -> int:
        return int(self.values.shape[0])

    def __repr__(self) -> str:
        return f"RealVectorState({np.array2string(self.values, precision=6)})"


class RealVectorStateSpace(StateSpace):
    """
    Euclidean space of a fixed dimension.

    Parameters
    ----------
    dimension : int
        Number of coordinates (>= 1).
    bounds : sequence of (float, float), optional
        Per-axis ``(lower, upper)`` limits with ``lower < upper``.
    name : str, optional
    segment_length : float, optional

    Raises
    ------
    InvalidConfigurationError
        For a non-positive dimension, a bounds list of the wrong length, or
        an axis whose lower limit is not below its upper limit.
    """

    state_type = RealVectorState

    def __init__(self, dimension: int,
                 bounds: Optional[Sequence[Tuple[float, float]]] = None,
                 name: Optional[str] = None,
                 segment_length: float = DEFAULT_SEGMENT_LENGTH) -> None:
        super().__init__(name=name, segment_length=segment_length)
        if int(dimension) != dimension or dimension < 1:
            raise InvalidConfigurationError(
                f"Real vector dimension must be a positive integer, got {dimension}"
            )
        self._dimension = int(dimension)
        self._lower: Optional[np.ndarray] = None
        self._upper: Optional[np.ndarray] = None
        if bounds is not None:
            self._set_bounds(bounds)

    def _set_bounds(self, bounds: Sequence[Tuple[float, float]]) -> None:
        arr = np.asarray(bounds, dtype=np.float64)
        if arr.shape != (self._dimension, 2):
            raise InvalidConfigurationError(
                f"Bounds must be {self._dimension} (lower, upper) pairs, "
                f"got shape {arr.shape}"
            )
        if not np.all(np.isfinite(arr)) or np.any(arr[:, 0] >= arr[:, 1]):
            raise InvalidConfigurationError(
                "Each bound must be finite with lower < upper, got "
                f"{arr.tolist()}"
            )
        self._lower = arr[:, 0].copy()
        self._upper = arr[:, 1].copy()

    # -- bounds ------------------------------------------------------------

    @property
    def bounds(self) -> Optional[Tuple[Tuple[float, float], ...]]:
        if self._lower is None:
            return None
        return tuple(zip(self._lower.tolist(), self._upper.tolist()))

    def satisfies_bounds(self, state: RealVectorState) -> bool:
        """True if every coordinate lies inside the bounds (always, if unbounded)."""
        self.check_state(state)
        if self._lower is None:
            return True
        return bool(np.all(state.values >= self._lower) and np.all(state.values <= self._upper))

    def enforce_bounds(self, state: RealVectorState) -> None:
        """Clip ``state`` into the bounds in place."""
        self.check_state(state)
        if self._lower is not None:
            np.clip(state.values, self._lower, self._upper, out=state.values)

    # -- state management --------------------------------------------------

    def create_state(self, values: Optional[Sequence[float]] = None) -> RealVectorState:
        """
        Return a new state, zero-filled unless ``values`` are given.

        Raises
        ------
        DimensionMismatchError
            If ``values`` does not have ``dimension`` entries.
        """
        state = RealVectorState(self)
        if values is not None:
            arr = np.asarray(values, dtype=np.float64).reshape(-1)
            if arr.shape != (self._dimension,):
                raise DimensionMismatchError(
                    f"Expected {self._dimension} values for '{self.name}', got {arr.size}"
                )
            state.values[:] = arr
        return state

    def copy_state(self, state: RealVectorState) -> RealVectorState:
        self.check_state(state)
        return RealVectorState(self, state.values)

    def equal_states(self, a: RealVectorState, b: RealVectorState,
                     tolerance: float = STATE_EQUALITY_TOLERANCE) -> bool:
        self.check_state(a)
        self.check_state(b)
        return bool(np.allclose(a.values, b.values, rtol=0.0, atol=tolerance))

    def _validate_state(self, state: RealVectorState) -> None:
        if state.values.shape != (self._dimension,):
            raise DimensionMismatchError(
                f"State has shape {state.values.shape}, space '{self.name}' "
                f"expects ({self._dimension},)"
            )

    # -- metric --------------------------------------------------------------

    @property
    def dimension(self) -> int:
        return self._dimension

    def maximum_extent(self) -> float:
        """Diagonal of the bounds box, or infinity when unbounded."""
        if self._lower is None:
            return float("inf")
        return float(np.linalg.norm(self._upper - self._lower))

    def distance(self, a: RealVectorState, b: RealVectorState) -> float:
        self.check_state(a)
        self.check_state(b)
        return float(np.linalg.norm(a.values - b.values))

    def interpolate_into(self, from_: RealVectorState, to: RealVectorState,
                         t: float, result: RealVectorState) -> None:
        self.check_state(from_)
        self.check_state(to)
        self.check_state(result)
        t = clamp_fraction(t)
        # (1 - t) * a + t * b hits both endpoints exactly
        result.values[:] = (1.0 - t) * from_.values + t * to.values

    def structure_key(self):
        return ("real_vector", self._dimension, self.bounds)
