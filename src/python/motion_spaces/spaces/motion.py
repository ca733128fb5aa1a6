"""
===============================================================================
MOTION SPACES - Discrete Motion Validation
===============================================================================
Turns a space's segment count into a collision-checking policy. A motion
from ``a`` to ``b`` is split into ``n = count_segments_between(a, b)``
segments and the state at every ``t = i / n`` is handed to a caller-supplied
validity predicate (typically a collision checker).

check_motion visits the interior points in bisection order (middle first,
then the middles of each half, ...). Obstacles tend to occupy a contiguous
stretch of the path, so this ordering hits them after fewer checks than a
linear sweep. last_valid sweeps linearly because it needs the first failure
as seen from ``a``.
===============================================================================
"""

from __future__ import annotations

from collections import deque
from typing import Callable, Deque, Tuple

from motion_spaces.spaces.base import State, StateSpace

StateValidityChecker = Callable[[State], bool]


class DiscreteMotionValidator:
    """
    Checks straight-line motions of a state space at its segment resolution.

    Parameters
    ----------
    space : StateSpace
        Space whose interpolation and segment count define the path.
    is_state_valid : callable
        ``is_state_valid(state) -> bool``. Must not keep a reference to the
        state it is given: the validator reuses one scratch state per call.

    Attributes
    ----------
    valid_motions : int
        Number of motions found valid so far.
    invalid_motions : int
        Number of motions found invalid so far.
    """

    def __init__(self, space: StateSpace, is_state_valid: StateValidityChecker) -> None:
        self._space = space
        self._is_state_valid = is_state_valid
        self.valid_motions = 0
        self.invalid_motions = 0

    @property
    def space(self) -> StateSpace:
        return self._space

    def check_motion(self, a: State, b: State) -> bool:
        """
        True if every discretization point of ``a`` -> ``b`` is valid.

        ``a`` is assumed valid (it is normally already in the planner's
        tree); ``b`` is checked first, then the interior points.
        """
        if not self._is_state_valid(b):
            self.invalid_motions += 1
            return False

        n = self._space.count_segments_between(a, b)
        if n > 1:
            scratch = self._space.create_state()
            pending: Deque[Tuple[int, int]] = deque([(1, n - 1)])
            while pending:
                lo, hi = pending.popleft()
                if lo > hi:
                    continue
                mid = (lo + hi) // 2
                self._space.interpolate_into(a, b, mid / n, scratch)
                if not self._is_state_valid(scratch):
                    self.invalid_motions += 1
                    return False
                pending.append((lo, mid - 1))
                pending.append((mid + 1, hi))

        self.valid_motions += 1
        return True

    def last_valid(self, a: State, b: State) -> Tuple[bool, State, float]:
        """
        Walk ``a`` -> ``b`` from ``a`` and stop at the first invalid point.

        Returns
        -------
        (bool, State, float)
            Whether the whole motion is valid, the last valid state reached
            (a copy, equal to ``b`` on success) and its fraction along the
            motion. If the first point after ``a`` already fails, the state is
            a copy of ``a`` at fraction 0.
        """
        n = max(self._space.count_segments_between(a, b), 1)
        last = self._space.copy_state(a)
        last_t = 0.0
        scratch = self._space.create_state()
        for i in range(1, n + 1):
            t = i / n
            self._space.interpolate_into(a, b, t, scratch)
            if not self._is_state_valid(scratch):
                self.invalid_motions += 1
                return False, last, last_t
            last, scratch = scratch, last
            last_t = t

        self.valid_motions += 1
        return True, last, last_t
