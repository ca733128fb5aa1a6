"""
===============================================================================
MOTION SPACES - Compound (Product) State Space
===============================================================================
Cartesian product of an ordered list of heterogeneous child spaces, e.g. a
mobile manipulator as R^2 x SO(2) x R^7. A :class:`CompoundState` holds one
child state per child space, index-aligned with the space's component list.

Aggregation rules
-----------------
distance               weighted sum of child distances
                           d(a, b) = sum_i w_i * d_i(a_i, b_i)
interpolate            child-wise, all children sharing the same t
count_segments_between max over children of their own segment counts.
                       All children advance together under one t, so the
                       path needs as many steps as its most demanding
                       child.

The weighted sum of metrics is itself a metric: non-negativity, symmetry and
the triangle inequality carry over term by term for positive weights.

contains vs covers
------------------
contains(S)  S is structurally this space or one of its descendants.
covers(S)    restricting this space to S's coordinates reproduces S's metric
             up to a positive scale. Beyond ``contains`` this admits a
             compound S whose components map one-to-one onto distinct
             children, in any order, with proportional weights. The
             assignment is solved with scipy's linear_sum_assignment.
===============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
from scipy.optimize import linear_sum_assignment

from motion_spaces.core.constants import DEFAULT_COMPONENT_WEIGHT, STATE_EQUALITY_TOLERANCE
from motion_spaces.core.errors import (
    CrossSpaceStateError,
    DimensionMismatchError,
    EmptyCompositionError,
    InvalidConfigurationError,
)
from motion_spaces.spaces.base import State, StateSpace, validate_segment_length

logger = logging.getLogger(__name__)

WeightSpec = Union[Mapping[int, float], Sequence[float], None]


# =============================================================================
# COMPOUND STATE
# =============================================================================

class CompoundState(State):
    """
    Ordered collection of child states, one per component of the owning
    :class:`CompoundStateSpace`.

    Attributes
    ----------
    values : list of State
        ``values[i]`` belongs to ``space.components[i]``.
    """

    def __init__(self, space: 'CompoundStateSpace', values: Sequence[State]) -> None:
        super().__init__(space)
        self.values: List[State] = list(values)

    def __getitem__(self, index: int) -> State:
        return self.values[index]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[State]:
        return iter(self.values)

    def __repr__(self) -> str:
        inner = ", ".join(repr(v) for v in self.values)
        return f"CompoundState([{inner}])"


# =============================================================================
# COMPOUND STATE SPACE
# =============================================================================

class CompoundStateSpace(StateSpace):
    """
    Product of child state spaces with a weighted-sum metric.

    Parameters
    ----------
    components : sequence of StateSpace
        Child spaces in the order their states appear in a
        :class:`CompoundState`. The order is fixed for the space's lifetime.
    weights : mapping or sequence of float, optional
        Per-child distance multipliers, either as a full sequence or as a
        ``{index: weight}`` mapping; unspecified children get 1.0. Use them
        to balance heterogeneous units such as metres against radians.
    name : str, optional
    segment_length : float, optional
        When given, applied to every child as well (see
        :meth:`set_segment_length`). When omitted the children keep their
        own resolutions and the compound reports the finest of them.

    Raises
    ------
    EmptyCompositionError
        If ``components`` is empty.
    InvalidConfigurationError
        If a component is not a StateSpace, or a weight is non-positive,
        non-finite or refers to a missing child.
    """

    state_type = CompoundState

    def __init__(self, components: Sequence[StateSpace],
                 weights: WeightSpec = None,
                 name: Optional[str] = None,
                 segment_length: Optional[float] = None) -> None:
        components = tuple(components)
        if not components:
            raise EmptyCompositionError("A compound state space needs at least one component")
        for index, component in enumerate(components):
            if not isinstance(component, StateSpace):
                raise InvalidConfigurationError(
                    f"Component {index} is a {type(component).__name__}, not a StateSpace"
                )
        self._components: Tuple[StateSpace, ...] = components
        self._weights: List[float] = self._resolve_weights(weights)

        super().__init__(name=name, segment_length=self.get_segment_length())
        if segment_length is not None:
            self.set_segment_length(segment_length)

    def _resolve_weights(self, weights: WeightSpec) -> List[float]:
        n = len(self._components)
        resolved = [DEFAULT_COMPONENT_WEIGHT] * n
        if weights is None:
            return resolved
        if isinstance(weights, Mapping):
            items = list(weights.items())
        else:
            weights = list(weights)
            if len(weights) != n:
                raise InvalidConfigurationError(
                    f"Got {len(weights)} weights for {n} components"
                )
            items = list(enumerate(weights))
        for index, weight in items:
            if not isinstance(index, (int, np.integer)) or not 0 <= index < n:
                raise InvalidConfigurationError(
                    f"Weight index {index!r} does not name one of the {n} components"
                )
            resolved[int(index)] = _validate_weight(weight)
        return resolved

    # =========================================================================
    # COMPONENT ACCESS
    # =========================================================================

    @property
    def components(self) -> Tuple[StateSpace, ...]:
        return self._components

    @property
    def component_count(self) -> int:
        return len(self._components)

    def component(self, index: int) -> StateSpace:
        return self._components[index]

    @property
    def weights(self) -> Tuple[float, ...]:
        return tuple(self._weights)

    def get_weight(self, index: int) -> float:
        return self._weights[index]

    def set_weight(self, index: int, weight: float) -> None:
        """
        Change the distance multiplier of child ``index``. Configuration-time
        only; not safe while other threads measure distances.
        """
        if not 0 <= index < len(self._components):
            raise InvalidConfigurationError(
                f"Weight index {index} does not name one of the "
                f"{len(self._components)} components"
            )
        self._weights[index] = _validate_weight(weight)
        logger.debug("Weight %d of %s set to %g", index, self.name, self._weights[index])

    def get_segment_length(self) -> float:
        """
        Finest resolution among the children.

        Segment counts of a compound are taken from its children, so the
        value is read from them on every call and follows later changes to
        any child.
        """
        return min(c.get_segment_length() for c in self._components)

    def set_segment_length(self, length: float) -> None:
        """Set the resolution of every child, recursively."""
        length = validate_segment_length(length)
        for component in self._components:
            component.set_segment_length(length)
        logger.debug("Segment length of %s set to %g", self.name, length)

    # =========================================================================
    # STATE MANAGEMENT
    # =========================================================================

    def create_state(self) -> CompoundState:
        return CompoundState(self, [c.create_state() for c in self._components])

    def copy_state(self, state: CompoundState) -> CompoundState:
        self.check_state(state)
        return CompoundState(
            self, [c.copy_state(v) for c, v in zip(self._components, state.values)]
        )

    def equal_states(self, a: CompoundState, b: CompoundState,
                     tolerance: float = STATE_EQUALITY_TOLERANCE) -> bool:
        self.check_state(a)
        self.check_state(b)
        return all(
            c.equal_states(x, y, tolerance)
            for c, x, y in zip(self._components, a.values, b.values)
        )

    def check_state(self, state: Any) -> None:
        """
        Validate a compound state against this space, recursively.

        Raises
        ------
        CrossSpaceStateError
            If ``state`` is not a CompoundState, or its children line up but
            it was made by a compound with a different metric.
        DimensionMismatchError
            If its child count differs from the component count or a child
            state does not belong to the component at the same index.
        """
        if not isinstance(state, CompoundState):
            raise CrossSpaceStateError(
                f"Space '{self.name}' expects a CompoundState, got {type(state).__name__}"
            )
        if len(state.values) != len(self._components):
            raise DimensionMismatchError(
                f"State has {len(state.values)} components, space '{self.name}' "
                f"has {len(self._components)}"
            )
        for index, (component, value) in enumerate(zip(self._components, state.values)):
            if not component.owns(value):
                raise DimensionMismatchError(
                    f"Component {index} of the state does not belong to "
                    f"'{component.name}'"
                )
            component.check_state(value)
        if not self.owns(state):
            owner_name = getattr(state.space, "name", type(state.space).__name__)
            raise CrossSpaceStateError(
                f"State from '{owner_name}' cannot be used with space '{self.name}'"
            )

    # =========================================================================
    # METRIC AND INTERPOLATION
    # =========================================================================

    @property
    def dimension(self) -> int:
        return sum(c.dimension for c in self._components)

    def maximum_extent(self) -> float:
        return sum(w * c.maximum_extent() for c, w in zip(self._components, self._weights))

    def distance(self, a: CompoundState, b: CompoundState) -> float:
        self.check_state(a)
        self.check_state(b)
        total = 0.0
        for component, weight, x, y in zip(self._components, self._weights, a.values, b.values):
            total += weight * component.distance(x, y)
        return total

    def interpolate_into(self, from_: CompoundState, to: CompoundState, t: float,
                         result: CompoundState) -> None:
        """
        Child-wise interpolation into ``result``.

        All three states are validated before any child is written, so a
        mismatched ``result`` is left exactly as it was.
        """
        self.check_state(from_)
        self.check_state(to)
        self.check_state(result)
        for component, x, y, out in zip(self._components, from_.values, to.values, result.values):
            component.interpolate_into(x, y, t, out)

    def count_segments_between(self, a: CompoundState, b: CompoundState) -> int:
        """Largest segment count any child needs for its part of the motion."""
        self.check_state(a)
        self.check_state(b)
        return max(
            c.count_segments_between(x, y)
            for c, x, y in zip(self._components, a.values, b.values)
        )

    # =========================================================================
    # STRUCTURAL RELATIONSHIPS
    # =========================================================================

    def structure_key(self):
        return (
            "compound",
            tuple(c.structure_key() for c in self._components),
            tuple(self._weights),
        )

    def contains(self, space: Any) -> bool:
        if self.is_structurally_equal(space):
            return True
        return any(c.contains(space) for c in self._components)

    def covers(self, space: Any) -> bool:
        if not isinstance(space, StateSpace):
            return False
        if self.is_structurally_equal(space):
            return True
        if any(c.covers(space) for c in self._components):
            return True
        if isinstance(space, CompoundStateSpace):
            return self._covers_by_assignment(space)
        return False

    def _covers_by_assignment(self, target: 'CompoundStateSpace') -> bool:
        """
        True if each of ``target``'s components can be matched to a distinct
        child that covers it, with the target's weights a common positive
        multiple of the matched children's weights.
        """
        n_target = target.component_count
        n_own = len(self._components)
        if n_target > n_own:
            return False

        covering = np.array([
            [own.covers(wanted) for own in self._components]
            for wanted in target.components
        ], dtype=bool)
        if not covering.any(axis=1).all():
            return False

        # candidate scales fixed by the first target component
        scales = {
            target.get_weight(0) / self._weights[j]
            for j in np.flatnonzero(covering[0])
        }
        target_w = np.array(target.weights)[:, None]
        own_w = np.array(self._weights)[None, :]
        for scale in scales:
            proportional = np.isclose(target_w, scale * own_w, rtol=1e-9, atol=0.0)
            cost = np.where(covering & proportional, 0.0, 1.0)
            rows, cols = linear_sum_assignment(cost)
            if cost[rows, cols].sum() == 0.0:
                return True
        return False

    def __repr__(self) -> str:
        inner = ", ".join(repr(c) for c in self._components)
        return f"CompoundStateSpace(name={self.name!r}, components=[{inner}], weights={self._weights})"


def _validate_weight(weight: float) -> float:
    try:
        weight = float(weight)
    except (TypeError, ValueError) as exc:
        raise InvalidConfigurationError(f"Weight must be a number, got {weight!r}") from exc
    if not np.isfinite(weight) or weight <= 0.0:
        raise InvalidConfigurationError(f"Weight must be positive and finite, got {weight}")
    return weight
