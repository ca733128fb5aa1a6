"""
Error taxonomy for state-space configuration and metric operations.

Configuration problems derive from ``ValueError`` and cross-space misuse
from ``TypeError`` so callers that already catch the builtin types keep
working.
"""

from __future__ import annotations


class StateSpaceError(Exception):
    """Root of every error raised by the package."""


class InvalidConfigurationError(StateSpaceError, ValueError):
    """A space was configured with an unusable value.

    Raised for non-positive segment lengths, inverted bounds, non-positive
    component weights and malformed configuration documents.
    """


class EmptyCompositionError(InvalidConfigurationError):
    """A compound space was constructed without any child spaces."""


class DimensionMismatchError(StateSpaceError, ValueError):
    """A state's shape does not line up with the space operating on it."""


class CrossSpaceStateError(StateSpaceError, TypeError):
    """A state produced by one space was handed to an unrelated space."""
