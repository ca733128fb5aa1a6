"""
===============================================================================
MOTION SPACES - Configuration Loading
===============================================================================
Builds state spaces from configuration dictionaries, typically loaded from
YAML, so a planner setup can describe its robot's configuration space in a
file instead of code.

Format
------
    space:
        type: compound            # real_vector | so2 | so3 | compound
        name: mobile_base
        segment_length: 0.05
        weights: [1.0, 0.5]       # or {1: 0.5}
        components:
            - type: real_vector
              dimension: 2
              bounds: [[-10.0, 10.0], [-10.0, 10.0]]
            - type: so2

The top-level ``space`` key is optional. Missing keys fall back to the
package defaults. Unknown types or malformed entries raise
InvalidConfigurationError.

Usage
-----
    space = load_space("config/example_spaces.yaml")
===============================================================================
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Union

import yaml

from motion_spaces.core.constants import (
    DEFAULT_SEGMENT_LENGTH,
    SPACE_TYPE_COMPOUND,
    SPACE_TYPE_REAL_VECTOR,
    SPACE_TYPE_SO2,
    SPACE_TYPE_SO3,
)
from motion_spaces.core.errors import InvalidConfigurationError
from motion_spaces.spaces.base import StateSpace
from motion_spaces.spaces.compound import CompoundStateSpace
from motion_spaces.spaces.real_vector import RealVectorStateSpace
from motion_spaces.spaces.so2 import SO2StateSpace
from motion_spaces.spaces.so3 import SO3StateSpace

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


# =============================================================================
# BUILDERS
# =============================================================================

def _build_real_vector(cfg: Dict[str, Any]) -> StateSpace:
    bounds = cfg.get("bounds")
    default_dimension = len(bounds) if bounds else 1
    try:
        dimension = int(cfg.get("dimension", default_dimension))
    except (TypeError, ValueError) as exc:
        raise InvalidConfigurationError(
            f"real_vector dimension must be an integer, got {cfg.get('dimension')!r}"
        ) from exc
    return RealVectorStateSpace(
        dimension,
        bounds=bounds,
        name=cfg.get("name"),
        segment_length=cfg.get("segment_length", DEFAULT_SEGMENT_LENGTH),
    )


def _build_so2(cfg: Dict[str, Any]) -> StateSpace:
    return SO2StateSpace(
        name=cfg.get("name"),
        segment_length=cfg.get("segment_length", DEFAULT_SEGMENT_LENGTH),
    )


def _build_so3(cfg: Dict[str, Any]) -> StateSpace:
    return SO3StateSpace(
        name=cfg.get("name"),
        segment_length=cfg.get("segment_length", DEFAULT_SEGMENT_LENGTH),
    )


def _build_compound(cfg: Dict[str, Any]) -> StateSpace:
    components_cfg = cfg.get("components", [])
    if not isinstance(components_cfg, list):
        raise InvalidConfigurationError("compound 'components' must be a list")
    components = [build_space(child) for child in components_cfg]
    return CompoundStateSpace(
        components,
        weights=cfg.get("weights"),
        name=cfg.get("name"),
        segment_length=cfg.get("segment_length"),
    )


_BUILDERS: Dict[str, Callable[[Dict[str, Any]], StateSpace]] = {
    SPACE_TYPE_REAL_VECTOR: _build_real_vector,
    SPACE_TYPE_SO2: _build_so2,
    SPACE_TYPE_SO3: _build_so3,
    SPACE_TYPE_COMPOUND: _build_compound,
}


def build_space(config: Dict[str, Any]) -> StateSpace:
    """
    Construct a state space from a configuration dictionary.

    Parameters
    ----------
    config : dict
        Space description (see module docstring); may be nested under a
        top-level ``space`` key.

    Returns
    -------
    StateSpace

    Raises
    ------
    InvalidConfigurationError
        If the description is not a mapping, names an unknown type, or
        carries values the space constructors reject.
    """
    if not isinstance(config, dict):
        raise InvalidConfigurationError(
            f"Space configuration must be a mapping, got {type(config).__name__}"
        )
    cfg = config.get("space", config)
    if not isinstance(cfg, dict):
        raise InvalidConfigurationError("'space' entry must be a mapping")

    space_type = str(cfg.get("type", "")).strip().lower()
    builder = _BUILDERS.get(space_type)
    if builder is None:
        raise InvalidConfigurationError(
            f"Unknown space type {cfg.get('type')!r}; expected one of "
            f"{sorted(_BUILDERS)}"
        )
    space = builder(cfg)
    logger.debug("Built %s space '%s' (dimension %d)", space_type, space.name, space.dimension)
    return space


# =============================================================================
# SERIALIZATION
# =============================================================================

def space_to_config(space: StateSpace) -> Dict[str, Any]:
    """
    Describe ``space`` as a configuration dictionary accepted by
    :func:`build_space`.

    Raises
    ------
    InvalidConfigurationError
        If the space is not one of the built-in types.
    """
    if isinstance(space, CompoundStateSpace):
        cfg = {
            "type": SPACE_TYPE_COMPOUND,
            "name": space.name,
            "weights": list(space.weights),
            "components": [space_to_config(c) for c in space.components],
        }
        # a compound segment length is pushed down to every child on build,
        # so only emit it when the children already agree with it
        if all(c.segment_length == space.segment_length for c in space.components):
            cfg["segment_length"] = space.segment_length
        return cfg
    if isinstance(space, RealVectorStateSpace):
        cfg: Dict[str, Any] = {
            "type": SPACE_TYPE_REAL_VECTOR,
            "name": space.name,
            "segment_length": space.segment_length,
            "dimension": space.dimension,
        }
        if space.bounds is not None:
            cfg["bounds"] = [list(b) for b in space.bounds]
        return cfg
    if isinstance(space, SO2StateSpace):
        return {"type": SPACE_TYPE_SO2, "name": space.name,
                "segment_length": space.segment_length}
    if isinstance(space, SO3StateSpace):
        return {"type": SPACE_TYPE_SO3, "name": space.name,
                "segment_length": space.segment_length}
    raise InvalidConfigurationError(
        f"No configuration form for {type(space).__name__}"
    )


# =============================================================================
# FILE I/O
# =============================================================================

def load_space_config(config_path: PathLike) -> Dict[str, Any]:
    """
    Read a YAML space description.

    Raises
    ------
    InvalidConfigurationError
        If the file does not hold a YAML mapping.
    """
    logger.info("Loading space configuration from: %s", config_path)
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)
    if not isinstance(config, dict):
        raise InvalidConfigurationError(
            f"{config_path} does not contain a space configuration mapping"
        )
    return config


def load_space(config_path: PathLike) -> StateSpace:
    """Read ``config_path`` and build the space it describes."""
    space = build_space(load_space_config(config_path))
    logger.info("Space '%s' ready: dimension %d, segment length %g",
                space.name, space.dimension, space.segment_length)
    return space


def save_space_config(space: StateSpace, config_path: PathLike) -> None:
    """Write ``space`` to ``config_path`` as YAML under a ``space`` key."""
    with open(config_path, 'w') as f:
        yaml.safe_dump({"space": space_to_config(space)}, f, sort_keys=False)
    logger.info("Saved space '%s' to %s", space.name, config_path)
