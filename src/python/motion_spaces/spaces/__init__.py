"""
===============================================================================
MOTION SPACES - Spaces Package
===============================================================================
Modules:
    base         : State / StateSpace contract and segment counting
    real_vector  : Euclidean R^n
    so2          : Planar rotations
    so3          : 3-D rotations (unit quaternions)
    compound     : Weighted product of heterogeneous child spaces
    motion       : Discrete motion validation along interpolated paths
===============================================================================
"""
