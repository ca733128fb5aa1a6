"""
===============================================================================
MOTION SPACES - Core Package
===============================================================================
Modules:
    constants   : Angle constants, tolerances and configuration defaults
    errors      : Error taxonomy shared by every space
    quaternion  : Unit quaternion arithmetic backing SO(3)
===============================================================================
"""
