"""
vector3 - 3D vector arithmetic for graphics and physics code

A small value type with:
- Algebra (add, scale, dot/cross products, Hadamard product)
- Projection, rejection, reflection and refraction
- Axis rotations and affine matrix application
- Linear and barycentric interpolation
- Allocation-free in-place variants
"""

__version__ = "0.1.0"
__author__ = "vector3 Team"

from .vec3 import Vector3, Point3, SupportsXYZ
from .settings import (
    VectorSettings, get_settings, configure, reset_settings, settings_context
)
from .logging import (
    Vector3Error, Vector3ValueError, DegenerateAxisError,
    config_logging, set_up_simple_logging
)
