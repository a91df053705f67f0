"""
Vector3 class for 3D math operations.

The building block for graphics and physics code, used for:
- Points in 3D space
- Direction and displacement vectors
- Surface normals for reflection and refraction

All non-suffixed methods return a new Vector3. Methods ending in an
underscore (``add_``, ``scale_``, ...) mutate the receiver and return it,
which avoids allocations in tight loops. A vector handed to several owners
and then mutated in place changes for all of them, and nothing here guards
against concurrent mutation from multiple threads.
"""

from __future__ import annotations
import inspect
import itertools
import logging
import math
import numbers
from collections.abc import Mapping
from typing import Any, Callable, Optional, Protocol, Union, runtime_checkable
import numpy as np

from .logging import LOGGER_ID, DegenerateAxisError, Vector3ValueError
from .settings import get_settings

logger = logging.getLogger(f"{LOGGER_ID}.vec3")

_AXES = ('x', 'y', 'z')


@runtime_checkable
class SupportsXYZ(Protocol):
    """Anything exposing numeric ``x``, ``y`` and ``z`` attributes."""
    x: float
    y: float
    z: float


VectorLike = Union['Vector3', SupportsXYZ, Mapping, tuple, list, np.ndarray]


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not math.isnan(value)


def _coerce_component(value: Any, name: str) -> float:
    """Convert one construction input to float, honoring the strict setting."""
    if value is None:
        if get_settings().strict:
            raise Vector3ValueError(f"Missing Vector3 component {name!r}")
        logger.debug(f"Missing component {name!r}, defaulting to 0")
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        if get_settings().strict:
            raise Vector3ValueError(f"Vector3 component {name!r} is not a number: {value!r}")
        logger.debug(f"Non-numeric component {name!r}={value!r}, defaulting to 0")
        return 0.0


def _as_array(v: VectorLike) -> np.ndarray:
    """Return the components of a vector-like operand as a float64 array."""
    if isinstance(v, Vector3):
        return v._data
    if isinstance(v, Mapping):
        return np.array([v['x'], v['y'], v['z']], dtype=np.float64)
    if isinstance(v, SupportsXYZ):
        return np.array([v.x, v.y, v.z], dtype=np.float64)
    arr = np.asarray(v, dtype=np.float64)
    if arr.shape != (3,):
        raise Vector3ValueError(f"Expected 3 components, got shape {arr.shape}")
    return arr


def _affine_rows(matrix: Any) -> np.ndarray:
    """Read the first three rows of a row-major matrix into a 3x4 array.

    Rows with only three columns get a zero translation term. A wrapper
    exposing the matrix as attribute ``M`` or mapping key ``"M"`` is unwrapped.
    """
    if isinstance(matrix, Mapping):
        if 'M' not in matrix:
            raise Vector3ValueError("Matrix mapping has no 'M' entry")
        matrix = matrix['M']
    elif hasattr(matrix, 'M'):
        matrix = matrix.M

    try:
        rows = list(matrix)
    except TypeError:
        raise Vector3ValueError(f"Cannot read a matrix from: {matrix!r}")
    if len(rows) < 3:
        raise Vector3ValueError(f"Matrix must have at least 3 rows, got {len(rows)}")

    out = np.zeros((3, 4), dtype=np.float64)
    for i, row in enumerate(rows[:3]):
        try:
            values = [float(c) for c in list(row)[:4]]
        except (TypeError, ValueError):
            raise Vector3ValueError(f"Invalid matrix row {i}: {row!r}")
        if len(values) < 3:
            raise Vector3ValueError(
                f"Matrix row {i} must have at least 3 columns, got {len(values)}"
            )
        out[i, :len(values)] = values
    return out


def _accepts_single_argument(fn: Callable) -> bool:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # Builtins such as min/max expose no signature
        return False
    try:
        signature.bind(0.0)
    except TypeError:
        return False
    return True


class Vector3:
    """A 3D vector with pure and in-place arithmetic.

    Components are stored in a float64 numpy array. ``Vector3(x, y, z)``
    builds from numbers; use :meth:`from_array` for sequences and
    :meth:`from_object` for anything with x/y/z fields.
    """

    __slots__ = ('_data',)

    __hash__ = None  # mutable through the in-place methods
    __array_ufunc__ = None  # numpy defers to the reflected operators

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        if _is_number(x) and _is_number(y) and _is_number(z):
            self._data = np.array([x, y, z], dtype=np.float64)
            return
        if get_settings().strict:
            raise Vector3ValueError(f"Vector3 components must be numbers, got ({x!r}, {y!r}, {z!r})")
        if not isinstance(x, numbers.Real):
            logger.debug(
                f"Invalid components ({x!r}, {y!r}, {z!r}), using zero vector; "
                f"use Vector3.from_array or Vector3.from_object for sequences and records"
            )
        else:
            logger.debug(f"Invalid components ({x!r}, {y!r}, {z!r}), using zero vector")
        self._data = np.zeros(3, dtype=np.float64)

    @classmethod
    def _from_data(cls, data: np.ndarray) -> Vector3:
        """Wrap a float64 array without copying; the array must not be shared."""
        v = cls.__new__(cls)
        v._data = data
        return v

    @classmethod
    def from_array(cls, values) -> Vector3:
        """Create a Vector3 from the first three elements of a sequence.

        Missing or non-numeric elements become 0, unless strict construction
        is enabled in which case a Vector3ValueError is raised.
        """
        head = list(itertools.islice(iter(values), 3))
        head.extend([None] * (3 - len(head)))
        return cls._from_data(np.array(
            [_coerce_component(value, name) for value, name in zip(head, _AXES)],
            dtype=np.float64,
        ))

    @classmethod
    def from_object(cls, obj: Union[SupportsXYZ, Mapping]) -> Vector3:
        """Copy x, y and z from an object's attributes or a mapping's keys."""
        if isinstance(obj, Mapping):
            raw = [obj.get(name) for name in _AXES]
        else:
            raw = [getattr(obj, name, None) for name in _AXES]
        return cls._from_data(np.array(
            [_coerce_component(value, name) for value, name in zip(raw, _AXES)],
            dtype=np.float64,
        ))

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    @x.setter
    def x(self, value: float):
        self._data[0] = value

    @y.setter
    def y(self, value: float):
        self._data[1] = value

    @z.setter
    def z(self, value: float):
        self._data[2] = value

    def __repr__(self) -> str:
        return f"Vector3({self.x!r}, {self.y!r}, {self.z!r})"

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.equals(other)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __setitem__(self, index: int, value: float):
        self._data[index] = value

    def __iter__(self):
        return (float(c) for c in self._data)

    def __len__(self) -> int:
        return 3

    def __copy__(self) -> Vector3:
        return self.clone()

    # Operators. Scalars broadcast over all components; a Vector3 operand
    # works component-wise (so ``v * w`` is the Hadamard product).

    @staticmethod
    def _operand(other: Any) -> Optional[Union[np.ndarray, float]]:
        if isinstance(other, Vector3):
            return other._data
        if isinstance(other, numbers.Real):
            return float(other)
        return None

    def __neg__(self) -> Vector3:
        return self.neg()

    def __add__(self, other: Union[Vector3, float]) -> Vector3:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return Vector3._from_data(self._data + o)

    def __radd__(self, other: float) -> Vector3:
        return self.__add__(other)

    def __sub__(self, other: Union[Vector3, float]) -> Vector3:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return Vector3._from_data(self._data - o)

    def __rsub__(self, other: float) -> Vector3:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return Vector3._from_data(o - self._data)

    def __mul__(self, other: Union[Vector3, float]) -> Vector3:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return Vector3._from_data(self._data * o)

    def __rmul__(self, other: float) -> Vector3:
        return self.__mul__(other)

    def __truediv__(self, other: Union[Vector3, float]) -> Vector3:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return Vector3._from_data(self._data / o)

    def __iadd__(self, other: Union[Vector3, float]) -> Vector3:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        self._data += o
        return self

    def __isub__(self, other: Union[Vector3, float]) -> Vector3:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        self._data -= o
        return self

    def __imul__(self, other: Union[Vector3, float]) -> Vector3:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        self._data *= o
        return self

    def __itruediv__(self, other: Union[Vector3, float]) -> Vector3:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        self._data /= o
        return self

    # Algebra

    def add(self, v: VectorLike) -> Vector3:
        return Vector3._from_data(self._data + _as_array(v))

    def sub(self, v: VectorLike) -> Vector3:
        return Vector3._from_data(self._data - _as_array(v))

    def neg(self) -> Vector3:
        return Vector3._from_data(-self._data)

    def scale(self, scalar: float) -> Vector3:
        return Vector3._from_data(self._data * scalar)

    def prod(self, v: VectorLike) -> Vector3:
        """Hadamard (component-wise) product."""
        return Vector3._from_data(self._data * _as_array(v))

    def dot(self, v: VectorLike) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, _as_array(v)))

    def cross(self, v: VectorLike) -> Vector3:
        """Compute cross product with another vector."""
        return Vector3._from_data(np.cross(self._data, _as_array(v)))

    def norm(self) -> float:
        """Return the Euclidean length of the vector."""
        return float(np.linalg.norm(self._data))

    def norm2(self) -> float:
        """Return the squared length (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def distance(self, v: VectorLike) -> float:
        diff = self._data - _as_array(v)
        return math.sqrt(float(np.dot(diff, diff)))

    def normalize(self) -> Vector3:
        """Return a unit vector in the same direction.

        Zero vectors and vectors that already have unit length are returned
        as-is, so callers must not count on receiving a fresh instance.
        """
        l2 = self.norm2()
        if l2 == 0 or l2 == 1:
            return self
        return Vector3._from_data(self._data * (1.0 / math.sqrt(l2)))

    def lerp(self, v: VectorLike, t: float) -> Vector3:
        """Linear interpolation towards ``v``; ``t`` outside [0, 1] extrapolates."""
        return Vector3._from_data(self._data + t * (_as_array(v) - self._data))

    def equals(self, v: VectorLike) -> bool:
        """Compare component-wise within the configured epsilon."""
        if self is v:
            return True
        eps = get_settings().epsilon
        return bool(np.all(np.abs(self._data - _as_array(v)) < eps))

    def is_unit(self) -> bool:
        return abs(self.norm2() - 1.0) < get_settings().epsilon

    def to_array(self) -> np.ndarray:
        """Return the components as a numpy array (copy)."""
        return self._data.copy()

    def to_list(self) -> list:
        return [self.x, self.y, self.z]

    def clone(self) -> Vector3:
        return Vector3._from_data(self._data.copy())

    # Geometry

    def _projection_coefficient(self, axis: np.ndarray) -> float:
        """Return dot(self, axis) / dot(axis, axis), applying the zero-axis policy."""
        denom = np.dot(axis, axis)
        if denom == 0:
            if get_settings().zero_axis == 'raise':
                raise DegenerateAxisError("Cannot project onto a zero-length axis")
            logger.debug("Projection onto a zero-length axis, result is NaN")
        with np.errstate(divide='ignore', invalid='ignore'):
            return np.dot(self._data, axis) / denom

    def project_to(self, a: VectorLike) -> Vector3:
        """Orthogonal projection of this vector onto ``a``."""
        axis = _as_array(a)
        return Vector3._from_data(axis * self._projection_coefficient(axis))

    def reject_from(self, b: VectorLike) -> Vector3:
        """Orthogonal rejection: the part of this vector perpendicular to ``b``."""
        axis = _as_array(b)
        return Vector3._from_data(self._data - axis * self._projection_coefficient(axis))

    def reflect(self, b: VectorLike) -> Vector3:
        """Reflect this vector across the axis ``b`` (need not be unit length)."""
        axis = _as_array(b)
        p = axis * self._projection_coefficient(axis)
        return Vector3._from_data(2.0 * p - self._data)

    def refract(self, normal: VectorLike, eta: float) -> Optional[Vector3]:
        """Refract this unit vector through a surface with the given unit normal.

        Args:
            normal: Unit surface normal
            eta: Ratio of refractive indices (eta_in / eta_out)

        Returns:
            Refracted unit direction, or None on total internal reflection
        """
        n = _as_array(normal)
        c = float(np.dot(self._data, n))
        k = 1.0 - eta * eta * (1.0 - c * c)
        if k < 0:
            logger.debug(f"Total internal reflection (eta={eta}, cos={c})")
            return None
        t = eta * c + math.sqrt(k)
        return Vector3._from_data(eta * self._data - t * n)

    def scale_along_axis(self, axis: VectorLike, s: float) -> Vector3:
        """Scale only the component parallel to ``axis`` by ``s``."""
        a = _as_array(axis)
        p = a * self._projection_coefficient(a)
        return Vector3._from_data((self._data - p) + s * p)

    def rotate_x(self, angle: float) -> Vector3:
        """Rotate about the x axis by ``angle`` radians (right-handed)."""
        cos, sin = math.cos(angle), math.sin(angle)
        x, y, z = self._data
        return Vector3._from_data(np.array([x, y * cos - z * sin, z * cos + y * sin]))

    def rotate_y(self, angle: float) -> Vector3:
        cos, sin = math.cos(angle), math.sin(angle)
        x, y, z = self._data
        return Vector3._from_data(np.array([x * cos + z * sin, y, z * cos - x * sin]))

    def rotate_z(self, angle: float) -> Vector3:
        cos, sin = math.cos(angle), math.sin(angle)
        x, y, z = self._data
        return Vector3._from_data(np.array([x * cos - y * sin, y * cos + x * sin, z]))

    def apply_matrix(self, matrix: Any) -> Vector3:
        """Apply a row-major 3x3, 3x4 or 4x4 matrix.

        Column 3, when present, is the translation. The fourth row of a 4x4
        matrix is ignored and no perspective division is done, so only
        affine transforms are supported.

        Args:
            matrix: Nested sequence, numpy array, or a wrapper holding the
                matrix as attribute ``M`` or key ``"M"``

        Returns:
            The transformed vector

        Raises:
            Vector3ValueError: if the matrix has fewer than 3 rows or columns
        """
        m = _affine_rows(matrix)
        return Vector3._from_data(m[:, :3] @ self._data + m[:, 3])

    def apply(self, fn: Callable, v: Optional[VectorLike] = None) -> Vector3:
        """Apply ``fn`` component-wise to this vector and ``v``.

        ``fn(a, b)`` receives matching components, e.g. ``max`` or
        ``math.copysign``. When ``v`` is omitted the second operand is the
        zero vector; a function that can be called with one argument (``abs``,
        ``round``, ``math.floor``) is then called with the component alone.
        That includes functions whose second parameter has a default, which
        then runs with its own default rather than 0.
        """
        if v is None:
            if _accepts_single_argument(fn):
                values = [fn(a) for a in self]
            else:
                values = [fn(a, 0.0) for a in self]
        else:
            values = [fn(a, float(b)) for a, b in zip(self, _as_array(v))]
        return Vector3._from_data(np.array(values, dtype=np.float64))

    # In-place variants. These mutate and return ``self``; every other
    # holder of this instance sees the change.

    def set(self, v: VectorLike) -> Vector3:
        """Copy the components of ``v`` into this vector."""
        self._data[:] = _as_array(v)
        return self

    def add_(self, v: VectorLike) -> Vector3:
        self._data += _as_array(v)
        return self

    def sub_(self, v: VectorLike) -> Vector3:
        self._data -= _as_array(v)
        return self

    def neg_(self) -> Vector3:
        np.negative(self._data, out=self._data)
        return self

    def scale_(self, scalar: float) -> Vector3:
        self._data *= scalar
        return self

    def prod_(self, v: VectorLike) -> Vector3:
        self._data *= _as_array(v)
        return self

    def normalize_(self) -> Vector3:
        """Normalize in place; zero and unit vectors are left untouched."""
        l2 = self.norm2()
        if l2 == 0 or l2 == 1:
            return self
        self._data *= 1.0 / math.sqrt(l2)
        return self

    @staticmethod
    def random(rng: Optional[np.random.Generator] = None) -> Vector3:
        """Generate a vector with each component uniform in [0, 1).

        Args:
            rng: Optional numpy Generator; the global numpy RNG is used otherwise
        """
        source = np.random if rng is None else rng
        return Vector3._from_data(np.asarray(source.random(3), dtype=np.float64))

    @staticmethod
    def from_points(a: VectorLike, b: VectorLike) -> Vector3:
        """Displacement vector from point ``a`` to point ``b``."""
        return Vector3._from_data(_as_array(b) - _as_array(a))

    @staticmethod
    def from_barycentric(a: VectorLike, b: VectorLike, c: VectorLike,
                         u: float, v: float) -> Vector3:
        """Cartesian point for barycentric weights (u, v) on triangle abc.

        The implicit third weight is ``1 - u - v`` on vertex ``a``.
        """
        origin = _as_array(a)
        return Vector3._from_data(
            origin + (_as_array(b) - origin) * u + (_as_array(c) - origin) * v
        )


# Convenience type alias
Point3 = Vector3
