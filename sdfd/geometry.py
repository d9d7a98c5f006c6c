"""2-D vectors and the primitive shapes of an sdfd scene.

A primitive is one of three immutable value types, :class:`Constant`,
:class:`Plane` and :class:`Circle`, each tagged with the
:class:`PrimitiveKind` used on the wire.  :class:`Ellipse` is not a
primitive: it is what a circle becomes under a non-uniform scale.

All scalar fields are stored as 32-bit floats (rounded on construction) so
a scene compares equal to itself after a serialization round trip.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import ClassVar, Iterator, Union

import numpy as np
import numpy.typing as npt

_Array = npt.NDArray[np.floating]


def f32(x: float) -> float:
    """Round *x* to the nearest 32-bit float."""
    return float(np.float32(x))


# ===========================================================================
# Vector2
# ===========================================================================

@dataclass(frozen=True)
class Vector2:
    """Pair of 32-bit floats supporting componentwise arithmetic."""

    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", f32(self.x))
        object.__setattr__(self, "y", f32(self.y))

    def _binary(self, other, op) -> Vector2:
        if isinstance(other, Vector2):
            return Vector2(op(self.x, other.x), op(self.y, other.y))
        return Vector2(op(self.x, other), op(self.y, other))

    def __add__(self, other: Vector2 | float) -> Vector2:
        return self._binary(other, lambda a, b: a + b)

    def __sub__(self, other: Vector2 | float) -> Vector2:
        return self._binary(other, lambda a, b: a - b)

    def __mul__(self, other: Vector2 | float) -> Vector2:
        return self._binary(other, lambda a, b: a * b)

    def __truediv__(self, other: Vector2 | float) -> Vector2:
        return self._binary(other, lambda a, b: a / b)

    __rmul__ = __mul__

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __abs__(self) -> Vector2:
        return Vector2(abs(self.x), abs(self.y))

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def yx(self) -> Vector2:
        return Vector2(self.y, self.x)

    def as_array(self) -> _Array:
        """Return ``(x, y)`` as a float64 array of shape ``(2,)``."""
        return np.array([self.x, self.y], dtype=float)


def as_vector2(v) -> Vector2:
    """Coerce a ``Vector2`` or any 2-sequence to :class:`Vector2`."""
    if isinstance(v, Vector2):
        return v
    x, y = v
    return Vector2(x, y)


def dot(a: Vector2, b: Vector2) -> float:
    return a.x * b.x + a.y * b.y


def length(a: Vector2) -> float:
    return math.sqrt(a.x * a.x + a.y * a.y)


def perp(a: Vector2) -> Vector2:
    """Rotate *a* by 90 degrees counter-clockwise."""
    return Vector2(-a.y, a.x)


IDENTITY_SCALE = Vector2(1.0, 1.0)


# ===========================================================================
# Primitive kinds
# ===========================================================================

class PrimitiveKind(enum.IntEnum):
    """Wire tag of a primitive record."""

    FLOAT1 = 0
    PLANE = 4
    CIRCLE = 5


# ===========================================================================
# Primitive shapes
# ===========================================================================

@dataclass(frozen=True)
class Constant:
    """Field equal to *value* everywhere."""

    kind: ClassVar[PrimitiveKind] = PrimitiveKind.FLOAT1

    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", f32(self.value))


@dataclass(frozen=True)
class Plane:
    """Half-plane boundary: distance at *p* is ``dot(normal, p) - offset``.

    Walking along the normal increases the distance.  Distances are exact
    only for a unit normal.
    """

    kind: ClassVar[PrimitiveKind] = PrimitiveKind.PLANE

    normal: Vector2
    offset: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "normal", as_vector2(self.normal))
        object.__setattr__(self, "offset", f32(self.offset))


@dataclass(frozen=True)
class Circle:
    """Circle with *center* and *radius*."""

    kind: ClassVar[PrimitiveKind] = PrimitiveKind.CIRCLE

    center: Vector2
    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", as_vector2(self.center))
        object.__setattr__(self, "radius", f32(self.radius))


@dataclass(frozen=True)
class Ellipse:
    """Axis-aligned ellipse with *center* and per-axis *radius*."""

    center: Vector2
    radius: Vector2

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", as_vector2(self.center))
        object.__setattr__(self, "radius", as_vector2(self.radius))


Primitive = Union[Constant, Plane, Circle]

PRIMITIVE_TYPES = (Constant, Plane, Circle)


# ===========================================================================
# Plane constructors
# ===========================================================================

def plane_from_points(a, b) -> Plane:
    """Plane through *a* and *b*.

    Facing from *a* towards *b*, the solid side is on the right and the
    empty side on the left.  The normal has unit length.
    """
    a = as_vector2(a)
    b = as_vector2(b)
    d = b - a
    ld = length(d)
    if ld == 0.0:
        raise ValueError("plane_from_points needs two distinct points")
    normal = perp(d / ld)
    return Plane(normal, dot(a, normal))


def plane_from_point_and_normal(point, normal) -> Plane:
    """Plane through *point*; moving along *normal* leaves the solid."""
    point = as_vector2(point)
    normal = as_vector2(normal)
    return Plane(normal, dot(point, normal))


def plane_from_point_and_angle(point, angle: float) -> Plane:
    """Plane through *point* with normal ``(cos(angle), sin(angle))``."""
    return plane_from_point_and_normal(point, Vector2(math.cos(angle), math.sin(angle)))


def plane_from_angle_and_offset(angle: float, offset: float) -> Plane:
    """Plane with normal ``(cos(angle), sin(angle))`` moved by *offset* along it."""
    return Plane(Vector2(math.cos(angle), math.sin(angle)), offset)
