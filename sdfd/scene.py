"""Operation DAG, objects and scenes.

An :class:`Object` owns a list of primitives and an ordered list of
:class:`Operation` steps.  Each operation combines up to two operands named
by an :class:`ArgumentIndex`: a primitive of the object, a primitive shared
by the whole :class:`Scene`, or the result of an earlier operation.  The
last operation's result is the object's field value.

Example::

    from sdfd import Scene, Circle, plane_from_point_and_normal

    scene = Scene()
    obj   = scene.add_object()
    disk  = obj.add_primitive(Circle((0.0, 0.0), 1.0))
    half  = obj.add_primitive(plane_from_point_and_normal((0, 0), (1, 0)))
    obj.intersect(disk, half)          # left half of the disk
    scene.evaluate(0, (-0.5, 0.0))     # -0.5
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .geometry import PRIMITIVE_TYPES, Primitive, Vector2, as_vector2

# Argument words carry 2 tag bits, leaving 30 bits of index.
MAX_ARGUMENT_VALUE = (1 << 30) - 1


class ArgumentKind(enum.IntEnum):
    """Where an operation operand comes from."""

    OBJECT_PRIMITIVE = 0
    OBJECT_OPERATION = 1
    SCENE_PRIMITIVE = 2


@dataclass(frozen=True)
class ArgumentIndex:
    """Tagged reference to an operand."""

    kind: ArgumentKind
    value: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ArgumentKind(self.kind))
        if not 0 <= self.value <= MAX_ARGUMENT_VALUE:
            raise ValueError(
                f"argument index {self.value} outside [0, {MAX_ARGUMENT_VALUE}]"
            )


def object_primitive_index(i: int) -> ArgumentIndex:
    return ArgumentIndex(ArgumentKind.OBJECT_PRIMITIVE, i)


def object_operation_index(i: int) -> ArgumentIndex:
    return ArgumentIndex(ArgumentKind.OBJECT_OPERATION, i)


def scene_primitive_index(i: int) -> ArgumentIndex:
    return ArgumentIndex(ArgumentKind.SCENE_PRIMITIVE, i)


class OperationKind(enum.IntEnum):
    """Wire tag of an operation record."""

    MIN = 0  # union
    MAX = 1  # intersection
    NEG = 2  # complement


_ARITY = {
    OperationKind.MIN: 2,
    OperationKind.MAX: 2,
    OperationKind.NEG: 1,
}


def arity(kind: OperationKind) -> int:
    """Number of arguments taken by an operation of *kind*."""
    return _ARITY[OperationKind(kind)]


@dataclass(frozen=True)
class Operation:
    """One combination step: *kind* applied to ``arity(kind)`` *args*."""

    kind: OperationKind
    args: Tuple[ArgumentIndex, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", OperationKind(self.kind))
        object.__setattr__(self, "args", tuple(self.args))
        if len(self.args) != arity(self.kind):
            raise ValueError(
                f"{self.kind.name} takes {arity(self.kind)} argument(s), "
                f"got {len(self.args)}"
            )
        for a in self.args:
            if not isinstance(a, ArgumentIndex):
                raise TypeError(f"expected ArgumentIndex, got {type(a).__name__}")


def _check_primitive(primitive: Primitive) -> Primitive:
    if not isinstance(primitive, PRIMITIVE_TYPES):
        raise TypeError(f"not a primitive: {type(primitive).__name__}")
    return primitive


# ===========================================================================
# Containers
# ===========================================================================

@dataclass
class Object:
    """Primitives plus the operation DAG combining them.

    Implements:
    - Building:           :meth:`add_primitive`, :meth:`add_operation`
    - Boolean operations: :meth:`union`, :meth:`intersect`, :meth:`negate`,
      :meth:`subtract`
    """

    primitives: List[Primitive] = field(default_factory=list)
    operations: List[Operation] = field(default_factory=list)

    def add_primitive(self, primitive: Primitive) -> ArgumentIndex:
        """Append *primitive* and return a reference to it."""
        self.primitives.append(_check_primitive(primitive))
        return object_primitive_index(len(self.primitives) - 1)

    def add_operation(self, kind: OperationKind, *args: ArgumentIndex) -> ArgumentIndex:
        """Append an operation and return a reference to its result."""
        self.operations.append(Operation(kind, args))
        return object_operation_index(len(self.operations) - 1)

    # ------------------------------------------------------------------
    # Boolean operations
    # ------------------------------------------------------------------

    def union(self, a: ArgumentIndex, b: ArgumentIndex) -> ArgumentIndex:
        """Union (min) of *a* and *b*."""
        return self.add_operation(OperationKind.MIN, a, b)

    def intersect(self, a: ArgumentIndex, b: ArgumentIndex) -> ArgumentIndex:
        """Intersection (max) of *a* and *b*."""
        return self.add_operation(OperationKind.MAX, a, b)

    def negate(self, a: ArgumentIndex) -> ArgumentIndex:
        """Complement of *a*."""
        return self.add_operation(OperationKind.NEG, a)

    def subtract(self, a: ArgumentIndex, b: ArgumentIndex) -> ArgumentIndex:
        """Subtract *b* from *a*: ``max(a, -b)``."""
        return self.intersect(a, self.negate(b))


@dataclass
class Scene:
    """Objects, scene-wide shared primitives and an optional scale.

    *scale* is applied geometrically to every plane and circle evaluated
    in this scene, shared primitives included.  ``None`` means ``(1, 1)``.
    It is not serialized.
    """

    objects: List[Object] = field(default_factory=list)
    primitives: List[Primitive] = field(default_factory=list)
    scale: Optional[Vector2] = None

    def __post_init__(self) -> None:
        if self.scale is not None:
            self.scale = as_vector2(self.scale)

    def add_object(self, obj: Optional[Object] = None) -> Object:
        """Append *obj* (or a new empty object) and return it."""
        if obj is None:
            obj = Object()
        self.objects.append(obj)
        return obj

    def add_primitive(self, primitive: Primitive) -> ArgumentIndex:
        """Append a shared primitive and return a reference to it."""
        self.primitives.append(_check_primitive(primitive))
        return scene_primitive_index(len(self.primitives) - 1)

    def evaluate(self, index: int, p):
        """Distance of ``objects[index]`` at *p*; see :func:`sdfd.evaluate.evaluate`."""
        from .evaluate import evaluate

        return evaluate(self, self.objects[index], p)
