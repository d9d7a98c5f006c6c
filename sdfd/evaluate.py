"""Distance evaluation of primitives and object DAGs.

Evaluation is vectorized: *p* is anything convertible to a ``(..., 2)``
float array and results have shape ``(...)``.  A single point ``(x, y)``
gives a NumPy scalar.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np
import numpy.typing as npt

from . import primitives as sdf
from .errors import ArgumentIndexError
from .geometry import IDENTITY_SCALE, Circle, Constant, Ellipse, Plane, Primitive, Vector2, as_vector2
from .scene import ArgumentIndex, ArgumentKind, Object, OperationKind, Scene

_Array = npt.NDArray[np.floating]


def _points(p) -> _Array:
    if isinstance(p, Vector2):
        return p.as_array()
    p = np.asarray(p, dtype=float)
    if p.shape[-1:] != (2,):
        raise ValueError(f"expected points of shape (..., 2), got {p.shape}")
    return p


def _scalar_if_single(d: _Array):
    return np.asarray(d)[()]


def _distance(primitive: Primitive, p: _Array, scale: Optional[Vector2]) -> _Array:
    if scale is not None and scale == IDENTITY_SCALE:
        scale = None

    if isinstance(primitive, Constant):
        return sdf.sdConstant(p, primitive.value)
    if isinstance(primitive, Plane):
        n = primitive.normal.as_array()
        offset = primitive.offset
        if scale is not None:
            n, offset = sdf.scalePlane(n, offset, scale.as_array())
        return sdf.sdPlane(p, n, offset)
    if isinstance(primitive, Circle):
        if scale is None:
            return sdf.sdCircle(p, primitive.center.as_array(), primitive.radius)
        ellipse = Ellipse(primitive.center * scale, scale * primitive.radius)
        return distance_to_ellipse(ellipse, p)
    raise TypeError(f"not a primitive: {type(primitive).__name__}")


def distance_to_ellipse(ellipse: Ellipse, p) -> _Array:
    """Signed distance from *p* to *ellipse*."""
    return sdf.sdEllipse(_points(p), ellipse.center.as_array(), ellipse.radius.as_array())


def evaluate_primitive(primitive: Primitive, p, scale=None):
    """Signed distance from *p* to *primitive*.

    Parameters
    ----------
    primitive:
        A :class:`~sdfd.geometry.Constant`, :class:`~sdfd.geometry.Plane`
        or :class:`~sdfd.geometry.Circle`.
    p:
        Point or ``(..., 2)`` array of points.
    scale:
        Optional non-uniform ``(sx, sy)`` applied to the primitive's
        geometry.  ``None`` is the identity.
    """
    if scale is not None:
        scale = as_vector2(scale)
    return _scalar_if_single(_distance(primitive, _points(p), scale))


def evaluate(scene: Scene, obj: Object, p):
    """Signed distance field of *obj* in the context of *scene* at *p*.

    An object without operations evaluates to its last primitive, or to
    ``+inf`` everywhere when it has no primitives either.  Operations run
    in index order; an operation argument naming a later (or the same)
    operation reads NaN.

    Raises
    ------
    ArgumentIndexError
        If an argument references a primitive or operation out of bounds.
    """
    p = _points(p)
    scale = None if scene.scale is None else as_vector2(scene.scale)

    if not obj.operations:
        if not obj.primitives:
            return _scalar_if_single(np.full(p.shape[:-1], np.inf))
        return _scalar_if_single(_distance(obj.primitives[-1], p, scale))

    nan_field = np.full(p.shape[:-1], np.nan)
    results: List[_Array] = [nan_field] * len(obj.operations)

    def argument(index: ArgumentIndex) -> _Array:
        if index.kind == ArgumentKind.OBJECT_PRIMITIVE:
            pool = obj.primitives
        elif index.kind == ArgumentKind.SCENE_PRIMITIVE:
            pool = scene.primitives
        elif index.kind == ArgumentKind.OBJECT_OPERATION:
            if index.value >= len(results):
                raise ArgumentIndexError(
                    f"operation {index.value} out of range ({len(results)} operations)"
                )
            return results[index.value]
        else:
            raise TypeError(f"unknown argument kind {index.kind!r}")
        if index.value >= len(pool):
            raise ArgumentIndexError(
                f"{index.kind.name.lower()} {index.value} out of range "
                f"({len(pool)} primitives)"
            )
        return _distance(pool[index.value], p, scale)

    for i, op in enumerate(obj.operations):
        if op.kind == OperationKind.MIN:
            results[i] = sdf.opUnion(argument(op.args[0]), argument(op.args[1]))
        elif op.kind == OperationKind.MAX:
            results[i] = sdf.opIntersection(argument(op.args[0]), argument(op.args[1]))
        elif op.kind == OperationKind.NEG:
            results[i] = sdf.opNegation(argument(op.args[0]))
        else:
            raise TypeError(f"unknown operation kind {op.kind!r}")

    return _scalar_if_single(results[-1])
