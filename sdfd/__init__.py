"""
sdfd — 2D Signed Distance Field Scenes
======================================

A library for building 2D signed distance fields (SDFs) as small operation
graphs over primitives, evaluating them at query points, and storing them
in a compact binary ``.sdfd`` file.

Implemented features
--------------------
- Primitives: constant, half-plane, circle (ellipse under non-uniform scale)
- Operations: min (union), max (intersection), neg (complement)
- Scenes: objects, scene-wide shared primitives, non-uniform scale
- Binary codec: :func:`store_to_file`, :func:`load_from_file`,
  :func:`dumps`, :func:`loads`
- Grid sampling: :func:`sample_levelset_2d`

Quick start
-----------

::

    from sdfd import Scene, Circle, plane_from_point_and_normal, store_to_file

    scene = Scene()
    obj   = scene.add_object()
    left  = obj.add_primitive(plane_from_point_and_normal((-1, 0), (-1, 0)))
    right = obj.add_primitive(plane_from_point_and_normal(( 1, 0), ( 1, 0)))
    slab  = obj.intersect(left, right)
    hole  = obj.add_primitive(Circle((0, 0), 0.5))
    obj.subtract(slab, hole)

    scene.evaluate(0, (0.75, 0.0))     # -0.25, inside the slab
    store_to_file(scene, "slab.sdfd")
"""

from .errors import (
    ArgumentIndexError,
    SceneFormatError,
    SceneTruncatedError,
    SceneVersionError,
    SdfdError,
)

from .geometry import (
    Vector2,

    # Primitive shapes
    PrimitiveKind,
    Primitive,
    Constant,
    Plane,
    Circle,
    Ellipse,

    # Plane constructors
    plane_from_points,
    plane_from_point_and_normal,
    plane_from_point_and_angle,
    plane_from_angle_and_offset,
)

from .scene import (
    ArgumentKind,
    ArgumentIndex,
    object_primitive_index,
    object_operation_index,
    scene_primitive_index,
    OperationKind,
    Operation,
    arity,
    Object,
    Scene,
)

from .evaluate import evaluate, evaluate_primitive, distance_to_ellipse
from .codec import (
    FORMAT_VERSION,
    dump,
    dumps,
    loads,
    store_to_file,
    load_from_file,
)
from .grid import sample_levelset_2d, save_npy

__version__ = "0.1.0"

__all__ = [
    # Errors
    "SdfdError",
    "SceneFormatError",
    "SceneVersionError",
    "SceneTruncatedError",
    "ArgumentIndexError",

    # Geometry
    "Vector2",
    "PrimitiveKind",
    "Primitive",
    "Constant",
    "Plane",
    "Circle",
    "Ellipse",
    "plane_from_points",
    "plane_from_point_and_normal",
    "plane_from_point_and_angle",
    "plane_from_angle_and_offset",

    # Operation DAG
    "ArgumentKind",
    "ArgumentIndex",
    "object_primitive_index",
    "object_operation_index",
    "scene_primitive_index",
    "OperationKind",
    "Operation",
    "arity",
    "Object",
    "Scene",

    # Evaluation
    "evaluate",
    "evaluate_primitive",
    "distance_to_ellipse",

    # Codec
    "FORMAT_VERSION",
    "dump",
    "dumps",
    "loads",
    "store_to_file",
    "load_from_file",

    # Grid utilities
    "sample_levelset_2d",
    "save_npy",
]
