"""Binary ``.sdfd`` scene format.

Reading and writing share one layout description: every ``_serialize_*``
function takes a :class:`_Stream` and the value to write (ignored while
reading) and returns the value written or read.

Layout (little-endian, no padding)::

    magic    4 bytes   b"sdfd"
    version  u16       <= FORMAT_VERSION
    objects  u32       then per object:
                           primitives  u32 + primitive records
                           operations  u32 + operation records
    shared   u32       + primitive records

    primitive record:  kind u16, then f32 x1 (FLOAT1) or f32 x3 (PLANE, CIRCLE)
    operation record:  kind u16, then arity(kind) u32 argument words

An argument word stores the argument kind in its low 2 bits and the index
in the remaining 30 bits.  Version 0 files use 1 tag bit and 31 index bits
and have no scene-primitive references.
"""

from __future__ import annotations

import io
import logging
import os
import struct
from typing import BinaryIO, Callable, List, Optional, Sequence, TypeVar, Union

from .errors import SceneFormatError, SceneTruncatedError, SceneVersionError
from .geometry import Circle, Constant, Plane, Primitive, PrimitiveKind, Vector2
from .scene import ArgumentIndex, ArgumentKind, Object, Operation, OperationKind, Scene, arity

logger = logging.getLogger(__name__)

MAGIC = b"sdfd"
FORMAT_VERSION = 1

_PathLike = Union[str, "os.PathLike[str]"]
_T = TypeVar("_T")

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_F32 = struct.Struct("<f")


# ===========================================================================
# Bidirectional stream
# ===========================================================================

class _Stream:
    """Cursor over an in-memory buffer (reading) or a binary file (writing)."""

    def __init__(self, reading: bool, data: bytes = b"", file: Optional[BinaryIO] = None) -> None:
        self.reading = reading
        self.version = FORMAT_VERSION
        self._data = memoryview(data)
        self._cursor = 0
        self._file = file

    @property
    def remaining(self) -> int:
        return len(self._data) - self._cursor

    def buffer(self, size: int, data: bytes = b"") -> bytes:
        """Read *size* raw bytes, or write *data* (which must be *size* long)."""
        if self.reading:
            if self._cursor + size > len(self._data):
                raise SceneTruncatedError(
                    f"need {size} byte(s) at offset {self._cursor}, "
                    f"only {self.remaining} left"
                )
            chunk = bytes(self._data[self._cursor:self._cursor + size])
            self._cursor += size
            return chunk
        if len(data) != size:
            raise ValueError(f"expected {size} byte(s) to write, got {len(data)}")
        self._file.write(data)
        return data

    def _value(self, fmt: struct.Struct, value):
        if self.reading:
            return fmt.unpack(self.buffer(fmt.size))[0]
        self.buffer(fmt.size, fmt.pack(value))
        return value

    def u16(self, value: int = 0) -> int:
        return self._value(_U16, value)

    def u32(self, value: int = 0) -> int:
        return self._value(_U32, value)

    def f32(self, value: float = 0.0) -> float:
        return self._value(_F32, value)

    def vector2(self, value: Optional[Vector2] = None) -> Vector2:
        if value is None:
            value = Vector2(0.0, 0.0)
        return Vector2(self.f32(value.x), self.f32(value.y))

    def sequence(self, items: Sequence[_T], fn: Callable[["_Stream", Optional[_T]], _T]) -> List[_T]:
        """Length-prefixed (u32) list of records serialized with *fn*."""
        count = self.u32(len(items))
        if self.reading:
            return [fn(self, None) for _ in range(count)]
        return [fn(self, item) for item in items]


# ===========================================================================
# Records
# ===========================================================================

def _serialize_primitive(s: _Stream, primitive: Optional[Primitive]) -> Primitive:
    kind = s.u16(0 if s.reading else primitive.kind)
    if kind == PrimitiveKind.FLOAT1:
        return Constant(s.f32(0.0 if s.reading else primitive.value))
    if kind == PrimitiveKind.PLANE:
        plane = None if s.reading else primitive
        normal = s.vector2(None if plane is None else plane.normal)
        offset = s.f32(0.0 if plane is None else plane.offset)
        return Plane(normal, offset)
    if kind == PrimitiveKind.CIRCLE:
        circle = None if s.reading else primitive
        center = s.vector2(None if circle is None else circle.center)
        radius = s.f32(0.0 if circle is None else circle.radius)
        return Circle(center, radius)
    raise SceneFormatError(f"unknown primitive kind {kind}")


def _argument_layout(version: int):
    # (tag bits, tag -> kind table)
    if version == 0:
        return 1, (ArgumentKind.OBJECT_PRIMITIVE, ArgumentKind.OBJECT_OPERATION)
    return 2, (
        ArgumentKind.OBJECT_PRIMITIVE,
        ArgumentKind.OBJECT_OPERATION,
        ArgumentKind.SCENE_PRIMITIVE,
    )


def _serialize_argument(s: _Stream, arg: Optional[ArgumentIndex]) -> ArgumentIndex:
    bits, kinds = _argument_layout(s.version)
    mask = (1 << bits) - 1
    if s.reading:
        word = s.u32()
        tag = word & mask
        if tag >= len(kinds):
            raise SceneFormatError(f"unknown argument kind {tag}")
        try:
            return ArgumentIndex(kinds[tag], word >> bits)
        except ValueError as e:
            raise SceneFormatError(str(e)) from None
    s.u32((arg.value << bits) | int(arg.kind))
    return arg


def _serialize_operation(s: _Stream, operation: Optional[Operation]) -> Operation:
    raw = s.u16(0 if s.reading else operation.kind)
    try:
        kind = OperationKind(raw)
    except ValueError:
        raise SceneFormatError(f"unknown operation kind {raw}") from None
    args = None if s.reading else operation.args
    return Operation(kind, [
        _serialize_argument(s, None if args is None else args[i])
        for i in range(arity(kind))
    ])


def _serialize_object(s: _Stream, obj: Optional[Object]) -> Object:
    primitives = s.sequence([] if obj is None else obj.primitives, _serialize_primitive)
    operations = s.sequence([] if obj is None else obj.operations, _serialize_operation)
    logger.debug(f"object: {len(primitives)} primitive(s), {len(operations)} operation(s)")
    return Object(primitives, operations)


def _serialize_scene(s: _Stream, scene: Optional[Scene]) -> Scene:
    magic = s.buffer(len(MAGIC), MAGIC)
    if magic != MAGIC:
        raise SceneFormatError(f"bad magic {magic!r}, expected {MAGIC!r}")

    version = s.u16(FORMAT_VERSION)
    if version > FORMAT_VERSION:
        raise SceneVersionError(
            f"format version {version} is newer than supported {FORMAT_VERSION}"
        )
    s.version = version

    objects = s.sequence([] if scene is None else scene.objects, _serialize_object)
    primitives = s.sequence([] if scene is None else scene.primitives, _serialize_primitive)
    return Scene(objects, primitives)


# ===========================================================================
# Public API
# ===========================================================================

def dump(scene: Scene, file: BinaryIO) -> None:
    """Write *scene* to the binary file object *file*."""
    _serialize_scene(_Stream(reading=False, file=file), scene)


def dumps(scene: Scene) -> bytes:
    """Encode *scene* as ``.sdfd`` bytes."""
    buf = io.BytesIO()
    dump(scene, buf)
    return buf.getvalue()


def loads(data: bytes) -> Scene:
    """Decode a scene from ``.sdfd`` bytes.

    Raises
    ------
    SceneFormatError
        On bad magic, unknown tags, a newer version
        (:class:`~sdfd.errors.SceneVersionError`) or truncated data
        (:class:`~sdfd.errors.SceneTruncatedError`).
    """
    s = _Stream(reading=True, data=data)
    scene = _serialize_scene(s, None)
    if s.remaining:
        logger.warning(f"Ignoring {s.remaining} trailing byte(s) after scene")
    return scene


def store_to_file(scene: Scene, path: _PathLike) -> bool:
    """Write *scene* to *path*; return ``False`` on failure.

    A failed write may leave an incomplete file behind.
    """
    logger.info(f"Storing scene to: {path}")
    try:
        with open(path, "wb") as f:
            dump(scene, f)
    except OSError as e:
        logger.error(f"Failed to store scene to '{path}': {e}")
        return False
    logger.info(f"Stored {len(scene.objects)} object(s) to: {path}")
    return True


def load_from_file(path: _PathLike) -> Optional[Scene]:
    """Read a scene from *path*; return ``None`` on any I/O or format failure."""
    logger.info(f"Loading scene from: {path}")
    try:
        with open(path, "rb") as f:
            data = f.read()
        scene = loads(data)
    except (OSError, SceneFormatError) as e:
        logger.error(f"Failed to load scene from '{path}': {e}")
        return None
    logger.info(f"Loaded {len(scene.objects)} object(s) from: {path}")
    return scene
