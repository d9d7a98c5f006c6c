"""Typed errors raised by the sdfd package."""

from __future__ import annotations


class SdfdError(Exception):
    """Base error of the package."""


class SceneFormatError(SdfdError, ValueError):
    """Serialized scene is malformed (bad magic, unknown tag, ...)."""


class SceneVersionError(SceneFormatError):
    """Serialized scene was written by a newer format version."""


class SceneTruncatedError(SceneFormatError):
    """Serialized scene ends before its layout is complete."""


class ArgumentIndexError(SdfdError, IndexError):
    """An operation argument references a primitive or operation out of bounds."""
