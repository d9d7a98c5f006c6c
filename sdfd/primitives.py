"""2-D SDF math kernel for the sdfd package.

This module provides:

* **Type alias**: :data:`_F`
* **Vector helpers**: :func:`vec2`, :func:`length`, :func:`dot`, :func:`dot2`,
  :func:`clamp`, :func:`perp`, :func:`safe_div`
* **Primitive SDFs**: :func:`sdConstant`, :func:`sdPlane`, :func:`sdCircle`,
  :func:`sdEllipse`
* **Transform helpers**: :func:`scalePlane`
* **Boolean operators**: :func:`opUnion`, :func:`opIntersection`,
  :func:`opNegation`

All functions accept and return ``numpy.ndarray`` objects and support
broadcasting over arbitrary leading batch dimensions.  A "point array" *p*
has shape ``(..., 2)``; scalar SDF results have shape ``(...,)``.

The ellipse distance is adapted from Inigo Quilez's closed form:
https://www.shadertoy.com/view/4sS3zz
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
import numpy.typing as npt

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------
_F = npt.NDArray[np.floating]

# Relative threshold on |ry² - rx²| below which an ellipse is a circle.
ELLIPSE_EPSILON = 1e-6

_SQRT3 = np.sqrt(3.0)

__all__ = [
    "_F",
    "ELLIPSE_EPSILON",
    "vec2",
    "length", "dot", "dot2", "clamp", "perp", "safe_div",
    "sdConstant", "sdPlane", "sdCircle", "sdEllipse",
    "scalePlane",
    "opUnion", "opIntersection", "opNegation",
]


# ===========================================================================
# Vector helpers
# ===========================================================================

def vec2(x: _F, y: _F) -> _F:
    """Stack *x* and *y* into a ``(..., 2)`` array."""
    x, y = np.broadcast_arrays(x, y)
    return np.stack([x, y], axis=-1)


def length(v: _F) -> _F:
    """Euclidean length along the last axis."""
    return np.linalg.norm(v, axis=-1)


def dot(a: _F, b: _F) -> _F:
    """Dot product along the last axis."""
    return np.sum(a * b, axis=-1)


def dot2(a: _F) -> _F:
    """Squared length: ``dot(a, a)``."""
    return dot(a, a)


def clamp(x: _F, lo: float | _F, hi: float | _F) -> _F:
    """Clamp *x* element-wise to ``[lo, hi]``."""
    return np.minimum(np.maximum(x, lo), hi)


def perp(v: _F) -> _F:
    """Rotate *v* by 90 degrees counter-clockwise."""
    return vec2(-v[..., 1], v[..., 0])


def safe_div(n: _F, d: _F, eps: float = 1e-12) -> _F:
    """Division by a non-negative *d* that avoids exact zero in the denominator."""
    return n / np.where(np.abs(d) < eps, eps, d)


# ===========================================================================
# Primitive SDFs
# ===========================================================================

def sdConstant(p: _F, value: float) -> _F:
    """Constant field *value* everywhere."""
    return np.full(p.shape[:-1], value, dtype=float)


def sdPlane(p: _F, n: _F, offset: float) -> _F:
    """Half-plane with normal *n* moved by *offset*: ``dot(n, p) - offset``."""
    return dot(p, n) - offset


def sdCircle(p: _F, c: _F, r: float) -> _F:
    """Circle of radius *r* centred at *c*."""
    return length(p - c) - r


def sdEllipse(p: _F, c: _F, ab: _F) -> _F:
    """Ellipse centred at *c* with radii *ab* ``(rx, ry)``.

    Near-equal radii fall back to :func:`sdCircle`, since the closed form
    divides by ``ry² - rx²``.
    """
    ab = np.asarray(ab, dtype=float)
    l2 = ab[1] * ab[1] - ab[0] * ab[0]
    if abs(l2) < ELLIPSE_EPSILON * max(ab[0] * ab[0], ab[1] * ab[1]):
        return sdCircle(p, c, ab[1])

    q    = np.abs(p - c)
    sw   = q[..., 0] > q[..., 1]
    px   = np.where(sw, q[..., 1], q[..., 0])
    py   = np.where(sw, q[..., 0], q[..., 1])
    ax   = np.where(sw, ab[1], ab[0])
    ay   = np.where(sw, ab[0], ab[1])
    l    = ay * ay - ax * ax

    m    = ax * px / l;  n = ay * py / l
    m2   = m * m;  n2 = n * n
    cc   = (m2 + n2 - 1.0) / 3.0
    c3   = cc * cc * cc
    d    = c3 + m2 * n2
    qq   = d + m2 * n2
    g    = m + m * n2

    # Both branches run on every point; the unused one may produce inf/NaN.
    with np.errstate(invalid="ignore", divide="ignore", over="ignore"):
        # d < 0: trigonometric branch
        h1  = np.arccos(clamp(qq / np.where(c3 == 0.0, -1.0, c3), -1.0, 1.0)) / 3.0
        s1  = np.cos(h1) + 2.0
        t1  = np.sin(h1) * _SQRT3
        rx1 = np.sqrt(np.maximum(m2 - cc * (s1 + t1), 0.0))
        ry1 = np.sqrt(np.maximum(m2 - cc * (s1 - t1), 0.0))
        co1 = ry1 + np.sign(l) * rx1 + safe_div(np.abs(g), rx1 * ry1)

        # d >= 0: algebraic branch
        h2  = 2.0 * m * n * np.sqrt(np.maximum(d, 0.0))
        s2  = np.cbrt(qq + h2)
        t2  = np.cbrt(qq - h2)
        rx2 = -(s2 + t2) - cc * 4.0 + 2.0 * m2
        ry2 = (s2 - t2) * _SQRT3
        rm  = np.sqrt(rx2 * rx2 + ry2 * ry2)
        co2 = safe_div(ry2, np.sqrt(np.maximum(rm - rx2, 0.0))) + safe_div(2.0 * g, rm)

        co  = (np.where(d < 0.0, co1, co2) - m) / 2.0

    si   = np.sqrt(np.maximum(1.0 - co * co, 0.0))
    rx   = ax * co
    ry   = ay * si
    inside = dot2(q / ab) < 1.0
    return length(vec2(rx - px, ry - py)) * np.where(inside, -1.0, 1.0)


# ===========================================================================
# Transform helpers
# ===========================================================================

def scalePlane(n: _F, offset: float, s: _F) -> Tuple[_F, float]:
    """Map the plane ``(n, offset)`` through the non-uniform scale *s*.

    Two points on the boundary line are scaled independently and the plane
    is rebuilt from them; the new normal keeps the length of *n*.
    """
    n = np.asarray(n, dtype=float)
    s = np.asarray(s, dtype=float)
    a = n * (offset / dot2(n))
    b = a + perp(n)
    a = a * s
    b = b * s
    n_new = perp(a - b)
    n_new = n_new * (length(n) / length(n_new))
    return n_new, float(dot(a, n_new))


# ===========================================================================
# Boolean operators
# ===========================================================================

def opUnion(d1: _F, d2: _F) -> _F:
    """Union of two SDFs: ``min(d1, d2)``."""
    return np.minimum(d1, d2)


def opIntersection(d1: _F, d2: _F) -> _F:
    """Intersection of two SDFs: ``max(d1, d2)``."""
    return np.maximum(d1, d2)


def opNegation(d: _F) -> _F:
    """Complement of an SDF: ``-d``."""
    return np.negative(d)
