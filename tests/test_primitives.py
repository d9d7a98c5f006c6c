"""Tests for sdfd/primitives.py — the vectorized 2-D SDF math kernel.

Tests verify:
- Correct sign (negative inside, positive outside, zero on surface)
- Exact or near-exact distance at analytically known points
- Array shape / broadcasting consistency
"""

import numpy as np
import numpy.testing as npt
import pytest

from sdfd import primitives as sdf


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _p2(*xy) -> np.ndarray:
    """Single 2-D point as shape ``(1, 2)``."""
    return np.array([list(xy)], dtype=float)


def _grid2(n: int = 8, lo: float = -1.0, hi: float = 1.0) -> np.ndarray:
    """Uniform ``n²`` grid of 2-D points in ``[lo, hi]²`` (shape ``(n, n, 2)``)."""
    lin = np.linspace(lo, hi, n)
    Y, X = np.meshgrid(lin, lin, indexing="ij")
    return np.stack([X, Y], axis=-1)


def _ellipse_brute_force(p, c, ab, n: int = 200001) -> np.ndarray:
    """Signed distance by dense sampling of the ellipse boundary."""
    t = np.linspace(0.0, 2.0 * np.pi, n)
    boundary = np.stack([c[0] + ab[0] * np.cos(t), c[1] + ab[1] * np.sin(t)], axis=-1)
    out = []
    for q in p:
        d = np.min(np.linalg.norm(boundary - q, axis=-1))
        inside = ((q[0] - c[0]) / ab[0]) ** 2 + ((q[1] - c[1]) / ab[1]) ** 2 < 1.0
        out.append(-d if inside else d)
    return np.array(out)


# ===========================================================================
# Vector helpers
# ===========================================================================

class TestVecHelpers:
    def test_vec2_shape(self):
        v = sdf.vec2(np.array([1.0, 2.0]), np.array([3.0, 4.0]))
        assert v.shape == (2, 2)

    def test_length_single(self):
        npt.assert_allclose(sdf.length(np.array([[3.0, 4.0]])), [5.0])

    def test_dot2_is_length_squared(self):
        npt.assert_allclose(sdf.dot2(np.array([[3.0, 4.0]])), [25.0])

    def test_clamp(self):
        x = np.array([-2.0, 0.5, 3.0])
        npt.assert_allclose(sdf.clamp(x, 0.0, 1.0), [0.0, 0.5, 1.0])

    def test_perp_rotates_ccw(self):
        npt.assert_allclose(sdf.perp(np.array([1.0, 0.0])), [0.0, 1.0])
        npt.assert_allclose(sdf.perp(np.array([0.0, 1.0])), [-1.0, 0.0])

    def test_safe_div_no_nan(self):
        result = sdf.safe_div(np.array([1.0]), np.array([0.0]))
        assert np.isfinite(result).all()


# ===========================================================================
# Primitive SDFs
# ===========================================================================

class TestConstant:
    def test_broadcasts_to_query_shape(self):
        d = sdf.sdConstant(_grid2(5), 2.5)
        assert d.shape == (5, 5)
        assert (d == 2.5).all()


class TestPlane:
    N = np.array([0.6, 0.8])
    O = 2.0

    def test_matches_dot_formula(self):
        p = _grid2(7, -5.0, 5.0)
        npt.assert_allclose(sdf.sdPlane(p, self.N, self.O), p @ self.N - self.O)

    def test_on_boundary(self):
        p = _p2(*(self.N * self.O))
        npt.assert_allclose(sdf.sdPlane(p, self.N, self.O), [0.0], atol=1e-12)

    def test_sign(self):
        assert sdf.sdPlane(_p2(0.0, 0.0), self.N, self.O)[0] < 0
        assert sdf.sdPlane(_p2(5.0, 5.0), self.N, self.O)[0] > 0


class TestCircle:
    C = np.array([1.0, -0.5])
    R = 0.3

    def test_center_is_minus_radius(self):
        npt.assert_allclose(sdf.sdCircle(_p2(*self.C), self.C, self.R), [-self.R], atol=1e-12)

    def test_on_surface(self):
        p = _p2(self.C[0] + self.R, self.C[1])
        npt.assert_allclose(sdf.sdCircle(p, self.C, self.R), [0.0], atol=1e-12)

    def test_outside(self):
        p = _p2(self.C[0], self.C[1] + 1.0)
        npt.assert_allclose(sdf.sdCircle(p, self.C, self.R), [1.0 - self.R], atol=1e-12)


class TestEllipse:
    C = np.array([0.5, -0.25])
    AB = np.array([2.0, 1.0])

    def test_equal_radii_match_circle(self):
        p = _grid2(16, -3.0, 3.0)
        npt.assert_allclose(
            sdf.sdEllipse(p, self.C, np.array([1.5, 1.5])),
            sdf.sdCircle(p, self.C, 1.5),
            atol=1e-4,
        )

    @pytest.mark.parametrize("ab", [(2.0, 1.0), (1.0, 2.0), (1.0, 3.0), (3.0, 0.5)])
    def test_centre_is_minus_minor_radius(self, ab):
        d = sdf.sdEllipse(_p2(*self.C), self.C, np.array(ab))
        npt.assert_allclose(d, [-min(ab)], atol=1e-6)

    def test_axis_points(self):
        p = np.array([
            self.C + [3.0, 0.0],    # outside along major axis
            self.C + [0.0, 2.0],    # outside along minor axis
            self.C + [0.5, 0.0],    # inside on major axis
        ])
        expected = [1.0, 1.0, -np.sqrt(11.0 / 12.0)]
        npt.assert_allclose(sdf.sdEllipse(p, self.C, self.AB), expected, atol=1e-6)

    def test_on_boundary(self):
        t = np.linspace(0.1, 6.0, 9)
        p = np.stack([self.C[0] + 2.0 * np.cos(t), self.C[1] + np.sin(t)], axis=-1)
        npt.assert_allclose(sdf.sdEllipse(p, self.C, self.AB), 0.0, atol=1e-5)

    @pytest.mark.parametrize("ab", [(2.0, 1.0), (1.0, 2.0), (3.0, 0.5)])
    def test_matches_brute_force(self, ab):
        ab = np.array(ab)
        p = self.C + np.array([
            [3.0, 2.0], [0.3, 0.4], [-1.2, -0.6], [0.1, 1.5],
            [-2.5, -1.7], [1.0, 0.0], [0.0, -0.2], [4.0, -3.0],
        ])
        npt.assert_allclose(
            sdf.sdEllipse(p, self.C, ab),
            _ellipse_brute_force(p, self.C, ab),
            atol=1e-4,
        )

    def test_no_nan_on_grid(self):
        d = sdf.sdEllipse(_grid2(33, -4.0, 4.0), self.C, self.AB)
        assert d.shape == (33, 33)
        assert np.isfinite(d).all()

    def test_single_point_shape(self):
        d = sdf.sdEllipse(np.array([3.0, 2.0]), np.zeros(2), self.AB)
        assert np.ndim(d) == 0


# ===========================================================================
# Transform helpers
# ===========================================================================

class TestScalePlane:
    def test_identity_keeps_plane(self):
        n, o = sdf.scalePlane(np.array([0.6, 0.8]), 2.0, np.array([1.0, 1.0]))
        npt.assert_allclose(n, [0.6, 0.8], atol=1e-12)
        npt.assert_allclose(o, 2.0, atol=1e-12)

    def test_vertical_line_moves_with_x_scale(self):
        n, o = sdf.scalePlane(np.array([1.0, 0.0]), 2.0, np.array([3.0, 1.0]))
        npt.assert_allclose(n, [1.0, 0.0], atol=1e-12)
        npt.assert_allclose(o, 6.0, atol=1e-12)

    def test_horizontal_line_keeps_unit_normal(self):
        n, o = sdf.scalePlane(np.array([0.0, 1.0]), 2.0, np.array([3.0, 1.0]))
        npt.assert_allclose(n, [0.0, 1.0], atol=1e-12)
        npt.assert_allclose(o, 2.0, atol=1e-12)

    def test_diagonal_normal_rotates(self):
        s = np.sqrt(0.5)
        n, o = sdf.scalePlane(np.array([s, s]), 0.0, np.array([2.0, 1.0]))
        npt.assert_allclose(n, np.array([1.0, 2.0]) / np.sqrt(5.0), atol=1e-12)
        npt.assert_allclose(o, 0.0, atol=1e-12)


# ===========================================================================
# Boolean operators
# ===========================================================================

class TestBooleanOps:
    A = np.array([-1.0, 0.5, 2.0])
    B = np.array([0.0, -0.5, 3.0])

    def test_union_is_min(self):
        npt.assert_array_equal(sdf.opUnion(self.A, self.B), [-1.0, -0.5, 2.0])

    def test_intersection_is_max(self):
        npt.assert_array_equal(sdf.opIntersection(self.A, self.B), [0.0, 0.5, 3.0])

    def test_negation(self):
        npt.assert_array_equal(sdf.opNegation(self.A), -self.A)

    def test_de_morgan(self):
        npt.assert_allclose(
            sdf.opIntersection(sdf.opNegation(self.A), sdf.opNegation(self.B)),
            sdf.opNegation(sdf.opUnion(self.A, self.B)),
        )
