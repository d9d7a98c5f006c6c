"""Tests for sdfd grid utilities."""

import os
import tempfile

import numpy as np
import numpy.testing as npt
import pytest

from sdfd import Circle, Object, Scene, sample_levelset_2d, save_npy


def _disk_scene(radius: float = 0.25) -> Scene:
    scene = Scene()
    scene.add_object().add_primitive(Circle((0.0, 0.0), radius))
    return scene


class TestSampleLevelset2D:
    def test_output_shape(self):
        phi = sample_levelset_2d(_disk_scene(), 0, ((-1, 1), (-1, 1)), (32, 32))
        assert phi.shape == (32, 32)

    def test_non_square(self):
        phi = sample_levelset_2d(_disk_scene(), 0, ((-1, 1), (-1, 1)), (16, 32))
        assert phi.shape == (32, 16)

    def test_accepts_object(self):
        scene = _disk_scene()
        by_index = sample_levelset_2d(scene, 0, ((-1, 1), (-1, 1)), (8, 8))
        by_object = sample_levelset_2d(scene, scene.objects[0], ((-1, 1), (-1, 1)), (8, 8))
        npt.assert_array_equal(by_index, by_object)

    def test_cell_centred_at_origin(self):
        n = 65
        phi = sample_levelset_2d(_disk_scene(), 0, ((-1, 1), (-1, 1)), (n, n))
        npt.assert_allclose(phi[32, 32], -0.25, atol=0.02)

    def test_inside_negative_outside_positive(self):
        phi = sample_levelset_2d(_disk_scene(), 0, ((-1, 1), (-1, 1)), (64, 64))
        assert (phi < 0).any()
        assert (phi > 0).any()

    def test_empty_object_is_infinite(self):
        phi = sample_levelset_2d(Scene(objects=[Object()]), 0, ((0, 1), (0, 1)), (4, 4))
        assert np.isposinf(phi).all()

    def test_scale_stretches_along_x(self):
        scene = _disk_scene()
        scene.scale = (3.0, 1.0)
        phi = sample_levelset_2d(scene, 0, ((-1, 1), (-1, 1)), (64, 64))
        inside = phi < 0
        assert inside.any(axis=0).sum() > 2 * inside.any(axis=1).sum()


class TestSaveNpy:
    def test_round_trip(self):
        phi = np.random.rand(8, 8).astype(np.float64)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "sub", "phi.npy")
            save_npy(path, phi)
            loaded = np.load(path)
        npt.assert_array_equal(phi, loaded)

    def test_creates_parent_dirs(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "a", "b", "c.npy")
            save_npy(path, np.zeros((4, 4)))
            assert os.path.isfile(path)
