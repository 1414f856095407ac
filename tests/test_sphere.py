"""Точки на вкладених сферах з мітками часу."""
import numpy as np
import pytest

from cdt3d import sphere
from cdt3d.sphere import make_2_sphere


@pytest.mark.parametrize("radius, label", [(1.0, 1), (2.0, 2), (2.7, 2), (64.0, 64)])
def test_points_lie_on_sphere(rng, radius, label):
    points, labels = make_2_sphere(500, radius, rng=rng)
    assert points.shape == (500, 3)
    np.testing.assert_allclose(np.linalg.norm(points, axis=1), radius)
    assert labels.dtype.kind == "i"
    assert (labels == label).all()


def test_zero_count_is_empty(rng):
    points, labels = make_2_sphere(0, 1.0, rng=rng)
    assert points.shape == (0, 3)
    assert labels.shape == (0,)


def test_roughly_uniform(rng):
    points, _ = make_2_sphere(20000, 1.0, rng=rng)
    # центр мас рівномірного розподілу на сфері — у нулі, кожна координата має дисперсію 1/3
    np.testing.assert_allclose(points.mean(axis=0), 0.0, atol=0.03)
    np.testing.assert_allclose(points.var(axis=0), 1.0 / 3.0, atol=0.02)


def test_seeded_generators_are_reproducible():
    a, _ = make_2_sphere(10, 1.0, rng=np.random.default_rng(7))
    b, _ = make_2_sphere(10, 1.0, rng=np.random.default_rng(7))
    c, _ = make_2_sphere(10, 1.0, rng=np.random.default_rng(8))
    np.testing.assert_array_equal(a, b)
    assert not np.allclose(a, c)


def test_shared_generator_can_be_seeded():
    sphere.seed(3)
    a, _ = make_2_sphere(5, 2.0)
    sphere.seed(3)
    b, _ = make_2_sphere(5, 2.0)
    np.testing.assert_array_equal(a, b)


@pytest.mark.parametrize("count, radius", [(-1, 1.0), (4, 0.0), (4, -2.0)])
def test_bad_arguments(count, radius):
    with pytest.raises(ValueError):
        make_2_sphere(count, radius)


def test_output_logs(rng, caplog):
    with caplog.at_level("INFO"):
        make_2_sphere(4, 3.0, rng=rng, output=True)
    assert "Generating 4 random points" in caplog.text
