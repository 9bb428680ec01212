import numpy as np
import pytest

from adsets.processing.normalization import standardize, standardize_pair


def test_standardize_gives_zero_mean_unit_variance():
    rng = np.random.default_rng(42)
    Y = rng.normal(loc=[[3.0], [-10.0], [100.0]], scale=[[2.0], [0.5], [30.0]], size=(3, 200))

    Z = standardize(Y)

    np.testing.assert_allclose(Z.mean(axis=1), 0.0, atol=1e-10)
    np.testing.assert_allclose(Z.var(axis=1, ddof=1), 1.0, rtol=1e-10)


def test_standardize_constant_feature_is_zero():
    Y = np.array([[5.0, 5.0, 5.0, 5.0], [1.0, 2.0, 3.0, 4.0]])

    Z = standardize(Y)

    np.testing.assert_array_equal(Z[0], np.zeros(4))
    assert np.all(np.isfinite(Z))


def test_standardize_snaps_numerical_noise():
    Y = np.array([[1.0, 1.0 + 1e-12, 1.0 - 1e-12]])

    Z = standardize(Y)

    np.testing.assert_array_equal(Z, np.zeros((1, 3)))


def test_standardize_single_instance():
    Z = standardize(np.array([[3.0], [4.0]]))

    np.testing.assert_array_equal(Z, np.zeros((2, 1)))


def test_standardize_empty_matrix():
    Z = standardize(np.empty((3, 0)))

    assert Z.shape == (3, 0)


def test_standardize_does_not_modify_input():
    Y = np.array([[1.0, 2.0, 3.0]])
    standardize(Y)

    np.testing.assert_array_equal(Y, [[1.0, 2.0, 3.0]])


def test_standardize_pair_uses_joint_statistics():
    x = np.array([[0.0, 1.0, 2.0]])
    y = np.array([[3.0, 4.0]])

    sx, sy = standardize_pair(x, y)
    joint = standardize(np.concatenate([x, y], axis=1))

    assert sx.shape == (1, 3)
    assert sy.shape == (1, 2)
    np.testing.assert_array_equal(np.concatenate([sx, sy], axis=1), joint)
    assert sx.mean() < 0 < sy.mean()


def test_standardize_rejects_vectors():
    with pytest.raises(AssertionError):
        standardize(np.arange(4.0))
