from typing import Tuple

import numpy as np

#: Variances at or below this magnitude are treated as zero.
VARIANCE_EPS = 1e-15
#: Centered values at or below this magnitude are snapped to zero.
CENTERED_EPS = 1e-8


def standardize(Y: np.ndarray) -> np.ndarray:
    """
    Scale a features x instances matrix so that every feature has approximately zero
    mean and unit variance. Returns a new array.

    Constant features (and features of a single instance) would divide by zero, so their
    denominator is set to one instead, which maps them to zeros. Centered values that are
    numerically zero are set to exactly zero.
    """
    Y = np.asarray(Y, dtype=float)
    assert Y.ndim == 2, f"Expected 2D array (features x instances), got shape {Y.shape}"
    if Y.shape[1] == 0:
        return Y.copy()

    mu = Y.mean(axis=1, keepdims=True)
    if Y.shape[1] > 1:
        sigma = Y.var(axis=1, ddof=1, keepdims=True)
    else:
        sigma = np.full_like(mu, np.nan)

    den = sigma.copy()
    den[~np.isfinite(den)] = 1.0
    den[np.abs(den) <= VARIANCE_EPS] = 1.0
    den[den == 0.0] = 1.0
    den = np.sqrt(den)

    nom = Y - mu
    nom[np.abs(nom) <= CENTERED_EPS] = 0.0
    return nom / den


def standardize_pair(x: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Standardize x and y jointly: concatenate along the instance axis, standardize once
    and split again, so both are scaled with the same statistics.
    """
    n = np.shape(x)[1]
    data = standardize(np.concatenate([x, y], axis=1))
    return data[:, :n], data[:, n:]
