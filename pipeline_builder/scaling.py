from __future__ import annotations

"""
Column-wise feature scaling (standardization and min-max normalization).

Statistics are computed per feature column. Degenerate columns never raise:
a zero standard deviation is replaced by 1 and a zero range maps the whole
column to 0.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np


class ScalingMethod(str, Enum):
    """Preprocessing applied to the feature matrix before splitting."""

    NONE = "none"
    STANDARD = "standard"
    MINMAX = "minmax"


@dataclass(frozen=True)
class ScalingParams:
    """Per-column statistics learned by :func:`fit_scaler`.

    ``offset`` is subtracted and the result divided by ``scale``. Columns in
    ``constant`` output 0 for every row.
    """

    method: ScalingMethod
    offset: np.ndarray
    scale: np.ndarray
    constant: np.ndarray

    @property
    def n_features(self) -> int:
        return int(self.offset.shape[0])


def as_matrix(X) -> np.ndarray:
    """Convert rows of numbers to a 2-D float array; ``[]`` becomes shape (0, 0)."""
    arr = np.asarray(X, dtype=float)
    if arr.ndim == 1 and arr.size == 0:
        return arr.reshape(0, 0)
    if arr.ndim != 2:
        raise ValueError(f"Expected a 2-D feature matrix, got {arr.ndim} dimension(s).")
    return arr


def fit_scaler(X, method: ScalingMethod | str = ScalingMethod.STANDARD) -> ScalingParams:
    """Learn column statistics for ``method`` from a non-empty matrix."""
    method = ScalingMethod(method)
    X_arr = as_matrix(X)
    if X_arr.shape[0] == 0:
        raise ValueError("Cannot fit scaling statistics on an empty matrix.")

    if method is ScalingMethod.STANDARD:
        mean = X_arr.mean(axis=0)
        std = X_arr.std(axis=0)
        std[std == 0] = 1.0
        return ScalingParams(method, mean, std, np.zeros(X_arr.shape[1], dtype=bool))

    if method is ScalingMethod.MINMAX:
        mins = X_arr.min(axis=0)
        value_range = X_arr.max(axis=0) - mins
        constant = value_range == 0
        value_range[constant] = 1.0
        return ScalingParams(method, mins, value_range, constant)

    n_features = X_arr.shape[1]
    return ScalingParams(
        method, np.zeros(n_features), np.ones(n_features), np.zeros(n_features, dtype=bool)
    )


def apply_scaling(X, params: ScalingParams) -> np.ndarray:
    """Scale ``X`` with previously fitted statistics."""
    X_arr = as_matrix(X)
    if X_arr.shape[0] == 0:
        return X_arr
    if X_arr.shape[1] != params.n_features:
        raise ValueError(
            f"Scaler was fitted on {params.n_features} features, got {X_arr.shape[1]}."
        )
    scaled = (X_arr - params.offset) / params.scale
    scaled[:, params.constant] = 0.0
    return scaled


def standardize(X) -> np.ndarray:
    """(x - mean) / std per column, population std, std of 0 treated as 1."""
    X_arr = as_matrix(X)
    if X_arr.shape[0] == 0:
        return X_arr
    return apply_scaling(X_arr, fit_scaler(X_arr, ScalingMethod.STANDARD))


def normalize(X) -> np.ndarray:
    """(x - min) / (max - min) per column; constant columns become 0."""
    X_arr = as_matrix(X)
    if X_arr.shape[0] == 0:
        return X_arr
    return apply_scaling(X_arr, fit_scaler(X_arr, ScalingMethod.MINMAX))


def scale(X, method: ScalingMethod | str) -> np.ndarray:
    """Dispatch to the scaler named by ``method``; ``none`` passes ``X`` through."""
    method = ScalingMethod(method)
    if method is ScalingMethod.STANDARD:
        return standardize(X)
    if method is ScalingMethod.MINMAX:
        return normalize(X)
    return as_matrix(X)
