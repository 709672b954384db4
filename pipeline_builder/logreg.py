from __future__ import annotations

"""
Minimal logistic regression with full-batch gradient descent.
Inputs are used as given: scale them beforehand if the columns differ in range.
"""

import numpy as np

from .constants import (
    DECISION_THRESHOLD,
    DEFAULT_ITERATIONS,
    DEFAULT_LEARNING_RATE,
    LOSS_LOG_EVERY,
    SIGMOID_CLIP,
)
from .scaling import as_matrix
from .utils.logging import get_logger

log = get_logger(__name__)


def sigmoid(z: np.ndarray) -> np.ndarray:
    z = np.clip(z, -SIGMOID_CLIP, SIGMOID_CLIP)
    return 1.0 / (1.0 + np.exp(-z))


class LogisticRegressionGD:
    """
    Logistic regression trained with batch gradient descent.

    Weights and bias start at zero and are updated exactly ``max_iter`` times;
    there is no early stopping.
    """

    def __init__(
        self,
        lr: float = DEFAULT_LEARNING_RATE,
        max_iter: int = DEFAULT_ITERATIONS,
    ):
        self.lr = lr
        self.max_iter = max_iter
        self.coef_: np.ndarray | None = None
        self.intercept_: float = 0.0
        self.n_iter_: int = 0

    def fit(self, X, y):
        """Train the model with batch gradient descent."""
        X_arr = as_matrix(X)
        y_arr = np.asarray(y, dtype=float).reshape(-1)
        if len(X_arr) != len(y_arr):
            raise ValueError(f"X has {len(X_arr)} rows but y has {len(y_arr)} labels.")

        n_samples = len(X_arr)
        if n_samples == 0:
            # nothing to learn from: no features, zero bias
            self.coef_ = np.zeros(0)
            self.intercept_ = 0.0
            self.n_iter_ = 0
            return self

        weights = np.zeros(X_arr.shape[1])
        bias = 0.0

        for step in range(1, self.max_iter + 1):
            preds = sigmoid(X_arr @ weights + bias)
            error = preds - y_arr
            grad_w = (X_arr.T @ error) / n_samples
            grad_b = error.mean()

            weights = weights - self.lr * grad_w
            bias = bias - self.lr * grad_b

            if step % LOSS_LOG_EVERY == 0:
                loss = -np.mean(
                    y_arr * np.log(preds + 1e-12) + (1 - y_arr) * np.log(1 - preds + 1e-12)
                )
                log.debug("gd_step", step=step, loss=round(float(loss), 4))

        self.coef_ = weights
        self.intercept_ = float(bias)
        self.n_iter_ = self.max_iter
        return self

    def predict_proba(self, X) -> np.ndarray:
        """Return P(y=1) for each row in X."""
        if self.coef_ is None:
            raise RuntimeError("Model is not fitted.")
        return _probabilities(as_matrix(X), self.coef_, self.intercept_)

    def predict(self, X, threshold: float = DECISION_THRESHOLD) -> np.ndarray:
        """Binary predictions using the provided threshold."""
        X_arr = as_matrix(X)
        if self.coef_ is not None and self.coef_.size == 0 and X_arr.shape[1] > 0:
            # trained on zero rows: no score can be formed, every row falls to class 0
            return np.zeros(len(X_arr), dtype=int)
        return (self.predict_proba(X_arr) >= threshold).astype(int)


def _probabilities(X: np.ndarray, weights: np.ndarray, bias: float) -> np.ndarray:
    if len(X) == 0:
        return np.zeros(0)
    if X.shape[1] != weights.shape[0]:
        raise ValueError(f"Model has {weights.shape[0]} weights, X has {X.shape[1]} features.")
    return sigmoid(X @ weights + bias)


def fit_logistic(
    X_train,
    y_train,
    learning_rate: float = DEFAULT_LEARNING_RATE,
    iterations: int = DEFAULT_ITERATIONS,
) -> tuple[np.ndarray, float]:
    """Fit on ``X_train``/``y_train`` and return ``(weights, bias)``."""
    model = LogisticRegressionGD(lr=learning_rate, max_iter=iterations).fit(X_train, y_train)
    return model.coef_, model.intercept_


def predict_logistic(X, weights, bias: float) -> np.ndarray:
    """0/1 prediction per row: 1 when sigmoid(x . w + b) >= 0.5."""
    model = LogisticRegressionGD()
    model.coef_ = np.asarray(weights, dtype=float).reshape(-1)
    model.intercept_ = float(bias)
    return model.predict(X)
