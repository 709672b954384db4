from __future__ import annotations

"""
scikit-learn reference models fitted on the same split, to sanity-check the
from-scratch classifiers.
"""

import numpy as np
from sklearn.linear_model import LogisticRegression
from sklearn.tree import DecisionTreeClassifier

from .config import ModelType, PipelineConfig
from .metrics import compute_classification_metrics


def build_reference_model(config: PipelineConfig):
    """sklearn counterpart of the configured classifier."""
    if config.model_type is ModelType.DECISION_TREE:
        return DecisionTreeClassifier(
            criterion="gini",
            max_depth=max(config.max_depth, 1),
            min_samples_split=max(config.min_samples_split, 2),
            random_state=0,
        )
    return LogisticRegression(max_iter=5000)


def fit_reference(
    config: PipelineConfig,
    X_train: np.ndarray,
    y_train: np.ndarray,
    X_test: np.ndarray,
    y_test: np.ndarray,
) -> dict | None:
    """Test-set metrics of the sklearn model, or None when it cannot be fitted."""
    if len(np.unique(y_train)) < 2 or len(X_test) == 0 or X_train.shape[1] == 0:
        # sklearn refuses single-class training data
        return None
    model = build_reference_model(config)
    model.fit(X_train, y_train)
    return compute_classification_metrics(y_test, model.predict(X_test))
