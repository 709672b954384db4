from __future__ import annotations

"""
Metric helpers: accuracy, an adaptive confusion matrix, and classification
summaries for the results report.
"""

import numpy as np
import pandas as pd
from sklearn import metrics

from .tree import majority_label


def _as_labels(values) -> np.ndarray:
    return np.asarray(values, dtype=int).reshape(-1)


def _check_aligned(y_true: np.ndarray, y_pred: np.ndarray) -> None:
    if len(y_true) != len(y_pred):
        raise ValueError(f"y_true has {len(y_true)} labels but y_pred has {len(y_pred)}.")


def accuracy(y_true, y_pred) -> float:
    """Fraction of positions where the prediction matches; 0.0 for empty input."""
    y_true, y_pred = _as_labels(y_true), _as_labels(y_pred)
    _check_aligned(y_true, y_pred)
    if y_true.size == 0:
        return 0.0
    return float(np.mean(y_true == y_pred))


def confusion_matrix(y_true, y_pred) -> tuple[np.ndarray, list[int]]:
    """
    Count matrix indexed by every label seen in either vector, sorted ascending.

    Cell ``[i, j]`` counts rows whose true label is ``labels[i]`` and predicted
    label is ``labels[j]``. The shape follows the labels that actually occur,
    so a run where only one class appears yields a 1x1 matrix.
    """
    y_true, y_pred = _as_labels(y_true), _as_labels(y_pred)
    _check_aligned(y_true, y_pred)
    labels = sorted(set(y_true.tolist()) | set(y_pred.tolist()))
    position = {label: i for i, label in enumerate(labels)}
    matrix = np.zeros((len(labels), len(labels)), dtype=int)
    for actual, predicted in zip(y_true.tolist(), y_pred.tolist()):
        matrix[position[actual], position[predicted]] += 1
    return matrix, labels


def compute_classification_metrics(y_true, y_pred) -> dict:
    """Accuracy, precision, recall, F1 and the confusion matrix for 0/1 predictions."""
    y_true, y_pred = _as_labels(y_true), _as_labels(y_pred)
    cm, labels = confusion_matrix(y_true, y_pred)
    if y_true.size == 0:
        precision = recall = f1 = 0.0
    else:
        precision, recall, f1, _ = metrics.precision_recall_fscore_support(
            y_true, y_pred, average="binary", pos_label=1, zero_division=0
        )
    return {
        "accuracy": accuracy(y_true, y_pred),
        "precision": float(precision),
        "recall": float(recall),
        "f1": float(f1),
        "confusion_matrix": cm,
        "labels": labels,
    }


def majority_baseline(y_train, y_test) -> dict:
    """
    Predicts the majority class of the training labels for every test row.
    """
    y_train, y_test = _as_labels(y_train), _as_labels(y_test)
    label = majority_label(y_train) if y_train.size else 0
    preds = np.full_like(y_test, label)
    return compute_classification_metrics(y_test, preds)


def summarize_coefficients(
    coef: np.ndarray, feature_names: list[str], top_k: int = 8
) -> dict[str, pd.Series]:
    coef_series = pd.Series(coef, index=feature_names, dtype=float)
    coef_sorted = coef_series.sort_values()
    return {
        "positive": coef_sorted.tail(top_k)[::-1],
        "negative": coef_sorted.head(top_k),
    }
