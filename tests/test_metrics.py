"""Tests for accuracy, confusion matrix and summaries."""

import numpy as np
import pytest
from sklearn import metrics as sk_metrics

from pipeline_builder.metrics import (
    accuracy,
    compute_classification_metrics,
    confusion_matrix,
    majority_baseline,
    summarize_coefficients,
)


def test_accuracy_half() -> None:
    assert accuracy([0, 0, 1, 1], [0, 1, 1, 0]) == 0.5


def test_accuracy_empty_is_zero() -> None:
    assert accuracy([], []) == 0.0


def test_accuracy_length_mismatch() -> None:
    with pytest.raises(ValueError, match="3 labels"):
        accuracy([0, 1, 1], [0, 1])


def test_confusion_matrix_two_by_two() -> None:
    matrix, labels = confusion_matrix([0, 0, 1, 1], [0, 1, 1, 0])
    assert labels == [0, 1]
    assert matrix.tolist() == [[1, 1], [1, 1]]


def test_confusion_matrix_rows_are_true_labels() -> None:
    matrix, labels = confusion_matrix([1, 1, 1, 0], [1, 0, 0, 0])
    assert labels == [0, 1]
    assert matrix.tolist() == [[1, 0], [2, 1]]


def test_confusion_matrix_adapts_to_observed_labels() -> None:
    matrix, labels = confusion_matrix([1, 1], [1, 1])
    assert labels == [1]
    assert matrix.tolist() == [[2]]


def test_confusion_matrix_uses_labels_from_both_vectors() -> None:
    matrix, labels = confusion_matrix([0, 0], [0, 1])
    assert labels == [0, 1]
    assert matrix.tolist() == [[1, 1], [0, 0]]


def test_confusion_matrix_empty() -> None:
    matrix, labels = confusion_matrix([], [])
    assert labels == []
    assert matrix.shape == (0, 0)


def test_confusion_matrix_matches_sklearn() -> None:
    rng = np.random.default_rng(1)
    y_true = rng.integers(0, 2, size=60)
    y_pred = rng.integers(0, 2, size=60)
    matrix, labels = confusion_matrix(y_true, y_pred)
    expected = sk_metrics.confusion_matrix(y_true, y_pred, labels=labels)
    np.testing.assert_array_equal(matrix, expected)


def test_classification_metrics() -> None:
    result = compute_classification_metrics([0, 1, 1, 1], [0, 1, 0, 1])
    assert result["accuracy"] == 0.75
    assert result["precision"] == 1.0
    assert result["recall"] == pytest.approx(2 / 3)
    assert result["labels"] == [0, 1]


def test_classification_metrics_without_positive_predictions() -> None:
    result = compute_classification_metrics([0, 0, 1], [0, 0, 0])
    assert result["precision"] == 0.0
    assert result["f1"] == 0.0


def test_majority_baseline() -> None:
    result = majority_baseline([1, 1, 0], [1, 0, 1, 1])
    assert result["accuracy"] == 0.75


def test_summarize_coefficients() -> None:
    top = summarize_coefficients(np.array([0.5, -2.0, 1.5]), ["a", "b", "c"], top_k=1)
    assert top["positive"].index.tolist() == ["c"]
    assert top["negative"].index.tolist() == ["b"]
