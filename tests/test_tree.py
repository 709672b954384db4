"""Tests for the Gini decision tree."""

import numpy as np
import pytest

from pipeline_builder.tree import (
    DecisionTreeGini,
    Leaf,
    Split,
    describe_tree,
    fit_tree,
    gini_impurity,
    majority_label,
    predict_tree,
)


class TestHelpers:
    def test_gini_of_pure_subset(self) -> None:
        assert gini_impurity(np.array([1, 1, 1])) == 0.0

    def test_gini_of_even_subset(self) -> None:
        assert gini_impurity(np.array([0, 1, 0, 1])) == pytest.approx(0.5)

    def test_gini_of_empty_subset(self) -> None:
        assert gini_impurity(np.array([], dtype=int)) == 0.0

    def test_majority_label(self) -> None:
        assert majority_label(np.array([0, 1, 1, 0, 1])) == 1

    def test_majority_tie_goes_to_first_seen(self) -> None:
        assert majority_label(np.array([1, 0, 0, 1])) == 1
        assert majority_label(np.array([0, 1, 1, 0])) == 0


class TestFit:
    """Tests for tree construction."""

    def test_single_label_gives_leaf(self) -> None:
        X = np.array([[1.0, 5.0], [2.0, 3.0], [9.0, 0.0]])
        tree = fit_tree(X, np.array([1, 1, 1]))
        assert tree == Leaf(1)
        np.testing.assert_array_equal(predict_tree([[100.0, -100.0], [0.0, 0.0]], tree), [1, 1])

    def test_max_depth_zero_is_majority_leaf(self, separable_data) -> None:
        X, y = separable_data
        y = y.copy()
        y[:10] = 1  # 60 ones, 40 zeros
        tree = fit_tree(X, y, max_depth=0)
        assert tree == Leaf(1)

    def test_threshold_is_midpoint(self) -> None:
        X = np.array([[1.0], [2.0], [4.0], [6.0]])
        y = np.array([0, 0, 1, 1])
        tree = fit_tree(X, y)
        assert tree == Split(feature=0, threshold=3.0, left=Leaf(0), right=Leaf(1))

    def test_picks_informative_feature(self) -> None:
        X = np.array([[5.0, 0.0], [5.0, 1.0], [6.0, 0.0], [6.0, 1.0]])
        y = np.array([0, 1, 0, 1])
        tree = fit_tree(X, y)
        assert isinstance(tree, Split)
        assert tree.feature == 1
        assert tree.threshold == 0.5

    def test_no_gain_gives_majority_leaf(self) -> None:
        X = np.array([[1.0], [1.0], [1.0]])
        y = np.array([0, 1, 1])
        assert fit_tree(X, y) == Leaf(1)

    def test_min_samples_split_stops_growth(self) -> None:
        X = np.array([[1.0], [2.0], [3.0]])
        y = np.array([0, 1, 1])
        assert fit_tree(X, y, min_samples_split=4) == Leaf(1)

    def test_xor_has_no_greedy_split(self) -> None:
        # every single-axis split leaves both sides half 0 and half 1
        X = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]] * 3)
        y = np.array([0, 1, 1, 0] * 3)
        model = DecisionTreeGini(max_depth=2).fit(X, y)
        assert model.tree_ == Leaf(0)
        assert model.depth == 0

    def test_fits_training_data(self, separable_data) -> None:
        X, y = separable_data
        model = DecisionTreeGini().fit(X, y)
        assert (model.predict(X) == y).mean() == 1.0
        assert model.n_leaves >= 2

    def test_depth_never_exceeds_limit(self) -> None:
        rng = np.random.default_rng(0)
        X = rng.normal(size=(80, 3))
        y = rng.integers(0, 2, size=80)
        model = DecisionTreeGini(max_depth=3).fit(X, y)
        assert model.depth <= 3

    def test_empty_training_set_raises(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            fit_tree([], [])

    def test_predict_before_fit_raises(self) -> None:
        with pytest.raises(RuntimeError, match="not fitted"):
            DecisionTreeGini().predict([[1.0]])


class TestPredict:
    def test_boundary_goes_left(self) -> None:
        tree = Split(feature=0, threshold=3.0, left=Leaf(0), right=Leaf(1))
        np.testing.assert_array_equal(predict_tree([[3.0], [3.0001], [-1.0]], tree), [0, 1, 0])

    def test_prediction_is_repeatable(self, separable_data) -> None:
        X, y = separable_data
        tree = fit_tree(X, y)
        np.testing.assert_array_equal(predict_tree(X, tree), predict_tree(X, tree))

    def test_empty_matrix(self) -> None:
        assert predict_tree([], Leaf(0)).shape == (0,)


def test_describe_tree_uses_feature_names() -> None:
    tree = Split(feature=1, threshold=2.5, left=Leaf(0), right=Leaf(1))
    text = describe_tree(tree, ["age", "income"])
    assert text.splitlines() == [
        "if income <= 2.5:",
        "    predict 0",
        "else:  # income > 2.5",
        "    predict 1",
    ]
