from __future__ import annotations

"""
Binary decision tree classifier grown by Gini-impurity gain.

Every internal node tests ``row[feature] <= threshold`` (left) against
``> threshold`` (right); leaves hold a single label. Trees are built once and
never modified afterwards.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from .constants import DEFAULT_MAX_DEPTH, DEFAULT_MIN_SAMPLES_SPLIT
from .scaling import as_matrix


@dataclass(frozen=True)
class Leaf:
    prediction: int


@dataclass(frozen=True)
class Split:
    feature: int
    threshold: float
    left: "TreeNode"
    right: "TreeNode"


TreeNode = Union[Leaf, Split]


def gini_impurity(y: np.ndarray) -> float:
    """1 - sum of squared class fractions; 0 for a pure or empty subset."""
    if y.size == 0:
        return 0.0
    _, counts = np.unique(y, return_counts=True)
    fractions = counts / y.size
    return float(1.0 - np.sum(fractions**2))


def majority_label(y: np.ndarray) -> int:
    """Most frequent label; on a tie the label met first in row order wins."""
    return int(Counter(y.tolist()).most_common(1)[0][0])


def _best_split(X: np.ndarray, y: np.ndarray) -> tuple[int | None, float, float]:
    """Return ``(feature, threshold, gain)`` of the best split, feature None if no gain."""
    n_rows, n_features = X.shape
    parent_impurity = gini_impurity(y)
    best_gain = 0.0
    best_feature: int | None = None
    best_threshold = 0.0

    for feature in range(n_features):
        col = X[:, feature]
        uniq = np.unique(col)
        if uniq.size < 2:
            continue
        thresholds = (uniq[:-1] + uniq[1:]) / 2

        for threshold in thresholds:
            left_mask = col <= threshold
            n_left = int(left_mask.sum())
            n_right = n_rows - n_left
            if n_left == 0 or n_right == 0:
                continue
            gain = (
                parent_impurity
                - (n_left / n_rows) * gini_impurity(y[left_mask])
                - (n_right / n_rows) * gini_impurity(y[~left_mask])
            )
            if gain > best_gain:
                best_gain = gain
                best_feature = feature
                best_threshold = float(threshold)

    return best_feature, best_threshold, best_gain


class DecisionTreeGini:
    """
    CART-style binary classifier with Gini impurity and majority-vote leaves.

    A node becomes a leaf when its labels are pure, when ``max_depth`` is
    reached, when it holds fewer than ``min_samples_split`` rows, or when no
    threshold improves impurity.
    """

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        min_samples_split: int = DEFAULT_MIN_SAMPLES_SPLIT,
    ):
        self.max_depth = max_depth
        self.min_samples_split = min_samples_split
        self.tree_: TreeNode | None = None

    def _build(self, X: np.ndarray, y: np.ndarray, depth: int) -> TreeNode:
        labels = np.unique(y)
        if labels.size == 1:
            return Leaf(int(labels[0]))
        if depth >= self.max_depth or len(y) < self.min_samples_split:
            return Leaf(majority_label(y))

        feature, threshold, _ = _best_split(X, y)
        if feature is None:
            return Leaf(majority_label(y))

        left_mask = X[:, feature] <= threshold
        return Split(
            feature=feature,
            threshold=threshold,
            left=self._build(X[left_mask], y[left_mask], depth + 1),
            right=self._build(X[~left_mask], y[~left_mask], depth + 1),
        )

    def fit(self, X, y):
        X_arr = as_matrix(X)
        y_arr = np.asarray(y, dtype=int).reshape(-1)
        if len(X_arr) != len(y_arr):
            raise ValueError(f"X has {len(X_arr)} rows but y has {len(y_arr)} labels.")
        if len(y_arr) == 0:
            raise ValueError("Cannot fit a decision tree on an empty training set.")
        self.tree_ = self._build(X_arr, y_arr, depth=0)
        return self

    def predict(self, X) -> np.ndarray:
        if self.tree_ is None:
            raise RuntimeError("Model is not fitted.")
        return predict_tree(X, self.tree_)

    @property
    def depth(self) -> int:
        if self.tree_ is None:
            raise RuntimeError("Model is not fitted.")
        return tree_depth(self.tree_)

    @property
    def n_leaves(self) -> int:
        if self.tree_ is None:
            raise RuntimeError("Model is not fitted.")
        return count_leaves(self.tree_)


def _predict_row(row: np.ndarray, node: TreeNode) -> int:
    while isinstance(node, Split):
        node = node.left if row[node.feature] <= node.threshold else node.right
    return node.prediction


def fit_tree(
    X_train,
    y_train,
    max_depth: int = DEFAULT_MAX_DEPTH,
    min_samples_split: int = DEFAULT_MIN_SAMPLES_SPLIT,
) -> TreeNode:
    """Grow a tree on the training rows and return its root node."""
    model = DecisionTreeGini(max_depth=max_depth, min_samples_split=min_samples_split)
    return model.fit(X_train, y_train).tree_


def predict_tree(X, tree: TreeNode) -> np.ndarray:
    """Walk ``tree`` for every row of ``X`` and collect the leaf labels."""
    X_arr = as_matrix(X)
    return np.array([_predict_row(row, tree) for row in X_arr], dtype=int)


def tree_depth(node: TreeNode) -> int:
    if isinstance(node, Leaf):
        return 0
    return 1 + max(tree_depth(node.left), tree_depth(node.right))


def count_leaves(node: TreeNode) -> int:
    if isinstance(node, Leaf):
        return 1
    return count_leaves(node.left) + count_leaves(node.right)


def describe_tree(node: TreeNode, feature_names: Sequence[str] | None = None, indent: str = "") -> str:
    """Render the tree as nested if/else rules, one line per node."""
    if isinstance(node, Leaf):
        return f"{indent}predict {node.prediction}"
    name = feature_names[node.feature] if feature_names else f"x[{node.feature}]"
    lines = [
        f"{indent}if {name} <= {node.threshold:.4g}:",
        describe_tree(node.left, feature_names, indent + "    "),
        f"{indent}else:  # {name} > {node.threshold:.4g}",
        describe_tree(node.right, feature_names, indent + "    "),
    ]
    return "\n".join(lines)
