"""
Pipeline orchestration: turn a loaded dataset and a config into a trained
model and its evaluation.

The numeric steps themselves are stateless; this module owns the sequencing,
the timing and the single "training failed" error surfaced to callers.
"""

import time
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from pydantic import ValidationError

from .config import ModelType, PipelineConfig, ScalingScope
from .data_prep import Dataset, extract_features, extract_labels, train_test_split
from .logreg import LogisticRegressionGD
from .metrics import accuracy, compute_classification_metrics
from .scaling import ScalingMethod, apply_scaling, fit_scaler, scale
from .tree import DecisionTreeGini
from .utils.logging import get_logger, log_context

log = get_logger(__name__)


class PipelineError(Exception):
    """Base class for errors raised at the orchestration boundary."""


class ConfigurationError(PipelineError):
    """The run cannot start: invalid config, no dataset, no target or no features."""


class TrainingFailedError(PipelineError):
    """Any failure while scaling, splitting, fitting or evaluating."""


@dataclass
class TrainingResults:
    """
    Outcome of one pipeline run.

    Attributes:
        accuracy: Test-set accuracy.
        train_accuracy: Accuracy on the rows the model was fitted on.
        predictions: Test-set predictions, aligned with the test rows.
        confusion_matrix: Test-set confusion matrix, rows are true labels.
        labels: Label order of the confusion matrix axes.
        training_time_ms: Wall-clock duration of the whole run.
        model: The fitted LogisticRegressionGD or DecisionTreeGini.
    """

    accuracy: float
    train_accuracy: float
    predictions: np.ndarray
    confusion_matrix: np.ndarray
    labels: list[int]
    precision: float
    recall: float
    f1: float
    training_time_ms: int
    train_size: int
    test_size: int
    model: Any = None
    split: Any = field(default=None, repr=False)


def build_model(config: PipelineConfig):
    """Unfitted classifier for ``config.model_type``."""
    if config.model_type is ModelType.DECISION_TREE:
        return DecisionTreeGini(
            max_depth=config.max_depth, min_samples_split=config.min_samples_split
        )
    return LogisticRegressionGD(lr=config.learning_rate, max_iter=config.iterations)


def _validate(dataset: Dataset | None, config: PipelineConfig) -> None:
    if dataset is None:
        raise ConfigurationError("No dataset loaded.")
    if not config.target_column:
        raise ConfigurationError("No target column selected.")
    if not config.feature_columns:
        raise ConfigurationError("No feature columns selected.")
    if config.target_column in config.feature_columns:
        raise ConfigurationError("The target column cannot also be a feature.")


def _scale_and_split(X: np.ndarray, y: np.ndarray, config: PipelineConfig):
    method = config.preprocessing
    if method is ScalingMethod.NONE or config.scaling_scope is ScalingScope.FULL_DATASET:
        if method is not ScalingMethod.NONE:
            log.warning(
                "scaling_uses_test_rows",
                detail="statistics include the test rows; use scaling_scope=train_only to avoid leakage",
            )
        X = scale(X, method)
        return train_test_split(
            X, y, test_size=config.test_size, shuffle=config.shuffle, random_state=config.random_state
        )

    split = train_test_split(
        X, y, test_size=config.test_size, shuffle=config.shuffle, random_state=config.random_state
    )
    if len(split.X_train) > 0:
        params = fit_scaler(split.X_train, method)
        split.X_train = apply_scaling(split.X_train, params)
        split.X_test = apply_scaling(split.X_test, params)
    return split


def run_pipeline(dataset: Dataset | None, config: PipelineConfig) -> TrainingResults:
    """
    Extract, scale, split, fit and evaluate in one synchronous call.

    Raises:
        ConfigurationError: The config is invalid or the dataset, target or
            features are missing.
        TrainingFailedError: Anything went wrong after validation.
    """
    try:
        # configs built with model_copy(update=...) skip field validation
        config = PipelineConfig.model_validate(config.model_dump(warnings=False))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
    _validate(dataset, config)

    with log_context(model_type=config.model_type.value, preprocessing=config.preprocessing.value):
        log.info("training_started", rows=dataset.rows, features=len(config.feature_columns))
        start = time.perf_counter()
        try:
            X = extract_features(dataset.table, list(config.feature_columns))
            y = extract_labels(dataset.table, config.target_column)
            split = _scale_and_split(X, y, config)

            model = build_model(config).fit(split.X_train, split.y_train)
            predictions = model.predict(split.X_test)
            train_predictions = model.predict(split.X_train)

            summary = compute_classification_metrics(split.y_test, predictions)
            train_accuracy = accuracy(split.y_train, train_predictions)
        except Exception as exc:
            log.error("training_failed", error=str(exc), exc_info=True)
            raise TrainingFailedError(f"Training failed: {exc}") from exc

        elapsed_ms = int(round((time.perf_counter() - start) * 1000))
        results = TrainingResults(
            accuracy=summary["accuracy"],
            train_accuracy=train_accuracy,
            predictions=predictions,
            confusion_matrix=summary["confusion_matrix"],
            labels=summary["labels"],
            precision=summary["precision"],
            recall=summary["recall"],
            f1=summary["f1"],
            training_time_ms=elapsed_ms,
            train_size=len(split.X_train),
            test_size=len(split.X_test),
            model=model,
            split=split,
        )
        log.info(
            "training_completed",
            accuracy=round(results.accuracy, 4),
            train_accuracy=round(results.train_accuracy, 4),
            train_size=results.train_size,
            test_size=results.test_size,
            duration_ms=elapsed_ms,
        )
        return results


class PipelineSession:
    """
    In-memory state of one user session: the dataset, the current config and
    the last results. Every change replaces the config rather than editing it.
    """

    def __init__(self, config: PipelineConfig | None = None):
        self._initial_config = config or PipelineConfig()
        self.config = self._initial_config
        self.dataset: Dataset | None = None
        self.results: TrainingResults | None = None

    def load(self, dataset: Dataset) -> PipelineConfig:
        """Attach a dataset and preselect its default target and features."""
        self.dataset = dataset
        self.results = None
        target, features = dataset.default_columns()
        self.config = self.config.evolve(target_column=target, feature_columns=tuple(features))
        return self.config

    def update(self, **changes) -> PipelineConfig:
        """Apply validated changes; a new target is removed from the features."""
        target = changes.pop("target_column", None)
        self.config = self.config.evolve(**changes)
        if "feature_columns" in changes:
            self.config = self.config.with_features(self.config.feature_columns)
        if target is not None:
            self.config = self.config.with_target(target)
        return self.config

    def train(self) -> TrainingResults:
        self.results = run_pipeline(self.dataset, self.config)
        return self.results

    def reset(self) -> None:
        self.config = self._initial_config
        self.dataset = None
        self.results = None
