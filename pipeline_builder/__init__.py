"""
A small binary-classification pipeline: scale a numeric feature matrix, split
it into train/test rows, fit a from-scratch logistic regression or decision
tree, and report accuracy and a confusion matrix.

The numeric steps are plain functions over numpy arrays; pipeline.py
sequences them for a loaded dataset and main.py wraps everything in a CLI.
"""

__version__ = "0.1.0"

from .config import ModelType, PipelineConfig, ScalingScope
from .data_prep import Dataset, DatasetError, load_table, train_test_split
from .logreg import LogisticRegressionGD, fit_logistic, predict_logistic
from .metrics import (
    accuracy,
    compute_classification_metrics,
    confusion_matrix,
    summarize_coefficients,
)
from .pipeline import (
    ConfigurationError,
    PipelineError,
    PipelineSession,
    TrainingFailedError,
    TrainingResults,
    run_pipeline,
)
from .scaling import ScalingMethod, normalize, standardize
from .tree import DecisionTreeGini, describe_tree, fit_tree, predict_tree

__all__ = [
    "ModelType",
    "PipelineConfig",
    "ScalingScope",
    "ScalingMethod",
    "Dataset",
    "DatasetError",
    "load_table",
    "standardize",
    "normalize",
    "train_test_split",
    "LogisticRegressionGD",
    "fit_logistic",
    "predict_logistic",
    "DecisionTreeGini",
    "fit_tree",
    "predict_tree",
    "describe_tree",
    "accuracy",
    "confusion_matrix",
    "compute_classification_metrics",
    "summarize_coefficients",
    "run_pipeline",
    "PipelineSession",
    "TrainingResults",
    "PipelineError",
    "ConfigurationError",
    "TrainingFailedError",
]
