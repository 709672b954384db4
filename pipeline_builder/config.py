"""
Typed pipeline configuration using Pydantic.

A config is frozen: each wizard step derives a new value instead of mutating
shared state.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_ITERATIONS,
    DEFAULT_LEARNING_RATE,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MIN_SAMPLES_SPLIT,
    DEFAULT_TEST_SIZE,
)
from .scaling import ScalingMethod


class ModelType(str, Enum):
    """Classifier trained by the pipeline."""

    LOGISTIC = "logistic"
    DECISION_TREE = "decision_tree"


class ScalingScope(str, Enum):
    """Which rows the scaler statistics are computed from."""

    FULL_DATASET = "full_dataset"  # scale everything before the split
    TRAIN_ONLY = "train_only"  # fit on train rows, reuse the statistics on test rows


class PipelineConfig(BaseModel):
    """Complete configuration of one training run."""

    model_config = ConfigDict(frozen=True)

    preprocessing: ScalingMethod = Field(
        default=ScalingMethod.STANDARD, description="Feature scaling method"
    )
    scaling_scope: ScalingScope = Field(
        default=ScalingScope.FULL_DATASET,
        description="Rows used to compute scaling statistics",
    )
    test_size: float = Field(
        default=DEFAULT_TEST_SIZE, ge=0.0, le=1.0, description="Fraction of rows held out"
    )
    shuffle: bool = Field(default=True, description="Shuffle rows before splitting")
    random_state: int | None = Field(default=None, description="Seed for the shuffle")
    target_column: str | None = Field(default=None, description="Binary target column")
    feature_columns: tuple[str, ...] = Field(default=(), description="Input feature columns")
    model_type: ModelType = Field(default=ModelType.LOGISTIC, description="Classifier")
    learning_rate: float = Field(default=DEFAULT_LEARNING_RATE, gt=0.0)
    iterations: int = Field(default=DEFAULT_ITERATIONS, ge=0)
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=0)
    min_samples_split: int = Field(default=DEFAULT_MIN_SAMPLES_SPLIT, ge=0)

    @field_validator("feature_columns")
    @classmethod
    def validate_unique_features(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Reject a feature list naming the same column twice."""
        duplicates = sorted({c for c in v if v.count(c) > 1})
        if duplicates:
            msg = f"Feature columns must be unique, duplicated: {duplicates}"
            raise ValueError(msg)
        return v

    def evolve(self, **changes) -> "PipelineConfig":
        """New config with ``changes`` applied and validated like a fresh one."""
        return PipelineConfig.model_validate({**self.model_dump(warnings=False), **changes})

    def with_target(self, column: str) -> "PipelineConfig":
        """Select the target column and drop it from the feature list."""
        features = tuple(c for c in self.feature_columns if c != column)
        return self.evolve(target_column=column, feature_columns=features)

    def with_features(self, columns: list[str] | tuple[str, ...]) -> "PipelineConfig":
        """Replace the feature list; the target column is never a feature."""
        features = tuple(c for c in columns if c != self.target_column)
        return self.evolve(feature_columns=features)
