"""Pytest configuration and shared fixtures."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import structlog
from structlog.testing import capture_logs

from pipeline_builder.data_prep import Dataset, infer_column_types
from pipeline_builder.utils.logging import configure_logging


@pytest.fixture
def separable_data() -> tuple[np.ndarray, np.ndarray]:
    """Two well-separated 2-D clusters labelled 0 and 1."""
    rng = np.random.default_rng(7)
    negatives = rng.normal(loc=[-2.0, -2.0], scale=0.5, size=(50, 2))
    positives = rng.normal(loc=[2.0, 2.0], scale=0.5, size=(50, 2))
    X = np.vstack([negatives, positives])
    y = np.array([0] * 50 + [1] * 50)
    return X, y


@pytest.fixture
def sample_table() -> pd.DataFrame:
    """Raw string table as read from a CSV upload."""
    return pd.DataFrame(
        {
            "age": ["23", "35", "47", "52", "61", "19", "44", "38"],
            "income": ["1.5", "2.0", "", "3.1", "4.2", "1.1", "n/a", "2.7"],
            "city": ["Oslo", "Rome", "Oslo", "Lima", "Rome", "Oslo", "Lima", "Rome"],
            "bought": ["0", "0", "1", "1", "1", "0", "1", "0.7"],
        }
    )


@pytest.fixture
def sample_dataset(sample_table: pd.DataFrame) -> Dataset:
    return Dataset(
        table=sample_table,
        column_types=infer_column_types(sample_table),
        file_name="sample.csv",
    )


@pytest.fixture
def separable_csv(tmp_path: Path, separable_data) -> Path:
    """Separable clusters written as a CSV with a categorical id column."""
    X, y = separable_data
    frame = pd.DataFrame(
        {
            "id": [f"row-{i}" for i in range(len(y))],
            "x1": X[:, 0],
            "x2": X[:, 1],
            "label": y,
        }
    )
    path = tmp_path / "clusters.csv"
    frame.to_csv(path, index=False)
    return path


@pytest.fixture
def log_events():
    """Every structlog event emitted during the test, DEBUG included."""
    configure_logging(level="DEBUG")
    with capture_logs() as events:
        yield events
    structlog.reset_defaults()
