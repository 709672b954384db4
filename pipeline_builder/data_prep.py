from __future__ import annotations

"""
Data preparation: reading a tabular file, tagging its columns, extracting the
numeric feature matrix and binary labels, and the train/test split.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd

from .constants import (
    DEFAULT_TEST_SIZE,
    LABEL_THRESHOLD,
    NUMERIC_SAMPLE_SHARE,
    SUPPORTED_EXTENSIONS,
    TYPE_SAMPLE_ROWS,
)
from .scaling import as_matrix
from .utils.logging import get_logger

log = get_logger(__name__)

NUMERIC = "numeric"
CATEGORICAL = "categorical"


class DatasetError(ValueError):
    """Raised when an input file cannot be turned into a dataset."""


@dataclass
class SplitResult:
    """Index-aligned train/test subsets produced by :func:`train_test_split`."""

    X_train: np.ndarray
    X_test: np.ndarray
    y_train: np.ndarray
    y_test: np.ndarray
    train_indices: np.ndarray
    test_indices: np.ndarray

    def __iter__(self):
        # allows ``X_train, X_test, y_train, y_test = train_test_split(...)``
        return iter((self.X_train, self.X_test, self.y_train, self.y_test))


@dataclass
class Dataset:
    """A loaded table plus the numeric/categorical tag of every column."""

    table: pd.DataFrame
    column_types: dict[str, str]
    file_name: str = ""

    @property
    def rows(self) -> int:
        return len(self.table)

    @property
    def numeric_columns(self) -> list[str]:
        return [c for c, kind in self.column_types.items() if kind == NUMERIC]

    def default_columns(self) -> tuple[str | None, list[str]]:
        """Last numeric column is the target, the other numeric columns are features."""
        numeric = self.numeric_columns
        if not numeric:
            return None, []
        return numeric[-1], numeric[:-1]


def _is_number(value) -> bool:
    if value is None or (isinstance(value, str) and value == ""):
        return False
    if isinstance(value, str) and value.strip() == "":
        # a blank-but-not-empty cell reads as 0
        return True
    parsed = pd.to_numeric(pd.Series([value], dtype=object), errors="coerce")
    return bool(parsed.notna().iloc[0])


def infer_column_types(table: pd.DataFrame, sample_rows: int = TYPE_SAMPLE_ROWS) -> dict[str, str]:
    """Tag a column numeric when most of its first values parse as numbers."""
    sample = table.head(sample_rows)
    column_types = {}
    for column in table.columns:
        values = sample[column].tolist()
        numeric_count = sum(_is_number(v) for v in values)
        is_numeric = numeric_count >= len(values) * NUMERIC_SAMPLE_SHARE
        column_types[str(column)] = NUMERIC if is_numeric else CATEGORICAL
    return column_types


def load_table(path: Path | str) -> Dataset:
    """
    Read a CSV or Excel file into a :class:`Dataset`.

    CSV cells are kept as strings (empty cells stay ``""``) so that type
    inference sees the raw values; Excel files use the first sheet.
    """
    path = Path(path)
    extension = path.suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise DatasetError("Unsupported file format. Please upload a CSV or Excel file.")

    try:
        if extension == ".csv":
            table = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
        else:
            table = pd.read_excel(path, sheet_name=0)
    except pd.errors.EmptyDataError as exc:
        raise DatasetError("The file appears to be empty") from exc
    except (OSError, ValueError) as exc:
        raise DatasetError(f"Failed to read file {path.name}: {exc}") from exc

    if table.empty:
        raise DatasetError("The file appears to be empty")

    table.columns = [str(c) for c in table.columns]
    column_types = infer_column_types(table)
    dataset = Dataset(table=table, column_types=column_types, file_name=path.name)
    log.info(
        "dataset_loaded",
        file=path.name,
        rows=dataset.rows,
        columns=len(column_types),
        numeric_columns=len(dataset.numeric_columns),
    )
    return dataset


def _coerce_numeric(series: pd.Series) -> pd.Series:
    as_text = series.map(lambda v: v.strip() if isinstance(v, str) else v)
    values = pd.to_numeric(as_text, errors="coerce").replace([np.inf, -np.inf], np.nan)
    return values.fillna(0.0).astype(float)


def extract_features(table: pd.DataFrame, columns: Sequence[str]) -> np.ndarray:
    """Numeric matrix of the chosen columns; unparseable, missing or infinite cells become 0."""
    missing = [c for c in columns if c not in table.columns]
    if missing:
        raise KeyError(f"Unknown feature column(s): {missing}")
    if not columns:
        return np.zeros((len(table), 0))
    return np.column_stack([_coerce_numeric(table[c]).to_numpy() for c in columns])


def extract_labels(table: pd.DataFrame, column: str, threshold: float = LABEL_THRESHOLD) -> np.ndarray:
    """Binary label vector: values above ``threshold`` are 1, everything else 0."""
    if column not in table.columns:
        raise KeyError(f"Unknown target column: {column!r}")
    values = _coerce_numeric(table[column]).to_numpy()
    return (values > threshold).astype(int)


def train_test_split(
    X,
    y,
    test_size: float = DEFAULT_TEST_SIZE,
    shuffle: bool = True,
    random_state: int | None = None,
) -> SplitResult:
    """
    Partition rows into a leading train block and a trailing test block.

    With ``shuffle`` the row order is first permuted by Fisher-Yates; the
    first ``floor(n * (1 - test_size))`` indices form the train set.
    """
    X_arr = as_matrix(X)
    y_arr = np.asarray(y, dtype=int).reshape(-1)
    if len(X_arr) != len(y_arr):
        raise ValueError(f"X has {len(X_arr)} rows but y has {len(y_arr)} labels.")
    if not 0.0 <= test_size <= 1.0:
        raise ValueError(f"test_size must be within [0, 1], got {test_size}.")

    n_rows = len(X_arr)
    indices = np.arange(n_rows)
    if shuffle:
        rng = np.random.default_rng(random_state)
        for i in range(n_rows - 1, 0, -1):
            j = int(rng.integers(0, i + 1))
            indices[i], indices[j] = indices[j], indices[i]

    split_at = int(np.floor(n_rows * (1 - test_size)))
    train_idx, test_idx = indices[:split_at], indices[split_at:]
    return SplitResult(
        X_train=X_arr[train_idx],
        X_test=X_arr[test_idx],
        y_train=y_arr[train_idx],
        y_test=y_arr[test_idx],
        train_indices=train_idx,
        test_indices=test_idx,
    )
