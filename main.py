from __future__ import annotations

"""
CLI entrypoint: load a CSV/Excel file, train the chosen classifier on a binary
target column, and print test/train accuracy plus the confusion matrix.
"""

import argparse
import sys
from pathlib import Path

from pipeline_builder import (
    ConfigurationError,
    DatasetError,
    PipelineSession,
    TrainingFailedError,
    describe_tree,
    load_table,
    summarize_coefficients,
)
from pipeline_builder.config import ModelType, ScalingScope
from pipeline_builder.metrics import majority_baseline
from pipeline_builder.reference import fit_reference
from pipeline_builder.scaling import ScalingMethod
from pipeline_builder.utils.logging import configure_logging


def describe_dataset(session: PipelineSession):
    """Print a short summary of the table, its column types and the selection."""
    dataset = session.dataset
    config = session.config
    print(f"Dataset: {dataset.file_name} ({dataset.rows} rows, {len(dataset.column_types)} columns)")
    print(f"Numeric columns: {dataset.numeric_columns}")
    categorical = [c for c in dataset.column_types if c not in dataset.numeric_columns]
    if categorical:
        print(f"Categorical columns (ignored): {categorical}")
    print(f"Target: {config.target_column}, features: {list(config.feature_columns)}")


def print_metrics(label: str, metrics: dict):
    """Format a metric dict produced by compute_classification_metrics."""
    print(
        f"[{label}] Acc {metrics['accuracy']:.3f} | "
        f"Prec {metrics['precision']:.3f} | Rec {metrics['recall']:.3f} | "
        f"F1 {metrics['f1']:.3f}"
    )


def print_confusion_matrix(matrix, labels):
    """Rows are actual labels, columns predicted labels."""
    if len(labels) == 0:
        print("    Confusion matrix: (no test rows)")
        return
    header = "".join(f"{label:>8}" for label in labels)
    print(f"    Confusion matrix (actual \\ predicted):\n    {'':>8}{header}")
    for label, row in zip(labels, matrix.tolist()):
        cells = "".join(f"{cell:>8}" for cell in row)
        print(f"    {label:>8}{cells}")


def build_arg_parser():
    """CLI parser with knobs for preprocessing, split and model params."""
    parser = argparse.ArgumentParser(
        description="Train a binary classifier on a tabular dataset and report its accuracy."
    )
    parser.add_argument("data_path", type=Path, help="CSV or Excel file with a header row.")
    parser.add_argument("--target", help="Target column (default: last numeric column).")
    parser.add_argument(
        "--features",
        help="Comma-separated feature columns (default: all other numeric columns).",
    )
    parser.add_argument(
        "--preprocessing",
        choices=[m.value for m in ScalingMethod],
        default=ScalingMethod.STANDARD.value,
    )
    parser.add_argument(
        "--scaling-scope",
        choices=[s.value for s in ScalingScope],
        default=ScalingScope.FULL_DATASET.value,
        help="full_dataset scales before the split; train_only fits the scaler on train rows.",
    )
    parser.add_argument("--test-size", type=float, default=0.2)
    parser.add_argument("--no-shuffle", action="store_true", help="Keep file order for the split.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the shuffle.")
    parser.add_argument(
        "--model",
        choices=[m.value for m in ModelType],
        default=ModelType.LOGISTIC.value,
    )
    parser.add_argument("--lr", type=float, default=0.1, help="Learning rate for logistic GD.")
    parser.add_argument("--iterations", type=int, default=1000, help="Steps for logistic GD.")
    parser.add_argument("--max-depth", type=int, default=5, help="Decision tree depth limit.")
    parser.add_argument(
        "--min-samples-split", type=int, default=2, help="Smallest node the tree may split."
    )
    parser.add_argument(
        "--compare-sklearn",
        action="store_true",
        help="Also fit the scikit-learn counterpart on the same split.",
    )
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--json-logs", action="store_true")
    return parser


def config_from_args(args: argparse.Namespace) -> dict:
    """Config fields set explicitly on the command line."""
    changes = {
        "preprocessing": args.preprocessing,
        "scaling_scope": args.scaling_scope,
        "test_size": args.test_size,
        "shuffle": not args.no_shuffle,
        "random_state": args.seed,
        "model_type": args.model,
        "learning_rate": args.lr,
        "iterations": args.iterations,
        "max_depth": args.max_depth,
        "min_samples_split": args.min_samples_split,
    }
    if args.features:
        changes["feature_columns"] = [c.strip() for c in args.features.split(",") if c.strip()]
    if args.target:
        changes["target_column"] = args.target
    return changes


def report(session: PipelineSession, compare_sklearn: bool):
    results = session.train()
    config = session.config
    split = results.split

    print(f"Train size: {results.train_size}, Test size: {results.test_size}")
    print(f"Training time: {results.training_time_ms} ms")

    print_metrics("Majority baseline", majority_baseline(split.y_train, split.y_test))
    print_metrics(f"{config.model_type.value} (test)", {
        "accuracy": results.accuracy,
        "precision": results.precision,
        "recall": results.recall,
        "f1": results.f1,
    })
    print(f"    Train accuracy: {results.train_accuracy:.3f}")
    print_confusion_matrix(results.confusion_matrix, results.labels)

    if config.model_type is ModelType.DECISION_TREE:
        print(f"\nTree depth {results.model.depth}, leaves {results.model.n_leaves}:")
        print(describe_tree(results.model.tree_, list(config.feature_columns)))
    elif results.model.coef_.size:
        top = summarize_coefficients(results.model.coef_, list(config.feature_columns), top_k=5)
        print("\nTop positive weights:")
        print(top["positive"].to_string())
        print("\nTop negative weights:")
        print(top["negative"].to_string())
        print(f"Bias: {results.model.intercept_:.4f}")

    if compare_sklearn:
        reference = fit_reference(config, split.X_train, split.y_train, split.X_test, split.y_test)
        if reference is None:
            print("\nsklearn reference skipped (single-class train set or no test rows).")
        else:
            print()
            print_metrics("sklearn reference", reference)


def main(args: argparse.Namespace | None = None):
    """Load the file, apply CLI options and run one training."""
    args = args or build_arg_parser().parse_args()
    configure_logging(level=args.log_level, json_output=args.json_logs)

    session = PipelineSession()
    try:
        session.load(load_table(args.data_path))
        session.update(**config_from_args(args))
    except (DatasetError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    describe_dataset(session)
    try:
        report(session, args.compare_sklearn)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except TrainingFailedError as exc:
        print(f"Training failed: {exc.__cause__ or exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
