"""Classification metrics and the cross-model result table."""

import logging

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    confusion_matrix,
    f1_score,
    precision_score,
    recall_score,
    roc_auc_score,
)

from hotel_cancellation.data_processor import write_table

logger = logging.getLogger(__name__)

METRIC_COLUMNS = ["accuracy", "precision", "recall", "f1", "auc", "tn", "fp", "fn", "tp"]


def compute_classification_metrics(y_true, y_pred, y_proba=None) -> dict:
    """
    Compute accuracy, precision, recall, F1 and AUC for a binary classifier.

    AUC is NaN when no probabilities are given or when y_true holds a single class.
    """
    y_true = np.asarray(y_true).astype(int)
    y_pred = np.asarray(y_pred).astype(int)
    if len(y_true) != len(y_pred):
        raise ValueError(f"y_true and y_pred differ in length: {len(y_true)} != {len(y_pred)}")

    auc = float("nan")
    if y_proba is not None:
        y_proba = np.asarray(y_proba, dtype=float)
        if len(y_proba) != len(y_true):
            raise ValueError(f"y_true and y_proba differ in length: {len(y_true)} != {len(y_proba)}")
        if len(np.unique(y_true)) < 2:
            logger.warning("AUC is undefined when only one class is present in y_true")
        else:
            auc = float(roc_auc_score(y_true, y_proba))

    tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel()
    return {
        "accuracy": float(accuracy_score(y_true, y_pred)),
        "precision": float(precision_score(y_true, y_pred, zero_division=0)),
        "recall": float(recall_score(y_true, y_pred, zero_division=0)),
        "f1": float(f1_score(y_true, y_pred, zero_division=0)),
        "auc": auc,
        "tn": int(tn),
        "fp": int(fp),
        "fn": int(fn),
        "tp": int(tp),
    }


def confusion_from_metrics(metrics: dict) -> np.ndarray:
    return np.array([[metrics["tn"], metrics["fp"]], [metrics["fn"], metrics["tp"]]])


def compare_models(results: dict) -> pd.DataFrame:
    """Build the model comparison table, best AUC first."""
    if not results:
        raise ValueError("No model results to compare")
    table = pd.DataFrame.from_dict(results, orient="index").reindex(columns=METRIC_COLUMNS)
    table.index.name = "model"
    return table.sort_values("auc", ascending=False, na_position="last", kind="stable")


def save_results(table: pd.DataFrame, path):
    path = write_table(table, path, index=True)
    logger.info(f"Model comparison saved to {path}")
    return path
