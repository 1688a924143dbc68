from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from sklearn.metrics import auc, roc_curve


def _save(output_path):
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(output_path, dpi=100)
    plt.close()
    return output_path


def visualize_results(cm, output_path, title="Confusion Matrix"):
    plt.figure(figsize=(10, 6))
    sns.heatmap(
        cm,
        annot=True,
        fmt="d",
        cmap="Blues",
        xticklabels=["Not canceled", "Canceled"],
        yticklabels=["Not canceled", "Canceled"],
    )
    plt.xlabel("Predicted Reservation")
    plt.ylabel("Actual Reservation")
    plt.title(title)
    return _save(output_path)


def plot_feature_importance(feature_importance, feature_names, output_path, top_n=10):
    feature_importance = np.asarray(feature_importance)
    feature_names = np.asarray(feature_names)
    top_n = min(top_n, len(feature_importance))

    plt.figure(figsize=(10, 6))
    sorted_idx = np.argsort(feature_importance)
    pos = np.arange(sorted_idx[-top_n:].shape[0]) + 0.5
    plt.barh(pos, feature_importance[sorted_idx[-top_n:]])
    plt.yticks(pos, feature_names[sorted_idx[-top_n:]])
    plt.title(f"Top {top_n} Feature Importance")
    return _save(output_path)


def plot_roc_curves(curves, output_path, title="ROC Curves"):
    """Plot one ROC curve per model; curves maps model name -> (y_true, y_proba)."""
    plt.figure(figsize=(8, 6))
    for name, (y_true, y_proba) in curves.items():
        fpr, tpr, _ = roc_curve(y_true, y_proba)
        plt.plot(fpr, tpr, label=f"{name} (AUC = {auc(fpr, tpr):.3f})")
    plt.plot([0, 1], [0, 1], linestyle="--", color="grey")
    plt.xlabel("False Positive Rate")
    plt.ylabel("True Positive Rate")
    plt.title(title)
    plt.legend(loc="lower right")
    return _save(output_path)


def plot_knn_scores(scores, output_path, best_k=None):
    plt.figure(figsize=(8, 5))
    plt.errorbar(scores["n_neighbors"], scores["mean_accuracy"], yerr=scores["std_accuracy"], marker="o", capsize=3)
    if best_k is not None:
        plt.axvline(best_k, linestyle="--", color="grey", label=f"best k = {best_k}")
        plt.legend()
    plt.xlabel("Number of neighbors (k)")
    plt.ylabel("Cross-validated accuracy")
    plt.title("KNN accuracy by k")
    return _save(output_path)


def plot_stepwise_path(history, output_path, criterion="aic"):
    labels = ["(intercept)"] + [str(variable) for variable in history["variable"].iloc[1:]]
    plt.figure(figsize=(10, 6))
    plt.plot(history["step"], history["score"], marker="o")
    plt.xticks(history["step"], labels, rotation=45, ha="right")
    plt.xlabel("Added variable")
    plt.ylabel(criterion.upper())
    plt.title("Forward stepwise selection path")
    return _save(output_path)


def plot_metric_comparison(table, output_path, metrics=("accuracy", "precision", "recall", "f1", "auc")):
    data = table[list(metrics)].reset_index().melt(id_vars="model", var_name="metric", value_name="value")
    plt.figure(figsize=(10, 6))
    sns.barplot(data=data, x="metric", y="value", hue="model")
    plt.ylim(0, 1)
    plt.title("Model comparison")
    return _save(output_path)
