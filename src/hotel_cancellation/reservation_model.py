import logging

import numpy as np
import pandas as pd
from sklearn.base import clone
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.model_selection import StratifiedKFold, cross_val_score
from sklearn.neighbors import KNeighborsClassifier
from sklearn.pipeline import Pipeline

from hotel_cancellation.config import ProjectConfig
from hotel_cancellation.evaluation import compute_classification_metrics

logger = logging.getLogger(__name__)

CLASSIFIERS = {
    "random_forest": RandomForestClassifier,
    "knn": KNeighborsClassifier,
    "logistic": LogisticRegression,
}


def build_classifier(name, parameters=None):
    """Instantiate one of the supported sklearn classifiers with the given keyword arguments."""
    if name not in CLASSIFIERS:
        raise ValueError(f"Unknown classifier '{name}', expected one of {sorted(CLASSIFIERS)}")
    return CLASSIFIERS[name](**(parameters or {}))


class ReservationModel:
    def __init__(self, preprocessor, config: ProjectConfig, classifier="random_forest", parameters=None):
        self.config = config
        self.classifier_name = classifier
        if parameters is None:
            parameters = config.parameters if classifier == "random_forest" else {}
        self.parameters = parameters
        self.model = Pipeline(
            steps=[
                ("preprocessor", clone(preprocessor)),
                ("classifier", build_classifier(classifier, parameters)),
            ]
        )

    def train(self, X_train, y_train):
        self.model.fit(X_train, y_train)

    def predict(self, X):
        return self.model.predict(X)

    def predict_proba(self, X):
        """Probability of the positive class (cancellation)."""
        return self.model.predict_proba(X)[:, 1]

    def evaluate(self, X_test, y_test):
        y_pred = self.predict(X_test)
        y_proba = self.predict_proba(X_test)
        return compute_classification_metrics(y_test, y_pred, y_proba)

    def get_feature_importance(self):
        classifier = self.model.named_steps["classifier"]
        if not hasattr(classifier, "feature_importances_"):
            raise ValueError(f"Classifier '{self.classifier_name}' does not expose feature importances")
        feature_importance = classifier.feature_importances_
        feature_names = self.model.named_steps["preprocessor"].get_feature_names_out()
        return feature_importance, feature_names


def tune_knn_neighbors(preprocessor, X, y, neighbors, cv=5, random_state=42, parameters=None):
    """
    Pick the number of neighbors by stratified cross-validated accuracy on the training set.

    Returns a frame with the mean and std accuracy per k and the best k
    (highest mean accuracy, smallest k on ties).
    """
    neighbors = sorted(set(neighbors))
    if not neighbors or neighbors[0] < 1:
        raise ValueError("neighbors must hold at least one positive k")

    folds = StratifiedKFold(n_splits=cv, shuffle=True, random_state=random_state)
    rows = []
    for k in neighbors:
        knn_parameters = {**(parameters or {}), "n_neighbors": k}
        model = Pipeline(
            steps=[("preprocessor", preprocessor), ("classifier", build_classifier("knn", knn_parameters))]
        )
        scores = cross_val_score(model, X, y, cv=folds, scoring="accuracy")
        rows.append({"n_neighbors": k, "mean_accuracy": float(np.mean(scores)), "std_accuracy": float(np.std(scores))})
        logger.debug(f"k={k}: accuracy={np.mean(scores):.4f}")

    scores = pd.DataFrame(rows)
    best_k = int(scores.loc[scores["mean_accuracy"].idxmax(), "n_neighbors"])
    logger.info(f"Best number of neighbors: {best_k}")
    return scores, best_k
