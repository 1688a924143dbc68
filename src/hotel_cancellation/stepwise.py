"""
Greedy forward stepwise selection over statsmodels logistic regressions.

Starting from the intercept-only model, every step fits one Logit per remaining
candidate variable and keeps the candidate with the best criterion value, as long
as it improves on the current model. Categorical variables enter as a block of
dummy columns with the first level dropped.
"""

import logging

import numpy as np
import pandas as pd
import statsmodels.api as sm
from sklearn.exceptions import NotFittedError
from sklearn.metrics import accuracy_score, roc_auc_score
from statsmodels.tools.sm_exceptions import MissingDataError, PerfectSeparationError

from hotel_cancellation.config import ProjectConfig
from hotel_cancellation.evaluation import compute_classification_metrics

logger = logging.getLogger(__name__)

# criterion -> True when larger values are better
CRITERIA = {
    "aic": False,
    "bic": False,
    "log_likelihood": True,
    "auc": True,
    "accuracy": True,
}

HISTORY_COLUMNS = ["step", "variable", "score", "n_params", "improvement"]


class ForwardStepwiseSelector:
    def __init__(self, criterion="aic", max_steps=None, min_improvement=0.0, threshold=0.5, maxiter=100):
        if criterion not in CRITERIA:
            raise ValueError(f"Unknown criterion '{criterion}', expected one of {sorted(CRITERIA)}")
        if max_steps is not None and max_steps < 1:
            raise ValueError("max_steps must be positive")
        self.criterion = criterion
        self.max_steps = max_steps
        self.min_improvement = min_improvement
        self.threshold = threshold
        self.maxiter = maxiter

    @property
    def higher_is_better(self) -> bool:
        return CRITERIA[self.criterion]

    def fit(self, X: pd.DataFrame, y, candidates=None):
        if candidates is None:
            candidates = list(X.columns)
        unknown = [name for name in candidates if name not in X.columns]
        if unknown:
            raise KeyError(f"Candidate variables not in data: {unknown}")

        y = pd.Series(np.asarray(y, dtype=float), index=X.index, name="target")
        self._learn_encoding(X, candidates)

        selected = []
        remaining = list(candidates)
        result = self._fit_logit(y, self._design(X, selected))
        score = self._score(result, self._design(X, selected), y)
        history = [{"step": 0, "variable": None, "score": score, "n_params": 1, "improvement": np.nan}]
        logger.info(f"Stepwise start: intercept-only {self.criterion}={score:.4f}")

        while remaining and (self.max_steps is None or len(selected) < self.max_steps):
            best = None
            for variable in remaining:
                if not self._columns[variable]:
                    logger.warning(f"Skipping '{variable}': no usable values in training data")
                    continue
                design = self._design(X, selected + [variable])
                try:
                    candidate_result = self._fit_logit(y, design)
                except (np.linalg.LinAlgError, PerfectSeparationError, MissingDataError) as e:
                    logger.warning(f"Skipping '{variable}': logistic fit failed ({e})")
                    continue
                candidate_score = self._score(candidate_result, design, y)
                if not np.isfinite(candidate_score):
                    logger.warning(f"Skipping '{variable}': {self.criterion} is not finite")
                    continue
                if best is None or self._is_better(candidate_score, best[1]):
                    best = (variable, candidate_score, candidate_result, design.shape[1])

            if best is None:
                logger.info("Stepwise stopped: no candidate could be fitted")
                break
            variable, candidate_score, candidate_result, n_params = best
            improvement = self._improvement(candidate_score, score)
            if not improvement > self.min_improvement:
                logger.info(
                    f"Stepwise stopped: best candidate '{variable}' improves {self.criterion} by {improvement:.4f}"
                )
                break

            selected.append(variable)
            remaining.remove(variable)
            score, result = candidate_score, candidate_result
            history.append(
                {
                    "step": len(selected),
                    "variable": variable,
                    "score": score,
                    "n_params": n_params,
                    "improvement": improvement,
                }
            )
            logger.info(f"Step {len(selected)}: added '{variable}', {self.criterion}={score:.4f}")

        self.selected_ = selected
        self.result_ = result
        self.history_ = pd.DataFrame(history, columns=HISTORY_COLUMNS)
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        """Design matrix (constant plus encoded selected variables) for new data."""
        self._check_fitted()
        return self._design(X, self.selected_)

    def predict_proba(self, X: pd.DataFrame) -> np.ndarray:
        self._check_fitted()
        return np.asarray(self.result_.predict(self.transform(X)), dtype=float)

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        return (self.predict_proba(X) >= self.threshold).astype(int)

    def _check_fitted(self):
        if not hasattr(self, "result_"):
            raise NotFittedError("ForwardStepwiseSelector is not fitted yet. Call 'fit' first.")

    def _learn_encoding(self, X: pd.DataFrame, candidates):
        self._categorical = set()
        self._columns = {}
        self._medians = {}
        for variable in candidates:
            column = X[variable]
            if pd.api.types.is_numeric_dtype(column) or pd.api.types.is_bool_dtype(column):
                median = float(column.astype(float).median())
                self._medians[variable] = median
                # An all-missing column has nothing to fit
                self._columns[variable] = [] if np.isnan(median) else [variable]
            else:
                self._categorical.add(variable)
                dummies = pd.get_dummies(column, prefix=variable, drop_first=True, dtype=float)
                self._columns[variable] = list(dummies.columns)

    def _encode(self, X: pd.DataFrame, variable) -> pd.DataFrame:
        if variable in self._categorical:
            dummies = pd.get_dummies(X[variable], prefix=variable, dtype=float)
            # Levels unseen in training are all-zero rows, i.e. the reference level
            return dummies.reindex(columns=self._columns[variable], fill_value=0.0)
        return X[[variable]].astype(float).fillna(self._medians[variable])

    def _design(self, X: pd.DataFrame, variables) -> pd.DataFrame:
        blocks = [pd.DataFrame({"const": 1.0}, index=X.index)]
        blocks.extend(self._encode(X, variable) for variable in variables)
        return pd.concat(blocks, axis=1)

    def _fit_logit(self, y, design):
        return sm.Logit(y, design).fit(disp=0, maxiter=self.maxiter)

    def _score(self, result, design, y) -> float:
        if self.criterion == "aic":
            return float(result.aic)
        if self.criterion == "bic":
            return float(result.bic)
        if self.criterion == "log_likelihood":
            return float(result.llf)
        probabilities = result.predict(design)
        if self.criterion == "auc":
            return float(roc_auc_score(y, probabilities))
        return float(accuracy_score(y.astype(int), (np.asarray(probabilities) >= self.threshold).astype(int)))

    def _improvement(self, new_score, old_score) -> float:
        return new_score - old_score if self.higher_is_better else old_score - new_score

    def _is_better(self, new_score, old_score) -> bool:
        return self._improvement(new_score, old_score) > 0


class StepwiseLogisticModel:
    """Stepwise logistic regression with the same train/predict/evaluate surface as ReservationModel."""

    def __init__(self, config: ProjectConfig):
        self.config = config
        self.selector = ForwardStepwiseSelector(
            criterion=config.stepwise.criterion,
            max_steps=config.stepwise.max_steps,
            min_improvement=config.stepwise.min_improvement,
            threshold=config.stepwise.threshold,
        )

    def train(self, X_train, y_train):
        self.selector.fit(X_train, y_train, candidates=self.config.features)
        logger.info(f"Stepwise selected {len(self.selector.selected_)} variables: {self.selector.selected_}")

    def predict_proba(self, X):
        return self.selector.predict_proba(X)

    def predict(self, X):
        return self.selector.predict(X)

    def evaluate(self, X_test, y_test):
        y_proba = self.predict_proba(X_test)
        y_pred = (y_proba >= self.config.stepwise.threshold).astype(int)
        return compute_classification_metrics(y_test, y_pred, y_proba)

    @property
    def selected_features(self):
        return list(self.selector.selected_)

    @property
    def history(self) -> pd.DataFrame:
        return self.selector.history_

    def summary(self):
        return self.selector.result_.summary()

    def get_coefficients(self) -> pd.DataFrame:
        result = self.selector.result_
        return pd.DataFrame(
            {
                "coef": result.params,
                "std_err": result.bse,
                "p_value": result.pvalues,
                "odds_ratio": np.exp(result.params),
            }
        )
