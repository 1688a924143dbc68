"""Models predicting hotel booking cancellation: stepwise logistic regression, random forest and KNN."""

__version__ = "0.1.0"
