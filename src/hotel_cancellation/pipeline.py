import logging
from pathlib import Path

from hotel_cancellation.config import ProjectConfig
from hotel_cancellation.data_processor import DataProcessor
from hotel_cancellation.evaluation import compare_models, confusion_from_metrics, save_results
from hotel_cancellation.reservation_model import ReservationModel, tune_knn_neighbors
from hotel_cancellation.stepwise import StepwiseLogisticModel
from hotel_cancellation.tracking import log_model_run
from hotel_cancellation.utils import (
    plot_feature_importance,
    plot_knn_scores,
    plot_metric_comparison,
    plot_roc_curves,
    plot_stepwise_path,
    visualize_results,
)

logger = logging.getLogger(__name__)


def run_stepwise_logistic(config: ProjectConfig, X_train, y_train, X_test, y_test, output_dir: Path):
    model = StepwiseLogisticModel(config)
    model.train(X_train, y_train)
    metrics = model.evaluate(X_test, y_test)
    logger.info(f"Stepwise logistic regression evaluation completed: {metrics}")

    artifacts = [
        visualize_results(
            confusion_from_metrics(metrics),
            output_dir / "stepwise_logistic_confusion_matrix.png",
            title="Stepwise Logistic Regression",
        ),
        plot_stepwise_path(model.history, output_dir / "stepwise_path.png", criterion=config.stepwise.criterion),
    ]
    params = {"criterion": config.stepwise.criterion, "selected_features": ",".join(model.selected_features)}
    log_model_run(config, "stepwise_logistic", params, metrics, artifacts)
    return model, metrics


def run_random_forest(config: ProjectConfig, preprocessor, X_train, y_train, X_test, y_test, output_dir: Path):
    model = ReservationModel(preprocessor, config, classifier="random_forest")
    model.train(X_train, y_train)
    metrics = model.evaluate(X_test, y_test)
    logger.info(f"Random forest evaluation completed: {metrics}")

    feature_importance, feature_names = model.get_feature_importance()
    artifacts = [
        visualize_results(
            confusion_from_metrics(metrics), output_dir / "random_forest_confusion_matrix.png", title="Random Forest"
        ),
        plot_feature_importance(feature_importance, feature_names, output_dir / "random_forest_feature_importance.png"),
    ]
    log_model_run(
        config, "random_forest", config.parameters, metrics, artifacts, sk_model=model.model, X_sample=X_train.head()
    )
    return model, metrics


def run_knn(config: ProjectConfig, preprocessor, X_train, y_train, X_test, y_test, output_dir: Path):
    scores, best_k = tune_knn_neighbors(
        preprocessor,
        X_train,
        y_train,
        config.knn_neighbors,
        cv=config.cv_folds,
        random_state=config.random_state,
        parameters=config.knn_parameters,
    )
    parameters = {**config.knn_parameters, "n_neighbors": best_k}
    model = ReservationModel(preprocessor, config, classifier="knn", parameters=parameters)
    model.train(X_train, y_train)
    metrics = model.evaluate(X_test, y_test)
    logger.info(f"KNN (k={best_k}) evaluation completed: {metrics}")

    artifacts = [
        visualize_results(confusion_from_metrics(metrics), output_dir / "knn_confusion_matrix.png", title="KNN"),
        plot_knn_scores(scores, output_dir / "knn_accuracy_by_k.png", best_k=best_k),
    ]
    log_model_run(config, "knn", parameters, metrics, artifacts, sk_model=model.model, X_sample=X_train.head())
    return model, metrics


def run_pipeline(config: ProjectConfig, output_dir=None):
    """Fit and compare every model on the fixed split; returns the comparison table."""
    output_dir = Path(output_dir or config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    data_processor = DataProcessor(config)
    train_set, test_set = data_processor.load_split()
    X_train, y_train = data_processor.get_features_and_target(train_set)
    X_test, y_test = data_processor.get_features_and_target(test_set)
    logger.info("Data loaded.")
    logger.debug(f"Training set shape: {X_train.shape}, Test set shape: {X_test.shape}")

    preprocessor = data_processor.preprocess_data()

    models, results = {}, {}
    models["stepwise_logistic"], results["stepwise_logistic"] = run_stepwise_logistic(
        config, X_train, y_train, X_test, y_test, output_dir
    )
    models["random_forest"], results["random_forest"] = run_random_forest(
        config, preprocessor, X_train, y_train, X_test, y_test, output_dir
    )
    models["knn"], results["knn"] = run_knn(config, preprocessor, X_train, y_train, X_test, y_test, output_dir)

    table = compare_models(results)
    save_results(table, output_dir / "model_comparison.csv")
    plot_metric_comparison(table, output_dir / "model_comparison.png")
    if y_test.nunique() > 1:
        curves = {name: (y_test, model.predict_proba(X_test)) for name, model in models.items()}
        plot_roc_curves(curves, output_dir / "roc_curves.png")
    logger.info("Model comparison completed.")
    return table
