import logging

from hotel_cancellation.config import ProjectConfig
from hotel_cancellation.data_processor import DataProcessor
from hotel_cancellation.evaluation import confusion_from_metrics
from hotel_cancellation.reservation_model import ReservationModel, tune_knn_neighbors
from hotel_cancellation.utils import plot_knn_scores, plot_roc_curves, visualize_results

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

# COMMAND ----------

config = ProjectConfig.from_yaml(config_path="../project_config.yml")
output_dir = config.output_dir

data_processor = DataProcessor(config)
train_set, test_set = data_processor.load_split()
X_train, y_train = data_processor.get_features_and_target(train_set)
X_test, y_test = data_processor.get_features_and_target(test_set)
preprocessor = data_processor.preprocess_data()

# COMMAND ----------

# Choose k on the training set only
scores, best_k = tune_knn_neighbors(
    preprocessor,
    X_train,
    y_train,
    config.knn_neighbors,
    cv=config.cv_folds,
    random_state=config.random_state,
    parameters=config.knn_parameters,
)
plot_knn_scores(scores, f"{output_dir}/knn_accuracy_by_k.png", best_k=best_k)
scores

# COMMAND ----------

knn_parameters = {**config.knn_parameters, "n_neighbors": best_k}
model = ReservationModel(preprocessor, config, classifier="knn", parameters=knn_parameters)
model.train(X_train, y_train)
metrics = model.evaluate(X_test, y_test)
metrics

# COMMAND ----------

cm = confusion_from_metrics(metrics)
visualize_results(cm, f"{output_dir}/knn_confusion_matrix.png", title=f"KNN (k={best_k})")
plot_roc_curves({f"knn (k={best_k})": (y_test, model.predict_proba(X_test))}, f"{output_dir}/knn_roc.png")
