import logging

from hotel_cancellation.config import ProjectConfig
from hotel_cancellation.data_processor import DataProcessor
from hotel_cancellation.evaluation import confusion_from_metrics
from hotel_cancellation.reservation_model import ReservationModel
from hotel_cancellation.tracking import log_model_run
from hotel_cancellation.utils import plot_feature_importance, plot_roc_curves, visualize_results

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

# COMMAND ----------

config = ProjectConfig.from_yaml(config_path="../project_config.yml")
output_dir = config.output_dir

data_processor = DataProcessor(config)
train_set, test_set = data_processor.load_split()
X_train, y_train = data_processor.get_features_and_target(train_set)
X_test, y_test = data_processor.get_features_and_target(test_set)

# COMMAND ----------

model = ReservationModel(data_processor.preprocess_data(), config, classifier="random_forest")
model.train(X_train, y_train)
metrics = model.evaluate(X_test, y_test)
metrics

# COMMAND ----------

## Visualizing Results
artifacts = [
    visualize_results(confusion_from_metrics(metrics), f"{output_dir}/random_forest_confusion_matrix.png"),
    plot_roc_curves({"random_forest": (y_test, model.predict_proba(X_test))}, f"{output_dir}/random_forest_roc.png"),
]

# COMMAND ----------

## Feature Importance
feature_importance, feature_names = model.get_feature_importance()
artifacts.append(
    plot_feature_importance(feature_importance, feature_names, f"{output_dir}/random_forest_feature_importance.png")
)

# COMMAND ----------

log_model_run(
    config, "random_forest", config.parameters, metrics, artifacts, sk_model=model.model, X_sample=X_train.head()
)
