import logging

from hotel_cancellation.config import ProjectConfig
from hotel_cancellation.data_processor import DataProcessor
from hotel_cancellation.evaluation import confusion_from_metrics
from hotel_cancellation.stepwise import StepwiseLogisticModel
from hotel_cancellation.utils import plot_roc_curves, plot_stepwise_path, visualize_results

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

# COMMAND ----------

config = ProjectConfig.from_yaml(config_path="../project_config.yml")
output_dir = config.output_dir

data_processor = DataProcessor(config)
train_set, test_set = data_processor.load_split()
X_train, y_train = data_processor.get_features_and_target(train_set)
X_test, y_test = data_processor.get_features_and_target(test_set)

# COMMAND ----------

# Forward selection, one variable per step
model = StepwiseLogisticModel(config)
model.train(X_train, y_train)
model.history

# COMMAND ----------

print(model.summary())
model.get_coefficients().sort_values("p_value")

# COMMAND ----------

metrics = model.evaluate(X_test, y_test)
print(f"Accuracy: {metrics['accuracy']:.4f}")
print(f"Precision: {metrics['precision']:.4f}")
print(f"Recall: {metrics['recall']:.4f}")
print(f"F1: {metrics['f1']:.4f}")
print(f"AUC: {metrics['auc']:.4f}")

# COMMAND ----------

plot_stepwise_path(model.history, f"{output_dir}/stepwise_path.png", criterion=config.stepwise.criterion)
visualize_results(confusion_from_metrics(metrics), f"{output_dir}/stepwise_logistic_confusion_matrix.png")
plot_roc_curves({"stepwise_logistic": (y_test, model.predict_proba(X_test))}, f"{output_dir}/stepwise_roc.png")
