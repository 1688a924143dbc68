import logging

from hotel_cancellation.config import ProjectConfig
from hotel_cancellation.pipeline import run_pipeline

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

# COMMAND ----------

config = ProjectConfig.from_yaml(config_path="../project_config.yml")

# COMMAND ----------

# Stepwise logistic regression, random forest and KNN on the same fixed split
results = run_pipeline(config)
results
