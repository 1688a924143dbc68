import logging

from hotel_cancellation.config import ProjectConfig
from hotel_cancellation.data_processor import DataProcessor

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

# COMMAND ----------

# Load configuration
config = ProjectConfig.from_yaml(config_path="../project_config.yml")

# COMMAND ----------

# Load the raw hotel reservations export
data_processor = DataProcessor(config)
df = data_processor.clean(data_processor.load_data("../data/Hotel_Reservations.csv"))
df[config.target].value_counts(normalize=True)

# COMMAND ----------

# Create the fixed split once; every other notebook reads these files
train_set, test_set = data_processor.split_data(df, test_size=0.2, random_state=config.random_state)
print("Train set shape:", train_set.shape)
print("Test set shape:", test_set.shape)

# COMMAND ----------

data_processor.save_split(train_set=train_set, test_set=test_set)
