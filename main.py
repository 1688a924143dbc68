import argparse
import logging

import matplotlib
import yaml

from hotel_cancellation.config import ProjectConfig
from hotel_cancellation.pipeline import run_pipeline

matplotlib.use("Agg")

parser = argparse.ArgumentParser()
parser.add_argument(
    "--config",
    action="store",
    default="project_config.yml",
    type=str,
    required=False,
)
parser.add_argument(
    "--output_dir",
    action="store",
    default=None,
    type=str,
    required=False,
)
parser.add_argument(
    "--log_level",
    action="store",
    default="INFO",
    type=str,
    required=False,
)

args = parser.parse_args()

# Logging
logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

# Load configuration
config = ProjectConfig.from_yaml(config_path=args.config)

logger.info("Configuration loaded:")
logger.info(yaml.dump(config.model_dump(), default_flow_style=False))

# Fit, evaluate and compare the models
results = run_pipeline(config, output_dir=args.output_dir)
logger.info(f"Model comparison:\n{results.to_string()}")
