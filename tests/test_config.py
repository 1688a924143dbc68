from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from hotel_cancellation.config import ProjectConfig

REPO_CONFIG = Path(__file__).resolve().parents[1] / "project_config.yml"


def _base_config(**overrides):
    config = {
        "num_features": ["lead_time", "avg_price_per_room"],
        "cat_features": ["market_segment_type"],
        "target": "booking_status",
        "id": "Booking_ID",
        "train_path": "data/train.xlsx",
        "test_path": "data/test.xlsx",
        "parameters": {"n_estimators": 10},
    }
    config.update(overrides)
    return config


class TestFromYaml:
    """Loading the YAML configuration."""

    def test_repository_config_loads(self):
        """The shipped project_config.yml is valid."""
        config = ProjectConfig.from_yaml(str(REPO_CONFIG))
        assert config.target == "booking_status"
        assert config.stepwise.criterion == "aic"
        assert "cancel_percentage" in config.num_features
        assert not config.tracking.enabled

    def test_relative_paths_resolve_against_config_directory(self, tmp_path):
        """Data and output paths are taken relative to the config file."""
        config_path = tmp_path / "conf" / "project_config.yml"
        config_path.parent.mkdir()
        config_path.write_text(yaml.safe_dump(_base_config(output_dir="/abs/outputs")))

        config = ProjectConfig.from_yaml(str(config_path))

        assert Path(config.train_path) == config_path.parent.resolve() / "data" / "train.xlsx"
        assert Path(config.test_path) == config_path.parent.resolve() / "data" / "test.xlsx"
        assert config.output_dir == "/abs/outputs"

    def test_defaults(self):
        config = ProjectConfig(**_base_config())
        assert config.positive_label == "Canceled"
        assert config.stepwise.threshold == 0.5
        assert config.stepwise.max_steps is None
        assert config.features == ["lead_time", "avg_price_per_room", "market_segment_type"]


class TestValidation:
    """Invalid configurations are rejected when loaded."""

    def test_overlapping_features(self):
        with pytest.raises(ValidationError):
            ProjectConfig(**_base_config(cat_features=["lead_time"]))

    def test_duplicated_feature(self):
        with pytest.raises(ValidationError):
            ProjectConfig(**_base_config(num_features=["lead_time", "lead_time"]))

    def test_target_used_as_feature(self):
        with pytest.raises(ValidationError):
            ProjectConfig(**_base_config(num_features=["lead_time", "booking_status"]))

    def test_no_features(self):
        with pytest.raises(ValidationError):
            ProjectConfig(**_base_config(num_features=[], cat_features=[]))

    def test_unknown_stepwise_criterion(self):
        with pytest.raises(ValidationError):
            ProjectConfig(**_base_config(stepwise={"criterion": "r2"}))

    @pytest.mark.parametrize("threshold", [0.0, 1.0, 1.5])
    def test_threshold_out_of_range(self, threshold):
        with pytest.raises(ValidationError):
            ProjectConfig(**_base_config(stepwise={"threshold": threshold}))

    def test_non_positive_max_steps(self):
        with pytest.raises(ValidationError):
            ProjectConfig(**_base_config(stepwise={"max_steps": 0}))

    def test_non_positive_neighbors(self):
        with pytest.raises(ValidationError):
            ProjectConfig(**_base_config(knn_neighbors=[0, 3]))
