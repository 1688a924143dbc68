from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

PATH_FIELDS = ("train_path", "test_path", "output_dir")


class StepwiseConfig(BaseModel):
    criterion: Literal["aic", "bic", "auc", "accuracy", "log_likelihood"] = "aic"
    max_steps: Optional[int] = Field(default=None, gt=0)
    min_improvement: float = Field(default=0.0, ge=0.0)
    threshold: float = Field(default=0.5, gt=0.0, lt=1.0)


class TrackingConfig(BaseModel):
    enabled: bool = False
    tracking_uri: Optional[str] = None
    experiment_name: str = "hotel-cancellation"


class ProjectConfig(BaseModel):
    num_features: List[str]
    cat_features: List[str]
    target: str
    id: str
    positive_label: str = "Canceled"
    train_path: str
    test_path: str
    output_dir: str = "outputs"
    parameters: Dict[str, Any]
    knn_parameters: Dict[str, Any] = Field(default_factory=dict)
    knn_neighbors: List[int] = Field(default_factory=lambda: [3, 5, 7, 9, 11, 15, 21])
    stepwise: StepwiseConfig = Field(default_factory=StepwiseConfig)
    random_state: int = 42
    cv_folds: int = Field(default=5, ge=2)
    tracking: TrackingConfig = Field(default_factory=TrackingConfig)

    @field_validator("num_features", "cat_features")
    @classmethod
    def check_unique(cls, features: List[str]) -> List[str]:
        duplicated = sorted({name for name in features if features.count(name) > 1})
        if duplicated:
            raise ValueError(f"Duplicated features: {duplicated}")
        return features

    @field_validator("knn_neighbors")
    @classmethod
    def check_neighbors(cls, neighbors: List[int]) -> List[int]:
        if not neighbors or min(neighbors) < 1:
            raise ValueError("knn_neighbors must hold at least one positive k")
        return neighbors

    @model_validator(mode="after")
    def check_features(self) -> "ProjectConfig":
        if not self.num_features and not self.cat_features:
            raise ValueError("At least one numeric or categorical feature is required")
        overlap = set(self.num_features) & set(self.cat_features)
        if overlap:
            raise ValueError(f"Features listed as both numeric and categorical: {sorted(overlap)}")
        reserved = {self.target, self.id} & set(self.features)
        if reserved:
            raise ValueError(f"Target and id columns cannot be features: {sorted(reserved)}")
        return self

    @property
    def features(self) -> List[str]:
        return self.num_features + self.cat_features

    @classmethod
    def from_yaml(cls, config_path: str) -> "ProjectConfig":
        """Load configuration from a YAML file; relative data and output paths resolve against its directory."""
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f)

        base_dir = Path(config_path).resolve().parent
        for key in PATH_FIELDS:
            if key in config_dict and not Path(config_dict[key]).is_absolute():
                config_dict[key] = str(base_dir / config_dict[key])
        return cls(**config_dict)
