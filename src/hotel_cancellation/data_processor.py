import logging
from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.impute import SimpleImputer
from sklearn.model_selection import train_test_split
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from hotel_cancellation.config import ProjectConfig

logger = logging.getLogger(__name__)

SPREADSHEET_SUFFIXES = {".xlsx"}


class DataProcessor:
    def __init__(self, config: ProjectConfig):
        self.config = config
        self.preprocessor = None

    def load_data(self, filepath) -> pd.DataFrame:
        """Read a booking table from a spreadsheet or CSV file."""
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Data file not found: {path}")
        suffix = path.suffix.lower()
        if suffix in SPREADSHEET_SUFFIXES:
            df = pd.read_excel(path)
        elif suffix == ".csv":
            df = pd.read_csv(path)
        else:
            raise ValueError(f"Unsupported data file type '{suffix}' for {path}")
        logger.info(f"Loaded {len(df)} rows from {path}")
        return df

    @staticmethod
    def add_derived_features(df: pd.DataFrame) -> pd.DataFrame:
        """Add stay length, party size and previous cancel percentage where the source columns exist."""
        if {"no_of_weekend_nights", "no_of_week_nights"} <= set(df.columns):
            df["total_nights"] = df["no_of_weekend_nights"] + df["no_of_week_nights"]
        if {"no_of_adults", "no_of_children"} <= set(df.columns):
            df["total_guests"] = df["no_of_adults"] + df["no_of_children"]
        if {"no_of_previous_cancellations", "no_of_previous_bookings_not_canceled"} <= set(df.columns):
            cancelled = df["no_of_previous_cancellations"]
            previous = cancelled + df["no_of_previous_bookings_not_canceled"]
            # Guests without booking history get 0 instead of NaN
            df["cancel_percentage"] = np.where(previous > 0, 100 * cancelled / previous.where(previous > 0, 1), 0.0)
        return df

    def encode_target(self, target: pd.Series) -> pd.Series:
        """Map the target to 1 for the positive label and 0 otherwise."""
        if pd.api.types.is_numeric_dtype(target):
            values = set(target.dropna().unique())
            if not values <= {0, 1}:
                raise ValueError(f"Numeric target '{target.name}' must only hold 0 and 1, got {sorted(values)}")
            return target.astype("Int64")
        labels = target.astype("string").str.strip()
        encoded = (labels == self.config.positive_label).astype("Int64")
        if labels.notna().any() and not (labels == self.config.positive_label).any():
            logger.warning(f"Positive label '{self.config.positive_label}' not found in '{target.name}'")
        return encoded

    def clean(self, df: pd.DataFrame) -> pd.DataFrame:
        """Derive features, encode the target and check that every configured column is present."""
        df = self.add_derived_features(df.copy())

        required = self.config.features + [self.config.target]
        missing = [column for column in required if column not in df.columns]
        if missing:
            raise KeyError(f"Missing required columns: {missing}")

        df[self.config.target] = self.encode_target(df[self.config.target])
        n_missing = int(df[self.config.target].isna().sum())
        if n_missing:
            logger.warning(f"Dropping {n_missing} rows without '{self.config.target}'")
            df = df[df[self.config.target].notna()].copy()
        df[self.config.target] = df[self.config.target].astype(int)

        for column in self.config.cat_features:
            df[column] = df[column].astype("object")
        return df.reset_index(drop=True)

    def load_split(self):
        """Load the fixed train and test sets."""
        train_set = self.clean(self.load_data(self.config.train_path))
        test_set = self.clean(self.load_data(self.config.test_path))
        logger.debug(f"Train set shape: {train_set.shape}, Test set shape: {test_set.shape}")
        return train_set, test_set

    def preprocess_data(self):
        # Create preprocessing steps for numeric and categorical data
        numeric_transformer = Pipeline(
            steps=[("imputer", SimpleImputer(strategy="median")), ("scaler", StandardScaler())]
        )

        categorical_transformer = Pipeline(
            steps=[
                ("imputer", SimpleImputer(strategy="constant", fill_value="missing")),
                ("onehot", OneHotEncoder(handle_unknown="ignore")),
            ]
        )

        # Combine preprocessing steps
        self.preprocessor = ColumnTransformer(
            transformers=[
                ("num", numeric_transformer, self.config.num_features),
                ("cat", categorical_transformer, self.config.cat_features),
            ]
        )
        return self.preprocessor

    def split_data(self, df: pd.DataFrame, test_size=0.2, random_state=42):
        """Split a cleaned booking table into training and test sets, stratified on the target."""
        train_set, test_set = train_test_split(
            df, test_size=test_size, random_state=random_state, stratify=df[self.config.target]
        )
        return train_set.reset_index(drop=True), test_set.reset_index(drop=True)

    def save_split(self, train_set: pd.DataFrame, test_set: pd.DataFrame):
        """Write the train and test sets to the configured paths."""
        for frame, filepath in ((train_set, self.config.train_path), (test_set, self.config.test_path)):
            write_table(frame, filepath)
            logger.info(f"Saved {len(frame)} rows to {filepath}")

    def get_features_and_target(self, df: pd.DataFrame):
        return df[self.config.features], df[self.config.target]


def write_table(df: pd.DataFrame, filepath, index=False):
    """Write a frame as a spreadsheet or CSV depending on the file suffix."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()
    if suffix in SPREADSHEET_SUFFIXES:
        df.to_excel(path, index=index)
    elif suffix == ".csv":
        df.to_csv(path, index=index)
    else:
        raise ValueError(f"Unsupported output file type '{suffix}' for {path}")
    return path
