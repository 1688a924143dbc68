"""
Shared pytest fixtures: synthetic hotel bookings with a known cancellation signal.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402
import pytest  # noqa: E402

from hotel_cancellation.config import ProjectConfig  # noqa: E402
from hotel_cancellation.data_processor import DataProcessor, write_table  # noqa: E402


def _make_bookings(n=300, seed=0):
    rng = np.random.default_rng(seed)
    lead_time = rng.integers(0, 300, n)
    special_requests = rng.integers(0, 4, n)
    segment = rng.choice(["Online", "Offline", "Corporate"], n)
    logit = -1.0 + 0.012 * lead_time - 0.9 * special_requests + np.where(segment == "Online", 0.8, 0.0)
    canceled = rng.random(n) < 1 / (1 + np.exp(-logit))
    return pd.DataFrame(
        {
            "Booking_ID": [f"INN{i:05d}" for i in range(n)],
            "no_of_adults": rng.integers(1, 4, n),
            "no_of_children": rng.integers(0, 3, n),
            "no_of_weekend_nights": rng.integers(0, 3, n),
            "no_of_week_nights": rng.integers(0, 5, n),
            "lead_time": lead_time,
            "avg_price_per_room": rng.normal(100, 20, n).round(2),
            "no_of_special_requests": special_requests,
            "no_of_previous_cancellations": rng.integers(0, 2, n),
            "no_of_previous_bookings_not_canceled": rng.integers(0, 3, n),
            "noise": rng.normal(size=n),
            "type_of_meal_plan": rng.choice(["Meal Plan 1", "Not Selected"], n),
            "market_segment_type": segment,
            "booking_status": np.where(canceled, "Canceled", "Not_Canceled"),
        }
    )


@pytest.fixture
def make_bookings():
    """Factory for synthetic booking tables."""
    return _make_bookings


@pytest.fixture
def bookings():
    """Raw booking table with string target labels."""
    return _make_bookings()


@pytest.fixture
def config(tmp_path):
    """Small configuration writing into a temporary directory."""
    return ProjectConfig(
        num_features=["lead_time", "no_of_special_requests", "avg_price_per_room", "noise", "total_nights"],
        cat_features=["market_segment_type", "type_of_meal_plan"],
        target="booking_status",
        id="Booking_ID",
        train_path=str(tmp_path / "data" / "train.xlsx"),
        test_path=str(tmp_path / "data" / "test.csv"),
        output_dir=str(tmp_path / "outputs"),
        parameters={"n_estimators": 20, "max_depth": 5, "random_state": 42},
        knn_neighbors=[3, 5, 7],
        cv_folds=3,
    )


@pytest.fixture
def cleaned_split(config, bookings):
    """Cleaned train and test sets from the synthetic bookings."""
    data_processor = DataProcessor(config)
    return data_processor.split_data(data_processor.clean(bookings), test_size=0.25, random_state=0)


@pytest.fixture
def split_files(config, bookings):
    """Raw train (spreadsheet) and test (CSV) files at the configured paths."""
    write_table(bookings.iloc[:225], config.train_path)
    write_table(bookings.iloc[225:], config.test_path)
    return config.train_path, config.test_path
