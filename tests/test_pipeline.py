from pathlib import Path

from hotel_cancellation import pipeline
from hotel_cancellation.data_processor import DataProcessor
from hotel_cancellation.pipeline import run_pipeline
from hotel_cancellation.reservation_model import tune_knn_neighbors


class TestRunPipeline:
    """End to end on a small synthetic split."""

    def test_compares_all_models(self, config, split_files):
        table = run_pipeline(config)

        assert set(table.index) == {"stepwise_logistic", "random_forest", "knn"}
        assert table["auc"].is_monotonic_decreasing
        assert ((table["accuracy"] > 0) & (table["accuracy"] <= 1)).all()
        assert (table[["tn", "fp", "fn", "tp"]].sum(axis=1) == 75).all()

    def test_writes_outputs(self, config, split_files, tmp_path):
        output_dir = tmp_path / "run"
        run_pipeline(config, output_dir=output_dir)

        expected = [
            "model_comparison.csv",
            "model_comparison.png",
            "roc_curves.png",
            "stepwise_path.png",
            "stepwise_logistic_confusion_matrix.png",
            "random_forest_confusion_matrix.png",
            "random_forest_feature_importance.png",
            "knn_confusion_matrix.png",
            "knn_accuracy_by_k.png",
        ]
        for name in expected:
            assert (output_dir / name).exists(), name
        assert not Path(config.output_dir).exists()


class TestRunKnn:
    """KNN is tuned and fitted with the same configured parameters."""

    def test_tuning_uses_configured_parameters(self, config, cleaned_split, monkeypatch, tmp_path):
        config.knn_parameters = {"weights": "distance"}
        tuned_with, logged = {}, {}

        def fake_tune(preprocessor, X, y, neighbors, **kwargs):
            tuned_with.update(kwargs)
            return tune_knn_neighbors(preprocessor, X, y, neighbors, **kwargs)

        def fake_log(config, model_name, params, metrics, artifacts=(), sk_model=None, X_sample=None):
            logged.update(params=params, X_sample=X_sample)

        monkeypatch.setattr(pipeline, "tune_knn_neighbors", fake_tune)
        monkeypatch.setattr(pipeline, "log_model_run", fake_log)
        data_processor = DataProcessor(config)
        train_set, test_set = cleaned_split
        X_train, y_train = data_processor.get_features_and_target(train_set)
        X_test, y_test = data_processor.get_features_and_target(test_set)

        model, _ = pipeline.run_knn(
            config, data_processor.preprocess_data(), X_train, y_train, X_test, y_test, tmp_path
        )

        assert tuned_with["parameters"] == {"weights": "distance"}
        assert model.model.named_steps["classifier"].weights == "distance"
        assert logged["params"]["weights"] == "distance"
        # Signature inference only needs a few rows
        assert len(logged["X_sample"]) == 5
