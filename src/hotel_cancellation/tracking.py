import logging
import math

import mlflow
from mlflow.models import infer_signature

from hotel_cancellation.config import ProjectConfig

logger = logging.getLogger(__name__)


def log_model_run(config: ProjectConfig, model_name, params, metrics, artifacts=(), sk_model=None, X_sample=None):
    """
    Track one model fit with MLflow.

    Returns the run id, or None when tracking is disabled in the configuration.
    NaN metrics (e.g. an undefined AUC) are left out.
    """
    if not config.tracking.enabled:
        return None

    if config.tracking.tracking_uri:
        mlflow.set_tracking_uri(config.tracking.tracking_uri)
    mlflow.set_experiment(experiment_name=config.tracking.experiment_name)

    with mlflow.start_run(run_name=model_name, tags={"model": model_name}) as run:
        run_id = run.info.run_id
        mlflow.log_param("model_type", model_name)
        mlflow.log_params(params)
        mlflow.log_metrics(
            {name: float(value) for name, value in metrics.items() if not math.isnan(float(value))}
        )
        for artifact in artifacts:
            mlflow.log_artifact(str(artifact))

        if sk_model is not None:
            signature = None
            if X_sample is not None:
                signature = infer_signature(model_input=X_sample, model_output=sk_model.predict(X_sample))
            mlflow.sklearn.log_model(sk_model=sk_model, artifact_path=model_name, signature=signature)

    logger.info(f"Logged {model_name} to MLflow run {run_id}")
    return run_id
