"""
Presentation-only model metrics.

The accuracy and error numbers shown next to each forecast are fabricated
from fixed per-model baselines plus uniform jitter. They are not computed
from the forecast and say nothing about its quality; only `last_prediction`
and `trend` are read from the forecast itself.
"""

import numpy as np
import pandas as pd

from src.models.simulate import get_model

# key → (accuracy base, accuracy jitter, mse, mae, rmse, (mse, mae, rmse) jitter, type)
BASELINES = {
    "arima":   (85.4, 10.0, 0.045, 0.032, 0.212, (0.02, 0.015, 0.05), "statistical"),
    "prophet": (88.2,  8.0, 0.038, 0.028, 0.195, (0.02, 0.015, 0.05), "ml"),
    "lstm":    (91.7,  6.0, 0.031, 0.024, 0.176, (0.015, 0.012, 0.04), "deep"),
}


def fabricate_metrics(
    key: str,
    forecast: pd.DataFrame,
    last_price: float,
    rng: np.random.Generator,
) -> dict:
    """Display card for one model's forecast."""
    model = get_model(key)
    acc, acc_jitter, mse, mae, rmse, (mse_j, mae_j, rmse_j), model_type = BASELINES[model.key]

    last_prediction = float(forecast["prediction"].iloc[-1]) if len(forecast) else 0.0
    return {
        "model": model.key,
        "name": model.name,
        "type": model_type,
        "description": model.description,
        "accuracy": acc + rng.random() * acc_jitter,
        "mse": mse + rng.random() * mse_j,
        "mae": mae + rng.random() * mae_j,
        "rmse": rmse + rng.random() * rmse_j,
        "last_prediction": last_prediction,
        "trend": "up" if last_prediction > last_price else "down",
    }
