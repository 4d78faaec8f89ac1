import numpy as np
import pandas as pd


def rmse(observed: pd.Series, predicted: pd.Series) -> float:
    """Root mean squared error between two aligned series.

    .. math::

        RMSE = \\sqrt{\\frac{1}{n} \\sum\\limits_{i} (y_i - \\hat{y}_i)^2}

    """
    observed = np.asarray(observed, dtype=float)
    predicted = np.asarray(predicted, dtype=float)
    if observed.shape != predicted.shape:
        raise ValueError(f'Shape mismatch: observed {observed.shape}, predicted {predicted.shape}.')
    if not observed.size:
        raise ValueError('Cannot compute RMSE of an empty sample.')
    return float(np.sqrt(np.mean((observed - predicted) ** 2)))
