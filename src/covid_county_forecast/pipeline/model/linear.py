from dataclasses import dataclass
from typing import List

import numpy as np
import pandas as pd
import statsmodels.api as sm

from covid_county_forecast.lib import (
    cli_tools,
    math,
    static_vars,
)
from covid_county_forecast.pipeline.model.partition import partition

logger = cli_tools.task_performance_logger

COL_INTERCEPT = 'intercept'


@dataclass
class LinearModelSummary:
    """Fit and evaluation of the ordinary least squares model."""
    coefficients: pd.DataFrame
    adjusted_r_squared: float
    train_rmse: float
    test_rmse: float
    importance: pd.Series
    test_observed: pd.Series
    test_predicted: pd.Series
    n_train: int
    n_test: int


def fit_linear_model(data: pd.DataFrame,
                     test_fraction: float,
                     rng: np.random.Generator,
                     predictors: List[str] = None,
                     target: str = static_vars.COL_FUTURE_CASES) -> LinearModelSummary:
    """Fit OLS of the case target on the predictors and score the holdout.

    Feature importance is the magnitude of each predictor's t statistic,
    largest first. The intercept is reported as a coefficient but not ranked.
    """
    if predictors is None:
        predictors = static_vars.LINEAR_PREDICTORS
    train, test = partition(data, test_fraction, rng, target=target)
    logger.info(f'Fitting linear model on {len(train)} rows, holding out {len(test)}.', context='fit')

    results = sm.OLS(train[target].astype(float), _design_matrix(train, predictors)).fit()

    coefficients = pd.DataFrame({
        'estimate': results.params,
        'std_err': results.bse,
        't_value': results.tvalues,
        'p_value': results.pvalues,
    })
    coefficients.index.name = 'term'
    importance = (coefficients
                  .drop(index=COL_INTERCEPT)['t_value']
                  .abs()
                  .sort_values(ascending=False)
                  .rename('abs_t_value'))

    train_predicted = results.predict(_design_matrix(train, predictors))
    test_predicted = results.predict(_design_matrix(test, predictors))
    return LinearModelSummary(
        coefficients=coefficients,
        adjusted_r_squared=float(results.rsquared_adj),
        train_rmse=math.rmse(train[target], train_predicted),
        test_rmse=math.rmse(test[target], test_predicted),
        importance=importance,
        test_observed=test[target],
        test_predicted=test_predicted.rename(target),
        n_train=len(train),
        n_test=len(test),
    )


def _design_matrix(data: pd.DataFrame, predictors: List[str]) -> pd.DataFrame:
    design = data.loc[:, predictors].astype(float)
    design.insert(0, COL_INTERCEPT, 1.0)
    return design
