from dataclasses import dataclass
from typing import List

import numpy as np
import pandas as pd
from sklearn.tree import DecisionTreeRegressor

from covid_county_forecast.lib import (
    cli_tools,
    math,
    static_vars,
)
from covid_county_forecast.pipeline.model.partition import partition

logger = cli_tools.task_performance_logger


@dataclass
class TreeModelSummary:
    """Fit and evaluation of the regression tree."""
    model: DecisionTreeRegressor
    predictors: List[str]
    train_rmse: float
    test_rmse: float
    features_used: List[str]
    importance: pd.Series
    test_observed: pd.Series
    test_predicted: pd.Series
    n_train: int
    n_test: int


def tree_predictors(data: pd.DataFrame, target: str = static_vars.COL_FUTURE_CASES) -> List[str]:
    """Every numeric column not held out of the tree, minus the target."""
    candidates = data.drop(columns=static_vars.TREE_EXCLUDED_COLUMNS + [target], errors='ignore')
    return list(candidates.select_dtypes(include='number').columns)


def fit_tree_model(data: pd.DataFrame,
                   test_fraction: float,
                   rng: np.random.Generator,
                   min_samples_split: int = 20,
                   min_samples_leaf: int = 7,
                   max_depth: int = 30,
                   complexity: float = 0.01,
                   target: str = static_vars.COL_FUTURE_CASES) -> TreeModelSummary:
    """Fit a variance reduction regression tree and score the holdout.

    The stopping rules mirror the classic ANOVA tree defaults. A split must
    reduce the node's squared error by at least ``complexity`` times the
    variance of the training target, as a share of all training rows.
    """
    predictors = tree_predictors(data, target)
    train, test = partition(data, test_fraction, rng, target=target)
    logger.info(f'Fitting regression tree on {len(train)} rows with predictors {predictors}.',
                context='fit')

    y_train = train[target].astype(float)
    model = DecisionTreeRegressor(
        criterion='squared_error',
        min_samples_split=min_samples_split,
        min_samples_leaf=min_samples_leaf,
        max_depth=max_depth,
        min_impurity_decrease=complexity * float(y_train.var(ddof=0)),
        random_state=int(rng.integers(np.iinfo(np.int32).max)),
    )
    model.fit(train[predictors].astype(float), y_train)

    # Leaves are marked with negative feature indices.
    split_features = model.tree_.feature[model.tree_.feature >= 0]
    features_used = [predictors[i] for i in sorted(set(split_features))]
    importance = (pd.Series(model.feature_importances_, index=predictors, name='importance')
                  .sort_values(ascending=False))

    train_predicted = pd.Series(model.predict(train[predictors].astype(float)), index=train.index)
    test_predicted = pd.Series(model.predict(test[predictors].astype(float)), index=test.index, name=target)
    return TreeModelSummary(
        model=model,
        predictors=predictors,
        train_rmse=math.rmse(y_train, train_predicted),
        test_rmse=math.rmse(test[target], test_predicted),
        features_used=features_used,
        importance=importance,
        test_observed=test[target],
        test_predicted=test_predicted,
        n_train=len(train),
        n_test=len(test),
    )
