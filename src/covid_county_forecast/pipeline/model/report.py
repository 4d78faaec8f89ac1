from pathlib import Path
from typing import List, Union

import pandas as pd

from covid_county_forecast.lib import (
    cli_tools,
    static_vars,
)
from covid_county_forecast.lib.plotting import Plotter
from covid_county_forecast.pipeline.model.linear import LinearModelSummary
from covid_county_forecast.pipeline.model.tree import TreeModelSummary

logger = cli_tools.task_performance_logger

OBSERVED_VS_PREDICTED_PLOT = 'observed_vs_predicted.png'
LINEAR_IMPORTANCE_PLOT = 'linear_importance.png'
TREE_PLOT = 'tree.png'

REPORT_TEMPLATE = """\
# Two week ahead county case forecasts

## Data

The modelling table holds {n_rows} rows from {n_counties} counties in
{n_states} states, covering {date_min} to {date_max}. Each row is one county
on one day with its cumulative cases and deaths, population density, mask
compliance score, daily new cases and deaths and their seven day forward
rolling means. The target is the county's cumulative case count fourteen days
later.

## Linear model

Ordinary least squares of future cases on {n_linear_predictors} predictors,
fit on {linear_n_train} rows and scored on {linear_n_test} held-out rows.

- Adjusted R squared: {adjusted_r_squared:.4f}
- Train RMSE: {linear_train_rmse:,.1f}
- Test RMSE: {linear_test_rmse:,.1f}

{coefficient_table}

Predictors ranked by absolute t statistic:

{linear_importance_table}

![Linear importance]({linear_importance_plot})

## Regression tree

Variance reduction tree on {n_tree_predictors} numeric predictors, fit on
{tree_n_train} rows and scored on {tree_n_test} held-out rows drawn
independently of the linear model's split.

- Train RMSE: {tree_train_rmse:,.1f}
- Test RMSE: {tree_test_rmse:,.1f}
- Features used in splits: {tree_features_used}

{tree_importance_table}

![Regression tree]({tree_plot})

## Held-out predictions

![Observed vs predicted]({observed_vs_predicted_plot})
"""


def render_report(data: pd.DataFrame,
                  linear: LinearModelSummary,
                  tree: TreeModelSummary,
                  output_dir: Union[str, Path]) -> Path:
    """Write the plots and the markdown narrative into ``output_dir``."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f'Rendering report to {output_dir}.', context='write')

    plotter = Plotter()
    plotter.observed_vs_predicted(
        {
            'Linear model': (linear.test_observed, linear.test_predicted),
            'Regression tree': (tree.test_observed, tree.test_predicted),
        },
        output_dir / OBSERVED_VS_PREDICTED_PLOT,
    )
    plotter.importance(linear.importance, 'Linear model predictors by |t|',
                       output_dir / LINEAR_IMPORTANCE_PLOT)
    plotter.tree(tree.model, tree.predictors, output_dir / TREE_PLOT)

    dates = data[static_vars.COL_DATE]
    text = REPORT_TEMPLATE.format(
        n_rows=len(data),
        n_counties=data[static_vars.COL_FIPS].nunique(),
        n_states=data[static_vars.COL_STATE].nunique(),
        date_min=dates.min().date(),
        date_max=dates.max().date(),
        n_linear_predictors=len(linear.importance),
        linear_n_train=linear.n_train,
        linear_n_test=linear.n_test,
        adjusted_r_squared=linear.adjusted_r_squared,
        linear_train_rmse=linear.train_rmse,
        linear_test_rmse=linear.test_rmse,
        coefficient_table=markdown_table(linear.coefficients.reset_index()),
        linear_importance_table=markdown_table(linear.importance.reset_index()
                                               .rename(columns={'index': 'term'})),
        linear_importance_plot=LINEAR_IMPORTANCE_PLOT,
        n_tree_predictors=len(tree.predictors),
        tree_n_train=tree.n_train,
        tree_n_test=tree.n_test,
        tree_train_rmse=tree.train_rmse,
        tree_test_rmse=tree.test_rmse,
        tree_features_used=', '.join(tree.features_used) or 'none',
        tree_importance_table=markdown_table(tree.importance.reset_index()
                                             .rename(columns={'index': 'feature'})),
        tree_plot=TREE_PLOT,
        observed_vs_predicted_plot=OBSERVED_VS_PREDICTED_PLOT,
    )
    report_path = output_dir / static_vars.REPORT_FILE
    report_path.write_text(text)
    return report_path


def markdown_table(data: pd.DataFrame, float_format: str = '{:.4g}') -> str:
    """Render a small frame as a GitHub flavored markdown table."""
    columns: List[str] = [str(c) for c in data.columns]
    view = data.copy()
    for c in view.columns:
        if view[c].dtype.kind == 'f':
            view[c] = view[c].map(lambda x: '' if pd.isna(x) else float_format.format(x))
        else:
            view[c] = view[c].astype(str)

    header = '| ' + ' | '.join(columns) + ' |'
    sep = '| ' + ' | '.join(['---'] * len(columns)) + ' |'
    rows = ['| ' + ' | '.join(view.iloc[i].tolist()) + ' |' for i in range(len(view))]
    return '\n'.join([header, sep] + rows)
