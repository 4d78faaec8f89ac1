from typing import Dict, Iterable

import numpy as np
import pandas as pd

from covid_county_forecast.lib import (
    cli_tools,
    static_vars,
)

logger = cli_tools.task_performance_logger


def build_features(joined: pd.DataFrame,
                   rolling_window: int = static_vars.DAYS_PER_WEEK,
                   forecast_horizon: int = static_vars.FORECAST_HORIZON,
                   mask_weights: Dict[str, float] = None,
                   excluded_states: Iterable[str] = static_vars.EXCLUDED_STATES) -> pd.DataFrame:
    """Turn the joined county table into modelling rows.

    Counties are processed independently, each sorted by date, so no window
    or lead ever reaches across a county boundary. Rows with any undefined
    feature are dropped, which removes the first day of every county, its
    last ``forecast_horizon`` days and any county missing auxiliary data.

    Parameters
    ----------
    joined
        Case rows with ``population``, ``land_area`` and mask band columns.
    rolling_window
        Width of the forward looking rolling mean of new cases and deaths.
    forecast_horizon
        Number of days ahead for the case and death targets.
    mask_weights
        Compliance score for each mask use band.
    excluded_states
        States removed from the output regardless of completeness.

    Returns
    -------
        A frame with the enriched record columns, sorted by county and date.

    """
    if mask_weights is None:
        mask_weights = static_vars.MASK_WEIGHTS
    check_for_duplicate_dates(joined)

    data = joined.sort_values([static_vars.COL_FIPS, static_vars.COL_DATE]).reset_index(drop=True)
    data[static_vars.COL_POP_DENSITY] = population_density(data[static_vars.COL_POPULATION],
                                                           data[static_vars.COL_LAND_AREA])
    data[static_vars.COL_MASK_COMPLIANCE] = mask_compliance(data, mask_weights)

    by_county = data.groupby(static_vars.COL_FIPS, sort=False)
    for measure, new_col, roll_col, future_col in [
        (static_vars.COL_CASES, static_vars.COL_NEW_CASES,
         static_vars.COL_ROLL_NEW_CASES, static_vars.COL_FUTURE_CASES),
        (static_vars.COL_DEATHS, static_vars.COL_NEW_DEATHS,
         static_vars.COL_ROLL_NEW_DEATHS, static_vars.COL_FUTURE_DEATHS),
    ]:
        data[new_col] = by_county[measure].diff()
        data[roll_col] = (data
                          .groupby(static_vars.COL_FIPS, sort=False)[new_col]
                          .transform(lambda s: forward_rolling_mean(s, rolling_window)))
        data[future_col] = by_county[measure].shift(-forecast_horizon)

    data = data.loc[:, static_vars.ENRICHED_RECORD_COLUMNS]
    n_rows = len(data)
    data = data.dropna(how='any')
    logger.debug(f'Dropped {n_rows - len(data)} of {n_rows} rows with undefined features.')

    is_excluded = data[static_vars.COL_STATE].isin(list(excluded_states))
    data = data.loc[~is_excluded].reset_index(drop=True)
    logger.debug(f'Dropped {is_excluded.sum()} rows from excluded states.')
    return data


def population_density(population: pd.Series, land_area: pd.Series) -> pd.Series:
    """People per square mile, undefined where the area is missing or zero."""
    area = land_area.where(land_area > 0)
    return (population / area).replace([np.inf, -np.inf], np.nan)


def mask_compliance(data: pd.DataFrame, mask_weights: Dict[str, float]) -> pd.Series:
    """Weighted sum of the mask use band fractions.

    Missing in any band gives a missing score. With weights in [0, 1] and
    fractions summing to one the score stays in [0, 1].
    """
    bands = list(static_vars.MASK_BANDS)
    weights = pd.Series({band: mask_weights[band] for band in bands})
    return data[bands].mul(weights, axis=1).sum(axis=1, min_count=len(bands))


def forward_rolling_mean(series: pd.Series, window: int) -> pd.Series:
    """Mean of the current value and the following ``window - 1`` values.

    Undefined unless every value in the window is present, so the final
    ``window - 1`` positions are always missing.
    """
    return series.rolling(window, min_periods=window).mean().shift(-(window - 1))


def check_for_duplicate_dates(data: pd.DataFrame) -> None:
    duplicated = data.duplicated([static_vars.COL_FIPS, static_vars.COL_DATE], keep=False)
    # Rows without a county identifier can't collide with anything we keep.
    duplicated &= data[static_vars.COL_FIPS].notnull()
    if duplicated.any():
        dupes = data.loc[duplicated, [static_vars.COL_FIPS, static_vars.COL_DATE]].drop_duplicates()
        raise ValueError(f'Duplicate county dates found in case data:\n{dupes.head(10)}')
