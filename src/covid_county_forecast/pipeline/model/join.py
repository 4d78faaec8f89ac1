import pandas as pd

from covid_county_forecast.lib import (
    cli_tools,
    static_vars,
)

logger = cli_tools.task_performance_logger


def join_sources(cases: pd.DataFrame,
                 area: pd.DataFrame,
                 population: pd.DataFrame,
                 masks: pd.DataFrame) -> pd.DataFrame:
    """Left join the auxiliary county tables onto the case table.

    Every case row is preserved in its original order. Rows whose county is
    absent from an auxiliary table get missing values for that table's
    columns.

    Parameters
    ----------
    cases
        One row per county per day, keyed by ``fips``.
    area
        One row per county with a ``land_area`` column.
    population
        One row per county with a ``population`` column.
    masks
        One row per county with a column per mask use band.

    """
    auxiliary = {
        'area': area,
        'population': population,
        'masks': masks,
    }
    joined = cases
    for name, table in auxiliary.items():
        joined = _left_join(joined, table, name)
    return joined


def _left_join(left: pd.DataFrame, right: pd.DataFrame, name: str) -> pd.DataFrame:
    fips = static_vars.COL_FIPS
    check_keys(left, 'case')
    check_keys(right, name)
    right = right.loc[right[fips].notnull()]
    duplicates = right[fips].duplicated(keep=False)
    if duplicates.any():
        raise ValueError(f'Duplicate county identifiers in {name} data: '
                         f'{sorted(right.loc[duplicates, fips].unique())}.')

    joined = left.merge(right, how='left', on=fips, indicator=True, validate='many_to_one')
    _report_unmatched(joined, name)
    return joined.drop(columns='_merge')


def check_keys(data: pd.DataFrame, name: str) -> None:
    """Make sure join keys are canonical fixed width digit strings."""
    keys = data[static_vars.COL_FIPS]
    if not pd.api.types.is_string_dtype(keys):
        raise TypeError(f'County identifiers in {name} data must be strings, found {keys.dtype}.')
    present = keys.dropna().astype(str)
    bad = present[~present.str.fullmatch(rf'\d{{{static_vars.FIPS_WIDTH}}}')]
    if not bad.empty:
        raise ValueError(f'County identifiers in {name} data are not {static_vars.FIPS_WIDTH} digit codes: '
                         f'{sorted(bad.unique())[:10]}.')


def _report_unmatched(joined: pd.DataFrame, name: str) -> None:
    unmatched = joined['_merge'] == 'left_only'
    no_key = unmatched & joined[static_vars.COL_FIPS].isnull()
    keyed = unmatched & ~no_key
    if keyed.any():
        logger.warning(f"{keyed.sum()} case rows from {joined.loc[keyed, static_vars.COL_FIPS].nunique()} "
                       f"counties have no match in the {name} data.")
    if no_key.any():
        logger.warning(f"{no_key.sum()} case rows without a county identifier "
                       f"have no match in the {name} data.")
