from pathlib import Path
from typing import Iterable, Union

from loguru import logger
import pandas as pd

from covid_county_forecast.lib import static_vars
from covid_county_forecast.pipeline.model import keys
from covid_county_forecast.pipeline.specification import (
    ForecastData,
    ForecastSpecification,
)


class ForecastDataInterface:
    """Loads the four raw source tables into canonical frames.

    Every loader returns a frame keyed by a canonical ``fips`` string column.
    Sources are read synchronously; any read or schema failure propagates and
    aborts the run.
    """

    def __init__(self, data_spec: ForecastData):
        self.data_spec = data_spec

    @classmethod
    def from_specification(cls, specification: ForecastSpecification) -> 'ForecastDataInterface':
        return cls(specification.data)

    def load_all(self):
        return (
            self.load_cases(),
            self.load_area(),
            self.load_population(),
            self.load_masks(),
        )

    def load_cases(self) -> pd.DataFrame:
        path = self.data_spec.cases_path
        logger.debug(f'Loading case data from {path}.')
        data = pd.read_csv(path, dtype={'fips': str})
        check_columns(data, ['date', 'county', 'state', 'fips', 'cases', 'deaths'], path)

        data[static_vars.COL_FIPS] = keys.normalize_fips(data['fips'])
        data[static_vars.COL_DATE] = pd.to_datetime(data['date'])
        data = data.loc[:, static_vars.CASE_RECORD_COLUMNS]

        # Aggregated places like New York City carry no county code.
        no_fips = data[static_vars.COL_FIPS].isnull()
        if no_fips.any():
            logger.info(f'{no_fips.sum()} case rows have no county identifier; '
                        f'they will not match any auxiliary data.')
        return data

    def load_masks(self) -> pd.DataFrame:
        path = self.data_spec.masks_path
        logger.debug(f'Loading mask use data from {path}.')
        data = pd.read_csv(path, dtype={'COUNTYFP': str})
        band_columns = [band.upper() for band in static_vars.MASK_BANDS]
        check_columns(data, ['COUNTYFP'] + band_columns, path)

        data[static_vars.COL_FIPS] = keys.normalize_fips(data['COUNTYFP'])
        data = data.rename(columns={band.upper(): band for band in static_vars.MASK_BANDS})
        return data.loc[:, [static_vars.COL_FIPS, *static_vars.MASK_BANDS]]

    def load_population(self) -> pd.DataFrame:
        path = self.data_spec.population_path
        population_column = self.data_spec.population_column
        logger.debug(f'Loading population data from {path}.')
        data = pd.read_csv(path, encoding='latin-1', dtype={'STATE': str, 'COUNTY': str})
        check_columns(data, ['STATE', 'COUNTY', population_column], path)

        # County code 000 rows are state totals.
        data = data.loc[data['COUNTY'].astype(int) != 0].copy()
        data[static_vars.COL_FIPS] = keys.make_county_fips(data['STATE'], data['COUNTY'])
        data = data.rename(columns={population_column: static_vars.COL_POPULATION})
        return data.loc[:, [static_vars.COL_FIPS, static_vars.COL_POPULATION]].reset_index(drop=True)

    def load_area(self) -> pd.DataFrame:
        spec = self.data_spec
        path = spec.area_path
        logger.debug(f'Loading land area data from {path}.')
        data = pd.read_excel(path, sheet_name=0)
        if spec.area_keyed_by_pair:
            key_columns = [spec.area_state_column, spec.area_county_column]
            check_columns(data, key_columns + [spec.area_column], path)
            data[static_vars.COL_FIPS] = keys.make_county_fips(
                data[spec.area_state_column], data[spec.area_county_column],
            )
        else:
            check_columns(data, [spec.area_code_column, spec.area_column], path)
            data[static_vars.COL_FIPS] = keys.normalize_fips(data[spec.area_code_column])

        # Drop the national and state total rows.
        is_county = ~data[static_vars.COL_FIPS].str.endswith('000').fillna(True)
        data = data.loc[is_county].rename(columns={spec.area_column: static_vars.COL_LAND_AREA})
        return data.loc[:, [static_vars.COL_FIPS, static_vars.COL_LAND_AREA]].reset_index(drop=True)


def check_columns(data: pd.DataFrame, required: Iterable[str], source: Union[str, Path]) -> None:
    missing = [c for c in required if c not in data.columns]
    if missing:
        raise ValueError(f'Data loaded from {source} is missing expected columns {missing}. '
                         f'Found columns {list(data.columns)}.')
