"""Canonical county identifiers.

Every source table is keyed on a five character county FIPS code: a two
digit state code followed by a three digit county code, both zero padded.
Sources disagree on how they ship that code (integers, floats after a
missing-value upcast, strings with or without padding), so all of them pass
through here before any join.
"""
import pandas as pd

from covid_county_forecast.lib import static_vars


def make_county_fips(state_codes: pd.Series, county_codes: pd.Series) -> pd.Series:
    """Concatenate zero padded state and county codes into a county FIPS."""
    state = _to_code_string(state_codes).str.zfill(static_vars.STATE_FIPS_WIDTH)
    county = _to_code_string(county_codes).str.zfill(static_vars.COUNTY_FIPS_WIDTH)
    return (state + county).rename(static_vars.COL_FIPS)


def normalize_fips(codes: pd.Series) -> pd.Series:
    """Zero pad an already combined county code to the canonical width."""
    return _to_code_string(codes).str.zfill(static_vars.FIPS_WIDTH).rename(static_vars.COL_FIPS)


def _to_code_string(codes: pd.Series) -> pd.Series:
    """Render numeric codes as digit strings, leaving missing values missing.

    Floats are only accepted when integral so ``1001.0`` becomes ``'1001'``.
    """
    if pd.api.types.is_numeric_dtype(codes):
        is_missing = codes.isnull()
        values = codes[~is_missing]
        if (values != values.round()).any():
            raise ValueError(f'Non-integral FIPS codes found in {codes.name}.')
        out = pd.Series(pd.NA, index=codes.index, dtype='object')
        out[~is_missing] = values.astype('int64').astype(str)
        return out.astype('string')
    out = codes.astype('string').str.strip()
    # Text codes read from floats carry a trailing '.0'.
    return out.str.replace(r'\.0+$', '', regex=True)
