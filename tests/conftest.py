import numpy
import pandas
import pytest

from covid_county_forecast.lib import static_vars
from covid_county_forecast.pipeline.model.features import build_features


def make_county(fips, n_days, cases=None, deaths=None,
                state='Alabama', county='Autauga', start='2020-06-01'):
    """Case rows for one county on consecutive days.

    Cumulative cases default to ``i**2`` and deaths to ``i`` on day ``i``.
    """
    days = numpy.arange(n_days)
    return pandas.DataFrame({
        'fips': pandas.Series([fips] * n_days, dtype='string'),
        'date': pandas.date_range(start, periods=n_days, freq='D'),
        'county': county,
        'state': state,
        'cases': days ** 2 if cases is None else cases,
        'deaths': days if deaths is None else deaths,
    })


def add_auxiliary(cases, population=10_000, land_area=100., bands=(0.1, 0.1, 0.2, 0.3, 0.3)):
    """Attach constant auxiliary columns the way the join would."""
    joined = cases.copy()
    joined['land_area'] = land_area
    joined['population'] = population
    for band, value in zip(static_vars.MASK_BANDS, bands):
        joined[band] = value
    return joined


@pytest.fixture
def county_factory():
    return make_county


@pytest.fixture
def joined_factory():
    def _make(fips, n_days, **kwargs):
        aux_kwargs = {k: kwargs.pop(k) for k in ['population', 'land_area', 'bands'] if k in kwargs}
        return add_auxiliary(make_county(fips, n_days, **kwargs), **aux_kwargs)
    return _make


# Source fixtures
#
# Small versions of the four raw tables after loading, keyed by canonical
# county identifiers.
@pytest.fixture
def case_data():
    return pandas.concat([
        make_county('01001', 3, county='Autauga', state='Alabama'),
        make_county('01003', 3, county='Baldwin', state='Alabama'),
        make_county('72001', 3, county='Adjuntas', state='Puerto Rico'),
        make_county(pandas.NA, 3, county='New York City', state='New York'),
    ], ignore_index=True)


@pytest.fixture
def area_data():
    return pandas.DataFrame({
        'fips': pandas.Series(['01001', '01003', '72001'], dtype='string'),
        'land_area': [594.44, 1589.78, 66.69],
    })


@pytest.fixture
def population_data():
    return pandas.DataFrame({
        'fips': pandas.Series(['01001', '72001'], dtype='string'),
        'population': [55869, 17363],
    })


@pytest.fixture
def mask_data():
    return pandas.DataFrame({
        'fips': pandas.Series(['01001', '01003', '72001'], dtype='string'),
        'never': [0.053, 0.083, 0.02],
        'rarely': [0.074, 0.059, 0.03],
        'sometimes': [0.134, 0.098, 0.1],
        'frequently': [0.295, 0.323, 0.25],
        'always': [0.444, 0.436, 0.6],
    })


@pytest.fixture
def joined_data():
    """Joined rows for many synthetic counties with different growth rates."""
    rng = numpy.random.default_rng(1234)
    frames = []
    for i in range(30):
        n_days = 40
        growth = rng.uniform(1, 50)
        cases = numpy.cumsum(rng.poisson(growth, n_days))
        deaths = numpy.cumsum(rng.poisson(growth / 50, n_days))
        county = make_county(f'01{i:03d}', n_days, cases=cases, deaths=deaths, county=f'County {i}')
        bands = rng.dirichlet(numpy.ones(5))
        frames.append(add_auxiliary(county,
                                    population=int(rng.integers(1_000, 1_000_000)),
                                    land_area=float(rng.uniform(50, 2000)),
                                    bands=bands))
    return pandas.concat(frames, ignore_index=True)


@pytest.fixture
def enriched_data(joined_data):
    return build_features(joined_data)
