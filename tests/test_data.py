import pandas
import pytest

from covid_county_forecast.pipeline import data
from covid_county_forecast.pipeline.specification import ForecastData


@pytest.fixture
def source_files(tmp_path):
    cases = tmp_path / 'us-counties.csv'
    cases.write_text(
        'date,county,state,fips,cases,deaths\n'
        '2020-06-01,Autauga,Alabama,1001,10,1\n'
        '2020-06-02,Autauga,Alabama,1001,12,1\n'
        '2020-06-01,New York City,New York,,200,20\n'
        '2020-06-01,Dona Ana,New Mexico,35013,50,2\n'
    )
    masks = tmp_path / 'mask-use-by-county.csv'
    masks.write_text(
        'COUNTYFP,NEVER,RARELY,SOMETIMES,FREQUENTLY,ALWAYS\n'
        '1001,0.053,0.074,0.134,0.295,0.444\n'
        '35013,0.01,0.02,0.07,0.2,0.7\n'
    )
    population = tmp_path / 'co-est2019-alldata.csv'
    population.write_bytes(
        'SUMLEV,STATE,COUNTY,STNAME,CTYNAME,POPESTIMATE2019\n'
        '040,01,000,Alabama,Alabama,4903185\n'
        '050,01,001,Alabama,Autauga County,55869\n'
        '050,35,013,New Mexico,Doña Ana County,218195\n'.encode('latin-1')
    )
    return ForecastData(
        cases_path=str(cases),
        masks_path=str(masks),
        population_path=str(population),
        area_path=str(tmp_path / 'LND01.xls'),
    )


def test_load_cases(source_files):
    cases = data.ForecastDataInterface(source_files).load_cases()

    assert list(cases.columns) == ['fips', 'date', 'county', 'state', 'cases', 'deaths']
    assert cases['fips'].tolist()[:2] == ['01001', '01001']
    assert pandas.isna(cases['fips'].iloc[2])
    assert cases['fips'].iloc[3] == '35013'
    assert pandas.api.types.is_datetime64_any_dtype(cases['date'])
    assert len(cases) == 4


def test_load_masks(source_files):
    masks = data.ForecastDataInterface(source_files).load_masks()

    assert list(masks.columns) == ['fips', 'never', 'rarely', 'sometimes', 'frequently', 'always']
    assert masks['fips'].tolist() == ['01001', '35013']
    assert masks['always'].tolist() == [0.444, 0.7]


def test_load_population_drops_state_totals(source_files):
    population = data.ForecastDataInterface(source_files).load_population()

    assert population['fips'].tolist() == ['01001', '35013']
    assert population['population'].tolist() == [55869, 218195]


def test_load_area_by_code(mocker, source_files):
    sheet = pandas.DataFrame({
        'Areaname': ['UNITED STATES', 'ALABAMA', 'Autauga, AL', 'Dona Ana, NM'],
        'STCOU': [0, 1000, 1001, 35013],
        'LND110210D': [3531905.43, 50645.33, 594.44, 3807.95],
    })
    read_excel = mocker.patch.object(data.pd, 'read_excel', return_value=sheet)

    area = data.ForecastDataInterface(source_files).load_area()

    read_excel.assert_called_once_with(source_files.area_path, sheet_name=0)
    assert area['fips'].tolist() == ['01001', '35013']
    assert area['land_area'].tolist() == [594.44, 3807.95]


def test_load_area_by_pair(mocker, source_files):
    source_files.area_state_column = 'STATEFP'
    source_files.area_county_column = 'COUNTYFP'
    source_files.area_column = 'ALAND_SQMI'
    sheet = pandas.DataFrame({
        'STATEFP': [1, 35],
        'COUNTYFP': [1, 13],
        'ALAND_SQMI': [594.4, 3807.9],
    })
    mocker.patch.object(data.pd, 'read_excel', return_value=sheet)

    area = data.ForecastDataInterface(source_files).load_area()

    assert area['fips'].tolist() == ['01001', '35013']
    assert area['land_area'].tolist() == [594.4, 3807.9]


def test_load_all_order(mocker, source_files):
    interface = data.ForecastDataInterface(source_files)
    for name in ['load_cases', 'load_area', 'load_population', 'load_masks']:
        mocker.patch.object(interface, name, return_value=name)

    assert interface.load_all() == ('load_cases', 'load_area', 'load_population', 'load_masks')


def test_missing_columns(tmp_path, source_files):
    bad = tmp_path / 'bad-cases.csv'
    bad.write_text('date,county,state,fips,cases\n2020-06-01,Autauga,Alabama,1001,10\n')
    source_files.cases_path = str(bad)

    with pytest.raises(ValueError, match="missing expected columns \\['deaths'\\]"):
        data.ForecastDataInterface(source_files).load_cases()
