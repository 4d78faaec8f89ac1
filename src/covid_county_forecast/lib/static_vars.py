FORECAST_SPECIFICATION_FILE = 'forecast_specification.yaml'
REPORT_FILE = 'report.md'

COL_FIPS = 'fips'
COL_DATE = 'date'
COL_COUNTY = 'county'
COL_STATE = 'state'
COL_CASES = 'cases'
COL_DEATHS = 'deaths'

COL_POPULATION = 'population'
COL_LAND_AREA = 'land_area'

MASK_BANDS = ('never', 'rarely', 'sometimes', 'frequently', 'always')

# Engineered columns
COL_POP_DENSITY = 'population_density'
COL_MASK_COMPLIANCE = 'mask_compliance'
COL_NEW_CASES = 'new_cases'
COL_NEW_DEATHS = 'new_deaths'
COL_ROLL_NEW_CASES = 'roll_avg_new_cases'
COL_ROLL_NEW_DEATHS = 'roll_avg_new_deaths'
COL_FUTURE_CASES = 'future_cases'
COL_FUTURE_DEATHS = 'future_deaths'

STATE_FIPS_WIDTH = 2
COUNTY_FIPS_WIDTH = 3
FIPS_WIDTH = STATE_FIPS_WIDTH + COUNTY_FIPS_WIDTH

DAYS_PER_WEEK = 7
FORECAST_HORIZON = 14

# Score assigned to each band of the mask use survey.
MASK_WEIGHTS = {
    'never': 0.,
    'rarely': 0.25,
    'sometimes': 0.5,
    'frequently': 0.75,
    'always': 1.,
}

EXCLUDED_STATES = (
    'Puerto Rico',
    'Guam',
    'Virgin Islands',
    'Northern Mariana Islands',
)

CASE_RECORD_COLUMNS = [COL_FIPS, COL_DATE, COL_COUNTY, COL_STATE, COL_CASES, COL_DEATHS]

ENRICHED_RECORD_COLUMNS = CASE_RECORD_COLUMNS + [
    COL_POP_DENSITY,
    COL_MASK_COMPLIANCE,
    COL_NEW_CASES,
    COL_NEW_DEATHS,
    COL_ROLL_NEW_CASES,
    COL_ROLL_NEW_DEATHS,
    COL_FUTURE_CASES,
    COL_FUTURE_DEATHS,
]

LINEAR_PREDICTORS = [
    COL_CASES,
    COL_DEATHS,
    COL_POP_DENSITY,
    COL_MASK_COMPLIANCE,
    COL_NEW_CASES,
    COL_NEW_DEATHS,
    COL_ROLL_NEW_CASES,
    COL_ROLL_NEW_DEATHS,
]

# Identifying columns and the death lead are held out of the tree.
TREE_EXCLUDED_COLUMNS = [COL_FUTURE_DEATHS, COL_COUNTY, COL_STATE, COL_DATE, COL_FIPS]
