from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from covid_county_forecast.lib import (
    static_vars,
    utilities,
)


NYT_ROOT = 'https://raw.githubusercontent.com/nytimes/covid-19-data/master'
CENSUS_ROOT = 'https://www2.census.gov'


@dataclass
class ForecastData:
    """Specifies the input sources and the output location for a run."""
    cases_path: str = field(default=f'{NYT_ROOT}/us-counties.csv')
    masks_path: str = field(default=f'{NYT_ROOT}/mask-use/mask-use-by-county.csv')
    population_path: str = field(
        default=f'{CENSUS_ROOT}/programs-surveys/popest/datasets/2010-2019/counties/totals/co-est2019-alldata.csv'
    )
    population_column: str = field(default='POPESTIMATE2019')
    area_path: str = field(
        default=f'{CENSUS_ROOT}/library/publications/2011/compendia/usa-counties/excel/LND01.xls'
    )
    # A state/county column pair, when given, takes precedence over the combined code.
    area_code_column: str = field(default='STCOU')
    area_state_column: str = field(default='')
    area_county_column: str = field(default='')
    area_column: str = field(default='LND110210D')

    output_root: str = field(default='')

    def __post_init__(self):
        if bool(self.area_state_column) != bool(self.area_county_column):
            raise ValueError('area_state_column and area_county_column must be given together.')
        if not (self.area_code_column or self.area_state_column):
            raise ValueError('Area data needs either area_code_column or the pair '
                             'area_state_column and area_county_column.')

    @property
    def area_keyed_by_pair(self) -> bool:
        return bool(self.area_state_column)

    def to_dict(self) -> Dict:
        """Converts to a dict, coercing list-like items to lists."""
        return utilities.asdict(self)


@dataclass
class FeatureParameters:
    """Specifies the window sizes and filters of feature engineering."""
    rolling_window: int = field(default=static_vars.DAYS_PER_WEEK)
    forecast_horizon: int = field(default=static_vars.FORECAST_HORIZON)
    mask_weights: Dict[str, float] = field(default_factory=lambda: dict(static_vars.MASK_WEIGHTS))
    excluded_states: List[str] = field(default_factory=lambda: list(static_vars.EXCLUDED_STATES))

    def __post_init__(self):
        if self.rolling_window < 1:
            raise ValueError(f'rolling_window must be positive, got {self.rolling_window}.')
        if self.forecast_horizon < 1:
            raise ValueError(f'forecast_horizon must be positive, got {self.forecast_horizon}.')
        bad_bands = set(self.mask_weights).symmetric_difference(static_vars.MASK_BANDS)
        if bad_bands:
            raise ValueError(f'mask_weights must have exactly the bands {list(static_vars.MASK_BANDS)}. '
                             f'Mismatched bands: {sorted(bad_bands)}.')
        if not all(0. <= w <= 1. for w in self.mask_weights.values()):
            raise ValueError('mask_weights must all lie in [0, 1].')

    def to_dict(self) -> Dict:
        return utilities.asdict(self)


def _check_test_fraction(test_fraction: float):
    if not 0. < test_fraction < 1.:
        raise ValueError(f'test_fraction must be in (0, 1), got {test_fraction}.')


@dataclass
class LinearParameters:
    """Specifies the partition of the linear model."""
    test_fraction: float = field(default=0.2)

    def __post_init__(self):
        _check_test_fraction(self.test_fraction)

    def to_dict(self) -> Dict:
        return utilities.asdict(self)


@dataclass
class TreeParameters:
    """Specifies the partition and the stopping rules of the regression tree."""
    test_fraction: float = field(default=0.2)
    min_samples_split: int = field(default=20)
    min_samples_leaf: int = field(default=7)
    max_depth: int = field(default=30)
    complexity: float = field(default=0.01)

    def __post_init__(self):
        _check_test_fraction(self.test_fraction)
        if self.complexity < 0:
            raise ValueError(f'complexity must be non-negative, got {self.complexity}.')

    def to_dict(self) -> Dict:
        return utilities.asdict(self)


class ForecastSpecification(utilities.Specification):
    """Specification for a forecast run."""

    def __init__(self,
                 data: ForecastData,
                 features: FeatureParameters,
                 linear: LinearParameters,
                 tree: TreeParameters,
                 random_seed: Optional[int]):
        self._data = data
        self._features = features
        self._linear = linear
        self._tree = tree
        self._random_seed = random_seed

    @classmethod
    def parse_spec_dict(cls, spec_dict: Dict) -> Tuple:
        sub_specs = {
            'data': ForecastData,
            'features': FeatureParameters,
            'linear': LinearParameters,
            'tree': TreeParameters,
        }
        for key, spec_class in list(sub_specs.items()):  # We're dynamically altering. Copy with list
            key_spec_dict = utilities.filter_to_spec_fields(
                spec_dict.get(key, {}) or {},
                spec_class,
            )
            sub_specs[key] = spec_class(**key_spec_dict)
        random_seed = spec_dict.get('random_seed', 20200914)
        return tuple(sub_specs.values()) + (random_seed,)

    @property
    def data(self) -> ForecastData:
        """The input and output locations for the run."""
        return self._data

    @property
    def features(self) -> FeatureParameters:
        """The feature engineering parameters."""
        return self._features

    @property
    def linear(self) -> LinearParameters:
        """The linear model parameters."""
        return self._linear

    @property
    def tree(self) -> TreeParameters:
        """The regression tree parameters."""
        return self._tree

    @property
    def random_seed(self) -> Optional[int]:
        """Seed for the run's random streams. None draws fresh entropy."""
        return self._random_seed

    def to_dict(self) -> Dict:
        """Converts the specification to a dict."""
        spec = {
            'data': self.data.to_dict(),
            'features': self.features.to_dict(),
            'linear': self.linear.to_dict(),
            'tree': self.tree.to_dict(),
            'random_seed': self.random_seed,
        }
        return spec
