import numpy
import pandas
import pytest

from covid_county_forecast.lib import static_vars
from covid_county_forecast.pipeline.model import linear


@pytest.fixture
def doubling_data():
    """future_cases = 2 * cases + noise, with unrelated predictors."""
    rng = numpy.random.default_rng(2020)
    n = 2000
    data = pandas.DataFrame({
        column: rng.uniform(0, 100, n) for column in static_vars.LINEAR_PREDICTORS
    })
    data['cases'] = rng.uniform(0, 1000, n)
    data['future_cases'] = 2 * data['cases'] + rng.normal(0, 1, n)
    return data


def test_recovers_coefficients(doubling_data):
    summary = linear.fit_linear_model(doubling_data, 0.2, numpy.random.default_rng(0))

    estimates = summary.coefficients['estimate']
    assert estimates['cases'] == pytest.approx(2, abs=1e-2)
    unrelated = [p for p in static_vars.LINEAR_PREDICTORS if p != 'cases']
    assert (estimates[unrelated].abs() < 0.01).all()
    assert summary.adjusted_r_squared > 0.99


def test_importance_ranking(doubling_data):
    summary = linear.fit_linear_model(doubling_data, 0.2, numpy.random.default_rng(0))

    assert summary.importance.index[0] == 'cases'
    assert linear.COL_INTERCEPT not in summary.importance.index
    assert summary.importance.is_monotonic_decreasing
    assert set(summary.importance.index) == set(static_vars.LINEAR_PREDICTORS)


def test_summary_metrics(doubling_data):
    summary = linear.fit_linear_model(doubling_data, 0.2, numpy.random.default_rng(0))

    assert summary.n_train == 1600
    assert summary.n_test == 400
    assert summary.train_rmse == pytest.approx(1, rel=0.1)
    assert summary.test_rmse == pytest.approx(1, rel=0.15)
    assert list(summary.coefficients.columns) == ['estimate', 'std_err', 't_value', 'p_value']
    assert summary.test_predicted.index.equals(summary.test_observed.index)


def test_deterministic_for_seed(doubling_data):
    first = linear.fit_linear_model(doubling_data, 0.2, numpy.random.default_rng(9))
    second = linear.fit_linear_model(doubling_data, 0.2, numpy.random.default_rng(9))

    pandas.testing.assert_frame_equal(first.coefficients, second.coefficients)
    assert first.test_rmse == second.test_rmse


def test_fits_engineered_features(enriched_data):
    summary = linear.fit_linear_model(enriched_data, 0.2, numpy.random.default_rng(0))

    assert summary.n_train + summary.n_test == len(enriched_data)
    assert numpy.isfinite(summary.test_rmse)
