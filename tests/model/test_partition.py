import numpy
import pandas
import pytest

from covid_county_forecast.pipeline.model.partition import partition, spawn_generators


def _frame(n):
    return pandas.DataFrame({'x': numpy.arange(n), 'future_cases': numpy.arange(n) * 2.})


@pytest.mark.parametrize('n', [1, 2, 3, 7, 10, 33, 101, 999])
def test_partition_sizes(n):
    data = _frame(n)
    train, test = partition(data, 0.2, numpy.random.default_rng(0))

    assert abs(len(train) - round(0.8 * n)) <= 1
    assert len(test) == n - len(train)


def test_partition_is_disjoint_and_complete():
    data = _frame(500)
    train, test = partition(data, 0.2, numpy.random.default_rng(0))

    assert set(train.index).isdisjoint(test.index)
    assert sorted(train.index.tolist() + test.index.tolist()) == list(range(500))


def test_partition_reproducible():
    data = _frame(200)
    first = partition(data, 0.2, numpy.random.default_rng(42))
    second = partition(data, 0.2, numpy.random.default_rng(42))

    pandas.testing.assert_frame_equal(first.train, second.train)
    pandas.testing.assert_frame_equal(first.test, second.test)


def test_spawned_generators_give_independent_splits():
    data = _frame(200)
    linear_rng, tree_rng = spawn_generators(20200914, 2)

    linear_split = partition(data, 0.2, linear_rng)
    tree_split = partition(data, 0.2, tree_rng)

    assert not linear_split.test.index.equals(tree_split.test.index)


def test_spawned_generators_reproducible():
    first = [rng.integers(1_000_000) for rng in spawn_generators(5, 2)]
    second = [rng.integers(1_000_000) for rng in spawn_generators(5, 2)]
    assert first == second


def test_empty_data_rejected():
    with pytest.raises(ValueError, match='empty'):
        partition(_frame(0), 0.2, numpy.random.default_rng(0))


def test_missing_target_rejected():
    data = _frame(10)
    data['future_cases'] = numpy.nan
    with pytest.raises(ValueError, match='entirely missing'):
        partition(data, 0.2, numpy.random.default_rng(0), target='future_cases')

    with pytest.raises(ValueError, match='not found'):
        partition(data, 0.2, numpy.random.default_rng(0), target='future_deaths')
