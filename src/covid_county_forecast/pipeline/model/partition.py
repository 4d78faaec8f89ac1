from typing import List, NamedTuple, Optional

import numpy as np
import pandas as pd


class Partition(NamedTuple):
    train: pd.DataFrame
    test: pd.DataFrame


def partition(data: pd.DataFrame,
              test_fraction: float,
              rng: np.random.Generator,
              target: Optional[str] = None) -> Partition:
    """Split rows into a simple random train and test sample.

    The train partition holds ``round((1 - test_fraction) * len(data))`` rows
    and the test partition the rest. Rows are not stratified by county.

    Parameters
    ----------
    data
        Rows to split.
    test_fraction
        Share of rows to hold out.
    rng
        Source of randomness for this split alone.
    target
        If given, the split fails when this column has no values at all.

    """
    if data.empty:
        raise ValueError('Cannot partition an empty dataset.')
    if target is not None:
        if target not in data.columns:
            raise ValueError(f'Target column {target} not found in data.')
        if data[target].isnull().all():
            raise ValueError(f'Target column {target} is entirely missing.')

    n_train = int(round((1 - test_fraction) * len(data)))
    order = rng.permutation(len(data))
    train_idx, test_idx = np.sort(order[:n_train]), np.sort(order[n_train:])
    return Partition(
        train=data.iloc[train_idx],
        test=data.iloc[test_idx],
    )


def spawn_generators(seed: Optional[int], n: int) -> List[np.random.Generator]:
    """Independent random generators derived from a single run seed."""
    children = np.random.SeedSequence(seed).spawn(n)
    return [np.random.default_rng(child) for child in children]
