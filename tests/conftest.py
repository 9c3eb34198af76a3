from __future__ import annotations

import numpy as np
import polars as pl
import pytest


def make_profiles(n_periods: int, period_duration: int, assets: list[str], *, last_period_duration: int | None = None):
    """Long table with a daily-shaped profile per asset.

    Period ``p`` of asset ``i`` is ``(i + 1) * shape + level[p]`` where the
    level alternates between two clusters, so k-means with two clusters has
    a unique answer.

    Args:
        n_periods: Number of periods.
        period_duration: Time steps per complete period.
        assets: Values of the ``asset`` key column.
        last_period_duration: Shorter duration for the last period, if any.
    """
    shape = np.sin(np.linspace(0, np.pi, period_duration))
    rows: list[dict] = []
    for p in range(1, n_periods + 1):
        level = 0.0 if p % 2 else 10.0
        duration = last_period_duration if (p == n_periods and last_period_duration) else period_duration
        for i, asset in enumerate(assets):
            for t in range(1, duration + 1):
                rows.append(
                    {
                        'period': p,
                        'timestep': t,
                        'asset': asset,
                        'value': float((i + 1) * shape[t - 1] + level + 0.01 * p),
                    }
                )
    return pl.DataFrame(rows)


@pytest.fixture
def two_cluster_data() -> pl.DataFrame:
    """6 complete periods of 4 time steps for two assets."""
    return make_profiles(6, 4, ['solar', 'wind'])


@pytest.fixture
def incomplete_data() -> pl.DataFrame:
    """5 complete periods of 4 time steps plus a last period of 2."""
    return make_profiles(6, 4, ['solar', 'wind'], last_period_duration=2)
