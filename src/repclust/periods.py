"""Conversion between a flat time axis and (period, timestep) coordinates.

Both functions are pure: they return a new ``pl.DataFrame`` and leave the
input untouched.
"""

from __future__ import annotations

import polars as pl

from repclust.errors import InvalidArgumentError, SchemaError


def combine_periods(df: pl.DataFrame) -> pl.DataFrame:
    """Merge ``period`` and ``timestep`` into a single global ``timestep``.

    The period duration is inferred from the maximum time step, assuming all
    periods start with time step 1::

        period=[1, 1, 2], timestep=[1, 2, 1]  ->  timestep=[1, 2, 3]

    Args:
        df: Long table with a ``timestep`` and optionally a ``period`` column.

    Raises:
        SchemaError: If ``timestep`` is missing.
    """
    if 'timestep' not in df.columns:
        raise SchemaError('DataFrame does not contain a column `timestep`')
    if 'period' not in df.columns:
        return df
    max_t = df['timestep'].max()
    return df.with_columns(
        ((pl.col('period') - 1) * max_t + pl.col('timestep')).alias('timestep'),
    ).drop('period')


def split_into_periods(df: pl.DataFrame, period_duration: int | None = None) -> pl.DataFrame:
    """Split the global ``timestep`` column into ``period`` and ``timestep``.

    Existing periods are combined first, so the table may already be split
    with a different duration. With ``period_duration=None`` every row lands
    in period 1.

    Args:
        df: Long table with a ``timestep`` column.
        period_duration: Number of time steps per period.

    Raises:
        SchemaError: If ``timestep`` is missing.
        InvalidArgumentError: If ``period_duration`` is smaller than 1.
    """
    df = combine_periods(df)

    if period_duration is None:
        df = df.with_columns(pl.lit(1, dtype=pl.Int64).alias('period'))
    else:
        if period_duration < 1:
            raise InvalidArgumentError(f'period_duration must be at least 1, got {period_duration}')
        # 1-based floor division with remainder
        shifted = pl.col('timestep') - 1
        df = df.with_columns(
            (shifted // period_duration + 1).alias('period'),
            (shifted % period_duration + 1).alias('timestep'),
        )

    others = [c for c in df.columns if c not in ('period', 'timestep')]
    return df.select('period', 'timestep', *others)
