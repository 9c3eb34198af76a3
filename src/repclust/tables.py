"""Conversion between long-format tables and (matrix, keys) pairs.

The clustering collaborators work on plain ``float64`` matrices whose
columns are periods and whose rows are the flattened (timestep, keys...)
index. These helpers move data in and out of that shape.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import polars as pl

if TYPE_CHECKING:
    from collections.abc import Sequence


def df_to_matrix_and_keys(df: pl.DataFrame, key_columns: Sequence[str]) -> tuple[np.ndarray, pl.DataFrame]:
    """Pivot a long table into a (keys x periods) matrix.

    Rows follow the first-seen order of the key combinations; columns follow
    ascending ``period``. Key combinations missing from any period are
    dropped, so the matrix is always rectangular.

    Example::

        period timestep a value          matrix    keys
        1      1        a 1              [[1, 3],  timestep a
        1      2        a 2       ->      [2, 4]]  1        a
        2      1        a 3                        2        a
        2      2        a 4

    Args:
        df: Long table with ``period``, ``value`` and the key columns.
        key_columns: Columns identifying a series within a period.

    Returns:
        ``(matrix, keys)`` with matching row order.
    """
    key_columns = list(key_columns)
    periods = df['period'].unique().sort().to_list()
    period_columns = [str(p) for p in periods]

    wide = df.pivot(on='period', index=key_columns, values='value', maintain_order=True)
    wide = wide.drop_nulls(subset=period_columns)

    matrix = wide.select(period_columns).to_numpy().astype(np.float64)
    keys = wide.select(key_columns)
    return matrix, keys


def matrix_and_keys_to_df(matrix: np.ndarray, keys: pl.DataFrame) -> pl.DataFrame:
    """Unpivot a (keys x representative periods) matrix into a long table.

    Column ``j`` of ``matrix`` becomes ``rep_period = j + 1``. The output
    columns are ``rep_period, timestep, <other keys>, value``.

    Args:
        matrix: ``(n_keys, n_rp)`` array.
        keys: Key columns, one row per matrix row.
    """
    n_columns = matrix.shape[1]
    rp_columns = [str(j) for j in range(1, n_columns + 1)]
    wide = pl.DataFrame(np.asarray(matrix, dtype=np.float64), schema=rp_columns, orient='row')
    wide = pl.concat([keys, wide], how='horizontal')

    result = wide.unpivot(on=rp_columns, index=keys.columns, variable_name='rep_period', value_name='value')
    result = result.drop_nulls(subset='value').with_columns(pl.col('rep_period').cast(pl.Int64))

    others = [c for c in result.columns if c not in ('rep_period', 'timestep')]
    return result.select('rep_period', 'timestep', *others)


def append_period_from_source_df_as_rp(
    df: pl.DataFrame,
    *,
    source_df: pl.DataFrame,
    period: int,
    rp: int,
    key_columns: Sequence[str],
) -> pl.DataFrame:
    """Append period ``period`` of ``source_df`` to ``df`` as representative ``rp``.

    Args:
        df: Representative period table (``rep_period``, keys, ``value``).
        source_df: Long table with a ``period`` column.
        period: Period to copy.
        rp: Representative period index to give it.
        key_columns: Key columns to carry over.
    """
    period_df = (
        source_df.filter(pl.col('period') == period)
        .with_columns(pl.lit(rp, dtype=pl.Int64).alias('rep_period'))
        .select('rep_period', *key_columns, 'value')
        .select(df.columns)
    )
    return pl.concat([df, period_df], how='vertical_relaxed')
