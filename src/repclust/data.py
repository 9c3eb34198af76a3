from __future__ import annotations

from dataclasses import dataclass

import polars as pl

from repclust.errors import SchemaError

NON_KEY_COLUMNS = ('period', 'value')


@dataclass(frozen=True)
class AuxiliaryClusteringData:
    """Metadata derived once per clustering run from a period-tagged table.

    All periods but the last are assumed to last ``period_duration`` time
    steps; the last one may be shorter.
    """

    key_columns: tuple[str, ...]
    period_duration: int
    last_period_duration: int
    n_periods: int

    @property
    def has_incomplete_last_period(self) -> bool:
        return self.last_period_duration != self.period_duration


def validate_df_and_find_key_columns(df: pl.DataFrame) -> list[str]:
    """Check the required columns and return the key columns.

    Key columns are all columns except ``period`` and ``value``, in table
    order. They identify a data series within a period and always include
    ``timestep``.

    Args:
        df: Long table split into periods.

    Raises:
        SchemaError: If ``timestep``, ``value`` or ``period`` is missing.
    """
    columns = df.columns
    if 'timestep' not in columns or 'value' not in columns:
        raise SchemaError('DataFrame must contain columns `timestep` and `value`')
    if 'period' not in columns:
        raise SchemaError('DataFrame must contain column `period`; call split_into_periods to split it into periods.')
    return [c for c in columns if c not in NON_KEY_COLUMNS]


def find_auxiliary_data(clustering_data: pl.DataFrame) -> AuxiliaryClusteringData:
    """Compute key columns, period durations and the number of periods.

    Args:
        clustering_data: Long table split into periods.

    Raises:
        SchemaError: On missing columns or an empty table.
    """
    key_columns = validate_df_and_find_key_columns(clustering_data)
    if clustering_data.is_empty():
        raise SchemaError('DataFrame has no rows; cannot determine periods')

    n_periods = int(clustering_data['period'].max())  # type: ignore[arg-type]
    period_duration = int(clustering_data['timestep'].max())  # type: ignore[arg-type]
    last_period_duration = int(
        clustering_data.filter(pl.col('period') == n_periods)['timestep'].max()  # type: ignore[arg-type]
    )
    return AuxiliaryClusteringData(
        key_columns=tuple(key_columns),
        period_duration=period_duration,
        last_period_duration=last_period_duration,
        n_periods=n_periods,
    )
