from __future__ import annotations

import numpy as np
import polars as pl
import scipy.sparse as sp

from repclust.errors import InvalidArgumentError


def find_period_weights(
    period_duration: int,
    last_period_duration: int,
    n_periods: int,
    drop_incomplete_periods: bool,
) -> tuple[float, float | None]:
    """Find the weights of complete periods and of an incomplete last period.

    - complete periods last exactly ``period_duration`` time steps.
    - the last period is incomplete if it is shorter than that.

    When the incomplete period is dropped, its duration is spread over the
    complete periods, so their weight grows above one. When it is kept, it
    becomes its own representative with weight one.

    Args:
        period_duration: Duration of a complete period in time steps.
        last_period_duration: Duration of the last period in time steps.
        n_periods: Total number of periods, including the last one.
        drop_incomplete_periods: Whether an incomplete last period is dropped.

    Returns:
        ``(complete_period_weight, incomplete_period_weight)``; the second
        entry is ``None`` when there is no incomplete period or it is dropped.

    Raises:
        InvalidArgumentError: If the only period is incomplete and dropped.
    """
    if last_period_duration == period_duration:
        return 1.0, None
    if drop_incomplete_periods:
        if n_periods < 2:
            raise InvalidArgumentError(
                'Cannot drop the incomplete last period: there are no complete periods to carry its weight.'
            )
        full_period_timesteps = period_duration * (n_periods - 1)
        total_timesteps = full_period_timesteps + last_period_duration
        return total_timesteps / full_period_timesteps, None
    return 1.0, 1.0


class WeightMatrix:
    """Sparse (period x rep_period) matrix of period weights.

    Entry ``(p, rp)`` is the weight period ``p`` contributes to
    representative period ``rp``. Every row holds at most one nonzero entry;
    :meth:`assign` is the only way to write and enforces that. Indices in the
    public API are 1-based, like the ``period`` and ``rep_period`` columns.

    Args:
        n_periods: Number of rows.
        n_rp: Number of columns.
    """

    __slots__ = ('_matrix',)

    def __init__(self, n_periods: int, n_rp: int) -> None:
        self._matrix = sp.lil_array((n_periods, n_rp), dtype=np.float64)

    @property
    def shape(self) -> tuple[int, int]:
        return self._matrix.shape  # type: ignore[return-value]

    @property
    def nnz(self) -> int:
        return self._matrix.nnz

    def assign(self, period: int, rep_period: int, weight: float) -> None:
        """Map ``period`` to ``rep_period`` with the given weight.

        Re-assigning a period to the same representative overwrites the weight.

        Args:
            period: 1-based period index.
            rep_period: 1-based representative period index.
            weight: Non-negative weight.

        Raises:
            IndexError: If an index is outside the matrix.
            ValueError: On a negative weight, or if the period is already
                mapped to a different representative period.
        """
        n_rows, n_cols = self.shape
        if not 1 <= period <= n_rows:
            raise IndexError(f'period {period} out of range 1..{n_rows}')
        if not 1 <= rep_period <= n_cols:
            raise IndexError(f'rep_period {rep_period} out of range 1..{n_cols}')
        if weight < 0:
            raise ValueError(f'Weights must be non-negative, got {weight}')
        existing = self._matrix.rows[period - 1]
        if existing and existing != [rep_period - 1]:
            raise ValueError(
                f'Period {period} is already assigned to rep_period {existing[0] + 1}, cannot assign {rep_period}'
            )
        self._matrix[period - 1, rep_period - 1] = weight

    def __getitem__(self, key: tuple[int, int]) -> float:
        period, rep_period = key
        return float(self._matrix[period - 1, rep_period - 1])

    def to_sparse(self) -> sp.csr_array:
        return sp.csr_array(self._matrix)

    def to_dense(self) -> np.ndarray:
        return self._matrix.toarray()

    def assignments(self) -> dict[int, int]:
        """Map each assigned period to its representative period (1-based)."""
        return {i + 1: cols[0] + 1 for i, cols in enumerate(self._matrix.rows) if cols}

    def to_frame(self) -> pl.DataFrame:
        """Long table ``(period, rep_period, weight)`` of the nonzero entries."""
        coo = self._matrix.tocoo()
        order = np.argsort(coo.row, kind='stable')
        return pl.DataFrame(
            {
                'period': (coo.row[order] + 1).astype(np.int64),
                'rep_period': (coo.col[order] + 1).astype(np.int64),
                'weight': coo.data[order].astype(np.float64),
            }
        )

    def rep_period_weights(self) -> pl.DataFrame:
        """Total weight per representative period, ``(rep_period, weight)``."""
        totals = np.asarray(self._matrix.sum(axis=0)).ravel()
        return pl.DataFrame(
            {
                'rep_period': np.arange(1, len(totals) + 1, dtype=np.int64),
                'weight': totals.astype(np.float64),
            }
        )

    @classmethod
    def from_dense(cls, dense: np.ndarray) -> WeightMatrix:
        """Rebuild from a dense array, validating the one-entry-per-row rule.

        Args:
            dense: ``(n_periods, n_rp)`` array.
        """
        n_periods, n_rp = dense.shape
        result = cls(n_periods, n_rp)
        for row, col in zip(*np.nonzero(dense), strict=True):
            result.assign(int(row) + 1, int(col) + 1, float(dense[row, col]))
        return result

    def __repr__(self) -> str:
        return f'WeightMatrix(shape={self.shape}, nnz={self.nnz})'
