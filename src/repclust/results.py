from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import polars as pl

if TYPE_CHECKING:
    from pathlib import Path

    import numpy as np
    import xarray as xr

    from repclust.data import AuxiliaryClusteringData
    from repclust.weights import WeightMatrix


@dataclass(frozen=True)
class ClusteringResult:
    """Representative periods found by :func:`~repclust.find_representative_periods`.

    Attributes:
        profiles: Long table ``(rep_period, timestep, keys..., value)``.
        weight_matrix: ``(period, rep_period)`` weights.
        clustering_matrix: Input to the clustering, one column per complete period.
        rp_matrix: Clustered representatives, one column per clustered
            representative period. An incomplete last period kept as its own
            representative is not part of it.
        auxiliary_data: Metadata of the clustered table.
    """

    profiles: pl.DataFrame
    weight_matrix: WeightMatrix
    clustering_matrix: np.ndarray = field(repr=False)
    rp_matrix: np.ndarray = field(repr=False)
    auxiliary_data: AuxiliaryClusteringData

    @property
    def n_rp(self) -> int:
        """Number of representative periods, including a kept incomplete one."""
        return self.weight_matrix.shape[1]

    @property
    def weights(self) -> pl.DataFrame:
        """Nonzero weights as ``(period, rep_period, weight)``."""
        return self.weight_matrix.to_frame()

    def rep_period(self, rp: int) -> pl.DataFrame:
        """Profile rows of a single representative period.

        Args:
            rp: 1-based representative period index.
        """
        return self.profiles.filter(pl.col('rep_period') == rp)

    def to_xarray(self) -> xr.Dataset:
        """Convert to an xarray Dataset (requires the ``io`` extra)."""
        from repclust.io import result_to_xarray

        return result_to_xarray(self)

    def to_netcdf(self, path: str | Path) -> None:
        """Write the result to NetCDF.

        Args:
            path: Output file path.
        """
        from repclust.io import write_result

        write_result(self, path)

    @classmethod
    def from_netcdf(cls, path: str | Path) -> ClusteringResult:
        """Read a result written by :meth:`to_netcdf`.

        Args:
            path: Input file path.
        """
        from repclust.io import read_result

        return read_result(path)
