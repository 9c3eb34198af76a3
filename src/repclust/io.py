"""NetCDF IO for repclust: serialize ClusteringResult to/from NetCDF via xarray.

Requires the ``io`` extra: ``pip install repclust[io]``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np
import polars as pl

if TYPE_CHECKING:
    import xarray as xr

    from repclust.results import ClusteringResult

_PROFILE_PREFIX = 'profile__'

# Dtypes that survive a NetCDF roundtrip by name
_DTYPES: dict[str, pl.DataType] = {
    str(dtype): dtype
    for dtype in (
        pl.Boolean(),
        pl.Int8(),
        pl.Int16(),
        pl.Int32(),
        pl.Int64(),
        pl.UInt8(),
        pl.UInt16(),
        pl.UInt32(),
        pl.UInt64(),
        pl.Float32(),
        pl.Float64(),
        pl.String(),
        pl.Categorical(),
        pl.Date(),
        pl.Datetime('ms'),
        pl.Datetime('us'),
        pl.Datetime('ns'),
    )
}


def _require_xarray() -> Any:
    """Import and return xarray, raising a helpful error if missing. Also checks netCDF4."""
    try:
        import xarray
    except ModuleNotFoundError:
        msg = "xarray is required for NetCDF IO. Install it with: pip install 'repclust[io]'"
        raise ModuleNotFoundError(msg) from None
    try:
        import netCDF4
    except ModuleNotFoundError:
        msg = "netCDF4 is required for NetCDF IO. Install it with: pip install 'repclust[io]'"
        raise ModuleNotFoundError(msg) from None
    _ = netCDF4  # ensure it's not flagged as unused
    return xarray


# ---------------------------------------------------------------------------
# ClusteringResult -> xarray Dataset
# ---------------------------------------------------------------------------


def result_to_xarray(result: ClusteringResult) -> xr.Dataset:
    """Convert a ClusteringResult to an xarray Dataset.

    Profile columns become ``profile__<name>`` variables along ``profile_row``;
    matrices keep their shape; the weight matrix is stored dense.
    """
    _xr = _require_xarray()
    aux = result.auxiliary_data

    data_vars: dict[str, xr.DataArray] = {}
    for name in result.profiles.columns:
        series = result.profiles[name]
        if str(series.dtype) not in _DTYPES:
            raise ValueError(f'Profile column {name!r} has dtype {series.dtype}, which cannot be stored in NetCDF')
        if series.dtype in (pl.String, pl.Categorical):
            values = np.array(series.cast(pl.String).to_list(), dtype=object)
        else:
            values = series.to_numpy()
        data_vars[f'{_PROFILE_PREFIX}{name}'] = _xr.DataArray(values, dims=['profile_row'])

    data_vars['clustering_matrix'] = _xr.DataArray(result.clustering_matrix, dims=['row', 'period'])
    data_vars['rp_matrix'] = _xr.DataArray(result.rp_matrix, dims=['row', 'clustered_rp'])
    data_vars['weight_matrix'] = _xr.DataArray(result.weight_matrix.to_dense(), dims=['weight_period', 'rep_period'])

    ds = _xr.Dataset(data_vars)
    ds.attrs['key_columns'] = json.dumps(list(aux.key_columns))
    ds.attrs['period_duration'] = aux.period_duration
    ds.attrs['last_period_duration'] = aux.last_period_duration
    ds.attrs['n_periods'] = aux.n_periods
    ds.attrs['profile_columns'] = json.dumps(result.profiles.columns)
    ds.attrs['profile_dtypes'] = json.dumps([str(dtype) for dtype in result.profiles.dtypes])
    return ds


def result_from_xarray(ds: xr.Dataset) -> ClusteringResult:
    """Rebuild a ClusteringResult from :func:`result_to_xarray` output."""
    from repclust.data import AuxiliaryClusteringData
    from repclust.results import ClusteringResult
    from repclust.weights import WeightMatrix

    columns: list[str] = json.loads(ds.attrs['profile_columns'])
    dtypes: list[str] = json.loads(ds.attrs['profile_dtypes'])
    profile_series = []
    for name, dtype_name in zip(columns, dtypes, strict=True):
        values = ds[f'{_PROFILE_PREFIX}{name}'].values
        if values.dtype == object:
            values = values.tolist()
        profile_series.append(pl.Series(name, values).cast(_DTYPES[dtype_name]))
    profiles = pl.DataFrame(profile_series)

    aux = AuxiliaryClusteringData(
        key_columns=tuple(json.loads(ds.attrs['key_columns'])),
        period_duration=int(ds.attrs['period_duration']),
        last_period_duration=int(ds.attrs['last_period_duration']),
        n_periods=int(ds.attrs['n_periods']),
    )
    return ClusteringResult(
        profiles=profiles,
        weight_matrix=WeightMatrix.from_dense(np.asarray(ds['weight_matrix'].values, dtype=np.float64)),
        clustering_matrix=np.asarray(ds['clustering_matrix'].values, dtype=np.float64),
        rp_matrix=np.asarray(ds['rp_matrix'].values, dtype=np.float64),
        auxiliary_data=aux,
    )


# ---------------------------------------------------------------------------
# NetCDF files
# ---------------------------------------------------------------------------


def write_result(result: ClusteringResult, path: str | Path) -> None:
    """Write a ClusteringResult to a NetCDF file, replacing it if present."""
    ds = result_to_xarray(result)
    ds.to_netcdf(Path(path), mode='w', engine='netcdf4')


def read_result(path: str | Path) -> ClusteringResult:
    """Read a ClusteringResult from a NetCDF file."""
    _xr = _require_xarray()
    ds = _xr.load_dataset(Path(path), engine='netcdf4')
    return result_from_xarray(ds)
