"""YAML + CSV loader for clustering runs.

Loads a declarative YAML file pointing at a long-format CSV and returns the
arguments of ``find_representative_periods``::

    data: profiles.csv          # columns: timestep, [keys...], value
    period_duration: 24         # optional; omitted -> a single period
    n_rp: 4
    method: k_medoids           # optional, default from CONFIG.Clustering
    distance: euclidean         # optional
    drop_incomplete_last_period: false
    options:                    # passed to the clustering method
      random_state: 0

Public API:
    - ``load_yaml(path)``: returns kwargs for ``find_representative_periods()``
    - ``cluster_yaml(path)``: load + cluster in one call
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import polars as pl
import yaml

from repclust.config import CONFIG
from repclust.errors import ConfigLoadError
from repclust.periods import split_into_periods

if TYPE_CHECKING:
    from repclust.results import ClusteringResult

logger = logging.getLogger('repclust.yaml_loader')

_KNOWN_KEYS = frozenset(
    {'data', 'period_duration', 'n_rp', 'method', 'distance', 'drop_incomplete_last_period', 'options'}
)


def _load_raw(yaml_path: Path) -> dict[str, Any]:
    """Read the YAML file and check its top-level shape."""
    if not yaml_path.exists():
        raise ConfigLoadError(f'YAML file not found: {yaml_path}')
    with open(yaml_path) as fh:
        raw = yaml.safe_load(fh)

    if not isinstance(raw, dict):
        raise ConfigLoadError(f'Expected YAML mapping at top level, got {type(raw).__name__}')

    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        raise ConfigLoadError(f'Unknown keys in {yaml_path.name}: {unknown}')
    for key in ('data', 'n_rp'):
        if key not in raw:
            raise ConfigLoadError(f'Missing required key {key!r}')
    return raw


def _read_data(yaml_dir: Path, data_path: Any, period_duration: Any) -> pl.DataFrame:
    if not isinstance(data_path, str):
        raise ConfigLoadError(f"'data' must be a path string, got {type(data_path).__name__}")
    csv_path = yaml_dir / data_path
    if not csv_path.exists():
        raise ConfigLoadError(f'CSV file not found: {csv_path}')
    if period_duration is not None and (isinstance(period_duration, bool) or not isinstance(period_duration, int)):
        raise ConfigLoadError(f"'period_duration' must be an integer, got {period_duration!r}")

    df = pl.read_csv(csv_path)
    logger.debug('Read %d rows from %s', len(df), csv_path)
    try:
        return split_into_periods(df, period_duration=period_duration)
    except ValueError as exc:
        raise ConfigLoadError(f'Error splitting {csv_path.name} into periods: {exc}') from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML+CSV clustering definition and return clustering kwargs.

    Args:
        path: Path to the YAML file. The CSV path is resolved relative to it.

    Returns:
        Dict with keys ``clustering_data``, ``n_rp``, ``method``,
        ``distance``, ``drop_incomplete_last_period`` plus any ``options``.

    Raises:
        ConfigLoadError: On missing or unknown keys, missing files, or bad values.
    """
    yaml_path = Path(path)
    raw = _load_raw(yaml_path)

    clustering_data = _read_data(yaml_path.parent, raw['data'], raw.get('period_duration'))

    n_rp = raw['n_rp']
    if isinstance(n_rp, bool) or not isinstance(n_rp, int):
        raise ConfigLoadError(f"'n_rp' must be an integer, got {n_rp!r}")

    options = raw.get('options') or {}
    if not isinstance(options, dict):
        raise ConfigLoadError(f"'options' must be a mapping, got {type(options).__name__}")
    if CONFIG.Clustering.random_state is not None:
        options.setdefault('random_state', CONFIG.Clustering.random_state)

    drop = raw.get('drop_incomplete_last_period', CONFIG.Clustering.drop_incomplete_last_period)
    if not isinstance(drop, bool):
        raise ConfigLoadError(f"'drop_incomplete_last_period' must be true or false, got {drop!r}")

    result: dict[str, Any] = {
        'clustering_data': clustering_data,
        'n_rp': n_rp,
        'method': raw.get('method', CONFIG.Clustering.method),
        'distance': raw.get('distance', CONFIG.Clustering.distance),
        'drop_incomplete_last_period': drop,
    }
    clashing = sorted(set(options) & set(result))
    if clashing:
        raise ConfigLoadError(f"'options' must not repeat top-level settings: {clashing}")
    result.update(options)
    return result


def cluster_yaml(path: str | Path) -> ClusteringResult:
    """Load a YAML clustering definition and find its representative periods.

    Args:
        path: Path to the YAML file.
    """
    from repclust.finder import find_representative_periods

    kwargs = load_yaml(path)
    return find_representative_periods(**kwargs)
