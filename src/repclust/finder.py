from __future__ import annotations

import logging
from typing import Any

import polars as pl

from repclust.clustering import (
    ClusteringMethod,
    Distance,
    as_distance,
    as_method,
    cluster_centroid,
    cluster_medoid,
    pairwise_distance,
)
from repclust.data import find_auxiliary_data
from repclust.errors import InvalidArgumentError
from repclust.results import ClusteringResult
from repclust.tables import append_period_from_source_df_as_rp, df_to_matrix_and_keys, matrix_and_keys_to_df
from repclust.weights import WeightMatrix, find_period_weights

logger = logging.getLogger('repclust.finder')


def find_representative_periods(
    clustering_data: pl.DataFrame,
    n_rp: int,
    *,
    drop_incomplete_last_period: bool = False,
    method: ClusteringMethod | str = ClusteringMethod.K_MEANS,
    distance: Distance | str = Distance.SQEUCLIDEAN,
    **kwargs: Any,
) -> ClusteringResult:
    """Find representative periods via data clustering.

    Only the last period may be shorter than the others. If it is, it is
    either dropped and its duration spread over the complete periods
    (``drop_incomplete_last_period=True``), or kept as its own, shorter
    representative period, in which case only ``n_rp - 1`` representatives
    are found by clustering.

    Args:
        clustering_data: Long table split into periods
            (``period``, ``timestep``, keys..., ``value``).
        n_rp: Number of representative periods to find.
        drop_incomplete_last_period: How to treat an incomplete last period.
        method: ``'k_means'`` or ``'k_medoids'``.
        distance: Semimetric between periods.
        **kwargs: Passed to the clustering method.

    Raises:
        InvalidArgumentError: On an invalid ``n_rp``, method or distance.
        SchemaError: If required columns are missing.
    """
    # n_rp against n_periods is checked once the auxiliary data is known
    if n_rp < 1:
        raise InvalidArgumentError(f'The number of representative periods is {n_rp} but has to be at least 1.')

    aux = find_auxiliary_data(clustering_data)
    n_periods = aux.n_periods
    if n_rp > n_periods:
        raise InvalidArgumentError(
            f'The number of representative periods exceeds the total number of periods, {n_rp} > {n_periods}.'
        )
    # schema problems are reported before unsupported names
    method = as_method(method)
    distance = as_distance(distance)
    logger.info('Clustering %d periods into %d representative periods (%s)', n_periods, n_rp, method.value)

    has_incomplete_last_period = aux.has_incomplete_last_period
    is_last_period_excluded = has_incomplete_last_period and not drop_incomplete_last_period
    n_complete_periods = n_periods - 1 if has_incomplete_last_period else n_periods

    complete_period_weight, incomplete_period_weight = find_period_weights(
        aux.period_duration,
        aux.last_period_duration,
        n_periods,
        drop_incomplete_last_period,
    )
    logger.debug('Period weights: complete=%s, incomplete=%s', complete_period_weight, incomplete_period_weight)

    # The complete periods' weights are filled in after clustering
    if is_last_period_excluded:
        if n_rp == 1:
            raise InvalidArgumentError(
                'The incomplete last period takes a representative period of its own; '
                'n_rp must be at least 2 to cluster the remaining periods.'
            )
        weight_matrix = WeightMatrix(n_periods, n_rp)
        weight_matrix.assign(n_periods, n_rp, incomplete_period_weight)  # type: ignore[arg-type]
        n_rp -= 1
        logger.debug('Incomplete last period %d kept as representative period %d', n_periods, n_rp + 1)
    else:
        weight_matrix = WeightMatrix(n_complete_periods, n_rp)
        if has_incomplete_last_period:
            logger.debug('Incomplete last period %d dropped', n_periods)
    if n_rp > n_complete_periods:
        raise InvalidArgumentError(
            f'Cannot cluster {n_complete_periods} complete periods into {n_rp} representative periods.'
        )

    clustering_matrix, keys = df_to_matrix_and_keys(
        clustering_data.filter(pl.col('period') <= n_complete_periods),
        aux.key_columns,
    )
    logger.debug('Clustering matrix has shape %s', clustering_matrix.shape)

    if method is ClusteringMethod.K_MEANS:
        rp_matrix, assignments = cluster_centroid(clustering_matrix, n_rp, distance, **kwargs)
    elif method is ClusteringMethod.K_MEDOIDS:
        distance_matrix = pairwise_distance(clustering_matrix, distance)
        medoids, assignments = cluster_medoid(distance_matrix, n_rp, **kwargs)
        rp_matrix = clustering_matrix[:, medoids]
    else:
        raise InvalidArgumentError(f'Clustering method {method!r} is not supported')

    for p, rp in enumerate(assignments, start=1):
        weight_matrix.assign(p, int(rp), complete_period_weight)

    rp_df = matrix_and_keys_to_df(rp_matrix, keys)

    if is_last_period_excluded:
        n_rp += 1
        rp_df = append_period_from_source_df_as_rp(
            rp_df,
            source_df=clustering_data,
            period=n_periods,
            rp=n_rp,
            key_columns=aux.key_columns,
        )

    logger.info('Found %d representative periods', n_rp)
    return ClusteringResult(
        profiles=rp_df,
        weight_matrix=weight_matrix,
        clustering_matrix=clustering_matrix,
        rp_matrix=rp_matrix,
        auxiliary_data=aux,
    )
