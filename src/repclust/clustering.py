"""Clustering collaborators: k-means, pairwise distances and k-medoids.

All functions take matrices whose columns are the items being clustered
(periods) and return 1-based assignments.
"""

from __future__ import annotations

import logging
from enum import StrEnum

import kmedoids
import numpy as np
from scipy.spatial.distance import cdist
from sklearn.cluster import KMeans

from repclust.errors import InvalidArgumentError

logger = logging.getLogger('repclust.clustering')


class ClusteringMethod(StrEnum):
    K_MEANS = 'k_means'
    K_MEDOIDS = 'k_medoids'


class Distance(StrEnum):
    """Semimetrics usable between periods (scipy ``cdist`` metric names)."""

    SQEUCLIDEAN = 'sqeuclidean'
    EUCLIDEAN = 'euclidean'
    CITYBLOCK = 'cityblock'
    CHEBYSHEV = 'chebyshev'
    COSINE = 'cosine'


# k-means minimises squared Euclidean distance; Euclidean yields the same partition.
_CENTROID_DISTANCES = frozenset({Distance.SQEUCLIDEAN, Distance.EUCLIDEAN})


def as_method(method: ClusteringMethod | str) -> ClusteringMethod:
    try:
        return ClusteringMethod(method)
    except ValueError:
        supported = ', '.join(m.value for m in ClusteringMethod)
        raise InvalidArgumentError(f'Clustering method {method!r} is not supported; use one of: {supported}') from None


def as_distance(distance: Distance | str) -> Distance:
    try:
        return Distance(distance)
    except ValueError:
        supported = ', '.join(d.value for d in Distance)
        raise InvalidArgumentError(f'Distance {distance!r} is not supported; use one of: {supported}') from None


def cluster_centroid(
    matrix: np.ndarray,
    k: int,
    distance: Distance | str = Distance.SQEUCLIDEAN,
    **kwargs: object,
) -> tuple[np.ndarray, np.ndarray]:
    """Run k-means over the columns of ``matrix``.

    Args:
        matrix: ``(d, n)`` array, one column per item.
        k: Number of clusters.
        distance: Must be squared Euclidean or Euclidean.
        **kwargs: Passed to ``sklearn.cluster.KMeans`` (``random_state``,
            ``n_init``, ``max_iter``, ...).

    Returns:
        ``(centers, assignments)``: ``(d, k)`` centers and an ``(n,)`` array
        with values in ``1..k``.

    Raises:
        InvalidArgumentError: For a distance k-means cannot minimise.
    """
    distance = as_distance(distance)
    if distance not in _CENTROID_DISTANCES:
        raise InvalidArgumentError(f'k-means requires a Euclidean distance, got {distance.value!r}; use k_medoids')

    kmeans = KMeans(n_clusters=k, **kwargs).fit(matrix.T)  # type: ignore[arg-type]
    centers = np.asarray(kmeans.cluster_centers_, dtype=np.float64).T
    assignments = kmeans.labels_.astype(np.int64) + 1
    logger.debug('k-means finished after %d iterations, inertia %.6g', kmeans.n_iter_, kmeans.inertia_)
    return centers, assignments


def pairwise_distance(matrix: np.ndarray, distance: Distance | str = Distance.SQEUCLIDEAN) -> np.ndarray:
    """Distances between all pairs of columns of ``matrix``.

    Returns:
        Symmetric ``(n, n)`` array with a zero diagonal.
    """
    distance = as_distance(distance)
    columns = np.ascontiguousarray(matrix.T, dtype=np.float64)
    result = cdist(columns, columns, metric=distance.value)
    np.fill_diagonal(result, 0.0)
    return result


def cluster_medoid(
    distance_matrix: np.ndarray,
    k: int,
    *,
    max_iter: int = 300,
    random_state: int | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """FasterPAM k-medoids over a precomputed distance matrix.

    Args:
        distance_matrix: Symmetric ``(n, n)`` array.
        k: Number of clusters, ``1 <= k <= n``.
        max_iter: Upper bound on the number of swap iterations.
        random_state: Seed for the random initial medoids.

    Returns:
        ``(medoids, assignments)``: ``(k,)`` 0-based column indices of the
        medoids and an ``(n,)`` array with values in ``1..k``.
    """
    n = distance_matrix.shape[0]
    if not 1 <= k <= n:
        raise InvalidArgumentError(f'k must be in 1..{n}, got {k}')
    if k == n:
        # every item is its own medoid
        medoids = np.arange(n, dtype=np.int64)
        return medoids, medoids + 1

    res = kmedoids.fasterpam(distance_matrix, k, max_iter=max_iter, random_state=random_state)
    medoids = np.asarray(res.medoids, dtype=np.int64)
    labels = np.asarray(res.labels, dtype=np.int64)
    # items at distance zero from several medoids keep their own medoid's label
    labels[medoids] = np.arange(k)
    logger.debug('k-medoids finished after %d iterations, loss %.6g', res.n_iter, res.loss)
    return medoids, labels + 1
