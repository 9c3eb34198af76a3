from __future__ import annotations

import numpy as np
import pytest

from repclust import ClusteringMethod, Distance, InvalidArgumentError, cluster_centroid, cluster_medoid, pairwise_distance
from repclust.clustering import as_distance, as_method


@pytest.fixture
def two_groups() -> np.ndarray:
    """(2, 5) matrix whose columns form two well separated groups."""
    return np.array(
        [
            [0.05, 0.1, 10.0, 10.2, 0.2],
            [0.0, 0.1, 10.0, 10.1, 0.0],
        ]
    )


class TestNames:
    def test_strings_accepted(self):
        assert as_method('k_medoids') is ClusteringMethod.K_MEDOIDS
        assert as_distance('cityblock') is Distance.CITYBLOCK

    def test_unknown_method(self):
        with pytest.raises(InvalidArgumentError, match='not supported'):
            as_method('hierarchical')

    def test_unknown_distance(self):
        with pytest.raises(InvalidArgumentError, match='not supported'):
            as_distance('mahalanobis')


class TestClusterCentroid:
    def test_assignments_and_centers(self, two_groups):
        centers, assignments = cluster_centroid(two_groups, 2, random_state=0, n_init=10)
        assert centers.shape == (2, 2)
        assert set(assignments.tolist()) == {1, 2}
        assert assignments[0] == assignments[1] == assignments[4]
        assert assignments[2] == assignments[3]
        assert assignments[0] != assignments[2]
        low = centers[:, assignments[0] - 1]
        np.testing.assert_allclose(low, two_groups[:, [0, 1, 4]].mean(axis=1))

    def test_euclidean_accepted(self, two_groups):
        _, assignments = cluster_centroid(two_groups, 1, Distance.EUCLIDEAN, random_state=0, n_init=1)
        assert assignments.tolist() == [1, 1, 1, 1, 1]

    def test_non_euclidean_rejected(self, two_groups):
        with pytest.raises(InvalidArgumentError, match='k_medoids'):
            cluster_centroid(two_groups, 2, Distance.CITYBLOCK)


class TestPairwiseDistance:
    def test_sqeuclidean(self):
        matrix = np.array([[0.0, 3.0], [0.0, 4.0]])
        result = pairwise_distance(matrix)
        np.testing.assert_allclose(result, [[0.0, 25.0], [25.0, 0.0]])

    def test_symmetric_zero_diagonal(self, two_groups):
        for distance in Distance:
            result = pairwise_distance(two_groups, distance)
            assert result.shape == (5, 5)
            np.testing.assert_allclose(result, result.T)
            np.testing.assert_array_equal(np.diag(result), 0.0)


class TestClusterMedoid:
    def test_two_groups(self, two_groups):
        distances = pairwise_distance(two_groups, Distance.EUCLIDEAN)
        medoids, assignments = cluster_medoid(distances, 2, random_state=0)
        assert medoids.shape == (2,)
        assert assignments[0] == assignments[1] == assignments[4]
        assert assignments[2] == assignments[3]
        assert assignments[0] != assignments[2]
        # every medoid belongs to the cluster it represents
        for cluster, medoid in enumerate(medoids, start=1):
            assert assignments[medoid] == cluster

    def test_medoid_minimises_in_cluster_distance(self):
        points = np.array([[0.0, 1.0, 2.0, 100.0]])
        distances = pairwise_distance(points, Distance.CITYBLOCK)
        medoids, assignments = cluster_medoid(distances, 2)
        assert sorted(medoids.tolist()) == [1, 3]
        assert assignments[0] == assignments[1] == assignments[2]

    def test_k_equals_n(self, two_groups):
        distances = pairwise_distance(two_groups)
        medoids, assignments = cluster_medoid(distances, 5)
        assert sorted(medoids.tolist()) == [0, 1, 2, 3, 4]
        assert sorted(assignments.tolist()) == [1, 2, 3, 4, 5]

    def test_duplicate_columns(self):
        distances = pairwise_distance(np.zeros((2, 3)))
        medoids, assignments = cluster_medoid(distances, 2)
        assert len(set(medoids.tolist())) == 2
        assert set(assignments.tolist()) == {1, 2}

    def test_seeded_runs_repeat(self, two_groups):
        distances = pairwise_distance(two_groups, Distance.CITYBLOCK)
        first = cluster_medoid(distances, 3, random_state=7)
        second = cluster_medoid(distances, 3, random_state=7)
        np.testing.assert_array_equal(first[0], second[0])
        np.testing.assert_array_equal(first[1], second[1])

    @pytest.mark.parametrize('k', [0, 6])
    def test_k_out_of_range(self, two_groups, k):
        with pytest.raises(InvalidArgumentError):
            cluster_medoid(pairwise_distance(two_groups), k)
