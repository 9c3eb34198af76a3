from repclust.clustering import (
    ClusteringMethod,
    Distance,
    cluster_centroid,
    cluster_medoid,
    pairwise_distance,
)
from repclust.config import CONFIG
from repclust.data import AuxiliaryClusteringData, find_auxiliary_data, validate_df_and_find_key_columns
from repclust.errors import ConfigLoadError, InvalidArgumentError, SchemaError
from repclust.finder import find_representative_periods
from repclust.periods import combine_periods, split_into_periods
from repclust.results import ClusteringResult
from repclust.tables import append_period_from_source_df_as_rp, df_to_matrix_and_keys, matrix_and_keys_to_df
from repclust.weights import WeightMatrix, find_period_weights
from repclust.yaml_loader import cluster_yaml, load_yaml

__all__ = [
    'CONFIG',
    'AuxiliaryClusteringData',
    'ClusteringMethod',
    'ClusteringResult',
    'ConfigLoadError',
    'Distance',
    'InvalidArgumentError',
    'SchemaError',
    'WeightMatrix',
    'append_period_from_source_df_as_rp',
    'cluster_centroid',
    'cluster_medoid',
    'cluster_yaml',
    'combine_periods',
    'df_to_matrix_and_keys',
    'find_auxiliary_data',
    'find_period_weights',
    'find_representative_periods',
    'load_yaml',
    'matrix_and_keys_to_df',
    'pairwise_distance',
    'split_into_periods',
    'validate_df_and_find_key_columns',
]
