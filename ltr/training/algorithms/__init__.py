"""
Ranking algorithms (FINAL / FROZEN)

- ranknet_old : PlainPairwise           (baseline, two updates per pair)
- ranknet     : FactorizedPairwise      (one lambda per document)
- lambdarank  : MetricWeightedPairwise  (lambdas scaled by |dNDCG|)

All algorithms must be registered in registry._ALGORITHM_REGISTRY.
"""
from .base import RankingAlgorithm, LambdaAlgorithm
from .plain import PlainPairwise
from .factorized import FactorizedPairwise
from .metric_weighted import MetricWeightedPairwise
from .registry import parse_algorithm_kind, create_algorithm

__all__ = [
    "RankingAlgorithm", "LambdaAlgorithm",
    "PlainPairwise", "FactorizedPairwise", "MetricWeightedPairwise",
    "parse_algorithm_kind", "create_algorithm",
]
