# ltr/training/algorithms/registry.py
from __future__ import annotations

from typing import Callable, Dict

from ltr.evaluation.measure import EvaluationMeasure
from ltr.training.algorithms.base import RankingAlgorithm
from ltr.training.algorithms.factorized import FactorizedPairwise
from ltr.training.algorithms.metric_weighted import MetricWeightedPairwise
from ltr.training.algorithms.plain import PlainPairwise
from ltr.training.types import AlgorithmKind
from ltr.utils.errors import ConfigurationError

_ALGORITHM_REGISTRY: Dict[
    AlgorithmKind,
    Callable[[EvaluationMeasure], RankingAlgorithm],
] = {
    AlgorithmKind.PLAIN: lambda ev: PlainPairwise(ev),
    AlgorithmKind.FACTORIZED: lambda ev: FactorizedPairwise(ev),
    AlgorithmKind.METRIC_WEIGHTED: lambda ev: MetricWeightedPairwise(ev),
}


def parse_algorithm_kind(name: str) -> AlgorithmKind:
    try:
        return AlgorithmKind((name or "").strip().lower())
    except ValueError:
        available = ", ".join(k.value for k in _ALGORITHM_REGISTRY)
        raise ConfigurationError(
            f"Algorithm {name!r} is not implemented; select one of {available}"
        ) from None


def create_algorithm(
    *, kind: AlgorithmKind, evaluator: EvaluationMeasure
) -> RankingAlgorithm:
    return _ALGORITHM_REGISTRY[kind](evaluator)
