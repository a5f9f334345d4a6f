# ltr/evaluation/measure.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

import numpy as np

from ltr.utils.errors import ConfigurationError


def rank_order(scores: np.ndarray) -> np.ndarray:
    """
    Document indices sorted by DESCENDING score.
    Stable: tied scores keep their input order.
    """
    return np.argsort(-np.asarray(scores, dtype=np.float64), kind="stable")


class EvaluationMeasure(ABC):
    """
    EvaluationMeasure（stateless）

    Input is always the relevance grades listed in RANK order
    (position 0 = highest score). Positions are 0-based.
    """

    cutoff: int

    @property
    @abstractmethod
    def name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def evaluate(self, ranked_relevance: np.ndarray) -> float:
        raise NotImplementedError

    @abstractmethod
    def delta_if_swapped(self, ranked_relevance: np.ndarray, i: int, j: int) -> float:
        """|M(list) - M(list with positions i and j exchanged)|, list not mutated."""
        raise NotImplementedError

    def evaluate_scores(self, scores: np.ndarray, relevance: np.ndarray) -> float:
        relevance = np.asarray(relevance)
        return self.evaluate(relevance[rank_order(scores)])


class NdcgEvaluator(EvaluationMeasure):
    """
    NDCG@k

        DCG@k  = sum_{i=1..min(k,n)} (2^rel_i - 1) / log2(i + 1)
        IDCG@k = DCG@k of the list re-sorted by descending relevance
        NDCG@k = DCG@k / IDCG@k, 0.0 when IDCG@k == 0 (no relevance signal)
    """

    def __init__(self, cutoff: int = 20):
        if cutoff is None or int(cutoff) <= 0:
            raise ConfigurationError(f"NDCG cutoff must be positive, got {cutoff}")
        self.cutoff = int(cutoff)

    @property
    def name(self) -> str:
        return f"ndcg@{self.cutoff}"

    # --------------------------------------------------
    # Building blocks (also used by metric-weighted training)
    # --------------------------------------------------
    @staticmethod
    def gains(relevance: np.ndarray) -> np.ndarray:
        return np.exp2(np.asarray(relevance, dtype=np.float64)) - 1.0

    def discounts(self, n: int) -> np.ndarray:
        """Discount of each 0-based rank position; 0 beyond the cutoff."""
        positions = np.arange(n, dtype=np.float64)
        disc = 1.0 / np.log2(positions + 2.0)
        disc[self.cutoff:] = 0.0
        return disc

    def dcg(self, ranked_relevance: np.ndarray) -> float:
        gains = self.gains(ranked_relevance)
        return float(np.dot(gains, self.discounts(len(gains))))

    def ideal_dcg(self, relevance: np.ndarray) -> float:
        ideal = np.sort(np.asarray(relevance))[::-1]
        return self.dcg(ideal)

    # --------------------------------------------------
    # Contract
    # --------------------------------------------------
    def evaluate(self, ranked_relevance: np.ndarray) -> float:
        if len(ranked_relevance) == 0:
            return 0.0
        idcg = self.ideal_dcg(ranked_relevance)
        if idcg == 0:
            return 0.0
        return self.dcg(ranked_relevance) / idcg

    def delta_if_swapped(self, ranked_relevance: np.ndarray, i: int, j: int) -> float:
        # Only positions i and j change, so
        # |dNDCG| = |(g_i - g_j) * (d_i - d_j)| / IDCG
        n = len(ranked_relevance)
        if i == j or n == 0:
            return 0.0
        idcg = self.ideal_dcg(ranked_relevance)
        if idcg == 0:
            return 0.0

        gains = self.gains([ranked_relevance[i], ranked_relevance[j]])
        disc = self.discounts(n)
        return abs((gains[0] - gains[1]) * (disc[i] - disc[j])) / idcg


# ============================================================
# Metric resolution
# ============================================================
class MetricKind(str, Enum):
    NDCG = "ndcg"


@dataclass(frozen=True)
class MetricSpec:
    kind: MetricKind
    cutoff: int


def parse_metric_spec(name: str, cutoff: int) -> MetricSpec:
    try:
        kind = MetricKind((name or "").strip().lower())
    except ValueError:
        available = ", ".join(k.value for k in MetricKind)
        raise ConfigurationError(
            f"Evaluation metric {name!r} is not implemented; select one of {available}"
        ) from None
    if cutoff is None or int(cutoff) <= 0:
        raise ConfigurationError(f"Metric cutoff must be positive, got {cutoff}")
    return MetricSpec(kind=kind, cutoff=int(cutoff))


def create_evaluation_measure(spec: MetricSpec) -> EvaluationMeasure:
    if spec.kind is MetricKind.NDCG:
        return NdcgEvaluator(spec.cutoff)
    raise ConfigurationError(f"No evaluation measure for {spec}")
