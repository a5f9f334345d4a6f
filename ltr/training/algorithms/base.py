# ltr/training/algorithms/base.py
from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from ltr.data.dataset import QueryGroup
from ltr.evaluation.measure import EvaluationMeasure, rank_order
from ltr.ml.model import DifferentiableModel, GradientAccumulator
from ltr.training.types import AlgorithmKind, GroupResult, Phase


class RankingAlgorithm(ABC):
    """
    RankingAlgorithm（FINAL / FROZEN）

    Contract:
    - train_on_group() is called once per query group per pass
    - it scores the group with the CURRENT weights, reports the group's
      metric and adds the group's gradient into `accumulator`
    - it never touches the model weights; commit() does, and only in TRAINING
    """

    kind: AlgorithmKind

    def __init__(self, evaluator: EvaluationMeasure):
        self.evaluator = evaluator

    @property
    def name(self) -> str:
        return self.kind.value

    # --------------------------------------------------
    # Template method
    # --------------------------------------------------
    def train_on_group(
        self,
        group: QueryGroup,
        model: DifferentiableModel,
        accumulator: GradientAccumulator,
    ) -> GroupResult:
        scores = model.score_batch(group.features)
        order = rank_order(scores)
        metric = self.evaluator.evaluate(group.relevance[order])

        # all-equal grades degenerate to zero gradient
        if group.has_signal:
            self.accumulate(group, scores, order, accumulator)

        return GroupResult(qid=group.qid, size=len(group), metric=metric)

    @abstractmethod
    def accumulate(
        self,
        group: QueryGroup,
        scores: np.ndarray,
        order: np.ndarray,
        accumulator: GradientAccumulator,
    ) -> None:
        raise NotImplementedError

    # --------------------------------------------------
    # Barrier
    # --------------------------------------------------
    @staticmethod
    def commit(
        model: DifferentiableModel,
        accumulator: GradientAccumulator,
        phase: Phase,
    ) -> bool:
        """
        Applies then resets the accumulator in TRAINING.
        VALIDATION / TESTING keep the accumulated deltas and leave weights untouched.
        """
        if phase is not Phase.TRAINING:
            return False
        accumulator.apply_to(model)
        accumulator.reset()
        return True


class LambdaAlgorithm(RankingAlgorithm):
    """
    Pairwise cost factorized into one lambda per document:
    ONE accumulator update per document instead of two per pair.
    """

    @abstractmethod
    def lambdas(
        self,
        group: QueryGroup,
        scores: np.ndarray,
        order: np.ndarray,
    ) -> np.ndarray:
        """Per-document multipliers, aligned with the group's rows."""
        raise NotImplementedError

    def accumulate(self, group, scores, order, accumulator) -> None:
        lam = self.lambdas(group, scores, order)
        for k in np.flatnonzero(lam):
            accumulator.update(group.features[k], scores[k], lam[k])
