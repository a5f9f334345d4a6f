# ltr/training/algorithms/plain.py
from __future__ import annotations

import numpy as np

from ltr.training.algorithms.base import RankingAlgorithm
from ltr.training.types import AlgorithmKind


class PlainPairwise(RankingAlgorithm):
    """
    Baseline pairwise training.

    Every preference pair (rel_i > rel_j) is a binary example:
        update(x_i, s_i, +1)   and   update(x_j, s_j, -1)

    O(n^2) updates per group; kept as the reference the factorized
    variants are checked against.
    """

    kind = AlgorithmKind.PLAIN

    def accumulate(self, group, scores, order, accumulator) -> None:
        rel = group.relevance
        X = group.features
        n = len(group)

        for i in range(n):
            for j in range(n):
                # each unordered pair once, from its preferred side
                if rel[i] <= rel[j]:
                    continue
                multiplier = float(np.sign(rel[i] - rel[j]))
                accumulator.update(X[i], scores[i], multiplier)
                accumulator.update(X[j], scores[j], -multiplier)

    @staticmethod
    def pair_count(relevance: np.ndarray) -> int:
        """Number of preference pairs (rel_i > rel_j) in a group."""
        rel = np.asarray(relevance)
        return int(np.sum(rel[:, None] > rel[None, :]))
