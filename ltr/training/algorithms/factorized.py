# ltr/training/algorithms/factorized.py
from __future__ import annotations

import numpy as np

from ltr.training.algorithms.base import LambdaAlgorithm
from ltr.training.types import AlgorithmKind


class FactorizedPairwise(LambdaAlgorithm):
    """
    Accelerated pairwise training.

    The pairwise cost's derivative w.r.t. one document's score is a sum
    over all of its partners:

        lambda_i = sum_j sign(rel_i - rel_j)
                 = #{j : rel_j < rel_i} - #{j : rel_j > rel_i}

    One sort of the grades, then a forward cumulative pass (partners
    below) and a backward one (partners above): O(n log n). Produces the
    same accumulator content as PlainPairwise.
    """

    kind = AlgorithmKind.FACTORIZED

    def lambdas(self, group, scores, order) -> np.ndarray:
        _, inverse, counts = np.unique(
            group.relevance, return_inverse=True, return_counts=True
        )
        below = np.cumsum(counts) - counts
        above = np.cumsum(counts[::-1])[::-1] - counts
        return (below - above)[inverse.reshape(-1)].astype(np.float64)
