# ltr/training/algorithms/metric_weighted.py
from __future__ import annotations

import numpy as np

from ltr.evaluation.measure import NdcgEvaluator
from ltr.training.algorithms.base import LambdaAlgorithm
from ltr.training.types import AlgorithmKind


class MetricWeightedPairwise(LambdaAlgorithm):
    """
    Metric-aware pairwise training (LambdaRank).

    Same factorization as FactorizedPairwise, but every pair is scaled by
    the metric change of swapping the two documents' ranks:

        lambda_i = sum_j sign(rel_i - rel_j) * delta_if_swapped(rank_i, rank_j)

    Pairs whose swap would hurt the ranking most get the largest weight.
    """

    kind = AlgorithmKind.METRIC_WEIGHTED

    def lambdas(self, group, scores, order) -> np.ndarray:
        if isinstance(self.evaluator, NdcgEvaluator):
            by_rank = self._ndcg_lambdas(group.relevance[order])
        else:
            by_rank = self.pairwise_lambdas(group.relevance[order])

        lam = np.empty_like(by_rank)
        lam[order] = by_rank
        return lam

    # --------------------------------------------------
    # NDCG: O(n) after the score sort
    # --------------------------------------------------
    def _ndcg_lambdas(self, ranked_rel: np.ndarray) -> np.ndarray:
        """
        With g = 2^rel - 1 and d = discount (non-increasing in rank):

            sign(rel_p - rel_q) * |dNDCG_pq| = (g_p - g_q) * |d_p - d_q| / IDCG

        For q ranked below p, |d_p - d_q| = d_p - d_q; above, d_q - d_p.
        Expanding both sums leaves only prefix (above) and suffix (below)
        sums of {1, g, d, g*d} over the rank order.
        """
        ev: NdcgEvaluator = self.evaluator
        n = len(ranked_rel)
        idcg = ev.ideal_dcg(ranked_rel)
        if idcg == 0:
            return np.zeros(n, dtype=np.float64)

        g = ev.gains(ranked_rel)
        d = ev.discounts(n)
        gd = g * d
        count = np.arange(n, dtype=np.float64)

        # forward pass: sums over positions strictly above p
        above_g = np.cumsum(g) - g
        above_d = np.cumsum(d) - d
        above_gd = np.cumsum(gd) - gd
        above_n = count

        # backward pass: sums over positions strictly below p
        below_g = g.sum() - above_g - g
        below_d = d.sum() - above_d - d
        below_gd = gd.sum() - above_gd - gd
        below_n = (n - 1) - count

        below = below_n * gd - g * below_d - d * below_g + below_gd
        above = g * above_d - above_n * gd - above_gd + d * above_g

        return (below + above) / idcg

    # --------------------------------------------------
    # Any measure: O(n^2) via delta_if_swapped
    # --------------------------------------------------
    def pairwise_lambdas(self, ranked_rel: np.ndarray) -> np.ndarray:
        n = len(ranked_rel)
        lam = np.zeros(n, dtype=np.float64)
        for p in range(n):
            for q in range(p + 1, n):
                if ranked_rel[p] == ranked_rel[q]:
                    continue
                weight = np.sign(ranked_rel[p] - ranked_rel[q]) * \
                    self.evaluator.delta_if_swapped(ranked_rel, p, q)
                lam[p] += weight
                lam[q] -= weight
        return lam
