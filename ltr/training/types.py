# ltr/training/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class Phase(str, Enum):
    """
    Passed explicitly into every pass; weights are mutated only in TRAINING.
    """
    TRAINING = "training"
    VALIDATION = "validation"
    TESTING = "testing"


class AlgorithmKind(str, Enum):
    PLAIN = "ranknet_old"           # baseline pairwise, O(n^2) updates
    FACTORIZED = "ranknet"          # per-document lambdas, O(n log n)
    METRIC_WEIGHTED = "lambdarank"  # lambdas scaled by |dNDCG|


class StoppingCondition(str, Enum):
    ITERATIONS = "iterations"       # fixed iteration budget
    CONVERGENCE = "convergence"     # |metric(t) - metric(t-1)| < threshold


class ApplyGranularity(str, Enum):
    ITERATION = "iteration"         # barrier apply once per pass (default)
    GROUP = "group"                 # apply after every group, sequential only


@dataclass(frozen=True)
class GroupResult:
    """Outcome of one trainOnGroup() call."""
    qid: str
    size: int
    metric: float


@dataclass
class PassResult:
    """
    PassResult（one pass over one dataset）

    metric = mean of the per-group metric values (groups without relevance
    signal count as 0.0).
    """
    phase: Phase
    iteration: int
    metric_name: str
    metric: float
    groups: int
    documents: int
    applied: bool
    elapsed: float = 0.0
    group_metrics: Dict[str, float] = field(default_factory=dict)


@dataclass
class TrainingReport:
    """Everything the outer driver exposes after a run."""
    training: List[PassResult] = field(default_factory=list)
    validation: PassResult | None = None
    testing: PassResult | None = None
    stopped_early: bool = False

    @property
    def metric_history(self) -> List[float]:
        return [p.metric for p in self.training]
