# ltr/training/trainer.py
from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from time import perf_counter
from typing import List

from ltr import logs
from ltr.data.dataset import Dataset, QueryGroup
from ltr.ml.model import DifferentiableModel, GradientAccumulator
from ltr.observability.instrumentation import Instrumentation, NoOpInstrumentation
from ltr.pipeline.parallel.executor import ParallelExecutor
from ltr.pipeline.parallel.types import ParallelKind
from ltr.training.algorithms.base import RankingAlgorithm
from ltr.training.types import ApplyGranularity, GroupResult, PassResult, Phase
from ltr.utils.errors import ConfigurationError, DataError


@dataclass
class ShardResult:
    accumulator: GradientAccumulator
    groups: List[GroupResult]


def train_shard(
    groups: List[QueryGroup],
    *,
    algorithm: RankingAlgorithm,
    model: DifferentiableModel,
) -> ShardResult:
    """
    Worker entry point（module-level, pickle-safe）

    Scores against the model as it was at the start of the pass and
    accumulates into a shard-local accumulator. Never mutates weights.
    """
    accumulator = model.new_gradient_accumulator()
    results = [algorithm.train_on_group(g, model, accumulator) for g in groups]
    return ShardResult(accumulator=accumulator, groups=results)


class Trainer:
    """
    Trainer（one pass = every query group visited exactly once）

    ITERATION granularity (default):
      shards → workers (each with its own accumulator)
             → additive merge in shard order
             → barrier: apply once (TRAINING only) → reset

    GROUP granularity:
      sequential; apply after every group (TRAINING only)
    """

    def __init__(
        self,
        *,
        model: DifferentiableModel,
        algorithm: RankingAlgorithm,
        granularity: ApplyGranularity = ApplyGranularity.ITERATION,
        workers: int = 1,
        shard_size: int = 64,
        inst: Instrumentation | None = None,
    ):
        if workers <= 0:
            raise ConfigurationError(f"workers must be positive, got {workers}")
        if shard_size <= 0:
            raise ConfigurationError(f"shard_size must be positive, got {shard_size}")
        if granularity is ApplyGranularity.GROUP and workers > 1:
            raise ConfigurationError(
                "Per-group gradient application requires workers == 1"
            )

        self.model = model
        self.algorithm = algorithm
        self.granularity = granularity
        self.workers = workers
        self.shard_size = shard_size
        self.inst = inst if inst is not None else NoOpInstrumentation()

        # accumulator of the last pass (populated even when not applied)
        self.last_accumulator: GradientAccumulator | None = None

    @property
    def metric_name(self) -> str:
        return self.algorithm.evaluator.name

    # --------------------------------------------------
    def run_pass(self, dataset: Dataset, phase: Phase, iteration: int = 0) -> PassResult:
        if dataset.dimensions != self.model.dimensions:
            raise DataError(
                f"[Trainer] dataset has {dataset.dimensions} features, "
                f"model expects {self.model.dimensions}"
            )

        self.model.set_iteration(iteration)
        start = perf_counter()

        with self.inst.timer(f"{phase.value}#{iteration}"):
            if self.granularity is ApplyGranularity.GROUP:
                accumulator, groups, applied = self._run_per_group(dataset, phase)
            else:
                accumulator, groups, applied = self._run_per_iteration(dataset, phase)

        self.last_accumulator = accumulator

        metric = sum(g.metric for g in groups) / len(groups) if groups else 0.0
        result = PassResult(
            phase=phase,
            iteration=iteration,
            metric_name=self.metric_name,
            metric=metric,
            groups=len(groups),
            documents=sum(g.size for g in groups),
            applied=applied,
            elapsed=perf_counter() - start,
            group_metrics={g.qid: g.metric for g in groups},
        )

        logs.info(
            f"[Trainer] pass={iteration} phase={phase.value} "
            f"{self.metric_name}={metric:.6f} groups={result.groups} "
            f"docs={result.documents} lr={self.model.learning_rate:.6g} "
            f"applied={applied} elapsed={result.elapsed:.3f}s"
        )
        return result

    # --------------------------------------------------
    # internal
    # --------------------------------------------------
    def _run_per_iteration(self, dataset: Dataset, phase: Phase):
        shards = dataset.shards(self.shard_size)

        results: List[ShardResult] = ParallelExecutor.run(
            kind=ParallelKind.SHARD,
            items=shards,
            handler=partial(train_shard, algorithm=self.algorithm, model=self.model),
            max_workers=self.workers,
        )

        # reduce（顺序固定：shard 顺序）
        accumulator = self.model.new_gradient_accumulator()
        groups: List[GroupResult] = []
        for shard in results:
            accumulator.merge(shard.accumulator)
            groups.extend(shard.groups)

        # barrier: every group has been visited
        applied = self.algorithm.commit(self.model, accumulator, phase)
        return accumulator, groups, applied

    def _run_per_group(self, dataset: Dataset, phase: Phase):
        accumulator = self.model.new_gradient_accumulator()
        groups: List[GroupResult] = []
        applied = False

        for group in dataset.groups():
            groups.append(self.algorithm.train_on_group(group, self.model, accumulator))
            applied = self.algorithm.commit(self.model, accumulator, phase) or applied

        return accumulator, groups, applied
