# ltr/training/pipeline.py
from __future__ import annotations

from ltr import logs
from ltr.data.dataset import Dataset
from ltr.observability.instrumentation import Instrumentation, NoOpInstrumentation
from ltr.training.stopping import StoppingPolicy
from ltr.training.trainer import Trainer
from ltr.training.types import PassResult, Phase, TrainingReport


class TrainingPipeline:
    """
    TrainingPipeline（FINAL / FROZEN）

    Semantics:
    - Pipeline owns the iteration loop and the phase switches
    - Trainer executes one pass
    - TRAINING passes run until the StoppingPolicy says stop
    - VALIDATION / TESTING run ONE pass each: weights are frozen there,
      so further passes would repeat the same numbers
    """

    def __init__(
            self,
            *,
            trainer: Trainer,
            stopping: StoppingPolicy,
            inst: Instrumentation | None = None,
    ):
        self.trainer = trainer
        self.stopping = stopping
        self.inst = inst if inst is not None else NoOpInstrumentation()

    def run(
            self,
            train: Dataset,
            eval_data: Dataset | None = None,
            test_data: Dataset | None = None,
            *,
            run_id: str = "ltr",
    ) -> TrainingReport:
        logs.info(
            f"[TrainingPipeline] START run_id={run_id} "
            f"algorithm={self.trainer.algorithm.name} "
            f"model={self.trainer.model.kind} "
            f"stopping={self.stopping.condition.value}"
        )

        report = TrainingReport()
        history: list[float] = []
        iteration = 0

        # ------------------------------
        # Training
        # ------------------------------
        while self.stopping.should_continue(history):
            result = self.trainer.run_pass(train, Phase.TRAINING, iteration)
            report.training.append(result)
            history.append(result.metric)
            self._record(result)
            iteration += 1

        report.stopped_early = self.stopping.converged(history)
        if report.stopped_early:
            logs.info(f"[TrainingPipeline] converged after {iteration} iterations")

        # ------------------------------
        # Validation / Testing
        # ------------------------------
        if eval_data is not None:
            report.validation = self._frozen_pass(eval_data, Phase.VALIDATION, iteration)

        if test_data is not None:
            report.testing = self._frozen_pass(test_data, Phase.TESTING, iteration)

        self.inst.generate_timeline_report(run_id)
        logs.info("[TrainingPipeline] DONE")
        return report

    def evaluate(self, dataset: Dataset, phase: Phase = Phase.TESTING) -> PassResult:
        """Single frozen-weight pass, e.g. over a previously saved model."""
        return self._frozen_pass(dataset, phase, self.trainer.model.iteration)

    # --------------------------------------------------
    def _frozen_pass(self, dataset: Dataset, phase: Phase, iteration: int) -> PassResult:
        dataset = dataset.with_dimensions(self.trainer.model.dimensions)
        result = self.trainer.run_pass(dataset, phase, iteration)
        self._record(result)
        return result

    def _record(self, result: PassResult) -> None:
        key = f"{result.phase.value}.{result.metric_name}"
        if result.phase is Phase.TRAINING:
            key = f"{key}#{result.iteration}"
        self.inst.metrics.record(key, round(result.metric, 6))
