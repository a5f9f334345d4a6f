# ltr/workflows/offline_training.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ltr import logs
from ltr.config.app_config import AppConfig
from ltr.config.training_config import TrainingConfig
from ltr.data.dataset import Dataset
from ltr.data.readers import read_dataset
from ltr.evaluation.measure import MetricSpec, create_evaluation_measure, parse_metric_spec
from ltr.ml.learning_rate import LearningRateSchedule, create_learning_rate
from ltr.ml.model import DifferentiableModel
from ltr.ml.model_artifact import load_model, save_model
from ltr.ml.registry import ModelSpec, create_model, parse_model_spec
from ltr.observability.instrumentation import Instrumentation
from ltr.training.algorithms.registry import create_algorithm, parse_algorithm_kind
from ltr.training.pipeline import TrainingPipeline
from ltr.training.stopping import StoppingPolicy, parse_stopping_condition
from ltr.training.trainer import Trainer
from ltr.training.types import AlgorithmKind, ApplyGranularity, PassResult, Phase, TrainingReport
from ltr.utils.errors import ConfigurationError


@dataclass(frozen=True)
class ResolvedTraining:
    """
    TrainingConfig after name resolution（FROZEN）

    Every string option is turned into its tagged variant here, once,
    before any pass starts.
    """
    model: ModelSpec
    algorithm: AlgorithmKind
    metric: MetricSpec
    learning_rate: LearningRateSchedule
    stopping: StoppingPolicy
    granularity: ApplyGranularity
    workers: int
    shard_size: int


def resolve_training_config(cfg: TrainingConfig) -> ResolvedTraining:
    granularity = ApplyGranularity(cfg.granularity)
    if granularity is ApplyGranularity.GROUP and cfg.workers > 1:
        raise ConfigurationError(
            "granularity=group applies gradients mid-pass and requires workers == 1"
        )

    return ResolvedTraining(
        model=parse_model_spec(cfg.model),
        algorithm=parse_algorithm_kind(cfg.algorithm),
        metric=parse_metric_spec(cfg.metric, cfg.cutoff),
        learning_rate=create_learning_rate(cfg.learning_rate),
        stopping=StoppingPolicy(
            condition=parse_stopping_condition(cfg.stopping_condition),
            max_iterations=cfg.niters,
            threshold=cfg.convergence_threshold,
        ),
        granularity=granularity,
        workers=cfg.workers,
        shard_size=cfg.shard_size,
    )


def build_offline_training(
    cfg: AppConfig,
    *,
    dimensions: int | None = None,
    model: DifferentiableModel | None = None,
    inst: Instrumentation | None = None,
) -> TrainingPipeline:
    """
    Offline Training Workflow (FINAL / FROZEN)

    Either `dimensions` (fresh model) or `model` (e.g. loaded from disk).
    """
    resolved = resolve_training_config(cfg.training)

    if model is None:
        if dimensions is None:
            raise ValueError("build_offline_training needs dimensions or model")
        model = create_model(
            spec=resolved.model,
            dimensions=dimensions,
            learning_rate=resolved.learning_rate,
        )

    algorithm = create_algorithm(
        kind=resolved.algorithm,
        evaluator=create_evaluation_measure(resolved.metric),
    )
    inst = inst if inst is not None else Instrumentation()

    trainer = Trainer(
        model=model,
        algorithm=algorithm,
        granularity=resolved.granularity,
        workers=resolved.workers,
        shard_size=resolved.shard_size,
        inst=inst,
    )
    return TrainingPipeline(trainer=trainer, stopping=resolved.stopping, inst=inst)


def _read_optional(path: str | None, cfg: AppConfig) -> Dataset | None:
    if not path:
        return None
    return read_dataset(path, cfg.data)


def run_offline_training(cfg: AppConfig) -> TrainingReport:
    """
    Read data → build → train / validate / test → (optionally) persist.
    """
    if not cfg.data.train_data:
        raise ConfigurationError("data.train_data is not set")

    # validate every option before touching the data
    resolve_training_config(cfg.training)

    train = read_dataset(cfg.data.train_data, cfg.data)
    eval_data = _read_optional(cfg.data.eval_data, cfg)
    test_data = _read_optional(cfg.data.test_data, cfg)

    # sparse eval/test files may mention more features than train
    dimensions = max(
        d.dimensions for d in (train, eval_data, test_data) if d is not None
    )
    train = train.with_dimensions(dimensions)

    pipeline = build_offline_training(cfg, dimensions=dimensions)
    run_id = datetime.now().strftime("%Y%m%d-%H%M%S")
    report = pipeline.run(train, eval_data, test_data, run_id=run_id)

    if cfg.output.model_dir:
        save_model(
            pipeline.trainer.model,
            Path(cfg.output.model_dir),
            metrics=pipeline.inst.metrics.snapshot(),
        )

    return report


def evaluate_saved_model(cfg: AppConfig, model_dir: str | Path, data_path: str | Path) -> PassResult:
    """TESTING pass of a persisted model over one dataset."""
    model = load_model(model_dir)
    dataset = read_dataset(data_path, cfg.data)

    pipeline = build_offline_training(cfg, model=model)
    result = pipeline.evaluate(dataset, Phase.TESTING)
    logs.info(f"[Evaluate] {result.metric_name}={result.metric:.6f} groups={result.groups}")
    return result
