# ltr/config/training_config.py
from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, Field


class TrainingConfig(BaseModel):
    """
    TrainingConfig（FINAL / FROZEN）

    Plain strings / integers only. They are resolved exactly once into
    tagged variants (ModelKind, AlgorithmKind, MetricKind, ...) by the
    registries before the first pass starts.
    """

    # model
    model: str = "linreg"                # linreg | nn:<H> | nn_<H>
    learning_rate: str = ""              # constant[:r] | decay:r0[:d] | exp:r0[:gamma]

    # algorithm
    algorithm: str = "ranknet"           # ranknet_old | ranknet | lambdarank

    # evaluation
    metric: str = "ndcg"
    cutoff: int = Field(default=20, gt=0)

    # iteration loop
    niters: int = Field(default=10, gt=0)
    stopping_condition: Union[int, str] = "iterations"
    convergence_threshold: float = Field(default=1e-4, ge=0.0)

    # gradient application / parallelism
    granularity: Literal["iteration", "group"] = "iteration"
    workers: int = Field(default=1, gt=0)
    shard_size: int = Field(default=64, gt=0)
