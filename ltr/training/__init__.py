"""
Training Doctrine (FINAL / FROZEN)

------------------------------------------------------------
Unit of work
------------------------------------------------------------

- TrainingUnit = QueryGroup (all documents sharing a query id)
- Pass         = every QueryGroup of a dataset visited exactly once
- Run          = TRAINING passes until the StoppingPolicy says stop,
                 then at most one VALIDATION and one TESTING pass

------------------------------------------------------------
Weight mutation
------------------------------------------------------------

- Scoring ALWAYS reads the weights as they were when the pass started.
- Gradients are accumulated additively; accumulation order never matters.
- Weights change ONLY at a barrier, and ONLY in Phase.TRAINING:
    * granularity=iteration : once per pass, after every shard reported
    * granularity=group     : after every group (sequential runs only)
- VALIDATION / TESTING populate the accumulator but never apply it.

Mixing per-group application with parallel workers is a fatal
configuration error.
"""
from .types import (
    Phase,
    AlgorithmKind,
    StoppingCondition,
    ApplyGranularity,
    GroupResult,
    PassResult,
    TrainingReport,
)
from .stopping import StoppingPolicy, parse_stopping_condition
from .trainer import Trainer, train_shard
from .pipeline import TrainingPipeline

__all__ = [
    "Phase", "AlgorithmKind", "StoppingCondition", "ApplyGranularity",
    "GroupResult", "PassResult", "TrainingReport",
    "StoppingPolicy", "parse_stopping_condition",
    "Trainer", "train_shard", "TrainingPipeline",
]
