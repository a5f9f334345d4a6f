from .measure import (
    EvaluationMeasure,
    NdcgEvaluator,
    MetricKind,
    MetricSpec,
    parse_metric_spec,
    create_evaluation_measure,
    rank_order,
)

__all__ = [
    "EvaluationMeasure", "NdcgEvaluator",
    "MetricKind", "MetricSpec", "parse_metric_spec", "create_evaluation_measure",
    "rank_order",
]
