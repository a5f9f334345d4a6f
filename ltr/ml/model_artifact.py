# ltr/ml/model_artifact.py
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import joblib

from ltr import logs
from ltr.ml.learning_rate import create_learning_rate
from ltr.ml.model import DifferentiableModel
from ltr.ml.registry import ModelKind, ModelSpec, create_model, model_spec_of
from ltr.utils.errors import DataError

MODEL_FILE = "model.joblib"
META_FILE = "artifact.json"


# ============================================================
# Model Artifact
# ============================================================
@dataclass(frozen=True)
class ModelArtifact:
    """
    ModelArtifact（FINAL / FROZEN）

    Semantics:
    - path always points to an artifact ROOT directory
    - NEVER points to a single file
    - model.joblib holds the raw parameter arrays, artifact.json the spec
    """
    path: Path
    spec: ModelSpec
    dimensions: int
    learning_rate: str
    metrics: dict[str, Any] | None = None
    created_at: datetime | None = None


@logs.catch(msg="model artifact could not be written")
def save_model(
    model: DifferentiableModel,
    artifact_dir: Path | str,
    *,
    metrics: dict[str, Any] | None = None,
) -> ModelArtifact:
    artifact_dir = Path(artifact_dir)
    artifact_dir.mkdir(parents=True, exist_ok=True)

    spec = model_spec_of(model)
    created_at = datetime.now(timezone.utc)

    joblib.dump(model.get_state(), artifact_dir / MODEL_FILE)

    meta = {
        "created_at": created_at.isoformat(),
        "spec": {"kind": spec.kind.value, "hidden": spec.hidden},
        "dimensions": model.dimensions,
        "learning_rate": model.schedule.spec(),
        "metrics": dict(metrics or {}),
    }
    (artifact_dir / META_FILE).write_text(json.dumps(meta, indent=2))

    artifact = ModelArtifact(
        path=artifact_dir,
        spec=spec,
        dimensions=model.dimensions,
        learning_rate=meta["learning_rate"],
        metrics=meta["metrics"],
        created_at=created_at,
    )
    logs.info(f"[ModelArtifact] saved {spec} dims={model.dimensions} -> {artifact_dir}")
    return artifact


def resolve_model_artifact(artifact_dir: Path | str) -> ModelArtifact:
    artifact_dir = Path(artifact_dir)
    meta_path = artifact_dir / META_FILE
    if not meta_path.exists():
        raise DataError(f"[ModelArtifact] {META_FILE} not found in {artifact_dir}")

    try:
        meta = json.loads(meta_path.read_text())
        return ModelArtifact(
            path=artifact_dir,
            spec=ModelSpec(
                kind=ModelKind(meta["spec"]["kind"]),
                hidden=meta["spec"].get("hidden"),
            ),
            dimensions=int(meta["dimensions"]),
            learning_rate=meta.get("learning_rate", ""),
            metrics=meta.get("metrics"),
            created_at=datetime.fromisoformat(meta["created_at"]),
        )
    except (OSError, KeyError, TypeError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        raise DataError(f"[ModelArtifact] invalid {meta_path}: {e!r}") from e


def load_model(artifact_dir: Path | str) -> DifferentiableModel:
    artifact = resolve_model_artifact(artifact_dir)

    model = create_model(
        spec=artifact.spec,
        dimensions=artifact.dimensions,
        learning_rate=create_learning_rate(artifact.learning_rate),
    )
    try:
        state = joblib.load(artifact.path / MODEL_FILE)
    except (OSError, EOFError) as e:
        raise DataError(f"[ModelArtifact] cannot load {MODEL_FILE} from {artifact.path}: {e}") from e
    model.set_state(state)

    logs.info(f"[ModelArtifact] loaded {artifact.spec} from {artifact.path}")
    return model
