# tests/conftest.py
from __future__ import annotations

import multiprocessing
from pathlib import Path

import numpy as np
import pytest
from loguru import logger

from ltr.data.dataset import Dataset


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)  # or sys.stderr
    yield


@pytest.fixture(scope="session", autouse=True)
def _set_start_method():
    multiprocessing.set_start_method("spawn", force=True)


# ============================================================
# Datasets
# ============================================================
def make_dataset(n_groups: int = 6, docs: int = 5, dims: int = 4, seed: int = 7) -> Dataset:
    """
    Random but reproducible dataset: grades 0..3, features in [0, 1).
    Grade correlates with feature 0 so training has something to learn.
    """
    rng = np.random.default_rng(seed)
    qids, doc_ids, rels, rows = [], [], [], []
    for q in range(n_groups):
        for k in range(docs):
            x = rng.random(dims)
            rel = int(min(3, np.floor(x[0] * 4)))
            qids.append(f"q{q}")
            doc_ids.append(f"q{q}-d{k}")
            rels.append(rel)
            rows.append(x)
    return Dataset(
        qids=qids,
        doc_ids=doc_ids,
        relevance=rels,
        features=np.vstack(rows),
        name="synthetic",
    )


@pytest.fixture
def small_dataset() -> Dataset:
    return make_dataset()


@pytest.fixture
def dataset_factory():
    return make_dataset


@pytest.fixture
def three_doc_group():
    """One query, grades [2, 1, 0], two features."""
    ds = Dataset(
        qids=["q1", "q1", "q1"],
        doc_ids=["a", "b", "c"],
        relevance=[2, 1, 0],
        features=np.array([[1.0, 0.0], [0.5, 0.5], [0.0, 1.0]]),
        name="tiny",
    )
    return ds.group("q1")


# ============================================================
# Files
# ============================================================
LETOR_LINES = [
    "2 qid:1 1:0.9 2:0.1 3:0.3 # docid = d1 inc = 1",
    "1 qid:1 1:0.5 2:0.5 # docid = d2",
    "0 qid:1 1:0.1 2:0.9 3:0.2 # docid = d3",
    "1 qid:2 1:0.7 3:0.4 # docid = d4",
    "0 qid:2 1:0.2 2:0.8 # docid = d5",
]


@pytest.fixture
def letor_file(tmp_path: Path) -> Path:
    p = tmp_path / "train.letor"
    p.write_text("\n".join(LETOR_LINES) + "\n", encoding="utf-8")
    return p


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    """qid, doc, f1, f2, rel (rel is the last column)."""
    p = tmp_path / "train.csv"
    p.write_text(
        "\n".join(
            [
                "1,a,0.9,0.1,2",
                "1,b,0.5,0.5,1",
                "1,c,0.1,0.9,0",
                "2,d,0.7,0.3,1",
                "2,e,0.2,0.8,0",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return p
