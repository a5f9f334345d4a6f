# ltr/data/readers.py
from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import numpy as np
import pandas as pd
import pyarrow as pa

from ltr import logs
from ltr.config.data_config import DataConfig
from ltr.data.dataset import Dataset
from ltr.utils.errors import ConfigurationError, DataError

_DOCID_PATTERN = re.compile(r"docid\s*=\s*(\S+)")


# ============================================================
# csv
# ============================================================
def _column_index(idx: int, ncols: int, name: str) -> int:
    resolved = idx + ncols if idx < 0 else idx
    if not 0 <= resolved < ncols:
        raise ConfigurationError(
            f"[csv] {name} column index {idx} out of range for {ncols} columns"
        )
    return resolved


def read_csv(path: Path, cfg: DataConfig) -> Dataset:
    """
    One document per row. qid / doc / rel columns are picked by index
    (negative = from the end); every other column is a feature.
    """
    df = pd.read_csv(path, header=0 if cfg.csv_header else None)
    if df.empty:
        raise DataError(f"[csv] no rows in {path}")

    ncols = df.shape[1]
    q = _column_index(cfg.qid, ncols, "qid")
    d = _column_index(cfg.doc, ncols, "doc")
    r = _column_index(cfg.rel, ncols, "rel")
    if len({q, d, r}) != 3:
        raise ConfigurationError(f"[csv] qid/doc/rel columns must differ, got {q}, {d}, {r}")

    columns = list(df.columns)
    frame = df.rename(columns={columns[q]: "qid", columns[d]: "doc", columns[r]: "rel"})
    feature_cols = [c for k, c in enumerate(frame.columns) if k not in (q, d, r)]

    return Dataset.from_frame(frame, feature_cols=feature_cols, name=str(path))


# ============================================================
# letor / yahoo (svmlight-style sparse lines)
# ============================================================
def _parse_sparse_lines(path: Path, with_docid: bool) -> Dataset:
    """
    <rel> qid:<q> <i>:<v> <i>:<v> ... [# docid = <id> ...]

    Feature indices are 1-based; dimensionality = largest index seen.
    """
    qids: List[str] = []
    doc_ids: List[str] = []
    labels: List[float] = []
    rows: List[Tuple[np.ndarray, np.ndarray]] = []
    dims = 0

    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            body, _, comment = line.partition("#")
            tokens = body.split()
            if not tokens:
                continue

            try:
                rel = float(tokens[0])
                key, _, qid = tokens[1].partition(":")
                if key != "qid" or not qid:
                    raise ValueError(f"expected qid:<id>, got {tokens[1]!r}")

                idx = np.empty(len(tokens) - 2, dtype=np.int64)
                val = np.empty(len(tokens) - 2, dtype=np.float64)
                for k, tok in enumerate(tokens[2:]):
                    i, _, v = tok.partition(":")
                    idx[k] = int(i)
                    val[k] = float(v)
            except (IndexError, ValueError) as e:
                raise DataError(f"[sparse] {path}:{lineno} malformed line: {e}") from e

            if idx.size and idx.min() < 1:
                raise DataError(f"[sparse] {path}:{lineno} feature indices are 1-based")

            doc_id = None
            if with_docid:
                match = _DOCID_PATTERN.search(comment)
                if match:
                    doc_id = match.group(1)

            qids.append(qid)
            doc_ids.append(doc_id if doc_id is not None else str(len(doc_ids)))
            labels.append(rel)
            rows.append((idx, val))
            if idx.size:
                dims = max(dims, int(idx.max()))

    if not rows:
        raise DataError(f"[sparse] no documents in {path}")
    if dims == 0:
        raise DataError(f"[sparse] no features in {path}")

    features = np.zeros((len(rows), dims), dtype=np.float64)
    for k, (idx, val) in enumerate(rows):
        features[k, idx - 1] = val

    return Dataset(
        qids=qids,
        doc_ids=doc_ids,
        relevance=labels,
        features=features,
        name=str(path),
    )


def read_letor(path: Path, cfg: DataConfig) -> Dataset:
    return _parse_sparse_lines(path, with_docid=True)


def read_yahoo(path: Path, cfg: DataConfig) -> Dataset:
    return _parse_sparse_lines(path, with_docid=False)


# ============================================================
# parquet
# ============================================================
def read_parquet(path: Path, cfg: DataConfig) -> Dataset:
    """Columns qid / doc / rel, every other column is a feature."""
    df = pd.read_parquet(path, engine="pyarrow")
    missing = {"qid", "doc", "rel"} - set(df.columns)
    if missing:
        raise DataError(f"[parquet] {path} missing columns: {sorted(missing)}")
    return Dataset.from_frame(df, name=str(path))


# ============================================================
# Registry
# ============================================================
_READER_REGISTRY: Dict[str, Callable[[Path, DataConfig], Dataset]] = {
    "csv": read_csv,
    "letor": read_letor,
    "yahoo": read_yahoo,
    "parquet": read_parquet,
}


def read_dataset(path: str | Path, cfg: DataConfig) -> Dataset:
    """
    Reads one dataset file with the configured reader.

    Raises:
    - ConfigurationError: unknown reader
    - DataError: missing / unreadable file, zero documents
    """
    if cfg.reader not in _READER_REGISTRY:
        available = ", ".join(_READER_REGISTRY)
        raise ConfigurationError(
            f"Reader {cfg.reader!r} is not implemented. Select one of {available}"
        )

    path = Path(path)
    if not path.is_file():
        raise DataError(f"Dataset file not found: {path}")

    try:
        dataset = _READER_REGISTRY[cfg.reader](path, cfg)
    except (
        OSError,
        UnicodeDecodeError,
        pd.errors.ParserError,
        pd.errors.EmptyDataError,
        pa.ArrowException,
    ) as e:
        raise DataError(f"Cannot read {path} with reader {cfg.reader}: {e}") from e

    logs.info(
        f"[Reader] {cfg.reader} {path.name}: docs={len(dataset)} "
        f"groups={dataset.num_groups} dimensions={dataset.dimensions}"
    )
    return dataset
