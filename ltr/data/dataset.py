# ltr/data/dataset.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Sequence

import numpy as np
import pandas as pd

from ltr.utils.errors import DataError


@dataclass(frozen=True)
class Document:
    """
    Document（immutable after creation）
    """
    doc_id: str
    qid: str
    relevance: int
    features: np.ndarray


@dataclass(frozen=True)
class QueryGroup:
    """
    QueryGroup（one query id, all of its documents）

    Row k of `features` / `relevance` / `doc_ids` is the k-th document of
    the group, in dataset order.
    """
    qid: str
    doc_ids: tuple
    features: np.ndarray      # (n, dimensions)
    relevance: np.ndarray     # (n,) non-negative int grades

    def __len__(self) -> int:
        return len(self.doc_ids)

    @property
    def dimensions(self) -> int:
        return self.features.shape[1]

    @property
    def has_signal(self) -> bool:
        """False when every document carries the same grade (zero gradient)."""
        return len(self) > 1 and int(self.relevance.max()) != int(self.relevance.min())

    def documents(self) -> Iterator[Document]:
        for k, doc_id in enumerate(self.doc_ids):
            yield Document(
                doc_id=doc_id,
                qid=self.qid,
                relevance=int(self.relevance[k]),
                features=self.features[k],
            )


class Dataset:
    """
    Dataset（FINAL / FROZEN）

    Layout:
    - one arena of documents (feature matrix + label / id arrays)
    - groups are index lists into the arena, keyed by query id
    - group order = first appearance of the query id

    The arena is never mutated once built.
    """

    def __init__(
        self,
        *,
        qids: Sequence,
        doc_ids: Sequence,
        relevance: Sequence,
        features: np.ndarray,
        name: str = "",
    ):
        features = np.asarray(features, dtype=np.float64)
        if features.ndim != 2:
            raise DataError(f"[Dataset] features must be 2-D, got shape {features.shape}")

        n = features.shape[0]
        if n == 0:
            raise DataError(f"[Dataset] {name or 'dataset'} holds zero documents")
        if not (len(qids) == len(doc_ids) == len(relevance) == n):
            raise DataError(
                f"[Dataset] length mismatch: qids={len(qids)} doc_ids={len(doc_ids)} "
                f"relevance={len(relevance)} features={n}"
            )

        relevance = np.asarray(relevance)
        if not np.all(np.isfinite(relevance.astype(np.float64))):
            raise DataError("[Dataset] relevance grades must be finite")
        if np.any(relevance < 0):
            raise DataError("[Dataset] relevance grades must be non-negative")
        if np.any(relevance != np.round(relevance)):
            raise DataError("[Dataset] relevance grades must be integers")
        if not np.all(np.isfinite(features)):
            raise DataError("[Dataset] features must be finite (no NaN / inf)")

        self.name = name
        self.features = features
        self.relevance = relevance.astype(np.int64)
        self.qids = np.asarray([str(q) for q in qids], dtype=object)
        self.doc_ids = np.asarray([str(d) for d in doc_ids], dtype=object)

        self._index: Dict[str, np.ndarray] = {}
        order: Dict[str, List[int]] = {}
        for i, q in enumerate(self.qids):
            order.setdefault(q, []).append(i)
        for q, idx in order.items():
            self._index[q] = np.asarray(idx, dtype=np.int64)

    # --------------------------------------------------
    # Constructors
    # --------------------------------------------------
    @classmethod
    def from_documents(cls, documents: Iterable[Document], name: str = "") -> "Dataset":
        docs = list(documents)
        if not docs:
            raise DataError(f"[Dataset] {name or 'dataset'} holds zero documents")
        dims = {len(d.features) for d in docs}
        if len(dims) != 1:
            raise DataError(f"[Dataset] inconsistent feature dimensionality: {sorted(dims)}")
        return cls(
            qids=[d.qid for d in docs],
            doc_ids=[d.doc_id for d in docs],
            relevance=[d.relevance for d in docs],
            features=np.vstack([np.asarray(d.features, dtype=np.float64) for d in docs]),
            name=name,
        )

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        *,
        qid_col: str = "qid",
        doc_col: str = "doc",
        rel_col: str = "rel",
        feature_cols: Sequence[str] | None = None,
        name: str = "",
    ) -> "Dataset":
        if df.empty:
            raise DataError(f"[Dataset] {name or 'dataset'} holds zero documents")
        if feature_cols is None:
            feature_cols = [c for c in df.columns if c not in (qid_col, doc_col, rel_col)]
        if not feature_cols:
            raise DataError("[Dataset] no feature columns")
        try:
            features = df[list(feature_cols)].to_numpy(dtype=np.float64)
            relevance = df[rel_col].to_numpy(dtype=np.float64)
        except (ValueError, TypeError) as e:
            raise DataError(f"[Dataset] non-numeric feature or relevance column: {e}") from e
        return cls(
            qids=df[qid_col].tolist(),
            doc_ids=df[doc_col].tolist(),
            relevance=relevance,
            features=features,
            name=name,
        )

    # --------------------------------------------------
    # Access
    # --------------------------------------------------
    def __len__(self) -> int:
        return self.features.shape[0]

    @property
    def dimensions(self) -> int:
        return self.features.shape[1]

    @property
    def num_groups(self) -> int:
        return len(self._index)

    def query_ids(self) -> List[str]:
        return list(self._index)

    def group(self, qid: str) -> QueryGroup:
        idx = self._index[str(qid)]
        return QueryGroup(
            qid=str(qid),
            doc_ids=tuple(self.doc_ids[idx]),
            features=self.features[idx],
            relevance=self.relevance[idx],
        )

    def groups(self) -> Iterator[QueryGroup]:
        for qid in self._index:
            yield self.group(qid)

    def with_dimensions(self, dimensions: int) -> "Dataset":
        """
        Zero-pads the feature matrix to `dimensions` columns (sparse files
        may not mention the trailing features). Never truncates.
        """
        if dimensions == self.dimensions:
            return self
        if dimensions < self.dimensions:
            raise DataError(
                f"[Dataset] {self.name or 'dataset'} has {self.dimensions} features, "
                f"model expects {dimensions}"
            )
        padded = np.zeros((len(self), dimensions), dtype=np.float64)
        padded[:, : self.dimensions] = self.features
        return Dataset(
            qids=self.qids,
            doc_ids=self.doc_ids,
            relevance=self.relevance,
            features=padded,
            name=self.name,
        )

    def shards(self, shard_size: int) -> List[List[QueryGroup]]:
        """Consecutive chunks of `shard_size` groups (the unit handed to one worker)."""
        if shard_size <= 0:
            raise ValueError(f"shard_size must be positive, got {shard_size}")
        groups = list(self.groups())
        return [groups[i:i + shard_size] for i in range(0, len(groups), shard_size)]

    def __repr__(self) -> str:
        return (
            f"Dataset(name={self.name!r}, docs={len(self)}, "
            f"groups={self.num_groups}, dimensions={self.dimensions})"
        )
