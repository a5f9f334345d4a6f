#!filepath: tests/data/test_dataset.py
import numpy as np
import pandas as pd
import pytest

from ltr.data.dataset import Dataset, Document
from ltr.utils.errors import DataError


def _ds(**overrides):
    kwargs = dict(
        qids=["b", "a", "b", "a"],
        doc_ids=["1", "2", "3", "4"],
        relevance=[1, 0, 0, 2],
        features=np.arange(8, dtype=float).reshape(4, 2),
    )
    kwargs.update(overrides)
    return Dataset(**kwargs)


def test_groups_follow_first_appearance():
    ds = _ds()
    assert ds.query_ids() == ["b", "a"]
    assert ds.num_groups == 2

    g = ds.group("a")
    assert g.doc_ids == ("2", "4")
    assert g.relevance.tolist() == [0, 2]
    assert g.features.tolist() == [[2.0, 3.0], [6.0, 7.0]]


def test_has_signal():
    ds = _ds(relevance=[1, 0, 1, 0])
    assert ds.group("b").has_signal is False
    assert ds.group("a").has_signal is False
    assert _ds().group("b").has_signal is True


def test_single_document_group_has_no_signal():
    ds = Dataset(qids=["q"], doc_ids=["d"], relevance=[3], features=[[1.0]])
    assert ds.group("q").has_signal is False


@pytest.mark.parametrize(
    "overrides",
    [
        dict(qids=[], doc_ids=[], relevance=[], features=np.zeros((0, 2))),
        dict(relevance=[1, 0, -1, 0]),
        dict(relevance=[1, 0, 0.5, 0]),
        dict(relevance=[1, 0, np.nan, 0]),
        dict(features=np.array([[0, 1], [np.inf, 0], [0, 0], [1, 1]], dtype=float)),
        dict(qids=["a", "b"]),
        dict(features=np.zeros(4)),
    ],
)
def test_invalid_inputs(overrides):
    with pytest.raises(DataError):
        _ds(**overrides)


def test_with_dimensions_pads_with_zeros():
    ds = _ds()
    padded = ds.with_dimensions(4)
    assert padded.dimensions == 4
    assert np.array_equal(padded.features[:, :2], ds.features)
    assert not padded.features[:, 2:].any()
    assert ds.with_dimensions(2) is ds

    with pytest.raises(DataError):
        padded.with_dimensions(3)


def test_shards_are_consecutive_chunks(dataset_factory):
    ds = dataset_factory(n_groups=5)
    shards = ds.shards(2)
    assert [len(s) for s in shards] == [2, 2, 1]
    assert [g.qid for s in shards for g in s] == ds.query_ids()


def test_from_documents_and_back():
    docs = [
        Document(doc_id="x", qid="1", relevance=2, features=np.array([0.1, 0.2])),
        Document(doc_id="y", qid="1", relevance=0, features=np.array([0.3, 0.4])),
    ]
    ds = Dataset.from_documents(docs)
    out = list(ds.group("1").documents())
    assert [d.doc_id for d in out] == ["x", "y"]
    assert out[0].relevance == 2

    with pytest.raises(DataError):
        Dataset.from_documents([])


def test_from_frame():
    df = pd.DataFrame(
        {"qid": [1, 1, 2], "doc": ["a", "b", "c"], "f1": [0.1, 0.2, 0.3], "rel": [1, 0, 2]}
    )
    ds = Dataset.from_frame(df)
    assert ds.dimensions == 1
    assert ds.query_ids() == ["1", "2"]

    with pytest.raises(DataError):
        Dataset.from_frame(df.assign(f1=["x", "y", "z"]))
