#!filepath: tests/data/test_readers.py
import numpy as np
import pandas as pd
import pytest

from ltr.config.data_config import DataConfig
from ltr.data.readers import read_dataset
from ltr.utils.errors import ConfigurationError, DataError


def test_read_letor(letor_file):
    ds = read_dataset(letor_file, DataConfig(reader="letor"))

    assert len(ds) == 5
    assert ds.dimensions == 3
    assert ds.query_ids() == ["1", "2"]

    g = ds.group("1")
    assert g.doc_ids == ("d1", "d2", "d3")
    assert g.relevance.tolist() == [2, 1, 0]
    # missing features are zero, indices are 1-based
    assert g.features[1].tolist() == [0.5, 0.5, 0.0]


def test_read_yahoo_uses_row_ids(letor_file):
    ds = read_dataset(letor_file, DataConfig(reader="yahoo"))
    assert ds.group("2").doc_ids == ("3", "4")


def test_read_csv(csv_file):
    cfg = DataConfig(reader="csv", qid=0, doc=1, rel=-1)
    ds = read_dataset(csv_file, cfg)

    assert ds.dimensions == 2
    assert ds.num_groups == 2
    g = ds.group("1")
    assert g.doc_ids == ("a", "b", "c")
    assert g.relevance.tolist() == [2, 1, 0]
    assert g.features[0].tolist() == [0.9, 0.1]


def test_read_csv_with_header(tmp_path):
    p = tmp_path / "h.csv"
    p.write_text("rel,qid,doc,f\n1,q,a,0.5\n0,q,b,0.1\n", encoding="utf-8")
    ds = read_dataset(p, DataConfig(reader="csv", csv_header=True, rel=0, qid=1, doc=2))
    assert ds.group("q").relevance.tolist() == [1, 0]


def test_read_csv_same_columns_rejected(csv_file):
    with pytest.raises(ConfigurationError):
        read_dataset(csv_file, DataConfig(reader="csv", qid=0, doc=0, rel=-1))


def test_read_parquet(tmp_path):
    p = tmp_path / "train.parquet"
    pd.DataFrame(
        {
            "qid": ["1", "1", "2"],
            "doc": ["a", "b", "c"],
            "rel": [1, 0, 2],
            "f1": [0.1, 0.2, 0.3],
            "f2": [1.0, 0.0, 0.5],
        }
    ).to_parquet(p, index=False)

    ds = read_dataset(p, DataConfig(reader="parquet"))
    assert ds.dimensions == 2
    assert np.allclose(ds.group("2").features, [[0.3, 0.5]])


def test_read_parquet_missing_columns(tmp_path):
    p = tmp_path / "bad.parquet"
    pd.DataFrame({"qid": [1], "f1": [0.1]}).to_parquet(p, index=False)
    with pytest.raises(DataError):
        read_dataset(p, DataConfig(reader="parquet"))


def test_read_corrupt_parquet(tmp_path):
    p = tmp_path / "junk.parquet"
    p.write_bytes(b"not a parquet file at all")
    with pytest.raises(DataError, match="junk.parquet"):
        read_dataset(p, DataConfig(reader="parquet"))


def test_unknown_reader(letor_file):
    cfg = DataConfig.model_construct(reader="svmlight")
    with pytest.raises(ConfigurationError):
        read_dataset(letor_file, cfg)


def test_missing_file(tmp_path):
    with pytest.raises(DataError):
        read_dataset(tmp_path / "nope.txt", DataConfig())


def test_empty_file_is_data_error(tmp_path):
    p = tmp_path / "empty.letor"
    p.write_text("\n# only a comment\n", encoding="utf-8")
    with pytest.raises(DataError):
        read_dataset(p, DataConfig(reader="letor"))

    c = tmp_path / "empty.csv"
    c.write_text("", encoding="utf-8")
    with pytest.raises(DataError):
        read_dataset(c, DataConfig(reader="csv"))


def test_malformed_sparse_line(tmp_path):
    p = tmp_path / "bad.letor"
    p.write_text("1 1:0.5 2:0.1\n", encoding="utf-8")
    with pytest.raises(DataError):
        read_dataset(p, DataConfig(reader="letor"))
