#!filepath: ltr/config/data_config.py
from typing import Literal, Optional

from pydantic import BaseModel


class DataConfig(BaseModel):
    reader: Literal["csv", "letor", "yahoo", "parquet"] = "letor"

    train_data: Optional[str] = None
    eval_data: Optional[str] = None
    test_data: Optional[str] = None

    # csv column layout（-1 = last column）
    qid: int = 0
    doc: int = 1
    rel: int = -1
    csv_header: bool = False
