from .dataset import Document, QueryGroup, Dataset
from .readers import read_dataset

__all__ = ["Document", "QueryGroup", "Dataset", "read_dataset"]
