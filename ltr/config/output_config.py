#!filepath: ltr/config/output_config.py
from typing import Optional

from pydantic import BaseModel


class OutputConfig(BaseModel):
    # None = do not persist the trained model
    model_dir: Optional[str] = None
