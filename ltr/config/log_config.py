#!filepath: ltr/config/log_config.py
from typing import Literal

from pydantic import BaseModel, field_validator

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class LogConfig(BaseModel):
    dir: str = "logs"
    rotation: str = "1 day"        # loguru rotation, e.g. "1 day" / "50 MB"
    retention: str = "30 days"
    level: LogLevel = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.upper() if isinstance(v, str) else v
