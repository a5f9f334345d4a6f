#!filepath: ltr/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .log_config import LogConfig
from .data_config import DataConfig
from .training_config import TrainingConfig
from .output_config import OutputConfig
from ltr.utils.errors import ConfigurationError


def project_root() -> str:
    """
    返回项目根目录（基于当前文件位置推导）:
    ltr/config/app_config.py → ltr/config → ltr → project_root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


def default_config_path() -> str:
    return os.path.join(os.path.dirname(__file__), "base.yml")


# env var → data section key
_ENV_OVERRIDES = {
    "LTR_TRAIN_DATA": "train_data",
    "LTR_EVAL_DATA": "eval_data",
    "LTR_TEST_DATA": "test_data",
}


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    training: TrainingConfig = Field(default_factory=TrainingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        加载 YAML 配置 + .env
        - 默认使用 ltr/config/base.yml
        - 不依赖当前工作目录
        - LTR_TRAIN_DATA / LTR_EVAL_DATA / LTR_TEST_DATA 覆盖 data 路径
        """
        root = project_root()

        # 1) 先加载 .env（在项目根目录下）
        load_dotenv(os.path.join(root, ".env"))

        # 2) 决定配置文件路径
        if path is None:
            path = default_config_path()

        if not os.path.exists(path):
            raise ConfigurationError(f"Config file not found: {path}")

        # 3) 读取 YAML
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        if not isinstance(raw, dict):
            raise ConfigurationError(f"Config file must hold a mapping: {path}")

        # 4) env 覆盖
        data = dict(raw.get("data") or {})
        for env_key, field_name in _ENV_OVERRIDES.items():
            value = os.getenv(env_key)
            if value:
                data[field_name] = value
        raw["data"] = data

        try:
            return cls(**raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid config {path}: {e}") from e
