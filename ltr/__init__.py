#!filepath: ltr/__init__.py

from .utils.logger import Logging, logs
from .utils.errors import LtrError, ConfigurationError, DataError
from .config.app_config import AppConfig

__version__ = "0.1.0"

__all__ = [
    "logs", "Logging",
    "LtrError", "ConfigurationError", "DataError",
    "AppConfig",
    "__version__",
]
