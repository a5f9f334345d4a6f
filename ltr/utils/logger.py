#!filepath: ltr/utils/logger.py
import os
from functools import wraps
from time import perf_counter
from typing import Callable

from loguru import logger

LOG_DIR_ENV = "LTR_LOG_DIR"
LOG_LEVEL_ENV = "LTR_LOG_LEVEL"

# process name is in the format: pass workers share the same file sink
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {process.name} | {message}"


class Logging:
    """
    ltr 日志
    ---------------------------------------
    - 一个按天切割的文件 sink（worker 进程经 enqueue 写入同一文件）
    - WARNING 及以上同时回显到 stdout（CLI 用户可见）
    - configure(LogConfig) 在读取配置后重建 sink
    - 目录和级别导出到 LTR_LOG_DIR / LTR_LOG_LEVEL，spawn 出的 worker 导入时沿用
    ---------------------------------------
    """

    def __init__(
        self,
        log_dir: str = "logs",
        rotation: str = "1 day",
        retention: str = "30 days",
        log_level: str = "INFO",
    ):
        self._apply(log_dir, rotation, retention, log_level)

    def configure(self, cfg) -> None:
        """Rebuild sinks from a LogConfig."""
        self._apply(cfg.dir, cfg.rotation, cfg.retention, cfg.level)

    def _apply(self, log_dir: str, rotation: str, retention: str, level: str) -> None:
        self.log_dir = log_dir
        self.rotation = rotation
        self.retention = retention
        self.level = level.upper()

        os.makedirs(self.log_dir, exist_ok=True)
        # spawned pool workers re-import ltr and build `logs` from these
        os.environ[LOG_DIR_ENV] = self.log_dir
        os.environ[LOG_LEVEL_ENV] = self.level

        logger.remove()
        self._sink_id = logger.add(
            sink=os.path.join(self.log_dir, "ltr_{time:YYYY-MM-DD}.log"),
            rotation=self.rotation,
            retention=self.retention,
            level=self.level,
            format=_FILE_FORMAT,
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )
        logger.debug(f"[Logging] sink={self.log_dir} level={self.level}")

    # ----------- 日志方法 -----------
    def debug(self, msg: str, *args, **kwargs):
        logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        print(msg)
        logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        print(msg)
        logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        logger.exception(msg, *args, **kwargs)

    # ---------- 装饰器 ----------
    def catch(self, msg: str = "Exception occurred", log_time: bool = True) -> Callable:
        """
        Logs the traceback (file sink only) and re-raises.
        With log_time, successful calls log their wall time.
        """

        def decorator(func: Callable):
            name = func.__qualname__

            @wraps(func)
            def wrapper(*args, **kwargs):
                start = perf_counter()
                try:
                    result = func(*args, **kwargs)
                except Exception:
                    logger.exception(f"[FAIL] {name}: {msg}")
                    raise
                if log_time:
                    logger.info(f"[TIME] {name} {perf_counter() - start:.4f}s")
                return result

            return wrapper

        return decorator


# 默认全局 logs（CLI 读取配置后调用 logs.configure；worker 进程沿用父进程导出的目录和级别）
logs = Logging(
    log_dir=os.getenv(LOG_DIR_ENV, "logs"),
    log_level=os.getenv(LOG_LEVEL_ENV, "INFO"),
)
