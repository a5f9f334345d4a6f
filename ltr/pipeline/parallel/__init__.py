from .executor import ParallelExecutor
from .types import ParallelKind

__all__ = ["ParallelExecutor", "ParallelKind"]
