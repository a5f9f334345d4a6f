#!filepath: ltr/pipeline/parallel/executor.py
from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any, Callable, Iterable, List

from ltr import logs
from ltr.pipeline.parallel.types import ParallelKind


class ParallelExecutor:
    """
    ParallelExecutor（FINAL / FROZEN）

    - run() returns one result per item, in INPUT order, whatever order
      the workers finish in; callers reduce over that list
    - workers == 1 runs in-process (no pickling at all)
    - handler and items cross a process boundary: module-level
      functions / functools.partial of picklable objects only
    - the first failing item aborts the run; its exception is re-raised
    """

    @staticmethod
    def run(
            *,
            kind: ParallelKind,
            items: Iterable[Any],
            handler: Callable[[Any], Any],
            max_workers: int | None = None,
    ) -> List[Any]:
        batch = list(items)
        if not batch:
            return []

        workers = ParallelExecutor._resolve_workers(batch, max_workers)
        logs.debug(
            f"[ParallelExecutor] kind={kind.value} items={len(batch)} workers={workers}"
        )

        if workers == 1:
            return [handler(item) for item in batch]
        return ParallelExecutor._run_pool(batch, handler, workers)

    # ---------------- internal ----------------

    @staticmethod
    def _resolve_workers(items: list, max_workers: int | None) -> int:
        if max_workers is None:
            max_workers = os.cpu_count() or 1
        return max(1, min(max_workers, len(items)))

    @staticmethod
    def _run_pool(
            items: list,
            handler: Callable[[Any], Any],
            workers: int,
    ) -> List[Any]:
        results: List[Any] = [None] * len(items)

        with ProcessPoolExecutor(max_workers=workers) as pool:
            slot_of = {pool.submit(handler, item): k for k, item in enumerate(items)}
            for future in as_completed(slot_of):
                # .result() re-raises the worker's exception here
                results[slot_of[future]] = future.result()

        return results
