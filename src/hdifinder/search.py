"""
Chunked parallel index search.

Architecture:
  plan_chunks  - split [start, end) into contiguous chunks of at most chunk_size
  scan_chunk   - walk one chunk in ascending order, stop at the first match
  search       - fan chunks out over a pool and reduce to one optional match

Result strategies:
  "first"  - the first match observed wins; remaining work is cancelled.
             When an address occurs at several indices this is not
             necessarily the lowest one.
  "lowest" - every chunk that could still hold a lower index is scanned and
             the lowest matching index wins. Deterministic, but slower.
"""

import logging
import math
import multiprocessing as mp
import os
import threading
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from contextlib import contextmanager
from typing import Callable, Iterable, List, Optional

from hdifinder.errors import DerivationError, InvalidConfiguration
from hdifinder.models import Candidate, ChunkSpec, MatchResult, SearchRange
from hdifinder.wallet import WalletContext, derive_candidates

logger = logging.getLogger(__name__)

STRATEGIES = ("first", "lowest")
EXECUTORS = ("process", "thread")

DeriveFn = Callable[[WalletContext, int], Iterable[Candidate]]
ProgressFn = Callable[[int, int], None]


def plan_chunks(search_range: SearchRange, chunk_size: int) -> List[ChunkSpec]:
    """Partition ``search_range`` into consecutive chunks of ``chunk_size`` indices.

    The last chunk holds the remainder; an empty range gives an empty list.
    """
    if chunk_size <= 0:
        raise InvalidConfiguration(f"chunk size must be positive, got {chunk_size}")
    start, end = search_range.start, search_range.end
    if end <= start:
        return []
    count = math.ceil((end - start) / chunk_size)
    return [
        ChunkSpec(start + i * chunk_size, min(start + (i + 1) * chunk_size, end))
        for i in range(count)
    ]


def scan_chunk(
    context: WalletContext,
    chunk: ChunkSpec,
    target: str,
    derive: DeriveFn = derive_candidates,
    stop_event=None,
) -> Optional[MatchResult]:
    """Worker: return the first candidate equal to ``target`` within ``chunk``.

    Indices where ``derive`` raises DerivationError are logged and skipped.
    ``stop_event`` is polled once per index; once set the scan gives up and
    returns None.
    """
    for index in chunk.indices():
        if stop_event is not None and stop_event.is_set():
            logger.debug("Chunk [%d, %d) stopped at index %d", chunk.start, chunk.end, index)
            return None
        try:
            candidates = derive(context, index)
        except DerivationError as e:
            logger.warning("Skipping index %d: %s", index, e)
            continue
        for candidate in candidates:
            if candidate.value == target:
                return MatchResult(index, candidate.value, candidate.kind)
    return None


def resolve_workers(workers: Optional[int]) -> int:
    if workers is None:
        return os.cpu_count() or 1
    if workers <= 0:
        raise InvalidConfiguration(f"workers must be positive, got {workers}")
    return workers


# set in each pool process by _install_stop_event
_process_stop_event = None


def _install_stop_event(stop_event) -> None:
    global _process_stop_event
    _process_stop_event = stop_event


def _scan_with_process_stop(context, chunk, target, derive):
    return scan_chunk(context, chunk, target, derive, _process_stop_event)


@contextmanager
def _worker_pool(kind: str, workers: int):
    """Yield ``(submit, stop_event)``; ``submit(context, chunk, target, derive)`` schedules a scan."""
    if kind == "thread":
        stop_event = threading.Event()
        with ThreadPoolExecutor(max_workers=workers) as pool:
            yield (lambda *args: pool.submit(scan_chunk, *args, stop_event)), stop_event
    else:
        # an mp.Event cannot travel inside a task, only through process startup
        stop_event = mp.Event()
        with ProcessPoolExecutor(
            max_workers=workers, initializer=_install_stop_event, initargs=(stop_event,)
        ) as pool:
            yield (lambda *args: pool.submit(_scan_with_process_stop, *args)), stop_event


def search(
    context: WalletContext,
    search_range: SearchRange,
    chunk_size: int,
    target: str,
    derive: DeriveFn = derive_candidates,
    workers: Optional[int] = None,
    strategy: str = "first",
    executor: str = "process",
    on_progress: Optional[ProgressFn] = None,
) -> Optional[MatchResult]:
    """Coordinator: search ``search_range`` for ``target`` and return the match, or None.

    Configuration errors are raised before any worker starts. With the
    "process" executor, ``derive`` must be a picklable module-level function.
    """
    if strategy not in STRATEGIES:
        raise InvalidConfiguration(f"unknown strategy {strategy!r}, expected one of {STRATEGIES}")
    if executor not in EXECUTORS:
        raise InvalidConfiguration(f"unknown executor {executor!r}, expected one of {EXECUTORS}")
    chunks = plan_chunks(search_range, chunk_size)
    num_workers = min(resolve_workers(workers), max(1, len(chunks)))
    if not chunks:
        logger.info("Empty range [%d, %d), nothing to scan", search_range.start, search_range.end)
        return None

    logger.info(
        "Scanning [%d, %d) in %d chunks of %d with %d %s workers (strategy: %s)",
        search_range.start, search_range.end, len(chunks), chunk_size,
        num_workers, executor, strategy,
    )

    # stop_event is set only once the result is settled, so "lowest" scans run to the end
    with _worker_pool(executor, num_workers) as (submit, stop_event):
        futures = {submit(context, chunk, target, derive): chunk for chunk in chunks}
        try:
            if strategy == "first":
                result = _first_match(futures, on_progress)
            else:
                result = _lowest_match(futures, on_progress)
        finally:
            stop_event.set()
            for fut in futures:
                fut.cancel()

    if result is None:
        logger.info("Exhausted [%d, %d) without a match", search_range.start, search_range.end)
    else:
        logger.info("Match at index %d (%s)", result.index, result.kind)
    return result


def _first_match(futures, on_progress: Optional[ProgressFn]) -> Optional[MatchResult]:
    done = 0
    for fut in as_completed(futures):
        result = fut.result()
        done += 1
        if on_progress is not None:
            on_progress(done, len(futures))
        if result is not None:
            chunk = futures[fut]
            logger.debug("Adopting match from chunk [%d, %d)", chunk.start, chunk.end)
            return result
    return None


def _lowest_match(futures, on_progress: Optional[ProgressFn]) -> Optional[MatchResult]:
    best: Optional[MatchResult] = None
    done = 0
    for fut in as_completed(futures):
        if fut.cancelled():
            continue
        result = fut.result()
        done += 1
        if on_progress is not None:
            on_progress(done, len(futures))
        if result is None or (best is not None and result.index >= best.index):
            continue
        best = result
        # chunks starting past the best index cannot improve on it
        for pending, chunk in futures.items():
            if chunk.start > best.index:
                pending.cancel()
    return best
