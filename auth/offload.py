"""
auth/offload.py -- Bounded worker pool for CPU/memory-heavy calls.

argon2 deliberately burns ~64 MiB and tens of milliseconds per call. Running
it on the event loop would stall every other in-flight request for that
long, so hash and verify calls are dispatched here instead.

Pattern: one process-wide ThreadPoolExecutor (lru_cache singleton, same as
core.config.get_settings) sized by Settings.hash_workers. A burst of logins
queues behind at most that many workers instead of spawning unbounded
threads. argon2-cffi releases the GIL inside the C primitive, so threads are
enough -- no process pool needed.

run_blocking() is the only suspension point in the auth layer. If the
awaiting task is cancelled (client disconnect), the worker still runs to
completion and its result is discarded.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, TypeVar

from core.config import get_settings

logger = logging.getLogger("chatauth.offload")

T = TypeVar("T")


@functools.lru_cache
def _get_pool() -> ThreadPoolExecutor:
    workers = get_settings().hash_workers
    logger.debug("Starting hash worker pool (max_workers=%d)", workers)
    return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="chatauth-hash")


async def run_blocking(fn: Callable[..., T], *args) -> T:
    """Run fn(*args) on the worker pool and await its result."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_get_pool(), functools.partial(fn, *args))


def shutdown_pool(wait: bool = True) -> None:
    """Stop the worker pool. The next run_blocking() call starts a fresh one.

    Call from the application's shutdown hook.
    """
    if _get_pool.cache_info().currsize == 0:
        return
    _get_pool().shutdown(wait=wait)
    _get_pool.cache_clear()
    logger.info("Hash worker pool shut down")
