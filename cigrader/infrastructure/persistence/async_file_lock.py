"""Cross-process lock usable from coroutines.

filelock blocks while waiting, so acquisition runs in a worker thread.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from filelock import FileLock


@asynccontextmanager
async def async_file_lock(lock_path: Path, timeout: float = -1) -> AsyncIterator[None]:
    """Hold the lock at lock_path for the duration of the block.

    A negative timeout waits forever; otherwise filelock.Timeout is raised.

    Usage:
        async with async_file_lock(store_dir / ".lock"):
            await write_json(path, data)
    """
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    # Acquired and released on different worker threads
    lock = FileLock(lock_path, timeout=timeout, thread_local=False)

    await asyncio.to_thread(lock.acquire)
    try:
        yield
    finally:
        await asyncio.to_thread(lock.release)
