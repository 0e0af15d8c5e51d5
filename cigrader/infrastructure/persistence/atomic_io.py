from __future__ import annotations

import asyncio
import json
import tempfile
from pathlib import Path
from typing import Any

import aiofiles
from loguru import logger


async def atomic_write(path: Path, content: str) -> None:
    """Replace path with content via temp file + rename.

    Readers see either the old or the new document, never a partial one.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path_str = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=".tmp_",
        suffix=path.suffix,
    )
    temp_path = Path(temp_path_str)

    try:
        async with aiofiles.open(fd, mode="w", encoding="utf-8", closefd=True) as f:
            await f.write(content)
        await asyncio.to_thread(temp_path.replace, path)
        logger.debug("Atomic write completed: {}", path)
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


async def read_json(path: Path, default: Any = None) -> Any:
    if not path.exists():
        return default
    async with aiofiles.open(path, encoding="utf-8") as f:
        content = await f.read()
    return json.loads(content)


async def write_json(path: Path, data: Any) -> None:
    await atomic_write(path, json.dumps(data, indent=2, sort_keys=True))
