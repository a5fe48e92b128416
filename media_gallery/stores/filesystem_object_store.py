# media_gallery/stores/filesystem_object_store.py
"""
Object store backed by a local directory tree.

Keys map one-to-one onto relative paths below the root directory. Blocking
file I/O runs in the default executor.
"""

import asyncio
import mimetypes
import os
import tempfile
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Any, Callable, TypeVar
from urllib.parse import quote

from ..enums import LoggerName, LogSource
from ..exceptions import ObjectNotFoundError, StoreFailureError, ValidationFailureError
from ..services.logger import get_service_logger
from ..utils.time_utils import UTC_TIMEZONE
from .protocols import ObjectMetadata

logger = get_service_logger(LoggerName.OBJECT_STORE, LogSource.STORE)

T = TypeVar("T")


class FileSystemObjectStore:
    def __init__(self, root_directory: str, public_base_url: str):
        self.root = Path(root_directory).resolve()
        self.public_base_url = public_base_url.rstrip("/")

    def _path_for(self, key: str) -> Path:
        """Resolve ``key`` below the root, rejecting anything that escapes it."""
        if not key or key.startswith("/") or "\\" in key:
            raise ValidationFailureError(f"Invalid object key '{key}'")
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise ValidationFailureError(f"Object key escapes store root: '{key}'")
        return path

    async def _run(self, operation: str, key: str, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, partial(func, *args))
        except FileNotFoundError as e:
            raise ObjectNotFoundError(
                f"Object {key} does not exist", operation=operation
            ) from e
        except OSError as e:
            logger.error(f"Object store {operation} failed for {key}", exception=e)
            raise StoreFailureError(
                f"Object store {operation} failed for {key}: {e}",
                operation=operation,
                details={"key": key},
            ) from e

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".upload-")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @staticmethod
    def _stat(path: Path) -> os.stat_result:
        if not path.is_file():
            raise FileNotFoundError(str(path))
        return path.stat()

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path_for(key)
        await self._run("upload", key, self._write_file, path, data)
        logger.debug(f"Wrote {key} ({len(data)} bytes, {content_type})")

    async def delete(self, key: str) -> None:
        path = self._path_for(key)
        await self._run("delete", key, path.unlink)
        logger.debug(f"Deleted {key}")

    async def resolve_url(self, key: str) -> str:
        path = self._path_for(key)
        await self._run("resolve_url", key, self._stat, path)
        return f"{self.public_base_url}/{quote(key)}"

    async def read_metadata(self, key: str) -> ObjectMetadata:
        path = self._path_for(key)
        stat = await self._run("read_metadata", key, self._stat, path)
        return ObjectMetadata(
            key=key,
            size=stat.st_size,
            content_type=mimetypes.guess_type(path.name)[0],
            updated_at=datetime.fromtimestamp(stat.st_mtime, tz=UTC_TIMEZONE),
        )
