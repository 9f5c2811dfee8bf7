"""Async facade over FileSystem."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from types import TracebackType
from typing import Any, Callable, List, Optional, TypeVar
from typing_extensions import Self

from ftpfs.clients.filesystem import FileSystem, RemotePath
from ftpfs.filemetadata import FileMetadata

T = TypeVar("T")


class AsyncFileSystem:
    """Runs FileSystem operations on a thread pool.

    Each operation holds its own pooled connection, so any number of them
    may be awaited concurrently.

    Example:
        async with AsyncFileSystem(FileSystem(pool)) as fs:
            listing, cwd = await asyncio.gather(fs.read_dir("/"), fs.getwd())
    """

    def __init__(
        self,
        fs: FileSystem,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        """
        Args:
            fs: The synchronous file system to wrap
            executor: Optional thread pool executor. If not provided,
                     one with 4 workers is created on enter.
        """
        self._fs = fs
        self._executor = executor
        self._owns_executor = executor is None

    def name(self) -> str:
        return self._fs.name()

    async def __aenter__(self) -> Self:
        if self._owns_executor:
            self._executor = ThreadPoolExecutor(max_workers=4)
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    async def delete(self, path: RemotePath) -> None:
        await self._run(self._fs.delete, path)

    async def rename(self, src: RemotePath, dst: RemotePath) -> None:
        await self._run(self._fs.rename, src, dst)

    async def mkdir(self, path: RemotePath) -> str:
        return await self._run(self._fs.mkdir, path)

    async def rmdir(self, path: RemotePath) -> None:
        await self._run(self._fs.rmdir, path)

    async def getwd(self) -> str:
        return await self._run(self._fs.getwd)

    async def read_dir(self, path: RemotePath) -> List[FileMetadata]:
        return await self._run(self._fs.read_dir, path)

    async def stat(self, path: RemotePath) -> FileMetadata:
        return await self._run(self._fs.stat, path)
