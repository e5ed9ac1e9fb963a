"""Process-scoped lazily loaded values."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class AsyncLazy(Generic[T]):
    """Value loaded at most once; concurrent first callers share one load.

    The loaded value is kept for the lifetime of the instance. A failed load
    is not cached, so the next caller starts a fresh attempt.
    """

    def __init__(self, loader: Callable[[], Awaitable[T]]) -> None:
        self._loader = loader
        self._value: T | None = None
        self._loaded = False
        self._pending: asyncio.Task[T] | None = None

    @classmethod
    def ready(cls, value: T) -> "AsyncLazy[T]":
        """Create an instance that already holds a value."""

        async def _noop() -> T:
            return value

        lazy = cls(_noop)
        lazy._value = value
        lazy._loaded = True
        return lazy

    @property
    def loaded(self) -> bool:
        """Return whether the value has been loaded."""
        return self._loaded

    async def get(self) -> T:
        """Return the value, loading it on first use."""
        if self._loaded:
            return self._value  # type: ignore[return-value]
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._load())
        return await asyncio.shield(self._pending)

    async def _load(self) -> T:
        try:
            value = await self._loader()
        except BaseException:
            self._pending = None
            raise
        self._value = value
        self._loaded = True
        self._pending = None
        return value
