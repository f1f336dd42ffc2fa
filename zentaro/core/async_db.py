"""Async helper wrappers for sync repositories."""
from __future__ import annotations

from typing import Any

import anyio


class AsyncDBProxy:
    """Proxy that runs sync repository calls in a worker thread."""

    def __init__(self, target: Any):
        self._target = target

    def __getattr__(self, name: str):
        attr = getattr(self._target, name)
        if not callable(attr):
            return attr

        async def _call(*args: Any, **kwargs: Any):
            return await anyio.to_thread.run_sync(lambda: attr(*args, **kwargs))

        return _call
