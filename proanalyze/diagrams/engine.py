"""Graphviz layout engine behind an initialize-once async handle."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Protocol

import graphviz

from ..logging import get_logger

logger = get_logger("diagrams.engine")


class LayoutEngine(Protocol):
    """Converts DOT source into rendered markup."""

    async def render(self, source: str, *, fmt: str = "svg") -> str:
        """Lay out ``source`` and return the output document."""


class GraphvizEngine:
    """Runs the ``dot`` executable through the graphviz package."""

    def __init__(self, *, layout: str = "dot") -> None:
        self.layout = layout

    async def render(self, source: str, *, fmt: str = "svg") -> str:
        output = await asyncio.to_thread(
            graphviz.pipe,
            self.layout,
            fmt,
            source.encode("utf-8"),
        )
        return output.decode("utf-8")


async def create_graphviz_engine() -> GraphvizEngine:
    """Probe the Graphviz installation once; raises if ``dot`` is missing."""
    version = await asyncio.to_thread(graphviz.version)
    logger.info("Graphviz %s ready", ".".join(str(part) for part in version))
    return GraphvizEngine()


EngineFactory = Callable[[], Awaitable[LayoutEngine]]


class LayoutEngineHandle:
    """Owns the shared layout engine instance.

    The first ``get`` starts initialization; concurrent callers await the same
    future instead of creating another engine. A failed initialization is
    forgotten so the next call tries again.
    """

    def __init__(self, factory: EngineFactory = create_graphviz_engine) -> None:
        self._factory = factory
        self._future: Optional[asyncio.Future[LayoutEngine]] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    async def get(self) -> LayoutEngine:
        loop = asyncio.get_running_loop()
        if self._future is None or self._loop is not loop:
            self._loop = loop
            self._future = loop.create_task(self._initialize())
        return await asyncio.shield(self._future)

    @property
    def initialized(self) -> bool:
        future = self._future
        return future is not None and future.done() and not future.cancelled() and future.exception() is None

    async def _initialize(self) -> LayoutEngine:
        try:
            return await self._factory()
        except Exception:
            logger.exception("Layout engine initialization failed")
            self._future = None
            raise


__all__ = [
    "EngineFactory",
    "GraphvizEngine",
    "LayoutEngine",
    "LayoutEngineHandle",
    "create_graphviz_engine",
]
