from __future__ import annotations

import asyncio
import logging

import uvicorn
from fastapi import FastAPI

from ratefeed.errors import ServerError

logger = logging.getLogger("ratefeed.server")


class HttpServer:
    """Runs the FastAPI app under uvicorn as a task of the running loop.

    The task is supervised: its outcome is logged and kept in ``failure`` so
    the updater can restart it on the next cycle.
    """

    def __init__(self, app: FastAPI, host: str, port: int) -> None:
        self.app = app
        self.host = host
        self.port = port
        self.failure: BaseException | None = None
        self._task: asyncio.Task | None = None
        self._server: uvicorn.Server | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _serve(self) -> None:
        config = uvicorn.Config(self.app, host=self.host, port=self.port, log_config=None)
        self._server = uvicorn.Server(config)
        logger.info("http server has started at address %s:%d", self.host, self.port)
        try:
            await self._server.serve()
        except SystemExit as exc:
            # uvicorn exits the process when it cannot bind.
            raise ServerError(f"cannot run http listener on {self.host}:{self.port}") from exc
        if self._server.should_exit and not self._server.started:
            raise ServerError(f"http listener on {self.host}:{self.port} did not start")

    def _on_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            logger.info("http server task cancelled")
            return
        self.failure = task.exception()
        if self.failure is not None:
            logger.error("http server stopped: %s", self.failure)
        else:
            logger.info("http server stopped")

    def start(self) -> asyncio.Task:
        if self.is_running:
            return self._task
        self.failure = None
        self._task = asyncio.create_task(self._serve(), name="http-server")
        self._task.add_done_callback(self._on_done)
        return self._task

    async def stop(self) -> None:
        if not self.is_running:
            return
        if self._server is not None:
            self._server.should_exit = True
        await asyncio.wait({self._task})
