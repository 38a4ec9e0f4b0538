"""Logging plugin for Resty Routes.

Records one line per chain handler once it returns: route label, chain
stage, the response status seen at that point and the elapsed time::

    GET /users/:id before -> pending (0.04 ms)
    GET /users/:id main -> 200 (1.32 ms)

Configuration (resource-wide or per route label):
    - ``enabled``: gate the plugin (default True)
    - ``level``: logging level name used for records (default "INFO")
    - ``stages``: comma separated stages to record (default all three)

Example::

    users = Resource("users").plug("logging", stages="main")
    users.route("count", "get", {"handler": count_users, "logging_enabled": False})
"""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Callable
from typing import Any, Literal

from resty_routes.core.resource import Resource
from resty_routes.core.table import RouteEntry
from resty_routes.plugins._base_plugin import BasePlugin

_STAGES = ("before", "main", "after")


class LoggingPlugin(BasePlugin):
    """Log each chain handler with the response status and timing."""

    plugin_code = "logging"
    plugin_description = "Logs route chain handlers with status and timing"

    __slots__ = ("logger",)

    def __init__(self, resource: Any, *, logger: logging.Logger | None = None, **config: Any):
        self.logger = logger or logging.getLogger("resty_routes.access")
        super().__init__(resource, **config)

    def configure(  # type: ignore[override]
        self,
        enabled: bool = True,
        level: Literal["DEBUG", "INFO", "WARNING"] = "INFO",
        stages: str = ",".join(_STAGES),
    ):
        pass

    def _record(self, label: str, stage: str, response: Any, started: float) -> None:
        config = self.configuration(label)
        if not config.get("enabled", True):
            return
        wanted = {s.strip() for s in str(config.get("stages", ",".join(_STAGES))).split(",")}
        if stage not in wanted:
            return
        status = response.status if getattr(response, "finished", False) else "pending"
        self.logger.log(
            logging.getLevelName(config.get("level", "INFO")),
            "%s %s -> %s (%.2f ms)",
            label,
            stage,
            status,
            (time.perf_counter() - started) * 1000,
        )

    def wrap_handler(self, resource: Any, entry: RouteEntry, level: str, handler: Callable):
        label = entry.key.label

        if inspect.iscoroutinefunction(handler):

            async def logged_async(request, response, next):  # noqa: A002
                started = time.perf_counter()
                try:
                    return await handler(request, response, next)
                finally:
                    self._record(label, level, response, started)

            return logged_async

        def logged(request, response, next):  # noqa: A002
            started = time.perf_counter()
            try:
                return handler(request, response, next)
            finally:
                self._record(label, level, response, started)

        return logged


Resource.register_plugin(LoggingPlugin)
