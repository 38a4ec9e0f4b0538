"""Starlette host router for resource route tables.

``HttpRouter`` implements :class:`RouterInterface` on top of
``starlette.routing.Router`` and is what ``Resource.register()`` returns when
no host router is supplied. It is an ASGI application: serve it directly,
mount it in a Starlette/FastAPI app, or drive it with ``TestClient``.

Binding
-------
``bind(method, path, handlers)`` stores an ordered chain under a path
template. ``:name`` segments become Starlette ``{name}`` parameters, read by
handlers from ``request.path_params``. All verbs of one template share a
single Starlette ``Route`` so a wrong verb answers 405 with the full
``Allow`` header. Binding an already bound ``(method, path)`` replaces the
chain, so registering a resource again serves its current table.

Ordering
--------
Templates are tried with the fewest placeholders first, then in first-bound
order, so ``/users/count`` wins over ``/users/:id``. Routes bound on this
router always come before mounted routers, which are tried in ``use()``
order.

Chains
------
Each handler receives ``(request, response, next)`` where ``response`` is a
:class:`ResponseWriter`. A handler passes control on by calling ``next()``;
returning without calling it ends the chain. Plain functions run in
Starlette's threadpool, coroutine functions on the event loop. Handler
exceptions are not caught.
"""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import BaseRoute, Mount, Route, Router
from starlette.types import Receive, Scope, Send

from .http import ResponseWriter
from .methods import HttpMethod, is_allowed_method
from .router_interface import RouterInterface

__all__ = ["HttpRouter", "run_chain", "to_starlette_path"]

logger = logging.getLogger("resty_routes.http_router")

_PLACEHOLDER = re.compile(r"(?<=/):([A-Za-z_][A-Za-z0-9_]*)")


def to_starlette_path(template: str) -> str:
    """Translate ``/users/:id`` into Starlette's ``/users/{id}``."""
    return _PLACEHOLDER.sub(r"{\1}", template)


class _Next:
    """Continuation handed to each handler; records whether it was called."""

    __slots__ = ("called",)

    def __init__(self) -> None:
        self.called = False

    def __call__(self, *args: Any) -> None:
        self.called = True


async def run_chain(
    handlers: Sequence[Callable[..., Any]], request: Request, response: ResponseWriter
) -> None:
    """Run ``handlers`` one at a time until one does not call ``next()``."""
    for handler in handlers:
        proceed = _Next()
        if inspect.iscoroutinefunction(handler):
            await handler(request, response, proceed)
        else:
            result = await run_in_threadpool(handler, request, response, proceed)
            if inspect.isawaitable(result):
                await result
        if not proceed.called:
            return


class HttpRouter(RouterInterface):
    """Starlette router running ``(request, response, next)`` chains."""

    __slots__ = ("name", "_bindings", "_mounts", "_router")

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        self._bindings: dict[str, dict[str, tuple[Callable[..., Any], ...]]] = {}
        self._mounts: list[tuple[str, HttpRouter]] = []
        self._router = Router()

    def __repr__(self) -> str:
        return f"<HttpRouter {self.name!r} paths={len(self._bindings)} mounts={len(self._mounts)}>"

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._router(scope, receive, send)

    @property
    def starlette_router(self) -> Router:
        """The underlying Starlette router."""
        return self._router

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------
    def bind(self, method: str, path: str, handlers: Sequence[Callable[..., Any]]) -> HttpRouter:
        if not is_allowed_method(method):
            raise ValueError(f"Router {self.name!r}: method {method!r} is not supported")
        method = str(method)
        chain = tuple(handlers)
        if not chain:
            raise ValueError(f"Router {self.name!r}: no handlers for {method.upper()} {path}")
        verbs = self._bindings.setdefault(path, {})
        if method in verbs:
            logger.debug("Router %r: rebinding %s %s", self.name, method.upper(), path)
        verbs[method] = chain
        self._rebuild()
        logger.debug("Router %r: bound %s %s (%d handlers)", self.name, method.upper(), path, len(chain))
        return self

    def use(self, prefix: str, router: HttpRouter) -> HttpRouter:
        """Mount ``router`` below ``prefix``."""
        if router is self:
            raise ValueError("A router cannot be mounted on itself")
        stripped = prefix.strip("/")
        self._mounts.append(("/" + stripped if stripped else "", router))
        self._rebuild()
        return self

    def bound_routes(self) -> list[tuple[str, str, int]]:
        """Return ``(method, path, handler_count)`` for own and mounted routes."""
        result = [
            (method, path, len(chain))
            for path, verbs in self._bindings.items()
            for method, chain in verbs.items()
        ]
        for prefix, child in self._mounts:
            result.extend((method, prefix + path, count) for method, path, count in child.bound_routes())
        return result

    def _rebuild(self) -> None:
        order = {path: index for index, path in enumerate(self._bindings)}
        paths = sorted(self._bindings, key=lambda p: (len(_PLACEHOLDER.findall(p)), order[p]))
        routes: list[BaseRoute] = [
            Route(
                to_starlette_path(path),
                self._endpoint(path),
                methods=[method.upper() for method in self._bindings[path]],
            )
            for path in paths
        ]
        routes.extend(Mount(prefix, app=child) for prefix, child in self._mounts)
        self._router.routes = routes

    def _endpoint(self, path: str) -> Callable[[Request], Any]:
        async def endpoint(request: Request) -> Response:
            method = request.method.lower()
            if method == "head":
                method = HttpMethod.GET.value
            # Looked up per request so a rebinding takes effect immediately
            chain = self._bindings[path][method]
            writer = ResponseWriter(request.url.path)
            await run_chain(chain, request, writer)
            return writer.to_response()

        return endpoint
