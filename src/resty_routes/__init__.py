"""Resty Routes - Declarative REST resource route builder.

Describe a named resource's endpoints (collection GET/POST, entity
GET/PATCH/PUT/DELETE, sub-routes) plus ordered before/after interceptors, and
get back a resolved, ordered route table bound on a host router.

Public exports:
    - ``Resource``: Builder for one resource's routes
    - ``HttpRouter``: Starlette host router returned by ``Resource.register()``
    - ``RouterInterface``: Contract for custom host routers
    - ``RouteOptions``: Options bag for ``route``/``before``/``after``
    - Declaration errors (``DisallowedMethod``, ``MissingRouteToken``...)

Built-in plugins (logging) are auto-registered on first import.

Example::

    from resty_routes import Resource

    users = Resource("users")
    users.get(list_users).before("get", log_before).after("get", log_after)
    app = users.register()  # an ASGI app, e.g. for uvicorn or TestClient
"""

from importlib import import_module

__version__ = "0.3.0"

from .core import (
    HttpMethod,
    HttpRouter,
    MiddlewareLevel,
    Resource,
    ResponseWriter,
    RouteOptions,
    RouterInterface,
)
from .exceptions import (
    DisallowedMethod,
    InvalidMiddlewareLevel,
    MissingRouteMethod,
    MissingRouteOptions,
    MissingRouteToken,
    ResponseAlreadySent,
    RestyError,
)

# Import plugins to trigger auto-registration
for _plugin in ("logging",):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "HttpMethod",
    "HttpRouter",
    "MiddlewareLevel",
    "Resource",
    "ResponseWriter",
    "RouteOptions",
    "RouterInterface",
    "RestyError",
    "DisallowedMethod",
    "InvalidMiddlewareLevel",
    "MissingRouteMethod",
    "MissingRouteOptions",
    "MissingRouteToken",
    "ResponseAlreadySent",
]
