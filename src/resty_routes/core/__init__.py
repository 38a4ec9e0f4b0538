"""Core runtime aggregator for Resty Routes.

Exposes the runtime building blocks from a single module:
``Resource``, ``RouteTable``, ``HttpRouter`` and the path resolver.

Public API:
    - ``Resource``: Declarative builder for one REST resource
    - ``RouteTable``: (path, method) keyed storage with merge rules
    - ``RouterInterface``: Host router contract
    - ``HttpRouter``: Default Starlette host router
    - ``ResponseWriter``: Response collector passed to handler chains

Importing this module performs only imports; it does not register plugins.
"""

from .http import ResponseWriter
from .http_router import HttpRouter
from .methods import ALLOWED_METHODS, ENTITY_METHODS, HttpMethod, MiddlewareLevel, passthrough
from .options import RouteOptions
from .resolver import ResolvedRoute, ResourcePaths
from .resource import Resource
from .router_interface import RouterInterface
from .table import RouteEntry, RouteKey, RouteTable, finalize_chain

__all__ = [
    "ALLOWED_METHODS",
    "ENTITY_METHODS",
    "HttpMethod",
    "HttpRouter",
    "MiddlewareLevel",
    "ResolvedRoute",
    "Resource",
    "ResourcePaths",
    "ResponseWriter",
    "RouteEntry",
    "RouteKey",
    "RouteOptions",
    "RouteTable",
    "RouterInterface",
    "finalize_chain",
    "passthrough",
]
