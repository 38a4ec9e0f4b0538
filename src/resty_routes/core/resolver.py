"""Path resolution for resource declarations.

Pure functions turning a declaration's raw inputs into a
:class:`ResolvedRoute`: the ``(path, method)`` routing key, the middleware to
store and the level it is stored at. Nothing here touches a route table.

Paths
-----
``ResourcePaths`` carries the two base templates of a resource:

- ``collection``: ``/`` + name (``/users``)
- ``entity``: singular base (or the collection path) + ``/:id`` (``/users/:id``)

Resolution rules
----------------
Collection verbs (get, post) map to the collection path; entity verbs
(patch, put, delete) and the detail form of get map to the entity path.

``route(token, method, options)`` builds ``collection/token``, or
``entity/token`` when the options bag carries ``detail``.

``before/after(token, options)`` first test ``token`` against the allowed
methods. A method token selects that verb on the collection path (entity path
for entity verbs); any other token is a path suffix under the collection
path, with method get. A bag may then override the method, and a truthy
``detail`` moves the path to the entity path, re-appending a suffix token.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, NamedTuple

from resty_routes.exceptions import (
    DisallowedMethod,
    MissingRouteMethod,
    MissingRouteOptions,
    MissingRouteToken,
)

from .methods import (
    HttpMethod,
    MiddlewareLevel,
    is_allowed_method,
    is_entity_method,
    passthrough,
)
from .options import RouteOptions, coerce_options

__all__ = [
    "ResourcePaths",
    "ResolvedRoute",
    "resolve_verb",
    "resolve_route",
    "resolve_interceptor",
]


class ResourcePaths(NamedTuple):
    """Base path templates of one resource."""

    collection: str
    entity: str

    @classmethod
    def for_resource(
        cls,
        name: str,
        *,
        inflector: Callable[[str], str] | None = None,
        id_param: str = "id",
    ) -> ResourcePaths:
        collection = "/" + name
        base = "/" + inflector(name) if inflector is not None else collection
        return cls(collection, f"{base}/:{id_param}")

    def sub(self, token: str, *, detail: bool = False) -> str:
        """Return ``token`` appended to the entity or collection path."""
        base = self.entity if detail else self.collection
        return f"{base}/{token}" if token else base


class ResolvedRoute(NamedTuple):
    """Outcome of resolving one declaration."""

    path: str
    method: str
    handler: Callable[..., Any]
    level: str
    extras: Mapping[str, Any] = MappingProxyType({})


def resolve_verb(
    paths: ResourcePaths,
    method: str,
    handler: Callable[..., Any],
    *,
    detail: bool = False,
) -> ResolvedRoute:
    """Resolve a collection or entity verb declaration (``get``, ``put``...)."""
    path = paths.entity if detail or is_entity_method(method) else paths.collection
    return ResolvedRoute(path, str(method), handler, MiddlewareLevel.MAIN.value)


def resolve_route(
    paths: ResourcePaths,
    token: str,
    method: str,
    options: Any,
    *,
    resource: str | None = None,
) -> ResolvedRoute:
    """Resolve a named sub-route declaration.

    Raises:
        MissingRouteToken: ``token`` is empty.
        MissingRouteMethod: ``method`` is empty.
        DisallowedMethod: ``method`` is not an allowed verb.
        MissingRouteOptions: ``options`` is None or empty.
    """
    if not token:
        raise MissingRouteToken(resource, method)
    if not method:
        raise MissingRouteMethod(resource, method, token)
    if not is_allowed_method(method):
        raise DisallowedMethod(resource, method, token)
    if not options:
        raise MissingRouteOptions(resource, method, token)

    bag = coerce_options(options)
    if bag is None:
        return ResolvedRoute(paths.sub(token), str(method), options, MiddlewareLevel.MAIN.value)
    return ResolvedRoute(
        paths.sub(token, detail=bag.detail),
        str(method),
        bag.handler or passthrough,
        MiddlewareLevel.MAIN.value,
        MappingProxyType(bag.extras),
    )


def resolve_interceptor(
    paths: ResourcePaths,
    token: str | None,
    options: Any,
    level: str,
    *,
    resource: str | None = None,
) -> ResolvedRoute:
    """Resolve a ``before``/``after`` declaration.

    Method-named tokens win over suffix interpretation: ``before("put", h)``
    targets ``PUT /users/:id`` even if a sub-route literally named ``put``
    exists.
    """
    token_is_method = is_allowed_method(token)
    if options is None:
        raise MissingRouteOptions(
            resource, token if token_is_method else HttpMethod.GET.value, token
        )

    if token_is_method:
        method = str(token)
        path = paths.entity if is_entity_method(token) else paths.collection
    else:
        method = HttpMethod.GET.value
        path = paths.sub(token or "")

    bag: RouteOptions | None = coerce_options(options)
    if bag is None:
        return ResolvedRoute(path, method, options, str(level))

    if bag.method:
        method = str(bag.method)
    if bag.detail:
        path = paths.entity if token_is_method else paths.sub(token or "", detail=True)
    return ResolvedRoute(
        path, method, bag.handler or passthrough, str(level), MappingProxyType(bag.extras)
    )
