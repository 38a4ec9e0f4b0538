"""Declarative REST resource for Resty Routes.

``Resource`` collects the endpoints of one named collection and hands the
resulting route table to a host router.

Constructor signature::

    Resource(name, *, inflector=None, id_param="id", description=None)

- ``name``: resource name; the collection path is ``/`` + name.
- ``inflector``: optional callable returning the singular form of ``name``.
  When given, entity paths use it as base (``/user/:id``).
- ``id_param``: name of the entity placeholder segment (default ``id``).

Declaration API
---------------
Every declaration returns ``self`` so calls can be chained:

- ``get/post(handler)``: collection routes (``/users``)
- ``patch/put/delete/get_details(handler)``: entity routes (``/users/:id``)
- ``route(token, method, handler_or_options)``: sub-route main handler
- ``before/after(token_or_method, handler_or_options)``: interceptors

Registration
------------
``register(router=None)`` walks the table in first-seen order and binds
``before + [main] + after`` for each key through ``router.<method>(path,
chain)``. Without a router a fresh :class:`HttpRouter` is created once and
reused. ``register()`` only reads the table: calling it again rebuilds the
same chains.

Plugins
-------
``Resource.register_plugin(cls)`` adds a plugin class to the global registry,
``plug(name, **config)`` attaches an instance. Attached plugins wrap every
chain handler at ``register()`` time (last attached closest to the handler).
Option-bag keys shaped ``<plugin>_<key>`` configure a plugin for the
resolved route only.

Example::

    from resty_routes import Resource

    users = Resource("users")
    users.get(list_users).before("get", check_token).after("get", audit)
    users.get_details(show_user)
    client = TestClient(users.register())
    client.get("/users/42")
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from genro_toolbox import dictExtract

from resty_routes.plugins._base_plugin import BasePlugin

from .http_router import HttpRouter
from .methods import HttpMethod, MiddlewareLevel
from .resolver import (
    ResolvedRoute,
    ResourcePaths,
    resolve_interceptor,
    resolve_route,
    resolve_verb,
)
from .router_interface import RouterInterface
from .table import RouteEntry, RouteTable, finalize_chain

__all__ = ["Resource"]

logger = logging.getLogger("resty_routes.resource")

_PLUGIN_REGISTRY: dict[str, type[BasePlugin]] = {}


class Resource:
    """Builder for the routes of one named resource."""

    __slots__ = (
        "name",
        "description",
        "paths",
        "table",
        "_router",
        "_plugins",
        "_plugins_by_name",
        "_plugin_info",
    )

    def __init__(
        self,
        name: str,
        *,
        inflector: Callable[[str], str] | None = None,
        id_param: str = "id",
        description: str | None = None,
    ) -> None:
        if not name or not isinstance(name, str):
            raise ValueError("Resource requires a non-empty name")
        self.name = name.strip("/")
        self.description = description
        self.paths = ResourcePaths.for_resource(self.name, inflector=inflector, id_param=id_param)
        self.table = RouteTable(self.name)
        self._router: RouterInterface | None = None
        self._plugins: list[BasePlugin] = []
        self._plugins_by_name: dict[str, BasePlugin] = {}
        self._plugin_info: dict[str, dict[str, Any]] = {}

    def __repr__(self) -> str:
        return f"<Resource {self.name!r} routes={len(self.table)}>"

    @property
    def collection_path(self) -> str:
        return self.paths.collection

    @property
    def entity_path(self) -> str:
        return self.paths.entity

    # ------------------------------------------------------------------
    # Collection and entity verbs
    # ------------------------------------------------------------------
    def get(self, handler: Callable) -> Resource:
        """Set the main handler of ``GET /<name>``."""
        return self._declare(resolve_verb(self.paths, HttpMethod.GET.value, handler))

    def post(self, handler: Callable) -> Resource:
        """Set the main handler of ``POST /<name>``."""
        return self._declare(resolve_verb(self.paths, HttpMethod.POST.value, handler))

    def patch(self, handler: Callable) -> Resource:
        """Set the main handler of ``PATCH /<name>/:id``."""
        return self._declare(resolve_verb(self.paths, HttpMethod.PATCH.value, handler))

    def put(self, handler: Callable) -> Resource:
        """Set the main handler of ``PUT /<name>/:id``."""
        return self._declare(resolve_verb(self.paths, HttpMethod.PUT.value, handler))

    def delete(self, handler: Callable) -> Resource:
        """Set the main handler of ``DELETE /<name>/:id``."""
        return self._declare(resolve_verb(self.paths, HttpMethod.DELETE.value, handler))

    def get_details(self, handler: Callable) -> Resource:
        """Set the main handler of ``GET /<name>/:id``."""
        return self._declare(resolve_verb(self.paths, HttpMethod.GET.value, handler, detail=True))

    # ------------------------------------------------------------------
    # Sub-routes and interceptors
    # ------------------------------------------------------------------
    def route(self, token: str, method: str, options: Any) -> Resource:
        """Set the main handler of a sub-route.

        Args:
            token: Path segment appended to the collection path (``count``).
            method: One of get/post/patch/put/delete.
            options: A handler, or a bag ``{"handler": h, "detail": True}``
                placing the sub-route below the entity path.

        Raises:
            MissingRouteToken, MissingRouteMethod, DisallowedMethod,
            MissingRouteOptions.
        """
        return self._declare(resolve_route(self.paths, token, method, options, resource=self.name))

    def before(self, token: str, options: Any) -> Resource:
        """Append a handler running before the main handler of a route.

        ``token`` is either a method name (``"get"``, ``"put"``) selecting that
        verb's route, or a sub-route suffix (method get unless overridden).
        ``options`` is a handler or a bag with ``handler``, ``method`` and
        ``detail`` keys.
        """
        return self._declare(
            resolve_interceptor(
                self.paths, token, options, MiddlewareLevel.BEFORE.value, resource=self.name
            )
        )

    def after(self, token: str, options: Any) -> Resource:
        """Append a handler running after the main handler of a route.

        Same resolution as :meth:`before`.
        """
        return self._declare(
            resolve_interceptor(
                self.paths, token, options, MiddlewareLevel.AFTER.value, resource=self.name
            )
        )

    def _declare(self, resolved: ResolvedRoute) -> Resource:
        entry = self.table.upsert(resolved.path, resolved.method, resolved.handler, resolved.level)
        if resolved.extras:
            self._apply_route_config(entry, resolved.extras)
        return self

    def _apply_route_config(self, entry: RouteEntry, extras: Mapping[str, Any]) -> None:
        """Store ``<plugin>_<key>`` option keys as per-route plugin configuration."""
        label = entry.key.label
        for code in _PLUGIN_REGISTRY:
            cfg = dictExtract(dict(extras), f"{code}_", slice_prefix=True, pop=False)
            if not cfg:
                continue
            entry.metadata.setdefault("plugin_config", {}).setdefault(code, {}).update(cfg)
            plugin = self._plugins_by_name.get(code)
            if plugin is not None:
                plugin.configure(_route=label, **cfg)
            else:
                self._plugin_info.setdefault(code, {}).setdefault(label, {}).update(cfg)

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: type[BasePlugin], name: str | None = None) -> None:
        """Register a plugin class globally.

        Args:
            plugin_class: A BasePlugin subclass with plugin_code defined.
            name: Optional override name. If provided, overwrites any existing
                  registration.

        Raises:
            TypeError: If plugin_class is not a BasePlugin subclass.
            ValueError: If plugin_code is missing or name collision occurs.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(
                f"Plugin {plugin_class.__name__} not following standards: missing plugin_code"
            )
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> dict[str, type[BasePlugin]]:
        """Return a copy of the global plugin registry."""
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> Resource:
        """Attach a registered plugin by name.

        Raises:
            TypeError: If plugin is not a string.
            ValueError: If plugin is not registered or already attached.
        """
        if not isinstance(plugin, str):
            raise TypeError(
                f"Plugin must be referenced by name string, got {type(plugin).__name__}"
            )
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        if plugin in self._plugins_by_name:
            raise ValueError(
                f"Plugin '{plugin}' is already attached to resource '{self.name}'. "
                "Use configure() to update settings."
            )
        instance = plugin_class(self, **config)
        self._plugins.append(instance)
        self._plugins_by_name[plugin] = instance
        return self

    def iter_plugins(self) -> list[BasePlugin]:
        """Return attached plugin instances in attach order."""
        return list(self._plugins)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not slots or methods
        plugins = object.__getattribute__(self, "_plugins_by_name")
        plugin = plugins.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' attached to resource '{self.name}'")
        return plugin

    # ------------------------------------------------------------------
    # Chains, registration, introspection
    # ------------------------------------------------------------------
    def _wrap_handler(self, entry: RouteEntry, level: str, handler: Callable) -> Callable:
        wrapped = handler
        for plugin in reversed(self._plugins):
            if plugin.is_enabled(entry.key.label):
                wrapped = plugin.wrap_handler(self, entry, level, wrapped)
        return wrapped

    def build_chain(self, entry: RouteEntry) -> list[Callable]:
        """Return the chain of ``entry`` with attached plugins applied."""
        chain = finalize_chain(entry)
        if not self._plugins:
            return chain
        levels = (
            [MiddlewareLevel.BEFORE.value] * len(entry.before)
            + [MiddlewareLevel.MAIN.value]
            + [MiddlewareLevel.AFTER.value] * len(entry.after)
        )
        return [self._wrap_handler(entry, level, h) for level, h in zip(levels, chain)]

    def chain(self, path: str, method: str) -> list[Callable] | None:
        """Return the raw ordered chain for ``(path, method)``, or None if undeclared."""
        entry = self.table.get(path, method)
        return None if entry is None else finalize_chain(entry)

    def register(self, router: RouterInterface | None = None) -> RouterInterface:
        """Bind every route chain on ``router`` and return it.

        Args:
            router: Host router exposing one binding method per verb. Defaults
                to this resource's own :class:`HttpRouter`.
        """
        if router is None:
            if self._router is None:
                self._router = HttpRouter(name=self.name)
            router = self._router
        count = 0
        for entry in self.table:
            getattr(router, entry.method)(entry.path, self.build_chain(entry))
            count += 1
        logger.info("Resource %r: registered %d routes", self.name, count)
        return router

    def debug(self) -> list[dict[str, Any]]:
        """Return a detached snapshot of the route table."""
        return self.table.snapshot()
