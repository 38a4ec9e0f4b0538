"""Plugin contract for Resty Routes.

A plugin decorates the handler chains a resource hands to its host router.
Subclasses set ``plugin_code`` (registry key, also the prefix of per-route
option keys such as ``logging_enabled``) and may override:

- ``configure(**config)``: its signature is the plugin's configuration
  schema; calls are validated with pydantic and stored on the resource
- ``wrap_handler(resource, entry, level, handler)``: wrap one chain handler

Settings live in ``resource._plugin_info[plugin_code]``, one dict for the
whole resource (``"_all_"``) and one per route label (``"GET /users/:id"``).

Example::

    class CountingPlugin(BasePlugin):
        plugin_code = "counting"

        def wrap_handler(self, resource, entry, level, handler):
            def counted(request, response, next):
                request.state.calls = getattr(request.state, "calls", 0) + 1
                return handler(request, response, next)
            return counted

    Resource.register_plugin(CountingPlugin)
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any

from pydantic import validate_call

if TYPE_CHECKING:  # pragma: no cover
    from resty_routes.core.table import RouteEntry

__all__ = ["BasePlugin"]

RESOURCE_WIDE = "_all_"


def _validated_configure(configure: Callable) -> Callable:
    """Validate ``configure`` kwargs with pydantic, then store them for ``_route``."""
    validated = validate_call(configure)

    @wraps(configure)
    def wrapper(self: BasePlugin, *, _route: str = RESOURCE_WIDE, **kwargs: Any) -> None:
        validated(self, **kwargs)
        if kwargs:
            self._settings(_route).update(kwargs)

    return wrapper


class BasePlugin:
    """Base class for resource plugins."""

    __slots__ = ("name", "_resource")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _validated_configure(cls.__dict__["configure"])  # type: ignore[method-assign]

    def __init__(self, resource: Any, **config: Any):
        self.name = self.plugin_code
        self._resource = resource
        self._settings(RESOURCE_WIDE).setdefault("enabled", True)
        self.configure(**config)

    def _settings(self, route: str) -> dict[str, Any]:
        store = self._resource._plugin_info.setdefault(self.name, {})
        return store.setdefault(route, {})  # type: ignore[no-any-return]

    def configuration(self, route: str | None = None) -> dict[str, Any]:
        """Resource-wide settings overlaid with those of ``route``, if given."""
        store = self._resource._plugin_info.get(self.name, {})
        merged = dict(store.get(RESOURCE_WIDE, {}))
        if route:
            merged.update(store.get(route, {}))
        return merged

    def is_enabled(self, route: str | None = None) -> bool:
        return bool(self.configuration(route).get("enabled", True))

    def configure(self, enabled: bool = True) -> None:
        """Override with the plugin's own keyword parameters."""

    def wrap_handler(
        self,
        resource: Any,
        entry: RouteEntry,
        level: str,
        handler: Callable,
    ) -> Callable:
        """Return ``handler`` or a ``(request, response, next)`` callable wrapping it.

        Called once per chain handler by ``Resource.register()``; ``level`` is
        "before", "main" or "after".
        """
        return handler


BasePlugin.configure = _validated_configure(BasePlugin.configure)  # type: ignore[method-assign]
