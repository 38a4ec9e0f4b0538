"""Options bag accepted by ``route()``, ``before()`` and ``after()``.

A declaration receives either a plain handler or a bag of options. The bag is
normalized into :class:`RouteOptions`:

- ``handler``: the middleware to store (None means the pass-through handler)
- ``method``: HTTP method override (validated later against the allowed set)
- ``detail``: scope the route to one entity (``/users/:id``)

Any other key is kept as an extra. Keys shaped ``<plugin>_<key>`` are
per-route plugin configuration (e.g. ``logging_enabled=False``).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

__all__ = ["RouteOptions", "coerce_options"]


class RouteOptions(BaseModel):
    """Normalized declaration options."""

    model_config = ConfigDict(extra="allow", frozen=True, arbitrary_types_allowed=True)

    handler: Callable[..., Any] | None = None
    method: str | None = None
    detail: bool = False

    @property
    def extras(self) -> dict[str, Any]:
        """Extra keys not part of the options schema (plugin configuration)."""
        return dict(self.model_extra or {})


def coerce_options(options: Any) -> RouteOptions | None:
    """Return ``options`` as a :class:`RouteOptions`, or None for a plain handler.

    Raises:
        pydantic.ValidationError: if a mapping carries ill-typed values.
        TypeError: if ``options`` is neither a handler, a mapping nor RouteOptions.
    """
    if isinstance(options, RouteOptions):
        return options
    if isinstance(options, Mapping):
        return RouteOptions.model_validate(dict(options))
    if callable(options):
        return None
    raise TypeError(
        f"Route options must be a handler, a mapping or RouteOptions, got {type(options).__name__}"
    )
