# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Route table for one resource.

A flat mapping from :class:`RouteKey` ``(path, method)`` to
:class:`RouteEntry`. Dict insertion order is the first-seen order of keys and
is the order routes are bound on the host router.

Merge rules (``upsert``)
------------------------
- A missing key creates an entry whose ``main`` is the pass-through handler
  and whose ``before``/``after`` lists are empty.
- ``main``: last writer wins.
- ``before``/``after``: append-only, never reordered.

``finalize_chain(entry)`` returns a fresh list ``before + [main] + after``.
``snapshot()`` returns plain dicts, disconnected from the live entries.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from resty_routes.exceptions import DisallowedMethod, InvalidMiddlewareLevel

from .methods import MiddlewareLevel, is_allowed_method, is_valid_level, passthrough

__all__ = ["RouteKey", "RouteEntry", "RouteTable", "finalize_chain"]

logger = logging.getLogger("resty_routes.table")


class RouteKey(NamedTuple):
    path: str
    method: str

    @property
    def label(self) -> str:
        """Human readable key, e.g. ``GET /users/:id``."""
        return f"{self.method.upper()} {self.path}"


@dataclass
class RouteEntry:
    """Handlers stored for one routing key.

    Attributes:
        key: The ``(path, method)`` pair.
        main: Primary responder (pass-through until a main is declared).
        before: Handlers run before ``main``, in declaration order.
        after: Handlers run after ``main``, in declaration order.
        metadata: Per-route annotations (plugin configuration).
    """

    key: RouteKey
    main: Callable[..., Any] = passthrough
    before: list[Callable[..., Any]] = field(default_factory=list)
    after: list[Callable[..., Any]] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return self.key.path

    @property
    def method(self) -> str:
        return self.key.method

    @property
    def has_main(self) -> bool:
        return self.main is not passthrough


def finalize_chain(entry: RouteEntry) -> list[Callable[..., Any]]:
    """Return the ordered chain ``before + [main] + after`` as a new list."""
    return [*entry.before, entry.main, *entry.after]


def _handler_name(handler: Callable[..., Any]) -> str:
    return getattr(handler, "__qualname__", None) or getattr(handler, "__name__", repr(handler))


class RouteTable:
    """Build-time route storage of a resource."""

    __slots__ = ("owner", "_entries")

    def __init__(self, owner: str | None = None) -> None:
        self.owner = owner
        self._entries: dict[RouteKey, RouteEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(list(self._entries.values()))

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, path: str, method: str) -> RouteEntry | None:
        return self._entries.get(RouteKey(path, str(method)))

    def upsert(
        self,
        path: str,
        method: str,
        handler: Callable[..., Any],
        level: str = MiddlewareLevel.MAIN.value,
    ) -> RouteEntry:
        """Create or merge the entry for ``(path, method)``.

        Raises:
            DisallowedMethod: ``method`` is not one of the allowed verbs.
            InvalidMiddlewareLevel: ``level`` is not main/before/after.
        """
        if not is_allowed_method(method):
            raise DisallowedMethod(self.owner, method, path)
        method = str(method)
        if not is_valid_level(level):
            raise InvalidMiddlewareLevel(self.owner, method, path, level)
        level = str(level)

        key = RouteKey(path, method)
        entry = self._entries.get(key)
        if entry is None:
            entry = RouteEntry(key)
            self._entries[key] = entry

        if level == MiddlewareLevel.MAIN.value:
            entry.main = handler
        else:
            getattr(entry, level).append(handler)
        logger.debug("%s: %s %s <- %s", self.owner, key.label, level, _handler_name(handler))
        return entry

    def chains(self) -> Iterator[tuple[RouteEntry, list[Callable[..., Any]]]]:
        """Yield ``(entry, chain)`` pairs in first-seen order."""
        for entry in self:
            yield entry, finalize_chain(entry)

    def snapshot(self) -> list[dict[str, Any]]:
        """Return a detached description of every entry."""
        return [
            {
                "path": entry.path,
                "method": entry.method,
                "main": _handler_name(entry.main),
                "before": [_handler_name(h) for h in entry.before],
                "after": [_handler_name(h) for h in entry.after],
                "counts": {
                    "before": len(entry.before),
                    "main": 1,
                    "after": len(entry.after),
                },
                "default_main": not entry.has_main,
            }
            for entry in self._entries.values()
        ]
