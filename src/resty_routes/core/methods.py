"""HTTP methods, middleware levels and the pass-through handler.

The allowed verbs are a closed set. ``ENTITY_METHODS`` are the verbs that
address one member of a resource and therefore live on the entity path
(``/users/:id``) when used as interceptor selectors.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

__all__ = [
    "HttpMethod",
    "MiddlewareLevel",
    "ALLOWED_METHODS",
    "ENTITY_METHODS",
    "MIDDLEWARE_LEVELS",
    "passthrough",
    "is_allowed_method",
    "is_entity_method",
    "is_valid_level",
]


class HttpMethod(str, Enum):
    GET = "get"
    POST = "post"
    PATCH = "patch"
    PUT = "put"
    DELETE = "delete"

    def __str__(self) -> str:
        return self.value


class MiddlewareLevel(str, Enum):
    MAIN = "main"
    BEFORE = "before"
    AFTER = "after"

    def __str__(self) -> str:
        return self.value


ALLOWED_METHODS: tuple[str, ...] = tuple(m.value for m in HttpMethod)
ENTITY_METHODS: frozenset[str] = frozenset(
    {HttpMethod.PATCH.value, HttpMethod.PUT.value, HttpMethod.DELETE.value}
)
MIDDLEWARE_LEVELS: tuple[str, ...] = tuple(level.value for level in MiddlewareLevel)


def passthrough(request: Any, response: Any, next: Any) -> Any:  # noqa: A002
    """Forward control to the next handler without touching the response."""
    return next()


def is_allowed_method(token: Any) -> bool:
    return isinstance(token, str) and str(token) in ALLOWED_METHODS


def is_entity_method(token: Any) -> bool:
    return isinstance(token, str) and str(token) in ENTITY_METHODS


def is_valid_level(level: Any) -> bool:
    return isinstance(level, str) and str(level) in MIDDLEWARE_LEVELS
