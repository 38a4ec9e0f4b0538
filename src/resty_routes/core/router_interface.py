# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""RouterInterface - Abstract base for host routers.

Defines the minimal contract a host HTTP router must honour to receive a
resource's route table. This allows adapters for other web stacks to accept
``Resource.register(router)`` without depending on ``HttpRouter``.

Required methods:
    - bind(method, path, handlers) -> register an ordered handler chain

Provided helpers:
    - get/post/patch/put/delete(path, handlers) -> shortcuts to ``bind``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

__all__ = ["RouterInterface"]


class RouterInterface(ABC):
    """Minimal interface for host routers.

    Attributes:
        name: Router name for identification and debugging.
    """

    name: str | None

    @abstractmethod
    def bind(self, method: str, path: str, handlers: Sequence[Callable[..., Any]]) -> Any:
        """Register ``handlers`` for ``method`` requests matching ``path``.

        Args:
            method: Lowercase HTTP method (``get``, ``post``...).
            path: Path template with ``:name`` placeholder segments.
            handlers: Ordered chain; each handler receives
                ``(request, response, next)`` and continues by calling ``next()``.
        """
        ...

    def get(self, path: str, handlers: Sequence[Callable[..., Any]]) -> Any:
        return self.bind("get", path, handlers)

    def post(self, path: str, handlers: Sequence[Callable[..., Any]]) -> Any:
        return self.bind("post", path, handlers)

    def patch(self, path: str, handlers: Sequence[Callable[..., Any]]) -> Any:
        return self.bind("patch", path, handlers)

    def put(self, path: str, handlers: Sequence[Callable[..., Any]]) -> Any:
        return self.bind("put", path, handlers)

    def delete(self, path: str, handlers: Sequence[Callable[..., Any]]) -> Any:
        return self.bind("delete", path, handlers)
