# Copyright 2025 Softwell S.r.l. - All Rights Reserved
# SPDX-License-Identifier: Apache-2.0
"""Exceptions for Resty Routes.

Declaration errors are raised synchronously while a resource is being
described, never while requests are served. They all derive from
``RestyError`` (a ``ValueError``) and carry the resource name plus the
offending method and path/token so the failing setup step is easy to spot.
"""

from __future__ import annotations

__all__ = [
    "RestyError",
    "DisallowedMethod",
    "InvalidMiddlewareLevel",
    "MissingRouteToken",
    "MissingRouteMethod",
    "MissingRouteOptions",
    "ResponseAlreadySent",
]


def _for_method(method: object) -> str:
    return f" (method {str(method).upper()!r})" if method else ""


class RestyError(ValueError):
    """Base class for route declaration errors.

    Attributes:
        resource: Name of the resource being declared.
        method: HTTP method involved (may be None).
        path: Resolved path or raw token involved (may be None).
    """

    def __init__(
        self,
        message: str,
        *,
        resource: str | None = None,
        method: str | None = None,
        path: str | None = None,
    ) -> None:
        self.resource = resource
        self.method = method
        self.path = path
        super().__init__(f"Resty: {message}")


class DisallowedMethod(RestyError):
    """Raised when a method token is outside get/post/patch/put/delete."""

    def __init__(self, resource: str | None, method: object, path: str | None = None) -> None:
        shown = str(method).upper() if method else repr(method)
        where = f" ({path})" if path else ""
        super().__init__(
            f"{resource}, the method {shown!r} is not allowed{where}.",
            resource=resource,
            method=None if method is None else str(method),
            path=path,
        )


class MissingRouteMethod(DisallowedMethod):
    """Raised when ``route()`` is called without a method."""

    def __init__(self, resource: str | None, method: object = None, path: str | None = None) -> None:
        RestyError.__init__(
            self,
            f"{resource} no method defined for {path!r}.",
            resource=resource,
            method=None,
            path=path,
        )


class InvalidMiddlewareLevel(RestyError):
    """Raised when a handler is stored at a level other than main/before/after."""

    def __init__(self, resource: str | None, method: str, path: str, level: object) -> None:
        self.level = level
        super().__init__(
            f"{method.upper()}: {path} of {resource}, invalid middleware level {level!r}.",
            resource=resource,
            method=method,
            path=path,
        )


class MissingRouteToken(RestyError):
    """Raised when ``route()`` is called with an empty path token."""

    def __init__(self, resource: str | None, method: object = None) -> None:
        super().__init__(
            f"{resource} no path token defined{_for_method(method)}.",
            resource=resource,
            method=None if method is None else str(method),
        )


class MissingRouteOptions(RestyError):
    """Raised when a declaration receives no handler or options bag."""

    def __init__(self, resource: str | None, method: object = None, token: str | None = None) -> None:
        super().__init__(
            f"{resource} no options defined for {token!r}{_for_method(method)}.",
            resource=resource,
            method=None if method is None else str(method),
            path=token,
        )


class ResponseAlreadySent(RuntimeError):
    """Raised when a handler writes a body on an already finished response."""

    def __init__(self, path: str | None = None) -> None:
        self.path = path
        super().__init__(f"Response for '{path}' was already sent")
