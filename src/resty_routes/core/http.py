"""Response writer handed to handler chains by ``HttpRouter``.

Handlers receive the Starlette ``Request`` untouched and a
:class:`ResponseWriter`. The writer accepts one body, rendered into a real
Starlette response (``JSONResponse`` for dicts and lists, ``PlainTextResponse``
for text), and lets later handlers inspect the status or add headers.
"""

from __future__ import annotations

from typing import Any

from starlette.responses import JSONResponse, PlainTextResponse, Response

from resty_routes.exceptions import ResponseAlreadySent

__all__ = ["ResponseWriter"]


class ResponseWriter:
    """Collects the response produced by a chain."""

    __slots__ = ("status_code", "headers", "response", "path")

    def __init__(self, path: str | None = None) -> None:
        self.status_code = 200
        self.headers: dict[str, str] = {}
        self.response: Response | None = None
        self.path = path

    @property
    def finished(self) -> bool:
        return self.response is not None

    @property
    def status(self) -> int:
        return self.response.status_code if self.response is not None else self.status_code

    def set_status(self, status: int) -> ResponseWriter:
        self.status_code = status
        return self

    def set_header(self, name: str, value: str) -> ResponseWriter:
        self.headers[name] = value
        if self.response is not None:
            self.response.headers[name] = value
        return self

    def send(self, content: Any = None, status: int | None = None) -> Response:
        """Render ``content`` into the chain's response.

        A Starlette ``Response`` is used as is; dicts and lists become JSON,
        anything else plain text.

        Raises:
            ResponseAlreadySent: if a body was already written.
        """
        if self.finished:
            raise ResponseAlreadySent(self.path)
        if status is not None:
            self.status_code = status
        if isinstance(content, Response):
            self.response = content
            for name, value in self.headers.items():
                content.headers[name] = value
        elif isinstance(content, (dict, list)):
            self.response = JSONResponse(content, self.status_code, self.headers)
        else:
            self.response = PlainTextResponse(
                content if content is None or isinstance(content, (str, bytes)) else str(content),
                self.status_code,
                self.headers,
            )
        return self.response

    def json(self, payload: Any, status: int | None = None) -> Response:
        if self.finished:
            raise ResponseAlreadySent(self.path)
        if status is not None:
            self.status_code = status
        self.response = JSONResponse(payload, self.status_code, self.headers)
        return self.response

    def to_response(self) -> Response:
        """Return the written response, or an empty one if no handler wrote."""
        if self.response is not None:
            return self.response
        return Response(status_code=self.status_code, headers=self.headers)
