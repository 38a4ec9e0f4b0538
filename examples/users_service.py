"""Users resource served by Starlette.

Declares collection, entity and sub-routes with interceptors, mounts the
resource below ``/api`` and replays a few requests with ``TestClient``.

Run::

    python examples/users_service.py

or serve it::

    uvicorn examples.users_service:app
"""

import logging

from starlette.testclient import TestClient

from resty_routes import HttpRouter, Resource

logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")
log = logging.getLogger("users_service")

USERS = [{"id": 1, "name": "Dave"}, {"id": 2, "name": "John"}]


def list_users(request, response, next):
    response.json(USERS)
    next()


def show_user(request, response, next):
    response.json({"message": f"Get specific user = {request.path_params['id']}"})
    next()


def count_users(request, response, next):
    response.json({"count": len(USERS)})
    next()


def count_for_user(request, response, next):
    response.json({"message": f"User count route with the id: {request.path_params['id']}"})
    next()


async def create_user(request, response, next):
    USERS.append({"id": len(USERS) + 1, **(await request.json())})
    response.json(USERS[-1], status=201)
    next()


def trace(label):
    def handler(request, response, next):
        log.info(label)
        next()

    return handler


users = Resource("users").plug("logging", stages="main,after")
users.get(list_users).before("get", trace("before list")).after("get", trace("after list"))
users.route("count", "get", count_users)
users.before("count", {"handler": trace("before count")}).after("count", {"handler": trace("after count")})
users.route("count", "get", {"detail": True, "handler": count_for_user})
users.get_details(show_user)
users.before("get", {"detail": True, "handler": trace("before details")})
users.post(create_user).before("post", trace("before create"))

app = HttpRouter("app").use("/api", users.register())


if __name__ == "__main__":
    for entry in users.debug():
        log.info("%s %s %s", entry["method"].upper(), entry["path"], entry["counts"])
    client = TestClient(app)
    for method, path, body in (
        ("get", "/api/users", None),
        ("get", "/api/users/count", None),
        ("get", "/api/users/2", None),
        ("get", "/api/users/2/count", None),
        ("post", "/api/users", {"name": "Ada"}),
        ("delete", "/api/users/2", None),
    ):
        response = client.request(method.upper(), path, json=body)
        log.info("%s %s -> %s %s", method.upper(), path, response.status_code, response.text)
