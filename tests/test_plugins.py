# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Tests for plugins and the logging plugin."""

import logging

import pytest
from pydantic import ValidationError
from starlette.testclient import TestClient

# Import to trigger plugin registration
import resty_routes.plugins.logging  # noqa: F401
from resty_routes import Resource
from resty_routes.plugins._base_plugin import BasePlugin

ACCESS = "resty_routes.access"


class TracePlugin(BasePlugin):
    plugin_code = "trace"
    plugin_description = "Records handler levels on request.state"

    def wrap_handler(self, resource, entry, level, handler):
        def traced(request, response, next):
            if not hasattr(request.state, "trace"):
                request.state.trace = []
            request.state.trace.append(level)
            return handler(request, response, next)

        return traced


def list_users(request, response, next):
    response.json(["dave"])
    next()


def audit(request, response, next):
    next()


def count_users(request, response, next):
    response.send({"count": 1})


def access_lines(caplog):
    return [record.getMessage() for record in caplog.records if record.name == ACCESS]


def test_logging_plugin_wraps_every_handler(caplog):
    users = Resource("users").plug("logging")
    users.get(list_users).before("get", audit).after("get", audit)

    with caplog.at_level(logging.INFO, logger=ACCESS):
        response = TestClient(users.register()).get("/users")
    assert response.json() == ["dave"]
    lines = access_lines(caplog)
    assert len(lines) == 3
    assert lines[0].startswith("GET /users before -> pending (")
    assert lines[1].startswith("GET /users main -> 200 (")
    assert lines[2].startswith("GET /users after -> 200 (")
    assert all(record.levelno == logging.INFO for record in caplog.records if record.name == ACCESS)


def test_logging_plugin_stages_and_level(caplog):
    users = Resource("users").plug("logging", stages="main")
    users.get(list_users).after("get", audit)
    client = TestClient(users.register())

    with caplog.at_level(logging.INFO, logger=ACCESS):
        client.get("/users")
    lines = access_lines(caplog)
    assert len(lines) == 1
    assert " main -> 200 " in lines[0]

    users.logging.configure(level="DEBUG")  # type: ignore[attr-defined]
    caplog.clear()
    with caplog.at_level(logging.INFO, logger=ACCESS):
        client.get("/users")
    assert access_lines(caplog) == []

    with caplog.at_level(logging.DEBUG, logger=ACCESS):
        client.get("/users")
    assert len(access_lines(caplog)) == 1


def test_logging_plugin_custom_logger(caplog):
    custom = logging.getLogger("users_service.access")
    users = Resource("users").plug("logging", logger=custom)
    users.get(list_users)

    with caplog.at_level(logging.INFO, logger="users_service.access"):
        TestClient(users.register()).get("/users")
    assert [r.name for r in caplog.records if r.name.endswith(".access")] == [
        "users_service.access"
    ]


def test_logging_plugin_per_route_options(caplog):
    users = Resource("users").plug("logging")
    users.get(list_users)
    users.route("count", "get", {"handler": count_users, "logging_enabled": False})
    client = TestClient(users.register())

    with caplog.at_level(logging.INFO, logger=ACCESS):
        assert client.get("/users/count").json() == {"count": 1}
    assert access_lines(caplog) == []
    assert users.logging.configuration("GET /users/count")["enabled"] is False  # type: ignore[attr-defined]
    assert users.logging.is_enabled("GET /users") is True  # type: ignore[attr-defined]

    with caplog.at_level(logging.INFO, logger=ACCESS):
        client.get("/users")
    assert access_lines(caplog)


def test_route_options_before_plug_are_kept():
    users = Resource("users")
    users.route("count", "get", {"handler": count_users, "logging_stages": "after"})
    users.plug("logging")
    config = users.logging.configuration("GET /users/count")  # type: ignore[attr-defined]
    assert config["stages"] == "after"
    assert config["enabled"] is True
    assert users.table.get("/users/count", "get").metadata["plugin_config"] == {
        "logging": {"stages": "after"}
    }


def test_logging_configure_is_validated():
    users = Resource("users").plug("logging")
    with pytest.raises(ValidationError):
        users.logging.configure(level="LOUD")  # type: ignore[attr-defined]
    with pytest.raises(ValidationError):
        users.logging.configure(unknown=True)  # type: ignore[attr-defined]
    with pytest.raises(ValidationError):
        users.route("count", "get", {"handler": count_users, "logging_level": "LOUD"})
    assert "level" not in users.logging.configuration()  # type: ignore[attr-defined]
    assert "level" not in users.logging.configuration("GET /users/count")  # type: ignore[attr-defined]


def test_plug_errors():
    users = Resource("users")
    with pytest.raises(TypeError):
        users.plug(object())  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        users.plug("missing")
    users.plug("logging")
    with pytest.raises(ValueError):
        users.plug("logging")
    with pytest.raises(AttributeError):
        users.nothing_here  # noqa: B018


def test_custom_plugin_order_and_registry():
    Resource.register_plugin(TracePlugin, name="trace")
    assert "trace" in Resource.available_plugins()
    with pytest.raises(TypeError):
        Resource.register_plugin(object)  # type: ignore[arg-type]

    seen = {}

    def main(request, response, next):
        seen["trace"] = list(request.state.trace)
        response.send("ok")

    users = Resource("users").plug("trace").get(main).before("get", audit)
    assert TestClient(users.register()).get("/users").text == "ok"
    assert seen["trace"] == ["before", "main"]
    assert users.iter_plugins()[0].name == "trace"


def test_default_configure_gates_and_validates():
    Resource.register_plugin(TracePlugin, name="trace")
    seen = {}

    def main(request, response, next):
        seen["traced"] = hasattr(request.state, "trace")

    users = Resource("users").plug("trace", enabled=False).get(main)
    TestClient(users.register()).get("/users")
    assert seen == {"traced": False}

    with pytest.raises(ValidationError):
        Resource("users").plug("trace", colour="red")
