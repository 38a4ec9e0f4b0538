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


"""Declaration errors carry resource, method and path information."""

import pytest

from resty_routes import (
    DisallowedMethod,
    InvalidMiddlewareLevel,
    MissingRouteMethod,
    MissingRouteOptions,
    MissingRouteToken,
    Resource,
    RestyError,
)


def handler(request, response, next):
    next()


@pytest.mark.parametrize(
    "call, error",
    [
        (lambda r: r.route("", "get", handler), MissingRouteToken),
        (lambda r: r.route("x", "trace", handler), DisallowedMethod),
        (lambda r: r.route("x", None, handler), MissingRouteMethod),
        (lambda r: r.route("x", "get", None), MissingRouteOptions),
        (lambda r: r.before("get", None), MissingRouteOptions),
        (lambda r: r.after("x", {"method": "connect"}), DisallowedMethod),
    ],
)
def test_declaration_errors_are_resty_errors(call, error):
    users = Resource("users")
    with pytest.raises(error) as excinfo:
        call(users)
    assert isinstance(excinfo.value, RestyError)
    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.resource == "users"
    assert "users" in str(excinfo.value)
    assert str(excinfo.value).startswith("Resty: ")


def test_missing_method_is_a_disallowed_method():
    assert issubclass(MissingRouteMethod, DisallowedMethod)


def test_disallowed_method_names_method_and_path():
    users = Resource("users")
    with pytest.raises(DisallowedMethod) as excinfo:
        users.after("audit", {"method": "options", "handler": handler})
    err = excinfo.value
    assert err.method == "options"
    assert err.path == "/users/audit"
    assert "OPTIONS" in str(err)
    assert "/users/audit" in str(err)


def test_invalid_level_guard():
    users = Resource("users")
    with pytest.raises(InvalidMiddlewareLevel) as excinfo:
        users.table.upsert("/users", "get", handler, "main-ish")
    assert "/users" in str(excinfo.value)
    assert excinfo.value.method == "get"


def test_missing_token_and_options_name_the_method():
    users = Resource("users")
    with pytest.raises(MissingRouteToken) as excinfo:
        users.route("", "post", handler)
    assert excinfo.value.method == "post"
    assert "'POST'" in str(excinfo.value)

    with pytest.raises(MissingRouteOptions) as excinfo:
        users.route("count", "delete", None)
    assert excinfo.value.method == "delete"
    assert excinfo.value.path == "count"
    assert "'DELETE'" in str(excinfo.value)
    assert "'count'" in str(excinfo.value)

    with pytest.raises(MissingRouteOptions) as excinfo:
        users.before("put", None)
    assert excinfo.value.method == "put"
    assert "'PUT'" in str(excinfo.value)
