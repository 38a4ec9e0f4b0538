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


"""Tests for RouteTable merge rules and chain assembly."""

import pytest

from resty_routes.core.methods import passthrough
from resty_routes.core.table import RouteKey, RouteTable, finalize_chain
from resty_routes.exceptions import DisallowedMethod, InvalidMiddlewareLevel


def make_handler(name):
    def handler(request, response, next):
        next()

    handler.__name__ = handler.__qualname__ = name
    return handler


def test_upsert_creates_entry_with_passthrough_main():
    table = RouteTable("users")
    before = make_handler("before")
    entry = table.upsert("/users", "get", before, "before")
    assert entry.key == RouteKey("/users", "get")
    assert entry.main is passthrough
    assert entry.before == [before]
    assert entry.after == []
    assert not entry.has_main


def test_main_is_last_writer_wins():
    table = RouteTable("users")
    first, second = make_handler("first"), make_handler("second")
    audit = make_handler("audit")
    table.upsert("/users", "get", audit, "after")
    table.upsert("/users", "get", first)
    table.upsert("/users", "get", second)
    assert len(table) == 1
    entry = table.get("/users", "get")
    assert entry.main is second
    assert entry.after == [audit]
    assert entry.before == []


def test_chain_order_and_freshness():
    table = RouteTable("users")
    befores = [make_handler(f"b{i}") for i in range(3)]
    afters = [make_handler(f"a{i}") for i in range(2)]
    main = make_handler("main")
    table.upsert("/users", "get", afters[0], "after")
    for h in befores[:2]:
        table.upsert("/users", "get", h, "before")
    table.upsert("/users", "get", main)
    table.upsert("/users", "get", befores[2], "before")
    table.upsert("/users", "get", afters[1], "after")

    entry = table.get("/users", "get")
    chain = finalize_chain(entry)
    assert chain == [*befores, main, *afters]
    assert chain.index(main) == len(befores)

    chain.clear()
    assert finalize_chain(entry) == [*befores, main, *afters]


def test_same_path_different_methods_are_distinct():
    table = RouteTable("users")
    table.upsert("/users", "get", make_handler("list"))
    table.upsert("/users", "post", make_handler("create"))
    table.upsert("/users/:id", "get", make_handler("show"))
    assert [entry.key for entry in table] == [
        RouteKey("/users", "get"),
        RouteKey("/users", "post"),
        RouteKey("/users/:id", "get"),
    ]
    assert RouteKey("/users", "post") in table


def test_first_seen_order_is_kept_on_merge():
    table = RouteTable("users")
    table.upsert("/users/:id", "put", make_handler("update"))
    table.upsert("/users", "get", make_handler("list"))
    table.upsert("/users/:id", "put", make_handler("guard"), "before")
    assert [entry.path for entry in table] == ["/users/:id", "/users"]


def test_upsert_rejects_bad_method_and_level():
    table = RouteTable("users")
    with pytest.raises(DisallowedMethod) as excinfo:
        table.upsert("/users", "options", make_handler("x"))
    assert excinfo.value.resource == "users"
    assert excinfo.value.path == "/users"
    with pytest.raises(InvalidMiddlewareLevel) as excinfo:
        table.upsert("/users", "get", make_handler("x"), "around")
    assert excinfo.value.level == "around"
    assert len(table) == 0


def test_snapshot_is_detached():
    table = RouteTable("users")
    table.upsert("/users", "get", make_handler("list"))
    table.upsert("/users", "get", make_handler("check"), "before")
    snapshot = table.snapshot()
    assert snapshot == [
        {
            "path": "/users",
            "method": "get",
            "main": "list",
            "before": ["check"],
            "after": [],
            "counts": {"before": 1, "main": 1, "after": 0},
            "default_main": False,
        }
    ]
    snapshot[0]["before"].append("intruder")
    snapshot[0]["counts"]["before"] = 99
    assert len(table.get("/users", "get").before) == 1
    assert table.snapshot()[0]["counts"]["before"] == 1


def test_route_key_label():
    assert RouteKey("/users/:id", "delete").label == "DELETE /users/:id"
