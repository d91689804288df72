# Copyright 2026 Firefly Software Solutions Inc.
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
"""Tests for SessionContainer, get_session() and clear_session()."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from sessioncookie.kernel.exceptions import ContextContractError
from sessioncookie.session.container import (
    CONTEXT_ATTRIBUTE,
    SessionContainer,
    clear_session,
    get_session,
)


class _FrozenClientContext:
    __slots__ = ()


class _SlottedContext:
    __slots__ = ("client_context",)

    def __init__(self, client_context: object) -> None:
        self.client_context = client_context


class TestSessionContainer:
    def test_starts_empty_and_unmodified(self) -> None:
        session = SessionContainer()
        assert len(session) == 0
        assert session.modified is False

    def test_mapping_behaviour(self) -> None:
        session = SessionContainer()
        session["foo"] = "bar"
        assert session["foo"] == "bar"
        assert session.get("missing") is None
        assert list(session) == ["foo"]
        del session["foo"]
        assert "foo" not in session

    def test_mutations_mark_modified(self) -> None:
        session = SessionContainer({"a": 1})
        assert session.modified is False
        session["b"] = 2
        assert session.modified is True

    def test_merge_keeps_identity_and_existing_entries(self) -> None:
        session = SessionContainer({"a": 1})
        same = session
        session.merge({"b": "x", "a": 2})
        assert session is same
        assert session.to_dict() == {"a": 2, "b": "x"}
        assert session.modified is False

    def test_clear_empties_in_place(self) -> None:
        session = SessionContainer({"a": 1})
        session.clear()
        assert len(session) == 0
        assert session.modified is True

    def test_equals_plain_dict(self) -> None:
        assert SessionContainer({"a": 1, "b": "x"}) == {"a": 1, "b": "x"}

    def test_to_dict_is_a_copy(self) -> None:
        session = SessionContainer({"a": 1})
        data = session.to_dict()
        data["a"] = 2
        assert session["a"] == 1


class TestGetSession:
    def test_creates_container_in_mapping_client_context(self) -> None:
        context = SimpleNamespace(client_context={})
        session = get_session(context)
        assert context.client_context[CONTEXT_ATTRIBUTE] is session

    def test_creates_container_in_object_client_context(self) -> None:
        context = SimpleNamespace(client_context=SimpleNamespace())
        session = get_session(context)
        assert getattr(context.client_context, CONTEXT_ATTRIBUTE) is session

    def test_none_client_context_is_initialized(self) -> None:
        context = SimpleNamespace(client_context=None)
        session = get_session(context)
        assert context.client_context == {CONTEXT_ATTRIBUTE: session}

    def test_returns_same_reference(self) -> None:
        context = SimpleNamespace(client_context={})
        assert get_session(context) is get_session(context)

    @pytest.mark.parametrize("context", [{}, "", [], 12, {"foo": 12}, SimpleNamespace(foo=12), None])
    def test_rejects_unsuitable_context(self, context: object) -> None:
        with pytest.raises(ContextContractError):
            get_session(context)

    def test_slotted_client_context_stores_session_on_context(self) -> None:
        context = SimpleNamespace(client_context=_FrozenClientContext())
        session = get_session(context)
        assert getattr(context, CONTEXT_ATTRIBUTE) is session
        assert get_session(context) is session

    def test_rejects_context_without_room_for_session(self) -> None:
        with pytest.raises(ContextContractError) as exc_info:
            get_session(_SlottedContext(_FrozenClientContext()))
        assert exc_info.value.code == "CONTEXT_READ_ONLY"

    def test_rejects_foreign_value_under_session_key(self) -> None:
        with pytest.raises(ContextContractError):
            get_session(SimpleNamespace(client_context={CONTEXT_ATTRIBUTE: {"a": 1}}))


class TestClearSession:
    def test_clear_keeps_identity(self) -> None:
        context = SimpleNamespace(client_context={})
        session = get_session(context)
        session["foo"] = "bar"
        session["lorem"] = "ipsum"

        clear_session(context)

        assert len(session) == 0
        assert get_session(context) is session

    def test_clear_on_fresh_context_creates_empty_session(self) -> None:
        context = SimpleNamespace(client_context={})
        clear_session(context)
        assert len(get_session(context)) == 0

    def test_clear_rejects_unsuitable_context(self) -> None:
        with pytest.raises(ContextContractError):
            clear_session({})
