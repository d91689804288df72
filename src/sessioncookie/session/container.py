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
"""SessionContainer — request-scoped session data handle."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

from sessioncookie.kernel.exceptions import ContextContractError

CONTEXT_ATTRIBUTE = "session_cookie_data"
"""Name under which the container is stored on ``context.client_context``."""


class SessionContainer(MutableMapping[str, Any]):
    """Mutable mapping of session data, mutated in place for its whole lifetime.

    Attributes:
        modified: ``True`` once any entry was set, removed or cleared.
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data) if data is not None else {}
        self._modified = False

    @property
    def modified(self) -> bool:
        return self._modified

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._modified = True

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._modified = True

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def merge(self, data: Mapping[str, Any]) -> None:
        """Assign every entry of *data* key by key, keeping this instance."""
        for key, value in data.items():
            self._data[key] = value

    def clear(self) -> None:
        """Remove all entries in place."""
        self._data.clear()
        self._modified = True

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the session data."""
        return dict(self._data)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._data!r}>"


def get_session(context: Any) -> SessionContainer:
    """Return the session container of *context*, creating it on first access.

    *context* must expose a ``client_context`` attribute holding either a
    mutable mapping or an object accepting new attributes. A ``None``
    ``client_context`` is replaced by an empty dict. When ``client_context``
    rejects new attributes, the container is kept on *context* itself.

    Raises:
        ContextContractError: If *context* does not have that structure.
    """
    if not hasattr(context, "client_context"):
        raise ContextContractError(
            "get_session() requires a request context exposing `client_context`.",
            code="CONTEXT_INVALID",
            context={"type": type(context).__name__},
        )

    client_context = context.client_context
    if client_context is None:
        # Lambda runtimes leave client_context unset outside mobile SDK calls
        client_context = {}
        try:
            context.client_context = client_context
        except (AttributeError, TypeError) as exc:
            raise ContextContractError(
                "Request context does not accept a `client_context`.",
                code="CONTEXT_READ_ONLY",
                context={"type": type(context).__name__},
            ) from exc

    if isinstance(client_context, MutableMapping):
        session = client_context.get(CONTEXT_ATTRIBUTE)
        if session is None:
            session = client_context[CONTEXT_ATTRIBUTE] = SessionContainer()
    else:
        session = getattr(client_context, CONTEXT_ATTRIBUTE, None)
        if session is None:
            session = _attach(client_context, context)

    if not isinstance(session, SessionContainer):
        raise ContextContractError(
            f"`client_context.{CONTEXT_ATTRIBUTE}` holds a {type(session).__name__}, not a session.",
            code="CONTEXT_CONFLICT",
        )
    return session


def _attach(client_context: Any, context: Any) -> Any:
    """Store a new container on *client_context*, or on *context* when the former is slotted."""
    existing = getattr(context, CONTEXT_ATTRIBUTE, None)
    if existing is not None:
        return existing

    session = SessionContainer()
    for owner in (client_context, context):
        try:
            setattr(owner, CONTEXT_ATTRIBUTE, session)
        except (AttributeError, TypeError):
            continue
        return session
    raise ContextContractError(
        "Neither the request context nor its `client_context` accepts session data.",
        code="CONTEXT_READ_ONLY",
        context={"type": type(client_context).__name__},
    )


def clear_session(context: Any) -> None:
    """Empty the session container of *context* without replacing it."""
    get_session(context).clear()
