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
"""SessionWrapper — loads and re-signs the session cookie around a handler.

Usage::

    from sessioncookie import get_session, with_session

    @with_session
    async def handler(event, context):
        session = get_session(context)
        session["visits"] = session.get("visits", 0) + 1
        return {"statusCode": 200, "body": "ok"}

Each invocation runs one pass: resolve configuration, verify the incoming
cookie into the session container, await the handler, then append a freshly
signed ``Set-Cookie`` entry after any cookie the handler set itself. If the
handler raises or is cancelled, no cookie is emitted.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Awaitable, Callable, Mapping, MutableMapping
from typing import Any

import structlog

from sessioncookie.config.resolver import ConfigResolver
from sessioncookie.core.config import Config
from sessioncookie.http.cookie import decode, decode_session_value, encode, encode_session_value
from sessioncookie.kernel.exceptions import HandlerContractError
from sessioncookie.security.keys import SecretKeyProvider
from sessioncookie.security.signature import Keyring
from sessioncookie.session.container import SessionContainer, get_session

logger = structlog.get_logger("sessioncookie.session.wrapper")

Handler = Callable[[Any, Any], Awaitable[Any]]

_SET_COOKIE = "Set-Cookie"


def _is_async_callable(obj: Any) -> bool:
    while isinstance(obj, functools.partial):
        obj = obj.func
    return inspect.iscoroutinefunction(obj) or (
        callable(obj) and inspect.iscoroutinefunction(getattr(obj, "__call__", None))
    )


def _find_header(headers: Mapping[str, Any], name: str) -> str | None:
    """Return the key of *headers* matching *name* case-insensitively."""
    lowered = name.lower()
    for key in headers:
        if isinstance(key, str) and key.lower() == lowered:
            return key
    return None


class SessionWrapper:
    """Async callable running a handler inside the signed-session lifecycle.

    Args:
        handler: Async callable invoked as ``await handler(event, context)``.
        config: Configuration source. Defaults to environment variables only.

    Raises:
        HandlerContractError: If *handler* is not an async callable.
    """

    def __init__(self, handler: Handler, config: Config | None = None) -> None:
        if not _is_async_callable(handler):
            raise HandlerContractError(
                f'"handler" must be an async function. {type(handler).__name__} given.',
                code="HANDLER_NOT_ASYNC",
            )
        self._handler = handler
        self._config = config if config is not None else Config()

    @property
    def handler(self) -> Handler:
        return self._handler

    async def __call__(self, event: Any, context: Any) -> Any:
        resolver = ConfigResolver(self._config)
        attributes = resolver.resolve_cookie_attributes()
        keyring = Keyring(SecretKeyProvider(self._config).resolve_keyring())

        session = get_session(context)
        self._load_incoming(event, attributes.name, keyring, session)

        response = await self._handler(event, context)

        if not isinstance(response, MutableMapping):
            raise HandlerContractError(
                f"Handler must return a mutable mapping response. {type(response).__name__} given.",
                code="HANDLER_BAD_RESPONSE",
            )

        set_cookies = self._set_cookie_collection(response)
        set_cookies.append(encode(attributes.name, encode_session_value(session, keyring), attributes))
        logger.debug(
            "session_cookie_issued",
            cookie=attributes.name,
            entries=len(session),
            modified=session.modified,
        )
        return response

    @staticmethod
    def _load_incoming(event: Any, cookie_name: str, keyring: Keyring, session: SessionContainer) -> None:
        """Merge the verified incoming session into *session*, if any."""
        raw = _cookie_header(event)
        if raw is None:
            return

        value = decode(raw).get(cookie_name)
        if not value:
            return

        data = decode_session_value(value, keyring)
        if data is not None:
            session.merge(data)
            logger.debug("session_cookie_loaded", cookie=cookie_name, entries=len(data))

    @staticmethod
    def _set_cookie_collection(response: MutableMapping[str, Any]) -> list[Any]:
        """Return the multi-valued ``Set-Cookie`` list, folding in a single-valued entry."""
        multi = response.get("multiValueHeaders")
        if multi is None:
            multi = response["multiValueHeaders"] = {}
        if not isinstance(multi, MutableMapping):
            raise HandlerContractError(
                '"multiValueHeaders" must be a mutable mapping.',
                code="HANDLER_BAD_RESPONSE",
            )

        key = _find_header(multi, _SET_COOKIE) or _SET_COOKIE
        collection = multi.get(key)
        if collection is None:
            collection = multi[key] = []
        elif isinstance(collection, str):
            collection = multi[key] = [collection]
        elif not isinstance(collection, list):
            collection = multi[key] = list(collection)

        headers = response.get("headers")
        if isinstance(headers, MutableMapping):
            single = _find_header(headers, _SET_COOKIE)
            if single is not None:
                collection.append(headers.pop(single))
        return collection


def _cookie_header(event: Any) -> str | None:
    """Return the first ``Cookie`` header value of a Lambda-style event."""
    if not isinstance(event, Mapping):
        return None

    for field in ("multiValueHeaders", "headers"):
        headers = event.get(field)
        if not isinstance(headers, Mapping):
            continue
        key = _find_header(headers, "Cookie")
        if key is None:
            continue
        value = headers[key]
        if isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)) and value:
            return str(value[0])
    return None


def with_session(handler: Handler, config: Config | None = None) -> Handler:
    """Wrap *handler* so it runs with a signed cookie session.

    Validation of *handler* happens here, at wrap time. Configuration is
    resolved on every call.

    Returns:
        An async function with the same ``(event, context)`` signature.
    """
    session_wrapper = SessionWrapper(handler, config)

    @functools.wraps(handler)
    async def wrapper(event: Any, context: Any) -> Any:
        return await session_wrapper(event, context)

    return wrapper


wrap = with_session
