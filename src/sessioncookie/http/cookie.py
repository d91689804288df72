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
"""Cookie header codec and signed session value layout.

A session cookie value is ``<signature><payload>``: the first
:data:`SIGNATURE_LENGTH` characters are the signature, the rest is the
base64-encoded UTF-8 JSON document of the session.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, unquote

import structlog

from sessioncookie.config.resolver import CookieAttributes
from sessioncookie.kernel.exceptions import CookieValidationException, DecodeFailure, SignatureMismatch
from sessioncookie.security.signature import SIGNATURE_LENGTH, Keyring

logger = structlog.get_logger("sessioncookie.http.cookie")

# Characters left as-is by JavaScript's encodeURIComponent.
_VALUE_SAFE_CHARS = "-_.!~*'()"


# ---------------------------------------------------------------------------
# Header lines
# ---------------------------------------------------------------------------
def encode(name: str, value: str, attributes: CookieAttributes) -> str:
    """Render a ``Set-Cookie`` header value.

    Attribute order: value, Max-Age, Path, Domain, HttpOnly, Secure, SameSite.
    """
    parts = [
        f"{name}={quote(value, safe=_VALUE_SAFE_CHARS)}",
        f"Max-Age={attributes.max_age}",
        f"Path={attributes.path}",
    ]
    if attributes.domain:
        parts.append(f"Domain={attributes.domain}")
    if attributes.http_only:
        parts.append("HttpOnly")
    if attributes.secure:
        parts.append("Secure")
    parts.append(f"SameSite={attributes.same_site}")
    return "; ".join(parts)


def decode(raw_header: str) -> dict[str, str]:
    """Parse a ``Cookie`` request header into a name -> value dict.

    The first occurrence of a name wins. Pairs without ``=`` are skipped.
    """
    cookies: dict[str, str] = {}
    for chunk in raw_header.split(";"):
        if "=" not in chunk:
            continue
        name, value = chunk.split("=", 1)
        name = name.strip()
        if not name or name in cookies:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        cookies[name] = _percent_decode(value)
    return cookies


def _percent_decode(value: str) -> str:
    if "%" not in value:
        return value
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return value


# ---------------------------------------------------------------------------
# Signed session values
# ---------------------------------------------------------------------------
def encode_session_value(session: Mapping[str, Any], keyring: Keyring) -> str:
    """Serialize *session* to JSON, sign it with the primary key and concatenate."""
    payload = json.dumps(dict(session), separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return keyring.sign(payload) + base64.b64encode(payload).decode("ascii")


def decode_session_value(value: str, keyring: Keyring) -> dict[str, Any] | None:
    """Verify and parse a session cookie value.

    Returns:
        The session data, or ``None`` if the value cannot be trusted.
    """
    try:
        return _load_session_value(value, keyring)
    except CookieValidationException as exc:
        logger.debug("session_cookie_rejected", reason=type(exc).__name__, code=exc.code)
        return None


def _load_session_value(value: str, keyring: Keyring) -> dict[str, Any]:
    if len(value) <= SIGNATURE_LENGTH:
        raise DecodeFailure("Session cookie value is too short.", code="COOKIE_TRUNCATED")

    signature, encoded = value[:SIGNATURE_LENGTH], value[SIGNATURE_LENGTH:]
    try:
        payload = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeFailure("Session cookie payload is not base64.", code="COOKIE_BASE64") from exc

    position = keyring.index(payload, signature)
    if position < 0:
        raise SignatureMismatch("Session cookie signature does not match.", code="COOKIE_SIGNATURE")
    if position > 0:
        logger.debug("session_cookie_signed_with_previous_key", position=position)

    try:
        data = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeFailure("Session cookie payload is not JSON.", code="COOKIE_JSON") from exc

    if not isinstance(data, dict):
        raise DecodeFailure("Session cookie payload is not a JSON object.", code="COOKIE_NOT_OBJECT")
    return data
