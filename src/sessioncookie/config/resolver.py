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
"""Cookie name and attribute resolution.

Environment variables available (see :func:`sessioncookie.core.config.env_key_for`):

- ``SESSION_COOKIE_NAME``: cookie name, RFC 6265 token. Defaults to ``session``.
- ``SESSION_COOKIE_HTTPONLY``: set to ``"0"`` to drop the ``HttpOnly`` attribute.
- ``SESSION_COOKIE_SECURE``: set to ``"0"`` to drop the ``Secure`` attribute.
- ``SESSION_COOKIE_SAMESITE``: ``Strict``, ``Lax`` (default) or ``None``.
- ``SESSION_COOKIE_MAX_AGE_SPAN``: lifetime in seconds. Defaults to 7 days.
- ``SESSION_COOKIE_DOMAIN``: value of the ``Domain`` attribute, unset by default.
- ``SESSION_COOKIE_PATH``: value of the ``Path`` attribute. Defaults to ``/``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

import structlog

from sessioncookie.core.config import Config, env_key_for
from sessioncookie.kernel.exceptions import ConfigurationError

logger = structlog.get_logger("sessioncookie.config.resolver")

SameSite = Literal["Strict", "Lax", "None"]

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_COOKIE_NAME: str = "session"
DEFAULT_MAX_AGE: int = 60 * 60 * 24 * 7
DEFAULT_PATH: str = "/"
DEFAULT_SAME_SITE: SameSite = "Lax"

NAME_KEY = "session.cookie.name"
HTTP_ONLY_KEY = "session.cookie.httponly"
SECURE_KEY = "session.cookie.secure"
SAME_SITE_KEY = "session.cookie.samesite"
MAX_AGE_KEY = "session.cookie.max-age-span"
DOMAIN_KEY = "session.cookie.domain"
PATH_KEY = "session.cookie.path"

_TOKEN_RE = re.compile(r"[A-Za-z0-9!#$%&'*+\-.^_`|~]+")
_ATTRIBUTE_VALUE_RE = re.compile(r"[\x20-\x3a\x3c-\x7e]+")
_DOMAIN_RE = re.compile(r"[\x21-\x3a\x3c-\x7e]+")
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")
_SAME_SITE_VALUES: dict[str, SameSite] = {"strict": "Strict", "lax": "Lax", "none": "None"}
_DISABLED = "0"


@dataclass(frozen=True)
class CookieAttributes:
    """Attributes rendered on the session ``Set-Cookie`` line."""

    name: str = DEFAULT_COOKIE_NAME
    http_only: bool = True
    secure: bool = True
    same_site: SameSite = DEFAULT_SAME_SITE
    max_age: int = DEFAULT_MAX_AGE
    domain: str | None = None
    path: str = DEFAULT_PATH


class ConfigResolver:
    """Derives the session cookie name and attributes from a :class:`Config`."""

    def __init__(self, config: Config) -> None:
        self._config = config

    def resolve_cookie_name(self) -> str:
        """Return the session cookie name.

        Raises:
            ConfigurationError: If an override is empty or not an RFC 6265 token.
        """
        name = self._config.get(NAME_KEY)
        if name is None:
            return DEFAULT_COOKIE_NAME

        name = str(name)
        env_name = env_key_for(NAME_KEY)
        if not name:
            raise ConfigurationError(f'"{env_name}" cannot be an empty string.', code="CONFIG_NAME_EMPTY")
        if not _TOKEN_RE.fullmatch(name):
            raise ConfigurationError(
                f'"{env_name}" must only contain ASCII characters and no whitespace.',
                code="CONFIG_NAME_INVALID",
                context={"name": name},
            )
        return name

    def resolve_cookie_attributes(self) -> CookieAttributes:
        """Return the full attribute set, falling back to defaults where unset."""
        attributes = CookieAttributes(
            name=self.resolve_cookie_name(),
            http_only=not self._is_disabled(HTTP_ONLY_KEY),
            secure=not self._is_disabled(SECURE_KEY),
            same_site=self._same_site(),
            max_age=self._max_age(),
            domain=self._domain(),
            path=self._path(),
        )
        if attributes.same_site == "None" and not attributes.secure:
            logger.warning("same_site_none_without_secure", cookie=attributes.name)
        return attributes

    def _is_disabled(self, key: str) -> bool:
        value = self._config.get(key)
        return value is not None and str(value) == _DISABLED

    def _same_site(self) -> SameSite:
        value = self._config.get(SAME_SITE_KEY)
        if value is None:
            return DEFAULT_SAME_SITE
        return _SAME_SITE_VALUES.get(str(value).lower(), DEFAULT_SAME_SITE)

    def _max_age(self) -> int:
        value = self._config.get(MAX_AGE_KEY)
        if value is None or isinstance(value, bool):
            return DEFAULT_MAX_AGE
        # Leading integer only: "12abc" is 12, "3.5" is 3.
        match = _LEADING_INT_RE.match(str(value))
        if match is None:
            return DEFAULT_MAX_AGE
        max_age = int(match.group(1))
        if max_age < 0:
            logger.warning("negative_max_age_ignored", max_age=max_age)
            return DEFAULT_MAX_AGE
        return max_age

    def _domain(self) -> str | None:
        value = self._config.get(DOMAIN_KEY)
        if not value:
            return None
        domain = str(value)
        if not _DOMAIN_RE.fullmatch(domain):
            raise ConfigurationError(
                f'"{env_key_for(DOMAIN_KEY)}" is not a valid cookie domain.',
                code="CONFIG_DOMAIN_INVALID",
                context={"domain": domain},
            )
        return domain

    def _path(self) -> str:
        value = self._config.get(PATH_KEY)
        if not value:
            return DEFAULT_PATH
        path = str(value)
        if not _ATTRIBUTE_VALUE_RE.fullmatch(path):
            raise ConfigurationError(
                f'"{env_key_for(PATH_KEY)}" is not a valid cookie path.',
                code="CONFIG_PATH_INVALID",
                context={"path": path},
            )
        return path
