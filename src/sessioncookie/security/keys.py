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
"""Signing secret resolution and generation.

The primary secret signs outgoing cookies. Previous secrets, when configured,
are only accepted for verification so a rotated deployment keeps honoring
cookies issued under the old key.
"""

from __future__ import annotations

import base64
import secrets

from sessioncookie.core.config import Config, env_key_for
from sessioncookie.kernel.exceptions import ConfigurationError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SECRET_KEY: str = "session.cookie.secret"
"""Config key holding the primary signing secret."""

PREVIOUS_SECRETS_KEY: str = "session.cookie.previous-secrets"
"""Config key holding retired secrets, still valid for verification."""

MIN_SECRET_LENGTH: int = 32
"""Minimum secret length, in UTF-8 bytes."""


def generate_secret_key() -> str:
    """Generate a random 32-byte secret suitable for HMAC-SHA256 signing.

    Returns:
        The secret, base64-encoded (44 characters).
    """
    return base64.b64encode(secrets.token_bytes(32)).decode("ascii")


class SecretKeyProvider:
    """Resolves and validates signing secrets from a :class:`Config`."""

    def __init__(self, config: Config) -> None:
        self._config = config

    def resolve_key(self) -> bytes:
        """Return the primary signing secret as bytes.

        Raises:
            ConfigurationError: If the secret is missing or shorter than 32 bytes.
        """
        return self._validate(self._config.get(SECRET_KEY), SECRET_KEY)

    def resolve_keyring(self) -> tuple[bytes, ...]:
        """Return the primary secret followed by every previous secret."""
        keys = [self.resolve_key()]
        for secret in self._previous_secrets():
            keys.append(self._validate(secret, PREVIOUS_SECRETS_KEY))
        return tuple(keys)

    def _previous_secrets(self) -> list[str]:
        raw = self._config.get(PREVIOUS_SECRETS_KEY)
        if raw is None:
            return []
        if isinstance(raw, str):
            return [part.strip() for part in raw.split(",") if part.strip()]
        if isinstance(raw, (list, tuple)):
            return [str(part) for part in raw]
        raise ConfigurationError(
            f'"{env_key_for(PREVIOUS_SECRETS_KEY)}" must be a list or a comma-separated string.',
            code="CONFIG_SECRET_INVALID",
        )

    @staticmethod
    def _validate(secret: object, key: str) -> bytes:
        env_name = env_key_for(key)
        if not secret or not isinstance(secret, str):
            raise ConfigurationError(
                f'"{env_name}": No secret key provided.',
                code="CONFIG_SECRET_MISSING",
            )

        encoded = secret.encode("utf-8")
        if len(encoded) < MIN_SECRET_LENGTH:
            raise ConfigurationError(
                f'"{env_name}": The secret key must be at least {MIN_SECRET_LENGTH} bytes long '
                f"({len(encoded)} given).",
                code="CONFIG_SECRET_TOO_SHORT",
                context={"length": len(encoded)},
            )
        return encoded
