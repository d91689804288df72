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
"""HMAC-SHA256 signing over an ordered keyring, built on :mod:`itsdangerous`.

Signatures are URL-safe base64 without padding, so a 32-byte digest always
renders as exactly :data:`SIGNATURE_LENGTH` characters. Keys are used as-is
(no derivation), which keeps signatures compatible with plain HMAC-SHA256
signers in other runtimes.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Sequence

from itsdangerous import BadData, Signer
from itsdangerous.encoding import base64_decode, base64_encode

from sessioncookie.kernel.exceptions import ConfigurationError

SIGNATURE_LENGTH: int = 43
"""Length of an encoded signature, in characters."""


def _signer(keys: bytes | Sequence[bytes]) -> Signer:
    # itsdangerous signs with the last key of the list.
    return Signer(keys, digest_method=hashlib.sha256, key_derivation="none")


def _is_canonical(signature: str) -> bool:
    """Reject signatures that only decode to a valid digest by dropping bits."""
    if len(signature) != SIGNATURE_LENGTH:
        return False
    try:
        return base64_encode(base64_decode(signature)) == signature.encode("ascii")
    except (BadData, UnicodeEncodeError):
        return False


def sign(payload: bytes, key: bytes) -> str:
    """Return the encoded HMAC-SHA256 of *payload* under *key*."""
    return _signer(key).get_signature(payload).decode("ascii")


def verify(payload: bytes, signature: str, keyring: Iterable[bytes]) -> bool:
    """Return ``True`` if *signature* matches *payload* under any key of *keyring*."""
    keys = list(keyring)
    if not keys or not _is_canonical(signature):
        return False
    return _signer(keys).verify_signature(payload, signature)


class Keyring:
    """Ordered set of signing keys.

    The first key is the primary key and is the only one used by
    :meth:`sign`. Any key is accepted by :meth:`verify`.
    """

    def __init__(self, keys: Sequence[bytes]) -> None:
        if not keys:
            raise ConfigurationError("A keyring requires at least one key.", code="CONFIG_KEYRING_EMPTY")
        self._keys: tuple[bytes, ...] = tuple(keys)
        self._signer = _signer(list(reversed(self._keys)))
        self._signers = tuple(_signer(key) for key in self._keys)

    @property
    def primary(self) -> bytes:
        return self._keys[0]

    def __len__(self) -> int:
        return len(self._keys)

    def sign(self, payload: bytes) -> str:
        """Sign *payload* with the primary key."""
        return self._signer.get_signature(payload).decode("ascii")

    def verify(self, payload: bytes, signature: str) -> bool:
        """Verify *payload* against every key of the keyring."""
        return _is_canonical(signature) and self._signer.verify_signature(payload, signature)

    def index(self, payload: bytes, signature: str) -> int:
        """Return the position of the key that produced *signature*, or ``-1``."""
        if not _is_canonical(signature):
            return -1
        # Every key is checked so timing does not depend on which key matched.
        found = -1
        for position, signer in enumerate(self._signers):
            if signer.verify_signature(payload, signature) and found < 0:
                found = position
        return found

    def __repr__(self) -> str:
        return f"<Keyring keys={len(self._keys)}>"
