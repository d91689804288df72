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
"""Unified exception hierarchy for sessioncookie.

All library exceptions inherit from SessionCookieException, so callers can
catch one type to handle every failure raised by the wrapper.

Categories:
- ConfigurationError: Deployment-time misconfiguration (secret, cookie name)
- ContractError: Caller supplied a handler or context of the wrong shape
- CookieValidationException: Incoming cookie could not be trusted (internal)
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class SessionCookieException(Exception):
    """Base exception for all sessioncookie errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CONFIG_SECRET_MISSING").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(SessionCookieException):
    """Signing secret or cookie settings are missing or invalid.

    Always raised before the wrapped handler runs.
    """


# =============================================================================
# Contract Exceptions
# =============================================================================


class ContractError(SessionCookieException):
    """A caller-supplied object does not have the expected structure."""


class HandlerContractError(ContractError):
    """The wrapped handler is not an async callable, or returned a non-mapping."""


class ContextContractError(ContractError):
    """The request context does not expose a usable ``client_context``."""


# =============================================================================
# Cookie Validation Exceptions
# =============================================================================


class CookieValidationException(SessionCookieException):
    """An incoming session cookie was rejected.

    Never surfaced to callers: the wrapper degrades to an empty session.
    """


class SignatureMismatch(CookieValidationException):
    """The cookie signature does not match any key of the keyring."""


class DecodeFailure(CookieValidationException):
    """The cookie value is truncated, not base64, not UTF-8 or not a JSON object."""
