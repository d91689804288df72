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
"""sessioncookie — Cryptographically signed session cookies for serverless handlers.

Session data lives in a cookie signed with HMAC-SHA256. It is signed, not
encrypted: the client can read it but cannot alter it.

    from sessioncookie import clear_session, get_session, with_session

    @with_session
    async def handler(event, context):
        session = get_session(context)
        ...
"""

from sessioncookie.core.config import Config
from sessioncookie.kernel.exceptions import (
    ConfigurationError,
    ContextContractError,
    HandlerContractError,
    SessionCookieException,
)
from sessioncookie.security.keys import generate_secret_key
from sessioncookie.session.container import SessionContainer, clear_session, get_session
from sessioncookie.session.wrapper import SessionWrapper, with_session, wrap

__version__ = "1.0.0"

__all__ = [
    "Config",
    "ConfigurationError",
    "ContextContractError",
    "HandlerContractError",
    "SessionContainer",
    "SessionCookieException",
    "SessionWrapper",
    "clear_session",
    "generate_secret_key",
    "get_session",
    "with_session",
    "wrap",
]
