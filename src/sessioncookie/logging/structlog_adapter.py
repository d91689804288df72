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
"""StructlogAdapter — structlog setup for sessioncookie.

Reads ``session.logging.level.*`` (``root`` plus per-logger levels) and
``session.logging.format`` (``console`` or ``json``). Without an explicit
format, JSON is chosen when running inside a serverless runtime, since the
platform collects stdout line by line. Secret material is masked before
rendering.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

from sessioncookie.core.config import Config

LEVEL_PREFIX = "session.logging.level"
FORMAT_KEY = "session.logging.format"
LIBRARY_LOGGER = "sessioncookie"

SERVERLESS_ENV_MARKERS: tuple[str, ...] = ("AWS_LAMBDA_FUNCTION_NAME", "NETLIFY")
REDACTED_FIELDS: frozenset[str] = frozenset({"secret", "secrets", "previous_secrets", "key", "keys"})
_FORMATS = ("console", "json")


def redact_secrets(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """structlog processor masking fields that may carry signing keys."""
    for field in REDACTED_FIELDS.intersection(event_dict):
        event_dict[field] = "***"
    return event_dict


def default_format() -> str:
    if any(os.environ.get(marker) for marker in SERVERLESS_ENV_MARKERS):
        return "json"
    return "console"


class StructlogAdapter:
    """Configures structlog and stdlib levels for the library loggers."""

    def __init__(self) -> None:
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        levels = dict(config.get_section(LEVEL_PREFIX))
        levels.pop("root", None)
        self._root_level = str(config.get(f"{LEVEL_PREFIX}.root", "INFO")).upper()
        self._module_levels = {name: str(level).upper() for name, level in levels.items()}

        fmt = str(config.get(FORMAT_KEY) or default_format()).lower()
        self._format = fmt if fmt in _FORMATS else "console"

        structlog.configure(
            processors=self._processors(),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=getattr(logging, self._root_level, logging.INFO),
            force=True,
        )
        for name, level in self._module_levels.items():
            self.set_level(name, level)

        if fmt not in _FORMATS:
            self.get_logger(f"{LIBRARY_LOGGER}.logging").warning("unknown_log_format", format=fmt)

    def get_logger(self, name: str = LIBRARY_LOGGER) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set the stdlib level of *name*; unknown level names fall back to INFO."""
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    def _processors(self) -> list[structlog.types.Processor]:
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]
        if self._format == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer())
        return processors
