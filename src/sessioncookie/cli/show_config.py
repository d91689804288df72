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
"""'sessioncookie show-config' — Resolve and display the cookie configuration."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from sessioncookie.cli.console import console
from sessioncookie.config.resolver import ConfigResolver
from sessioncookie.core.config import Config
from sessioncookie.http.cookie import encode
from sessioncookie.kernel.exceptions import ConfigurationError
from sessioncookie.logging.structlog_adapter import StructlogAdapter
from sessioncookie.security.keys import SecretKeyProvider


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML or TOML file. Environment variables still take precedence.",
)
@click.option("--profile", "profiles", multiple=True, help="Profile overlay to merge (repeatable).")
def show_config_command(config_path: Path | None, profiles: tuple[str, ...]) -> None:
    """Validate the session cookie configuration and print the resolved attributes."""
    config = Config.from_file(config_path, active_profiles=list(profiles)) if config_path else Config()
    adapter = StructlogAdapter()
    adapter.configure(config)
    log = adapter.get_logger("sessioncookie.cli")

    try:
        attributes = ConfigResolver(config).resolve_cookie_attributes()
        keyring = SecretKeyProvider(config).resolve_keyring()
    except ConfigurationError as exc:
        log.debug("config_invalid", code=exc.code)
        console.print(f"[error]Configuration error:[/error] {exc}")
        raise SystemExit(1) from exc

    log.debug("config_resolved", cookie=attributes.name, key_count=len(keyring))

    table = Table(title="Session Cookie", show_header=False, border_style="dim")
    table.add_column("Key", style="info")
    table.add_column("Value")
    table.add_row("Name", attributes.name)
    table.add_row("HttpOnly", str(attributes.http_only))
    table.add_row("Secure", str(attributes.secure))
    table.add_row("SameSite", attributes.same_site)
    table.add_row("Max-Age", str(attributes.max_age))
    table.add_row("Domain", attributes.domain or "-")
    table.add_row("Path", attributes.path)
    table.add_row("Keys", f"{len(keyring)} (1 signing, {len(keyring) - 1} verify-only)")
    console.print(table)

    for source in config.loaded_sources:
        console.print(f"[dim]loaded {source}[/dim]")
    console.print(encode(attributes.name, "...", attributes), markup=False, soft_wrap=True)
