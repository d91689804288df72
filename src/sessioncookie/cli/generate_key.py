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
"""'sessioncookie generate-key' — Print fresh signing secrets."""

from __future__ import annotations

import click

from sessioncookie.security.keys import generate_secret_key


@click.command()
@click.option("--count", "-n", default=1, show_default=True, type=click.IntRange(min=1), help="Number of keys.")
def generate_key_command(count: int) -> None:
    """Print random 32-byte secrets for SESSION_COOKIE_SECRET, one per line."""
    for _ in range(count):
        click.echo(generate_secret_key())
