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
"""sessioncookie CLI entry point."""

from __future__ import annotations

import click


@click.group()
@click.version_option(package_name="sessioncookie")
def cli() -> None:
    """Signed session cookies for serverless handlers."""


from sessioncookie.cli.generate_key import generate_key_command
from sessioncookie.cli.show_config import show_config_command

cli.add_command(generate_key_command, name="generate-key")
cli.add_command(show_config_command, name="show-config")
