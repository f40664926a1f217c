# Copyright 2025 KTTC AI (https://github.com/kttc-ai)
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



"""Console helpers for Rich terminal output.

Results go to stdout; status and error lines go to stderr so that
translated text can be piped without decoration.
"""

from __future__ import annotations

from rich.console import Console

# Global console instances shared across the CLI
console = Console()
err_console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message to stderr."""
    err_console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[red]✗[/red] {message}")


__all__ = ["console", "err_console", "print_error", "print_success"]
