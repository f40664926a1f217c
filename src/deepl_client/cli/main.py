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


"""Main CLI application entry point for deepl-client.

Provides a thin command line front end over :class:`DeepLClient`:

    deepl-cli translate <auth-key> <text> [<source-language>] <target-language> [-f]
    deepl-cli translate-document <auth-key> <input> <output> [<source-language>] <target-language> [-f]
    deepl-cli get-usage-statistics <auth-key> [-f]
    deepl-cli get-supported-languages <auth-key> [-f]

Languages may be given as DeepL codes (``DE``, ``EN-GB``) or as names
(``german``, ``british-english``).
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Coroutine
from pathlib import Path
from typing import Any

import typer

from deepl_client import __version__
from deepl_client.client import DeepLClient
from deepl_client.errors import DeepLError
from deepl_client.languages import get_source_language_code, get_target_language_code
from deepl_client.utils.config import get_settings
from deepl_client.utils.console import console, err_console, print_error, print_success

app = typer.Typer(
    name="deepl-cli",
    help="DeepL command line tool.\n\nTranslate texts and documents with the DeepL API.",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

USE_FREE_API_OPTION = typer.Option(
    False,
    "--use-free-api",
    "-f",
    envvar="DEEPL_USE_FREE_API",
    help="Use the free API endpoint (api-free.deepl.com)",
)
VERBOSE_OPTION = typer.Option(False, "--verbose", help="Show request details")


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(level=level, format="%(message)s", force=True)


def _create_client(auth_key: str, use_free_api: bool) -> DeepLClient:
    return DeepLClient.from_settings(get_settings(), auth_key=auth_key, use_free_api=use_free_api)


def _split_languages(languages: list[str], command: str) -> tuple[str | None, str]:
    """Split the trailing language arguments into (source, target)."""
    if len(languages) == 1:
        return None, get_target_language_code(languages[0])
    if len(languages) == 2:
        return get_source_language_code(languages[0]), get_target_language_code(languages[1])
    print_error(f"Invalid number of arguments for command {command}.")
    raise typer.Exit(code=1)


def _run(coroutine: Coroutine[Any, Any, None], verbose: bool) -> None:
    """Run a command coroutine, mapping failures onto exit codes."""
    try:
        asyncio.run(coroutine)
    except KeyboardInterrupt:
        print_error("Interrupted by user")
        raise typer.Exit(code=130)
    except (DeepLError, ValueError, OSError) as e:
        print_error(f"An error occurred: {e}")
        if verbose:
            err_console.print_exception()
        raise typer.Exit(code=1)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"deepl-cli version: [bold cyan]{__version__}[/bold cyan]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(  # noqa: ARG001 - Used by Typer callback
        False,
        "--version",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    DeepL command line tool.

    Translate texts and documents with the DeepL API.
    """


async def _translate_async(
    auth_key: str, text: str, source: str | None, target: str, use_free_api: bool
) -> None:
    async with _create_client(auth_key, use_free_api) as client:
        translation = await client.translate_text(text, target, source)

    if source is None:
        console.print(f"Detected source language: {translation.detected_source_language}")
        console.print()
    console.print("Translation:")
    console.print(translation.text, markup=False, highlight=False, soft_wrap=True)


@app.command("translate")
def translate(
    auth_key: str = typer.Argument(..., help="DeepL API authentication key"),
    text: str = typer.Argument(..., help="Text to translate"),
    languages: list[str] = typer.Argument(
        ..., metavar="[SOURCE_LANGUAGE] TARGET_LANGUAGE", help="Optional source and target language"
    ),
    use_free_api: bool = USE_FREE_API_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Translate a text.

    When the source language is omitted it is detected by DeepL.

    Example:
        deepl-cli translate <key> "Hello world" english german
    """
    _configure_logging(verbose)
    source, target = _split_languages(languages, "translate")
    _run(_translate_async(auth_key, text, source, target, use_free_api), verbose)


async def _translate_document_async(
    auth_key: str,
    input_file: Path,
    output_file: Path,
    source: str | None,
    target: str,
    use_free_api: bool,
) -> None:
    async with _create_client(auth_key, use_free_api) as client:
        with err_console.status(f"Translating {input_file.name}..."):
            await client.translate_document(
                input_file,
                output_file,
                target_language=target,
                source_language=source,
            )
    print_success(f"Translated document saved to {output_file}")


@app.command("translate-document")
def translate_document(
    auth_key: str = typer.Argument(..., help="DeepL API authentication key"),
    input_file: Path = typer.Argument(..., help="Document to translate"),
    output_file: Path = typer.Argument(..., help="Where to write the translated document"),
    languages: list[str] = typer.Argument(
        ..., metavar="[SOURCE_LANGUAGE] TARGET_LANGUAGE", help="Optional source and target language"
    ),
    use_free_api: bool = USE_FREE_API_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Translate a document (docx, pptx, pdf, html, txt).

    Example:
        deepl-cli translate-document <key> report.docx bericht.docx german
    """
    _configure_logging(verbose)
    source, target = _split_languages(languages, "translate-document")
    _run(
        _translate_document_async(auth_key, input_file, output_file, source, target, use_free_api),
        verbose,
    )


async def _get_usage_statistics_async(auth_key: str, use_free_api: bool) -> None:
    async with _create_client(auth_key, use_free_api) as client:
        usage = await client.get_usage_statistics()
    console.print(f"Currently billed characters: {usage.character_count}")
    console.print(f"Character limit:             {usage.character_limit}")


@app.command("get-usage-statistics")
def get_usage_statistics(
    auth_key: str = typer.Argument(..., help="DeepL API authentication key"),
    use_free_api: bool = USE_FREE_API_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Show the characters billed so far and the character limit."""
    _configure_logging(verbose)
    _run(_get_usage_statistics_async(auth_key, use_free_api), verbose)


async def _get_supported_languages_async(auth_key: str, use_free_api: bool) -> None:
    async with _create_client(auth_key, use_free_api) as client:
        supported = await client.get_supported_languages()
    for language in supported:
        console.print(str(language), markup=False, highlight=False)


@app.command("get-supported-languages")
def get_supported_languages(
    auth_key: str = typer.Argument(..., help="DeepL API authentication key"),
    use_free_api: bool = USE_FREE_API_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """List the languages supported by DeepL."""
    _configure_logging(verbose)
    _run(_get_supported_languages_async(auth_key, use_free_api), verbose)


def run() -> None:
    """Entry point for CLI.

    Usage errors exit with status 1 instead of Click's default 2.
    """
    try:
        app()
    except SystemExit as e:
        sys.exit(1 if e.code == 2 else e.code)


if __name__ == "__main__":
    run()
