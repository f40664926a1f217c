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


"""Language names and codes understood by the DeepL API.

Language parameters throughout the client accept either a DeepL language
code (``"DE"``, ``"EN-GB"``) or a :class:`Language` member. The CLI also
accepts human-readable names such as ``german`` or ``british-english``,
resolved through the lookup tables below.
"""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    """Languages with a fixed DeepL code.

    The value of each member is the code sent to the service.
    """

    BULGARIAN = "BG"
    CHINESE = "ZH"
    CZECH = "CS"
    DANISH = "DA"
    DUTCH = "NL"
    ENGLISH = "EN"
    BRITISH_ENGLISH = "EN-GB"
    AMERICAN_ENGLISH = "EN-US"
    ESTONIAN = "ET"
    FINNISH = "FI"
    FRENCH = "FR"
    GERMAN = "DE"
    GREEK = "EL"
    HUNGARIAN = "HU"
    ITALIAN = "IT"
    JAPANESE = "JA"
    LATVIAN = "LV"
    LITHUANIAN = "LT"
    POLISH = "PL"
    PORTUGUESE = "PT"
    EUROPEAN_PORTUGUESE = "PT-PT"
    BRAZILIAN_PORTUGUESE = "PT-BR"
    ROMANIAN = "RO"
    RUSSIAN = "RU"
    SLOVAK = "SK"
    SLOVENIAN = "SL"
    SPANISH = "ES"
    SWEDISH = "SV"


# Regional variants are only valid as targets; as a source they collapse
# to the base language.
SOURCE_LANGUAGE_CODES: dict[str, str] = {
    "bulgarian": "BG",
    "chinese": "ZH",
    "czech": "CS",
    "danish": "DA",
    "dutch": "NL",
    "english": "EN",
    "british-english": "EN",
    "american-english": "EN",
    "estonian": "ET",
    "finnish": "FI",
    "french": "FR",
    "german": "DE",
    "greek": "EL",
    "hungarian": "HU",
    "italian": "IT",
    "japanese": "JA",
    "latvian": "LV",
    "lithuanian": "LT",
    "polish": "PL",
    "portuguese": "PT",
    "brazilian-portuguese": "PT",
    "romanian": "RO",
    "russian": "RU",
    "slovak": "SK",
    "slovenian": "SL",
    "spanish": "ES",
    "swedish": "SV",
}

TARGET_LANGUAGE_CODES: dict[str, str] = {
    **SOURCE_LANGUAGE_CODES,
    "english": "EN",  # Unspecified variant, kept for backward compatibility
    "british-english": "EN-GB",
    "american-english": "EN-US",
    "portuguese": "PT-PT",
    "brazilian-portuguese": "PT-BR",
}

# Codes that the service rejects as source languages
TARGET_ONLY_CODES = frozenset({"EN-GB", "EN-US", "PT-PT", "PT-BR"})


def get_source_language_code(language: str) -> str:
    """Resolve a language name to a source language code.

    Unknown names are assumed to already be language codes and are
    returned unchanged.

    Example:
        >>> get_source_language_code("British-English")
        'EN'
        >>> get_source_language_code("DE")
        'DE'
    """
    return SOURCE_LANGUAGE_CODES.get(language.strip().lower(), language.strip())


def get_target_language_code(language: str) -> str:
    """Resolve a language name to a target language code.

    Example:
        >>> get_target_language_code("brazilian-portuguese")
        'PT-BR'
    """
    return TARGET_LANGUAGE_CODES.get(language.strip().lower(), language.strip())


def language_code(language: Language | str | None) -> str | None:
    """Normalize a language argument to the code sent over the wire."""
    if language is None:
        return None
    if isinstance(language, Language):
        return language.value
    return language.strip().upper()


__all__ = [
    "Language",
    "SOURCE_LANGUAGE_CODES",
    "TARGET_LANGUAGE_CODES",
    "TARGET_ONLY_CODES",
    "get_source_language_code",
    "get_target_language_code",
    "language_code",
]
