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

"""Typed records returned by the DeepL API.

This module defines the data structures exchanged with the service:
- Text translations and usage statistics
- Supported language catalog entries
- Document handles and document status snapshots
- Request options (splitting, formality, XML tag handling)

All response records are immutable and parsed straight from the JSON
payloads using the service's field names.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Splitting(str, Enum):
    """Server-side sentence segmentation policy.

    Values are the literal ``split_sentences`` form values.
    """

    NONE = "0"  # No splitting, the whole text is one sentence
    INTERPUNCTION_AND_NEWLINES = "1"
    INTERPUNCTION = "nonewlines"


class Formality(str, Enum):
    """Tone control for target languages that support it."""

    DEFAULT = "default"
    MORE = "more"
    LESS = "less"


class TranslationState(str, Enum):
    """Lifecycle state of a server-side document translation."""

    QUEUED = "queued"
    TRANSLATING = "translating"
    DONE = "done"
    ERROR = "error"


class XmlHandling(BaseModel):
    """XML tag handling options for text translation.

    When passed to a translate call, ``tag_handling=xml`` is sent together
    with the comma-joined tag lists.
    """

    non_splitting_tags: list[str] = Field(default_factory=list)
    splitting_tags: list[str] = Field(default_factory=list)
    ignore_tags: list[str] = Field(default_factory=list)
    outline_detection: bool = True

    model_config = ConfigDict(frozen=True)

    def to_params(self) -> dict[str, str]:
        """Render options as form fields."""
        params = {
            "tag_handling": "xml",
            "outline_detection": "1" if self.outline_detection else "0",
        }
        if self.non_splitting_tags:
            params["non_splitting_tags"] = ",".join(self.non_splitting_tags)
        if self.splitting_tags:
            params["splitting_tags"] = ",".join(self.splitting_tags)
        if self.ignore_tags:
            params["ignore_tags"] = ",".join(self.ignore_tags)
        return params


class Translation(BaseModel):
    """A single translated text."""

    detected_source_language: str = Field(
        default="", description="Source language code detected (or echoed) by the service"
    )
    text: str = Field(..., description="Translated text")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={"example": {"detected_source_language": "EN", "text": "Hallo Welt"}},
    )


class UsageStatistics(BaseModel):
    """Character usage of the current billing period."""

    character_count: int = Field(default=0, ge=0)
    character_limit: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def limit_reached(self) -> bool:
        """Whether the character limit has been used up."""
        return self.character_limit > 0 and self.character_count >= self.character_limit


class SupportedLanguage(BaseModel):
    """Catalog entry for a language supported by the service."""

    code: str = Field(..., alias="language")
    name: str

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"


class DocumentTranslation(BaseModel):
    """Handle of an uploaded document.

    The key is used by the service to decrypt the document, so it is kept
    out of ``repr()`` and must not be logged.
    """

    document_id: str = Field(..., min_length=1)
    document_key: str = Field(..., min_length=1, repr=False)

    model_config = ConfigDict(frozen=True)


class DocumentStatus(BaseModel):
    """Snapshot of a document translation returned by a status poll."""

    document_id: str
    status: TranslationState
    seconds_remaining: int | None = None
    billed_characters: int | None = None
    error_message: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def done(self) -> bool:
        return self.status == TranslationState.DONE

    @property
    def failed(self) -> bool:
        return self.status == TranslationState.ERROR

    @property
    def ok(self) -> bool:
        return not self.failed


__all__ = [
    "DocumentStatus",
    "DocumentTranslation",
    "Formality",
    "Splitting",
    "SupportedLanguage",
    "Translation",
    "TranslationState",
    "UsageStatistics",
    "XmlHandling",
]
