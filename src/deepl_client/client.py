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


"""Asynchronous client for the DeepL REST API.

Uses aiohttp for lightweight, async operation and supports both the free
and the pro API endpoints.

API Documentation: https://developers.deepl.com/docs

Document translation is a three step workflow driven by the client:

1. upload the document and receive a handle (id + key)
2. poll the status endpoint, waiting as long as the server suggests
3. download the translated document once its status is ``done``

Cancellation: callers either cancel the surrounding asyncio task or pass an
``asyncio.Event`` as ``cancel_event``. The event is checked before every
request and interrupts the wait between status polls. Both paths end in
``asyncio.CancelledError``, never in a :class:`DeepLError`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from enum import Enum
from pathlib import Path
from typing import IO, Any
from urllib.parse import quote

import aiohttp

from deepl_client.errors import (
    UNKNOWN_DOCUMENT_ERROR_MESSAGE,
    DeepLConnectionError,
    DeepLError,
    DocumentTranslationError,
    raise_for_status,
)
from deepl_client.languages import TARGET_ONLY_CODES, Language, language_code
from deepl_client.models import (
    DocumentStatus,
    DocumentTranslation,
    Formality,
    Splitting,
    SupportedLanguage,
    Translation,
    UsageStatistics,
    XmlHandling,
)
from deepl_client.utils.config import Settings

logger = logging.getLogger(__name__)

# DeepL API endpoints
DEEPL_API_FREE = "https://api-free.deepl.com/v2"
DEEPL_API_PRO = "https://api.deepl.com/v2"

DEFAULT_POLL_INTERVAL = 1.0
DOWNLOAD_CHUNK_SIZE = 64 * 1024

PathOrStream = str | Path | IO[bytes]


def _raise_if_cancelled(cancel_event: asyncio.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise asyncio.CancelledError("Operation cancelled by caller")


class DeepLClient:
    """Client for the DeepL translation API.

    Holds only immutable configuration plus one aiohttp session (the
    connection pool), so a single instance may serve concurrent calls.

    Example:
        >>> async with DeepLClient(auth_key="your-key", use_free_api=True) as client:
        ...     [result] = await client.translate("Hello world", target_language="DE")
        ...     print(result.text)
        'Hallo Welt'
    """

    def __init__(
        self,
        auth_key: str,
        use_free_api: bool = False,
        timeout: float = 30.0,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_poll_interval: float | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        """Initialize the client.

        Args:
            auth_key: DeepL API authentication key
            use_free_api: Whether to use the free API endpoint
            timeout: Total timeout of a single request in seconds
            poll_interval: Wait between document status polls when the
                server does not estimate the remaining time
            max_poll_interval: Optional upper bound for a single wait between
                polls. Unset means the server estimate is used as is.
            session: Externally managed aiohttp session. It is not closed by
                :meth:`close`.
        """
        if not auth_key or not auth_key.strip():
            raise ValueError("auth_key must not be empty")
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if max_poll_interval is not None and max_poll_interval <= 0:
            raise ValueError("max_poll_interval must be positive")

        self._auth_key = auth_key
        self.use_free_api = use_free_api
        self.base_url = DEEPL_API_FREE if use_free_api else DEEPL_API_PRO
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.max_poll_interval = max_poll_interval
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        auth_key: str | None = None,
        use_free_api: bool | None = None,
    ) -> DeepLClient:
        """Create a client from application settings.

        Args:
            settings: Loaded settings
            auth_key: Overrides the configured key when given
            use_free_api: Overrides the configured endpoint when given
        """
        return cls(
            auth_key=auth_key or settings.get_auth_key(),
            use_free_api=settings.use_free_api if use_free_api is None else use_free_api,
            timeout=settings.request_timeout,
            poll_interval=settings.poll_interval,
            max_poll_interval=settings.max_poll_interval,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"

    async def __aenter__(self) -> DeepLClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def build_url(self, path: str, *segments: str) -> str:
        """Build the absolute URL of an API action.

        Args:
            path: Action path relative to the API base URL (e.g. "document")
            segments: Additional path segments, quoted individually

        Raises:
            ValueError: If path is empty
        """
        path = path.strip("/") if path else ""
        if not path:
            raise ValueError("path must not be empty")
        parts = [self.base_url, path]
        parts.extend(quote(str(segment), safe="") for segment in segments)
        return "/".join(parts)

    def build_params(self, params: Mapping[str, Any] | None = None) -> list[tuple[str, str]]:
        """Build query/form fields, always ending with the authentication key.

        None values are dropped, sequences become repeated fields, enums are
        sent by value and booleans as "1"/"0".
        """
        fields: list[tuple[str, str]] = []
        for name, value in (params or {}).items():
            if value is None:
                continue
            values = value if isinstance(value, list | tuple) else [value]
            for item in values:
                if isinstance(item, Enum):
                    item = item.value
                elif isinstance(item, bool):
                    item = "1" if item else "0"
                fields.append((name, str(item)))
        fields.append(("auth_key", self._auth_key))
        return fields

    @asynccontextmanager
    async def _request(
        self,
        method: str,
        path: str,
        *segments: str,
        params: Mapping[str, Any] | None = None,
        files: Mapping[str, tuple[str, IO[bytes]]] | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[aiohttp.ClientResponse]:
        """Send a request and yield the successful response.

        GET requests carry their fields in the query string, POST requests
        in a form body, multipart when files are attached.

        Raises:
            DeepLError: Mapped from an unsuccessful status code
            DeepLConnectionError: If the service cannot be reached
        """
        _raise_if_cancelled(cancel_event)

        url = self.build_url(path, *segments)
        fields = self.build_params(params)
        session = await self._get_session()

        # The URL never contains credentials; fields are not logged.
        logger.debug("DeepL request: %s %s", method, url)

        if method == "GET":
            context = session.get(url, params=fields)
        elif files:
            form = aiohttp.FormData()
            for name, value in fields:
                form.add_field(name, value)
            for name, (file_name, stream) in files.items():
                form.add_field(
                    name, stream, filename=file_name, content_type="application/octet-stream"
                )
            context = session.post(url, data=form)
        else:
            context = session.post(url, data=fields)

        try:
            async with context as response:
                if not 200 <= response.status < 300:
                    body = await response.text()
                    logger.debug("DeepL responded with status %s for %s", response.status, url)
                    raise_for_status(response.status, body)
                yield response
        except aiohttp.ClientError as e:
            raise DeepLConnectionError(f"DeepL connection error: {e}") from e
        except asyncio.TimeoutError as e:
            raise DeepLConnectionError(f"DeepL request timed out after {self.timeout}s") from e

    async def _request_json(
        self,
        method: str,
        path: str,
        *segments: str,
        params: Mapping[str, Any] | None = None,
        files: Mapping[str, tuple[str, IO[bytes]]] | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> Any:
        async with self._request(
            method, path, *segments, params=params, files=files, cancel_event=cancel_event
        ) as response:
            return await response.json()

    # ------------------------------------------------------------------
    # Text translation
    # ------------------------------------------------------------------

    async def translate(
        self,
        texts: str | Sequence[str],
        target_language: Language | str,
        source_language: Language | str | None = None,
        splitting: Splitting | str = Splitting.NONE,
        preserve_formatting: bool = False,
        formality: Formality | str = Formality.DEFAULT,
        xml_handling: XmlHandling | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> list[Translation]:
        """Translate one or more texts.

        Args:
            texts: A text or a sequence of texts to translate
            target_language: Target language code or Language member
            source_language: Source language (auto-detected if None)
            splitting: Sentence splitting policy
            preserve_formatting: Keep the formatting of the source text
            formality: Formality of the translation
            xml_handling: Enables XML tag handling with the given options
            cancel_event: Cancels the call when set

        Returns:
            One Translation per input text, in the order submitted

        Raises:
            TypeError: If texts is None or contains a non-string element
            ValueError: If texts is empty, contains an empty text, the target
                language is empty or the source language is a regional variant
            DeepLError: If the service rejects the request
        """
        if texts is None:
            raise TypeError("texts must not be None")
        text_list = [texts] if isinstance(texts, str) else list(texts)
        if not text_list:
            raise ValueError("texts must contain at least one text")
        for index, text in enumerate(text_list):
            if text is not None and not isinstance(text, str):
                raise TypeError(f"text at index {index} must be a string")
            if text is None or not text.strip():
                raise ValueError(f"text at index {index} must not be empty")

        target_code = language_code(target_language)
        if not target_code:
            raise ValueError("target_language must not be empty")
        source_code = language_code(source_language) or None
        if source_code in TARGET_ONLY_CODES:
            raise ValueError(f"{source_code} must not be used as a source language")

        params: dict[str, Any] = {
            "text": text_list,
            "source_lang": source_code,
            "target_lang": target_code,
            "split_sentences": Splitting(splitting),
            "preserve_formatting": preserve_formatting,
            "formality": Formality(formality),
        }
        if xml_handling is not None:
            params.update(xml_handling.to_params())

        data = await self._request_json(
            "POST", "translate", params=params, cancel_event=cancel_event
        )
        translations = [Translation.model_validate(item) for item in data.get("translations", [])]
        logger.debug("Translated %d text(s) into %s", len(translations), target_code)
        return translations

    async def translate_text(
        self,
        text: str,
        target_language: Language | str,
        source_language: Language | str | None = None,
        **options: Any,
    ) -> Translation:
        """Translate a single text. Accepts the same options as :meth:`translate`."""
        if text is None:
            raise TypeError("text must not be None")
        results = await self.translate([text], target_language, source_language, **options)
        if not results:
            raise DeepLError("DeepL returned no translation for the text")
        return results[0]

    # ------------------------------------------------------------------
    # Account and catalog
    # ------------------------------------------------------------------

    async def get_usage_statistics(
        self, cancel_event: asyncio.Event | None = None
    ) -> UsageStatistics:
        """Get character usage and limit of the current billing period."""
        data = await self._request_json("GET", "usage", cancel_event=cancel_event)
        return UsageStatistics.model_validate(data)

    async def get_supported_languages(
        self, cancel_event: asyncio.Event | None = None
    ) -> list[SupportedLanguage]:
        """Get the languages supported by the service."""
        data = await self._request_json("GET", "languages", cancel_event=cancel_event)
        return [SupportedLanguage.model_validate(item) for item in data]

    # ------------------------------------------------------------------
    # Document translation
    # ------------------------------------------------------------------

    async def upload_document(
        self,
        source: PathOrStream,
        target_language: Language | str,
        source_language: Language | str | None = None,
        formality: Formality | str = Formality.DEFAULT,
        file_name: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> DocumentTranslation:
        """Upload a document for translation.

        Args:
            source: Path of the document or a readable binary stream
            target_language: Target language code or Language member
            source_language: Source language (auto-detected if None)
            formality: Formality of the translation
            file_name: Name sent to the service, which uses its extension to
                detect the document format. Defaults to the file's name.
            cancel_event: Cancels the upload when set

        Returns:
            Handle identifying the server-side translation job

        Raises:
            ValueError: If the target language or the file name is missing
            OSError: If the document cannot be read
        """
        target_code = language_code(target_language)
        if not target_code:
            raise ValueError("target_language must not be empty")
        source_code = language_code(source_language) or None
        if source_code in TARGET_ONLY_CODES:
            raise ValueError(f"{source_code} must not be used as a source language")

        params = {
            "target_lang": target_code,
            "source_lang": source_code,
            "formality": Formality(formality),
        }

        if isinstance(source, str | Path):
            path = Path(source)
            with path.open("rb") as stream:
                data = await self._request_json(
                    "POST",
                    "document",
                    params=params,
                    files={"file": (file_name or path.name, stream)},
                    cancel_event=cancel_event,
                )
        else:
            name = file_name or Path(getattr(source, "name", "") or "").name
            if not name:
                raise ValueError("file_name is required when uploading from a stream")
            data = await self._request_json(
                "POST",
                "document",
                params=params,
                files={"file": (name, source)},
                cancel_event=cancel_event,
            )

        handle = DocumentTranslation.model_validate(data)
        logger.info("Uploaded document %s for translation into %s", handle.document_id, target_code)
        return handle

    async def get_document_status(
        self, handle: DocumentTranslation, cancel_event: asyncio.Event | None = None
    ) -> DocumentStatus:
        """Get a fresh status snapshot of an uploaded document."""
        data = await self._request_json(
            "POST",
            "document",
            handle.document_id,
            params={"document_key": handle.document_key},
            cancel_event=cancel_event,
        )
        return DocumentStatus.model_validate(data)

    def _next_poll_delay(self, status: DocumentStatus) -> float:
        """Seconds to wait before the next status poll."""
        if status.seconds_remaining is not None and status.seconds_remaining > 0:
            delay = float(status.seconds_remaining)
        else:
            delay = self.poll_interval
        if self.max_poll_interval is not None:
            delay = min(delay, self.max_poll_interval)
        return delay

    async def _wait(self, seconds: float, cancel_event: asyncio.Event | None) -> None:
        """Sleep between polls, returning early only to cancel."""
        if cancel_event is None:
            await asyncio.sleep(seconds)
            return
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return
        raise asyncio.CancelledError("Operation cancelled by caller")

    async def wait_until_document_done(
        self, handle: DocumentTranslation, cancel_event: asyncio.Event | None = None
    ) -> DocumentStatus:
        """Poll the document status until translation finishes.

        Returns:
            The final status, whose state is ``done``

        Raises:
            DocumentTranslationError: If the document ends in the error state
            asyncio.CancelledError: If cancelled before completion
        """
        while True:
            status = await self.get_document_status(handle, cancel_event=cancel_event)

            if status.failed:
                message = status.error_message or UNKNOWN_DOCUMENT_ERROR_MESSAGE
                logger.warning("Translation of document %s failed: %s", handle.document_id, message)
                raise DocumentTranslationError(message, document_id=handle.document_id)
            if status.done:
                logger.info(
                    "Document %s translated (%s billed characters)",
                    handle.document_id,
                    status.billed_characters,
                )
                return status

            delay = self._next_poll_delay(status)
            logger.debug(
                "Document %s is %s, next poll in %.1fs",
                handle.document_id,
                status.status.value,
                delay,
            )
            _raise_if_cancelled(cancel_event)
            await self._wait(delay, cancel_event)

    async def download_document(
        self,
        handle: DocumentTranslation,
        destination: PathOrStream | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> bytes | None:
        """Download a translated document.

        Args:
            handle: Handle of a document whose status is ``done``
            destination: Output path or writable binary stream. When omitted
                the document is returned as bytes.
            cancel_event: Cancels the download when set

        Returns:
            The document bytes when no destination was given, otherwise None
        """
        async with self._request(
            "POST",
            "document",
            handle.document_id,
            "result",
            params={"document_key": handle.document_key},
            cancel_event=cancel_event,
        ) as response:
            if destination is None:
                return await response.read()
            if isinstance(destination, str | Path):
                await self._save_body(response, Path(destination))
            else:
                await self._copy_body(response, destination)

        logger.info("Downloaded translated document %s", handle.document_id)
        return None

    @staticmethod
    async def _copy_body(response: aiohttp.ClientResponse, stream: IO[bytes]) -> None:
        async for chunk in response.content.iter_chunked(DOWNLOAD_CHUNK_SIZE):
            stream.write(chunk)

    @classmethod
    async def _save_body(cls, response: aiohttp.ClientResponse, path: Path) -> None:
        """Stream the body into a sibling ``.part`` file, renamed once complete."""
        partial = path.with_name(path.name + ".part")
        try:
            with partial.open("wb") as stream:
                await cls._copy_body(response, stream)
            partial.replace(path)
        except BaseException:
            partial.unlink(missing_ok=True)
            raise

    async def translate_document(
        self,
        source: PathOrStream,
        destination: PathOrStream | None = None,
        *,
        target_language: Language | str,
        source_language: Language | str | None = None,
        formality: Formality | str = Formality.DEFAULT,
        file_name: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> bytes | None:
        """Upload, wait for, and download a document translation.

        Returns:
            The translated document as bytes when no destination was given

        Raises:
            DocumentTranslationError: If the server fails to translate it
            DeepLError: If any request is rejected
            asyncio.CancelledError: If cancelled before completion
        """
        handle = await self.upload_document(
            source,
            target_language,
            source_language=source_language,
            formality=formality,
            file_name=file_name,
            cancel_event=cancel_event,
        )
        await self.wait_until_document_done(handle, cancel_event=cancel_event)
        return await self.download_document(handle, destination, cancel_event=cancel_event)

    def __del__(self) -> None:
        """Cleanup: warn if session not properly closed."""
        session = getattr(self, "_session", None)
        if session is not None and getattr(self, "_owns_session", False) and not session.closed:
            logger.warning("DeepLClient session not properly closed. Use 'await client.close()'")


__all__ = ["DEEPL_API_FREE", "DEEPL_API_PRO", "DeepLClient"]
