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


"""Tests for the document translation workflow.

Covers upload, status polling with server-suggested waits, cancellation,
and download. All tests use mocks - no actual API calls are made.
"""

from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest
from conftest import MockSession, make_response

from deepl_client import (
    DEEPL_API_FREE,
    DeepLClient,
    DeepLConnectionError,
    DocumentTranslation,
    DocumentTranslationError,
    ResourceNotFoundError,
    ServiceUnavailableError,
    TranslationState,
)

HANDLE = DocumentTranslation(document_id="DOC-1", document_key="KEY-1")


def status_response(state: str, **extra: object) -> object:
    return make_response(json_data={"document_id": "DOC-1", "status": state, **extra})


def upload_response() -> object:
    return make_response(json_data={"document_id": "DOC-1", "document_key": "KEY-1"})


@pytest.mark.unit
class TestUploadDocument:
    """Tests for document upload."""

    @pytest.mark.asyncio
    async def test_upload_from_path(
        self, client: DeepLClient, mock_session: MockSession, tmp_path: Path
    ) -> None:
        source = tmp_path / "report.docx"
        source.write_bytes(b"PK\x03\x04")
        mock_session.queue(upload_response())

        handle = await client.upload_document(source, target_language="DE", source_language="EN")

        assert handle == HANDLE
        assert mock_session.post_urls == [f"{DEEPL_API_FREE}/document"]
        assert isinstance(mock_session.post.call_args.kwargs["data"], aiohttp.FormData)

    @pytest.mark.asyncio
    async def test_upload_from_named_stream(
        self, client: DeepLClient, mock_session: MockSession
    ) -> None:
        mock_session.queue(upload_response())

        handle = await client.upload_document(
            io.BytesIO(b"Hello"), target_language="FR", file_name="hello.txt"
        )

        assert handle.document_id == "DOC-1"

    @pytest.mark.asyncio
    async def test_stream_without_name_rejected(
        self, client: DeepLClient, mock_session: MockSession
    ) -> None:
        with pytest.raises(ValueError, match="file_name"):
            await client.upload_document(io.BytesIO(b"Hello"), target_language="FR")
        mock_session.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_file(
        self, client: DeepLClient, mock_session: MockSession, tmp_path: Path
    ) -> None:
        with pytest.raises(FileNotFoundError):
            await client.upload_document(tmp_path / "missing.pdf", target_language="DE")
        mock_session.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_target_rejected(
        self, client: DeepLClient, mock_session: MockSession
    ) -> None:
        with pytest.raises(ValueError, match="target_language"):
            await client.upload_document(io.BytesIO(b"x"), target_language="", file_name="a.txt")
        mock_session.post.assert_not_called()


@pytest.mark.unit
class TestDocumentStatus:
    """Tests for a single status poll."""

    @pytest.mark.asyncio
    async def test_status_request(self, client: DeepLClient, mock_session: MockSession) -> None:
        mock_session.queue(status_response("translating", seconds_remaining=20))

        status = await client.get_document_status(HANDLE)

        assert status.status is TranslationState.TRANSLATING
        assert status.seconds_remaining == 20
        assert mock_session.post_urls == [f"{DEEPL_API_FREE}/document/DOC-1"]
        assert mock_session.post.call_args.kwargs["data"] == [
            ("document_key", "KEY-1"),
            ("auth_key", "test-key"),
        ]

    @pytest.mark.asyncio
    async def test_unknown_document(self, client: DeepLClient, mock_session: MockSession) -> None:
        mock_session.queue(make_response(status=404))

        with pytest.raises(ResourceNotFoundError):
            await client.get_document_status(HANDLE)


@pytest.mark.unit
class TestWaitUntilDocumentDone:
    """Tests for the polling loop."""

    @pytest.mark.asyncio
    async def test_waits_server_estimate_then_finishes(
        self, client: DeepLClient, mock_session: MockSession
    ) -> None:
        mock_session.queue(
            status_response("translating", seconds_remaining=2),
            status_response("done", billed_characters=120),
        )

        with patch.object(client, "_wait", new=AsyncMock()) as wait:
            status = await client.wait_until_document_done(HANDLE)

        assert status.done
        assert status.billed_characters == 120
        assert mock_session.post.call_count == 2
        wait.assert_awaited_once_with(2.0, None)

    @pytest.mark.asyncio
    async def test_default_interval_without_estimate(
        self, client: DeepLClient, mock_session: MockSession
    ) -> None:
        mock_session.queue(
            status_response("queued"),
            status_response("translating"),
            status_response("done"),
        )

        with patch.object(client, "_wait", new=AsyncMock()) as wait:
            await client.wait_until_document_done(HANDLE)

        assert [c.args[0] for c in wait.await_args_list] == [1.0, 1.0]

    @pytest.mark.asyncio
    async def test_max_poll_interval_caps_wait(self, mock_session: MockSession) -> None:
        client = DeepLClient(auth_key="k", max_poll_interval=5.0, session=mock_session)  # type: ignore[arg-type]
        mock_session.queue(
            status_response("translating", seconds_remaining=600),
            status_response("done"),
        )

        with patch.object(client, "_wait", new=AsyncMock()) as wait:
            await client.wait_until_document_done(HANDLE)

        wait.assert_awaited_once_with(5.0, None)

    @pytest.mark.asyncio
    async def test_real_wait_respects_estimate(
        self, client: DeepLClient, mock_session: MockSession
    ) -> None:
        mock_session.queue(
            status_response("translating", seconds_remaining=2),
            status_response("done"),
        )

        with patch("deepl_client.client.asyncio.sleep", new=AsyncMock()) as sleep:
            await client.wait_until_document_done(HANDLE)

        sleep.assert_awaited_once_with(2.0)
        assert sleep.await_args.args[0] * 1000 >= 2000

    @pytest.mark.asyncio
    async def test_error_state_raises(self, client: DeepLClient, mock_session: MockSession) -> None:
        mock_session.queue(status_response("error"))

        with pytest.raises(DocumentTranslationError, match="Unknown error during document"):
            await client.wait_until_document_done(HANDLE)

    @pytest.mark.asyncio
    async def test_error_state_keeps_server_message(
        self, client: DeepLClient, mock_session: MockSession
    ) -> None:
        mock_session.queue(status_response("error", error_message="Source file is corrupt"))

        with pytest.raises(DocumentTranslationError, match="corrupt") as exc_info:
            await client.wait_until_document_done(HANDLE)
        assert exc_info.value.document_id == "DOC-1"


@pytest.mark.unit
class TestCancellation:
    """Cancellation ends polling and is distinct from translation errors."""

    @pytest.mark.asyncio
    async def test_cancel_event_during_wait_stops_polling(
        self, client: DeepLClient, mock_session: MockSession
    ) -> None:
        mock_session.queue(status_response("translating", seconds_remaining=30))
        cancel = asyncio.Event()
        asyncio.get_running_loop().call_later(0.05, cancel.set)

        with pytest.raises(asyncio.CancelledError):
            await client.wait_until_document_done(HANDLE, cancel_event=cancel)

        assert mock_session.post.call_count == 1

    @pytest.mark.asyncio
    async def test_cancel_event_set_before_poll(
        self, client: DeepLClient, mock_session: MockSession
    ) -> None:
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(asyncio.CancelledError):
            await client.wait_until_document_done(HANDLE, cancel_event=cancel)

        mock_session.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_task_cancellation_during_wait(
        self, client: DeepLClient, mock_session: MockSession
    ) -> None:
        mock_session.queue(status_response("translating", seconds_remaining=30))

        task = asyncio.create_task(client.wait_until_document_done(HANDLE))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert mock_session.post.call_count == 1

    @pytest.mark.asyncio
    async def test_wait_without_cancel_returns(self, client: DeepLClient) -> None:
        await client._wait(0.01, asyncio.Event())


@pytest.mark.unit
class TestDownloadDocument:
    """Tests for downloading results."""

    @pytest.mark.asyncio
    async def test_download_bytes(self, client: DeepLClient, mock_session: MockSession) -> None:
        mock_session.queue(make_response(body=b"Hallo Welt"))

        content = await client.download_document(HANDLE)

        assert content == b"Hallo Welt"
        assert mock_session.post_urls == [f"{DEEPL_API_FREE}/document/DOC-1/result"]

    @pytest.mark.asyncio
    async def test_download_to_path(
        self, client: DeepLClient, mock_session: MockSession, tmp_path: Path
    ) -> None:
        mock_session.queue(make_response(body=b"Bonjour le monde"))
        target = tmp_path / "out.txt"

        assert await client.download_document(HANDLE, target) is None
        assert target.read_bytes() == b"Bonjour le monde"

    @pytest.mark.asyncio
    async def test_download_to_stream(self, client: DeepLClient, mock_session: MockSession) -> None:
        mock_session.queue(make_response(body=b"Hola mundo"))
        buffer = io.BytesIO()

        await client.download_document(HANDLE, buffer)

        assert buffer.getvalue() == b"Hola mundo"

    @pytest.mark.asyncio
    async def test_failed_download_leaves_no_file(
        self, client: DeepLClient, mock_session: MockSession, tmp_path: Path
    ) -> None:
        mock_session.queue(make_response(status=503))
        target = tmp_path / "out.txt"

        with pytest.raises(ServiceUnavailableError, match="unavailable"):
            await client.download_document(HANDLE, target)
        assert not target.exists()

    @pytest.mark.asyncio
    async def test_interrupted_transfer_leaves_no_file(
        self, client: DeepLClient, mock_session: MockSession, tmp_path: Path
    ) -> None:
        async def broken_body(size: int):
            yield b"PART"
            raise aiohttp.ClientPayloadError("Response payload is not completed")

        response = make_response()
        response.content.iter_chunked.side_effect = broken_body
        mock_session.queue(response)
        target = tmp_path / "out.docx"

        with pytest.raises(DeepLConnectionError, match="payload"):
            await client.download_document(HANDLE, target)
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_download_replaces_existing_file(
        self, client: DeepLClient, mock_session: MockSession, tmp_path: Path
    ) -> None:
        mock_session.queue(make_response(body=b"new content"))
        target = tmp_path / "out.txt"
        target.write_bytes(b"old")

        await client.download_document(HANDLE, target)

        assert target.read_bytes() == b"new content"
        assert list(tmp_path.iterdir()) == [target]


@pytest.mark.unit
class TestTranslateDocument:
    """End-to-end orchestration: upload, poll, download."""

    @pytest.mark.asyncio
    async def test_full_workflow(
        self, client: DeepLClient, mock_session: MockSession, tmp_path: Path
    ) -> None:
        source = tmp_path / "hello.txt"
        source.write_text("Hello world", encoding="utf-8")
        mock_session.queue(
            upload_response(),
            status_response("translating", seconds_remaining=2),
            status_response("done"),
            make_response(body=b"Hallo Welt"),
        )

        with patch.object(client, "_wait", new=AsyncMock()) as wait:
            content = await client.translate_document(source, target_language="DE")

        assert content == b"Hallo Welt"
        wait.assert_awaited_once_with(2.0, None)
        assert mock_session.post_urls == [
            f"{DEEPL_API_FREE}/document",
            f"{DEEPL_API_FREE}/document/DOC-1",
            f"{DEEPL_API_FREE}/document/DOC-1",
            f"{DEEPL_API_FREE}/document/DOC-1/result",
        ]
        # Every follow-up request carries the exact id/key pair from the upload
        for call in mock_session.post.call_args_list[1:]:
            assert call.kwargs["data"] == [("document_key", "KEY-1"), ("auth_key", "test-key")]

    @pytest.mark.asyncio
    async def test_error_never_downloads(
        self, client: DeepLClient, mock_session: MockSession, tmp_path: Path
    ) -> None:
        source = tmp_path / "hello.txt"
        source.write_text("Hello world", encoding="utf-8")
        output = tmp_path / "hallo.txt"
        mock_session.queue(upload_response(), status_response("error"))

        with pytest.raises(DocumentTranslationError):
            await client.translate_document(source, output, target_language="DE")

        assert mock_session.post.call_count == 2
        assert not any(url.endswith("/result") for url in mock_session.post_urls)
        assert not output.exists()

    @pytest.mark.asyncio
    async def test_document_key_not_logged(
        self,
        client: DeepLClient,
        mock_session: MockSession,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        mock_session.queue(
            upload_response(),
            status_response("done"),
            make_response(body=b"x"),
        )

        with caplog.at_level(logging.DEBUG, logger="deepl_client"):
            await client.translate_document(
                io.BytesIO(b"Hello"), target_language="DE", file_name="a.txt"
            )

        assert "DOC-1" in caplog.text
        assert "KEY-1" not in caplog.text
        assert "test-key" not in caplog.text
