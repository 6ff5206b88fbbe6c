"""HTTP behaviour of the provider clients against a mock transport."""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from llmproxy.core.ai.config import ProviderAdapterSettings
from llmproxy.core.ai.exceptions import (
    EmptyResponseError,
    ErrorKind,
    ProviderConfigurationError,
    ProviderRejectedError,
    ProviderTransportError,
    UnsupportedAttachmentError,
)
from llmproxy.core.ai.providers import DeepSeekClient, GeminiClient, OpenAIClient
from llmproxy.core.ai.types import AIRequest, PromptMessage, ProviderName


def _request(provider: ProviderName, text: str = "Hello") -> AIRequest:
    return AIRequest(provider=provider, messages=[PromptMessage(role="user", content=text)])


@pytest.mark.asyncio
async def test_gemini_passes_key_as_query_parameter() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": "Hi "}, {"text": "there"}]}}]},
        )

    config = ProviderAdapterSettings(api_key="g-key", base_url="https://gemini.mock/")
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = GeminiClient(config, http_client=http_client)
        wire = client.normalize(_request(ProviderName.GEMINI))
        body = await client.invoke(wire)

    assert client.extract(body) == "Hi there"
    request = captured[0]
    assert request.url.path == "/v1beta/models/gemini-2.5-flash:generateContent"
    assert request.url.params["key"] == "g-key"
    assert "authorization" not in request.headers
    assert json.loads(request.content) == wire.payload


def test_gemini_missing_candidates_is_empty_response() -> None:
    client = GeminiClient(ProviderAdapterSettings(api_key="k"), http_client=httpx.AsyncClient())
    with pytest.raises(EmptyResponseError):
        client.extract({"promptFeedback": {"blockReason": "SAFETY"}})
    assert client.extract({"candidates": [{"content": {"parts": []}}]}) == ""
    assert client.extract({"candidates": [{"content": {"parts": [{"text": ""}]}}]}) == ""


@pytest.mark.parametrize(
    "candidate",
    [{"finishReason": "SAFETY"}, {"content": {"role": "model"}}, None],
)
def test_gemini_candidate_without_content_is_empty_response(candidate) -> None:
    client = GeminiClient(ProviderAdapterSettings(api_key="k"), http_client=httpx.AsyncClient())
    with pytest.raises(EmptyResponseError):
        client.extract({"candidates": [candidate]})


@pytest.mark.asyncio
async def test_openai_uses_bearer_token_and_extracts_content() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(
            200,
            json={"choices": [{"message": {"content": [{"type": "text", "text": "Done"}]}}]},
        )

    config = ProviderAdapterSettings(api_key="o-key", base_url="https://openai.mock/v1")
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = OpenAIClient(config, http_client=http_client)
        body = await client.invoke(client.normalize(_request(ProviderName.OPENAI)))

    assert client.extract(body) == "Done"
    assert captured[0].url.host == "openai.mock"
    assert captured[0].url.path == "/v1/chat/completions"
    assert captured[0].headers["authorization"] == "Bearer o-key"


def test_chat_completions_without_choices_is_empty_text(caplog) -> None:
    caplog.set_level(logging.WARNING)
    client = DeepSeekClient(ProviderAdapterSettings(api_key="k"), http_client=httpx.AsyncClient())

    assert client.extract({"choices": []}) == ""
    assert client.extract({"choices": [{"message": {"content": None}}]}) == ""
    assert any("no choices" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_error_envelope_message_is_surfaced() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "invalid key"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = OpenAIClient(ProviderAdapterSettings(api_key="bad"), http_client=http_client)
        with pytest.raises(ProviderRejectedError) as exc_info:
            await client.invoke(client.normalize(_request(ProviderName.OPENAI)))

    assert str(exc_info.value) == "invalid key"
    assert exc_info.value.status_code == 401
    assert exc_info.value.kind is ErrorKind.PROVIDER_REJECTED


@pytest.mark.asyncio
async def test_deepseek_reads_top_level_message_field() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, json={"message": "Insufficient Balance"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = DeepSeekClient(ProviderAdapterSettings(api_key="k"), http_client=http_client)
        with pytest.raises(ProviderRejectedError, match="Insufficient Balance"):
            await client.invoke(client.normalize(_request(ProviderName.DEEPSEEK)))


@pytest.mark.asyncio
async def test_error_without_envelope_falls_back_to_reason_phrase() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="<html>upstream down</html>")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = GeminiClient(ProviderAdapterSettings(api_key="k"), http_client=http_client)
        with pytest.raises(ProviderRejectedError) as exc_info:
            await client.invoke(client.normalize(_request(ProviderName.GEMINI)))

    assert str(exc_info.value) == "Service Unavailable"


@pytest.mark.asyncio
async def test_transport_failure_is_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = OpenAIClient(ProviderAdapterSettings(api_key="k"), http_client=http_client)
        with pytest.raises(ProviderTransportError) as exc_info:
            await client.invoke(client.normalize(_request(ProviderName.OPENAI)))

    assert exc_info.value.kind is ErrorKind.NETWORK


@pytest.mark.asyncio
async def test_invalid_json_on_success_is_empty_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = OpenAIClient(ProviderAdapterSettings(api_key="k"), http_client=http_client)
        with pytest.raises(EmptyResponseError):
            await client.invoke(client.normalize(_request(ProviderName.OPENAI)))


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_any_call() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = GeminiClient(ProviderAdapterSettings(), http_client=http_client)
        with pytest.raises(ProviderConfigurationError):
            await client.invoke(client.normalize(_request(ProviderName.GEMINI)))

    assert calls == []


@pytest.mark.asyncio
async def test_openai_upload_and_delete() -> None:
    seen: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        if request.method == "POST":
            assert b'name="purpose"' in request.content
            assert b"vision" in request.content
            return httpx.Response(200, json={"id": "file-abc"})
        return httpx.Response(200, json={"deleted": True})

    config = ProviderAdapterSettings(api_key="k", base_url="https://openai.mock/v1")
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = OpenAIClient(config, http_client=http_client)
        file_id = await client.upload(b"\x89PNG", "cat.png", "image/png")
        await client.delete(file_id)

    assert file_id == "file-abc"
    assert seen == [("POST", "/v1/files"), ("DELETE", "/v1/files/file-abc")]


@pytest.mark.asyncio
async def test_openai_upload_rejects_non_images() -> None:
    client = OpenAIClient(ProviderAdapterSettings(api_key="k"), http_client=httpx.AsyncClient())
    with pytest.raises(UnsupportedAttachmentError):
        await client.upload(b"%PDF", "a.pdf", "application/pdf")


@pytest.mark.asyncio
async def test_delete_failure_is_logged_not_raised(caplog) -> None:
    caplog.set_level(logging.WARNING)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": {"message": "No such file"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = OpenAIClient(ProviderAdapterSettings(api_key="k"), http_client=http_client)
        await client.delete("file-missing")

    assert any("No such file" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_deepseek_has_no_upload_capability() -> None:
    client = DeepSeekClient(ProviderAdapterSettings(api_key="k"), http_client=httpx.AsyncClient())
    assert client.supports_file_upload is False
    with pytest.raises(ProviderConfigurationError):
        await client.upload(b"img", "a.png", "image/png")
