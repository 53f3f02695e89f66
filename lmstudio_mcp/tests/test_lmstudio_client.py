import asyncio

import httpx
import pytest

from lmstudio_mcp.config.settings import load_settings
from lmstudio_mcp.domain.exceptions import ApiError, NetworkError, ResponseParseError
from lmstudio_mcp.domain.models import ChatMessage, ChatRequest
from lmstudio_mcp.providers import create_client
from lmstudio_mcp.providers.lmstudio_client import LMStudioClient
from lmstudio_mcp.server import parse_args


def test_default_base_url_targets_localhost(fake_http, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LMSTUDIO_BASE_URL", raising=False)
    monkeypatch.delenv("LMSTUDIO_MCP_CONFIG_FILE", raising=False)
    args, _ = parse_args([])
    client = create_client(load_settings(base_url=args.base_url))
    fake_http.response = httpx.Response(200, json={"data": []})

    asyncio.run(client.request("/models"))
    assert fake_http.last["url"] == "http://localhost:1234/v1/models"
    assert fake_http.last["method"] == "GET"


def test_base_url_argument_overrides_default(fake_http, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LMSTUDIO_BASE_URL", raising=False)
    args, _ = parse_args(["--base-url", "http://host:9999"])
    client = create_client(load_settings(base_url=args.base_url))
    fake_http.response = httpx.Response(200, json={"data": []})

    asyncio.run(client.request("/models"))
    assert fake_http.last["url"] == "http://host:9999/v1/models"


def test_request_sets_json_content_type_and_merges_headers(fake_http, settings_stub):
    client = LMStudioClient(settings_stub)
    fake_http.response = httpx.Response(200, json={"ok": True})

    data = asyncio.run(
        client.request("/chat/completions", method="POST", body={"a": 1}, headers={"X-Trace": "t"})
    )
    assert data == {"ok": True}
    assert fake_http.last["headers"] == {"Content-Type": "application/json", "X-Trace": "t"}
    assert fake_http.last["json"] == {"a": 1}
    assert fake_http.client_kwargs["timeout"] == 1.0


def test_http_error_carries_status(fake_http, settings_stub):
    client = LMStudioClient(settings_stub)
    fake_http.response = httpx.Response(500, text="boom")

    with pytest.raises(ApiError) as ei:
        asyncio.run(client.request("/models"))
    assert ei.value.http_status == 500
    assert ei.value.message == "LM Studio API request failed: HTTP 500: Internal Server Error"


def test_network_error_is_wrapped(fake_http, settings_stub):
    client = LMStudioClient(settings_stub)
    fake_http.error = httpx.ConnectError("Connection refused")

    with pytest.raises(NetworkError) as ei:
        asyncio.run(client.request("/models"))
    assert ei.value.message == "LM Studio API request failed: Connection refused"
    assert isinstance(ei.value.__cause__, httpx.ConnectError)


def test_invalid_json_raises_parse_error(fake_http, settings_stub):
    client = LMStudioClient(settings_stub)
    fake_http.response = httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(ResponseParseError) as ei:
        asyncio.run(client.request("/models"))
    assert ei.value.message.startswith("LM Studio API response parsing failed:")


def test_list_models_parses_entries(fake_http, settings_stub):
    client = LMStudioClient(settings_stub)
    fake_http.response = httpx.Response(
        200,
        json={
            "object": "list",
            "data": [
                {"id": "qwen2.5-7b", "object": "model", "created": 1, "owned_by": "organization_owner"},
                {"name": "only-name", "object": "model"},
            ],
        },
    )

    models = asyncio.run(client.list_models())
    assert [m.display_name for m in models] == ["qwen2.5-7b", "only-name"]
    assert models[0].owned_by == "organization_owner"


def test_list_models_without_data_is_empty(fake_http, settings_stub):
    client = LMStudioClient(settings_stub)
    fake_http.response = httpx.Response(200, json={"object": "list"})

    assert asyncio.run(client.list_models()) == []


def test_chat_posts_payload_and_parses_result(fake_http, settings_stub):
    client = LMStudioClient(settings_stub)
    fake_http.response = httpx.Response(
        200,
        json={
            "id": "chatcmpl-1",
            "model": "qwen2.5-7b",
            "choices": [{"index": 0, "message": {"role": "assistant", "content": "ok"}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 3, "completion_tokens": 1, "total_tokens": 4},
        },
    )
    req = ChatRequest(model="local-model", messages=[ChatMessage(role="user", content="hi")])

    res = asyncio.run(client.chat(req))
    assert fake_http.last["method"] == "POST"
    assert fake_http.last["url"] == "http://localhost:1234/v1/chat/completions"
    assert fake_http.last["json"] == {"model": "local-model", "messages": [{"role": "user", "content": "hi"}]}
    assert res.model == "qwen2.5-7b"
    assert res.first_content() == "ok"
    assert res.parsed_usage().total_tokens == 4
