import json

import httpx
import pytest

from app.ai import DeepSeekClient, MAX_TOKENS, TEMPERATURE
from app.config import Settings
from app.errors import AnalysisFailedError, ConfigurationError, NetworkError, UpstreamError


def _settings(key="sk-test-key"):
    return Settings(deepseek_api_key=key, deepseek_base_url="https://llm.test/v1", request_timeout=5.0)


def _ok(content="Overall Score: 80/100"):
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


@pytest.mark.anyio
async def test_chat_sends_expected_request():
    seen = []

    def handler(request: httpx.Request):
        seen.append(request)
        return _ok("fine")

    client = DeepSeekClient(_settings(), transport=httpx.MockTransport(handler))
    out = await client.chat("SYS", "USER")

    assert out == "fine"
    assert len(seen) == 1
    req = seen[0]
    assert req.method == "POST"
    assert str(req.url) == "https://llm.test/v1/chat/completions"
    assert req.headers["authorization"] == "Bearer sk-test-key"
    assert req.headers["content-type"] == "application/json"

    body = json.loads(req.content)
    assert body["model"] == "deepseek-chat"
    assert body["temperature"] == TEMPERATURE == 0.7
    assert body["max_tokens"] == MAX_TOKENS == 2000
    assert body["messages"] == [
        {"role": "system", "content": "SYS"},
        {"role": "user", "content": "USER"},
    ]


@pytest.mark.anyio
@pytest.mark.parametrize("key", [None, "", "pk-wrong-prefix"])
async def test_bad_key_fails_without_network(key):
    calls = []

    def handler(request):
        calls.append(request)
        return _ok()

    client = DeepSeekClient(_settings(key), transport=httpx.MockTransport(handler))
    with pytest.raises(ConfigurationError):
        await client.chat("SYS", "USER")
    assert calls == []


@pytest.mark.anyio
async def test_http_error_maps_to_upstream_error():
    def handler(request):
        return httpx.Response(500, text='{"error":"internal"}')

    client = DeepSeekClient(_settings(), transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamError) as exc:
        await client.chat("SYS", "USER")
    assert exc.value.status == 500
    assert exc.value.body == '{"error":"internal"}'
    assert isinstance(exc.value, AnalysisFailedError)


@pytest.mark.anyio
async def test_unauthorized_maps_to_upstream_error():
    def handler(request):
        return httpx.Response(401, json={"error": {"message": "Authentication Fails"}})

    client = DeepSeekClient(_settings(), transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamError) as exc:
        await client.chat("SYS", "USER")
    assert exc.value.status == 401
    assert "Authentication Fails" in exc.value.body


@pytest.mark.anyio
@pytest.mark.parametrize(
    "error_cls",
    [httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout],
)
async def test_transport_errors_map_to_network_error(error_cls):
    def handler(request):
        raise error_cls("boom", request=request)

    client = DeepSeekClient(_settings(), transport=httpx.MockTransport(handler))
    with pytest.raises(NetworkError) as exc:
        await client.chat("SYS", "USER")
    assert isinstance(exc.value.cause, error_cls)


@pytest.mark.anyio
async def test_no_retry_on_failure():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503, text="busy")

    client = DeepSeekClient(_settings(), transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamError):
        await client.chat("SYS", "USER")
    assert len(calls) == 1


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, json={"choices": [{"message": {"content": None}}]}),
    ],
)
async def test_malformed_body_is_analysis_failure(response):
    client = DeepSeekClient(_settings(), transport=httpx.MockTransport(lambda request: response))
    with pytest.raises(AnalysisFailedError) as exc:
        await client.chat("SYS", "USER")
    assert not isinstance(exc.value, (UpstreamError, NetworkError))


@pytest.mark.anyio
async def test_redirect_maps_to_upstream_error():
    def handler(request):
        return httpx.Response(302, headers={"location": "https://elsewhere.test/"}, text="moved")

    client = DeepSeekClient(_settings(), transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamError) as exc:
        await client.chat("SYS", "USER")
    assert exc.value.status == 302
    assert exc.value.body == "moved"
