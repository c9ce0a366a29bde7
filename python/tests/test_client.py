"""
Tests for assist_sdk.client module.

Tests the AssistClient class with mock-based testing for the JSON
endpoints, configuration handling and request building.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from assist_sdk.client import AssistClient
from assist_sdk.session import StreamSession
from assist_sdk.types import ChatRequest, ClientConfig, UnifiedAiRequest


def json_response(data):
    """Create a mock successful response returning data."""
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = data
    response.raise_for_status = MagicMock()
    return response


class TestAssistClientInit:
    """Tests for AssistClient initialization."""

    def test_basic_init(self):
        """Test basic client initialization."""
        client = AssistClient("https://api.example.com/api")
        assert client.base_url == "https://api.example.com/api"
        assert client.config.auth_token is None
        assert client.config.timeout == 120.0
        assert client.config.error_policy == "continue"

    def test_removes_trailing_slash(self):
        """Test that trailing slash is removed from base_url."""
        client = AssistClient("https://api.example.com/api/")
        assert client.base_url == "https://api.example.com/api"

    def test_with_settings(self):
        """Test initialization with individual settings."""
        client = AssistClient(
            "https://api.example.com",
            auth_token="tok",
            auth_scheme="Bearer",
            timeout=30.0,
            headers={"X-Client": "editor"},
            error_policy="raise",
        )
        assert client.config.auth_token == "tok"
        assert client.config.auth_scheme == "Bearer"
        assert client.config.timeout == 30.0
        assert client.config.headers == {"X-Client": "editor"}
        assert client.config.error_policy == "raise"

    def test_with_config(self):
        """Test initialization from a ClientConfig."""
        config = ClientConfig(base_url="https://api.example.com", auth_token="tok")
        client = AssistClient(config=config)
        assert client.config is config

    def test_requires_base_url(self):
        """Test that a base URL or config is required."""
        with pytest.raises(ValueError):
            AssistClient()

    def test_from_env(self, monkeypatch):
        """Test creating a client from environment variables."""
        monkeypatch.setenv("ASSIST_BASE_URL", "https://env.example.com/api/")
        monkeypatch.setenv("ASSIST_AUTH_TOKEN", "env-token")
        client = AssistClient.from_env(timeout=5.0)
        assert client.base_url == "https://env.example.com/api"
        assert client.config.auth_token == "env-token"
        assert client.config.timeout == 5.0


class TestAssistClientContextManager:
    """Tests for AssistClient async context manager."""

    async def test_async_context_manager(self):
        """Test using client as async context manager."""
        async with AssistClient("https://api.example.com") as client:
            assert client is not None
        assert client._http.is_closed

    async def test_close_method(self):
        """Test explicit close method."""
        client = AssistClient("https://api.example.com")
        await client.close()
        assert client._http.is_closed


class TestAssistClientRequest:
    """Tests for AssistClient JSON endpoints."""

    @pytest.fixture
    def client(self):
        """Create a client for testing."""
        return AssistClient("https://api.example.com/api", auth_token="tok")

    async def test_request_builds_url_and_headers(self, client):
        """Test URL joining and default headers."""
        with patch.object(client._http, "request", new=AsyncMock()) as mock_request:
            mock_request.return_value = json_response({"ok": True})

            result = await client.request("/ai/chat", body={"a": 1}, headers={"X-Trace": "1"})

            assert result == {"ok": True}
            args, kwargs = mock_request.call_args
            assert args == ("POST", "https://api.example.com/api/ai/chat")
            assert kwargs["json"] == {"a": 1}
            assert kwargs["headers"]["Authorization"] == "tok"
            assert kwargs["headers"]["Content-Type"] == "application/json"
            assert kwargs["headers"]["X-Trace"] == "1"
            assert "Accept" not in kwargs["headers"]

    async def test_request_raises_http_error(self, client):
        """Test that error statuses raise HTTPStatusError."""
        request = httpx.Request("POST", "https://api.example.com/api/ai/chat")
        response = httpx.Response(500, request=request)
        with patch.object(client._http, "request", new=AsyncMock(return_value=response)):
            with pytest.raises(httpx.HTTPStatusError):
                await client.request("/ai/chat")

    async def test_unified_forces_stream_off(self, client):
        """Test the non-streaming unified call."""
        with patch.object(client._http, "request", new=AsyncMock()) as mock_request:
            mock_request.return_value = json_response({
                "result": "Polished text.",
                "functionType": "polish",
                "modelName": "tongyi",
            })

            result = await client.unified(
                UnifiedAiRequest(function_type="polish", selected_text="x", stream=True)
            )

            assert result.result == "Polished text."
            assert result.model_name == "tongyi"
            body = mock_request.call_args.kwargs["json"]
            assert body["stream"] is False
            assert body["functionType"] == "polish"

    async def test_chat(self, client):
        """Test the multi-turn chat call."""
        with patch.object(client._http, "request", new=AsyncMock()) as mock_request:
            mock_request.return_value = json_response({"result": "Hi!", "modelName": "deepseek"})

            result = await client.chat(ChatRequest(message="Hello", session_id="s1"))

            assert result.result == "Hi!"
            args = mock_request.call_args
            assert args[0][1].endswith("/ai/chat")
            assert args.kwargs["json"] == {"message": "Hello", "sessionID": "s1"}

    async def test_get_models(self, client):
        """Test listing available models."""
        with patch.object(client._http, "request", new=AsyncMock()) as mock_request:
            mock_request.return_value = json_response({
                "models": [{
                    "name": "deepseek",
                    "displayName": "DeepSeek",
                    "provider": "deepseek",
                    "description": "General model",
                    "maxTokens": 4096,
                    "isAvailable": True,
                }],
                "current": "deepseek",
            })

            result = await client.get_models()

            assert result.current == "deepseek"
            assert result.models[0].display_name == "DeepSeek"
            assert result.models[0].is_available is True
            assert mock_request.call_args[0][0] == "GET"

    async def test_switch_model(self, client):
        """Test switching the backend model."""
        with patch.object(client._http, "request", new=AsyncMock()) as mock_request:
            mock_request.return_value = json_response({
                "success": True,
                "message": "switched",
                "modelName": "wenxin",
            })

            result = await client.switch_model("wenxin")

            assert result.success is True
            assert result.model_name == "wenxin"
            assert mock_request.call_args.kwargs["json"] == {"modelName": "wenxin"}

    @pytest.mark.parametrize("method,endpoint,field", [
        ("continue_writing", "/ai/continue", "prompt"),
        ("polish_text", "/ai/polish", "text"),
        ("summarize_text", "/ai/summarize", "text"),
    ])
    async def test_legacy_endpoints(self, client, method, endpoint, field):
        """Test the continue/polish/summarize endpoints."""
        with patch.object(client._http, "request", new=AsyncMock()) as mock_request:
            mock_request.return_value = json_response({"result": "out"})

            result = await getattr(client, method)("in")

            assert result.result == "out"
            assert mock_request.call_args[0][1].endswith(endpoint)
            assert mock_request.call_args.kwargs["json"] == {field: "in"}


class TestAssistClientStreams:
    """Tests for stream session creation."""

    def test_open_stream_returns_new_sessions(self):
        """Test that each call returns an independent session."""
        client = AssistClient("https://api.example.com/api", error_policy="raise")
        request = UnifiedAiRequest(function_type="expand")

        first = client.open_stream(request)
        second = client.open_stream(request, error_policy="deliver")

        assert isinstance(first, StreamSession)
        assert first is not second
        assert first.error_policy == "raise"
        assert second.error_policy == "deliver"
        assert first.request.endpoint == "https://api.example.com/api/ai/unified"

    def test_open_stream_custom_endpoint(self):
        """Test opening a stream on another endpoint."""
        client = AssistClient("https://api.example.com")
        session = client.open_stream(
            UnifiedAiRequest(function_type="generate"), endpoint="/api/stream"
        )
        assert session.request.endpoint == "https://api.example.com/api/stream"

    def test_build_unified_request(self):
        """Test building a request from a document and selection."""
        client = AssistClient("https://api.example.com")
        document = "First sentence. The chosen words here. Last one."
        start = document.index("chosen")
        end = start + len("chosen words")

        request = client.build_unified_request(
            "polish", document, start, end, user_requirement="fix", session_id="s1"
        )

        assert request.selected_text == "chosen words"
        assert request.context_text == " The  here."
        assert request.document_summary == document
        assert request.cursor_position == end
        assert request.user_requirement == "fix"
        assert request.session_id == "s1"
