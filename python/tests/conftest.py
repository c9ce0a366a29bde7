"""
Shared pytest fixtures for assist-sdk tests.

This module provides a scriptable response body stream for the httpx
MockTransport, a factory for clients wired to it, and sample request
data used across the test files.
"""

import asyncio
import json

import httpx
import pytest

from assist_sdk.client import AssistClient
from assist_sdk.types import UnifiedAiRequest


class ScriptedStream(httpx.AsyncByteStream):
    """
    Response body that yields pre-defined chunks, one per read.

    Attributes:
        chunks: Byte chunks delivered in order
        block: When True, the first read never completes on its own
        fail_after: Raise httpx.ReadError after this many chunks
        started: Set when the first read begins
        reads: Number of chunks handed out
        closed: True once aclose() was called (the abort signal)
    """

    def __init__(self, chunks=(), block=False, fail_after=None):
        self.chunks = list(chunks)
        self.block = block
        self.fail_after = fail_after
        self.started = asyncio.Event()
        self.reads = 0
        self.closed = False

    async def __aiter__(self):
        self.started.set()
        if self.block:
            await asyncio.Event().wait()
        for chunk in self.chunks:
            if self.fail_after is not None and self.reads >= self.fail_after:
                raise httpx.ReadError("connection dropped")
            self.reads += 1
            yield chunk
            # Let other tasks (e.g. cancel()) run between reads
            await asyncio.sleep(0)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def scripted_stream():
    """Factory for ScriptedStream instances."""
    return ScriptedStream


@pytest.fixture
async def make_client():
    """
    Build an AssistClient whose transport serves the given stream.

    Returns a function (stream_or_response, **client_kwargs) -> (client, seen)
    where seen is a list of the httpx.Request objects sent.
    """
    clients = []

    def factory(body, **kwargs):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if isinstance(body, httpx.Response):
                return body
            return httpx.Response(
                200,
                headers={"content-type": "text/event-stream"},
                stream=body,
            )

        kwargs.setdefault("auth_token", "token-123")
        client = AssistClient(
            "https://api.example.com/api",
            transport=httpx.MockTransport(handler),
            **kwargs,
        )
        clients.append(client)
        return client, seen

    yield factory

    for client in clients:
        await client.close()


@pytest.fixture
def unified_request():
    """Sample unified AI request."""
    return UnifiedAiRequest(
        function_type="polish",
        document_summary="A short note",
        user_requirement="Make it more formal",
        selected_text="hey there",
        context_text="Intro. hey there. Outro.",
        cursor_position=16,
        model_name="deepseek",
        session_id="session_1700000000000_abc123xyz",
    )


@pytest.fixture
def recorder():
    """Callback that records (text, is_complete) calls."""

    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, text, is_complete):
            self.calls.append((text, is_complete))

    return Recorder()


@pytest.fixture
def sse_body():
    """Encode payloads as SSE data lines."""

    def encode(*payloads):
        lines = []
        for payload in payloads:
            text = payload if isinstance(payload, str) else json.dumps(payload)
            lines.append(f"data: {text}\n")
        return "".join(lines).encode("utf-8")

    return encode
