"""
Location: python/assist_sdk/client.py

Summary:
    Main AssistClient class for assist-sdk. Wraps the document backend's
    AI endpoints: the streaming unified endpoint (through StreamSession)
    and the plain JSON endpoints for chat, model selection and the
    legacy continue/polish/summarize calls.

Usage:
    The primary entry point for using the SDK. Create an AssistClient
    with a base URL and credential, then open stream sessions or make
    regular requests.

Example:
    from assist_sdk import AssistClient, UnifiedAiRequest

    async with AssistClient("http://localhost:8080/api", auth_token=token) as client:
        request = UnifiedAiRequest(function_type="polish", selected_text="hey")
        await client.stream_unified(request, lambda text, done: print(text))
"""

import logging
from typing import Any, Optional

import httpx

from .session import StreamCallback, StreamSession
from .text import generate_document_summary, get_smart_text_selection
from .transport import build_headers, build_stream_request
from .types import (
    AiFunctionType,
    AiResponse,
    ChatRequest,
    ChatResponse,
    ClientConfig,
    ErrorPolicy,
    ModelsResponse,
    SwitchModelResponse,
    UnifiedAiRequest,
    UnifiedAiResponse,
)

logger = logging.getLogger(__name__)

UNIFIED_ENDPOINT = "/ai/unified"


class AssistClient:
    """
    Client for the document backend's AI endpoints.

    One AssistClient holds one httpx.AsyncClient; every stream session
    it opens shares the connection pool but nothing else.

    Attributes:
        config: Resolved client configuration
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        auth_token: Optional[str] = None,
        auth_scheme: Optional[str] = None,
        timeout: float = 120.0,
        headers: Optional[dict[str, str]] = None,
        error_policy: ErrorPolicy = "continue",
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the AssistClient.

        Either pass a ClientConfig or the individual settings.

        Args:
            base_url: Base URL of the backend API (trailing slash removed)
            auth_token: Opaque credential for the Authorization header
            auth_scheme: Optional scheme prefix for the credential
            timeout: Request timeout in seconds (default 120)
            headers: Optional default headers for all requests
            error_policy: Handling of error payloads in streams
            config: Complete configuration, used instead of the above
            transport: Optional httpx transport (e.g. for testing)
        """
        if config is None:
            if base_url is None:
                raise ValueError("base_url or config is required")
            config = ClientConfig(
                base_url=base_url,
                auth_token=auth_token,
                auth_scheme=auth_scheme,
                timeout=timeout,
                headers=headers or {},
                error_policy=error_policy,
            )
        self.config = config
        self._http = httpx.AsyncClient(timeout=config.timeout, transport=transport)

    @classmethod
    def from_env(cls, prefix: str = "ASSIST_", **overrides: Any) -> "AssistClient":
        """
        Create a client configured from environment variables.

        Args:
            prefix: Environment variable prefix (see ClientConfig.from_env)
            **overrides: Config values that take precedence

        Returns:
            AssistClient instance
        """
        return cls(config=ClientConfig.from_env(prefix, **overrides))

    @property
    def base_url(self) -> str:
        return self.config.base_url

    async def close(self) -> None:
        """
        Close the HTTP client and release resources.

        Should be called when done with the client, or use
        the async context manager pattern.
        """
        await self._http.aclose()

    async def __aenter__(self) -> "AssistClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args) -> None:
        """Exit async context manager and close resources."""
        await self.close()

    def open_stream(
        self,
        request: UnifiedAiRequest,
        *,
        endpoint: str = UNIFIED_ENDPOINT,
        headers: Optional[dict[str, str]] = None,
        error_policy: Optional[ErrorPolicy] = None,
    ) -> StreamSession:
        """
        Create a stream session for a unified AI request.

        Nothing is sent until the session is run or iterated.

        Args:
            request: Task parameters; "stream": true is always sent
            endpoint: API endpoint path
            headers: Optional headers for this request
            error_policy: Overrides the configured error policy

        Returns:
            A new StreamSession
        """
        body = request.model_dump(by_alias=True, exclude_none=True)
        stream_request = build_stream_request(self.config, endpoint, body, headers)
        return StreamSession(
            self._http,
            stream_request,
            error_policy=error_policy or self.config.error_policy,
        )

    async def stream_unified(
        self,
        request: UnifiedAiRequest,
        callback: StreamCallback,
        **kwargs: Any,
    ) -> StreamSession:
        """
        Run a streaming unified AI request to completion.

        Args:
            request: Task parameters
            callback: Called as callback(text, is_complete)
            **kwargs: Passed to open_stream()

        Returns:
            The finished StreamSession

        Raises:
            StreamTransportError: If the server returned a non-2xx status
            StreamPayloadError: If an error payload arrives under the
                "raise" policy
            httpx.TransportError: If the network fails
        """
        session = self.open_stream(request, **kwargs)
        try:
            await session.run(callback)
        except Exception:
            logger.exception("Streaming AI call failed: %s", session.request.endpoint)
            raise
        return session

    async def request(
        self,
        endpoint: str,
        *,
        method: str = "POST",
        body: Optional[dict] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        Make a JSON request to the backend.

        Args:
            endpoint: API endpoint path (will be appended to base_url)
            method: HTTP method (default POST)
            body: Optional JSON body for the request
            headers: Optional headers to add to this request

        Returns:
            Parsed JSON response from the server

        Raises:
            httpx.HTTPStatusError: If the server returned an error status
        """
        url = f"{self.base_url}{endpoint}"
        response = await self._http.request(
            method,
            url,
            json=body,
            headers=build_headers(self.config, headers),
        )
        response.raise_for_status()
        return response.json()

    async def unified(self, request: UnifiedAiRequest) -> UnifiedAiResponse:
        """
        Run a unified AI request without streaming.

        Args:
            request: Task parameters; stream is forced off

        Returns:
            UnifiedAiResponse with the complete result
        """
        body = request.model_dump(by_alias=True, exclude_none=True)
        body["stream"] = False
        data = await self.request(UNIFIED_ENDPOINT, body=body)
        return UnifiedAiResponse.model_validate(data)

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """
        Send one message of a multi-turn conversation.

        Args:
            request: Message and session id

        Returns:
            ChatResponse with the model's reply
        """
        data = await self.request(
            "/ai/chat", body=request.model_dump(by_alias=True, exclude_none=True)
        )
        return ChatResponse.model_validate(data)

    async def get_models(self) -> ModelsResponse:
        """Return the models the backend offers and the current default."""
        data = await self.request("/ai/models", method="GET")
        return ModelsResponse.model_validate(data)

    async def switch_model(self, model_name: str) -> SwitchModelResponse:
        """
        Switch the backend's current model.

        Args:
            model_name: Model identifier from get_models()

        Returns:
            SwitchModelResponse describing the outcome
        """
        data = await self.request("/ai/switch-model", body={"modelName": model_name})
        return SwitchModelResponse.model_validate(data)

    async def continue_writing(self, prompt: str) -> AiResponse:
        """
        Ask the backend to continue the given text.

        Args:
            prompt: Text to continue from

        Returns:
            AiResponse with the generated continuation
        """
        data = await self.request("/ai/continue", body={"prompt": prompt})
        return AiResponse.model_validate(data)

    async def polish_text(self, text: str) -> AiResponse:
        """
        Ask the backend to polish a passage.

        Args:
            text: Passage to rewrite

        Returns:
            AiResponse with the polished text
        """
        data = await self.request("/ai/polish", body={"text": text})
        return AiResponse.model_validate(data)

    async def summarize_text(self, text: str) -> AiResponse:
        """
        Ask the backend for a summary of a passage.

        Args:
            text: Passage to summarize

        Returns:
            AiResponse with the summary
        """
        data = await self.request("/ai/summarize", body={"text": text})
        return AiResponse.model_validate(data)

    def build_unified_request(
        self,
        function_type: AiFunctionType,
        document: str,
        selection_start: int,
        selection_end: int,
        *,
        user_requirement: str = "",
        cursor_position: Optional[int] = None,
        model_name: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> UnifiedAiRequest:
        """
        Build a UnifiedAiRequest from a document and a selection.

        Fills in the document summary, the selected text and the
        sentence-aligned context around it.

        Args:
            function_type: Assist task to run
            document: Full document text
            selection_start: Selection start offset
            selection_end: Selection end offset
            user_requirement: Free-text instruction
            cursor_position: Cursor offset (defaults to selection_end)
            model_name: Optional model override
            session_id: Optional multi-turn session id

        Returns:
            UnifiedAiRequest ready to send
        """
        selection = get_smart_text_selection(document, selection_start, selection_end)
        return UnifiedAiRequest(
            function_type=function_type,
            document_summary=generate_document_summary(document),
            user_requirement=user_requirement,
            selected_text=selection.text,
            context_text=selection.context_before + selection.context_after,
            cursor_position=selection_end if cursor_position is None else cursor_position,
            model_name=model_name,
            session_id=session_id,
        )


__all__ = ["AssistClient", "UNIFIED_ENDPOINT"]
