"""
Location: python/assist_sdk/types.py

Summary:
    Pydantic models for assist-sdk. Defines the wire payloads of the
    document backend's AI endpoints, the streaming request and event
    types, and the ClientConfig used to configure AssistClient.

Usage:
    These models are imported and used by client.py, session.py,
    stream.py, transport.py and text.py. Wire payloads use camelCase
    aliases (functionType, sessionID, ...) while Python code uses
    snake_case attribute names.

Example:
    from assist_sdk.types import UnifiedAiRequest

    request = UnifiedAiRequest(
        function_type="polish",
        user_requirement="Make it more formal",
        selected_text="hey there",
    )
"""

import os
from typing import Any, Literal, Optional
from pydantic import BaseModel, Field, field_validator


AiFunctionType = Literal["continue", "polish", "summarize", "generate", "expand"]

ErrorPolicy = Literal["continue", "raise", "deliver"]


class ClientConfig(BaseModel):
    """
    Configuration for AssistClient.

    Attributes:
        base_url: Base URL of the backend API (trailing slash removed)
        auth_token: Opaque credential sent in the Authorization header
        auth_scheme: Optional scheme prefix (e.g. "Bearer"); the raw token
                     is sent when unset
        timeout: Request timeout in seconds
        headers: Extra headers included on every request
        error_policy: What a stream session does with an error payload:
                      "continue" logs and skips it, "raise" ends the session
                      with StreamPayloadError, "deliver" hands it to the
                      callback as ordinary chunk text
    """
    base_url: str = Field(alias="baseUrl")
    auth_token: Optional[str] = Field(None, alias="authToken")
    auth_scheme: Optional[str] = Field(None, alias="authScheme")
    timeout: float = 120.0
    headers: dict[str, str] = Field(default_factory=dict)
    error_policy: ErrorPolicy = Field("continue", alias="errorPolicy")

    model_config = {"populate_by_name": True}

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_env(cls, prefix: str = "ASSIST_", **overrides: Any) -> "ClientConfig":
        """
        Build a config from environment variables.

        Reads {prefix}BASE_URL, {prefix}AUTH_TOKEN, {prefix}AUTH_SCHEME,
        {prefix}TIMEOUT and {prefix}ERROR_POLICY. Keyword overrides win
        over the environment; unset variables fall back to defaults.

        Args:
            prefix: Environment variable prefix
            **overrides: Field values that take precedence

        Returns:
            ClientConfig instance
        """
        values: dict[str, Any] = {}
        for field_name in ("base_url", "auth_token", "auth_scheme", "timeout", "error_policy"):
            raw = os.environ.get(f"{prefix}{field_name.upper()}")
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)


class StreamRequest(BaseModel):
    """
    One outbound streaming request. Immutable once issued.

    Attributes:
        endpoint: Absolute URL of the streaming endpoint
        method: HTTP method
        headers: Request headers, including the credential and
                 Accept: text/event-stream
        body: Serialized JSON request payload
    """
    endpoint: str
    method: str = "POST"
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    model_config = {"frozen": True}


class StreamEvent(BaseModel):
    """
    A semantic event extracted from one `data: ` line.

    Attributes:
        kind: "chunk" for content, "error" for an error-indicator payload,
              "done" for the [DONE] sentinel or end of stream
        text: Raw line remainder after the `data: ` prefix (empty for done)
        data: Decoded JSON value when structured decode succeeded
    """
    kind: Literal["chunk", "error", "done"]
    text: str = ""
    data: Optional[Any] = None

    @property
    def error_message(self) -> Optional[str]:
        """Error text carried by an error payload, if any."""
        if self.kind != "error" or not isinstance(self.data, dict):
            return None
        error = self.data.get("error") or self.data.get("message")
        return str(error) if error else None


class UnifiedAiRequest(BaseModel):
    """
    Request body of the unified AI endpoint.

    Attributes:
        function_type: Assist task to run
        document_summary: Short summary of the whole document
        user_requirement: Free-text instruction from the user
        selected_text: Text the user selected
        context_text: Text surrounding the selection
        cursor_position: Cursor offset in the document
        model_name: Optional model to use instead of the backend default
        session_id: Optional session for multi-turn continuation
        stream: Whether the backend should stream the result
    """
    function_type: AiFunctionType = Field(alias="functionType")
    document_summary: str = Field("", alias="documentSummary")
    user_requirement: str = Field("", alias="userRequirement")
    selected_text: str = Field("", alias="selectedText")
    context_text: str = Field("", alias="contextText")
    cursor_position: int = Field(0, alias="cursorPosition")
    model_name: Optional[str] = Field(None, alias="modelName")
    session_id: Optional[str] = Field(None, alias="sessionID")
    stream: bool = False

    model_config = {"populate_by_name": True}


class UnifiedAiResponse(BaseModel):
    """Non-streaming result of the unified AI endpoint."""
    result: str
    function_type: AiFunctionType = Field(alias="functionType")
    model_name: str = Field(alias="modelName")

    model_config = {"populate_by_name": True}


class ChatRequest(BaseModel):
    """Multi-turn chat message."""
    message: str
    session_id: str = Field(alias="sessionID")
    model_name: Optional[str] = Field(None, alias="modelName")

    model_config = {"populate_by_name": True}


class ChatResponse(BaseModel):
    result: str
    model_name: str = Field(alias="modelName")

    model_config = {"populate_by_name": True}


class AiResponse(BaseModel):
    """Result of the legacy continue/polish/summarize endpoints."""
    result: str


class AiModelInfo(BaseModel):
    """
    A model the backend can route requests to.

    Attributes:
        name: Model identifier used in requests
        display_name: Human readable name
        provider: Upstream provider name
        description: Short description
        max_tokens: Maximum output tokens
        is_available: Whether the backend has credentials for it
    """
    name: str
    display_name: str = Field("", alias="displayName")
    provider: str = ""
    description: str = ""
    max_tokens: int = Field(0, alias="maxTokens")
    is_available: bool = Field(False, alias="isAvailable")

    model_config = {"populate_by_name": True}


class ModelsResponse(BaseModel):
    models: list[AiModelInfo]
    current: str


class SwitchModelResponse(BaseModel):
    success: bool
    message: str = ""
    model_name: str = Field("", alias="modelName")

    model_config = {"populate_by_name": True}


class TextSelection(BaseModel):
    """
    A selection within a document plus its surrounding context.

    Attributes:
        start: Selection start offset
        end: Selection end offset
        text: Selected text
        context_before: Context preceding the selection
        context_after: Context following the selection
    """
    start: int
    end: int
    text: str
    context_before: str = Field("", alias="contextBefore")
    context_after: str = Field("", alias="contextAfter")

    model_config = {"populate_by_name": True}
