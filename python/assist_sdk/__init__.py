"""
Location: python/assist_sdk/__init__.py

Summary:
    Main package initialization for assist-sdk. Exports all public classes
    and functions for convenient importing.

Usage:
    from assist_sdk import AssistClient, UnifiedAiRequest, StreamSession

    # Or import specific modules
    from assist_sdk.stream import EventParser, LineDecoder
    from assist_sdk.text import get_smart_text_selection

Version: 0.1.0
"""

import logging

from .client import AssistClient
from .types import (
    ClientConfig,
    StreamRequest,
    StreamEvent,
    UnifiedAiRequest,
    UnifiedAiResponse,
    ChatRequest,
    ChatResponse,
    AiResponse,
    AiModelInfo,
    ModelsResponse,
    SwitchModelResponse,
    TextSelection,
)
from .session import (
    StreamSession,
    StreamCallback,
    StreamError,
    StreamTransportError,
    MissingStreamBodyError,
    StreamPayloadError,
    SessionStateError,
)
from .stream import EventParser, LineDecoder, extract_event
from .text import generate_document_summary, generate_session_id, get_smart_text_selection

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Main client
    "AssistClient",
    # Types
    "ClientConfig",
    "StreamRequest",
    "StreamEvent",
    "UnifiedAiRequest",
    "UnifiedAiResponse",
    "ChatRequest",
    "ChatResponse",
    "AiResponse",
    "AiModelInfo",
    "ModelsResponse",
    "SwitchModelResponse",
    "TextSelection",
    # Streaming session
    "StreamSession",
    "StreamCallback",
    # Exceptions
    "StreamError",
    "StreamTransportError",
    "MissingStreamBodyError",
    "StreamPayloadError",
    "SessionStateError",
    # Stream parsing
    "EventParser",
    "LineDecoder",
    "extract_event",
    # Text helpers
    "get_smart_text_selection",
    "generate_document_summary",
    "generate_session_id",
]
