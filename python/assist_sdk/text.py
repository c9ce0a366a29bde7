"""
Location: python/assist_sdk/text.py

Summary:
    Pure helpers for building AI-assist requests from a document:
    selection context extraction, a short document summary, and
    session identifiers for multi-turn conversations.

Usage:
    Used by callers (and AssistClient.build_unified_request) to fill in
    the contextual fields of a UnifiedAiRequest.

Example:
    from assist_sdk.text import get_smart_text_selection

    selection = get_smart_text_selection(document, 120, 180)
    context = selection.context_before + selection.context_after
"""

import random
import string
import time

from .types import TextSelection


SENTENCE_BOUNDARIES = frozenset("。！？.!?\n")

SUMMARY_MAX_LENGTH = 200
SUMMARY_EDGE_LENGTH = 100

_BASE36 = string.digits + string.ascii_lowercase


def get_smart_text_selection(
    full_text: str,
    selection_start: int,
    selection_end: int,
    context_size: int = 300,
) -> TextSelection:
    """
    Extract a selection plus surrounding context.

    The context window extends up to context_size characters on each
    side of the selection and is narrowed to the sentence boundary
    closest to the selection, so the context does not start or end
    mid-sentence.

    Args:
        full_text: The whole document
        selection_start: Selection start offset
        selection_end: Selection end offset
        context_size: Maximum context length on each side

    Returns:
        TextSelection with the selected text and its context
    """
    context_start = max(0, selection_start - context_size)
    context_end = min(len(full_text), selection_end + context_size)

    adjusted_start = context_start
    for i in range(selection_start - 1, context_start - 1, -1):
        if full_text[i] in SENTENCE_BOUNDARIES:
            adjusted_start = i + 1
            break

    adjusted_end = context_end
    for i in range(selection_end, context_end):
        if full_text[i] in SENTENCE_BOUNDARIES:
            adjusted_end = i + 1
            break

    return TextSelection(
        start=selection_start,
        end=selection_end,
        text=full_text[selection_start:selection_end],
        context_before=full_text[adjusted_start:selection_start],
        context_after=full_text[selection_end:adjusted_end],
    )


def generate_document_summary(text: str) -> str:
    """Summarize a document as its first and last 100 characters."""
    if len(text) <= SUMMARY_MAX_LENGTH:
        return text
    return f"{text[:SUMMARY_EDGE_LENGTH]}...{text[-SUMMARY_EDGE_LENGTH:]}"


def generate_session_id() -> str:
    """Return a new session id: session_<epoch millis>_<9 base36 chars>."""
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"session_{int(time.time() * 1000)}_{suffix}"
