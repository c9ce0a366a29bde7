"""
Location: python/assist_sdk/stream.py

Summary:
    Incremental Server-Sent Events (SSE) parsing for streaming responses.
    LineDecoder turns arbitrarily split byte chunks into complete text
    lines, extract_event classifies one line, and EventParser combines
    the two into a per-session parser.

Usage:
    Used by session.py, which feeds every chunk read from the HTTP
    response body into an EventParser and forwards the resulting events.

Example:
    from assist_sdk.stream import EventParser

    parser = EventParser()
    for chunk in (b'data: {"v":"A"}\\n', b"data: [DONE]\\n"):
        for event in parser.feed(chunk):
            print(event.kind, event.text)
"""

import codecs
import json
import logging
from typing import Optional

from .types import StreamEvent

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class LineDecoder:
    """
    Reassemble text lines from a chunked byte stream.

    Chunk boundaries need not line up with line or character boundaries.
    Bytes are decoded with an incremental decoder so a multi-byte
    character split across two chunks decodes once both halves arrive.

    Attributes:
        buffer: Trailing fragment not yet terminated by a newline
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self.buffer = ""

    def feed(self, chunk: bytes) -> list[str]:
        """
        Add a chunk and return the lines it completed.

        Args:
            chunk: Raw bytes as read from the response body

        Returns:
            Complete lines without their terminators, in order
        """
        self.buffer += self._decoder.decode(chunk)
        return self._split()

    def flush(self) -> list[str]:
        """
        Signal end of input and return any remaining text as a last line.

        Returns:
            The final unterminated line, or an empty list
        """
        self.buffer += self._decoder.decode(b"", final=True)
        lines = self._split()
        if self.buffer:
            lines.append(_strip_cr(self.buffer))
        self.buffer = ""
        return lines

    def _split(self) -> list[str]:
        *lines, self.buffer = self.buffer.split("\n")
        return [_strip_cr(line) for line in lines]


def _strip_cr(line: str) -> str:
    # CRLF terminators leave a trailing \r after splitting on \n
    return line[:-1] if line.endswith("\r") else line


def extract_event(line: str) -> Optional[StreamEvent]:
    """
    Classify one complete line of an SSE stream.

    Lines without the exact `data: ` prefix (comments, keep-alives,
    event/id fields, blank separators) produce no event. The [DONE]
    sentinel produces a done event. Anything else is a chunk; when the
    remainder decodes as JSON the value is attached, when it does not
    the raw text is still delivered. JSON objects carrying an error
    indicator become error events.

    Args:
        line: A complete line without its terminator

    Returns:
        StreamEvent, or None for lines that carry no data
    """
    if not line.startswith(DATA_PREFIX):
        if line:
            logger.debug("Skipping non-data line: %.80s", line)
        return None

    text = line[len(DATA_PREFIX):]
    if text == DONE_SENTINEL:
        return StreamEvent(kind="done")

    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        # Plain text and too deeply nested payloads are delivered as-is
        return StreamEvent(kind="chunk", text=text)

    if _is_error_payload(data):
        return StreamEvent(kind="error", text=text, data=data)
    return StreamEvent(kind="chunk", text=text, data=data)


def _is_error_payload(data: object) -> bool:
    if not isinstance(data, dict):
        return False
    return bool(data.get("error")) or data.get("type") == "error"


class EventParser:
    """
    Per-session parser from response bytes to StreamEvents.

    Once the [DONE] sentinel has been seen the parser is finished: the
    rest of the current read and any later input are ignored.

    Attributes:
        finished: True after a done event has been produced
    """

    def __init__(self, encoding: str = "utf-8"):
        self._lines = LineDecoder(encoding)
        self.finished = False

    def feed(self, chunk: bytes) -> list[StreamEvent]:
        """
        Parse one chunk of the response body.

        Args:
            chunk: Raw bytes from the transport

        Returns:
            Events completed by this chunk; a done event, if present, is last
        """
        if self.finished:
            return []
        return self._extract(self._lines.feed(chunk))

    def finish(self) -> list[StreamEvent]:
        """
        Flush at end of input.

        Treats a non-empty trailing fragment as a final line and always
        ends with exactly one done event unless one was already produced.

        Returns:
            Remaining events, ending with done
        """
        if self.finished:
            return []
        events = self._extract(self._lines.flush())
        if not self.finished:
            self.finished = True
            events.append(StreamEvent(kind="done"))
        return events

    def _extract(self, lines: list[str]) -> list[StreamEvent]:
        events: list[StreamEvent] = []
        for line in lines:
            event = extract_event(line)
            if event is None:
                continue
            events.append(event)
            if event.kind == "done":
                self.finished = True
                break
        return events
