"""
Location: python/assist_sdk/session.py

Summary:
    StreamSession owns the lifetime of one streaming request: it issues
    the HTTP request, pulls the response body chunk by chunk through an
    EventParser, delivers events to the caller, and tears everything
    down on completion, [DONE], error or cancellation.

Usage:
    Sessions are created by AssistClient.open_stream(). Each session is
    independent, so several can run concurrently.

Example:
    session = client.open_stream(request)

    def on_chunk(text: str, is_complete: bool) -> None:
        if is_complete:
            print("done")
        else:
            print(text)

    task = asyncio.create_task(session.run(on_chunk))
    ...
    session.cancel()  # optional, aborts the transfer
    await task
"""

import asyncio
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

import httpx

from .stream import EventParser
from .transport import is_event_stream
from .types import ErrorPolicy, StreamEvent, StreamRequest

logger = logging.getLogger(__name__)

StreamCallback = Callable[[str, bool], None]

# Returned by _abortable when cancel() won the race against the operation
_ABORTED = object()


class StreamError(Exception):
    """Base exception for streaming failures."""
    pass


class StreamTransportError(StreamError):
    """
    Exception raised when the server answers with a non-2xx status.

    Attributes:
        status_code: HTTP status of the response
        body: Response body text
    """

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP error! status: {status_code}")


class MissingStreamBodyError(StreamError):
    """Exception raised when the response carries no readable body."""
    pass


class StreamPayloadError(StreamError):
    """
    Exception raised for an error payload under the "raise" policy.

    Attributes:
        event: The error event that ended the session
    """

    def __init__(self, event: StreamEvent):
        self.event = event
        super().__init__(event.error_message or event.text)


class SessionStateError(StreamError):
    """Exception raised when a session is started more than once."""
    pass


class StreamSession:
    """
    One streaming request/response exchange.

    The read loop is strictly sequential: read, decode, extract, deliver,
    then read again. Every awaited network step is tracked so cancel()
    can abort it immediately instead of waiting for the next chunk.

    Attributes:
        request: The immutable request this session issues
        error_policy: Handling of error payloads ("continue", "raise",
                      "deliver")
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        request: StreamRequest,
        error_policy: ErrorPolicy = "continue",
    ):
        """
        Initialize the session. No I/O happens until events() or run().

        Args:
            http: Shared httpx client used to send the request
            request: Request to issue
            error_policy: Handling of error payloads
        """
        self.request = request
        self.error_policy = error_policy
        self._http = http
        self._started = False
        self._cancelled = False
        self._closed = False
        self._response: Optional[httpx.Response] = None
        self._abort_event: Optional[asyncio.Event] = None

    @property
    def cancelled(self) -> bool:
        """True once cancel() or disconnect() took effect."""
        return self._cancelled

    @property
    def closed(self) -> bool:
        """True once the session has been torn down."""
        return self._closed

    def cancel(self) -> None:
        """
        Cancel the session.

        Aborts the in-flight request or body read, stops decoding, and
        lets the read loop release the response. Safe to call at any
        time and any number of times.
        """
        self._abort("cancelled")

    def disconnect(self) -> None:
        """
        Handle a transport-level disconnect of the consumer.

        Aborts the transfer the same way cancel() does.
        """
        self._abort("disconnected")

    def _abort(self, reason: str) -> None:
        if self._cancelled or self._closed:
            return
        self._cancelled = True
        logger.info("Stream session %s: %s", reason, self.request.endpoint)
        if self._abort_event is not None:
            self._abort_event.set()

    async def run(self, callback: StreamCallback) -> None:
        """
        Drive the session and deliver text to a callback.

        The callback receives (text, False) for every chunk in order and
        exactly one final ("", True) when the stream ends through [DONE],
        end of body, or cancellation. When the session fails, the
        exception propagates and no final callback is made.

        Args:
            callback: Called as callback(text, is_complete)

        Raises:
            StreamTransportError: If the server returned a non-2xx status
            MissingStreamBodyError: If the response has no body
            StreamPayloadError: If an error payload arrives under the
                "raise" policy
            httpx.TransportError: If the network fails
        """
        events = self.events()
        try:
            async for event in events:
                if event.kind == "chunk":
                    callback(event.text, False)
        finally:
            # Releases the response if the callback raised
            await events.aclose()
        callback("", True)

    async def events(self) -> AsyncIterator[StreamEvent]:
        """
        Issue the request and yield events as they are decoded.

        Yields chunk and error events in arrival order and ends with one
        done event, unless the session is cancelled (iteration just stops)
        or fails (the exception propagates). Can only be iterated once.

        Yields:
            StreamEvent objects

        Raises:
            SessionStateError: If the session was already started
        """
        if self._started:
            raise SessionStateError("Stream session already started")
        self._started = True
        self._abort_event = asyncio.Event()

        chunks = None
        try:
            if self._cancelled:
                return

            result = await self._abortable(
                self._http.send(self._build_request(), stream=True)
            )
            if result is _ABORTED:
                return
            response: httpx.Response = result
            self._response = response
            await self._check_response(response)

            parser = EventParser()
            chunks = response.aiter_bytes()
            while not parser.finished:
                if self._cancelled:
                    return
                chunk = await self._abortable(_next_chunk(chunks))
                if chunk is _ABORTED:
                    return
                events = parser.finish() if chunk is None else parser.feed(chunk)
                for event in events:
                    if self._cancelled:
                        return
                    if event.kind == "error":
                        event = self._apply_error_policy(event)
                    yield event
        finally:
            if chunks is not None:
                await chunks.aclose()
            await self._close()

    def _apply_error_policy(self, event: StreamEvent) -> StreamEvent:
        if self.error_policy == "raise":
            raise StreamPayloadError(event)
        if self.error_policy == "deliver":
            return event.model_copy(update={"kind": "chunk"})
        logger.warning("Error payload in stream, continuing: %.200s", event.text)
        return event

    async def _abortable(self, awaitable: Awaitable[Any]) -> Any:
        operation = asyncio.ensure_future(awaitable)
        abort = asyncio.ensure_future(self._abort_event.wait())
        try:
            await asyncio.wait({operation, abort}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            abort.cancel()
            if not operation.done():
                operation.cancel()
                # The body iterator must be idle before it can be closed
                await asyncio.wait({operation})
        if operation.cancelled():
            return _ABORTED
        return operation.result()

    def _build_request(self) -> httpx.Request:
        return self._http.build_request(
            self.request.method,
            self.request.endpoint,
            headers=self.request.headers,
            content=self.request.body,
        )

    async def _check_response(self, response: httpx.Response) -> None:
        if response.is_error:
            await response.aread()
            raise StreamTransportError(response.status_code, response.text)
        if response.status_code == 204 or response.headers.get("content-length") == "0":
            raise MissingStreamBodyError("No response body")
        if not is_event_stream(response):
            logger.debug(
                "Unexpected content type for stream: %s",
                response.headers.get("content-type"),
            )

    async def _close(self) -> None:
        self._closed = True
        response, self._response = self._response, None
        if response is not None:
            await response.aclose()
        logger.debug("Stream session closed: %s", self.request.endpoint)


async def _next_chunk(chunks: AsyncIterator[bytes]) -> Optional[bytes]:
    try:
        return await chunks.__anext__()
    except StopAsyncIteration:
        return None
