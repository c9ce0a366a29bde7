"""
Location: python/assist_sdk/transport.py

Summary:
    HTTP transport helpers for the AI endpoints. Builds the request
    headers (credential, content negotiation) and the immutable
    StreamRequest for a streaming call.

Usage:
    Used by client.py to build the default headers of every request and
    the StreamRequest handed to a StreamSession.

Example:
    from assist_sdk.transport import build_stream_request

    stream_request = build_stream_request(config, "/ai/unified", body)
"""

import json
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

from .types import ClientConfig, StreamRequest


# Header names used by the AI endpoints
ASSIST_HEADERS = {
    "AUTHORIZATION": "Authorization",
    "ACCEPT": "Accept",
    "CONTENT_TYPE": "Content-Type",
    "CACHE_CONTROL": "Cache-Control",
}

EVENT_STREAM = "text/event-stream"
JSON_CONTENT = "application/json"


def authorization_value(token: Optional[str], scheme: Optional[str] = None) -> Optional[str]:
    """
    Format the Authorization header value.

    The backend accepts the raw token; a scheme such as "Bearer" is
    prepended only when configured.

    Args:
        token: Opaque credential, or None
        scheme: Optional auth scheme

    Returns:
        Header value, or None when there is no token
    """
    if not token:
        return None
    if scheme:
        return f"{scheme} {token}"
    return token


def build_headers(config: ClientConfig, extra: Optional[dict] = None) -> dict:
    """
    Build headers for a JSON request.

    Args:
        config: Client configuration (credential and default headers)
        extra: Per-request headers, applied last

    Returns:
        New headers dict
    """
    headers = {ASSIST_HEADERS["CONTENT_TYPE"]: JSON_CONTENT}
    headers.update(config.headers)

    auth = authorization_value(config.auth_token, config.auth_scheme)
    if auth:
        headers[ASSIST_HEADERS["AUTHORIZATION"]] = auth

    if extra:
        headers.update(extra)
    return headers


def build_stream_headers(config: ClientConfig, extra: Optional[dict] = None) -> dict:
    """
    Build headers for a streaming request.

    Same as build_headers, plus Accept: text/event-stream and
    Cache-Control: no-cache.

    Args:
        config: Client configuration
        extra: Per-request headers, applied last

    Returns:
        New headers dict
    """
    headers = build_headers(config)
    headers[ASSIST_HEADERS["ACCEPT"]] = EVENT_STREAM
    headers[ASSIST_HEADERS["CACHE_CONTROL"]] = "no-cache"
    if extra:
        headers.update(extra)
    return headers


def build_stream_request(
    config: ClientConfig,
    endpoint: str,
    body: dict,
    headers: Optional[dict] = None,
    method: str = "POST",
) -> StreamRequest:
    """
    Build the immutable request for one streaming session.

    The body always carries "stream": true.

    Args:
        config: Client configuration
        endpoint: API path appended to config.base_url
        body: JSON-serializable payload
        headers: Optional per-request headers
        method: HTTP method (default POST)

    Returns:
        StreamRequest ready to be issued
    """
    payload = {**body, "stream": True}
    return StreamRequest(
        endpoint=f"{config.base_url}{endpoint}",
        method=method,
        headers=build_stream_headers(config, headers),
        body=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
    )


def is_event_stream(response: "httpx.Response") -> bool:
    """
    Check whether a response declares an event-stream body.

    Args:
        response: The httpx response to check

    Returns:
        True if Content-Type is text/event-stream
    """
    content_type = response.headers.get("content-type", "")
    return EVENT_STREAM in content_type
