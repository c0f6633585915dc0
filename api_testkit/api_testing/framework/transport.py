"""
================================================================================
HTTP Transport
================================================================================

The injected capability the API client sends requests through.

    - RequestSpec: one immutable outbound request (built per attempt)
    - TransportResponse: raw status, headers and text of a received response
    - TransportError: network-level failure (the only retryable failure)
    - HttpxTransport: default implementation backed by httpx

Any object with ``send(spec) -> TransportResponse`` and ``close()`` can stand
in for HttpxTransport, which keeps the client testable without a network.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol

import httpx


class ApiClientError(Exception):
    """Base exception for API client errors."""
    pass


class TransportError(ApiClientError):
    """
    Raised when no response was received (DNS, connection, timeout).

    Attributes:
        original: The underlying library exception, if any
    """

    def __init__(self, message: str, original: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.original = original


@dataclass(frozen=True)
class RequestSpec:
    """A single outbound request, immutable once built."""
    method: str
    url: str
    headers: Mapping[str, str]
    body: Any = None
    timeout_ms: int = 30000


@dataclass(frozen=True)
class TransportResponse:
    """A response as received from the wire, body still undecoded."""
    status_code: int
    status_text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    text: str = ""


class Transport(Protocol):
    """Capability required by ApiClient."""

    def send(self, spec: RequestSpec) -> TransportResponse:
        ...

    def close(self) -> None:
        ...


class HttpxTransport:
    """
    Transport backed by a single httpx.Client.

    Usage:
        >>> transport = HttpxTransport()
        >>> response = transport.send(RequestSpec("GET", "https://example.com", {}))
        >>> transport.close()
    """

    def __init__(self, transport: Optional[httpx.BaseTransport] = None) -> None:
        """
        Args:
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self._client = httpx.Client(transport=transport)

    def send(self, spec: RequestSpec) -> TransportResponse:
        """
        Send one request.

        Raises:
            TransportError: When the request could not be completed
        """
        try:
            response = self._client.request(
                spec.method,
                spec.url,
                headers=dict(spec.headers),
                content=_encode_body(spec.body),
                timeout=httpx.Timeout(spec.timeout_ms / 1000),
            )
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request timed out after {spec.timeout_ms} ms: {e}", original=e
            ) from e
        except httpx.TransportError as e:
            raise TransportError(f"Network error: {e}", original=e) from e

        return TransportResponse(
            status_code=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            text=response.text,
        )

    def close(self) -> None:
        self._client.close()


def _encode_body(body: Any) -> Optional[bytes]:
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body, ensure_ascii=False).encode("utf-8")


__all__ = [
    "ApiClientError",
    "HttpxTransport",
    "RequestSpec",
    "Transport",
    "TransportError",
    "TransportResponse",
]
