"""
================================================================================
API Client with Bounded Retry and Allure Integration
================================================================================

The request engine every API test and service goes through:
    - URL building from the configured base URL
    - JSON default headers plus bearer token injection
    - Bounded retry on network-level failures only
    - Uniform ApiResult for every received response (any status code)
    - Allure reporting with redacted headers/body and cURL generation

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

import allure
from allure_commons.types import AttachmentType
from loguru import logger

from .config_loader import ApiSettings
from .token_manager import TokenManager
from .transport import (
    HttpxTransport,
    RequestSpec,
    Transport,
    TransportError,
    TransportResponse,
)


# Maximum response length to include in Allure reports
MAX_RESPONSE_LENGTH = 3000

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

SENSITIVE_HEADERS = {"authorization", "x-api-key", "x-app-auth", "cookie", "set-cookie"}
SENSITIVE_FIELDS = ("password", "secret", "token", "api_key", "authorization", "session")
MASK = "***MASKED***"


@dataclass(frozen=True)
class RequestOptions:
    """
    Per-call request options.

    Attributes:
        headers: Extra headers, overriding the JSON defaults
        params: Query parameters, serialized in insertion order
    """
    headers: Optional[Dict[str, str]] = None
    params: Optional[Dict[str, Any]] = None

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "RequestOptions":
        """
        Build options from a plain dict.

        Raises:
            ValueError: If the mapping contains keys other than headers/params
        """
        unknown = sorted(set(options) - {"headers", "params"})
        if unknown:
            raise ValueError(f"Unrecognized request options: {', '.join(unknown)}")
        return cls(headers=options.get("headers"), params=options.get("params"))


OptionsLike = Union[RequestOptions, Mapping[str, Any], None]


@dataclass(frozen=True)
class ApiResult:
    """
    Unified response shape for every completed HTTP exchange.

    Attributes:
        status_code: Literal HTTP status code
        status_text: Reason phrase
        headers: Response headers
        body: Decoded JSON, or the raw text when the body is not JSON
        elapsed_ms: Duration of the attempt that produced this response
    """
    status_code: int
    status_text: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    elapsed_ms: float = 0.0

    @property
    def data(self) -> Any:
        """Alias of body."""
        return self.body


class ApiClient:
    """
    API client with bounded retry and reporting.

    A received response is always returned, whatever its status code; tests
    assert on ``status_code``. Only a TransportError is retried, up to
    ``retry_attempts`` extra times, after which it is re-raised.

    Usage:
        >>> settings = ApiSettings.from_config(ConfigLoader())
        >>> with ApiClient(settings, TokenManager()) as client:
        ...     result = client.get("/objects", {"params": {"id": 3}})
        ...     print(result.status_code, result.data)
    """

    def __init__(
        self,
        settings: Optional[ApiSettings] = None,
        token_manager: Optional[TokenManager] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        """
        Initialize API client.

        Args:
            settings: Validated settings. Loaded from configuration if None.
            token_manager: Credential holder. A fresh one is created if None.
            transport: HTTP transport. HttpxTransport is used if None.
        """
        if settings is None:
            settings = ApiSettings.from_config()

        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")
        self.timeout_ms = settings.timeout_ms
        self.retry_attempts = settings.retry_attempts
        self.retry_backoff = settings.retry_backoff
        self.retry_max_wait = settings.retry_max_wait

        self.token_manager = token_manager if token_manager is not None else TokenManager()
        self.transport: Transport = transport if transport is not None else HttpxTransport()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying transport."""
        self.transport.close()

    def get(self, path: str, options: OptionsLike = None) -> ApiResult:
        """Execute GET request."""
        return self.request("GET", path, None, options)

    def post(self, path: str, payload: Any = None, options: OptionsLike = None) -> ApiResult:
        """Execute POST request."""
        return self.request("POST", path, payload, options)

    def put(self, path: str, payload: Any = None, options: OptionsLike = None) -> ApiResult:
        """Execute PUT request."""
        return self.request("PUT", path, payload, options)

    def patch(self, path: str, payload: Any = None, options: OptionsLike = None) -> ApiResult:
        """Execute PATCH request."""
        return self.request("PATCH", path, payload, options)

    def delete(self, path: str, options: OptionsLike = None) -> ApiResult:
        """Execute DELETE request."""
        return self.request("DELETE", path, None, options)

    def request(
        self,
        method: str,
        path: str,
        payload: Any = None,
        options: OptionsLike = None,
    ) -> ApiResult:
        """
        Execute one logical request with bounded retry.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            path: Request path, relative to the base URL
            payload: Request body (JSON-serializable, str or bytes)
            options: RequestOptions or a dict with headers/params

        Returns:
            ApiResult for the first response received

        Raises:
            TransportError: When every attempt failed at the network level
            ValueError: When options contain unrecognized keys
        """
        method = method.upper()
        opts = _coerce_options(options)
        url = self.build_url(path, opts.params)
        max_attempts = self.retry_attempts + 1

        last_error: Optional[TransportError] = None

        for attempt in range(max_attempts):
            spec = RequestSpec(
                method=method,
                url=url,
                headers=self.build_headers(opts.headers),
                body=payload,
                timeout_ms=self.timeout_ms,
            )
            logger.info(f"{method} {url} (attempt {attempt + 1}/{max_attempts})")
            logger.debug(
                f"Request headers: {self._redact_headers(spec.headers)} | "
                f"body: {self._redact_body(payload)}"
            )

            started = time.perf_counter()
            try:
                response = self.transport.send(spec)
            except TransportError as e:
                last_error = e
                logger.warning(
                    f"{method} {url} attempt {attempt + 1}/{max_attempts} failed: {e}"
                )
                if attempt < max_attempts - 1:
                    wait_time = self._calculate_backoff(attempt)
                    if wait_time > 0:
                        time.sleep(wait_time)
                continue

            elapsed_ms = (time.perf_counter() - started) * 1000
            result = self._handle_response(response, elapsed_ms)
            self._log_result(method, url, result)
            self._log_to_allure(spec, result)
            return result

        logger.error(
            f"{method} {url} failed after {max_attempts} attempts. Last error: {last_error}"
        )
        raise last_error

    def build_url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Join base URL and path with exactly one slash, then append query params.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        if params:
            query = urlencode([(str(k), _stringify(v)) for k, v in params.items()])
            url = f"{url}?{query}"
        return url

    def build_headers(self, custom_headers: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """JSON defaults, then custom headers, then the bearer token if any."""
        headers = dict(DEFAULT_HEADERS)
        if custom_headers:
            headers.update(custom_headers)
        return self.token_manager.apply(headers)

    def _handle_response(self, response: TransportResponse, elapsed_ms: float) -> ApiResult:
        try:
            body: Any = json.loads(response.text, parse_constant=_reject_constant)
        except (TypeError, ValueError, RecursionError):
            body = response.text

        return ApiResult(
            status_code=response.status_code,
            status_text=response.status_text,
            headers=dict(response.headers),
            body=body,
            elapsed_ms=elapsed_ms,
        )

    def _log_result(self, method: str, url: str, result: ApiResult) -> None:
        """Classify the status for logging only; the result is never altered."""
        status = result.status_code
        message = f"{method} {url} -> {status} ({result.elapsed_ms:.0f} ms)"
        if 200 <= status < 300:
            logger.info(f"API success: {message}")
        elif 400 <= status < 500:
            logger.warning(f"API client error: {message}")
        elif status >= 500:
            logger.error(f"API server error: {message}")
        else:
            logger.info(message)

    def _calculate_backoff(self, attempt: int) -> float:
        """
        Calculate exponential backoff wait time.

        Formula: base * (2 ^ attempt), capped at max_wait
        """
        wait_time = self.retry_backoff * (2 ** attempt)
        return min(wait_time, self.retry_max_wait)

    def _log_to_allure(self, spec: RequestSpec, result: ApiResult) -> None:
        """
        Log the exchange to the Allure report.

        Attaches:
            - Request URL
            - Request headers and body (redacted)
            - cURL command for reproduction
            - Response status
            - Response body (truncated if too long)
        """
        status_emoji = "✅" if result.status_code < 400 else "❌"
        step_title = f"{status_emoji} {spec.method} {spec.url} → {result.status_code}"

        with allure.step(step_title):
            allure.attach(
                spec.url,
                name="🔗 Request URL",
                attachment_type=AttachmentType.TEXT
            )

            safe_headers = self._redact_headers(spec.headers)
            if safe_headers:
                allure.attach(
                    json.dumps(safe_headers, ensure_ascii=False, indent=2),
                    name="📤 Request Headers",
                    attachment_type=AttachmentType.JSON
                )

            safe_body = self._redact_body(spec.body)
            if safe_body is not None:
                allure.attach(
                    _to_text(safe_body),
                    name="📤 Request Body",
                    attachment_type=AttachmentType.JSON
                )

            allure.attach(
                self._build_curl(spec.method, spec.url, safe_headers, safe_body),
                name="🔧 cURL Command",
                attachment_type=AttachmentType.TEXT
            )

            allure.attach(
                f"{status_emoji} {result.status_code} {result.status_text} "
                f"({result.elapsed_ms:.0f} ms)",
                name="📥 Response Status",
                attachment_type=AttachmentType.TEXT
            )

            response_content = _to_text(result.body) or "<empty>"
            if len(response_content) > MAX_RESPONSE_LENGTH:
                response_content = (
                    f"{response_content[:MAX_RESPONSE_LENGTH]}\n\n"
                    f"... [Truncated, full length: {len(response_content)} chars] ..."
                )

            allure.attach(
                response_content,
                name="📥 Response Body",
                attachment_type=AttachmentType.JSON
            )

    def _redact_headers(self, headers: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Mask sensitive header values before logging.
        """
        masked = {}
        for key, value in headers.items():
            if key.lower() in SENSITIVE_HEADERS:
                masked[key] = MASK
            else:
                masked[key] = value
        return masked

    def _redact_body(self, payload: Any) -> Any:
        """
        Recursively mask sensitive fields in request bodies.
        """
        if isinstance(payload, dict):
            redacted = {}
            for key, value in payload.items():
                if any(token in str(key).lower() for token in SENSITIVE_FIELDS):
                    redacted[key] = MASK
                else:
                    redacted[key] = self._redact_body(value)
            return redacted
        if isinstance(payload, list):
            return [self._redact_body(item) for item in payload]
        return payload

    def _build_curl(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Any,
    ) -> str:
        """
        Build cURL command for request reproduction.
        """
        parts = [f"curl -X {method}"]

        for key, value in headers.items():
            parts.append(f"-H '{key}: {value}'")

        if body is not None:
            parts.append(f"-d '{_to_text(body, indent=None)}'")

        parts.append(f"'{url}'")

        return " \\\n  ".join(parts)


def _coerce_options(options: OptionsLike) -> RequestOptions:
    if options is None:
        return RequestOptions()
    if isinstance(options, RequestOptions):
        return options
    return RequestOptions.from_mapping(options)


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_text(value: Any, indent: Optional[int] = 2) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False, indent=indent)
    except (TypeError, ValueError):
        return str(value)


__all__ = [
    "ApiClient",
    "ApiResult",
    "RequestOptions",
]
