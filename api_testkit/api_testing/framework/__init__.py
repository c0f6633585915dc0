"""
================================================================================
API Testing Framework
================================================================================

Resilient API test-client core.

Modules:
    - config_loader: YAML/env configuration and validated ApiSettings
    - token_manager: Bearer credential with expiry tracking
    - schema_validator: Declarative structural validation of payloads
    - transport: Injected HTTP transport (httpx by default)
    - http_client: ApiClient with bounded retry and Allure logging
    - session: One-per-run wiring of the components above
    - api_helpers: Small helpers over object-list payloads

Author: Automation Team
License: MIT
================================================================================
"""

from .config_loader import ApiSettings, ConfigLoader, ConfigurationError
from .http_client import ApiClient, ApiResult, RequestOptions
from .schema_validator import SchemaNode, SchemaValidator, ValidationResult
from .session import ApiSession
from .token_manager import Credential, TokenManager
from .transport import (
    ApiClientError,
    HttpxTransport,
    RequestSpec,
    Transport,
    TransportError,
    TransportResponse,
)

__all__ = [
    "ApiClient",
    "ApiClientError",
    "ApiResult",
    "ApiSession",
    "ApiSettings",
    "ConfigLoader",
    "ConfigurationError",
    "Credential",
    "HttpxTransport",
    "RequestOptions",
    "RequestSpec",
    "SchemaNode",
    "SchemaValidator",
    "TokenManager",
    "Transport",
    "TransportError",
    "TransportResponse",
    "ValidationResult",
]
