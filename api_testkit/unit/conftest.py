"""
Shared fixtures for offline framework tests.

Fixtures:
    - fake_clock: Controllable clock for TokenManager
    - token_manager: TokenManager bound to fake_clock
    - fake_transport: Scripted Transport recording every RequestSpec
    - make_client: Factory building an ApiClient over fake_transport
"""

from __future__ import annotations

from typing import Any, Callable, List, Union

import pytest

from api_testkit.api_testing.framework import (
    ApiClient,
    ApiSettings,
    RequestSpec,
    TokenManager,
    TransportResponse,
)


class FakeClock:
    """Clock returning a settable time in seconds."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


Outcome = Union[TransportResponse, BaseException]


class FakeTransport:
    """
    Transport replaying scripted outcomes.

    Each send() pops the next outcome; the last one repeats once the script
    is exhausted. Exceptions are raised, responses returned.
    """

    def __init__(self, outcomes: List[Outcome] = None) -> None:
        self.outcomes: List[Outcome] = list(outcomes or [TransportResponse(200, "OK", {}, "{}")])
        self.sent: List[RequestSpec] = []
        self.closed = False

    def send(self, spec: RequestSpec) -> TransportResponse:
        self.sent.append(spec)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


def json_response(status: int = 200, body: str = "{}", reason: str = "OK") -> TransportResponse:
    return TransportResponse(
        status_code=status,
        status_text=reason,
        headers={"content-type": "application/json"},
        text=body,
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_manager(fake_clock: FakeClock) -> TokenManager:
    return TokenManager(clock=fake_clock)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_client(
    token_manager: TokenManager, fake_transport: FakeTransport
) -> Callable[..., ApiClient]:
    """
    Usage:
        client = make_client(retry_attempts=2, outcomes=[TransportError("x"), ok])
    """

    def _make(
        outcomes: List[Outcome] = None,
        base_url: str = "https://api.example.com/",
        **settings: Any,
    ) -> ApiClient:
        if outcomes is not None:
            fake_transport.outcomes = list(outcomes)
        api_settings = ApiSettings(base_url=base_url, **settings)
        return ApiClient(api_settings, token_manager, fake_transport)

    return _make
