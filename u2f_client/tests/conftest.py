from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional
import sys

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from u2f_client.config import ClientSettings
from u2f_client.errors import PresenceRequiredError
from u2f_client.models import AuthenticateRequest, AuthenticateResponse, ChallengeParameters


class FakeDevice:
    """In-memory device driven by a script of open and authenticate results."""

    def __init__(
        self,
        name: str = "fake",
        open_error: Optional[BaseException] = None,
        responses: Iterable[object] = (),
        close_error: Optional[BaseException] = None,
    ) -> None:
        self.name = name
        self.open_error = open_error
        self.responses: List[object] = list(responses)
        self.close_error = close_error
        self.open_calls = 0
        self.close_calls = 0
        self.requests: List[AuthenticateRequest] = []

    def open(self) -> None:
        self.open_calls += 1
        if self.open_error is not None:
            raise self.open_error

    def authenticate(self, request: AuthenticateRequest) -> AuthenticateResponse:
        self.requests.append(request)
        result = self.responses.pop(0) if self.responses else PresenceRequiredError(0x6985)
        if isinstance(result, BaseException):
            raise result
        return result

    def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def params() -> ChallengeParameters:
    return ChallengeParameters(
        challenge_nonce="nonce-123",
        app_id="https://example.okta.com",
        version="U2F_V2",
        key_handle="a2V5LWhhbmRsZQ",
        state_token="state-abc",
    )


@pytest.fixture
def valid_response() -> AuthenticateResponse:
    return AuthenticateResponse(client_data="Y2xpZW50", signature_data="c2ln")


@pytest.fixture
def fake_device():
    return FakeDevice
