"""Challenge session: poll a security key until the user touches it."""

from __future__ import annotations

import json
import logging
import secrets
import sys
import time
from typing import Callable, Optional, TextIO

from .config import ClientSettings
from .devices import Device, close_quietly
from .errors import (
    ChallengeTimeoutError,
    DeviceError,
    DeviceProtocolError,
    NoDeviceHandleError,
    PresenceRequiredError,
)
from .models import AuthenticateRequest, ChallengeParameters, SignedAssertion

LOGGER = logging.getLogger(__name__)

TOUCH_PROMPT = "\nTouch the flashing U2F device to authenticate...\n"
TOUCH_ACCEPTED = "  ==> Touch accepted. Proceeding with authentication\n"

EVENT_LABELS = {
    "start": "Waiting for security key",
    "presence": "User presence required",
    "success": "Touch accepted",
    "failed": "Device rejected challenge",
    "timeout": "Timed out waiting for touch",
}


def _truncate(value: str, limit: int = 64) -> str:
    if len(value) <= limit:
        return value
    half = limit // 2
    return f"{value[:half]}…{value[-half:]}"


def _log(event: str, req: str, level: int = logging.INFO, **fields: object) -> None:
    payload: dict[str, object] = {"request_id": req}
    for key, value in fields.items():
        if value is None:
            continue
        payload[key] = _truncate(value) if isinstance(value, str) else value
    label = EVENT_LABELS.get(event, event)
    LOGGER.log(level, "[U2F: Challenge]: %s\n%s", label, json.dumps(payload, indent=2, sort_keys=True))


class ChallengeSession:
    """Owns one opened device for the duration of one authentication attempt.

    The device is closed on every path out of :meth:`run_challenge`, including
    interruption by the user.
    """

    def __init__(
        self,
        params: ChallengeParameters,
        device: Optional[Device],
        settings: Optional[ClientSettings] = None,
        *,
        stream: Optional[TextIO] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.params = params
        self.device = device
        self.settings = settings or ClientSettings()
        self.stream = stream
        self.clock = clock
        self.sleep = sleep
        self.prompted = False

    def build_request(self) -> AuthenticateRequest:
        # the app id is the only facet
        return AuthenticateRequest(
            challenge=self.params.challenge_nonce,
            facet=self.params.app_id,
            app_id=self.params.app_id,
            key_handle=self.params.key_handle,
        )

    def run_challenge(self) -> SignedAssertion:
        if self.device is None:
            raise NoDeviceHandleError()

        device = self.device
        try:
            return self._poll(device)
        finally:
            self.device = None
            close_quietly(device)

    # Helpers -----------------------------------------------------------
    def _poll(self, device: Device) -> SignedAssertion:
        request = self.build_request()
        req_id = secrets.token_hex(4)
        timeout = self.settings.challenge_timeout
        interval = self.settings.poll_interval

        start = self.clock()
        deadline = start + timeout
        next_tick = start + interval
        _log("start", req_id, app_id=request.app_id, timeout=timeout)

        while True:
            now = self.clock()
            if now < next_tick and now < deadline:
                self.sleep(min(next_tick, deadline) - now)
                now = self.clock()
            if now >= deadline:
                _log("timeout", req_id, level=logging.WARNING, timeout=timeout)
                raise ChallengeTimeoutError(timeout)
            while next_tick <= now:
                next_tick += interval

            try:
                response = device.authenticate(request)
            except PresenceRequiredError:
                if not self.prompted:
                    _log("presence", req_id, level=logging.DEBUG)
                    self._notify(TOUCH_PROMPT)
                    self.prompted = True
                continue
            except DeviceError as exc:
                _log("failed", req_id, level=logging.DEBUG, error=str(exc), code=exc.code)
                raise DeviceProtocolError(exc) from exc

            assertion = SignedAssertion(
                stateToken=self.params.state_token,
                clientData=response.client_data,
                signatureData=response.signature_data,
            )
            self._notify(TOUCH_ACCEPTED)
            _log("success", req_id, elapsed=round(self.clock() - start, 3))
            return assertion

    def _notify(self, message: str) -> None:
        stream = self.stream or sys.stderr
        stream.write(message)
        stream.flush()
