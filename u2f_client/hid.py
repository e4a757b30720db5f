"""USB HID transport for U2F security keys, built on python-fido2."""

from __future__ import annotations

import json
import logging
from typing import List, Optional

from fido2.ctap import CtapError
from fido2.ctap1 import APDU, ApduError, Ctap1
from fido2.hid import CtapHidDevice, list_descriptors, open_connection
from fido2.utils import sha256, websafe_decode, websafe_encode

from .errors import DeviceError, PresenceRequiredError
from .models import AuthenticateRequest, AuthenticateResponse

LOGGER = logging.getLogger(__name__)

AUTHENTICATE_TYPE = "navigator.id.getAssertion"


def build_client_data(challenge: str, facet: str) -> bytes:
    client_data = {
        "typ": AUTHENTICATE_TYPE,
        "challenge": challenge,
        "origin": facet,
        "cid_pubkey": "unused",
    }
    return json.dumps(client_data, separators=(",", ":")).encode("utf-8")


class HidU2fDevice:
    """A single HID authenticator driven over CTAP1 (U2F)."""

    def __init__(self, descriptor) -> None:
        self.descriptor = descriptor
        self._device: Optional[CtapHidDevice] = None
        self._ctap: Optional[Ctap1] = None

    def __repr__(self) -> str:
        return f"HidU2fDevice({getattr(self.descriptor, 'path', self.descriptor)!r})"

    def open(self) -> None:
        if self._device is not None:
            return
        connection = open_connection(self.descriptor)
        try:
            device = CtapHidDevice(self.descriptor, connection)
        except Exception:
            connection.close()
            raise
        self._device = device
        self._ctap = Ctap1(device)
        LOGGER.debug("Opened %r", self)

    def authenticate(self, request: AuthenticateRequest) -> AuthenticateResponse:
        if self._ctap is None:
            raise DeviceError("device is not open")

        try:
            key_handle = websafe_decode(request.key_handle)
        except ValueError as exc:
            raise DeviceError(f"invalid key handle: {exc}") from exc

        client_data = build_client_data(request.challenge, request.facet)
        try:
            signature = self._ctap.authenticate(
                sha256(client_data),
                sha256(request.app_id.encode("utf-8")),
                key_handle,
            )
        except ApduError as exc:
            if exc.code == APDU.USE_NOT_SATISFIED:
                raise PresenceRequiredError(exc.code) from exc
            raise DeviceError(f"U2F device returned status {exc.code:#06x}", exc.code) from exc
        except (CtapError, OSError) as exc:
            raise DeviceError(f"U2F device communication failed: {exc}") from exc

        return AuthenticateResponse(
            client_data=websafe_encode(client_data),
            signature_data=websafe_encode(bytes(signature)),
        )

    def close(self) -> None:
        device, self._device, self._ctap = self._device, None, None
        if device is not None:
            device.close()
            LOGGER.debug("Closed %r", self)


def list_u2f_devices() -> List[HidU2fDevice]:
    return [HidU2fDevice(descriptor) for descriptor in list_descriptors()]
