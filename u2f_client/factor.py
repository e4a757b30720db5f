"""FIDO factor handler: capability check and provider payloads."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union

from .config import ClientSettings
from .devices import DeviceEnumerator, acquire_device
from .errors import UnknownStatusError, UnsupportedFactorError
from .models import AuthnResponse, FactorDescriptor, PassCodePayload
from .session import ChallengeSession

LOGGER = logging.getLogger(__name__)

FACTOR_TYPE = "u2f"
PROVIDER = "FIDO"
VERIFY_ACTION = "verify"


def supports(descriptor: FactorDescriptor) -> None:
    """Raise :class:`UnsupportedFactorError` unless ``descriptor`` is U2F/FIDO."""
    if descriptor.factorType == FACTOR_TYPE and descriptor.provider == PROVIDER:
        return
    raise UnsupportedFactorError(descriptor.factorType)


class FidoFactor:
    """Answers provider MFA prompts with a hardware security key."""

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        enumerate_devices: Optional[DeviceEnumerator] = None,
        **session_options: Any,
    ) -> None:
        self.settings = settings or ClientSettings()
        self.enumerate_devices = enumerate_devices
        self.session_options = session_options

    def supports(self, descriptor: FactorDescriptor) -> None:
        supports(descriptor)

    def verify(self, authn: Union[AuthnResponse, Dict[str, Any]]) -> Tuple[str, bytes]:
        """Build the payload for the provider's verify call.

        ``MFA_REQUIRED`` gets an empty pass code so the provider issues a
        challenge; ``MFA_CHALLENGE`` runs the challenge against the key.
        """
        if not isinstance(authn, AuthnResponse):
            authn = AuthnResponse.model_validate(authn)

        if authn.status == "MFA_CHALLENGE":
            params = authn.challenge_parameters()
            device = acquire_device(self.enumerate_devices, self.settings)
            session = ChallengeSession(params, device, self.settings, **self.session_options)
            assertion = session.run_challenge()
            return VERIFY_ACTION, assertion.model_dump_json().encode("utf-8")
        if authn.status == "MFA_REQUIRED":
            payload = PassCodePayload(stateToken=authn.stateToken, passCode="")
            return VERIFY_ACTION, payload.model_dump_json().encode("utf-8")

        LOGGER.debug("Cannot verify factor in status %s", authn.status)
        raise UnknownStatusError(authn.status)
