"""U2F second-factor client for hardware security keys."""

from .config import ClientSettings
from .devices import Device, acquire_device, find_device
from .errors import (
    ChallengeTimeoutError,
    DeviceError,
    DeviceProtocolError,
    MissingChallengeError,
    NoDeviceFoundError,
    NoDeviceHandleError,
    OpenExhaustedError,
    PresenceRequiredError,
    U2FError,
    UnknownStatusError,
    UnsupportedFactorError,
)
from .factor import FidoFactor, supports
from .models import ChallengeParameters, FactorDescriptor, SignedAssertion
from .session import ChallengeSession

__all__ = [
    "ChallengeParameters",
    "ChallengeSession",
    "ChallengeTimeoutError",
    "ClientSettings",
    "Device",
    "DeviceError",
    "DeviceProtocolError",
    "FactorDescriptor",
    "FidoFactor",
    "MissingChallengeError",
    "NoDeviceFoundError",
    "NoDeviceHandleError",
    "OpenExhaustedError",
    "PresenceRequiredError",
    "SignedAssertion",
    "U2FError",
    "UnknownStatusError",
    "UnsupportedFactorError",
    "acquire_device",
    "find_device",
    "supports",
]
