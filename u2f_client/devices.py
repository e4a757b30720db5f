"""Device capability, enumeration and open-with-retry."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol, Union

from .config import ClientSettings
from .errors import NoDeviceFoundError, OpenExhaustedError
from .models import AuthenticateRequest, AuthenticateResponse

LOGGER = logging.getLogger(__name__)


class Device(Protocol):
    def open(self) -> None:
        ...

    def authenticate(self, request: AuthenticateRequest) -> AuthenticateResponse:
        ...

    def close(self) -> None:
        ...


DeviceEnumerator = Callable[[], Iterable[Device]]


@dataclass(frozen=True)
class Opened:
    device: Device


@dataclass(frozen=True)
class NotPresent:
    pass


@dataclass(frozen=True)
class TransientFailure:
    cause: Optional[BaseException]


DeviceOpenOutcome = Union[Opened, NotPresent, TransientFailure]


def close_quietly(device: Device) -> None:
    """Close ``device`` ignoring any error raised while doing so."""
    try:
        device.close()
    except Exception as exc:  # noqa: BLE001
        LOGGER.debug("Ignoring error while closing device: %s", exc)


def find_device(enumerate_devices: DeviceEnumerator) -> DeviceOpenOutcome:
    devices = list(enumerate_devices())
    if not devices:
        return NotPresent()

    last_error: Optional[BaseException] = None
    for device in devices:
        try:
            device.open()
        except Exception as exc:
            LOGGER.debug("failed to open device: %s", exc)
            last_error = exc
            close_quietly(device)
            continue
        return Opened(device)

    return TransientFailure(last_error)


def acquire_device(
    enumerate_devices: Optional[DeviceEnumerator] = None,
    settings: Optional[ClientSettings] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Device:
    """Open the first attached device, retrying while none will open.

    An empty enumeration raises :class:`NoDeviceFoundError` straight away;
    waiting for a key to be plugged in is left to the caller.
    """
    settings = settings or ClientSettings()
    if enumerate_devices is None:
        from .hid import list_u2f_devices

        enumerate_devices = list_u2f_devices

    cause: Optional[BaseException] = None
    for attempt in range(1, settings.max_open_retries + 1):
        outcome = find_device(enumerate_devices)
        if isinstance(outcome, Opened):
            return outcome.device
        if isinstance(outcome, NotPresent):
            raise NoDeviceFoundError()

        cause = outcome.cause
        LOGGER.debug(
            "Device open attempt %d/%d failed: %s",
            attempt,
            settings.max_open_retries,
            cause,
        )
        if attempt < settings.max_open_retries:
            sleep(settings.retry_delay)

    raise OpenExhaustedError(cause, settings.max_open_retries) from cause
