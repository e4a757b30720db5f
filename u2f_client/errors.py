"""Exception types raised by the U2F client."""

from __future__ import annotations


class U2FError(RuntimeError):
    pass


class UnsupportedFactorError(U2FError):
    def __init__(self, factor_type: str) -> None:
        super().__init__(f"fido doesn't support {factor_type}")
        self.factor_type = factor_type


class UnknownStatusError(U2FError):
    def __init__(self, status: str) -> None:
        super().__init__(f"unknown status: {status}")
        self.status = status


class NoDeviceFoundError(U2FError):
    def __init__(self) -> None:
        super().__init__("no U2F devices found. device might not be plugged in")


class OpenExhaustedError(U2FError):
    def __init__(self, cause: BaseException | None, retries: int) -> None:
        super().__init__(
            f"failed to create client: {cause}. exceeded max retries of {retries}"
        )
        self.cause = cause
        self.retries = retries


class DeviceError(U2FError):
    """Error reported by a device while handling a request."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class PresenceRequiredError(DeviceError):
    """The key is waiting for the user to touch it."""

    def __init__(self, code: int | None = None) -> None:
        super().__init__("test of user presence required", code)


class DeviceProtocolError(U2FError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"device rejected authentication request: {cause}")
        self.cause = cause


class ChallengeTimeoutError(U2FError):
    def __init__(self, timeout: float) -> None:
        super().__init__(
            f"failed to get authentication response after {timeout:g} seconds"
        )
        self.timeout = timeout


class NoDeviceHandleError(U2FError):
    def __init__(self) -> None:
        super().__init__("no device found")


class MissingChallengeError(U2FError):
    def __init__(self) -> None:
        super().__init__("authn response carries no U2F challenge")
