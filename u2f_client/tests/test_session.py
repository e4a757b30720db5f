from __future__ import annotations

import io

import pytest

from u2f_client.config import ClientSettings
from u2f_client.errors import (
    ChallengeTimeoutError,
    DeviceError,
    DeviceProtocolError,
    NoDeviceHandleError,
    PresenceRequiredError,
)
from u2f_client.session import TOUCH_ACCEPTED, TOUCH_PROMPT, ChallengeSession


def make_session(params, device, clock, settings=None, stream=None):
    return ChallengeSession(
        params,
        device,
        settings or ClientSettings(),
        stream=stream if stream is not None else io.StringIO(),
        clock=clock,
        sleep=clock.sleep,
    )


def test_touch_after_presence_required_ticks(params, clock, valid_response, fake_device):
    presence = [PresenceRequiredError(0x6985) for _ in range(5)]
    device = fake_device(responses=presence + [valid_response])
    stream = io.StringIO()
    session = make_session(params, device, clock, stream=stream)

    assertion = session.run_challenge()

    assert assertion.stateToken == params.state_token
    assert assertion.clientData == valid_response.client_data
    assert assertion.signatureData == valid_response.signature_data
    assert len(device.requests) == 6
    assert stream.getvalue().count(TOUCH_PROMPT) == 1
    assert stream.getvalue().endswith(TOUCH_ACCEPTED)
    assert session.prompted is True
    assert device.close_calls == 1
    assert clock.now == pytest.approx(6 * 0.25)


def test_immediate_touch_skips_prompt(params, clock, valid_response, fake_device):
    device = fake_device(responses=[valid_response])
    stream = io.StringIO()

    make_session(params, device, clock, stream=stream).run_challenge()

    assert TOUCH_PROMPT not in stream.getvalue()
    assert stream.getvalue() == TOUCH_ACCEPTED
    assert clock.sleeps == [0.25]


def test_request_uses_app_id_as_facet(params, clock, valid_response, fake_device):
    device = fake_device(responses=[valid_response])

    make_session(params, device, clock).run_challenge()

    request = device.requests[0]
    assert request.challenge == params.challenge_nonce
    assert request.facet == params.app_id
    assert request.app_id == params.app_id
    assert request.key_handle == params.key_handle


def test_times_out_when_never_touched(params, clock, fake_device):
    device = fake_device()
    stream = io.StringIO()

    with pytest.raises(ChallengeTimeoutError) as excinfo:
        make_session(params, device, clock, stream=stream).run_challenge()

    assert "25 seconds" in str(excinfo.value)
    assert clock.now == pytest.approx(25.0)
    assert len(device.requests) == 99
    assert stream.getvalue().count(TOUCH_PROMPT) == 1
    assert TOUCH_ACCEPTED not in stream.getvalue()
    assert device.close_calls == 1


def test_protocol_error_is_terminal(params, clock, fake_device):
    cause = DeviceError("U2F device returned status 0x6a80", 0x6A80)
    device = fake_device(responses=[cause])
    stream = io.StringIO()

    with pytest.raises(DeviceProtocolError) as excinfo:
        make_session(params, device, clock, stream=stream).run_challenge()

    assert excinfo.value.cause is cause
    assert excinfo.value.__cause__ is cause
    assert len(device.requests) == 1
    assert device.close_calls == 1
    assert stream.getvalue() == ""


def test_close_failure_does_not_mask_error(params, clock, fake_device):
    device = fake_device(responses=[DeviceError("wrong key handle")], close_error=OSError("closed"))

    with pytest.raises(DeviceProtocolError):
        make_session(params, device, clock).run_challenge()

    assert device.close_calls == 1


def test_close_failure_does_not_mask_success(params, clock, valid_response, fake_device):
    device = fake_device(responses=[valid_response], close_error=OSError("closed"))

    assertion = make_session(params, device, clock).run_challenge()

    assert assertion.stateToken == params.state_token


def test_interrupt_still_closes_device(params, clock, fake_device):
    device = fake_device(responses=[PresenceRequiredError(), KeyboardInterrupt()])

    with pytest.raises(KeyboardInterrupt):
        make_session(params, device, clock).run_challenge()

    assert device.close_calls == 1


def test_missing_device_is_contract_failure(params, clock):
    with pytest.raises(NoDeviceHandleError):
        make_session(params, None, clock).run_challenge()


def test_session_releases_device_after_run(params, clock, valid_response, fake_device):
    device = fake_device(responses=[valid_response])
    session = make_session(params, device, clock)
    session.run_challenge()

    with pytest.raises(NoDeviceHandleError):
        session.run_challenge()
    assert device.close_calls == 1


def test_prompt_flag_is_per_session(params, clock, valid_response, fake_device):
    first = make_session(params, fake_device(responses=[PresenceRequiredError(), valid_response]), clock)
    second = make_session(params, fake_device(responses=[valid_response]), clock)

    first.run_challenge()
    second.run_challenge()

    assert first.prompted is True
    assert second.prompted is False


def test_custom_timing(params, clock, fake_device):
    settings = ClientSettings(challenge_timeout=1.0, poll_interval=0.5)
    device = fake_device()

    with pytest.raises(ChallengeTimeoutError):
        make_session(params, device, clock, settings=settings).run_challenge()

    assert len(device.requests) == 1
    assert clock.now == pytest.approx(1.0)
