"""Command-line entry point to answer one U2F challenge."""

from __future__ import annotations

import argparse
import logging

from . import ChallengeParameters, ChallengeSession, ClientSettings, U2FError, acquire_device


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Answer a U2F challenge with an attached security key")
    parser.add_argument("--nonce", required=True, help="Challenge nonce issued by the provider")
    parser.add_argument("--app-id", required=True, help="U2F application id (also used as facet)")
    parser.add_argument("--key-handle", required=True, help="Web-safe base64 key handle")
    parser.add_argument("--state-token", required=True, help="Provider state token")
    parser.add_argument("--version", default="U2F_V2", help="U2F protocol version")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")
    settings = ClientSettings()
    params = ChallengeParameters(
        challenge_nonce=args.nonce,
        app_id=args.app_id,
        version=args.version,
        key_handle=args.key_handle,
        state_token=args.state_token,
    )
    try:
        device = acquire_device(settings=settings)
        assertion = ChallengeSession(params, device, settings).run_challenge()
    except U2FError as exc:
        raise SystemExit(str(exc)) from exc
    except KeyboardInterrupt:
        raise SystemExit(130)
    print(assertion.model_dump_json())


if __name__ == "__main__":
    main()
