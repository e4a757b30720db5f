"""Models shared across U2F client modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import MissingChallengeError


class FactorDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    factorType: str
    provider: str


@dataclass(frozen=True)
class ChallengeParameters:
    challenge_nonce: str
    app_id: str
    version: str
    key_handle: str
    state_token: str


@dataclass(frozen=True)
class AuthenticateRequest:
    challenge: str
    facet: str
    app_id: str
    key_handle: str


@dataclass(frozen=True)
class AuthenticateResponse:
    client_data: str
    signature_data: str


class SignedAssertion(BaseModel):
    """Proof of touch returned to the identity provider."""

    model_config = ConfigDict(frozen=True)

    stateToken: str
    clientData: str
    signatureData: str


class PassCodePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    stateToken: str
    passCode: str = ""


# Identity provider authn response -----------------------------------------
class FactorChallenge(BaseModel):
    nonce: str


class FactorProfile(BaseModel):
    appId: str
    version: str = "U2F_V2"
    credentialId: str


class FactorEmbedded(BaseModel):
    challenge: Optional[FactorChallenge] = None


class Factor(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    factorType: str = "u2f"
    provider: str = "FIDO"
    profile: Optional[FactorProfile] = None
    embedded: FactorEmbedded = Field(default_factory=FactorEmbedded, alias="_embedded")


class AuthnEmbedded(BaseModel):
    factor: Optional[Factor] = None


class AuthnResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    stateToken: str
    embedded: AuthnEmbedded = Field(default_factory=AuthnEmbedded, alias="_embedded")

    def challenge_parameters(self) -> ChallengeParameters:
        factor = self.embedded.factor
        if factor is None or factor.profile is None or factor.embedded.challenge is None:
            raise MissingChallengeError()
        return ChallengeParameters(
            challenge_nonce=factor.embedded.challenge.nonce,
            app_id=factor.profile.appId,
            version=factor.profile.version,
            key_handle=factor.profile.credentialId,
            state_token=self.stateToken,
        )
