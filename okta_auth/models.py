"""Data models for Okta authentication

Wire models (responses from the Okta API) are pydantic models so malformed
payloads are rejected in one place. Values produced locally are plain
dataclasses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthnStatus(str, Enum):
    """Transaction states returned by the Okta authn API"""
    SUCCESS = "SUCCESS"
    MFA_REQUIRED = "MFA_REQUIRED"
    MFA_ENROLL = "MFA_ENROLL"
    MFA_CHALLENGE = "MFA_CHALLENGE"
    LOCKED_OUT = "LOCKED_OUT"
    PASSWORD_EXPIRED = "PASSWORD_EXPIRED"


class FactorResult(str, Enum):
    """Outcome of a single factor verification attempt"""
    WAITING = "WAITING"
    SUCCESS = "SUCCESS"
    REJECTED = "REJECTED"
    TIMEOUT = "TIMEOUT"


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class _Href(_WireModel):
    href: str


class _FactorLinks(_WireModel):
    verify: _Href


class Factor(_WireModel):
    """One enrolled MFA method

    Attributes:
        factor_type: Okta factor type (push, sms, token:software:totp, ...)
        provider: Factor provider (OKTA, GOOGLE, ...)
        links: HAL links; links.verify.href is the verification URL
    """
    id: Optional[str] = None
    factor_type: str = Field(alias="factorType")
    provider: str = ""
    links: _FactorLinks = Field(alias="_links")

    @property
    def verify_url(self) -> str:
        return self.links.verify.href

    @property
    def label(self) -> str:
        """Display label used in the factor selection prompt"""
        return f"{self.factor_type} ({self.provider})"

    @property
    def is_push(self) -> bool:
        """Push factors are approved out-of-band, no pass code is entered"""
        return self.factor_type == "push"

    @property
    def sends_challenge(self) -> bool:
        """Factors for which a push call delivers something to the user"""
        return self.factor_type in ("push", "sms")


class _Embedded(_WireModel):
    factors: List[Factor] = Field(default_factory=list)


class AuthnState(_WireModel):
    """Result of a primary authentication attempt"""
    status: str
    state_token: Optional[str] = Field(default=None, alias="stateToken")
    session_token: Optional[str] = Field(default=None, alias="sessionToken")
    expires_at: Optional[str] = Field(default=None, alias="expiresAt")
    embedded: _Embedded = Field(default_factory=_Embedded, alias="_embedded")

    @property
    def factors(self) -> List[Factor]:
        return self.embedded.factors


class VerifyResult(_WireModel):
    """Result of a factor verification call"""
    status: str
    factor_result: Optional[str] = Field(default=None, alias="factorResult")
    expires_at: Optional[str] = Field(default=None, alias="expiresAt")
    session_token: Optional[str] = Field(default=None, alias="sessionToken")

    @property
    def is_waiting(self) -> bool:
        return self.factor_result == FactorResult.WAITING.value


class TokenGrant(_WireModel):
    """Token endpoint response"""
    access_token: str
    expires_in: int
    scope: str = ""
    token_type: Optional[str] = None


@dataclass(frozen=True)
class PKCEPair:
    """PKCE (Proof Key for Code Exchange) material

    Attributes:
        verifier: Random string kept secret until the token exchange
        challenge: Base64url SHA-256 of the verifier, sent to authorize
    """
    verifier: str
    challenge: str


@dataclass(frozen=True)
class AuthorizationGrant:
    """Authorization code captured from the authorize redirect

    Attributes:
        state: State echoed back in the redirect Location
        code: Authorization code
        code_verifier: PKCE verifier matching the challenge that was sent
        sent_state: State that was sent with the authorize request
    """
    state: Optional[str]
    code: str
    code_verifier: str
    sent_state: str

    @property
    def state_matches(self) -> bool:
        return self.state == self.sent_state


@dataclass
class Credentials:
    """Access token handed to the configuration writers"""
    access_token: str = ""
    expires_in: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.access_token

    @classmethod
    def from_grant(cls, grant: TokenGrant) -> "Credentials":
        return cls(access_token=grant.access_token, expires_in=grant.expires_in)
