"""Okta authentication package

Obtains a Snowflake OAuth access token from Okta: primary authentication,
MFA, PKCE authorization-code exchange and token request.
"""

from .client import DEFAULT_SCOPE, DEFAULT_TIMEOUT, OktaClient
from .errors import (
    AuthError,
    BadRequest,
    InvalidChallenge,
    InvalidCredentials,
    MalformedResponse,
    MFAEnrollmentRequired,
    MFARejected,
    MFATimeout,
    NetworkError,
    PollTimeout,
    RateLimited,
    StateMismatch,
    UnexpectedResponse,
    UnknownAuthStatus,
)
from .models import (
    AuthnState,
    AuthnStatus,
    AuthorizationGrant,
    Credentials,
    Factor,
    FactorResult,
    PKCEPair,
    TokenGrant,
    VerifyResult,
)
from .orchestrator import Authenticator, AuthStep, Prompter, SecretStore
from .pkce import code_challenge, generate_pkce
from .polling import poll_until_terminal

__all__ = [
    "DEFAULT_SCOPE",
    "DEFAULT_TIMEOUT",
    "OktaClient",
    "AuthError",
    "BadRequest",
    "InvalidChallenge",
    "InvalidCredentials",
    "MalformedResponse",
    "MFAEnrollmentRequired",
    "MFARejected",
    "MFATimeout",
    "NetworkError",
    "PollTimeout",
    "RateLimited",
    "StateMismatch",
    "UnexpectedResponse",
    "UnknownAuthStatus",
    "AuthnState",
    "AuthnStatus",
    "AuthorizationGrant",
    "Credentials",
    "Factor",
    "FactorResult",
    "PKCEPair",
    "TokenGrant",
    "VerifyResult",
    "Authenticator",
    "AuthStep",
    "Prompter",
    "SecretStore",
    "code_challenge",
    "generate_pkce",
    "poll_until_terminal",
]
