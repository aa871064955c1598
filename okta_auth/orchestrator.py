"""Okta authentication state machine

Drives primary authentication, optional MFA (factor selection, push,
pass code entry, polling), the PKCE authorization-code exchange and the
final token request. Prompting and password storage are reached through
the small ``Prompter`` and ``SecretStore`` protocols so the flow can run
against scripted fakes.
"""

import logging
import time
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from rich.console import Console

from .client import OktaClient
from .errors import (
    AuthError,
    MalformedResponse,
    MFAEnrollmentRequired,
    MFARejected,
    MFATimeout,
    StateMismatch,
    UnknownAuthStatus,
)
from .models import AuthnState, AuthnStatus, Credentials, Factor, FactorResult, TokenGrant, VerifyResult
from .pkce import generate_pkce
from .polling import DEFAULT_POLL_INTERVAL, poll_until_terminal

logger = logging.getLogger(__name__)


class Prompter(Protocol):
    """Interactive questions asked during authentication"""

    def prompt_secret(self, label: str) -> str:
        """Ask for a non-empty value without echoing it"""

    def prompt_choice(self, label: str, choices: Sequence[str]) -> int:
        """Ask the operator to pick one entry, returns its index"""

    def prompt_confirm(self, label: str) -> bool:
        """Ask a yes/no question"""


class SecretStore(Protocol):
    """Password storage keyed by username"""

    def get(self, username: str) -> Optional[str]:
        ...

    def set(self, username: str, password: str) -> bool:
        """Store the password, returns False when it could not be saved"""


class AuthStep(str, Enum):
    START = "START"
    PRIMARY_AUTH = "PRIMARY_AUTH"
    TOKEN_EXCHANGE = "TOKEN_EXCHANGE"
    SELECT_FACTOR = "SELECT_FACTOR"
    PUSH_FACTOR = "PUSH_FACTOR"
    CHALLENGE = "CHALLENGE"
    POLL_MFA = "POLL_MFA"
    AUTH_CODE = "AUTH_CODE"
    DONE = "DONE"
    FAILED = "FAILED"


class Authenticator:
    """Runs one Okta authentication cycle and returns the access token"""

    def __init__(
        self,
        client: Optional[OktaClient],
        prompter: Prompter,
        secret_store: Optional[SecretStore] = None,
        console: Optional[Console] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_wait: Optional[float] = None,
        verify_state: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the authenticator

        Args:
            client: Okta HTTP client, may be None when OAuth is disabled
            prompter: Source of operator input
            secret_store: Optional password store, consulted before prompting
            console: Rich console for status lines
            poll_interval: Seconds between MFA verification attempts
            max_wait: Upper bound on the MFA wait, None for no bound
            verify_state: Reject an authorization code whose state differs
                from the one sent
            sleep: Sleep function used by the poll loop
        """
        self.client = client
        self.prompter = prompter
        self.secret_store = secret_store
        self.console = console or Console()
        self.poll_interval = poll_interval
        self.max_wait = max_wait
        self.verify_state = verify_state
        self._sleep = sleep

        self.step = AuthStep.START
        self.history: List[AuthStep] = [AuthStep.START]

    def run(self, username: str, enabled: bool = True) -> Credentials:
        """Authenticate ``username`` and return credentials

        Args:
            username: Okta username
            enabled: When False, nothing is requested and empty
                credentials are returned

        Returns:
            Credentials with the access token and its lifetime

        Raises:
            AuthError: Any failure; the flow is left in the FAILED step
        """
        if not enabled:
            logger.debug("OAuth disabled for this profile, skipping authentication")
            self._enter(AuthStep.DONE)
            return Credentials()
        if self.client is None:
            raise ValueError("An OktaClient is required when OAuth is enabled")

        try:
            password = self.resolve_password(username)

            self._enter(AuthStep.PRIMARY_AUTH)
            authn = self.client.primary_authenticate(username, password)

            if authn.status == AuthnStatus.SUCCESS.value:
                self._enter(AuthStep.TOKEN_EXCHANGE)
                token = self.client.exchange_token(username=username, password=password)
            elif authn.status == AuthnStatus.MFA_REQUIRED.value:
                session_token = self._complete_mfa(authn)
                token = self._exchange_code(session_token)
            elif authn.status == AuthnStatus.MFA_ENROLL.value:
                raise MFAEnrollmentRequired()
            else:
                raise UnknownAuthStatus(authn.status)
        except AuthError as e:
            logger.debug(f"Authentication failed in step {self.step.value}: {e.message} {e.details}")
            self._enter(AuthStep.FAILED)
            raise

        self._enter(AuthStep.DONE)
        return Credentials.from_grant(token)

    def resolve_password(self, username: str) -> str:
        """Read the password from the secret store, or prompt for it"""
        password = None
        if self.secret_store is not None:
            password = self.secret_store.get(username)

        if password:
            logger.debug("Password present in keyring")
            return password

        logger.debug("Password not present in keyring")
        password = self.prompter.prompt_secret(f"Okta password for {username}")

        if self.secret_store is not None and self.prompter.prompt_confirm("Save this password in the keyring?"):
            if self.secret_store.set(username, password):
                self.console.print("[green]Password saved to keyring[/green]")
            else:
                self.console.print("[yellow]Could not save password to keyring[/yellow]")

        return password

    def _complete_mfa(self, authn: AuthnState) -> str:
        """Run the MFA steps and return the resulting session token"""
        self._enter(AuthStep.SELECT_FACTOR)
        factor = self._select_factor(authn.factors)

        if not authn.state_token:
            raise MalformedResponse("MFA_REQUIRED response did not include a state token")

        self._enter(AuthStep.PUSH_FACTOR)
        self.client.push_factor(factor.verify_url, authn.state_token)
        if factor.sends_challenge:
            self.console.print("[green]MFA challenge sent![/green]")

        self._enter(AuthStep.CHALLENGE)
        pass_code = self._challenge(factor)

        self._enter(AuthStep.POLL_MFA)
        verify = poll_until_terminal(
            self.client.verify_factor,
            factor,
            authn.state_token,
            pass_code,
            interval=self.poll_interval,
            max_wait=self.max_wait,
            sleep=self._sleep,
        )
        return self._check_verification(verify)

    def _select_factor(self, factors: List[Factor]) -> Factor:
        if not factors:
            raise MalformedResponse("MFA is required but no enrolled factors were returned")

        index = self.prompter.prompt_choice("Select MFA method", [f.label for f in factors])
        factor = factors[index]
        logger.debug(f"Selected factor {factor.label}")
        return factor

    def _challenge(self, factor: Factor) -> str:
        if factor.is_push:
            return ""
        return self.prompter.prompt_secret("MFA code")

    def _check_verification(self, verify: VerifyResult) -> str:
        if verify.factor_result == FactorResult.REJECTED.value:
            raise MFARejected()
        if verify.factor_result == FactorResult.TIMEOUT.value:
            raise MFATimeout()
        if verify.status != AuthnStatus.SUCCESS.value:
            raise UnknownAuthStatus(verify.factor_result or verify.status)
        if not verify.session_token:
            raise MalformedResponse("Successful MFA verification did not include a session token")

        self.console.print("[green]MFA verified![/green]")
        return verify.session_token

    def _exchange_code(self, session_token: str) -> TokenGrant:
        self._enter(AuthStep.AUTH_CODE)
        pkce = generate_pkce()
        grant = self.client.authorize(session_token, pkce)

        if not grant.state_matches:
            if self.verify_state:
                raise StateMismatch(details={"sent": grant.sent_state, "received": grant.state})
            logger.warning("Authorize redirect state does not match the state sent; continuing")

        self._enter(AuthStep.TOKEN_EXCHANGE)
        return self.client.exchange_token(grant)

    def _enter(self, step: AuthStep) -> None:
        logger.debug(f"Auth step {self.step.value} -> {step.value}")
        self.step = step
        self.history.append(step)

    @property
    def transitions(self) -> List[Tuple[AuthStep, AuthStep]]:
        return list(zip(self.history, self.history[1:]))
