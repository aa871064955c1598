"""HTTP client for the Okta authn and OAuth endpoints"""

import logging
import uuid
from typing import Any, Dict, Optional, Type, TypeVar
from urllib.parse import parse_qs, urlparse

import httpx
from pydantic import BaseModel, ValidationError

from .errors import (
    BadRequest,
    InvalidChallenge,
    InvalidCredentials,
    MalformedResponse,
    NetworkError,
    RateLimited,
    UnexpectedResponse,
)
from .models import AuthnState, AuthorizationGrant, PKCEPair, TokenGrant, VerifyResult

logger = logging.getLogger(__name__)

DEFAULT_SCOPE = "session:role-any"
DEFAULT_TIMEOUT = 10.0

JSON_HEADERS = {
    "Accept": "application/json",
    "Cache-Control": "no-cache",
    "Content-Type": "application/json",
}
FORM_HEADERS = {
    "Accept": "application/json",
    "Cache-Control": "no-cache",
    "Content-Type": "application/x-www-form-urlencoded;charset=UTF-8",
}

ModelT = TypeVar("ModelT", bound=BaseModel)


class OktaClient:
    """Issues the REST calls of the Okta authentication flow

    Each method is a single blocking round trip. HTTP statuses are mapped
    onto the exceptions in ``okta_auth.errors``.
    """

    def __init__(
        self,
        okta_org: str,
        issuer_url: str,
        client_id: str,
        redirect_uri: str,
        scope: str = DEFAULT_SCOPE,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client

        Args:
            okta_org: Okta organization URL, like https://example.okta.com
            issuer_url: Issuer URL of the Okta authorization server
            client_id: OIDC client ID of the Okta application
            redirect_uri: Redirect URI registered for the application
            scope: Scope requested for the access token
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.okta_org = okta_org.rstrip("/")
        self.issuer_url = issuer_url.rstrip("/")
        self.client_id = client_id
        self.redirect_uri = redirect_uri
        self.scope = scope
        self._http = httpx.Client(timeout=timeout, transport=transport, follow_redirects=False)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "OktaClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def primary_authenticate(self, username: str, password: str) -> AuthnState:
        """Perform primary (password) authentication

        Args:
            username: Okta username
            password: Okta password

        Returns:
            AuthnState describing the transaction status

        Raises:
            InvalidCredentials: On HTTP 401 or 403
            UnexpectedResponse: On any other non-200 status
        """
        payload = {
            "username": username,
            "password": password,
            "options": {
                "multiOptionalFactorEnroll": True,
                "warnBeforePasswordExpired": False,
            },
        }
        response = self._send("POST", f"{self.okta_org}/api/v1/authn", json=payload, headers=JSON_HEADERS)

        if response.status_code in (401, 403):
            raise InvalidCredentials(details=_describe(response))
        if response.status_code != 200:
            raise UnexpectedResponse(response.status_code, "primary authentication", _describe(response))

        state = _parse(response, AuthnState)
        logger.debug(f"Primary authentication status: {state.status}")
        return state

    def push_factor(self, verify_url: str, state_token: str) -> None:
        """Ask Okta to issue a challenge for the selected factor

        Raises:
            RateLimited: On HTTP 429
            UnexpectedResponse: On any other non-200 status
        """
        response = self._send("POST", verify_url, json={"stateToken": state_token}, headers=JSON_HEADERS)

        if response.status_code == 429:
            raise RateLimited(details=_describe(response))
        if response.status_code != 200:
            raise UnexpectedResponse(response.status_code, "factor push", _describe(response))

    def verify_factor(self, verify_url: str, state_token: str, pass_code: str = "") -> VerifyResult:
        """Verify a factor, or check on a pending push approval

        Args:
            verify_url: Verification URL taken from the factor's links
            state_token: State token of the authentication transaction
            pass_code: Pass code entered by the operator, empty for push

        Returns:
            VerifyResult for this attempt

        Raises:
            InvalidChallenge: On HTTP 403
            UnexpectedResponse: On any other non-200 status
        """
        payload = {"stateToken": state_token, "passCode": pass_code}
        response = self._send("POST", verify_url, json=payload, headers=JSON_HEADERS)

        if response.status_code == 403:
            raise InvalidChallenge(details=_describe(response))
        if response.status_code != 200:
            raise UnexpectedResponse(response.status_code, "factor verification", _describe(response))

        return _parse(response, VerifyResult)

    def authorize(self, session_token: str, pkce: PKCEPair, state: Optional[str] = None) -> AuthorizationGrant:
        """Request an authorization code using a session token

        The redirect is not followed: the code and state are read from the
        Location header of the 302 response.

        Args:
            session_token: Session token from a successful authentication
            pkce: PKCE pair; the challenge is sent, the verifier is kept
            state: Anti-CSRF nonce, generated when omitted

        Returns:
            AuthorizationGrant with the code, echoed state and sent state
        """
        sent_state = state or str(uuid.uuid4())
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "scope": self.scope,
            "redirect_uri": self.redirect_uri,
            "state": sent_state,
            "sessionToken": session_token,
            "code_challenge": pkce.challenge,
            "code_challenge_method": "S256",
        }
        response = self._send(
            "GET",
            f"{self.issuer_url}/v1/authorize",
            params=params,
            headers={"Accept": "application/json"},
        )

        if response.status_code != 302:
            raise UnexpectedResponse(response.status_code, "authorize", _describe(response))

        location = response.headers.get("location")
        if not location:
            raise MalformedResponse("Authorize redirect has no Location header")

        query = parse_qs(urlparse(location).query)
        code = query.get("code", [None])[0]
        if not code:
            error = query.get("error_description", query.get("error", [None]))[0]
            raise MalformedResponse(
                "Authorize redirect did not include an authorization code",
                details={"error": error},
            )

        return AuthorizationGrant(
            state=query.get("state", [None])[0],
            code=code,
            code_verifier=pkce.verifier,
            sent_state=sent_state,
        )

    def exchange_token(
        self,
        grant: Optional[AuthorizationGrant] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> TokenGrant:
        """Exchange an authorization code, or a username and password, for a token

        Args:
            grant: Authorization grant; when None the password grant is used
            username: Username for the password grant
            password: Password for the password grant

        Returns:
            TokenGrant from the token endpoint

        Raises:
            BadRequest: On HTTP 400, usually missing application grants
            UnexpectedResponse: On any other non-200 status
        """
        if grant is not None:
            data = {
                "client_id": self.client_id,
                "grant_type": "authorization_code",
                "code": grant.code,
                "code_verifier": grant.code_verifier,
                "redirect_uri": self.redirect_uri,
                "scope": self.scope,
            }
        else:
            if not username or password is None:
                raise ValueError("The password grant needs a username and password")
            data = {
                "client_id": self.client_id,
                "grant_type": "password",
                "username": username,
                "password": password,
                "scope": self.scope,
            }

        logger.debug(f"Requesting token with grant_type={data['grant_type']}")
        response = self._send("POST", f"{self.issuer_url}/v1/token", data=data, headers=FORM_HEADERS)

        if response.status_code == 400:
            raise BadRequest(details=_describe(response))
        if response.status_code != 200:
            raise UnexpectedResponse(response.status_code, "token exchange", _describe(response))

        return _parse(response, TokenGrant)

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        logger.debug(f"{method} {url}")
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.debug(f"HTTP request to {url} failed: {e!r}")
            raise NetworkError(details={"url": url, "error": str(e)}) from e

        logger.debug(f"{method} {url} -> HTTP {response.status_code}")
        return response


def _parse(response: httpx.Response, model: Type[ModelT]) -> ModelT:
    try:
        return model.model_validate(response.json())
    # JSONDecodeError and UnicodeDecodeError are both ValueErrors
    except (ValueError, ValidationError) as e:
        logger.debug(f"Unable to parse {model.__name__}: {e}")
        raise MalformedResponse(details=_describe(response)) from e


def _describe(response: httpx.Response) -> Dict[str, Any]:
    """Debug details for a response, without echoing large bodies"""
    return {
        "status": response.status_code,
        "url": str(response.request.url).split("?")[0],
        "body": response.text[:500],
    }
