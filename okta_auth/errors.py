"""Exceptions raised by the Okta authentication flow

Every failure is terminal for the run. Each class carries a short,
user-facing message; request details belong in ``details`` and are only
written to the debug log.
"""

from typing import Any, Dict, Optional


class AuthError(Exception):
    """Base class for all authentication failures"""

    message = "Authentication failed"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.message
        self.details = details or {}
        super().__init__(self.message)


class NetworkError(AuthError):
    """Transport failure: DNS, connection refused, timeout"""
    message = "Unknown error: is the network up?"


class InvalidCredentials(AuthError):
    """Primary authentication rejected with 401/403"""
    message = "Invalid password!"


class InvalidChallenge(AuthError):
    """Factor verification rejected with 403"""
    message = "Invalid challenge!"


class RateLimited(AuthError):
    """Factor push rejected with 429"""
    message = "Slow down! Wait a few moments..."


class BadRequest(AuthError):
    """Token endpoint rejected the request with 400"""
    message = "Bad request: maybe check Okta privileges?"


class UnexpectedResponse(AuthError):
    """Any other non-success HTTP status"""

    def __init__(self, status_code: int, operation: str = "request", details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.operation = operation
        super().__init__(f"Unexpected HTTP {status_code} from {operation}", details)


class MalformedResponse(AuthError):
    """Response body is missing or does not have the expected shape"""
    message = "Malformed response from Okta"


class MFAEnrollmentRequired(AuthError):
    message = "Okta organization requires MFA enrollment. Configure your MFA device in Okta and try again"


class MFARejected(AuthError):
    message = "MFA challenge rejected!"


class MFATimeout(AuthError):
    """Okta reported the factor challenge as timed out"""
    message = "MFA challenge timed out!"


class PollTimeout(AuthError):
    """The local wait bound for MFA approval elapsed"""

    def __init__(self, waited: float, details: Optional[Dict[str, Any]] = None):
        self.waited = waited
        super().__init__(f"Gave up waiting for MFA approval after {waited:.0f}s", details)


class StateMismatch(AuthError):
    """Authorize redirect echoed a different anti-CSRF state"""
    message = "Authorization state mismatch, refusing the authorization code"


class UnknownAuthStatus(AuthError):
    """Okta returned a transaction status this client does not handle"""

    def __init__(self, status: Optional[str], details: Optional[Dict[str, Any]] = None):
        self.status = status
        super().__init__(f"Unexpected authentication status: {status}", details)
