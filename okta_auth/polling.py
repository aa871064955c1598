"""MFA verification polling"""

import logging
import time
from typing import Callable, Optional

from .errors import PollTimeout
from .models import Factor, VerifyResult

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0

VerifyFn = Callable[[str, str, str], VerifyResult]


def poll_until_terminal(
    verify: VerifyFn,
    factor: Factor,
    state_token: str,
    pass_code: str = "",
    interval: float = DEFAULT_POLL_INTERVAL,
    max_wait: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> VerifyResult:
    """Verify a factor until Okta reports something other than WAITING

    A push factor stays WAITING until the user approves it on their device,
    so this loops for as long as that takes, up to ``max_wait`` seconds.

    Args:
        verify: Verification call, usually ``OktaClient.verify_factor``
        factor: Factor being verified
        state_token: State token of the authentication transaction
        pass_code: Pass code entered by the operator, empty for push
        interval: Seconds to sleep between attempts
        max_wait: Upper bound on the total wait, None for no bound
        sleep: Sleep function
        clock: Monotonic clock

    Returns:
        The first non-WAITING VerifyResult

    Raises:
        PollTimeout: If max_wait elapses while still WAITING
    """
    started = clock()
    attempts = 0

    while True:
        result = verify(factor.verify_url, state_token, pass_code)
        attempts += 1

        if not result.is_waiting:
            logger.debug(
                f"MFA verification finished after {attempts} attempt(s): "
                f"status={result.status} factorResult={result.factor_result}"
            )
            return result

        waited = clock() - started
        if max_wait is not None and waited + interval > max_wait:
            raise PollTimeout(waited, details={"attempts": attempts})

        logger.debug("Checking MFA verification...")
        sleep(interval)
