"""
Simulated network round-trip.

Every mock API operation goes through mock_api_request(): it waits a
latency interval, optionally raises an injected transient failure, and
otherwise returns the payload function's result.
"""

import asyncio
import inspect
import logging
import random
from typing import Awaitable, Callable, Optional, TypeVar, Union

from shared.exceptions import ErrorCode
from shared.models import ApiResponse

from .exceptions import SimulatedApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MIN_DELAY_MS = 200
DEFAULT_MAX_DELAY_MS = 1000
DEFAULT_ERROR_RATE = 0.1

Sleeper = Callable[[float], Awaitable[None]]


def random_delay_ms(
    rng: Optional[random.Random] = None,
    min_ms: int = DEFAULT_MIN_DELAY_MS,
    max_ms: int = DEFAULT_MAX_DELAY_MS,
) -> int:
    """Pick a latency in [min_ms, max_ms)."""
    rng = rng or random
    if max_ms <= min_ms:
        return min_ms
    return rng.randrange(min_ms, max_ms)


async def mock_api_request(
    payload_fn: Callable[[], Union[T, Awaitable[T]]],
    *,
    delay: Optional[int] = None,
    should_fail: Optional[bool] = None,
    error_message: str = "An unexpected error occurred",
    error_code: str = ErrorCode.ERR_UNKNOWN,
    error_rate: float = DEFAULT_ERROR_RATE,
    rng: Optional[random.Random] = None,
    sleep: Sleeper = asyncio.sleep,
) -> T:
    """
    Run a payload function behind simulated latency and failure.

    Args:
        payload_fn: Zero-argument function producing the result; a coroutine
            result is awaited, so mutations can take the store lock
        delay: Latency in milliseconds (random in [200, 1000) when None)
        should_fail: Force or suppress the failure (sampled from error_rate when None)
        error_message: Message of the injected failure
        error_code: Code of the injected failure
        error_rate: Probability of failure when should_fail is None
        rng: Random source for delay and failure sampling
        sleep: Awaitable sleep, replaceable in tests

    Returns:
        Whatever payload_fn returns

    Raises:
        SimulatedApiError: When the call is chosen to fail
    """
    rng = rng or random
    if delay is None:
        delay = random_delay_ms(rng)
    if should_fail is None:
        should_fail = rng.random() < error_rate

    await sleep(delay / 1000)

    if should_fail:
        logger.debug(f"Injecting simulated failure {error_code}: {error_message}")
        raise SimulatedApiError(error_message, code=error_code)

    result = payload_fn()
    if inspect.isawaitable(result):
        result = await result
    return result


async def call_api(request: Awaitable[ApiResponse]) -> ApiResponse:
    """
    Await a simulated call, converting an injected failure into a failure envelope.

    Callers get one shape for both domain and transient failures.
    """
    try:
        return await request
    except SimulatedApiError as e:
        return ApiResponse.fail(e.message, e.code)
