"""Exponential backoff retry loop wrapping every outbound API request."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

import httpx

from .config import RetryConfig

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


def backoff_delay(policy: RetryConfig, attempt: int) -> float:
    """Return the delay in seconds before retry number ``attempt + 1``.

    The delay doubles with every attempt starting from the configured base
    delay; no jitter is applied.
    """
    return policy.retry_delay_ms * (2**attempt) / 1000.0


def should_retry(policy: RetryConfig, status_code: int, attempt: int) -> bool:
    """Return ``True`` when a response with *status_code* is eligible for another attempt."""
    return attempt < policy.max_retries and status_code in policy.retryable_statuses


async def send_with_retry(
    client: httpx.AsyncClient,
    request: httpx.Request,
    policy: RetryConfig,
    *,
    sleep: SleepFunc = asyncio.sleep,
) -> httpx.Response:
    """Send *request*, resubmitting it while the response status is retryable.

    The same request (method, URL, headers and body) is resent after each
    backoff delay until a non-retryable status is received or
    ``policy.max_retries`` retries have been spent. The last response is
    returned as-is; raising for error statuses is left to the caller.

    Transport errors raised before a response exists propagate immediately
    without retry.
    """
    attempt = 0
    while True:
        response = await client.send(request)
        if not should_retry(policy, response.status_code, attempt):
            if attempt:
                logger.debug(
                    "%s %s finished with status %s after %d retr%s",
                    request.method,
                    request.url.path,
                    response.status_code,
                    attempt,
                    "y" if attempt == 1 else "ies",
                )
            return response
        delay = backoff_delay(policy, attempt)
        logger.warning(
            "%s %s returned status %s; retrying in %.2fs (attempt %d of %d)",
            request.method,
            request.url.path,
            response.status_code,
            delay,
            attempt + 1,
            policy.max_retries,
        )
        await response.aclose()
        await sleep(delay)
        attempt += 1
