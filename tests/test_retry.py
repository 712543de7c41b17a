from __future__ import annotations

import httpx
import pytest
from _fakes import RecordingSleep, SequenceTransport, make_client

from vocafuse import ErrorKind, RetryConfig, VocaFuseError
from vocafuse.retry import backoff_delay, send_with_retry, should_retry

BASE_URL = "https://api.vocafuse.com"


def test_backoff_delay_doubles_without_jitter() -> None:
    policy = RetryConfig(retry_delay_ms=1000)

    assert [backoff_delay(policy, attempt) for attempt in range(4)] == [1.0, 2.0, 4.0, 8.0]


def test_should_retry_respects_status_set_and_budget() -> None:
    policy = RetryConfig(max_retries=2)

    assert should_retry(policy, 503, 0)
    assert should_retry(policy, 429, 1)
    assert not should_retry(policy, 503, 2)
    assert not should_retry(policy, 400, 0)
    assert not should_retry(policy, 200, 0)


@pytest.mark.asyncio
async def test_send_with_retry_recovers_after_transient_failures() -> None:
    transport = SequenceTransport([500, 500, 200])
    sleep = RecordingSleep()
    async with httpx.AsyncClient(base_url=BASE_URL, transport=transport) as client:
        request = client.build_request("POST", "/webhooks", json={"url": "https://x.test"})
        response = await send_with_retry(client, request, RetryConfig(max_retries=3), sleep=sleep)

    assert response.status_code == 200
    assert transport.calls == 3
    assert sleep.delays == [1.0, 2.0]
    # The identical request is resubmitted each time.
    assert {r.method for r in transport.requests} == {"POST"}
    assert {r.content for r in transport.requests} == {transport.requests[0].content}


@pytest.mark.asyncio
async def test_send_with_retry_returns_last_failure_when_exhausted() -> None:
    transport = SequenceTransport([503])
    sleep = RecordingSleep()
    async with httpx.AsyncClient(base_url=BASE_URL, transport=transport) as client:
        request = client.build_request("GET", "/account")
        response = await send_with_retry(
            client, request, RetryConfig(max_retries=2, retry_delay_ms=100), sleep=sleep
        )

    assert response.status_code == 503
    assert transport.calls == 3
    assert sleep.delays == [0.1, 0.2]


@pytest.mark.asyncio
async def test_send_with_retry_propagates_transport_errors_immediately() -> None:
    calls = 0

    def _handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("refused", request=request)

    sleep = RecordingSleep()
    async with httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(_handler)
    ) as client:
        request = client.build_request("GET", "/account")
        with pytest.raises(httpx.ConnectError):
            await send_with_retry(client, request, RetryConfig(), sleep=sleep)

    assert calls == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_client_succeeds_after_retries() -> None:
    transport = SequenceTransport([500, 500, 200], body={"data": {"jwt": "ignored"}})
    sleep = RecordingSleep()
    client = make_client(transport, sleep=sleep)
    try:
        await client.voicenotes.item("vn_1").delete()
    finally:
        await client.close()

    assert transport.calls == 3
    assert sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_client_without_retries_raises_immediately() -> None:
    transport = SequenceTransport([500, 200])
    client = make_client(transport, retry={"max_retries": 0})
    try:
        with pytest.raises(VocaFuseError) as exc_info:
            await client.voicenotes.item("vn_1").delete()
    finally:
        await client.close()

    assert transport.calls == 1
    assert exc_info.value.kind is ErrorKind.SERVER
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_client_never_retries_bad_request() -> None:
    transport = SequenceTransport([400, 200])
    sleep = RecordingSleep()
    client = make_client(transport, sleep=sleep, retry={"max_retries": 5})
    try:
        with pytest.raises(VocaFuseError) as exc_info:
            await client.webhooks.item("wh_1").delete()
    finally:
        await client.close()

    assert transport.calls == 1
    assert sleep.delays == []
    assert exc_info.value.kind is ErrorKind.VALIDATION


@pytest.mark.asyncio
async def test_client_rate_limit_surfaces_after_retries_exhausted() -> None:
    transport = SequenceTransport([429])
    client = make_client(transport, retry={"max_retries": 1, "retry_delay_ms": 0})
    try:
        with pytest.raises(VocaFuseError) as exc_info:
            await client.account.get()
    finally:
        await client.close()

    assert transport.calls == 2
    assert exc_info.value.kind is ErrorKind.RATE_LIMIT


@pytest.mark.asyncio
async def test_custom_retryable_statuses() -> None:
    transport = SequenceTransport([404, 200])
    client = make_client(transport, retry={"retryable_statuses": [404]})
    try:
        await client.voicenotes.item("vn_1").delete()
    finally:
        await client.close()

    assert transport.calls == 2
