"""Tests for the classified exponential-backoff retry helper."""

import httpx
import pytest

from swapbot.core.structures.errors import DiscoveryError, DiscoveryErrorKind
from swapbot.core.utils.retry_utils import classify_http_error, retry_with_backoff

REQUEST = httpx.Request("GET", "https://api.dexscreener.com/latest/dex/tokens/0xabc")


def _status_error(status_code: int) -> httpx.HTTPStatusError:
    response = httpx.Response(status_code, request=REQUEST)
    return httpx.HTTPStatusError(f"HTTP {status_code}", request=REQUEST, response=response)


class ScriptedOperation:
    """Raises the scripted errors in order, then returns the result."""

    def __init__(self, errors, result="ok"):
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


class TestClassifyHttpError:
    """Mapping of httpx failures onto the retry taxonomy."""

    def test_timeout_is_retryable(self):
        error = classify_http_error(httpx.ReadTimeout("timed out", request=REQUEST))
        assert error.kind is DiscoveryErrorKind.TIMEOUT
        assert error.retryable
        assert error.message == "timeout"

    def test_connect_timeout_is_a_timeout_not_a_network_error(self):
        error = classify_http_error(httpx.ConnectTimeout("timed out", request=REQUEST))
        assert error.kind is DiscoveryErrorKind.TIMEOUT

    def test_rate_limited(self):
        error = classify_http_error(_status_error(429))
        assert error.kind is DiscoveryErrorKind.RATE_LIMITED
        assert error.retryable
        assert error.status_code == 429
        assert error.message == "rate limited"

    @pytest.mark.parametrize("status_code", [500, 502, 503, 599])
    def test_server_errors_are_retryable(self, status_code):
        error = classify_http_error(_status_error(status_code))
        assert error.kind is DiscoveryErrorKind.SERVER_ERROR
        assert error.retryable
        assert error.status_code == status_code

    @pytest.mark.parametrize("status_code", [400, 401, 403, 404, 422])
    def test_other_statuses_are_permanent(self, status_code):
        error = classify_http_error(_status_error(status_code))
        assert error.kind is DiscoveryErrorKind.CLIENT_ERROR
        assert not error.retryable
        assert error.status_code == status_code

    def test_connection_refused_is_network_error(self):
        error = classify_http_error(httpx.ConnectError("connection refused", request=REQUEST))
        assert error.kind is DiscoveryErrorKind.NETWORK_ERROR
        assert error.retryable
        assert error.message == "network error"

    def test_server_disconnect_is_network_error(self):
        error = classify_http_error(
            httpx.RemoteProtocolError("Server disconnected without sending a response.", request=REQUEST))
        assert error.kind is DiscoveryErrorKind.NETWORK_ERROR
        assert error.retryable

    def test_programming_errors_are_not_classified(self):
        assert classify_http_error(KeyError("pairs")) is None
        assert classify_http_error(TypeError("bad")) is None


class TestRetryWithBackoff:
    """Sequential retry policy."""

    @pytest.mark.asyncio
    async def test_success_on_first_attempt_does_not_sleep(self, recording_sleep):
        operation = ScriptedOperation([])
        assert await retry_with_backoff(operation, sleep=recording_sleep) == "ok"
        assert operation.calls == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_two_timeouts_then_success(self, recording_sleep):
        """Fetch runs 3 times with 1 s then 2 s of backoff in between."""
        operation = ScriptedOperation([
            httpx.ReadTimeout("timed out", request=REQUEST),
            httpx.ReadTimeout("timed out", request=REQUEST),
        ])
        assert await retry_with_backoff(operation, sleep=recording_sleep) == "ok"
        assert operation.calls == 3
        assert recording_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_client_error_is_raised_immediately(self, recording_sleep):
        operation = ScriptedOperation([_status_error(400)])
        with pytest.raises(DiscoveryError) as exc_info:
            await retry_with_backoff(operation, sleep=recording_sleep)
        assert operation.calls == 1
        assert recording_sleep.delays == []
        assert exc_info.value.status_code == 400
        assert not exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_exhausted_retries_surface_terminal_error(self, recording_sleep):
        operation = ScriptedOperation([_status_error(503)] * 4)
        with pytest.raises(DiscoveryError) as exc_info:
            await retry_with_backoff(operation, sleep=recording_sleep)
        assert operation.calls == 4
        assert recording_sleep.delays == [1.0, 2.0, 4.0]
        assert exc_info.value.kind is DiscoveryErrorKind.SERVER_ERROR
        assert exc_info.value.message == "server error"

    @pytest.mark.asyncio
    async def test_unclassified_error_propagates_unchanged(self, recording_sleep):
        original = ValueError("boom")
        operation = ScriptedOperation([original])
        with pytest.raises(ValueError) as exc_info:
            await retry_with_backoff(operation, sleep=recording_sleep)
        assert exc_info.value is original
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_attempts_and_base_delay_are_configurable(self, recording_sleep):
        operation = ScriptedOperation([httpx.ConnectError("refused", request=REQUEST)] * 2)
        with pytest.raises(DiscoveryError):
            await retry_with_backoff(operation, max_retries=1, base_delay_seconds=0.5, sleep=recording_sleep)
        assert operation.calls == 2
        assert recording_sleep.delays == [0.5]

    @pytest.mark.asyncio
    async def test_generic_over_result_type(self, recording_sleep):
        operation = ScriptedOperation([_status_error(429)], result=[1, 2, 3])
        assert await retry_with_backoff(operation, sleep=recording_sleep) == [1, 2, 3]
        assert recording_sleep.delays == [1.0]
