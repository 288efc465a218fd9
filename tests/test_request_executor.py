"""RequestExecutor: URL building, auth header, linear-backoff retries.

Invariants:
    - Retryable status + attempts left -> retry after retry_delay_ms * attempt
    - Non-retryable status -> exactly one call, error propagated unchanged
    - Failures without a status fall back to 500 for the retry decision
"""

import pytest

from conftest import FakeTransport, http_error
from core.domain.errors import NetworkError, TransportError
from core.domain.models import Credentials, HttpCallSpec, RetryPolicy
from core.services.request_executor import RequestExecutor, build_url, extract_status_code

CREDS = Credentials(api_key="secret", base_url="https://api.test/hl/v1/")
BALANCE = HttpCallSpec(method="GET", path="/balance")


# -- build_url -----------------------------------------------------------------

@pytest.mark.parametrize(
    "base, path",
    [
        ("https://api.test/v1", "/balance"),
        ("https://api.test/v1/", "/balance"),
        ("https://api.test/v1/", "balance"),
        ("https://api.test/v1", "balance"),
    ],
)
def test_build_url_joins_with_single_slash(base, path):
    assert build_url(base, path) == "https://api.test/v1/balance"


def test_default_base_url_used_when_credentials_have_none():
    assert Credentials(api_key="k").resolved_base_url() == "https://api.mayar.id/hl/v1"


# -- extract_status_code -------------------------------------------------------

def test_extract_status_code_prefers_status_code_then_status():
    class _WithStatus(Exception):
        status = 502

    assert extract_status_code(http_error(429)) == 429
    assert extract_status_code(_WithStatus()) == 502
    assert extract_status_code(RuntimeError("boom")) == 500
    assert extract_status_code(NetworkError("dns")) == 500


# -- execute -------------------------------------------------------------------

async def test_attaches_bearer_and_caller_headers(no_sleep):
    transport = FakeTransport({"balance": 1000})
    spec = HttpCallSpec(method="GET", path="/balance", headers={"X-Trace": "abc"})

    result = await RequestExecutor(transport, sleep=no_sleep).execute(spec, RetryPolicy(), CREDS)

    assert result == {"balance": 1000}
    call = transport.calls[0]
    assert call["url"] == "https://api.test/hl/v1/balance"
    assert call["headers"] == {"Authorization": "Bearer secret", "X-Trace": "abc"}
    assert call["json"] is True


async def test_passes_body_and_query(no_sleep):
    transport = FakeTransport({"ok": True})
    spec = HttpCallSpec(method="POST", path="/customer/create", body={"name": "A"}, query={"page": 1})

    await RequestExecutor(transport, sleep=no_sleep).execute(spec, RetryPolicy(), CREDS)

    assert transport.calls[0]["method"] == "POST"
    assert transport.calls[0]["body"] == {"name": "A"}
    assert transport.calls[0]["query"] == {"page": 1}


@pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
@pytest.mark.parametrize("max_retries", [0, 1, 3, 5])
async def test_retryable_status_exhausts_exactly_n_plus_one_calls(status, max_retries, no_sleep):
    transport = FakeTransport(*[http_error(status) for _ in range(max_retries + 2)])
    policy = RetryPolicy(max_retries=max_retries, retry_delay_ms=100)

    with pytest.raises(TransportError) as exc_info:
        await RequestExecutor(transport, sleep=no_sleep).execute(BALANCE, policy, CREDS)

    assert exc_info.value.status_code == status
    assert len(transport.calls) == max_retries + 1
    assert [c.args[0] for c in no_sleep.await_args_list] == pytest.approx(
        [0.1 * k for k in range(1, max_retries + 1)]
    )


async def test_retry_delay_is_linear_not_exponential(no_sleep):
    transport = FakeTransport(http_error(503), http_error(503), http_error(503), {"ok": True})
    policy = RetryPolicy(max_retries=3, retry_delay_ms=500)

    await RequestExecutor(transport, sleep=no_sleep).execute(BALANCE, policy, CREDS)

    assert [c.args[0] for c in no_sleep.await_args_list] == [0.5, 1.0, 1.5]


async def test_succeeds_after_transient_failures(no_sleep):
    transport = FakeTransport(http_error(503), http_error(503), {"balance": 5})
    policy = RetryPolicy(max_retries=2, retry_delay_ms=10)

    result = await RequestExecutor(transport, sleep=no_sleep).execute(BALANCE, policy, CREDS)

    assert result == {"balance": 5}
    assert len(transport.calls) == 3


@pytest.mark.parametrize("status", [400, 401, 403, 404, 422, 501])
async def test_non_retryable_status_makes_one_attempt(status, no_sleep):
    error = http_error(status, body={"message": "nope"})
    transport = FakeTransport(error, {"ok": True})
    policy = RetryPolicy(max_retries=5, retry_delay_ms=10)

    with pytest.raises(TransportError) as exc_info:
        await RequestExecutor(transport, sleep=no_sleep).execute(BALANCE, policy, CREDS)

    assert exc_info.value is error
    assert exc_info.value.body == {"message": "nope"}
    assert len(transport.calls) == 1
    no_sleep.assert_not_awaited()


async def test_network_error_falls_back_to_500_and_is_retried(no_sleep):
    transport = FakeTransport(NetworkError("connection refused"), {"ok": True})
    policy = RetryPolicy(max_retries=1, retry_delay_ms=0)

    result = await RequestExecutor(transport, sleep=no_sleep).execute(BALANCE, policy, CREDS)

    assert result == {"ok": True}
    assert len(transport.calls) == 2


async def test_custom_retryable_set_is_respected(no_sleep):
    transport = FakeTransport(http_error(503))
    policy = RetryPolicy(max_retries=3, retryable_status_codes=frozenset({429}))

    with pytest.raises(TransportError):
        await RequestExecutor(transport, sleep=no_sleep).execute(BALANCE, policy, CREDS)

    assert len(transport.calls) == 1


@pytest.mark.parametrize("kwargs", [{"max_retries": 6}, {"max_retries": -1}, {"retry_delay_ms": 30_001}])
def test_retry_policy_bounds(kwargs):
    from pydantic import ValidationError as PydanticValidationError

    with pytest.raises(PydanticValidationError):
        RetryPolicy(**kwargs)
