"""Root conftest: shared fakes and environment isolation."""

from collections.abc import Mapping
from typing import Any
from unittest.mock import AsyncMock

import pytest

from adapters.parameters import MappingParameterSource
from core.domain.errors import TransportError
from core.domain.models import Credentials
from core.services.action_runner import ActionRunner


class FakeTransport:
    """Scripted transport: each call pops the next response or raises it."""

    def __init__(self, *responses: Any) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    async def request(
        self,
        *,
        method: str,
        url: str,
        json: bool = True,
        body: Any = None,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        self.calls.append(
            {
                "method": method,
                "url": url,
                "json": json,
                "body": body,
                "query": query,
                "headers": dict(headers or {}),
            }
        )
        if not self._responses:
            return {"ok": True}
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


class StaticCredentialStore:
    def __init__(self, api_key: str = "test-key", base_url: str | None = "https://api.test/hl/v1/") -> None:
        self.credentials = Credentials(api_key=api_key, base_url=base_url)
        self.requested: list[str] = []

    def get_credentials(self, provider_name: str) -> Credentials:
        self.requested.append(provider_name)
        return self.credentials


def http_error(status: int, body: Any = None) -> TransportError:
    return TransportError(f"HTTP {status}", status_code=status, body=body)


@pytest.fixture(autouse=True)
def isolate_mayar_env(monkeypatch):
    """Tests only see MAYAR_* variables they set explicitly."""
    import os

    for key in list(os.environ):
        if key.startswith("MAYAR_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def no_sleep():
    return AsyncMock()


@pytest.fixture
def credentials():
    return StaticCredentialStore()


@pytest.fixture
def make_runner(credentials, no_sleep):
    """Build an ActionRunner over a parameter mapping and a scripted transport."""

    def _make(params: dict[str, Any], transport: FakeTransport) -> ActionRunner:
        return ActionRunner(
            parameters=MappingParameterSource(params),
            credentials=credentials,
            transport=transport,
            sleep=no_sleep,
        )

    return _make
