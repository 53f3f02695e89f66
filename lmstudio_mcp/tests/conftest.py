from typing import Any, Dict, List, Optional

import httpx
import pytest


class FakeHttp:
    """记录 httpx.AsyncClient 的调用，并返回预设的响应或异常。"""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.client_kwargs: Dict[str, Any] = {}
        self.response: httpx.Response = httpx.Response(200, json={})
        self.error: Optional[Exception] = None

    @property
    def last(self) -> Dict[str, Any]:
        return self.calls[-1]


class SettingsStub:
    base_url = "http://localhost:1234"
    default_model = "local-model"
    http_timeout = 1.0


@pytest.fixture
def fake_http(monkeypatch):
    state = FakeHttp()

    class Client:
        def __init__(self, *a, **kw):
            state.client_kwargs = kw

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def request(self, method, url, json=None, headers=None):
            state.calls.append({"method": method, "url": url, "json": json, "headers": headers})
            if state.error is not None:
                raise state.error
            return state.response

    monkeypatch.setattr("httpx.AsyncClient", Client)
    return state


@pytest.fixture
def settings_stub():
    return SettingsStub()
