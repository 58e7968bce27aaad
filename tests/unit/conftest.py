"""Shared fakes for the unit tests.

``FakeAdapter`` is mounted on a real ``requests.Session`` so requests go through
the genuine preparation, auth and streaming code paths without a network.
"""

from __future__ import annotations

import io
from typing import Any, Callable, Dict, List, Optional, Union

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from structurizr_client.config import ClientConfig

BASE_URL = "https://structurizr.example.com"
ADMIN_KEY = "admin-key"


class TrackingStream(io.BytesIO):
    """Response body stream that records whether the connection was released."""

    def __init__(self, data: bytes, on_read: Optional[Callable[[], None]] = None):
        super().__init__(data)
        self.size = len(data)
        self.released = False
        self._on_read = on_read

    def read(self, *args, **kwargs):
        if self._on_read is not None:
            self._on_read()
        return super().read(*args, **kwargs)

    def release_conn(self):
        self.released = True

    def close(self):
        if not self.closed:
            self._final_pos = self.tell()
        super().close()

    @property
    def fully_read(self) -> bool:
        pos = self._final_pos if self.closed else self.tell()
        return pos == self.size


class FakeAdapter(BaseAdapter):
    """Transport adapter returning queued responses and recording requests."""

    def __init__(self):
        super().__init__()
        self.requests: List[requests.PreparedRequest] = []
        self.send_kwargs: List[Dict[str, Any]] = []
        self.streams: List[TrackingStream] = []
        self._queue: List[Union[BaseException, Dict[str, Any]]] = []

    def add(
        self,
        status_code: int = 200,
        body: Union[bytes, str] = b"",
        headers: Optional[Dict[str, str]] = None,
        on_read: Optional[Callable[[], None]] = None,
    ) -> FakeAdapter:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._queue.append({"status_code": status_code, "body": body, "headers": headers or {}, "on_read": on_read})
        return self

    def add_error(self, exc: BaseException) -> FakeAdapter:
        self._queue.append(exc)
        return self

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        self.send_kwargs.append({"stream": stream, "timeout": timeout, "verify": verify})

        item = self._queue.pop(0)
        if isinstance(item, BaseException):
            raise item

        response = requests.Response()
        response.status_code = item["status_code"]
        response.headers = CaseInsensitiveDict(item["headers"])
        response.raw = TrackingStream(item["body"], on_read=item["on_read"])
        response.url = request.url
        response.request = request
        response.encoding = "utf-8"
        self.streams.append(response.raw)
        return response

    def close(self):
        pass


@pytest.fixture
def adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def session(adapter) -> requests.Session:
    s = requests.Session()
    s.trust_env = False
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL, admin_api_key=ADMIN_KEY, timeout=5.0)
