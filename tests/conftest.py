"""Shared fixtures: a recording fake of the Bitbucket reports API."""
import io
import uuid
from typing import Any, Dict, List, Tuple

import httpx
import pytest
from rich.console import Console

from code_insights.core.config import BitbucketConfig
from code_insights.services.bitbucket_client import BitbucketApiClient

BASE_URL = "http://api.bitbucket.org/2.0/"


class FakeBitbucket:
    """
    httpx.MockTransport handler that records every request.

    Reports and annotations are answered with a fresh braced uuid, like the
    real API.  `fail` maps a request kind ("report", "annotation", "bulk")
    to the HTTP status to answer with instead.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.report_uuids: List[uuid.UUID] = []
        self.fail: Dict[str, int] = {}
        self.bulk_response: Any = {"values": []}

    @staticmethod
    def kind(request: httpx.Request) -> str:
        if request.method == "POST":
            return "bulk"
        if "/annotations/" in request.url.path:
            return "annotation"
        return "report"

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        kind = self.kind(request)
        if kind in self.fail:
            return httpx.Response(self.fail[kind], json={"error": {"message": "boom"}})
        if kind == "bulk":
            return httpx.Response(200, json=self.bulk_response)
        new_uuid = uuid.uuid4()
        if kind == "report":
            self.report_uuids.append(new_uuid)
        return httpx.Response(200, json={"uuid": f"{{{new_uuid}}}"})

    def of_kind(self, kind: str) -> List[httpx.Request]:
        return [r for r in self.requests if self.kind(r) == kind]


@pytest.fixture
def config() -> BitbucketConfig:
    return BitbucketConfig(
        repo_owner="acme",
        repo_slug="webshop",
        commit="abc123",
        clone_dir="/repo",
        base_url=BASE_URL,
        proxy_url=None,
    )


@pytest.fixture
def fake_api() -> FakeBitbucket:
    return FakeBitbucket()


@pytest.fixture
def api_client(config, fake_api) -> BitbucketApiClient:
    http = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(fake_api))
    return BitbucketApiClient(config, http_client=http)


@pytest.fixture
def console() -> Tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=160, color_system=None), buffer


