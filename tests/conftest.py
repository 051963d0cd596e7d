from collections.abc import Awaitable, Callable
import inspect

import httpx
import pytest

from sf_fetch.fetcher import Fetcher
from sf_fetch.options import SalesforceOptions

INSTANCE_URL = "https://test.my.salesforce.com/requiredtest"
TOKEN_URL = INSTANCE_URL + "/services/oauth2/token"
REVOKE_URL = INSTANCE_URL + "/services/oauth2/revoke"
RESOURCE_URL = INSTANCE_URL + "/services/data/v38.0/sobjects/Account/001"

Handler = Callable[
    [httpx.Request], httpx.Response | Awaitable[httpx.Response]
]


class MockSalesforce:
    """Answers requests by URL path and records every request it receives."""

    def __init__(self):
        self.routes: dict[str, Handler | httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def route(self, url: str, handler: Handler | httpx.Response):
        self.routes[httpx.URL(url).path] = handler

    def calls(self, url: str) -> list[httpx.Request]:
        path = httpx.URL(url).path
        return [request for request in self.requests if request.url.path == path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(404, json=[{"message": "no route"}])
        if isinstance(handler, httpx.Response):
            return httpx.Response(
                handler.status_code, headers=handler.headers, content=handler.content
            )
        response = handler(request)
        if inspect.isawaitable(response):
            response = await response
        return response


@pytest.fixture
def options() -> SalesforceOptions:
    return {
        "instance_url": INSTANCE_URL,
        "client_id": "requiredClientID",
        "refresh_token": "requiredRefreshToken",
    }


@pytest.fixture
def mock_salesforce() -> MockSalesforce:
    salesforce = MockSalesforce()
    salesforce.route(
        TOKEN_URL, httpx.Response(200, json={"access_token": "refreshedAccessToken"})
    )
    return salesforce


@pytest.fixture
def http_client(mock_salesforce) -> httpx.AsyncClient:
    # MockTransport holds no connections, so the client needs no closing
    return httpx.AsyncClient(transport=httpx.MockTransport(mock_salesforce))


@pytest.fixture
def fetcher(options, http_client) -> Fetcher:
    return Fetcher.from_options(options, client=http_client)
