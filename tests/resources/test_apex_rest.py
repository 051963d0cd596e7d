import json

import pytest

from sf_fetch.resources.apex_rest import ApexRestResource

from .conftest import INSTANCE_URL

ENDPOINT_URL = INSTANCE_URL + "/services/apexrest/v1/orders"


@pytest.fixture
def apex_rest(mock_fetcher, config):
    return ApexRestResource(mock_fetcher, config)


@pytest.mark.asyncio
async def test_get(apex_rest, mock_fetcher):
    await apex_rest.get("/v1/orders")

    mock_fetcher.fetch_json.assert_awaited_once_with(ENDPOINT_URL, {"method": "GET"})


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["post", "patch"])
async def test_methods_with_body(apex_rest, mock_fetcher, method):
    await getattr(apex_rest, method)("v1/orders", {"quantity": 2})

    url, options = mock_fetcher.fetch_json.await_args.args
    assert url == ENDPOINT_URL
    assert options["method"] == method.upper()
    assert options["headers"] == {"Content-Type": "application/json"}
    assert json.loads(options["body"]) == {"quantity": 2}


@pytest.mark.asyncio
async def test_delete(apex_rest, mock_fetcher):
    await apex_rest.delete("v1/orders")

    mock_fetcher.fetch_json.assert_awaited_once_with(ENDPOINT_URL, {"method": "DELETE"})
