from unittest.mock import AsyncMock

import pytest

from sf_fetch.fetcher import Fetcher
from sf_fetch.options import SalesforceConfig

INSTANCE_URL = "https://test.my.salesforce.com"
DATA_URL = INSTANCE_URL + "/services/data/v38.0"


@pytest.fixture
def config() -> SalesforceConfig:
    return SalesforceConfig.from_options(
        {
            "instance_url": INSTANCE_URL,
            "client_id": "clientID",
            "refresh_token": "refreshToken",
        }
    )


@pytest.fixture
def mock_fetcher(config, mocker):
    """Fetcher whose fetch_json is replaced with an AsyncMock returning "success"."""
    fetcher = Fetcher(config, client=mocker.Mock())
    mocker.patch.object(
        fetcher, "fetch_json", new_callable=AsyncMock, return_value="success"
    )
    return fetcher
