import json
from typing import Any

from .._models import RequestOptions
from ..fetcher import Fetcher
from ..formatting import url_join
from ..options import SalesforceConfig, format_api_version

JSON_HEADERS = {"Content-Type": "application/json"}


class ApiResource:
    """Builds URLs and payloads for one family of endpoints and hands them to the fetcher."""

    fetcher: Fetcher
    config: SalesforceConfig

    def __init__(self, fetcher: Fetcher, config: SalesforceConfig | None = None):
        self.fetcher = fetcher
        self.config = config if config is not None else fetcher.config

    @property
    def instance_url(self) -> str:
        return self.config.require("instance_url")

    @property
    def data_url(self) -> str:
        return url_join(
            self.instance_url, "services/data", format_api_version(self.config.api_version)
        )

    @staticmethod
    def json_options(method: str, body: Any) -> RequestOptions:
        return {
            "headers": dict(JSON_HEADERS),
            "method": method,
            "body": json.dumps(body),
        }
