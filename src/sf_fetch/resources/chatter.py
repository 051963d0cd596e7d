from typing import Any

from .._models import RequestOptions
from ..exceptions import SalesforceInvalidArgument
from ..formatting import url_join
from .base import JSON_HEADERS, ApiResource


class ChatterResource(ApiResource):
    """Chatter / Connect REST feed resources, scoped to a community when one is configured."""

    @property
    def chatter_url(self) -> str:
        communities_path = ""
        if self.config.sfdc_community_id:
            communities_path = url_join(
                "connect/communities", self.config.sfdc_community_id
            )
        return url_join(self.data_url, communities_path, "chatter")

    async def retrieve(self, resource: str, connect_bearer_urls: bool = False) -> Any:
        fetch_options: RequestOptions = {"method": "GET", "cache": "no-cache"}
        if connect_bearer_urls:
            fetch_options["headers"] = {"X-Connect-Bearer-Urls": "true"}
        return await self.fetcher.fetch_json(
            url_join(self.chatter_url, resource), fetch_options
        )

    async def create(self, resource: str, body: Any) -> Any:
        return await self.fetcher.fetch_json(
            url_join(self.chatter_url, resource), self.json_options("POST", body)
        )

    async def update(self, resource: str, resource_id: str | None, body: Any) -> Any:
        if not resource_id:
            raise SalesforceInvalidArgument("Invalid body for update, missing id")
        return await self.fetcher.fetch_json(
            url_join(self.chatter_url, resource, resource_id),
            self.json_options("PATCH", body),
        )

    async def delete(self, resource: str, resource_id: str) -> Any:
        return await self.fetcher.fetch_json(
            url_join(self.chatter_url, resource, resource_id),
            {"headers": dict(JSON_HEADERS), "method": "DELETE"},
        )
