from typing import Any

from ..formatting import url_join
from .base import ApiResource


class ApexRestResource(ApiResource):
    """Custom Apex REST endpoints under ``/services/apexrest``."""

    def endpoint_url(self, endpoint_path: str) -> str:
        return url_join(self.instance_url, "services", "apexrest", endpoint_path)

    async def get(self, endpoint_path: str) -> Any:
        return await self.fetcher.fetch_json(
            self.endpoint_url(endpoint_path), {"method": "GET"}
        )

    async def post(self, endpoint_path: str, body: Any) -> Any:
        return await self.fetcher.fetch_json(
            self.endpoint_url(endpoint_path), self.json_options("POST", body)
        )

    async def patch(self, endpoint_path: str, body: Any) -> Any:
        return await self.fetcher.fetch_json(
            self.endpoint_url(endpoint_path), self.json_options("PATCH", body)
        )

    async def delete(self, endpoint_path: str) -> Any:
        return await self.fetcher.fetch_json(
            self.endpoint_url(endpoint_path), {"method": "DELETE"}
        )
