from typing import Any

from ..exceptions import SalesforceInvalidArgument
from ..formatting import url_join
from .base import JSON_HEADERS, ApiResource


class SObjectResource(ApiResource):
    """CRUD operations on single records under ``/sobjects``."""

    def sobject_url(self, sobject_name: str) -> str:
        return url_join(self.data_url, "sobjects", sobject_name)

    async def insert(self, sobject_name: str, body: Any) -> Any:
        return await self.fetcher.fetch_json(
            self.sobject_url(sobject_name), self.json_options("POST", body)
        )

    async def get(self, sobject_name: str, record_id: str) -> Any:
        return await self.fetcher.fetch_json(
            url_join(self.sobject_url(sobject_name), record_id),
            {"headers": dict(JSON_HEADERS), "method": "GET"},
        )

    async def update(self, sobject_name: str, record_id: str | None, body: Any) -> Any:
        if not record_id:
            raise SalesforceInvalidArgument("Invalid body for update, missing id")
        return await self.fetcher.fetch_json(
            url_join(self.sobject_url(sobject_name), record_id),
            self.json_options("PATCH", body),
        )

    async def upsert(
        self,
        sobject_name: str,
        id_field: str | None,
        record_id: str | None,
        body: Any,
    ) -> Any:
        """Insert or update a record matched on the external id field `id_field`."""
        if not record_id or not id_field:
            raise SalesforceInvalidArgument(
                "Invalid body for upsert, missing id/idFieldApiName"
            )
        return await self.fetcher.fetch_json(
            url_join(self.sobject_url(sobject_name), id_field, record_id),
            self.json_options("PATCH", body),
        )

    async def delete(self, sobject_name: str, record_id: str) -> Any:
        return await self.fetcher.fetch_json(
            url_join(self.sobject_url(sobject_name), record_id),
            {"method": "DELETE"},
        )
