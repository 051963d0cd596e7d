from typing import Any

from ..formatting import encode_query, url_join
from .base import ApiResource


class QueryResource(ApiResource):
    async def query(self, soql_query: str) -> Any:
        """
        Execute a SOQL query.
        https://developer.salesforce.com/docs/atlas.en-us.api_rest.meta/api_rest/resources_query.htm
        """
        fetch_url = url_join(
            self.data_url, "query", "?" + encode_query({"q": soql_query})
        )
        return await self.fetcher.fetch_json(
            fetch_url, {"method": "GET", "cache": "no-cache"}
        )
