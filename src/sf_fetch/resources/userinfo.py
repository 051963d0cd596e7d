from typing import Any

from ..formatting import url_join
from .base import ApiResource


class UserInfoResource(ApiResource):
    async def get(self) -> Any:
        """
        Returns the OpenID Connect user info for the authenticated user.
        https://help.salesforce.com/s/articleView?id=sf.remoteaccess_using_userinfo_endpoint.htm
        """
        return await self.fetcher.fetch_json(
            url_join(self.instance_url, "services/oauth2/userinfo"),
            {"method": "GET", "cache": "no-cache"},
        )
