from types import TracebackType
from typing_extensions import Unpack

import httpx

from ._models import AuthorizationOptionalParameters
from .auth import CredentialCell
from .events import EventHandler, FetcherEvent, Unsubscribe
from .fetcher import DEFAULT_RETRY_CONCURRENCY, Fetcher
from .formatting import encode_query, url_join
from .logger import set_log_level
from .options import SalesforceConfig, SalesforceOptions, options_from_env, with_defaults
from .resources import (
    ApexRestResource,
    ChatterResource,
    QueryResource,
    SObjectResource,
    UserInfoResource,
)


class SalesforceClient:
    """
    Entry point bundling a `Fetcher` with every resource built on it.

    All resources share the client's configuration snapshot and the fetcher's
    access token, so a refresh triggered by one is seen by all of them.
    """

    options: SalesforceOptions
    config: SalesforceConfig
    fetcher: Fetcher
    fetch_sobject: SObjectResource
    fetch_query: QueryResource
    fetch_chatter: ChatterResource
    fetch_apex_rest: ApexRestResource
    fetch_user_info: UserInfoResource

    def __init__(
        self,
        options: SalesforceOptions,
        http_client: httpx.AsyncClient | None = None,
        retry_concurrency: int = DEFAULT_RETRY_CONCURRENCY,
    ):
        self.options = with_defaults(options)
        self.config = SalesforceConfig.from_options(self.options)
        set_log_level(self.config.log_level)

        self.fetcher = Fetcher(
            self.config,
            CredentialCell(self.options.get("access_token")),
            client=http_client,
            retry_concurrency=retry_concurrency,
        )
        self.fetch_sobject = SObjectResource(self.fetcher, self.config)
        self.fetch_query = QueryResource(self.fetcher, self.config)
        self.fetch_chatter = ChatterResource(self.fetcher, self.config)
        self.fetch_apex_rest = ApexRestResource(self.fetcher, self.config)
        self.fetch_user_info = UserInfoResource(self.fetcher, self.config)

    @classmethod
    def from_env(cls, **kwargs) -> "SalesforceClient":
        return cls(options_from_env(), **kwargs)

    def __str__(self):
        return f"{type(self).__name__} ({self.config.instance_url})"

    async def __aenter__(self):
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None = None,
        exc_value: BaseException | None = None,
        traceback: TracebackType | None = None,
    ) -> None:
        await self.aclose()

    async def aclose(self):
        await self.fetcher.aclose()

    @property
    def access_token(self) -> str | None:
        return self.fetcher.credentials.get()

    def subscribe(self, event: FetcherEvent, handler: EventHandler) -> Unsubscribe:
        return self.fetcher.subscribe(event, handler)

    def revoke_access_token(self):
        return self.fetcher.revoke_access_token()

    def build_authorization_url(
        self, **optional_parameters: Unpack[AuthorizationOptionalParameters]
    ) -> str:
        """
        Builds the URL a user is sent to in order to authorize this connected app.
        https://help.salesforce.com/s/articleView?id=sf.remoteaccess_oauth_endpoints.htm
        """
        parameters = {
            "response_type": self.config.authorization_response_type,
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri or "",
            **optional_parameters,
        }
        return url_join(self.config.authorization_url, "?" + encode_query(parameters))
