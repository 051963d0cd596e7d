from .client import SalesforceClient
from .fetcher import Fetcher, PendingRequest
from .auth import CredentialCell
from .events import FetcherEvent
from .options import (
    SalesforceConfig,
    SalesforceOptions,
    format_api_version,
    options_from_env,
    with_defaults,
)
from .exceptions import (
    SalesforceError,
    SalesforceInvalidArgument,
    SalesforceMissingConfiguration,
    SalesforceMissingRefreshToken,
    SalesforceNoAccessTokenToRevoke,
    SalesforceRequestFailed,
    SalesforceRevokeFailed,
    SalesforceUnauthenticated,
)

__all__ = [
    "SalesforceClient",
    "Fetcher",
    "PendingRequest",
    "CredentialCell",
    "FetcherEvent",
    "SalesforceConfig",
    "SalesforceOptions",
    "format_api_version",
    "options_from_env",
    "with_defaults",
    "SalesforceError",
    "SalesforceInvalidArgument",
    "SalesforceMissingConfiguration",
    "SalesforceMissingRefreshToken",
    "SalesforceNoAccessTokenToRevoke",
    "SalesforceRequestFailed",
    "SalesforceRevokeFailed",
    "SalesforceUnauthenticated",
]
