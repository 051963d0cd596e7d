"""Client options, their defaults and the immutable configuration snapshot."""

import os
from typing import NamedTuple, TypedDict

from .exceptions import SalesforceMissingConfiguration
from .formatting import url_join


class SalesforceOptions(TypedDict, total=False):
    instance_url: str
    client_id: str
    client_secret: str
    refresh_token: str
    access_token: str
    api_version: int | float
    sfdc_community_id: str
    authorization_service_url: str
    authorization_response_type: str
    token_service_url: str
    revoke_service_url: str
    redirect_uri: str
    log_level: str


DEFAULT_OPTIONS: SalesforceOptions = {
    "api_version": 38,
    "authorization_response_type": "token",
}

# environment variable -> option key
ENVIRONMENT_OPTIONS: dict[str, str] = {
    "SF_INSTANCE_URL": "instance_url",
    "SF_CLIENT_ID": "client_id",
    "SF_CLIENT_SECRET": "client_secret",
    "SF_REFRESH_TOKEN": "refresh_token",
    "SF_ACCESS_TOKEN": "access_token",
    "SF_API_VERSION": "api_version",
    "SF_COMMUNITY_ID": "sfdc_community_id",
    "SF_REDIRECT_URI": "redirect_uri",
    "SF_LOG_LEVEL": "log_level",
}


def with_defaults(options: SalesforceOptions) -> SalesforceOptions:
    """
    Returns a copy of `options` with `api_version` and
    `authorization_response_type` filled in when absent.
    Keys that are present are kept as given, even when falsy.
    """
    return {**DEFAULT_OPTIONS, **options}  # type: ignore[typeddict-item]


def format_api_version(api_version: int | float) -> str:
    """Formats an API version for REST paths, e.g. ``38`` -> ``"v38.0"``"""
    return f"v{float(api_version):.1f}"


def options_from_env(environ: dict[str, str] | None = None) -> SalesforceOptions:
    """Reads client options from ``SF_*`` environment variables.

    Unset variables are left out so that `with_defaults` still applies.
    """
    if environ is None:
        environ = dict(os.environ)
    options: SalesforceOptions = {}
    for variable, key in ENVIRONMENT_OPTIONS.items():
        if (value := environ.get(variable)) is None:
            continue
        if key == "api_version":
            options["api_version"] = float(value) if "." in value else int(value)
        else:
            options[key] = value  # type: ignore[literal-required]
    return options


class SalesforceConfig(NamedTuple):
    """Immutable view of the client options.

    The access token is deliberately absent: it lives in the
    `CredentialCell` owned by the fetcher.
    """

    instance_url: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    refresh_token: str | None = None
    api_version: int | float = DEFAULT_OPTIONS["api_version"]
    sfdc_community_id: str | None = None
    authorization_service_url: str | None = None
    authorization_response_type: str = DEFAULT_OPTIONS["authorization_response_type"]
    token_service_url: str | None = None
    revoke_service_url: str | None = None
    redirect_uri: str | None = None
    log_level: str | None = None

    @classmethod
    def from_options(cls, options: SalesforceOptions) -> "SalesforceConfig":
        options = with_defaults(options)
        return cls(**{key: options[key] for key in cls._fields if key in options})

    def require(self, field: str):
        value = getattr(self, field)
        if value is None or value == "":
            raise SalesforceMissingConfiguration(field)
        return value

    @property
    def token_url(self) -> str:
        if self.token_service_url:
            return self.token_service_url
        return url_join(self.require("instance_url"), "/services/oauth2/token")

    @property
    def revoke_url(self) -> str:
        if self.revoke_service_url:
            return self.revoke_service_url
        return url_join(self.require("instance_url"), "/services/oauth2/revoke")

    @property
    def authorization_url(self) -> str:
        if self.authorization_service_url:
            return self.authorization_service_url
        return url_join(self.require("instance_url"), "/services/oauth2/authorize")
