"""Exceptions raised by sf_fetch."""

from typing import Any, NamedTuple

import httpx
from typing_extensions import override

from ._models import ErrorBodyJSON, RequestOptions


class SalesforceError(Exception):
    """Base Salesforce API exception"""


class SalesforceUnauthenticated(SalesforceError):
    """Neither an access token nor a refresh token is available."""


class SalesforceMissingRefreshToken(SalesforceError):
    """A token refresh was attempted without a configured refresh token."""


class SalesforceInvalidArgument(SalesforceError, ValueError):
    """A required identifier was omitted; raised before any request is sent."""


class SalesforceMissingConfiguration(SalesforceError):
    """A configuration value needed to build a request is absent."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required configuration value '{field}'")


class SalesforceNoAccessTokenToRevoke(SalesforceError):
    """Revoke was requested while no access token is set."""


class RequestErrorContext(NamedTuple):
    request_url: str
    request_options: RequestOptions
    response_body: Any
    error_code: str | None = None
    error_description: str | None = None


class SalesforceRequestFailed(SalesforceError):
    """
    Salesforce answered a request with an error status.

    `str()` of the exception is the message reported by Salesforce; the
    request and response details are kept on `context` for diagnostics.
    """

    message: str
    context: RequestErrorContext
    status_code: int | None
    response: httpx.Response | None

    def __init__(
        self,
        message: str,
        context: RequestErrorContext,
        response: httpx.Response | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        self.response = response
        self.status_code = response.status_code if response is not None else None

    @property
    def request_url(self) -> str:
        return self.context.request_url

    @property
    def request_options(self) -> RequestOptions:
        return self.context.request_options

    @property
    def response_body(self) -> Any:
        return self.context.response_body

    @property
    def error_code(self) -> str | None:
        return self.context.error_code

    @property
    def error_description(self) -> str | None:
        return self.context.error_description

    @override
    def __str__(self) -> str:
        return self.message

    @override
    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, "
            f"status_code={self.status_code}, url={self.request_url!r})"
        )


class SalesforceMalformedRequest(SalesforceRequestFailed):
    """400: the request couldn't be understood, usually a malformed body."""


class SalesforceExpiredSession(SalesforceRequestFailed):
    """401: the session ID or OAuth token has expired or is invalid."""


class SalesforceRefusedRequest(SalesforceRequestFailed):
    """403: the request has been refused."""


class SalesforceResourceNotFound(SalesforceRequestFailed):
    """404: the requested resource couldn't be found."""


class SalesforceMethodNotAllowedForResource(SalesforceRequestFailed):
    """405: the method isn't allowed for the requested resource."""


class SalesforceApiVersionIncompatible(SalesforceRequestFailed):
    """409: the request conflicts with the current state of the resource."""


class SalesforceResourceRemoved(SalesforceRequestFailed):
    """410: the resource has been removed."""


class SalesforceUnsupportedFormat(SalesforceRequestFailed):
    """415: the entity in the request is in an unsupported format."""


class SalesforceServerError(SalesforceRequestFailed):
    """500: an error has occurred within Lightning Platform."""


class SalesforceServerUnavailable(SalesforceRequestFailed):
    """503: the server is unavailable, often due to API request limits."""


class SalesforceGeneralError(SalesforceRequestFailed):
    """Any other error status."""


class SalesforceRevokeFailed(SalesforceRequestFailed):
    """The revoke endpoint did not accept the access token."""


STATUS_EXCEPTIONS: dict[int, type[SalesforceRequestFailed]] = {
    400: SalesforceMalformedRequest,
    401: SalesforceExpiredSession,
    403: SalesforceRefusedRequest,
    404: SalesforceResourceNotFound,
    405: SalesforceMethodNotAllowedForResource,
    409: SalesforceApiVersionIncompatible,
    410: SalesforceResourceRemoved,
    415: SalesforceUnsupportedFormat,
    500: SalesforceServerError,
    503: SalesforceServerUnavailable,
}


def error_body(response_body: Any) -> ErrorBodyJSON:
    """Salesforce reports REST errors as a list; the first entry is the one we read."""
    if isinstance(response_body, list) and response_body:
        response_body = response_body[0]
    if isinstance(response_body, dict):
        return response_body
    return {}


def build_request_error(
    request_url: str,
    request_options: RequestOptions,
    response: httpx.Response,
    response_body: Any,
    exception_type: type[SalesforceRequestFailed] | None = None,
) -> SalesforceRequestFailed:
    """Classifies an error response into a `SalesforceRequestFailed` subclass."""
    body = error_body(response_body)
    context = RequestErrorContext(
        request_url=request_url,
        request_options=request_options,
        response_body=body or response_body,
        error_code=body.get("error"),
        error_description=body.get("error_description"),
    )
    message = (
        body.get("message")
        or body.get("error")
        or f"{response.status_code} {response.reason_phrase}".strip()
    )
    if exception_type is None:
        exception_type = STATUS_EXCEPTIONS.get(
            response.status_code, SalesforceGeneralError
        )
    return exception_type(message, context, response)
