import asyncio
from collections.abc import Coroutine
import json
from types import TracebackType
from typing import Any, NamedTuple

import httpx

from ._models import RequestOptions
from .auth import CredentialCell
from .concurrency import run_with_concurrency
from .events import EventEmitter, FetcherEvent
from .exceptions import (
    SalesforceMissingRefreshToken,
    SalesforceNoAccessTokenToRevoke,
    SalesforceRequestFailed,
    SalesforceRevokeFailed,
    SalesforceUnauthenticated,
    build_request_error,
    error_body,
)
from .formatting import encode_form
from .logger import getLogger
from .metrics import ApiUsage, parse_api_usage
from .options import SalesforceConfig, SalesforceOptions

LOGGER = getLogger("fetcher")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
BAD_OAUTH_TOKEN = "Bad_OAuth_Token"
DEFAULT_RETRY_CONCURRENCY = 10


class PendingRequest(NamedTuple):
    """A request that hit an invalid session and waits for a token refresh."""

    request_url: str
    request_options: RequestOptions
    future: asyncio.Future

    def resolve(self, result: Any):
        if not self.future.done():
            self.future.set_result(result)

    def reject(self, error: BaseException):
        if not self.future.done():
            self.future.set_exception(error)

    def cancel(self):
        self.future.cancel()


class Fetcher(EventEmitter):
    """
    Issues authenticated requests against the Salesforce REST API.

    When a request is answered with 401/403 it is queued, a single token
    refresh is started for the whole queue, and every queued request is
    replayed with the new token once the refresh settles. Callers only see
    the outcome of the replay, or the refresh error if the refresh failed.
    """

    # Salesforce expects a plain bearer credential here. Subclasses that need
    # the legacy "Authorization: Bearer <token>" value can override this.
    AUTHORIZATION_FORMAT = "Bearer {access_token}"

    config: SalesforceConfig
    credentials: CredentialCell
    client: httpx.AsyncClient
    is_refreshing_access_token: bool
    pending_requests: list[PendingRequest]
    api_usage: ApiUsage | None = None

    def __init__(
        self,
        config: SalesforceConfig,
        credentials: CredentialCell | None = None,
        client: httpx.AsyncClient | None = None,
        retry_concurrency: int = DEFAULT_RETRY_CONCURRENCY,
    ):
        super().__init__()
        self.config = config
        self.credentials = credentials if credentials is not None else CredentialCell()
        self._owns_client = client is None
        self.client = client if client is not None else httpx.AsyncClient()
        self.retry_concurrency = retry_concurrency
        self.is_refreshing_access_token = False
        self.pending_requests = []
        self._refresh_task: asyncio.Task | None = None

    @classmethod
    def from_options(cls, options: SalesforceOptions, **kwargs) -> "Fetcher":
        return cls(
            SalesforceConfig.from_options(options),
            CredentialCell(options.get("access_token")),
            **kwargs,
        )

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
        if self._owns_client:
            await self.client.aclose()

    async def get_access_token(self) -> str:
        if access_token := self.credentials.get():
            return access_token
        if self.config.refresh_token:
            LOGGER.info("No access token, refreshing access token")
            return await self._refresh_access_token()
        raise SalesforceUnauthenticated("No access token")

    async def fetch_json(
        self, request_url: str, request_options: RequestOptions | None = None
    ) -> Any:
        """
        Sends an authenticated request and returns the parsed JSON body.

        Raises:
            SalesforceRequestFailed: the response status was 400 or above
            SalesforceUnauthenticated: no access token could be obtained
        """
        if request_options is None:
            request_options = {"method": "GET"}
        return await self._fetch_json(request_url, request_options)

    async def _fetch_json(
        self,
        request_url: str,
        request_options: RequestOptions,
        replay: bool = False,
    ) -> Any:
        headers = await self._add_authorization_header(request_options.get("headers"))
        request_options = {**request_options, "headers": headers}

        response = await self._send(request_url, request_options)
        response_body = self._parse_response_body(response)

        if self._is_invalid_session(response) and not replay:
            pending_request = PendingRequest(
                request_url,
                request_options,
                asyncio.get_running_loop().create_future(),
            )
            self.pending_requests.append(pending_request)
            self._refresh_access_token_and_retry_pending_requests()
            return await pending_request.future

        if self._is_error_response(response):
            self._throw_error(request_url, request_options, response, response_body)

        return response_body

    async def _add_authorization_header(
        self, headers: dict[str, str] | None = None
    ) -> dict[str, str]:
        access_token = await self.get_access_token()
        return {
            **(headers or {}),
            "Authorization": self.AUTHORIZATION_FORMAT.format(access_token=access_token),
        }

    async def _send(
        self, request_url: str, request_options: RequestOptions
    ) -> httpx.Response:
        method = request_options.get("method", "GET")
        headers = dict(request_options.get("headers") or {})
        if cache := request_options.get("cache"):
            headers.setdefault("Cache-Control", cache)

        response = await self.client.request(
            method,
            request_url,
            headers=headers,
            content=request_options.get("body"),
        )
        LOGGER.debug("%s %s -> %d", method, request_url, response.status_code)

        if sforce_limit_info := response.headers.get("Sforce-Limit-Info"):
            self.api_usage = parse_api_usage(sforce_limit_info)
        return response

    def _parse_response_body(self, response: httpx.Response) -> Any:
        text = response.text
        LOGGER.debug("response body text ==> %s", text)
        if text == BAD_OAUTH_TOKEN:
            return {"error": BAD_OAUTH_TOKEN}
        if text:
            return json.loads(text)
        return {}

    @staticmethod
    def _is_invalid_session(response: httpx.Response) -> bool:
        return response.status_code in (401, 403)

    @staticmethod
    def _is_error_response(response: httpx.Response) -> bool:
        return response.status_code >= 400

    def _throw_error(
        self,
        request_url: str,
        request_options: RequestOptions,
        response: httpx.Response,
        response_body: Any,
        exception_type: type[SalesforceRequestFailed] | None = None,
    ):
        body = error_body(response_body)
        description = body.get("error_description")
        if description == "expired access/refresh token":
            self.emit(FetcherEvent.TOKEN_EXPIRED, response)
        if description == "inactive user":
            self.emit(FetcherEvent.INACTIVE_USER, response)

        LOGGER.debug("error %s", response_body)
        raise build_request_error(
            request_url, request_options, response, response_body, exception_type
        )

    async def _refresh_access_token(self) -> str:
        if not self.config.refresh_token:
            raise SalesforceMissingRefreshToken(
                "Could not refresh access token, no refresh token provided"
            )
        self.emit(FetcherEvent.ACCESS_TOKEN_REFRESHING)

        request_url = self.config.token_url
        fields = {
            "grant_type": "refresh_token",
            "refresh_token": self.config.refresh_token,
            "client_id": self.config.require("client_id"),
            "format": "json",
        }
        if self.config.client_secret:
            fields["client_secret"] = self.config.client_secret
        request_options: RequestOptions = {
            "method": "POST",
            "headers": {"Content-Type": FORM_CONTENT_TYPE},
            "cache": "no-cache",
            "body": encode_form(fields),
        }

        response = await self._send(request_url, request_options)
        response_body = self._parse_response_body(response)
        if self._is_error_response(response):
            self._throw_error(request_url, request_options, response, response_body)

        access_token = error_body(response_body).get("access_token")
        if not access_token:
            raise build_request_error(
                request_url,
                request_options,
                response,
                {"message": "Token response did not include an access token"},
            )

        LOGGER.info("Access token refreshed")
        self.credentials.set(access_token)
        self.emit(FetcherEvent.ACCESS_TOKEN_REFRESHED, access_token)
        return access_token

    def _refresh_access_token_and_retry_pending_requests(self) -> asyncio.Task | None:
        # The gate is checked and set without suspending, so no other request
        # can start a second refresh in between.
        if self.is_refreshing_access_token:
            LOGGER.info("Already refreshing token")
            return None
        self.is_refreshing_access_token = True
        LOGGER.info("Refreshing token and retrying pending requests")
        self._refresh_task = asyncio.ensure_future(self._refresh_and_retry())
        return self._refresh_task

    async def _refresh_and_retry(self):
        try:
            try:
                await self._refresh_access_token()
            except Exception as error:
                LOGGER.warning("Access token refresh failed: %s", error)
                self._reject_pending_requests(error)
                return
            await self._retry_pending_requests()
        finally:
            self.is_refreshing_access_token = False

    async def _retry_pending_requests(self):
        # Requests that were queued while replaying are picked up by the next
        # round, so nothing queued before the gate clears is left behind.
        while self.pending_requests:
            pending_requests, self.pending_requests = self.pending_requests, []
            LOGGER.info("Attempting to retry %d pending requests", len(pending_requests))
            try:
                results = await run_with_concurrency(
                    self.retry_concurrency,
                    (
                        self._fetch_json(
                            pending_request.request_url,
                            pending_request.request_options,
                            replay=True,
                        )
                        for pending_request in pending_requests
                    ),
                )
            except asyncio.CancelledError:
                for pending_request in pending_requests:
                    pending_request.cancel()
                raise
            for pending_request, result in zip(pending_requests, results):
                if isinstance(result, BaseException):
                    pending_request.reject(result)
                else:
                    pending_request.resolve(result)
            LOGGER.debug("%d pending requests have been retried", len(pending_requests))

    def _reject_pending_requests(self, error: BaseException):
        pending_requests, self.pending_requests = self.pending_requests, []
        for pending_request in pending_requests:
            pending_request.reject(error)

    def revoke_access_token(self) -> Coroutine[Any, Any, None]:
        """
        Revokes the current access token.

        The missing-token check happens immediately, before anything is
        awaited; the returned coroutine performs the revoke request.

        Raises:
            SalesforceNoAccessTokenToRevoke: no access token is set
        """
        access_token = self.credentials.get()
        if not access_token:
            raise SalesforceNoAccessTokenToRevoke("No Access Token to Revoke")
        return self._revoke_access_token(access_token)

    async def _revoke_access_token(self, access_token: str):
        self.emit(FetcherEvent.ACCESS_TOKEN_REVOKING)
        request_url = self.config.revoke_url
        request_options: RequestOptions = {
            "method": "POST",
            "headers": {"Content-Type": FORM_CONTENT_TYPE},
            "body": encode_form({"token": access_token}),
        }

        response = await self._send(request_url, request_options)
        response_body = self._parse_response_body(response)
        if not response.is_success:
            self._throw_error(
                request_url,
                request_options,
                response,
                response_body,
                SalesforceRevokeFailed,
            )

        # A refresh still in flight must not write a token after the revoke.
        await self._cancel_refresh()
        self.credentials.clear()
        LOGGER.info("Access token revoked")
        self.emit(FetcherEvent.ACCESS_TOKEN_REVOKED)
        self._cancel_pending_requests()

    async def _cancel_refresh(self):
        refresh_task = self._refresh_task
        if refresh_task is None or refresh_task.done():
            return
        LOGGER.info("Cancelling access token refresh in progress")
        refresh_task.cancel()
        await asyncio.wait([refresh_task])

    def _cancel_pending_requests(self):
        pending_requests, self.pending_requests = self.pending_requests, []
        for pending_request in pending_requests:
            pending_request.cancel()
