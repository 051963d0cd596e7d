from typing import Any, TypedDict


class RequestOptions(TypedDict, total=False):
    method: str
    headers: dict[str, str]
    body: str
    cache: str


class AuthorizationOptionalParameters(TypedDict, total=False):
    scope: str
    state: str
    display: str
    login_hint: str
    nonce: str
    prompt: str


ErrorBodyJSON = dict[str, Any]
