from .logger import getLogger

LOGGER = getLogger("auth")


class CredentialCell:
    """
    Holds the access token shared by a fetcher and every resource built on it.

    Only the fetcher's refresh and revoke routines write to the cell; everything
    else reads the latest value through `get`.
    """

    __slots__ = ("_access_token",)

    def __init__(self, access_token: str | None = None):
        self._access_token = access_token or None

    def get(self) -> str | None:
        return self._access_token

    def set(self, access_token: str | None):
        self._access_token = access_token or None
        LOGGER.debug("Access token %s", "updated" if access_token else "cleared")

    def clear(self):
        self.set(None)

    def __bool__(self) -> bool:
        return self._access_token is not None

    def __repr__(self) -> str:
        state = "set" if self else "empty"
        return f"{type(self).__name__}({state})"
