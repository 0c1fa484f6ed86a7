from __future__ import annotations

from botocore.exceptions import ClientError


class AwsDashError(Exception):
    """Base class for errors raised by the search/detail core."""


class UnsupportedResourceKind(AwsDashError, ValueError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"unsupported resource kind: {kind!r}")
        self.kind = kind


class ResourceNotFound(AwsDashError, LookupError):
    """Raised when a detail lookup yields nothing.

    A provider error and a genuinely absent resource both end up here.
    """

    def __init__(self, kind: str, id_: str) -> None:
        super().__init__(f"{kind} resource not found: {id_}")
        self.kind = kind
        self.id = id_


class InvalidCredentials(AwsDashError, ValueError):
    """Credentials are missing, blank or malformed (sign-in payload or stored cookie blob)."""


def error_code(e: BaseException) -> str:
    if isinstance(e, ClientError):
        return e.response.get("Error", {}).get("Code") or str(e)
    return str(e) or e.__class__.__name__
