"""Error taxonomy.

Every failure that should abort a run derives from `SpecSyncError`; the CLI
turns them into exit code 1.
"""

from __future__ import annotations


class SpecSyncError(Exception):
    """Base class for all run-aborting failures."""


class ConfigurationError(SpecSyncError):
    """Required environment/CLI input is missing. Raised before any network call."""


class OpenAPIDocumentError(SpecSyncError):
    """The OpenAPI input file is too large or not valid JSON."""


class ResolutionError(SpecSyncError):
    """A spec/collection identifier could not be resolved."""


class CollectionGenerationError(SpecSyncError):
    """Collection generation was rejected, failed, or produced no uid."""


class RemoteCallError(SpecSyncError):
    """Postman answered with a status other than 2xx/202.

    The full response body is kept for diagnosis.
    """

    def __init__(
        self,
        *,
        method: str,
        path: str,
        status_code: int,
        reason: str = "",
        body: str = "",
    ) -> None:
        self.method = method
        self.path = path
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(
            f"Postman API {method} {path} failed: {status_code} {reason}".rstrip() + f"\n{body}"
        )


class RemoteTransportError(SpecSyncError):
    """A Postman call produced no usable response (network failure or unparseable body)."""

    def __init__(self, *, method: str, path: str, detail: str) -> None:
        self.method = method
        self.path = path
        self.detail = detail
        super().__init__(f"Postman API {method} {path} failed: {detail}")
