"""Domain exceptions raised by services and the document store.

The HTTP layer maps each of these onto a status code in
``src.automarket.api.http.error_handlers``.
"""


class MarketplaceError(Exception):
    """Base class for errors the API reports to clients."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(MarketplaceError):
    """The requested user or listing does not exist."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} not found with id: {identifier}")
        self.kind = kind
        self.identifier = identifier


class PermissionDeniedError(MarketplaceError):
    """The caller is authenticated but may not perform the operation."""


class BusinessRuleError(MarketplaceError):
    """A request that is well-formed but violates a marketplace rule."""


class StoreError(MarketplaceError):
    """The document store failed to complete an operation."""
