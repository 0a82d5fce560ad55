from datetime import date
from typing import Any, Mapping, Protocol


class InvoiceStorePort(Protocol):
    """Persistence for invoice rows. Each method issues one statement."""

    def insert(
        self, customer_id: str, amount: int, status: str, invoice_date: date
    ) -> str:
        """Insert an invoice and return the identifier the store generated."""
        ...

    def update(
        self, invoice_id: str, customer_id: str, amount: int, status: str
    ) -> int:
        """Replace the mutable columns of an invoice. Returns rows matched."""
        ...

    def delete(self, invoice_id: str) -> int:
        """Hard-delete an invoice. Returns rows removed."""
        ...


class RouteCachePort(Protocol):
    def invalidate(self, path: str) -> None: ...


class AuthProviderPort(Protocol):
    def sign_in(self, provider: str, credentials: Mapping[str, Any]) -> None:
        """Authenticate ``credentials`` or raise an ``AuthError`` subtype."""
        ...
