"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for callers that only catch ValueError.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested transaction, mapping or reconciliation does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as editing a closed period."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class PersistenceError(DomainError):
    """A save failed and uncommitted changes were rolled back."""


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def reconciliation_not_found(reconciliation_id: int) -> str:
    """Return message for missing reconciliation."""
    return f"Reconciliation {reconciliation_id} not found"


def transaction_closed(transaction_id: int) -> str:
    """Return message when a transaction belongs to a closed period."""
    return (
        f"Transaction {transaction_id} belongs to a closed accounting period. "
        "Reopen the reconciliation first."
    )


def reconciliation_cannot_close(period_key: str, reasons: list[str]) -> str:
    """Return message when a reconciliation is not ready to close."""
    return f"Cannot close reconciliation {period_key}: {', '.join(reasons)}"


def reconciliation_delete_blocked(period_key: str) -> str:
    """Return message when a reconciliation is still needed by others."""
    return (
        f"Cannot delete reconciliation {period_key}: it is closed or later "
        "periods depend on its balance."
    )


def save_failed(error: Exception) -> str:
    """Return the generic retry message for a failed save."""
    return f"Unable to save changes, please try again ({error})"
