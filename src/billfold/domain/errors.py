"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidAmountError(ValidationError):
    """Monetary value that cannot be represented in whole minor units."""


class NotFoundError(DomainError):
    """Requested entity does not exist or is not visible to the caller."""


class ForbiddenError(DomainError):
    """Entity exists but belongs to another user."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or invalid state."""


class LimitExceededError(DomainError):
    """Credit card purchase would exceed the card limit."""

    def __init__(self, limit, required):
        self.limit = limit
        self.required = required
        super().__init__(credit_limit_exceeded(limit, required))


def bank_account_not_found(account_id: str) -> str:
    """Return message for missing bank account."""
    return f"Bank account {account_id} not found"


def credit_card_not_found(card_id: str) -> str:
    """Return message for missing credit card."""
    return f"Credit card {card_id} not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def bill_not_found(bill_id: str) -> str:
    """Return message for missing bill."""
    return f"Bill {bill_id} not found"


def not_owner(entity: str, entity_id: str) -> str:
    """Return message when the caller does not own an entity."""
    return f"Cannot modify {entity} {entity_id} owned by another user"


def not_deleted(entity: str, entity_id: str) -> str:
    """Return message when restoring an entity that is not deleted."""
    return f"{entity.capitalize()} {entity_id} is not deleted"


def duplicate_bill(card_id: str, reference_month) -> str:
    """Return message for a second bill in the same cycle."""
    return f"Bill already exists for credit card {card_id} in {reference_month:%Y-%m}"


def credit_limit_exceeded(limit, required) -> str:
    """Return message for a rejected credit card purchase."""
    return f"Credit card limit exceeded. Limit: {limit.format()}, Required: {required.format()}"
