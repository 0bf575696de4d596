"""Credit card domain service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from billfold.domain.entities import CreditCard as CreditCardEntity, utcnow
from billfold.domain.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    credit_card_not_found,
    not_deleted,
    not_owner,
)
from billfold.domain.money import Money

if TYPE_CHECKING:
    from billfold.database.base import Database

logger = logging.getLogger(__name__)


def _validate_card_fields(
    last_four_digits: Optional[str],
    limit: Optional[Money],
    closing_day: Optional[int],
    due_day: Optional[int],
) -> None:
    if last_four_digits is not None and (len(last_four_digits) != 4 or not last_four_digits.isdigit()):
        raise ValidationError("last_four_digits must be exactly 4 digits")
    if limit is not None and limit.is_negative():
        raise ValidationError("Credit limit cannot be negative")
    for label, day in (("closing_day", closing_day), ("due_day", due_day)):
        if day is not None and not 1 <= day <= 31:
            raise ValidationError(f"{label} must be between 1 and 31")


class CreditCardService:
    """Service for managing credit cards."""

    def __init__(self, db: Database):
        """Initialize credit card service.

        Args:
            db: Database instance
        """
        self.db = db

    def _load_owned(self, card_id: str, user_id: str) -> CreditCardEntity:
        card = self.db.get_credit_card(card_id)
        if card is None or card.deleted:
            raise NotFoundError(credit_card_not_found(card_id))
        if card.owner_id != user_id:
            raise ForbiddenError(not_owner("credit card", card_id))
        return card

    def create_card(
        self,
        user_id: str,
        name: str,
        last_four_digits: str,
        limit: Money,
        closing_day: int,
        due_day: int,
    ) -> CreditCardEntity:
        """Create a credit card.

        Args:
            user_id: Owner
            name: Card name
            last_four_digits: Last four digits of the card number
            limit: Credit limit
            closing_day: Day of month the statement closes (1-31)
            due_day: Day of month the statement is due (1-31)

        Returns:
            Created card

        Raises:
            ValidationError: If any field is out of range
        """
        if not name or not name.strip():
            raise ValidationError("Card name is required")
        _validate_card_fields(last_four_digits, limit, closing_day, due_day)

        card_id = self.db.create_credit_card(
            owner_id=user_id,
            name=name,
            last_four_digits=last_four_digits,
            limit_cents=limit.minor_units,
            closing_day=closing_day,
            due_day=due_day,
        )
        logger.info("Credit card created", extra={"credit_card_id": card_id, "user_id": user_id})
        return self.db.get_credit_card(card_id)

    def get_card(self, card_id: str, user_id: str) -> CreditCardEntity:
        """Get a live card owned by the user.

        Raises:
            NotFoundError: If it does not exist, is deleted or is not owned
        """
        card = self.db.get_credit_card(card_id)
        if card is None or card.deleted or card.owner_id != user_id:
            raise NotFoundError(credit_card_not_found(card_id))
        return card

    def list_cards(self, user_id: str, include_deleted: bool = False) -> list[CreditCardEntity]:
        """List the user's credit cards."""
        return self.db.list_credit_cards(user_id, include_deleted=include_deleted)

    def update_card(
        self,
        card_id: str,
        user_id: str,
        name: Optional[str] = None,
        last_four_digits: Optional[str] = None,
        limit: Optional[Money] = None,
        closing_day: Optional[int] = None,
        due_day: Optional[int] = None,
    ) -> CreditCardEntity:
        """Update card fields. Existing bills keep the dates they were generated with."""
        self._load_owned(card_id, user_id)
        if name is not None and not name.strip():
            raise ValidationError("Card name is required")
        _validate_card_fields(last_four_digits, limit, closing_day, due_day)

        self.db.update_credit_card(
            card_id,
            name=name,
            last_four_digits=last_four_digits,
            limit_cents=limit.minor_units if limit is not None else None,
            closing_day=closing_day,
            due_day=due_day,
        )
        return self.db.get_credit_card(card_id)

    def delete_card(self, card_id: str, user_id: str) -> int:
        """Soft delete a card together with its transactions.

        Returns:
            Number of transactions deleted with the card

        Raises:
            NotFoundError: If the card is missing or already deleted
            ForbiddenError: If the card belongs to another user
        """
        self._load_owned(card_id, user_id)
        count = self.db.soft_delete_credit_card(card_id, utcnow())
        logger.info("Credit card deleted", extra={"credit_card_id": card_id, "transactions": count})
        return count

    def restore_card(self, card_id: str, user_id: str) -> int:
        """Restore a deleted card and the transactions deleted with it.

        Returns:
            Number of transactions restored

        Raises:
            NotFoundError: If the card does not exist
            ForbiddenError: If the card belongs to another user
            ConflictError: If the card is not deleted
        """
        card = self.db.get_credit_card(card_id)
        if card is None:
            raise NotFoundError(credit_card_not_found(card_id))
        if card.owner_id != user_id:
            raise ForbiddenError(not_owner("credit card", card_id))
        if not card.deleted:
            raise ConflictError(not_deleted("credit card", card_id))

        count = self.db.restore_credit_card(card_id)
        logger.info("Credit card restored", extra={"credit_card_id": card_id, "transactions": count})
        return count
