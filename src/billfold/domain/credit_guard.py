"""Credit limit enforcement against pending card exposure."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from billfold.domain.entities import CreditCard
from billfold.domain.errors import LimitExceededError, ValidationError
from billfold.domain.installments import installment_amount
from billfold.domain.money import Money

if TYPE_CHECKING:
    from billfold.database.base import Database

logger = logging.getLogger(__name__)


class CreditExposureGuard:
    """Rejects card purchases that would push pending exposure past the limit."""

    def __init__(self, db: Database):
        self.db = db

    def exposure(self, card: CreditCard, exclude_transaction_id: Optional[str] = None) -> Money:
        """Sum of the card's live PENDING transactions."""
        return Money(self.db.sum_pending_card_cents(card.id, exclude_transaction_id=exclude_transaction_id))

    def available_credit(self, card: CreditCard) -> Money:
        return card.limit - self.exposure(card)

    def check(
        self,
        card: CreditCard,
        amount: Money,
        installments: int = 1,
        exclude_transaction_id: Optional[str] = None,
    ) -> Money:
        """Verify that a new card expense fits within the limit.

        For an installment purchase only the first installment counts
        against the limit.

        Args:
            card: Card being charged
            amount: Full purchase amount
            installments: Number of installments the purchase is split into
            exclude_transaction_id: Transaction being edited, left out of the
                current exposure

        Returns:
            Exposure the card would reach after the purchase

        Raises:
            ValidationError: If the card is deleted
            LimitExceededError: If the limit would be exceeded
        """
        if card.deleted:
            raise ValidationError(f"Cannot use deleted credit card {card.id}")

        contribution = installment_amount(amount, installments) if installments > 1 else amount
        required = self.exposure(card, exclude_transaction_id=exclude_transaction_id) + contribution

        if required > card.limit:
            logger.warning(
                "Credit limit exceeded",
                extra={
                    "credit_card_id": card.id,
                    "limit_cents": card.limit.minor_units,
                    "required_cents": required.minor_units,
                },
            )
            raise LimitExceededError(limit=card.limit, required=required)
        return required
