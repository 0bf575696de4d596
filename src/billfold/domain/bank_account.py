"""Bank account domain service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from billfold.domain.entities import AccountType, BankAccount as BankAccountEntity, utcnow
from billfold.domain.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    bank_account_not_found,
    not_deleted,
    not_owner,
)
from billfold.domain.money import Money

if TYPE_CHECKING:
    from billfold.database.base import Database

logger = logging.getLogger(__name__)


class BankAccountService:
    """Service for managing bank accounts."""

    def __init__(self, db: Database):
        """Initialize bank account service.

        Args:
            db: Database instance
        """
        self.db = db

    def _load_owned(self, account_id: str, user_id: str) -> BankAccountEntity:
        account = self.db.get_bank_account(account_id)
        if account is None or account.deleted:
            raise NotFoundError(bank_account_not_found(account_id))
        if account.owner_id != user_id:
            raise ForbiddenError(not_owner("bank account", account_id))
        return account

    def create_account(
        self,
        user_id: str,
        name: str,
        account_type: AccountType,
        initial_balance: Optional[Money] = None,
    ) -> BankAccountEntity:
        """Create a new bank account.

        Args:
            user_id: Owner
            name: Account name
            account_type: CHECKING or SAVINGS
            initial_balance: Opening balance (defaults to zero)

        Returns:
            Created account

        Raises:
            ValidationError: If name is blank
            ConflictError: If the user already has a live account with that name
        """
        if not name or not name.strip():
            raise ValidationError("Account name is required")
        for acc in self.db.list_bank_accounts(user_id):
            if acc.name == name:
                raise ConflictError(f"Bank account with name '{name}' already exists")

        balance = initial_balance if initial_balance is not None else Money.zero()
        account_id = self.db.create_bank_account(
            owner_id=user_id, name=name, account_type=account_type, balance_cents=balance.minor_units
        )
        logger.info("Bank account created", extra={"bank_account_id": account_id, "user_id": user_id})
        return self.db.get_bank_account(account_id)

    def get_account(self, account_id: str, user_id: str) -> BankAccountEntity:
        """Get a live bank account owned by the user.

        Raises:
            NotFoundError: If it does not exist, is deleted or is not owned
        """
        account = self.db.get_bank_account(account_id)
        if account is None or account.deleted or account.owner_id != user_id:
            raise NotFoundError(bank_account_not_found(account_id))
        return account

    def list_accounts(self, user_id: str, include_deleted: bool = False) -> list[BankAccountEntity]:
        """List the user's bank accounts."""
        return self.db.list_bank_accounts(user_id, include_deleted=include_deleted)

    def update_account(
        self,
        account_id: str,
        user_id: str,
        name: Optional[str] = None,
        account_type: Optional[AccountType] = None,
    ) -> BankAccountEntity:
        """Rename an account or change its type."""
        self._load_owned(account_id, user_id)
        if name is not None:
            if not name.strip():
                raise ValidationError("Account name is required")
            for acc in self.db.list_bank_accounts(user_id):
                if acc.id != account_id and acc.name == name:
                    raise ConflictError(f"Bank account with name '{name}' already exists")

        self.db.update_bank_account(account_id, name=name, account_type=account_type)
        return self.db.get_bank_account(account_id)

    def set_balance(self, account_id: str, balance: Money, user_id: str) -> BankAccountEntity:
        """Overwrite the balance, e.g. to reconcile with a bank statement.

        This is the only way to change a balance outside a transaction
        status change.
        """
        account = self._load_owned(account_id, user_id)
        self.db.set_bank_account_balance(account_id, balance.minor_units)
        logger.info(
            "Bank account balance overridden",
            extra={
                "bank_account_id": account_id,
                "previous_cents": account.balance.minor_units,
                "balance_cents": balance.minor_units,
            },
        )
        return self.db.get_bank_account(account_id)

    def delete_account(self, account_id: str, user_id: str) -> int:
        """Soft delete an account together with its transactions.

        The account and every live transaction on it are marked deleted in a
        single database transaction with one shared timestamp, which is how
        ``restore_account`` later finds exactly that cascade.

        Returns:
            Number of transactions deleted with the account

        Raises:
            NotFoundError: If the account is missing or already deleted
            ForbiddenError: If the account belongs to another user
        """
        self._load_owned(account_id, user_id)
        count = self.db.soft_delete_bank_account(account_id, utcnow())
        logger.info("Bank account deleted", extra={"bank_account_id": account_id, "transactions": count})
        return count

    def restore_account(self, account_id: str, user_id: str) -> int:
        """Restore a deleted account and the transactions deleted with it.

        Returns:
            Number of transactions restored

        Raises:
            NotFoundError: If the account does not exist
            ForbiddenError: If the account belongs to another user
            ConflictError: If the account is not deleted
        """
        account = self.db.get_bank_account(account_id)
        if account is None:
            raise NotFoundError(bank_account_not_found(account_id))
        if account.owner_id != user_id:
            raise ForbiddenError(not_owner("bank account", account_id))
        if not account.deleted:
            raise ConflictError(not_deleted("bank account", account_id))

        count = self.db.restore_bank_account(account_id)
        logger.info("Bank account restored", extra={"bank_account_id": account_id, "transactions": count})
        return count
