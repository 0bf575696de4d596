"""Tests for BankAccountService and CreditCardService."""

import pytest

from billfold.domain.entities import AccountType, FundingMethod
from billfold.domain.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from billfold.domain.money import Money

USER = "alice"
OTHER_USER = "bob"


class TestBankAccounts:
    def test_create_and_get(self, bank_account_service, sample_account):
        account = bank_account_service.get_account(sample_account.id, USER)
        assert account.name == "Checking"
        assert account.account_type == AccountType.CHECKING
        assert account.balance == Money(100000)
        assert account.deleted is False

    def test_default_balance_is_zero(self, bank_account_service):
        account = bank_account_service.create_account(USER, "Savings", AccountType.SAVINGS)
        assert account.balance == Money(0)

    def test_duplicate_name_conflicts(self, bank_account_service, sample_account):
        with pytest.raises(ConflictError):
            bank_account_service.create_account(USER, "Checking", AccountType.CHECKING)

    def test_same_name_for_another_user(self, bank_account_service, sample_account):
        account = bank_account_service.create_account(OTHER_USER, "Checking", AccountType.CHECKING)
        assert account.owner_id == OTHER_USER

    def test_blank_name_rejected(self, bank_account_service):
        with pytest.raises(ValidationError):
            bank_account_service.create_account(USER, " ", AccountType.CHECKING)

    def test_other_user_cannot_see_account(self, bank_account_service, sample_account):
        with pytest.raises(NotFoundError):
            bank_account_service.get_account(sample_account.id, OTHER_USER)
        assert bank_account_service.list_accounts(OTHER_USER) == []

    def test_update(self, bank_account_service, sample_account):
        updated = bank_account_service.update_account(
            sample_account.id, USER, name="Main", account_type=AccountType.SAVINGS
        )
        assert updated.name == "Main"
        assert updated.account_type == AccountType.SAVINGS

    def test_update_by_other_user_forbidden(self, bank_account_service, sample_account):
        with pytest.raises(ForbiddenError):
            bank_account_service.update_account(sample_account.id, OTHER_USER, name="Mine")

    def test_set_balance(self, bank_account_service, sample_account):
        updated = bank_account_service.set_balance(sample_account.id, Money(12345), USER)
        assert updated.balance == Money(12345)

    def test_delete_cascades_and_restore_brings_back(
        self, bank_account_service, transaction_service, sample_account, make_intent
    ):
        transaction_service.create_transaction(make_intent(bank_account_id=sample_account.id), USER)
        transaction_service.create_transaction(make_intent(bank_account_id=sample_account.id), USER)

        assert bank_account_service.delete_account(sample_account.id, USER) == 2
        assert bank_account_service.list_accounts(USER) == []
        assert len(bank_account_service.list_accounts(USER, include_deleted=True)) == 1
        assert transaction_service.list_transactions(USER) == []

        assert bank_account_service.restore_account(sample_account.id, USER) == 2
        assert len(transaction_service.list_transactions(USER)) == 2

    def test_restore_keeps_individually_deleted_transactions(
        self, bank_account_service, transaction_service, sample_account, make_intent
    ):
        [kept] = transaction_service.create_transaction(make_intent(bank_account_id=sample_account.id), USER)
        [removed] = transaction_service.create_transaction(
            make_intent(bank_account_id=sample_account.id), USER
        )
        transaction_service.delete_transaction(removed.id, USER)

        assert bank_account_service.delete_account(sample_account.id, USER) == 1
        assert bank_account_service.restore_account(sample_account.id, USER) == 1
        assert [t.id for t in transaction_service.list_transactions(USER)] == [kept.id]

    def test_restore_live_account_conflicts(self, bank_account_service, sample_account):
        with pytest.raises(ConflictError):
            bank_account_service.restore_account(sample_account.id, USER)

    def test_delete_by_other_user_forbidden(self, bank_account_service, sample_account):
        with pytest.raises(ForbiddenError):
            bank_account_service.delete_account(sample_account.id, OTHER_USER)

    def test_delete_unknown_account(self, bank_account_service):
        with pytest.raises(NotFoundError):
            bank_account_service.delete_account("missing", USER)


class TestCreditCards:
    def test_create_and_get(self, credit_card_service, sample_card):
        card = credit_card_service.get_card(sample_card.id, USER)
        assert card.name == "Visa"
        assert card.last_four_digits == "1234"
        assert card.limit == Money(500000)
        assert (card.closing_day, card.due_day) == (10, 17)

    @pytest.mark.parametrize(
        "overrides",
        [
            dict(last_four_digits="123"),
            dict(last_four_digits="12a4"),
            dict(limit=Money(-1)),
            dict(closing_day=0),
            dict(closing_day=32),
            dict(due_day=0),
            dict(name=""),
        ],
    )
    def test_invalid_cards_rejected(self, credit_card_service, overrides):
        values = dict(
            user_id=USER,
            name="Card",
            last_four_digits="0000",
            limit=Money(1000),
            closing_day=1,
            due_day=8,
        )
        values.update(overrides)
        with pytest.raises(ValidationError):
            credit_card_service.create_card(**values)

    def test_update(self, credit_card_service, sample_card):
        updated = credit_card_service.update_card(
            sample_card.id, USER, limit=Money(800000), closing_day=5
        )
        assert updated.limit == Money(800000)
        assert updated.closing_day == 5
        assert updated.due_day == 17

    def test_update_validates(self, credit_card_service, sample_card):
        with pytest.raises(ValidationError):
            credit_card_service.update_card(sample_card.id, USER, due_day=40)

    def test_other_user_cannot_modify(self, credit_card_service, sample_card):
        with pytest.raises(NotFoundError):
            credit_card_service.get_card(sample_card.id, OTHER_USER)
        with pytest.raises(ForbiddenError):
            credit_card_service.update_card(sample_card.id, OTHER_USER, name="Mine")

    def test_delete_cascades_and_restore(
        self, credit_card_service, transaction_service, card_purchase, sample_card
    ):
        transaction_service.create_transaction(card_purchase(installments=3), USER)

        assert credit_card_service.delete_card(sample_card.id, USER) == 3
        assert transaction_service.list_transactions(USER, funding_method=FundingMethod.CREDIT_CARD) == []
        assert credit_card_service.list_cards(USER) == []

        assert credit_card_service.restore_card(sample_card.id, USER) == 3
        assert len(transaction_service.list_transactions(USER)) == 3

    def test_restore_live_card_conflicts(self, credit_card_service, sample_card):
        with pytest.raises(ConflictError):
            credit_card_service.restore_card(sample_card.id, USER)

    def test_restore_by_other_user_forbidden(self, credit_card_service, sample_card):
        credit_card_service.delete_card(sample_card.id, USER)
        with pytest.raises(ForbiddenError):
            credit_card_service.restore_card(sample_card.id, OTHER_USER)
