"""Tests for TransactionService."""

from datetime import date

import pytest

from billfold.domain.entities import (
    Direction,
    FundingMethod,
    RecurrenceRule,
    TransactionStatus,
)
from billfold.domain.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from billfold.domain.money import Money

USER = "alice"
OTHER_USER = "bob"


def _balance(temp_db, account):
    return temp_db.get_bank_account(account.id).balance


class TestCreateTransaction:
    def test_debit_expense_completes_and_moves_balance(
        self, transaction_service, temp_db, sample_account, make_intent
    ):
        [txn] = transaction_service.create_transaction(
            make_intent(bank_account_id=sample_account.id), USER
        )

        assert txn.status == TransactionStatus.COMPLETED
        assert _balance(temp_db, sample_account) == Money(95000)

    def test_transfer_income_raises_balance(self, transaction_service, temp_db, sample_account, make_intent):
        transaction_service.create_transaction(
            make_intent(
                description="Salary",
                amount=Money(300000),
                direction=Direction.INCOME,
                funding_method=FundingMethod.TRANSFER,
                bank_account_id=sample_account.id,
            ),
            USER,
        )
        assert _balance(temp_db, sample_account) == Money(400000)

    def test_cash_completes_without_account(self, transaction_service, make_intent):
        [txn] = transaction_service.create_transaction(
            make_intent(funding_method=FundingMethod.CASH), USER
        )
        assert txn.status == TransactionStatus.COMPLETED
        assert txn.bank_account_id is None

    def test_card_purchase_starts_pending(self, transaction_service, card_purchase):
        [txn] = transaction_service.create_transaction(card_purchase(), USER)
        assert txn.status == TransactionStatus.PENDING
        assert txn.bill_id is None

    def test_installment_purchase_creates_series(self, transaction_service, temp_db, card_purchase):
        created = transaction_service.create_transaction(
            card_purchase(description="TV", amount=Money(100000), installments=10), USER
        )

        assert len(created) == 10
        series = temp_db.list_installment_series(created[0].id)
        assert [t.installment_number for t in series] == list(range(1, 11))
        assert all(t.amount == Money(10000) for t in series)
        assert series[-1].date == date(2026, 10, 17)

    def test_recurring_flags_are_stored(self, transaction_service, card_purchase):
        [txn] = transaction_service.create_transaction(
            card_purchase(
                description="Streaming",
                is_recurring=True,
                recurrence_rule=RecurrenceRule.MONTHLY,
                recurrence_end_date=date(2026, 12, 31),
            ),
            USER,
        )
        stored = transaction_service.get_transaction(txn.id, USER)
        assert stored.is_recurring
        assert stored.recurrence_rule == RecurrenceRule.MONTHLY
        assert stored.recurrence_end_date == date(2026, 12, 31)

    @pytest.mark.parametrize(
        "overrides",
        [
            dict(funding_method=FundingMethod.CREDIT_CARD),
            dict(funding_method=FundingMethod.DEBIT),
            dict(funding_method=FundingMethod.TRANSFER),
            dict(funding_method=FundingMethod.CASH, credit_card_id="some-card"),
            dict(funding_method=FundingMethod.CASH, installments=3),
            dict(funding_method=FundingMethod.CASH, amount=Money(0)),
            dict(funding_method=FundingMethod.CASH, amount=Money(-100)),
            dict(funding_method=FundingMethod.CASH, description="  "),
            dict(funding_method=FundingMethod.CASH, is_recurring=True),
        ],
    )
    def test_incoherent_intents_rejected(self, transaction_service, make_intent, overrides):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(make_intent(**overrides), USER)

    def test_card_transaction_cannot_reference_bank_account(
        self, transaction_service, card_purchase, sample_account
    ):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(
                card_purchase(bank_account_id=sample_account.id), USER
            )

    @pytest.mark.parametrize("installments", [0, 101])
    def test_installment_count_out_of_range(self, transaction_service, card_purchase, installments):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(card_purchase(installments=installments), USER)

    def test_other_users_account_is_not_found(self, transaction_service, sample_account, make_intent):
        with pytest.raises(NotFoundError):
            transaction_service.create_transaction(
                make_intent(bank_account_id=sample_account.id), OTHER_USER
            )

    def test_deleted_card_is_not_found(
        self, transaction_service, credit_card_service, sample_card, card_purchase
    ):
        credit_card_service.delete_card(sample_card.id, USER)
        with pytest.raises(NotFoundError):
            transaction_service.create_transaction(card_purchase(), USER)


class TestUpdateStatus:
    def test_balance_round_trip(self, transaction_service, temp_db, sample_account, make_intent):
        [txn] = transaction_service.create_transaction(
            make_intent(amount=Money(20000), bank_account_id=sample_account.id), USER
        )
        assert _balance(temp_db, sample_account) == Money(80000)

        transaction_service.update_status(txn.id, TransactionStatus.PENDING, USER)
        assert _balance(temp_db, sample_account) == Money(100000)

        transaction_service.update_status(txn.id, TransactionStatus.COMPLETED, USER)
        assert _balance(temp_db, sample_account) == Money(80000)

        transaction_service.update_status(txn.id, TransactionStatus.CANCELLED, USER)
        assert _balance(temp_db, sample_account) == Money(100000)

    def test_same_status_is_a_no_op(self, transaction_service, temp_db, sample_account, make_intent):
        [txn] = transaction_service.create_transaction(
            make_intent(bank_account_id=sample_account.id), USER
        )
        transaction_service.update_status(txn.id, TransactionStatus.COMPLETED, USER)
        transaction_service.update_status(txn.id, TransactionStatus.COMPLETED, USER)
        assert _balance(temp_db, sample_account) == Money(95000)

    def test_stale_status_write_conflicts(self, transaction_service, temp_db, sample_account, make_intent):
        [txn] = transaction_service.create_transaction(
            make_intent(bank_account_id=sample_account.id), USER
        )
        moved = temp_db.change_transaction_status(
            txn.id, TransactionStatus.PENDING, TransactionStatus.CANCELLED, []
        )
        assert moved is False
        assert temp_db.get_transaction(txn.id).status == TransactionStatus.COMPLETED

    def test_cancelling_card_purchase_releases_exposure(
        self, transaction_service, card_purchase, sample_card
    ):
        [txn] = transaction_service.create_transaction(card_purchase(amount=Money(400000)), USER)
        transaction_service.update_status(txn.id, TransactionStatus.CANCELLED, USER)
        assert transaction_service.guard.exposure(sample_card) == Money(0)

    def test_other_user_is_forbidden(self, transaction_service, make_intent):
        [txn] = transaction_service.create_transaction(
            make_intent(funding_method=FundingMethod.CASH), USER
        )
        with pytest.raises(ForbiddenError):
            transaction_service.update_status(txn.id, TransactionStatus.CANCELLED, OTHER_USER)

    def test_unknown_transaction(self, transaction_service):
        with pytest.raises(NotFoundError):
            transaction_service.update_status("missing", TransactionStatus.CANCELLED, USER)


class TestUpdateTransaction:
    def test_amount_edit_reapplies_completed_balance(
        self, transaction_service, temp_db, sample_account, make_intent
    ):
        [txn] = transaction_service.create_transaction(
            make_intent(bank_account_id=sample_account.id), USER
        )
        updated = transaction_service.update_transaction(txn.id, USER, amount=Money(7000))

        assert updated.amount == Money(7000)
        assert _balance(temp_db, sample_account) == Money(93000)

    def test_direction_edit_flips_balance_effect(
        self, transaction_service, temp_db, sample_account, make_intent
    ):
        [txn] = transaction_service.create_transaction(
            make_intent(bank_account_id=sample_account.id), USER
        )
        transaction_service.update_transaction(txn.id, USER, direction=Direction.INCOME)
        assert _balance(temp_db, sample_account) == Money(105000)

    def test_description_and_category(self, transaction_service, make_intent):
        [txn] = transaction_service.create_transaction(
            make_intent(funding_method=FundingMethod.CASH, category_id="food"), USER
        )
        updated = transaction_service.update_transaction(txn.id, USER, description="Market")
        assert updated.description == "Market"
        assert updated.category_id == "food"

        cleared = transaction_service.update_transaction(txn.id, USER, clear_category=True)
        assert cleared.category_id is None

    def test_category_and_clear_are_exclusive(self, transaction_service, make_intent):
        [txn] = transaction_service.create_transaction(
            make_intent(funding_method=FundingMethod.CASH), USER
        )
        with pytest.raises(ValidationError):
            transaction_service.update_transaction(txn.id, USER, category_id="x", clear_category=True)

    def test_billed_transaction_amount_is_fixed(
        self, transaction_service, bill_service, card_purchase, sample_card
    ):
        [txn] = transaction_service.create_transaction(card_purchase(), USER)
        bill_service.generate_bill(sample_card.id, date(2026, 2, 1), USER)

        with pytest.raises(ConflictError):
            transaction_service.update_transaction(txn.id, USER, amount=Money(1))
        with pytest.raises(ConflictError):
            transaction_service.update_transaction(txn.id, USER, date=date(2026, 3, 1))
        assert transaction_service.update_transaction(txn.id, USER, description="ok").description == "ok"


class TestDeleteRestore:
    def test_soft_delete_hides_and_restore_returns(self, transaction_service, make_intent):
        [txn] = transaction_service.create_transaction(
            make_intent(funding_method=FundingMethod.CASH), USER
        )

        assert transaction_service.delete_transaction(txn.id, USER) == 1
        with pytest.raises(NotFoundError):
            transaction_service.get_transaction(txn.id, USER)
        assert transaction_service.list_transactions(USER) == []
        assert len(transaction_service.list_transactions(USER, include_deleted=True)) == 1

        assert transaction_service.restore_transaction(txn.id, USER) == 1
        assert transaction_service.get_transaction(txn.id, USER).deleted is False

    def test_delete_does_not_touch_balance(self, transaction_service, temp_db, sample_account, make_intent):
        [txn] = transaction_service.create_transaction(
            make_intent(bank_account_id=sample_account.id), USER
        )
        transaction_service.delete_transaction(txn.id, USER)
        assert _balance(temp_db, sample_account) == Money(95000)

    def test_deleting_series_parent_deletes_series(self, transaction_service, card_purchase):
        created = transaction_service.create_transaction(card_purchase(installments=4), USER)

        assert transaction_service.delete_transaction(created[0].id, USER) == 4
        assert transaction_service.list_transactions(USER) == []
        assert transaction_service.restore_transaction(created[0].id, USER) == 4

    def test_deleting_later_installment_deletes_only_it(self, transaction_service, card_purchase):
        created = transaction_service.create_transaction(card_purchase(installments=4), USER)
        assert transaction_service.delete_transaction(created[2].id, USER) == 1
        assert len(transaction_service.list_transactions(USER)) == 3

    def test_restore_live_transaction_conflicts(self, transaction_service, make_intent):
        [txn] = transaction_service.create_transaction(
            make_intent(funding_method=FundingMethod.CASH), USER
        )
        with pytest.raises(ConflictError):
            transaction_service.restore_transaction(txn.id, USER)

    def test_delete_twice_is_not_found(self, transaction_service, make_intent):
        [txn] = transaction_service.create_transaction(
            make_intent(funding_method=FundingMethod.CASH), USER
        )
        transaction_service.delete_transaction(txn.id, USER)
        with pytest.raises(NotFoundError):
            transaction_service.delete_transaction(txn.id, USER)

    def test_other_user_cannot_delete(self, transaction_service, make_intent):
        [txn] = transaction_service.create_transaction(
            make_intent(funding_method=FundingMethod.CASH), USER
        )
        with pytest.raises(ForbiddenError):
            transaction_service.delete_transaction(txn.id, OTHER_USER)


class TestListTransactions:
    def test_filters(self, transaction_service, sample_account, make_intent, card_purchase):
        transaction_service.create_transaction(make_intent(bank_account_id=sample_account.id), USER)
        transaction_service.create_transaction(card_purchase(installments=2), USER)
        transaction_service.create_transaction(
            make_intent(funding_method=FundingMethod.CASH, direction=Direction.INCOME, date=date(2026, 3, 1)),
            USER,
        )

        assert len(transaction_service.list_transactions(USER)) == 4
        assert len(transaction_service.list_transactions(USER, funding_method=FundingMethod.CREDIT_CARD)) == 2
        assert len(transaction_service.list_transactions(USER, is_installment=True)) == 2
        assert len(transaction_service.list_transactions(USER, direction=Direction.INCOME)) == 1
        assert len(transaction_service.list_transactions(USER, status=TransactionStatus.PENDING)) == 2
        assert len(transaction_service.list_transactions(USER, bank_account_id=sample_account.id)) == 1
        assert len(
            transaction_service.list_transactions(USER, start_date=date(2026, 2, 1), end_date=date(2026, 2, 28))
        ) == 1
        assert transaction_service.list_transactions(OTHER_USER) == []
