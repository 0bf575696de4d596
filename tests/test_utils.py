"""Tests for parsing and resolution utilities."""

from datetime import date, timedelta

import pytest

from billfold.domain.money import Money
from billfold.utils.account_resolver import resolve_bank_account, resolve_credit_card
from billfold.utils.amount_parser import parse_amount
from billfold.utils.date_parser import get_date_range, parse_date, parse_reference_month

USER = "alice"


class TestParseAmount:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("123.45", Money(12345)),
            ("$1,234.56", Money(123456)),
            ("R$ 10", Money(1000)),
            (" 0.015 ", Money(2)),
            ("-5", Money(-500)),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_amount(text)


class TestParseDate:
    def test_absolute(self):
        assert parse_date("2026-01-17") == date(2026, 1, 17)
        assert parse_date("January 17, 2026") == date(2026, 1, 17)

    def test_relative(self):
        today = date.today()
        assert parse_date("today") == today
        assert parse_date("Yesterday") == today - timedelta(days=1)
        assert parse_date("this month") == today.replace(day=1)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_date("not a date")

    def test_reference_month(self):
        assert parse_reference_month("2026-02") == date(2026, 2, 1)
        assert parse_reference_month("2026-2") == date(2026, 2, 1)
        assert parse_reference_month("2026-02-20") == date(2026, 2, 1)

    def test_reference_month_invalid(self):
        with pytest.raises(ValueError):
            parse_reference_month("2026-13")

    def test_date_range(self):
        start, end = get_date_range("last-month")
        assert start.day == 1
        assert end == date.today().replace(day=1) - timedelta(days=1)
        with pytest.raises(ValueError):
            get_date_range("next-decade")


class TestResolvers:
    def test_bank_account_by_name_or_id(self, bank_account_service, sample_account):
        assert resolve_bank_account(bank_account_service, USER, "Checking") == sample_account.id
        assert resolve_bank_account(bank_account_service, USER, sample_account.id) == sample_account.id
        with pytest.raises(ValueError):
            resolve_bank_account(bank_account_service, USER, "Nope")
        with pytest.raises(ValueError):
            resolve_bank_account(bank_account_service, "bob", "Checking")

    def test_credit_card_by_name_digits_or_id(self, credit_card_service, sample_card):
        assert resolve_credit_card(credit_card_service, USER, "Visa") == sample_card.id
        assert resolve_credit_card(credit_card_service, USER, "1234") == sample_card.id
        assert resolve_credit_card(credit_card_service, USER, sample_card.id) == sample_card.id
        with pytest.raises(ValueError):
            resolve_credit_card(credit_card_service, USER, "Amex")
