"""Shared pytest fixtures for billfold tests."""

import logging
import tempfile
import os
from datetime import date
import pytest

from click.testing import CliRunner

from billfold.database.factories import create_sqlite_database
from billfold.domain.bank_account import BankAccountService
from billfold.domain.bill import BillService
from billfold.domain.credit_card import CreditCardService
from billfold.domain.entities import AccountType, Direction, FundingMethod, TransactionIntent
from billfold.domain.money import Money
from billfold.domain.summary import SummaryService
from billfold.domain.transaction import TransactionService

USER = "alice"
OTHER_USER = "bob"


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo logging setup done by CLI invocations."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_id():
    return USER


@pytest.fixture
def other_user_id():
    return OTHER_USER


@pytest.fixture
def bank_account_service(temp_db):
    """Create a BankAccountService with a temporary database."""
    return BankAccountService(temp_db)


@pytest.fixture
def credit_card_service(temp_db):
    """Create a CreditCardService with a temporary database."""
    return CreditCardService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def bill_service(temp_db):
    """Create a BillService with a temporary database."""
    return BillService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def sample_account(bank_account_service):
    """Checking account with 1,000.00 owned by the default user."""
    return bank_account_service.create_account(
        user_id=USER,
        name="Checking",
        account_type=AccountType.CHECKING,
        initial_balance=Money(100000),
    )


@pytest.fixture
def sample_card(credit_card_service):
    """Card with a 5,000.00 limit closing on the 10th and due on the 17th."""
    return credit_card_service.create_card(
        user_id=USER,
        name="Visa",
        last_four_digits="1234",
        limit=Money(500000),
        closing_day=10,
        due_day=17,
    )


@pytest.fixture
def make_intent():
    """Build a TransactionIntent with sensible defaults."""

    def _make(**overrides):
        values = dict(
            description="Groceries",
            amount=Money(5000),
            direction=Direction.EXPENSE,
            funding_method=FundingMethod.DEBIT,
            date=date(2026, 1, 17),
        )
        values.update(overrides)
        return TransactionIntent(**values)

    return _make


@pytest.fixture
def card_purchase(make_intent, sample_card):
    """Build a credit card purchase intent on the sample card."""

    def _make(**overrides):
        values = dict(
            funding_method=FundingMethod.CREDIT_CARD,
            credit_card_id=sample_card.id,
        )
        values.update(overrides)
        return make_intent(**values)

    return _make


@pytest.fixture
def cli_runner():
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner, temp_db):
    """Invoke the CLI against the temporary database as the default user."""
    from billfold.cli.main import cli

    def _invoke(*args, input=None):
        return cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "--user", USER, *args],
            input=input,
        )

    return _invoke
