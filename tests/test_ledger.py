import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from ledger import AccountLedger
from models import ProcessingResult


class TestAccountLedger:
    def setup_method(self):
        self.ledger = AccountLedger()

    def test_get_or_create_is_lazy(self):
        assert self.ledger.get(1) is None

        account = self.ledger.get_or_create(1)
        assert account.available == Decimal("0")
        assert account.locked is False
        assert self.ledger.get_or_create(1) is account
        assert len(self.ledger) == 1

    def test_deposit(self):
        result = self.ledger.apply_deposit(1, Decimal("10"))

        assert result == ProcessingResult.SUCCESS
        account = self.ledger.get(1)
        assert account.available == Decimal("10")
        assert account.total == Decimal("10")

    def test_withdrawal_insufficient_funds(self):
        self.ledger.apply_deposit(1, Decimal("10"))

        result = self.ledger.apply_withdrawal(1, Decimal("10.0001"))

        assert result == ProcessingResult.INSUFFICIENT_FUNDS
        assert self.ledger.get(1).available == Decimal("10")

    def test_withdrawal_of_entire_balance(self):
        self.ledger.apply_deposit(1, Decimal("10"))

        assert self.ledger.apply_withdrawal(1, Decimal("10")) == ProcessingResult.SUCCESS
        assert self.ledger.get(1).total == Decimal("0")

    def test_hold_keeps_total(self):
        self.ledger.apply_deposit(1, Decimal("10"))

        self.ledger.apply_hold(1, Decimal("4"))

        account = self.ledger.get(1)
        assert account.available == Decimal("6")
        assert account.held == Decimal("4")
        assert account.total == Decimal("10")

    def test_release_restores_available(self):
        self.ledger.apply_deposit(1, Decimal("10"))
        self.ledger.apply_hold(1, Decimal("4"))

        self.ledger.apply_release(1, Decimal("4"))

        account = self.ledger.get(1)
        assert account.available == Decimal("10")
        assert account.held == Decimal("0")

    def test_reversal_drops_held_and_total(self):
        self.ledger.apply_deposit(1, Decimal("10"))
        self.ledger.apply_hold(1, Decimal("4"))

        self.ledger.apply_reversal(1, Decimal("4"))

        account = self.ledger.get(1)
        assert account.available == Decimal("6")
        assert account.held == Decimal("0")
        assert account.total == Decimal("6")

    def test_locked_account_ignores_mutations(self):
        self.ledger.apply_deposit(1, Decimal("10"))
        self.ledger.apply_hold(1, Decimal("2"))
        assert self.ledger.lock(1) == ProcessingResult.SUCCESS
        assert self.ledger.is_locked(1) is True

        operations = [
            self.ledger.apply_deposit,
            self.ledger.apply_withdrawal,
            self.ledger.apply_hold,
            self.ledger.apply_release,
            self.ledger.apply_reversal,
        ]
        for operation in operations:
            assert operation(1, Decimal("1")) == ProcessingResult.ACCOUNT_LOCKED
        assert self.ledger.lock(1) == ProcessingResult.ACCOUNT_LOCKED

        account = self.ledger.get(1)
        assert account.available == Decimal("8")
        assert account.held == Decimal("2")
        assert account.locked is True

    def test_accounts_returns_copy(self):
        self.ledger.apply_deposit(1, Decimal("1"))
        self.ledger.apply_deposit(2, Decimal("2"))

        accounts = self.ledger.accounts()
        accounts.pop(1)

        assert set(self.ledger.accounts()) == {1, 2}
