from decimal import Decimal
from typing import Dict, Optional

from models import ClientAccount, ProcessingResult


class AccountLedger:
    """
    Holds one ClientAccount per client.
    Every mutation goes through available/held only, so total stays
    available + held. Locked accounts ignore all mutations.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def get_or_create(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def is_locked(self, client_id: int) -> bool:
        account = self._accounts.get(client_id)
        return account is not None and account.locked

    def apply_deposit(self, client_id: int, amount: Decimal) -> ProcessingResult:
        account = self.get_or_create(client_id)
        if account.locked:
            return ProcessingResult.ACCOUNT_LOCKED
        account.available += amount
        return ProcessingResult.SUCCESS

    def apply_withdrawal(self, client_id: int, amount: Decimal) -> ProcessingResult:
        account = self.get_or_create(client_id)
        if account.locked:
            return ProcessingResult.ACCOUNT_LOCKED
        if amount > account.available:
            return ProcessingResult.INSUFFICIENT_FUNDS
        account.available -= amount
        return ProcessingResult.SUCCESS

    def apply_hold(self, client_id: int, amount: Decimal) -> ProcessingResult:
        """Move funds from available to held. Total is unchanged."""
        account = self.get_or_create(client_id)
        if account.locked:
            return ProcessingResult.ACCOUNT_LOCKED
        account.available -= amount
        account.held += amount
        return ProcessingResult.SUCCESS

    def apply_release(self, client_id: int, amount: Decimal) -> ProcessingResult:
        """Move held funds back to available."""
        account = self.get_or_create(client_id)
        if account.locked:
            return ProcessingResult.ACCOUNT_LOCKED
        account.held -= amount
        account.available += amount
        return ProcessingResult.SUCCESS

    def apply_reversal(self, client_id: int, amount: Decimal) -> ProcessingResult:
        """Drop held funds entirely; available was already reduced by the hold."""
        account = self.get_or_create(client_id)
        if account.locked:
            return ProcessingResult.ACCOUNT_LOCKED
        account.held -= amount
        return ProcessingResult.SUCCESS

    def lock(self, client_id: int) -> ProcessingResult:
        account = self.get_or_create(client_id)
        if account.locked:
            return ProcessingResult.ACCOUNT_LOCKED
        account.locked = True
        return ProcessingResult.SUCCESS

    def accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)
