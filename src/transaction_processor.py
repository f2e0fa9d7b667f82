import logging

from models import Transaction, TransactionType, ClientAccount, ProcessingResult
from ledger import AccountLedger
from record_store import TransactionRecordStore

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions, in the order given, to the ledger and record store.
    Returns ProcessingResult; anything other than SUCCESS left state untouched.
    """

    def __init__(self, ledger: AccountLedger, records: TransactionRecordStore):
        self._ledger = ledger
        self._records = records

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: Applied
            INSUFFICIENT_FUNDS: Withdrawal or dispute larger than available funds
            RECORD_NOT_FOUND: Referenced transaction unknown or owned by another client
            INVALID_STATE_TRANSITION: Duplicate id, or dispute state does not allow it
            ACCOUNT_LOCKED: Account was frozen by an earlier chargeback
            MALFORMED_INPUT: Deposit or withdrawal without a positive amount
        """
        account = self._ledger.get_or_create(transaction.client_id)

        if self._ledger.is_locked(account.client_id):
            logger.warning(f"{transaction}: account {account.client_id} is locked, ignoring")
            return ProcessingResult.ACCOUNT_LOCKED

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)
            case _:
                return ProcessingResult.MALFORMED_INPUT

    def _check_new_movement(self, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None or transaction.amount <= 0:
            logger.warning(f"{transaction}: invalid amount {transaction.amount}")
            return ProcessingResult.MALFORMED_INPUT

        if transaction.transaction_id in self._records:
            logger.warning(f"{transaction}: transaction id already used, ignoring")
            return ProcessingResult.INVALID_STATE_TRANSITION

        return ProcessingResult.SUCCESS

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        result = self._check_new_movement(transaction)
        if result != ProcessingResult.SUCCESS:
            return result

        result = self._ledger.apply_deposit(account.client_id, transaction.amount)
        if result == ProcessingResult.SUCCESS:
            self._records.put(transaction.transaction_id, account.client_id, transaction.amount)
        return result

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        result = self._check_new_movement(transaction)
        if result != ProcessingResult.SUCCESS:
            return result

        result = self._ledger.apply_withdrawal(account.client_id, transaction.amount)
        if result == ProcessingResult.SUCCESS:
            self._records.put(transaction.transaction_id, account.client_id, -transaction.amount)
        elif result == ProcessingResult.INSUFFICIENT_FUNDS:
            logger.warning(f"{transaction}: insufficient funds (available {account.available})")
        return result

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        record = self._records.get_for_client(transaction.transaction_id, account.client_id)

        if record is None:
            logger.info(f"{transaction}: no disputable transaction for this client")
            return ProcessingResult.RECORD_NOT_FOUND

        if record.is_disputed:
            logger.info(f"{transaction}: transaction already disputed")
            return ProcessingResult.INVALID_STATE_TRANSITION

        amount = abs(record.amount)
        if amount > account.available:
            logger.warning(f"{transaction}: cannot hold {amount}, only {account.available} available")
            return ProcessingResult.INSUFFICIENT_FUNDS

        result = self._ledger.apply_hold(account.client_id, amount)
        if result == ProcessingResult.SUCCESS:
            self._records.mark_disputed(transaction.transaction_id)
        return result

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        record = self._records.get_for_client(transaction.transaction_id, account.client_id)

        if record is None:
            logger.info(f"{transaction}: no disputable transaction for this client")
            return ProcessingResult.RECORD_NOT_FOUND

        if not record.is_disputed:
            logger.info(f"{transaction}: transaction is not under dispute")
            return ProcessingResult.INVALID_STATE_TRANSITION

        result = self._ledger.apply_release(account.client_id, abs(record.amount))
        if result == ProcessingResult.SUCCESS:
            self._records.clear_disputed(transaction.transaction_id)
        return result

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        record = self._records.get_for_client(transaction.transaction_id, account.client_id)

        if record is None:
            logger.info(f"{transaction}: no disputable transaction for this client")
            return ProcessingResult.RECORD_NOT_FOUND

        if not record.is_disputed:
            logger.info(f"{transaction}: transaction is not under dispute")
            return ProcessingResult.INVALID_STATE_TRANSITION

        result = self._ledger.apply_reversal(account.client_id, abs(record.amount))
        if result != ProcessingResult.SUCCESS:
            return result

        # Record stays disputed; its owner is locked so it is never touched again.
        logger.info(f"{transaction}: charged back, locking account {account.client_id}")
        return self._ledger.lock(account.client_id)
